"""
Configuration Defaults - Built-in provider records and default settings.

Every built-in site is described here as plain data; the generic pipeline
reads these records, so a layout change on a site is a configuration edit.
"""

import json
from pathlib import Path
from typing import Any, Dict

from cineplux.core.config_schemas import (
    AppSettings,
    DetailConfig,
    EmbedExchangeConfig,
    LinkConfig,
    ListingFields,
    ProviderConfig,
    ProvidersConfig,
    SectionConfig,
    ServerOptionConfig,
)
from cineplux.core.models import ContentKind, SelectorChain


def get_default_settings() -> AppSettings:
    """
    Get default application settings.

    Returns:
        AppSettings instance with sensible defaults
    """
    return AppSettings()


def _fembed_exchange() -> EmbedExchangeConfig:
    return EmbedExchangeConfig(
        name="fembed",
        match=["fembed", "?h="],
        split_marker="/fembed",
        mode="json",
        api_template="{prefix}/fembed/api.php",
        form={"h": "{key}"},
    )


def cuevana() -> ProviderConfig:
    return ProviderConfig(
        name="Cuevana",
        base_url="https://cuevana3.vip",
        priority=1,
        description="Cuevana 3: películas y series",
        sections=[
            SectionConfig(
                name="Películas",
                containers=[
                    "section.home-movies .MovieList .TPostMv",
                    ".MovieList article",
                    "article.TPost.C",
                ],
                kind=ContentKind.MOVIE,
            ),
            SectionConfig(
                name="Series",
                containers=["section.home-series .MovieList .TPostMv", "section.home-series li"],
                kind=ContentKind.SERIES,
            ),
        ],
        listing_containers=[".MovieList .TPostMv", "article.TPost"],
        fields=ListingFields(title=SelectorChain.of("h2.Title", ".title", "h3")),
        detail=DetailConfig(
            title=SelectorChain.of("h1.Title", "h1"),
            synopsis=SelectorChain.of(".Description p", ".overview"),
            poster=SelectorChain.of(
                ".movtv-info .Image img@data-src", ".movtv-info .Image img@src",
                ".poster img@data-src", ".poster img@src",
            ),
            year=SelectorChain.of(".Date", ".year"),
            tags=[".genres a", ".genre"],
            episode_containers=[".all-episodes .TPostMv", ".episodios li"],
            episode_title=SelectorChain.of("h2.Title", ".Title", ".episodiotitle a"),
            episode_number=SelectorChain.of(".Year", ".numerando"),
        ),
        links=LinkConfig(
            server_options=[
                ServerOptionConfig(
                    selector=".TPlayerTb .Button, .aa-cn",
                    attribute="data-tplayernv",
                    method="POST",
                    url_template="{base_url}/wp-admin/admin-ajax.php",
                    form={"action": "doo_player_ajax", "post": "{value}", "nume": "1", "type": "movie"},
                )
            ],
            exchanges=[_fembed_exchange()],
        ),
    )


def cinecalidad() -> ProviderConfig:
    return ProviderConfig(
        name="Cinecalidad",
        base_url="https://cinecalidad.lol",
        priority=2,
        description="Cinecalidad: películas en HD y 4K",
        require_poster=True,
        sections=[
            SectionConfig(name="Series", url="{base_url}/ver-serie/page/{page}", containers=[".item.movies"], kind=ContentKind.SERIES),
            SectionConfig(name="Peliculas", url="{base_url}/page/{page}", containers=[".item.movies"]),
            SectionConfig(
                name="4K UHD",
                url="{base_url}/genero-de-la-pelicula/peliculas-en-calidad-4k/page/{page}",
                containers=[".item.movies"],
            ),
        ],
        listing_containers=["article", ".item.movies"],
        fields=ListingFields(
            title=SelectorChain.of("div.in_title", "h2", "h3"),
            poster=SelectorChain.of(".poster.custom img@data-src", "img@data-src", "img@src"),
        ),
        kind_markers={"movie": ["pelicula"], "series": ["ver-serie", "serie"], "anime": ["anime"]},
        detail=DetailConfig(
            title=SelectorChain.of(".single_left h1", "h1"),
            synopsis=SelectorChain.of("div.single_left table tbody tr td p", ".description"),
            poster=SelectorChain.of(".alignnone@data-src", ".alignnone@src"),
            episode_containers=["div.se-c div.se-a ul.episodios li", "ul.episodios li"],
            episode_thumbnail=SelectorChain.of("img.lazy@data-src", "img@src"),
            episode_number=SelectorChain.of(".numerando"),
        ),
        links=LinkConfig(
            server_options=[ServerOptionConfig(selector=".dooplay_player_option", attribute="data-option")],
            exchanges=[
                EmbedExchangeConfig(
                    name="cinecalidad-play",
                    match=["/play/?h="],
                    split_marker="/play/",
                    mode="redirect",
                    api_template="{prefix}/play/r.php?h={key}",
                )
            ],
        ),
        timeout=120,
    )


def pelisplushd() -> ProviderConfig:
    posters_first = ["a.Posters-link", ".MovieList .TPostMv"]
    return ProviderConfig(
        name="PelisplusHD",
        base_url="https://pelisplushd.mx",
        priority=3,
        description="PelisplusHD: películas, series y anime",
        supported_kinds=[ContentKind.MOVIE, ContentKind.SERIES, ContentKind.ANIME],
        sections=[
            SectionConfig(name="Películas", url="{base_url}/peliculas", containers=posters_first + [".movies .item"], kind=ContentKind.MOVIE, limit=20),
            SectionConfig(name="Series", url="{base_url}/series", containers=posters_first + [".series .item"], kind=ContentKind.SERIES, limit=20),
            SectionConfig(name="Anime", url="{base_url}/animes", containers=posters_first + [".anime .item"], kind=ContentKind.ANIME, limit=20),
        ],
        home_fallback_containers=posters_first + [".content .item"],
        listing_containers=posters_first + [".search-results .item"],
        fields=ListingFields(
            title=SelectorChain.of("h2.Title", "h3.Title", ".title", ".listing-content p", "@title"),
            poster=SelectorChain.of(
                "img.Posters-img@data-src", "img.Posters-img@data-lazy-src", "img.Posters-img@src",
                "img@data-src", "img@data-lazy-src", "img@src",
            ),
        ),
        detail=DetailConfig(
            title=SelectorChain.of("h1", ".title", ".movie-title"),
            synopsis=SelectorChain.of(".description", ".synopsis", ".overview", ".plot"),
            poster=SelectorChain.of(
                "img.poster@data-src", "img.poster@src", ".movie-poster img@data-src",
                ".movie-poster img@src",
            ),
            year_from_page_text=True,
            episode_containers=[".episodes .episode", ".season .episode", ".episode-list li", ".TPostMv"],
            episode_number=SelectorChain.of(".episode-number", ".number"),
        ),
        links=LinkConfig(
            iframe_selectors=[".TPlayer.embed_div iframe", ".player iframe", ".video-player iframe", "iframe"],
            server_options=[
                ServerOptionConfig(
                    selector="[data-option]",
                    attribute="data-option",
                    url_template="{base_url}/wp-content/plugins/player/player.php?data={value}",
                ),
                ServerOptionConfig(
                    selector="[data-server]",
                    attribute="data-server",
                    url_template="{base_url}/wp-content/plugins/player/player.php?data={value}",
                ),
            ],
            exchanges=[_fembed_exchange()],
        ),
        timeout=120,
    )


def entrepeliculasyseries() -> ProviderConfig:
    return ProviderConfig(
        name="EntrePeliculasySeries",
        base_url="https://entrepeliculasyseries.nz",
        priority=4,
        description="EntrePelículasySeries: estrenos, películas y series",
        sections=[
            SectionConfig(name="Películas", url="{base_url}/peliculas", containers=[".movies .item", ".content .item", "article.item"], kind=ContentKind.MOVIE),
            SectionConfig(name="Series", url="{base_url}/series", containers=[".series .item", ".content .item", "article.item"], kind=ContentKind.SERIES),
            SectionConfig(name="Estrenos", url="{base_url}/estrenos", containers=[".releases .item", ".content .item", "article.item"]),
        ],
        home_fallback_containers=[".MovieList .TPostMv", ".content .item", ".movie-item"],
        search_urls=[
            "{base_url}/?s={query}",
            "{base_url}/search?q={query}",
            "{base_url}/buscar?s={query}",
        ],
        listing_containers=[".MovieList .TPostMv", ".content .item", "article.item", ".search-results .item"],
        fields=ListingFields(title=SelectorChain.of("h2", "h3", ".title")),
        detail=DetailConfig(
            title=SelectorChain.of("h1", ".title", ".movie-title"),
            synopsis=SelectorChain.of(".description", ".synopsis", ".overview"),
            poster=SelectorChain.of(".poster img@data-src", ".poster img@src", "img@data-src", "img@src"),
            year=SelectorChain.of(".year", ".date", ".meta"),
            year_from_page_text=True,
            episode_containers=[".episodes .episode", ".episode-list li", ".season li"],
        ),
    )


def pelisplus4k() -> ProviderConfig:
    return ProviderConfig(
        name="Pelisplus4K",
        base_url="https://ww3.pelisplus.to",
        priority=5,
        description="Pelisplus 4K: películas, series, doramas y animes",
        supported_kinds=[ContentKind.MOVIE, ContentKind.SERIES, ContentKind.ANIME],
        kind_markers={"movie": ["pelicula"], "series": ["serie", "dorama"], "anime": ["anime"]},
        sections=[
            SectionConfig(name="Peliculas", url="{base_url}/peliculas", kind=ContentKind.MOVIE),
            SectionConfig(name="Series", url="{base_url}/series", kind=ContentKind.SERIES),
            SectionConfig(name="Doramas", url="{base_url}/doramas", kind=ContentKind.SERIES),
            SectionConfig(name="Animes", url="{base_url}/animes", kind=ContentKind.ANIME),
        ],
        search_urls=["{base_url}/api/search/{query}"],
        listing_containers=[".articlesList article", "article.item"],
        fields=ListingFields(
            title=SelectorChain.of("a h2", "h2"),
            link=SelectorChain.of("a.itemA@href", "a@href"),
            poster=SelectorChain.of("picture img@data-src", "img@data-src", "img@src"),
        ),
        detail=DetailConfig(
            title=SelectorChain.of(".slugh1", "h1"),
            synopsis=SelectorChain.of("div.description"),
            poster=SelectorChain.of(".poster img@data-src"),
            poster_from_backdrop=["original", "w500"],
            tags=["div.home__slider .genres a"],
            recommendation_containers=[".articlesList article"],
        ),
        links=LinkConfig(
            server_options=[
                ServerOptionConfig(
                    selector="div ul.subselect li",
                    attribute="data-server",
                    url_template="{base_url}/player/{value}",
                    encoding="base64",
                )
            ],
        ),
    )


def animeflv() -> ProviderConfig:
    return ProviderConfig(
        name="Animeflv",
        base_url="https://www3.animeflv.net",
        priority=6,
        description="AnimeFLV: anime subtitulado en español",
        engine="animeflv",
        supported_kinds=[ContentKind.ANIME, ContentKind.MOVIE],
        default_kind=ContentKind.ANIME,
        require_poster=True,
        sections=[
            SectionConfig(
                name="Últimos episodios",
                containers=["main.Main ul.ListEpisodios li"],
                kind=ContentKind.ANIME,
            ),
            SectionConfig(
                name="Películas",
                url="{base_url}/browse?type[]=movie&order=updated&page={page}",
                containers=["ul.ListAnimes li article"],
                kind=ContentKind.MOVIE,
            ),
            SectionConfig(
                name="Animes",
                url="{base_url}/browse?status[]=2&order=default&page={page}",
                containers=["ul.ListAnimes li article"],
                kind=ContentKind.ANIME,
            ),
            SectionConfig(
                name="En emision",
                url="{base_url}/browse?status[]=1&order=rating&page={page}",
                containers=["ul.ListAnimes li article"],
                kind=ContentKind.ANIME,
            ),
        ],
        listing_containers=["ul.ListAnimes li article"],
        fields=ListingFields(
            title=SelectorChain.of("strong.Title", "h3.Title"),
            poster=SelectorChain.of("span img@src", "figure img@src"),
        ),
        detail=DetailConfig(
            title=SelectorChain.of("h1.Title"),
            synopsis=SelectorChain.of("div.Description p"),
            poster=SelectorChain.of("div.AnimeCover div.Image figure img@src"),
            tags=["nav.Nvgnrs a"],
            episode_containers=[],
        ),
        links=LinkConfig(iframe_selectors=[]),
    )


BUILTIN_PROVIDERS = {
    "cuevana": cuevana,
    "cinecalidad": cinecalidad,
    "pelisplushd": pelisplushd,
    "entrepeliculasyseries": entrepeliculasyseries,
    "pelisplus4k": pelisplus4k,
    "animeflv": animeflv,
}


def get_default_providers() -> ProvidersConfig:
    """
    Get the built-in providers configuration.

    Returns:
        ProvidersConfig with every built-in site enabled
    """
    providers_config = ProvidersConfig()
    for key, factory in BUILTIN_PROVIDERS.items():
        providers_config.add_provider(key, factory())
    return providers_config


def create_default_config_files(config_dir: Path) -> None:
    """
    Create default configuration files in the specified directory.

    Args:
        config_dir: Directory to create configuration files in
    """
    config_dir.mkdir(parents=True, exist_ok=True)

    defaults: Dict[str, Any] = {
        "settings.json": get_default_settings(),
        "providers.json": get_default_providers(),
    }
    for filename, value in defaults.items():
        path = config_dir / filename
        if not path.exists():
            with open(path, "w", encoding="utf-8") as f:
                json.dump(value.model_dump(mode="json"), f, indent=2, ensure_ascii=False)


__all__ = [
    "BUILTIN_PROVIDERS",
    "get_default_settings",
    "get_default_providers",
    "create_default_config_files",
]
