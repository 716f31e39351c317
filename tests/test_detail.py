"""
Tests for episode numbering and detail page extraction.
"""

import pytest

from cineplux.core.config_schemas import DetailConfig, KindMarkers, ProviderConfig
from cineplux.core.models import ContentKind, EpisodeRef
from cineplux.plugins.common.detail import decide_kind, extract_detail, parse_year
from cineplux.plugins.common.episodes import EpisodeNumbering, parse_episode_numbering

from tests.conftest import BASE_URL, SERIES_DETAIL_HTML, soup


@pytest.mark.parametrize(
    "text,expected",
    [
        ("3x07", (3, 7)),
        ("temporada/2/capitulo/5", (2, 5)),
        ("https://site.test/serie/dark/temporada/2/capitulo/5", (2, 5)),
        ("S1E2", (1, 2)),
        ("s02 e10", (2, 10)),
        ("1 - 12", (1, 12)),
        ("Episodio 12", (1, 12)),
        ("https://site.test/episodio/dark-1x3", (1, 3)),
        ("Capítulo Especial", (1, None)),
        ("", (1, None)),
        (None, (1, None)),
    ],
)
def test_parse_episode_numbering(text, expected):
    assert parse_episode_numbering(text) == EpisodeNumbering(*expected)


def test_parse_year():
    assert parse_year("Estreno: 2019-05-01") == 2019
    assert parse_year("12345") is None
    assert parse_year(None) is None


class TestDecideKind:
    """Test content kind decisions for detail pages."""

    EPISODE = EpisodeRef(episode_url="https://site.test/episodio/x-1x1", season=1, episode=1)

    @pytest.mark.parametrize(
        "url,tags,has_episodes,default,expected",
        [
            ("https://site.test/anime/naruto", [], False, ContentKind.MOVIE, ContentKind.ANIME),
            ("https://site.test/serie/x", ["Anime", "Acción"], True, ContentKind.MOVIE, ContentKind.ANIME),
            ("https://site.test/serie/x", [], True, ContentKind.MOVIE, ContentKind.SERIES),
            ("https://site.test/pelicula/x", [], True, ContentKind.MOVIE, ContentKind.SERIES),
            ("https://site.test/pelicula/x", [], False, ContentKind.ANIME, ContentKind.MOVIE),
            ("https://site.test/titulo/x", [], False, ContentKind.SERIES, ContentKind.MOVIE),
            ("https://site.test/titulo/x", [], False, ContentKind.ANIME, ContentKind.ANIME),
        ],
    )
    def test_kind_table(self, url, tags, has_episodes, default, expected):
        episodes = [self.EPISODE] if has_episodes else []
        assert decide_kind(url, tags, episodes, KindMarkers(), default) == expected


class TestExtractDetail:
    """Test detail record extraction."""

    PAGE_URL = "https://site.test/serie/la-serie"

    def test_series_detail(self, provider_config):
        record = extract_detail(soup(SERIES_DETAIL_HTML), provider_config, self.PAGE_URL)

        assert record is not None
        assert record.title == "La Serie"
        assert record.kind == ContentKind.SERIES
        assert record.synopsis == "Una familia de ladrones."
        assert record.year == 2019
        assert record.tags == ("Drama", "Crimen")
        assert record.backdrop_url == "https://image.tmdb.org/t/p/original/back.jpg"
        assert record.poster_url is None

    def test_episodes_deduplicated_in_page_order(self, provider_config):
        record = extract_detail(soup(SERIES_DETAIL_HTML), provider_config, self.PAGE_URL)

        assert [(e.season, e.episode) for e in record.episodes] == [(1, 1), (1, 2)]
        first = record.episodes[0]
        assert first.episode_url == "https://site.test/episodio/la-serie-1x1"
        assert first.title == "Piloto"
        assert first.thumbnail_url == "https://site.test/thumbs/1.jpg"
        assert record.is_serial

    def test_poster_from_backdrop(self):
        config = ProviderConfig(
            name="Test",
            base_url=BASE_URL,
            detail=DetailConfig(poster_from_backdrop=["original", "w500"]),
        )
        record = extract_detail(soup(SERIES_DETAIL_HTML), config, self.PAGE_URL)
        assert record.poster_url == "https://image.tmdb.org/t/p/w500/back.jpg"

    def test_missing_title_gives_none(self, provider_config):
        document = soup("<html><body><div class='Description'><p>Sin título</p></div></body></html>")
        assert extract_detail(document, provider_config, self.PAGE_URL) is None

    def test_movie_without_optional_fields(self, provider_config):
        document = soup("<html><body><h1>Una Película</h1></body></html>")
        record = extract_detail(document, provider_config, "https://site.test/pelicula/una")

        assert record.kind == ContentKind.MOVIE
        assert record.synopsis is None
        assert record.year is None
        assert record.tags == ()
        assert record.episodes == ()
        assert not record.is_serial

    def test_hash_prefixed_title(self, provider_config):
        document = soup("<html><body><h1>#Alive</h1></body></html>")
        record = extract_detail(document, provider_config, "https://site.test/pelicula/alive")

        assert record is not None
        assert record.title == "#Alive"

    def test_year_from_page_text(self):
        config = ProviderConfig(
            name="Test",
            base_url=BASE_URL,
            detail=DetailConfig(year_from_page_text=True),
        )
        document = soup("<html><body><h1>Título</h1><p>Lanzamiento 2021 · 120 min</p></body></html>")

        record = extract_detail(document, config, "https://site.test/pelicula/titulo")
        assert record.year == 2021

    def test_recommendations_exclude_the_page_itself(self):
        config = ProviderConfig(
            name="Test",
            base_url=BASE_URL,
            detail=DetailConfig(recommendation_containers=[".related article"]),
        )
        document = soup(
            """
            <h1>Uno</h1>
            <div class="related">
              <article><a href="/pelicula/uno"><h2>Uno</h2></a></article>
              <article><a href="/pelicula/dos"><h2>Dos</h2></a></article>
            </div>
            """
        )

        record = extract_detail(document, config, "https://site.test/pelicula/uno")
        assert [entry.title for entry in record.recommendations] == ["Dos"]

    def test_episode_number_falls_back_to_url(self, provider_config):
        document = soup(
            """
            <h1>Serie</h1>
            <ul class="episodios">
              <li><div class="numerando">Especial</div><a href="/serie/x/temporada/2/capitulo/4">Ep</a></li>
              <li><a href="/serie/x/extra">Extra</a></li>
            </ul>
            """
        )

        record = extract_detail(document, provider_config, "https://site.test/serie/x")
        assert [(e.season, e.episode) for e in record.episodes] == [(2, 4), (1, None)]
