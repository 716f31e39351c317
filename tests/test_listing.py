"""
Tests for listing and section extraction.
"""

import logging

from cineplux.core.models import ContentKind, ListingOutcome
from cineplux.plugins.common.listing import (
    ListingPolicy,
    SectionSpec,
    extract_listing,
    extract_sections,
)

from tests.conftest import BASE_URL, EMPTY_SEARCH_HTML, LISTING_HTML, soup


CONTAINERS = (".missing .item", ".MovieList .TPostMv")


class TestExtractListing:
    """Test container-based listing extraction."""

    def test_entries_in_document_order_without_duplicates(self):
        result = extract_listing(soup(LISTING_HTML), CONTAINERS, BASE_URL)

        assert result.outcome == ListingOutcome.OK
        assert result.matched_selector == ".MovieList .TPostMv"
        assert [entry.title for entry in result.entries] == ["Uno", "Dos", "Tres"]
        assert [entry.kind for entry in result.entries] == [
            ContentKind.MOVIE,
            ContentKind.SERIES,
            ContentKind.MOVIE,
        ]

    def test_urls_are_absolute(self):
        result = extract_listing(soup(LISTING_HTML), CONTAINERS, BASE_URL)
        first, second, third = result.entries

        assert first.detail_url == "https://site.test/pelicula/uno"
        assert first.poster_url == "https://site.test/img/uno.jpg"
        assert second.poster_url == "https://cdn.test/dos.jpg"
        # Lazy-load placeholder is not a poster
        assert third.poster_url is None

    def test_extraction_is_idempotent(self):
        document = soup(LISTING_HTML)
        first = extract_listing(document, CONTAINERS, BASE_URL)
        second = extract_listing(document, CONTAINERS, BASE_URL)
        assert first == second

    def test_require_poster_drops_entries(self):
        policy = ListingPolicy(require_poster=True)
        result = extract_listing(soup(LISTING_HTML), CONTAINERS, BASE_URL, policy)
        assert [entry.title for entry in result.entries] == ["Uno", "Dos"]

    def test_hash_prefixed_title(self):
        html = (
            '<ul class="MovieList"><li class="TPostMv">'
            '<a href="/pelicula/alive"><img src="/img/alive.jpg"><h2 class="Title">#Alive</h2></a>'
            "</li></ul>"
        )

        result = extract_listing(soup(html), CONTAINERS, BASE_URL)

        assert result.outcome == ListingOutcome.OK
        assert [entry.title for entry in result.entries] == ["#Alive"]
        assert result.entries[0].detail_url == "https://site.test/pelicula/alive"

    def test_limit(self):
        result = extract_listing(soup(LISTING_HTML), CONTAINERS, BASE_URL, limit=2)
        assert len(result.entries) == 2

    def test_empty_page_is_not_a_layout_mismatch(self):
        policy = ListingPolicy(empty_phrases=("no se encontraron",))
        result = extract_listing(soup(EMPTY_SEARCH_HTML), CONTAINERS, BASE_URL, policy)

        assert result.outcome == ListingOutcome.EMPTY
        assert result.entries == ()

    def test_empty_marker_selector(self):
        policy = ListingPolicy(empty_markers=(".no-results",))
        document = soup('<div class="no-results">Nada</div>')
        assert extract_listing(document, CONTAINERS, BASE_URL, policy).outcome == ListingOutcome.EMPTY

    def test_layout_mismatch_is_logged(self, caplog):
        policy = ListingPolicy(empty_markers=(".no-results",), empty_phrases=("sin resultados",))

        with caplog.at_level(logging.WARNING):
            result = extract_listing(soup("<div><p>Bienvenido</p></div>"), CONTAINERS, BASE_URL, policy)

        assert result.outcome == ListingOutcome.LAYOUT_MISMATCH
        assert not result.ok
        assert "No listing containers matched" in caplog.text

    def test_matching_containers_without_entries_fall_through(self):
        html = """
        <div class="item"><span>sin enlace</span></div>
        <article class="TPost"><a href="/pelicula/x"><h2>X</h2></a></article>
        """
        result = extract_listing(soup(html), ("div.item", "article.TPost"), BASE_URL)
        assert result.matched_selector == "article.TPost"
        assert result.entries[0].title == "X"


class TestExtractSections:
    """Test section isolation on a shared document."""

    HOME_HTML = """
    <section id="estrenos">
      <article><a href="/pelicula/a"><h2>A</h2></a></article>
      <article><a href="/pelicula/b"><h2>B</h2></a></article>
    </section>
    <section id="series">
      <article><a href="/ver/c"><h2>C</h2></a></article>
    </section>
    """

    def test_missing_section_does_not_abort_siblings(self):
        specs = [
            SectionSpec(name="Estrenos", containers=("#estrenos article",)),
            SectionSpec(name="Perdida", containers=("#perdida article",)),
            SectionSpec(name="Series", containers=("#series article",), kind=ContentKind.SERIES),
        ]

        listing = extract_sections(soup(self.HOME_HTML), specs, BASE_URL)

        assert [section.name for section in listing.sections] == ["Estrenos", "Series"]
        assert listing.outcomes["Perdida"] == ListingOutcome.LAYOUT_MISMATCH
        assert [entry.title for entry in listing.entries] == ["A", "B", "C"]
        assert listing.sections[1].entries[0].kind == ContentKind.SERIES
        assert not listing.total_failure

    def test_total_failure(self):
        specs = [SectionSpec(name="Perdida", containers=("#perdida article",))]
        listing = extract_sections(soup(self.HOME_HTML), specs, BASE_URL)

        assert listing.sections == ()
        assert listing.total_failure

    def test_section_limit(self):
        specs = [SectionSpec(name="Estrenos", containers=("#estrenos article",), limit=1)]
        listing = extract_sections(soup(self.HOME_HTML), specs, BASE_URL)
        assert len(listing.entries) == 1
