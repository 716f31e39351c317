"""
Listing Extractor - Catalog entries from search results and home sections.

Container selectors are tried in priority order and the first one that
produces entries wins. A listing that yields nothing is classified as
either EMPTY (the page says so) or LAYOUT_MISMATCH (the markup changed).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from cineplux.core.config_schemas import KindMarkers, ListingFields
from cineplux.core.models import (
    CatalogEntry,
    ContentKind,
    HomeSection,
    ListingOutcome,
    ListingResult,
)
from cineplux.plugins.common.selectors import Node, resolve, select_safe
from cineplux.plugins.common.urls import classify_kind, normalize_url


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingPolicy:
    """Per-provider knobs for turning containers into entries."""

    fields: ListingFields = field(default_factory=ListingFields)
    markers: KindMarkers = field(default_factory=KindMarkers)
    default_kind: ContentKind = ContentKind.MOVIE
    require_poster: bool = False
    empty_markers: Tuple[str, ...] = ()
    empty_phrases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SectionSpec:
    """One named section to extract from a shared document."""

    name: str
    containers: Tuple[str, ...]
    kind: Optional[ContentKind] = None
    limit: Optional[int] = None


@dataclass(frozen=True)
class SectionedListing:
    """Per-section results of ``extract_sections``."""

    sections: Tuple[HomeSection, ...]
    outcomes: Dict[str, ListingOutcome]

    @property
    def entries(self) -> List[CatalogEntry]:
        """Union of every section's entries, in section order."""
        return [entry for section in self.sections for entry in section.entries]

    @property
    def total_failure(self) -> bool:
        return not self.entries


def build_entry(
    element: Node,
    base_url: str,
    policy: ListingPolicy,
    default_kind: Optional[ContentKind] = None,
    logger: logging.Logger = logger,
) -> Optional[CatalogEntry]:
    """
    Build one catalog entry from a container element.

    Returns None when the title or link is missing, or when the poster is
    missing and the policy requires one.
    """
    title = resolve(element, policy.fields.title, logger=logger)
    link = resolve(element, policy.fields.link, logger=logger)
    if not title or not link:
        return None

    detail_url = normalize_url(link, base_url)
    if detail_url is None:
        return None

    poster_url = normalize_url(resolve(element, policy.fields.poster, logger=logger), base_url)
    if poster_url is None and policy.require_poster:
        return None

    kind = classify_kind(detail_url, policy.markers, default_kind or policy.default_kind)

    try:
        return CatalogEntry(title=title, detail_url=detail_url, poster_url=poster_url, kind=kind)
    except ValidationError as e:
        logger.debug(f"Dropping listing item {detail_url}: {e.error_count()} validation errors")
        return None


def looks_empty(document: Node, policy: ListingPolicy, logger: logging.Logger = logger) -> bool:
    """True when the page carries a configured 'no results' marker or phrase."""
    for selector in policy.empty_markers:
        if select_safe(document, selector, logger):
            return True

    if policy.empty_phrases:
        text = document.get_text(" ", strip=True).lower()
        return any(phrase.lower() in text for phrase in policy.empty_phrases)

    return False


def extract_listing(
    document: Node,
    containers: Sequence[str],
    base_url: str,
    policy: Optional[ListingPolicy] = None,
    default_kind: Optional[ContentKind] = None,
    limit: Optional[int] = None,
    logger: logging.Logger = logger,
) -> ListingResult:
    """
    Extract catalog entries from a listing document.

    Args:
        document: Parsed listing page
        containers: Container selectors in priority order
        base_url: Site base URL used to absolutize links
        policy: Field chains, kind markers and poster policy
        default_kind: Kind for URLs without a path marker
        limit: Maximum number of entries kept
        logger: Logger for diagnostics

    Returns:
        ListingResult with entries in document order, deduplicated by URL
    """
    policy = policy or ListingPolicy()

    for selector in containers:
        elements = select_safe(document, selector, logger)
        if not elements:
            continue

        entries: List[CatalogEntry] = []
        seen = set()
        for element in elements:
            entry = build_entry(element, base_url, policy, default_kind, logger)
            if entry is None or entry.detail_url in seen:
                continue
            seen.add(entry.detail_url)
            entries.append(entry)
            if limit and len(entries) >= limit:
                break

        if entries:
            logger.debug(
                f"Listing matched {selector!r} with {len(entries)} entries",
                extra={"selector": selector, "count": len(entries)},
            )
            return ListingResult(
                entries=tuple(entries), outcome=ListingOutcome.OK, matched_selector=selector
            )

        logger.debug(f"Containers {selector!r} matched but produced no entries")

    outcome = ListingOutcome.EMPTY if looks_empty(document, policy, logger) else ListingOutcome.LAYOUT_MISMATCH
    if outcome == ListingOutcome.LAYOUT_MISMATCH:
        logger.warning(
            f"No listing containers matched at {base_url}",
            extra={"containers": list(containers)},
        )
    return ListingResult(outcome=outcome)


def extract_sections(
    document: Node,
    sections: Iterable[SectionSpec],
    base_url: str,
    policy: Optional[ListingPolicy] = None,
    logger: logging.Logger = logger,
) -> SectionedListing:
    """
    Apply several section specs to one document.

    A section that matches nothing is recorded and skipped; it never
    aborts its siblings.
    """
    results: List[HomeSection] = []
    outcomes: Dict[str, ListingOutcome] = {}

    for spec in sections:
        listing = extract_listing(
            document,
            spec.containers,
            base_url,
            policy,
            default_kind=spec.kind,
            limit=spec.limit,
            logger=logger,
        )
        outcomes[spec.name] = listing.outcome
        if listing.ok:
            results.append(HomeSection(name=spec.name, entries=listing.entries))
        else:
            logger.info(f"Section '{spec.name}' yielded no entries ({listing.outcome.value})")

    return SectionedListing(sections=tuple(results), outcomes=outcomes)


__all__ = [
    "ListingPolicy",
    "SectionSpec",
    "SectionedListing",
    "build_entry",
    "looks_empty",
    "extract_listing",
    "extract_sections",
]
