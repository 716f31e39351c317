"""
Selector Chains - Ordered fallback resolution of fields from HTML nodes.

A chain is tried pair by pair; the first pair that yields a non-empty,
non-placeholder value wins. Malformed selectors count as "no match" and
never raise, so a bad configuration value only costs one fallback step.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from cineplux.core.models import TEXT_ATTRIBUTE, SelectorChain, SelectorPair


logger = logging.getLogger(__name__)

Node = Union[BeautifulSoup, Tag]

# Lazy-load and link placeholders that must never be taken as attribute values
DEFAULT_PLACEHOLDERS = (
    "data:image",
    "about:",
    "javascript:",
    "#",
)

BLANK_IMAGE_MARKERS = ("blank.gif", "placeholder.svg", "lazy.svg", "loading.gif")

# Attributes holding display text rather than URLs
TEXTUAL_ATTRIBUTES = (TEXT_ATTRIBUTE, "title", "alt")


def is_placeholder(value: str, denylist: Sequence[str] = DEFAULT_PLACEHOLDERS) -> bool:
    """True when a value is a lazy-load or pseudo-protocol placeholder."""
    lowered = value.strip().lower()
    if any(lowered.startswith(prefix) for prefix in denylist):
        return True
    return lowered.endswith(BLANK_IMAGE_MARKERS)


def select_safe(node: Node, selector: str, logger: logging.Logger = logger) -> List[Tag]:
    """
    Select all matches of a CSS selector, treating bad selectors as no match.

    Args:
        node: Document or element to search
        selector: CSS selector
        logger: Logger for malformed selector diagnostics

    Returns:
        Matching elements in document order
    """
    if not selector:
        return [node] if isinstance(node, Tag) else []
    try:
        return list(node.select(selector))
    except (SelectorSyntaxError, NotImplementedError, ValueError) as e:
        logger.debug(f"Ignoring malformed selector {selector!r}: {e}")
        return []


def select_first(node: Node, selector: str, logger: logging.Logger = logger) -> Optional[Tag]:
    """First match of a selector; the empty selector means the node itself."""
    if not selector:
        return node if isinstance(node, Tag) else None
    try:
        return node.select_one(selector)
    except (SelectorSyntaxError, NotImplementedError, ValueError) as e:
        logger.debug(f"Ignoring malformed selector {selector!r}: {e}")
        return None


def read_value(element: Tag, attribute: str) -> Optional[str]:
    """Read text content or an attribute from an element, stripped."""
    if attribute == TEXT_ATTRIBUTE:
        value = element.get_text(" ", strip=True)
    else:
        value = element.get(attribute)
        if isinstance(value, list):
            value = " ".join(value)
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_pair(
    node: Node,
    pair: SelectorPair,
    denylist: Sequence[str] = DEFAULT_PLACEHOLDERS,
    logger: logging.Logger = logger,
) -> Optional[str]:
    element = select_first(node, pair.selector, logger)
    if element is None:
        return None
    value = read_value(element, pair.attribute)
    if value is None:
        return None
    if pair.attribute not in TEXTUAL_ATTRIBUTES and is_placeholder(value, denylist):
        return None
    return value


def resolve(
    node: Node,
    chain: SelectorChain,
    denylist: Sequence[str] = DEFAULT_PLACEHOLDERS,
    logger: logging.Logger = logger,
) -> Optional[str]:
    """
    Resolve a field through its selector chain.

    Args:
        node: Document or element the selectors are relative to
        chain: Ordered (selector, attribute) pairs
        denylist: Placeholder prefixes that disqualify a value
        logger: Logger for diagnostics

    Returns:
        The first usable value, or None when every pair missed
    """
    for pair in chain.pairs:
        value = resolve_pair(node, pair, denylist, logger)
        if value is not None:
            return value
    return None


def resolve_all(
    node: Node,
    selectors: Iterable[str],
    attribute: str = TEXT_ATTRIBUTE,
    logger: logging.Logger = logger,
) -> List[str]:
    """
    Collect every non-empty value matched by any of the selectors.

    Values keep document order per selector and are deduplicated.
    """
    values: List[str] = []
    for selector in selectors:
        for element in select_safe(node, selector, logger):
            value = read_value(element, attribute)
            if value and value not in values:
                values.append(value)
    return values


__all__ = [
    "DEFAULT_PLACEHOLDERS",
    "Node",
    "is_placeholder",
    "select_safe",
    "select_first",
    "read_value",
    "resolve_pair",
    "resolve",
    "resolve_all",
]
