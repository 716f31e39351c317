"""
Episode numbering - season/episode recovery from labels and URLs.

Patterns are tried in order and the first match wins. When nothing
matches the episode number stays None; it is never defaulted.
"""

import re
from typing import NamedTuple, Optional, Tuple


class EpisodeNumbering(NamedTuple):
    season: int
    episode: Optional[int]


_PAIR_PATTERNS: Tuple[re.Pattern, ...] = (
    # S1E2, S01 E02, s1-e2
    re.compile(r"\bs(\d{1,3})\s*[-x:.]?\s*e(\d{1,4})", re.IGNORECASE),
    # temporada/2/capitulo/5, season-1-episode-3
    re.compile(
        r"(?:temporada|season)[/\-_ ]*(\d{1,3}).*?(?:cap[ií]tulo|episodio|episode)[/\-_ ]*(\d{1,4})",
        re.IGNORECASE,
    ),
    # 3x07
    re.compile(r"(?<!\d)(\d{1,3})\s*x\s*(\d{1,4})(?!\d)", re.IGNORECASE),
    # 1 - 12
    re.compile(r"(?<![\d.])(\d{1,3})\s*-\s*(\d{1,4})(?!\d)"),
)

_SINGLE_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"(?:episodio|cap[ií]tulo|episode|ep\.?)\s*[-#:]?\s*(\d{1,4})", re.IGNORECASE),
    re.compile(r"(\d{1,4})\s*/?\s*$"),
)


def parse_episode_numbering(text: Optional[str]) -> EpisodeNumbering:
    """
    Parse a season/episode pair from a label or URL.

    Examples: ``3x07`` gives (3, 7), ``temporada/2/capitulo/5`` gives (2, 5),
    ``S1E2`` gives (1, 2) and ``Capítulo Especial`` gives (1, None).
    """
    if not text:
        return EpisodeNumbering(1, None)

    for pattern in _PAIR_PATTERNS:
        match = pattern.search(text)
        if match:
            return EpisodeNumbering(int(match.group(1)), int(match.group(2)))

    for pattern in _SINGLE_PATTERNS:
        match = pattern.search(text)
        if match:
            return EpisodeNumbering(1, int(match.group(1)))

    return EpisodeNumbering(1, None)


__all__ = ["EpisodeNumbering", "parse_episode_numbering"]
