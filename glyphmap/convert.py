"""
Rule-based character conversion.

Rules:
- Input is normalized before and after substitution.
- Only active rules take part, in the order the caller gave them.
- Per code point, the first matching rule wins; unmatched code points pass through.
- A rule source longer than one code point never matches.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .models import MappingRule
from .normalize import normalize

logger = logging.getLogger(__name__)


def active_rules(rules: Sequence[MappingRule]) -> List[MappingRule]:
    return [rule for rule in rules if rule.is_active]


def _matches(rule: MappingRule, char: str) -> bool:
    if rule.case_sensitive:
        return char == rule.source_char
    return char.casefold() == rule.source_char.casefold()


def _first_match(rules: Sequence[MappingRule], char: str) -> Optional[MappingRule]:
    for rule in rules:
        if _matches(rule, char):
            return rule
    return None


def convert(text: str, rules: Sequence[MappingRule]) -> str:
    """Normalize, substitute code point by code point, then normalize again."""
    normalized = normalize(text)
    candidates = active_rules(rules)

    single = [rule for rule in candidates if len(rule.source_char) == 1]
    if len(single) != len(candidates):
        logger.debug(
            "ignoring %d active rule(s) with multi-character sources",
            len(candidates) - len(single),
        )

    out: List[str] = []
    for char in normalized:
        rule = _first_match(single, char)
        out.append(rule.target_char if rule is not None else char)

    return normalize("".join(out))


def text_statistics(text: str) -> Dict[str, int]:
    stripped = text.strip()
    return {
        "characters": len(text),
        "words": len(stripped.split()) if stripped else 0,
        "lines": len(text.split("\n")),
    }
