"""
Gujarati script tables.

Classification is done by direct membership in fixed code point ranges,
and the vowel combination table is validated when it is built.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple


class CharClass(str, Enum):
    CONSONANT = "consonant"
    INDEPENDENT_VOWEL = "independent_vowel"
    VOWEL_SIGN = "vowel_sign"
    COMBINING_MARK = "combining_mark"
    OTHER = "other"


# Inclusive ranges
CONSONANTS = (0x0A95, 0x0AB9)          # ક .. હ
INDEPENDENT_VOWELS = (0x0A85, 0x0A94)  # અ .. ઔ
VOWEL_SIGNS = (0x0ABE, 0x0ACD)         # ા .. ્ (virama included)
COMBINING_MARKS = (
    (0x0A81, 0x0A83),  # candrabindu, anusvara, visarga
    (0x0ABC, 0x0ABC),  # nukta
    (0x0AE2, 0x0AE3),
    (0x0AFA, 0x0AFF),
)

VIRAMA = "\u0acd"
PRE_BASE_SIGN = "\u0abf"  # vowel sign I
NUKTA = "\u0abc"


def _in(cp: int, bounds: Tuple[int, int]) -> bool:
    return bounds[0] <= cp <= bounds[1]


def classify(char: str) -> CharClass:
    """Classify a single code point. Never fails; unknown input is OTHER."""
    if len(char) != 1:
        return CharClass.OTHER

    cp = ord(char)
    if _in(cp, CONSONANTS):
        return CharClass.CONSONANT
    if _in(cp, INDEPENDENT_VOWELS):
        return CharClass.INDEPENDENT_VOWEL
    if _in(cp, VOWEL_SIGNS):
        return CharClass.VOWEL_SIGN
    if any(_in(cp, r) for r in COMBINING_MARKS):
        return CharClass.COMBINING_MARK
    return CharClass.OTHER


def is_consonant(char: Optional[str]) -> bool:
    return char is not None and classify(char) is CharClass.CONSONANT


def is_independent_vowel(char: Optional[str]) -> bool:
    return char is not None and classify(char) is CharClass.INDEPENDENT_VOWEL


def is_vowel_sign(char: Optional[str]) -> bool:
    return char is not None and classify(char) is CharClass.VOWEL_SIGN


class VowelCombinationTable:
    """
    Fixed mapping of (independent vowel, vowel sign) -> independent vowel.

    Rules:
    - Lookup is by exact adjacent pair; unmapped pairs are left alone.
    - No value may appear inside any key, otherwise a combination could
      produce its own input. Checked here, at construction time.
    """

    def __init__(self, entries: Mapping[Tuple[str, str], str]):
        values = set(entries.values())
        for (first, second), value in entries.items():
            if len(first) != 1 or len(second) != 1 or len(value) != 1:
                raise ValueError(
                    f"combination entries must be single code points: {first!r}+{second!r}->{value!r}"
                )
            if first in values or second in values:
                raise ValueError(
                    f"combination {first!r}+{second!r} overlaps a combination result"
                )
        self._entries: Mapping[Tuple[str, str], str] = MappingProxyType(dict(entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pair: object) -> bool:
        return pair in self._entries

    def lookup(self, first: str, second: Optional[str]) -> Optional[str]:
        if second is None:
            return None
        return self._entries.get((first, second))

    def combine(self, chars: Iterable[str]) -> List[str]:
        """Left-to-right exact-pair pass; a hit consumes both code points."""
        seq = list(chars)
        out: List[str] = []
        i = 0
        n = len(seq)
        while i < n:
            combined = self.lookup(seq[i], seq[i + 1] if i + 1 < n else None)
            if combined is not None:
                out.append(combined)
                i += 2
            else:
                out.append(seq[i])
                i += 1
        return out


_GUJARATI_COMBINATIONS: Dict[Tuple[str, str], str] = {
    ("અ", "ા"): "આ",
    # અ + િ = ઇ is left out: it broke words such as અધિકારી
    ("અ", "ી"): "ઈ",
    ("અ", "ુ"): "ઉ",
    ("અ", "ૂ"): "ઊ",
    ("અ", "ૃ"): "ઋ",
    ("અ", "ૄ"): "ઌ",
    ("અ", "ે"): "એ",
    ("અ", "ૈ"): "ઐ",
    ("અ", "ો"): "ઓ",
    ("અ", "ૌ"): "ઔ",
}

VOWEL_COMBINATIONS = VowelCombinationTable(_GUJARATI_COMBINATIONS)


# Character catalogue served to clients (picker palette)
CHARACTER_CATALOGUE: Dict[str, List[str]] = {
    "consonants": [
        "ક", "ખ", "ગ", "ઘ", "ઙ",
        "ચ", "છ", "જ", "ઝ", "ઞ",
        "ટ", "ઠ", "ડ", "ઢ", "ણ",
        "ત", "થ", "દ", "ધ", "ન",
        "પ", "ફ", "બ", "ભ", "મ",
        "ય", "ર", "લ", "ળ", "વ",
        "શ", "ષ", "સ", "હ", "ક્ષ", "જ્ઞ",
    ],
    "vowels": ["અ", "આ", "ઇ", "ઈ", "ઉ", "ઊ", "ઋ", "ઌ", "એ", "ઐ", "ઓ", "ઔ"],
    "vowelSigns": [
        "ા", "િ", "ી", "ુ", "ૂ", "ૃ", "ૄ",
        "ે", "ૈ", "ો", "ૌ", "્", "ઁ", "ં", "ઃ",
    ],
    "numbers": ["૦", "૧", "૨", "૩", "૪", "૫", "૬", "૭", "૮", "૯"],
    "compounds": ["ક્ષ", "જ્ઞ", "શ્ર", "ત્ર"],
    "punctuation": [
        "।", "॥", ",", ".", ";", ":", "?", "!", '"', "'",
        "(", ")", "[", "]", "{", "}", "-", "–", "—", "/", "\\",
    ],
}
