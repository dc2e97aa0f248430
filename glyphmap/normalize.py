"""
Gujarati text normalization.

Responsibilities:
- baseline canonical composition (NFC)
- vowel + vowel sign combination into a single vowel letter
- relocation of the pre-base vowel sign (િ) after its consonant
- repair of consonant + virama + vowel sign sequences

All passes work on code points and are single bounded scans.
"""

from __future__ import annotations

import unicodedata
from typing import Iterable, List, Optional, Sequence

from .scripts import (
    NUKTA,
    PRE_BASE_SIGN,
    VIRAMA,
    VOWEL_COMBINATIONS,
    VowelCombinationTable,
    is_consonant,
    is_independent_vowel,
    is_vowel_sign,
)


class _Buffer:
    """Output builder that tracks whether a pre-base sign would attach to the last base."""

    def __init__(self):
        self._chars: List[str] = []
        # True while the tail is a consonant followed only by nuktas / pre-base signs
        self.attached = False

    def append(self, char: str) -> None:
        self._chars.append(char)
        if is_consonant(char):
            self.attached = True
        elif char != NUKTA and char != PRE_BASE_SIGN:
            self.attached = False

    def extend(self, chars: Iterable[str]) -> None:
        for char in chars:
            self.append(char)

    def chars(self) -> List[str]:
        return self._chars


def _nfc(text: str) -> str:
    return unicodedata.normalize("NFC", text)


def _at(seq: Sequence[str], i: int) -> Optional[str]:
    return seq[i] if i < len(seq) else None


def relocate_pre_base_signs(chars: Sequence[str]) -> List[str]:
    """
    Move each unattached pre-base sign after the nearest following consonant.

    Code points between the sign and the consonant keep their order and are
    emitted first; further pre-base signs from that span follow the moved one.
    A sign with no consonant after it stays where it is.
    """
    out = _Buffer()
    n = len(chars)
    i = 0
    while i < n:
        char = chars[i]
        if char != PRE_BASE_SIGN or out.attached:
            out.append(char)
            i += 1
            continue

        j = i + 1
        while j < n and not is_consonant(chars[j]):
            j += 1
        if j == n:
            out.append(char)
            i += 1
            continue

        between = chars[i + 1:j]
        out.extend(c for c in between if c != PRE_BASE_SIGN)
        out.append(chars[j])
        j += 1
        while j < n and chars[j] == NUKTA:
            out.append(chars[j])
            j += 1
        out.append(char)
        out.extend(c for c in between if c == PRE_BASE_SIGN)
        i = j

    return out.chars()


def repair_sequences(
    chars: Sequence[str], table: VowelCombinationTable = VOWEL_COMBINATIONS
) -> List[str]:
    """Single scan with one or two code points of lookahead."""
    out = _Buffer()
    n = len(chars)
    i = 0
    while i < n:
        char = chars[i]
        nxt = _at(chars, i + 1)
        third = _at(chars, i + 2)

        # consonant + virama + vowel sign -> consonant
        if is_consonant(char) and nxt == VIRAMA and is_vowel_sign(third) and third != VIRAMA:
            out.append(char)
            i += 3
            while _at(chars, i) == VIRAMA and is_vowel_sign(_at(chars, i + 1)) and chars[i + 1] != VIRAMA:
                i += 2
            continue

        combined = table.lookup(char, nxt)
        if combined is not None:
            out.append(combined)
            i += 2
            continue

        if char == PRE_BASE_SIGN and is_consonant(nxt) and not out.attached:
            out.append(nxt)
            out.append(char)
            i += 2
        elif is_consonant(char) and is_vowel_sign(nxt):
            out.append(char)
            out.append(nxt)
            i += 2
        elif is_independent_vowel(char) and is_vowel_sign(nxt):
            # known pairs were combined above
            out.append(char)
            out.append(nxt)
            i += 2
        else:
            out.append(char)
            i += 1

    return out.chars()


def normalize(text: str, table: VowelCombinationTable = VOWEL_COMBINATIONS) -> str:
    """
    Normalize Gujarati text to its canonical stored form.

    Total over all strings: empty input, text without Gujarati and stray marks
    pass through (NFC applied). Idempotent: normalize(normalize(x)) == normalize(x).
    """
    if not text:
        return text

    chars = table.combine(_nfc(text))
    chars = relocate_pre_base_signs(chars)
    chars = repair_sequences(chars, table)
    chars = table.combine(chars)
    return _nfc("".join(chars))
