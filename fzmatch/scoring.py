"""Character classes, bonus points and match scoring shared by the matchers."""

from __future__ import annotations

import os
import unicodedata
from dataclasses import dataclass, field
from enum import IntEnum

from .normalize import normalize_rune

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1

# Chosen so that the bonus is cancelled once the gap between acronym
# characters grows beyond about eight characters.
BONUS_BOUNDARY = SCORE_MATCH // 2
BONUS_NON_WORD = SCORE_MATCH // 2
BONUS_CAMEL123 = BONUS_BOUNDARY + SCORE_GAP_EXTENSION
BONUS_CONSECUTIVE = -(SCORE_GAP_START + SCORE_GAP_EXTENSION)
BONUS_FIRST_CHAR_MULTIPLIER = 2

_WHITE_CHARS = " \t\n\v\f\r\x85\xa0"
_DEFAULT_DELIMITERS = "/,:;|"


class CharClass(IntEnum):
    """Class of a character, ordered as the bonus rules expect."""

    WHITE = 0
    NON_WORD = 1
    DELIMITER = 2
    LOWER = 3
    UPPER = 4
    LETTER = 5
    NUMBER = 6


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a match: a start of -1 means no match."""

    start: int
    end: int
    score: int
    positions: tuple[int, ...] | None = None


NO_MATCH = MatchResult(-1, -1, 0)


def _lower_rune(char: str) -> str:
    """Lower-case a single character, keeping it a single character."""
    if "A" <= char <= "Z":
        return chr(ord(char) + 32)
    if ord(char) > 127:
        lowered = char.lower()
        return lowered[0] if lowered else char
    return char


@dataclass(frozen=True)
class Scheme:
    """A set of bonus rules used to rank matches."""

    name: str
    bonus_boundary_white: int
    bonus_boundary_delimiter: int
    delimiter_chars: str = _DEFAULT_DELIMITERS
    initial_char_class: CharClass = CharClass.WHITE
    ascii_classes: tuple[CharClass, ...] = field(
        init=False, repr=False, compare=False
    )
    bonus_matrix: tuple[tuple[int, ...], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "ascii_classes",
            tuple(self._classify_ascii(chr(code)) for code in range(128)),
        )
        object.__setattr__(
            self,
            "bonus_matrix",
            tuple(
                tuple(self.bonus_for(prev, cls) for cls in CharClass)
                for prev in CharClass
            ),
        )

    def _classify_ascii(self, char: str) -> CharClass:
        if "a" <= char <= "z":
            return CharClass.LOWER
        if "A" <= char <= "Z":
            return CharClass.UPPER
        if "0" <= char <= "9":
            return CharClass.NUMBER
        if char in _WHITE_CHARS:
            return CharClass.WHITE
        if char in self.delimiter_chars:
            return CharClass.DELIMITER
        return CharClass.NON_WORD

    def _class_of_non_ascii(self, char: str) -> CharClass:
        category = unicodedata.category(char)
        if category == "Ll":
            return CharClass.LOWER
        if category == "Lu":
            return CharClass.UPPER
        if category.startswith("N"):
            return CharClass.NUMBER
        if category.startswith("L"):
            return CharClass.LETTER
        if char.isspace():
            return CharClass.WHITE
        if char in self.delimiter_chars:
            return CharClass.DELIMITER
        return CharClass.NON_WORD

    def char_class_of(self, char: str) -> CharClass:
        """Return the class of a single character."""
        code = ord(char)
        if code < 128:
            return self.ascii_classes[code]
        return self._class_of_non_ascii(char)

    def bonus_for(self, prev_class: CharClass, char_class: CharClass) -> int:
        """Bonus for a character of ``char_class`` following ``prev_class``."""
        if char_class > CharClass.NON_WORD:
            if prev_class == CharClass.WHITE:
                return self.bonus_boundary_white
            if prev_class == CharClass.DELIMITER:
                return self.bonus_boundary_delimiter
            if prev_class == CharClass.NON_WORD:
                return BONUS_BOUNDARY
        if (
            prev_class == CharClass.LOWER and char_class == CharClass.UPPER
            or prev_class != CharClass.NUMBER and char_class == CharClass.NUMBER
        ):
            return BONUS_CAMEL123
        if char_class in (CharClass.NON_WORD, CharClass.DELIMITER):
            return BONUS_NON_WORD
        if char_class == CharClass.WHITE:
            return self.bonus_boundary_white
        return 0

    def bonus_at(self, text: str, idx: int) -> int:
        """Bonus for the character of ``text`` at ``idx``."""
        if idx == 0:
            return self.bonus_boundary_white
        prev = self.char_class_of(text[idx - 1])
        return self.bonus_matrix[prev][self.char_class_of(text[idx])]

    def calculate_score(
        self,
        case_sensitive: bool,
        normalize: bool,
        text: str,
        pattern: str,
        sidx: int,
        eidx: int,
        with_pos: bool,
    ) -> tuple[int, list[int] | None]:
        """Score the match of ``pattern`` within ``text[sidx:eidx]``.

        Returns the score and, if ``with_pos``, the matched positions.
        """
        pidx = 0
        score = 0
        in_gap = False
        consecutive = 0
        first_bonus = 0
        positions: list[int] | None = [] if with_pos else None
        prev_class = self.initial_char_class
        if sidx > 0:
            prev_class = self.char_class_of(text[sidx - 1])
        for idx, char in enumerate(text[sidx:eidx], start=sidx):
            char_class = self.char_class_of(char)
            if not case_sensitive:
                char = _lower_rune(char)
            if normalize:
                char = normalize_rune(char)
            if char == pattern[pidx]:
                if positions is not None:
                    positions.append(idx)
                score += SCORE_MATCH
                bonus = self.bonus_matrix[prev_class][char_class]
                if consecutive == 0:
                    first_bonus = bonus
                else:
                    if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                        first_bonus = bonus
                    bonus = max(bonus, first_bonus, BONUS_CONSECUTIVE)
                if pidx == 0:
                    score += bonus * BONUS_FIRST_CHAR_MULTIPLIER
                else:
                    score += bonus
                in_gap = False
                consecutive += 1
                pidx += 1
            else:
                score += SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
                in_gap = True
                consecutive = 0
                first_bonus = 0
            prev_class = char_class
        return score, positions


def _path_delimiters() -> str:
    return "/" if os.sep == "/" else os.sep + "/"


_SCHEMES: dict[str, Scheme] = {}


def get_scheme(name: str) -> Scheme:
    """Return the scoring scheme called ``name``: default, path or history."""
    scheme = _SCHEMES.get(name)
    if scheme is not None:
        return scheme
    if name == "default":
        scheme = Scheme(name, BONUS_BOUNDARY + 2, BONUS_BOUNDARY + 1)
    elif name == "path":
        scheme = Scheme(
            name,
            BONUS_BOUNDARY,
            BONUS_BOUNDARY + 1,
            _path_delimiters(),
            CharClass.DELIMITER,
        )
    elif name == "history":
        scheme = Scheme(name, BONUS_BOUNDARY, BONUS_BOUNDARY)
    else:
        raise ValueError(f"unknown scoring scheme: {name}")
    _SCHEMES[name] = scheme
    return scheme