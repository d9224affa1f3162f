"""Exact, boundary, prefix, suffix and whole-string matchers."""

from __future__ import annotations

import unicodedata
from itertools import takewhile

from .fuzzy import ascii_fuzzy_index
from .normalize import normalize_rune
from .scoring import (
    BONUS_BOUNDARY,
    BONUS_FIRST_CHAR_MULTIPLIER,
    NO_MATCH,
    SCORE_MATCH,
    CharClass,
    MatchResult,
    Scheme,
    _lower_rune,
    get_scheme,
)

_LATIN1_SPACES = frozenset("\t\n\v\f\r \x85\xa0")


def _is_space(char: str) -> bool:
    if ord(char) < 0x100:
        return char in _LATIN1_SPACES
    return unicodedata.category(char) in ("Zs", "Zl", "Zp")


def _leading_whitespaces(text: str) -> int:
    return sum(1 for _ in takewhile(_is_space, text))


def _trailing_whitespaces(text: str) -> int:
    return sum(1 for _ in takewhile(_is_space, reversed(text)))


def _index_at(index: int, size: int, forward: bool) -> int:
    return index if forward else size - index - 1


def _resolve(scheme: Scheme | None) -> Scheme:
    return scheme if scheme is not None else get_scheme("default")


def _fold(char: str, case_sensitive: bool, normalize: bool) -> str:
    if not case_sensitive:
        char = _lower_rune(char)
    if normalize:
        char = normalize_rune(char)
    return char


def _exact_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    boundary_check: bool,
    text: str,
    pattern: str,
    scheme: Scheme,
) -> MatchResult:
    if not pattern:
        return MatchResult(0, 0, 0)

    len_text = len(text)
    len_pattern = len(pattern)
    if len_text < len_pattern:
        return NO_MATCH
    if ascii_fuzzy_index(text, pattern, case_sensitive)[0] < 0:
        return NO_MATCH

    # Only the bonus at the first character position is considered.
    pidx = 0
    best_pos, bonus, best_bonus = -1, 0, -1
    index = 0
    while index < len_text:
        text_idx = _index_at(index, len_text, forward)
        char = _fold(text[text_idx], case_sensitive, normalize)
        pattern_idx = _index_at(pidx, len_pattern, forward)
        ok = pattern[pattern_idx] == char
        if ok:
            if pattern_idx == 0:
                bonus = scheme.bonus_at(text, text_idx)
            if boundary_check:
                ok = bonus >= BONUS_BOUNDARY
                if ok and pattern_idx == 0:
                    ok = (
                        text_idx == 0
                        or scheme.char_class_of(text[text_idx - 1])
                        <= CharClass.DELIMITER
                    )
                if ok and pattern_idx == len_pattern - 1:
                    ok = (
                        text_idx == len_text - 1
                        or scheme.char_class_of(text[text_idx + 1])
                        <= CharClass.DELIMITER
                    )
        if ok:
            pidx += 1
            if pidx == len_pattern:
                if bonus > best_bonus:
                    best_pos, best_bonus = index, bonus
                if bonus >= BONUS_BOUNDARY:
                    break
                index -= pidx - 1
                pidx, bonus = 0, 0
        else:
            index -= pidx
            pidx, bonus = 0, 0
        index += 1

    if best_pos < 0:
        return NO_MATCH

    if forward:
        sidx = best_pos - len_pattern + 1
        eidx = best_pos + 1
    else:
        sidx = len_text - (best_pos + 1)
        eidx = len_text - (best_pos - len_pattern + 1)

    if boundary_check:
        # Underscore boundaries rank lower than other kinds of boundaries
        score = bonus
        deduct = bonus - BONUS_BOUNDARY + 1
        if sidx > 0 and text[sidx - 1] == "_":
            score -= deduct + 1
            deduct = 1
        if eidx < len_text and text[eidx] == "_":
            score -= deduct
        # Base score so that this competes with other kinds of matches
        score += (
            SCORE_MATCH * len_pattern
            + scheme.bonus_boundary_white * (len_pattern + 1)
        )
    else:
        score, _ = scheme.calculate_score(
            case_sensitive, normalize, text, pattern, sidx, eidx, False
        )
    return MatchResult(sidx, eidx, score)


def exact_match_naive(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Find the occurrence of ``pattern`` in ``text`` with the best bonus.

    ``pattern`` must already be lower-cased if matching ignores case and
    normalized if ``normalize`` is set. Positions are never reported.
    """
    return _exact_match(
        case_sensitive, normalize, forward, False, text, pattern,
        _resolve(scheme),
    )


def exact_match_boundary(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Like :func:`exact_match_naive`, but only at word boundaries."""
    return _exact_match(
        case_sensitive, normalize, forward, True, text, pattern,
        _resolve(scheme),
    )


def prefix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Match ``pattern`` at the start of ``text``, past leading blanks."""
    scheme = _resolve(scheme)
    if not pattern:
        return MatchResult(0, 0, 0)

    trimmed = 0 if _is_space(pattern[0]) else _leading_whitespaces(text)
    if len(text) - trimmed < len(pattern):
        return NO_MATCH

    segment = text[trimmed:trimmed + len(pattern)]
    for char, pchar in zip(segment, pattern):
        if _fold(char, case_sensitive, normalize) != pchar:
            return NO_MATCH

    end = trimmed + len(pattern)
    score, _ = scheme.calculate_score(
        case_sensitive, normalize, text, pattern, trimmed, end, False
    )
    return MatchResult(trimmed, end, score)


def suffix_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Match ``pattern`` at the end of ``text``, before trailing blanks."""
    scheme = _resolve(scheme)
    trimmed = len(text)
    if not pattern or not _is_space(pattern[-1]):
        trimmed -= _trailing_whitespaces(text)
    if not pattern:
        return MatchResult(trimmed, trimmed, 0)

    diff = trimmed - len(pattern)
    if diff < 0:
        return NO_MATCH

    for char, pchar in zip(text[diff:trimmed], pattern):
        if _fold(char, case_sensitive, normalize) != pchar:
            return NO_MATCH

    score, _ = scheme.calculate_score(
        case_sensitive, normalize, text, pattern, diff, trimmed, False
    )
    return MatchResult(diff, trimmed, score)


def equal_match(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Match when ``text``, stripped of surrounding blanks, equals ``pattern``."""
    scheme = _resolve(scheme)
    len_pattern = len(pattern)
    if len_pattern == 0:
        return NO_MATCH

    leading = 0 if _is_space(pattern[0]) else _leading_whitespaces(text)
    trailing = 0 if _is_space(pattern[-1]) else _trailing_whitespaces(text)
    if len(text) - leading - trailing != len_pattern:
        return NO_MATCH

    body = text[leading:len(text) - trailing]
    if normalize:
        matched = all(
            normalize_rune(pchar)
            == normalize_rune(char if case_sensitive else _lower_rune(char))
            for char, pchar in zip(body, pattern)
        )
    else:
        matched = (body if case_sensitive else body.lower()) == pattern

    if not matched:
        return NO_MATCH
    white = scheme.bonus_boundary_white
    score = (SCORE_MATCH + white) * len_pattern + (
        BONUS_FIRST_CHAR_MULTIPLIER - 1
    ) * white
    return MatchResult(leading, leading + len_pattern, score)