"""Fuzzy matching: a fast greedy matcher and an optimal scoring matcher."""

from __future__ import annotations

from .normalize import normalize_rune
from .scoring import (
    BONUS_BOUNDARY,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    NO_MATCH,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    CharClass,
    MatchResult,
    Scheme,
    _lower_rune,
    get_scheme,
)


def _index_at(index: int, size: int, forward: bool) -> int:
    return index if forward else size - index - 1


def _try_skip(text: str, case_sensitive: bool, char: str, start: int) -> int:
    found = text.find(char, start)
    if found == start:
        return start
    if not case_sensitive and "a" <= char <= "z":
        end = found if found >= 0 else len(text)
        upper = text.find(char.upper(), start, end)
        if upper >= 0:
            found = upper
    return found


def ascii_fuzzy_index(
    text: str, pattern: str, case_sensitive: bool
) -> tuple[int, int]:
    """Narrow the range of ``text`` where ``pattern`` can match.

    Returns ``(-1, -1)`` when a match is impossible. Only ASCII text is
    narrowed; other text yields its whole range.
    """
    if not text.isascii():
        return 0, len(text)
    if not pattern.isascii():
        return -1, -1

    first_idx = idx = last_idx = 0
    char = "\x00"
    for pidx, char in enumerate(pattern):
        idx = _try_skip(text, case_sensitive, char, idx)
        if idx < 0:
            return -1, -1
        if pidx == 0 and idx > 0:
            # Step back to find the right bonus point
            first_idx = idx - 1
        last_idx = idx
        idx += 1

    upper = char
    if not case_sensitive and "a" <= char <= "z":
        upper = char.upper()
    last = max(text.rfind(char, last_idx + 1), text.rfind(upper, last_idx + 1))
    if last > last_idx:
        return first_idx, last + 1
    return first_idx, last_idx + 1


def _resolve(scheme: Scheme | None) -> Scheme:
    return scheme if scheme is not None else get_scheme("default")


def fuzzy_match_v1(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Find the first fuzzy occurrence of ``pattern`` and shorten it.

    ``pattern`` must already be lower-cased if matching ignores case and
    normalized if ``normalize`` is set.
    """
    scheme = _resolve(scheme)
    if not pattern:
        return MatchResult(0, 0, 0)
    if ascii_fuzzy_index(text, pattern, case_sensitive)[0] < 0:
        return NO_MATCH

    len_text = len(text)
    len_pattern = len(pattern)
    pidx = 0
    sidx = eidx = -1

    for index in range(len_text):
        char = text[_index_at(index, len_text, forward)]
        if not case_sensitive:
            char = _lower_rune(char)
        if normalize:
            char = normalize_rune(char)
        if char == pattern[_index_at(pidx, len_pattern, forward)]:
            if sidx < 0:
                sidx = index
            pidx += 1
            if pidx == len_pattern:
                eidx = index + 1
                break

    if sidx < 0 or eidx < 0:
        return NO_MATCH

    pidx -= 1
    for index in range(eidx - 1, sidx - 1, -1):
        char = text[_index_at(index, len_text, forward)]
        if not case_sensitive:
            char = _lower_rune(char)
        if char == pattern[_index_at(pidx, len_pattern, forward)]:
            pidx -= 1
            if pidx < 0:
                sidx = index
                break

    if not forward:
        sidx, eidx = len_text - eidx, len_text - sidx

    score, positions = scheme.calculate_score(
        case_sensitive, normalize, text, pattern, sidx, eidx, with_pos
    )
    return MatchResult(
        sidx, eidx, score, tuple(positions) if positions is not None else None
    )


def fuzzy_match_v2(
    case_sensitive: bool,
    normalize: bool,
    forward: bool,
    text: str,
    pattern: str,
    with_pos: bool = False,
    scheme: Scheme | None = None,
) -> MatchResult:
    """Find the highest scoring fuzzy occurrence of ``pattern``.

    A modified Smith-Waterman alignment in which no pattern character may
    be omitted. The same assumptions about ``pattern`` as in
    :func:`fuzzy_match_v1` apply. Positions, when requested, are listed
    from the last matched character to the first.
    """
    scheme = _resolve(scheme)
    m = len(pattern)
    if m == 0:
        return MatchResult(0, 0, 0, () if with_pos else None)
    if m > len(text):
        return NO_MATCH

    min_idx, max_idx = ascii_fuzzy_index(text, pattern, case_sensitive)
    if min_idx < 0:
        return NO_MATCH
    n = max_idx - min_idx

    h0 = [0] * n
    c0 = [0] * n
    bonuses = [0] * n
    first_occurrence = [0] * m
    chars = list(text[min_idx:max_idx])

    ascii_classes = scheme.ascii_classes
    matrix = scheme.bonus_matrix

    # Phase 1: bonus for each position and the first row of scores
    max_score, max_score_pos = 0, 0
    pidx, last_idx = 0, 0
    pchar0 = pchar = pattern[0]
    prev_h0 = 0
    prev_class = scheme.initial_char_class
    in_gap = False
    for off, char in enumerate(chars):
        code = ord(char)
        if code < 128:
            char_class = ascii_classes[code]
            if not case_sensitive and char_class == CharClass.UPPER:
                char = chr(code + 32)
                chars[off] = char
        else:
            char_class = scheme.char_class_of(char)
            if not case_sensitive and char_class == CharClass.UPPER:
                char = _lower_rune(char)
            if normalize:
                char = normalize_rune(char)
            chars[off] = char

        bonus = matrix[prev_class][char_class]
        bonuses[off] = bonus
        prev_class = char_class

        if char == pchar:
            if pidx < m:
                first_occurrence[pidx] = off
                pidx += 1
                pchar = pattern[min(pidx, m - 1)]
            last_idx = off

        if char == pchar0:
            score = SCORE_MATCH + bonus * BONUS_FIRST_CHAR_MULTIPLIER
            h0[off] = score
            c0[off] = 1
            if m == 1 and (
                forward and score > max_score
                or not forward and score >= max_score
            ):
                max_score, max_score_pos = score, off
                if forward and bonus >= BONUS_BOUNDARY:
                    break
            in_gap = False
        else:
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            h0[off] = max(prev_h0 + gap, 0)
            c0[off] = 0
            in_gap = True
        prev_h0 = h0[off]

    if pidx != m:
        return NO_MATCH
    if m == 1:
        start = min_idx + max_score_pos
        return MatchResult(
            start, start + 1, max_score, (start,) if with_pos else None
        )

    # Phase 2: fill in the score matrix
    f0 = first_occurrence[0]
    width = last_idx - f0 + 1
    scores = [0] * (width * m)
    scores[:width] = h0[f0:last_idx + 1]
    runs = [0] * (width * m)
    runs[:width] = c0[f0:last_idx + 1]

    for pidx, (pchar, first) in enumerate(
        zip(pattern[1:], first_occurrence[1:]), start=1
    ):
        row = pidx * width
        in_gap = False
        scores[row + first - f0 - 1] = 0
        for col, char in enumerate(chars[first:last_idx + 1], start=first):
            cell = row + col - f0
            diag = cell - 1 - width
            s1 = 0
            consecutive = 0
            gap = SCORE_GAP_EXTENSION if in_gap else SCORE_GAP_START
            s2 = scores[cell - 1] + gap

            if pchar == char:
                s1 = scores[diag] + SCORE_MATCH
                bonus = bonuses[col]
                consecutive = runs[diag] + 1
                if consecutive > 1:
                    first_bonus = bonuses[col - consecutive + 1]
                    # Break consecutive chunk
                    if bonus >= BONUS_BOUNDARY and bonus > first_bonus:
                        consecutive = 1
                    else:
                        bonus = max(bonus, BONUS_CONSECUTIVE, first_bonus)
                if s1 + bonus < s2:
                    s1 += bonuses[col]
                    consecutive = 0
                else:
                    s1 += bonus
            runs[cell] = consecutive

            in_gap = s1 < s2
            score = max(s1, s2, 0)
            if pidx == m - 1 and (
                forward and score > max_score
                or not forward and score >= max_score
            ):
                max_score, max_score_pos = score, col
            scores[cell] = score

    # Phase 3: backtrace to find character positions
    positions: list[int] | None = None
    j = f0
    if with_pos:
        positions = []
        i = m - 1
        j = max_score_pos
        prefer_match = True
        while True:
            base = i * width
            j0 = j - f0
            s = scores[base + j0]
            s1 = s2 = 0
            if i > 0 and j >= first_occurrence[i]:
                s1 = scores[base - width + j0 - 1]
            if j > first_occurrence[i]:
                s2 = scores[base + j0 - 1]

            if s > s1 and (s > s2 or s == s2 and prefer_match):
                positions.append(j + min_idx)
                if i == 0:
                    break
                i -= 1
            below = base + width + j0 + 1
            prefer_match = runs[base + j0] > 1 or (
                below < len(runs) and runs[below] > 0
            )
            j -= 1

    # The start offset is only accurate when positions were requested.
    return MatchResult(
        min_idx + j,
        min_idx + max_score_pos + 1,
        max_score,
        tuple(positions) if positions is not None else None,
    )