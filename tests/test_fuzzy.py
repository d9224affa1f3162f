import pytest

from fzmatch.fuzzy import ascii_fuzzy_index, fuzzy_match_v1, fuzzy_match_v2
from fzmatch.scoring import (
    BONUS_BOUNDARY,
    BONUS_CAMEL123,
    BONUS_CONSECUTIVE,
    BONUS_FIRST_CHAR_MULTIPLIER,
    BONUS_NON_WORD,
    SCORE_GAP_EXTENSION,
    SCORE_GAP_START,
    SCORE_MATCH,
    get_scheme,
)

WHITE = 10
DELIM = 9
MULT = BONUS_FIRST_CHAR_MULTIPLIER
ALGOS = [fuzzy_match_v1, fuzzy_match_v2]


def run(fn, case_sensitive, normalize, forward, text, pattern, scheme=None):
    if not case_sensitive:
        pattern = pattern.lower()
    result = fn(
        case_sensitive,
        normalize,
        forward,
        text,
        pattern,
        True,
        scheme or get_scheme("default"),
    )
    if result.positions:
        start = min(result.positions)
        end = max(result.positions) + 1
    else:
        start, end = result.start, result.end
    return start, end, result.score


FUZZY_CASES = [
    (False, "fooBarbaz1", "oBZ", 2, 9,
     SCORE_MATCH * 3 + BONUS_CAMEL123 + SCORE_GAP_START + SCORE_GAP_EXTENSION * 3),
    (False, "foo bar baz", "fbb", 0, 9,
     SCORE_MATCH * 3 + WHITE * MULT + WHITE * 2
     + 2 * SCORE_GAP_START + 4 * SCORE_GAP_EXTENSION),
    (False, "/AutomatorDocument.icns", "rdoc", 9, 13,
     SCORE_MATCH * 4 + BONUS_CAMEL123 + BONUS_CONSECUTIVE * 2),
    (False, "/man1/zshcompctl.1", "zshc", 6, 10,
     SCORE_MATCH * 4 + DELIM * MULT + DELIM * 3),
    (False, "/.oh-my-zsh/cache", "zshc", 8, 13,
     SCORE_MATCH * 4 + BONUS_BOUNDARY * MULT + BONUS_BOUNDARY * 2
     + SCORE_GAP_START + DELIM),
    (False, "ab0123 456", "12356", 3, 10,
     SCORE_MATCH * 5 + BONUS_CONSECUTIVE * 3 + SCORE_GAP_START + SCORE_GAP_EXTENSION),
    (False, "abc123 456", "12356", 3, 10,
     SCORE_MATCH * 5 + BONUS_CAMEL123 * MULT + BONUS_CAMEL123 * 2
     + BONUS_CONSECUTIVE + SCORE_GAP_START + SCORE_GAP_EXTENSION),
    (False, "foo/bar/baz", "fbb", 0, 9,
     SCORE_MATCH * 3 + WHITE * MULT + DELIM * 2
     + 2 * SCORE_GAP_START + 4 * SCORE_GAP_EXTENSION),
    (False, "fooBarBaz", "fbb", 0, 7,
     SCORE_MATCH * 3 + WHITE * MULT + BONUS_CAMEL123 * 2
     + 2 * SCORE_GAP_START + 2 * SCORE_GAP_EXTENSION),
    (False, "foo barbaz", "fbb", 0, 8,
     SCORE_MATCH * 3 + WHITE * MULT + WHITE
     + SCORE_GAP_START * 2 + SCORE_GAP_EXTENSION * 3),
    (False, "fooBar Baz", "foob", 0, 4,
     SCORE_MATCH * 4 + WHITE * MULT + WHITE * 3),
    (False, "xFoo-Bar Baz", "foo-b", 1, 6,
     SCORE_MATCH * 5 + BONUS_CAMEL123 * MULT + BONUS_CAMEL123 * 2
     + BONUS_NON_WORD + BONUS_BOUNDARY),
    (True, "fooBarbaz", "oBz", 2, 9,
     SCORE_MATCH * 3 + BONUS_CAMEL123 + SCORE_GAP_START + SCORE_GAP_EXTENSION * 3),
    (True, "Foo/Bar/Baz", "FBB", 0, 9,
     SCORE_MATCH * 3 + WHITE * MULT + DELIM * 2
     + SCORE_GAP_START * 2 + SCORE_GAP_EXTENSION * 4),
    (True, "FooBarBaz", "FBB", 0, 7,
     SCORE_MATCH * 3 + WHITE * MULT + BONUS_CAMEL123 * 2
     + SCORE_GAP_START * 2 + SCORE_GAP_EXTENSION * 2),
    (True, "FooBar Baz", "FooB", 0, 4,
     SCORE_MATCH * 4 + WHITE * MULT + WHITE * 2 + max(BONUS_CAMEL123, WHITE)),
    (True, "foo-bar", "o-ba", 2, 6, SCORE_MATCH * 4 + BONUS_BOUNDARY * 3),
    (True, "fooBarbaz", "oBZ", -1, -1, 0),
    (True, "Foo Bar Baz", "fbb", -1, -1, 0),
    (True, "fooBarbaz", "fooBarbazz", -1, -1, 0),
]


@pytest.mark.parametrize("fn", ALGOS)
@pytest.mark.parametrize("forward", [True, False])
@pytest.mark.parametrize("case_sensitive, text, pattern, sidx, eidx, score", FUZZY_CASES)
def test_fuzzy_match(fn, forward, case_sensitive, text, pattern, sidx, eidx, score):
    assert run(fn, case_sensitive, False, forward, text, pattern) == (sidx, eidx, score)


def test_pinned_scores():
    assert run(fuzzy_match_v2, False, False, True, "foo bar baz", "fbb") == (0, 9, 78)
    assert run(fuzzy_match_v1, False, False, True, "/man1/zshcompctl.1", "zshc") == (
        6,
        10,
        109,
    )


def test_fuzzy_match_backward():
    assert run(fuzzy_match_v1, False, False, True, "foobar fb", "fb") == (
        0,
        4,
        SCORE_MATCH * 2 + WHITE * MULT + SCORE_GAP_START + SCORE_GAP_EXTENSION,
    )
    assert run(fuzzy_match_v1, False, False, False, "foobar fb", "fb") == (
        7,
        9,
        SCORE_MATCH * 2 + WHITE * MULT + WHITE,
    )


@pytest.mark.parametrize("fn", ALGOS)
@pytest.mark.parametrize("forward", [True, False])
def test_empty_pattern(fn, forward):
    assert run(fn, True, False, forward, "foobar", "") == (0, 0, 0)


@pytest.mark.parametrize("fn", ALGOS)
@pytest.mark.parametrize(
    "text, pattern, sidx, eidx, score",
    [
        ("Só Danço Samba", "So", 0, 2, 62),
        ("Só Danço Samba", "sodc", 0, 7, 97),
        ("Danço", "danco", 0, 5, 140),
    ],
)
def test_normalize(fn, text, pattern, sidx, eidx, score):
    assert run(fn, False, True, True, text, pattern) == (sidx, eidx, score)


def test_long_string():
    size = 65535
    text = "x" * size + "z" + "x" * (size - 1)
    assert run(fuzzy_match_v2, True, False, True, text, "zx") == (
        size,
        size + 2,
        SCORE_MATCH * 2 + BONUS_CONSECUTIVE,
    )


def test_v2_positions_reported():
    result = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True)
    assert sorted(result.positions) == [0, 4, 8]
    assert result.end == 9


def test_v1_positions_omitted_without_request():
    result = fuzzy_match_v1(False, False, True, "foo bar baz", "fbb", False)
    assert result.positions is None
    assert (result.start, result.end, result.score) == (0, 9, 78)


@pytest.mark.parametrize("fn", ALGOS)
def test_history_scheme_changes_score(fn):
    history = get_scheme("history")
    assert run(fn, False, False, True, "foo bar baz", "fbb", history) == (0, 9, 70)


def test_ascii_fuzzy_index():
    assert ascii_fuzzy_index("foo bar baz", "fbb", False) == (0, 9)
    assert ascii_fuzzy_index("xFoo", "f", False) == (0, 2)
    assert ascii_fuzzy_index("xFoo", "f", True) == (-1, -1)
    assert ascii_fuzzy_index("abc", "abz", False) == (-1, -1)
    assert ascii_fuzzy_index("abc", "é", False) == (-1, -1)
    assert ascii_fuzzy_index("añb", "ab", False) == (0, 3)


def test_ascii_fuzzy_index_extends_to_last_occurrence():
    assert ascii_fuzzy_index("xxabxxbxx", "ab", False) == (1, 7)
    assert ascii_fuzzy_index("xxabxxBxx", "ab", False) == (1, 7)