# fzmatch

`fzmatch` is the matching core of an interactive fuzzy finder. It scores a
pattern against a line of text. It also provides the pieces a finder needs
around that:

- parsing of ANSI colour sequences
- chunked item storage with a per-chunk query cache
- a query history kept in a file
- helpers for temporary files

## Installation

```
pip install fzmatch
```

The package has no runtime dependencies. To run the tests:

```
pip install "fzmatch[test]"
pytest
```

## Matching

All matchers take the same arguments:

```
(case_sensitive, normalize, forward, text, pattern, with_pos=False, scheme=None)
```

- When `case_sensitive` is false, `pattern` must already be lower case.
- When `normalize` is true, `pattern` must already be folded with
  `fzmatch.normalize.normalize_runes`.
- `forward=False` prefers matches nearer the end of the text.
- `scheme` defaults to the `"default"` scoring scheme.

Each matcher returns a frozen `fzmatch.scoring.MatchResult` with the fields
`start`, `end`, `score` and `positions`. When nothing matched, `start` and
`end` are `-1`.

```python
from fzmatch.fuzzy import fuzzy_match_v1, fuzzy_match_v2
from fzmatch.exact import exact_match_naive, prefix_match, suffix_match
from fzmatch.scoring import get_scheme

result = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True)
print(result.start, result.end, result.score, result.positions)

result = prefix_match(False, False, True, " fooBar", "foo")
print(result.start, result.end)   # 1 4

result = suffix_match(False, False, True, "fooBarbaz ", "baz")
print(result.start, result.end)   # 6 9

path_scheme = get_scheme("path")
result = fuzzy_match_v1(False, False, True, "src/main.go", "smg", False, path_scheme)
```

### Matchers

| Module | Function | Behaviour |
| --- | --- | --- |
| `fzmatch.fuzzy` | `fuzzy_match_v1` | Greedy. Finds the first occurrence and then shortens it. |
| `fzmatch.fuzzy` | `fuzzy_match_v2` | Finds the best-scoring alignment, in which every pattern character must match. |
| `fzmatch.exact` | `exact_match_naive` | Finds the substring occurrence with the best bonus. |
| `fzmatch.exact` | `exact_match_boundary` | Like `exact_match_naive`, but only counts occurrences that lie on word boundaries. |
| `fzmatch.exact` | `prefix_match` | Matches at the start of the text, ignoring leading blanks. |
| `fzmatch.exact` | `suffix_match` | Matches at the end of the text, ignoring trailing blanks. |
| `fzmatch.exact` | `equal_match` | Matches when the text, stripped of surrounding blanks, equals the pattern. |

### Matched positions

Only the fuzzy matchers report `positions`, and only when `with_pos` is true:

- `fuzzy_match_v2` lists them from the last matched character to the first.
- `fuzzy_match_v1` lists them in text order.
- With `fuzzy_match_v2`, `start` is only accurate when positions were
  requested.

The other matchers never report positions.

`fzmatch.fuzzy.ascii_fuzzy_index(text, pattern, case_sensitive)` gives the
range of an ASCII text in which a match is possible. It returns `(-1, -1)`
when no match is possible.

### Scoring schemes

`fzmatch.scoring.get_scheme(name)` accepts `"default"`, `"path"` or
`"history"`. It raises `ValueError` for any other name.

- `"path"` treats the path separator as the delimiter that marks a word
  boundary.
- `"history"` gives the same bonus after blanks and after delimiters.

A `Scheme` exposes:

- `char_class_of(char)`, which returns a `CharClass`
- `bonus_for(prev_class, char_class)`
- `bonus_at(text, idx)`
- `calculate_score(case_sensitive, normalize, text, pattern, sidx, eidx, with_pos)`,
  which returns `(score, positions_or_None)`

### Normalization

`fzmatch.normalize.normalize_rune(char)` folds one accented or variant Latin
letter to its plain letter, for example `"ç"` to `"c"`.
`normalize_runes(text)` does the same for a whole string. Characters with no
mapping are left unchanged.

## ANSI colours

`fzmatch.ansi.extract_color(text, state, proc=None)` strips escape sequences
from a line and returns `(plain_text, offsets, end_state)`:

- `offsets` is a list of `AnsiOffset(start, end, color)` spans, counted in
  characters of the plain text.
- `state` is the `AnsiState` carried over from the previous line, or `None`.
- `proc`, if given, is called with each plain piece of text and the state in
  effect. If it returns false, the scan stops and `("", [], None)` is
  returned.

```python
from fzmatch.ansi import extract_color

text, offsets, state = extract_color("hello \x1b[34;45;1mworld", None)
print(text)                                  # hello world
print(offsets[0].start, offsets[0].end)      # 6 11
print(state.fg, state.bg)                    # 4 5
```

`AnsiState` is a frozen dataclass with the fields `fg`, `bg`, `attr` (an
`Attr` flag set), `lbg` and `url` (a `Url` or `None`).

- `colored()` tells whether the state differs from the default.
- `to_ansi_string()` returns an escape sequence that re-establishes the
  state.

Lower-level helpers are also available:

- `next_ansi_escape_sequence(text)` returns `(start, end)` of the first
  escape sequence, or `None`.
- `parse_ansi_code(text)` splits off the first numeric SGR parameter.
- `interpret_code(ansi_code, prev_state)` applies one sequence to a state.

## Items, chunks and the cache

`fzmatch.item.Item` is one input line, with the fields `text`, `index`,
`orig_text` and `colors`. `as_string(strip_ansi)` returns `orig_text`, with
escape sequences stripped when asked. When there is no `orig_text`, it returns
`text`.

`fzmatch.chunklist.ChunkList(cache, trans)` stores items in `Chunk`s of up to
100 items each.

- `trans` is called with each piece of data. It returns an `Item`, or `None`
  to reject the data.
- `push(data)` adds one piece of data and returns whether it was accepted.
- `clear()` drops every item.
- `snapshot(tail=0)` returns `(chunks, count, changed)`.

With a positive `tail`, `snapshot` keeps only the last `tail` items for good
and retires the dropped chunks from the cache. `count_items(chunks)` totals
the items in a list of chunks.

`fzmatch.cache.ChunkCache` stores result lists per chunk and per query string.
It only caches full chunks, and only lists of at most 20 results.

- `add(chunk, key, results)` stores a list.
- `lookup(chunk, key)` returns the list stored for `key`.
- `search(chunk, key)` returns the results cached for the longest prefix or
  suffix of `key`.
- `retire(*chunks)` drops the entries of the given chunks.
- `clear()` drops every entry.

## History

`fzmatch.history.History(path, max_size)` reads a file of previous queries. If
the file does not exist, it is created.

- `append(line)` records a non-empty query and rewrites the file. At most
  `max_size` entries are kept.
- `previous()` and `next()` move the cursor and return the entry under it.
- `current()` returns the entry under the cursor without moving it.
- `override(text)` changes the entry under the cursor in memory only.

A file that cannot be read or created raises `HistoryError`.

## Temporary files

`fzmatch.tempfiles.write_temporary_file(data, print_sep)` writes the strings
joined by `print_sep`, followed by one more `print_sep`, to a new temporary
file. It returns the file's path, or `None` if no file could be created.

`remove_files(files)` deletes the given files and ignores any that cannot be
removed.

## What this package does not do

`fzmatch` is a library only. It has:

- no command and no interactive screen
- no reader for input streams or directory walks
- no parser for extended search syntax
- no parallel matcher or merger of sorted results
- no preview or command-template handling

A finder built on it has to provide these itself.