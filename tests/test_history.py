import pytest

from fzmatch.history import History, HistoryError

MAX_HISTORY = 50


def test_directory_is_rejected(tmp_path):
    with pytest.raises(HistoryError):
        History(tmp_path, MAX_HISTORY)


def test_uncreatable_file_is_rejected(tmp_path):
    with pytest.raises(HistoryError, match="invalid history file"):
        History(tmp_path / "missing" / "history", MAX_HISTORY)


def test_missing_file_is_created(tmp_path):
    path = tmp_path / "history"
    history = History(path, MAX_HISTORY)
    assert path.exists()
    assert history.lines == [""]
    assert history.current() == ""


def test_append_and_read(tmp_path):
    path = tmp_path / "history"
    path.write_text("")

    history = History(path, MAX_HISTORY)
    for _ in range(MAX_HISTORY + 10):
        history.append("foobar")

    history = History(path, MAX_HISTORY)
    assert len(history.lines) == MAX_HISTORY + 1
    assert history.lines[:MAX_HISTORY] == ["foobar"] * MAX_HISTORY

    history = History(path, MAX_HISTORY)
    history.append("barfoo")
    history.append("")
    history.append("foobarbaz")

    history = History(path, MAX_HISTORY)
    assert len(history.lines) == MAX_HISTORY + 1
    assert history.lines[MAX_HISTORY - 3] == "foobar"
    assert history.lines[MAX_HISTORY - 2] == "barfoo"
    assert history.lines[MAX_HISTORY - 1] == "foobarbaz"


def test_navigation_and_override(tmp_path):
    path = tmp_path / "history"
    path.write_text("a\nb\n")
    history = History(path, MAX_HISTORY)

    assert history.current() == ""
    assert history.previous() == "b"
    assert history.previous() == "a"
    assert history.previous() == "a"
    assert history.next() == "b"

    history.override("B")
    assert history.current() == "B"
    assert history.lines[1] == "b"

    assert history.next() == ""
    history.override("x")
    assert history.current() == "x"
    assert history.next() == "x"
    assert history.previous() == "B"


def test_override_is_not_written(tmp_path):
    path = tmp_path / "history"
    path.write_text("a\n")
    history = History(path, MAX_HISTORY)
    history.previous()
    history.override("changed")
    assert path.read_text() == "a\n"