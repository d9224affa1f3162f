"""Parsing of ANSI escape sequences into colour and attribute spans."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import IntFlag


class Attr(IntFlag):
    """Text attributes carried by an ANSI state."""

    BOLD = 1
    DIM = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    BLINK = 1 << 4
    REVERSE = 1 << 6
    STRIKE_THROUGH = 1 << 7
    BOLD_FORCE = 1 << 10


_NO_ATTR = Attr(0)


@dataclass(frozen=True)
class Url:
    """A hyperlink set by an OSC 8 sequence."""

    uri: str
    params: str = ""


@dataclass(frozen=True)
class AnsiState:
    """Colours and attributes in effect at a point of the text.

    Colours are -1 for the default, 0-255 for palette colours, or
    ``1 << 24 | rgb`` for true colours.
    """

    fg: int = -1
    bg: int = -1
    attr: Attr = _NO_ATTR
    lbg: int = -1
    url: Url | None = None

    def colored(self) -> bool:
        """Whether the state differs from the terminal's default."""
        return (
            self.fg != -1
            or self.bg != -1
            or self.attr > 0
            or self.lbg >= 0
            or self.url is not None
        )

    def to_ansi_string(self) -> str:
        """Return the escape sequence that re-establishes this state."""
        if not self.colored():
            return ""
        parts = []
        if self.attr & (Attr.BOLD | Attr.BOLD_FORCE):
            parts.append("1;")
        for flag, code in (
            (Attr.DIM, "2;"),
            (Attr.ITALIC, "3;"),
            (Attr.UNDERLINE, "4;"),
            (Attr.BLINK, "5;"),
            (Attr.REVERSE, "7;"),
            (Attr.STRIKE_THROUGH, "9;"),
        ):
            if self.attr & flag:
                parts.append(code)
        parts.append(_color_code(self.fg, 30))
        parts.append(_color_code(self.bg, 40))
        sequence = "\x1b[" + "".join(parts).removesuffix(";") + "m"
        if self.url is not None:
            sequence = (
                f"\x1b]8;{self.url.params};{self.url.uri}\x1b\\"
                f"{sequence}\x1b]8;;\x1b"
            )
        return sequence


@dataclass
class AnsiOffset:
    """A span of characters ``[start, end)`` drawn with ``color``."""

    start: int
    end: int
    color: AnsiState


def _same_state(state: AnsiState, other: AnsiState | None) -> bool:
    if other is None:
        return not state.colored()
    return state == other


def _color_code(color: int, offset: int) -> str:
    if color == -1:
        code = str(offset + 9)
    elif color < 8:
        code = str(offset + color)
    elif color < 16:
        code = str(offset - 30 + 90 + color - 8)
    elif color < 256:
        code = f"{offset + 8};5;{color}"
    elif color >= 1 << 24:
        red = (color >> 16) & 0xFF
        green = (color >> 8) & 0xFF
        blue = color & 0xFF
        code = f"{offset + 8};2;{red};{green};{blue}"
    else:
        code = ""
    return code + ";"


def _is_print(char: str) -> bool:
    return " " <= char <= "~"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _match_operating_system_command(text: str, base: int, pos: int) -> int:
    # `\x1b][0-9][;:][[:print:]]+(?:\x1b\\\\|\x07)`, from the first
    # printable character after the separator.
    size = len(text)
    i = pos
    while i < size and _is_print(text[i]):
        i += 1
    if i < size:
        if text[i] == "\x07":
            return i + 1
        if text[i] == "\x1b" and i < size - 1 and text[i + 1] == "\\":
            return i + 2
    if i < size and text[base:i + 1] == "\x1b]8;;\x1b":
        return i + 1
    return -1


def _match_control_sequence(text: str, base: int) -> int:
    # `\x1b[\\[()][0-9;:?]*[a-zA-Z@]`, after the two-character prefix.
    for i in range(base + 2, len(text)):
        char = text[i]
        if _is_digit(char) or char in ";:?":
            continue
        if "a" <= char <= "z" or "A" <= char <= "Z" or char == "@":
            return i + 1
        return -1
    return -1


def _next_sequence(text: str, start: int) -> tuple[int, int] | None:
    size = len(text)
    for i in range(start, size):
        char = text[i]
        if char == "\x08":
            # `.\x08`
            if i > start and text[i - 1] != "\n":
                return i - 1, i + 1
        elif char == "\x1b":
            if i + 2 < size and text[i + 1] in "\\[()":
                end = _match_control_sequence(text, i)
                if end != -1:
                    return i, end
            if i + 5 < size and text[i + 1] == "]":
                j = i + 2
                while j < size and _is_digit(text[j]):
                    j += 1
                if (
                    j > i + 2
                    and j + 1 < size
                    and text[j] in ";:"
                    and _is_print(text[j + 1])
                ):
                    end = _match_operating_system_command(text, i, j + 2)
                    if end != -1:
                        return i, end
            if i + 1 < size and text[i + 1] != "\n":
                return i, i + 2
        elif char in "\x0e\x0f":
            return i, i + 1
    return None


def next_ansi_escape_sequence(text: str) -> tuple[int, int] | None:
    """Return ``(start, end)`` of the first escape sequence in ``text``.

    Recognises CSI sequences, OSC sequences, two-character escapes,
    shift-in/shift-out and backspace overstrikes. Returns ``None`` when
    there is none.
    """
    return _next_sequence(text, 0)


def parse_ansi_code(text: str) -> tuple[int, str]:
    """Split off the first numeric parameter of an SGR parameter list.

    Returns the number, or -1 if it is empty or not a plain non-negative
    integer, and the rest of the list.
    """
    remaining = ""
    split = text.find(";")
    if split < 0:
        split = text.find(":")
    if split >= 0:
        remaining = text[split + 1:]
        text = text[:split]
    if not text or not all(_is_digit(char) for char in text):
        return -1, remaining
    return int(text), remaining


def _without(attr: Attr, flags: Attr) -> Attr:
    return Attr(attr & ~int(flags))


def interpret_code(ansi_code: str, prev_state: AnsiState | None) -> AnsiState:
    """Apply the escape sequence ``ansi_code`` to ``prev_state``."""
    state = prev_state if prev_state is not None else AnsiState()

    if not (ansi_code.startswith("\x1b[") and ansi_code.endswith("m")):
        if prev_state is not None and ansi_code.endswith("0K"):
            return replace(state, lbg=prev_state.bg)
        if ansi_code.startswith("\x1b]8;") and ansi_code.endswith(
            ("\x1b\\", "\a")
        ):
            terminator = 1 if ansi_code.endswith("\a") else 2
            if len(ansi_code) == 5 + terminator and ansi_code[4] == ";":
                return replace(state, url=None)
            params_end = ansi_code.find(";", 4)
            if params_end >= 0:
                url = Url(
                    uri=ansi_code[params_end + 1:len(ansi_code) - terminator],
                    params=ansi_code[4:params_end],
                )
                return replace(state, url=url)
        return state

    if len(ansi_code) <= 3:
        return replace(state, fg=-1, bg=-1, attr=_NO_ATTR)

    colors = [state.fg, state.bg]
    attr = Attr(state.attr)
    target = 0
    mode = 0
    count = 0
    params = ansi_code[2:-1]
    while params:
        num, params = parse_ansi_code(params)
        if num == -1:
            continue
        count += 1
        if mode == 0:
            if num == 38:
                target, mode = 0, 1
            elif num == 48:
                target, mode = 1, 1
            elif num == 39:
                colors[0] = -1
            elif num == 49:
                colors[1] = -1
            elif num == 1:
                attr |= Attr.BOLD
            elif num == 2:
                attr |= Attr.DIM
            elif num == 3:
                attr |= Attr.ITALIC
            elif num == 4:
                attr |= Attr.UNDERLINE
            elif num == 5:
                attr |= Attr.BLINK
            elif num == 7:
                attr |= Attr.REVERSE
            elif num == 9:
                attr |= Attr.STRIKE_THROUGH
            elif num == 22:
                attr = _without(attr, Attr.BOLD | Attr.DIM)
            elif num == 23:
                attr = _without(attr, Attr.ITALIC)
            elif num == 24:
                attr = _without(attr, Attr.UNDERLINE)
            elif num == 25:
                attr = _without(attr, Attr.BLINK)
            elif num == 27:
                attr = _without(attr, Attr.REVERSE)
            elif num == 29:
                attr = _without(attr, Attr.STRIKE_THROUGH)
            elif num == 0:
                colors = [-1, -1]
                attr = _NO_ATTR
            elif 30 <= num <= 37:
                colors[0] = num - 30
            elif 40 <= num <= 47:
                colors[1] = num - 40
            elif 90 <= num <= 97:
                colors[0] = num - 90 + 8
            elif 100 <= num <= 107:
                colors[1] = num - 100 + 8
        elif mode == 1:
            if num == 2:
                mode = 10
            elif num == 5:
                mode = 2
            else:
                mode = 0
        elif mode == 2:
            colors[target] = num
            mode = 0
        elif mode == 10:
            colors[target] = (1 << 24) | (num << 16)
            mode = 11
        elif mode == 11:
            colors[target] |= num << 8
            mode = 12
        elif mode == 12:
            colors[target] |= num
            mode = 0

    if count == 0:
        colors = [-1, -1]
        attr = _NO_ATTR
    if mode > 0:
        colors[target] = -1
    return replace(state, fg=colors[0], bg=colors[1], attr=attr)


def extract_color(
    text: str,
    state: AnsiState | None,
    proc: Callable[[str, AnsiState | None], bool] | None = None,
) -> tuple[str, list[AnsiOffset], AnsiState | None]:
    """Strip escape sequences from ``text`` and collect coloured spans.

    ``state`` is the state carried over from the previous line. ``proc``,
    if given, is called with each piece of plain text and the state in
    effect; returning False stops the scan with ``("", [], None)``.
    Returns the plain text, the coloured spans in character offsets and
    the state at the end of the text.
    """
    offsets: list[AnsiOffset] = []
    if state is not None:
        offsets.append(AnsiOffset(0, 0, state))

    output: list[str] = []
    prev_idx = 0
    char_count = 0
    idx = 0
    while idx < len(text):
        found = _next_sequence(text, idx)
        if found is None:
            break
        start, idx = found

        prev = text[prev_idx:start]
        if proc is not None and not proc(prev, state):
            return "", [], None
        prev_idx = idx

        if prev:
            char_count += len(prev)
            output.append(prev)

        new_state = interpret_code(text[start:idx], state)
        if not _same_state(new_state, state):
            if state is not None:
                offsets[-1].end = char_count
            if new_state.colored():
                state = new_state
                offsets.append(AnsiOffset(char_count, char_count, new_state))
            else:
                state = None

    if prev_idx == 0:
        rest = trimmed = text
    else:
        rest = text[prev_idx:]
        output.append(rest)
        trimmed = "".join(output)
    if proc is not None:
        proc(rest, state)
    if offsets and rest and state is not None:
        char_count += len(rest)
        offsets[-1].end = char_count
    return trimmed, offsets, state