"""Keyboard input parsing and matching for the text view.

Understands legacy terminal sequences (with xterm-style modifier parameters),
control characters, ESC-prefixed Alt combinations, the kitty keyboard
protocol's ``CSI u`` form and xterm ``modifyOtherKeys``. ``matches_key``
checks raw input against a key identifier such as ``"ctrl+f"`` or
``"pageDown"``; ``parse_key`` goes the other way.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Caps lock / num lock bits reported by kitty
LOCK_MASK = 64 + 128

CODEPOINTS: dict[str, int] = {
    "escape": 27,
    "tab": 9,
    "enter": 13,
    "space": 32,
    "backspace": 127,
    "kp_enter": 57414,
}

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
}

# Final byte of ``CSI 1;<mod> X`` sequences
_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# Number of ``CSI <n>;<mod> ~`` sequences
_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    7: "home",
    8: "end",
}

# Kitty functional-key codepoints for the keys above
_KITTY_FUNCTIONAL: dict[int, str] = {
    57417: "left",
    57418: "right",
    57419: "up",
    57420: "down",
    57421: "pageUp",
    57422: "pageDown",
    57423: "home",
    57424: "end",
    57425: "insert",
    57426: "delete",
}

_CODEPOINT_NAMES: dict[int, str] = {
    27: "escape",
    9: "tab",
    13: "enter",
    32: "space",
    127: "backspace",
    8: "backspace",
    57414: "enter",
}

# CSI u format: \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::(\d*))?(?::(\d+))?(?:;(\d+)(?::(\d+))?)?u$"
)
_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHF])$")
_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)(?::(\d+))?~$")
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")


# ---------------------------------------------------------------------------
# Parsed key
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedKey:
    """A decoded key press: base key name plus modifier bitmask."""

    key: str
    modifiers: int = 0
    # 1 = press, 2 = repeat, 3 = release (kitty only)
    event_type: int = 1

    def to_key_id(self) -> KeyId:
        prefix = ""
        if self.modifiers & MODIFIERS["ctrl"]:
            prefix += "ctrl+"
        if self.modifiers & MODIFIERS["shift"]:
            prefix += "shift+"
        if self.modifiers & MODIFIERS["alt"]:
            prefix += "alt+"
        return prefix + self.key


def _decode_modifier(raw: int) -> int:
    return (raw - 1) & ~LOCK_MASK


def _name_for_codepoint(cp: int) -> str | None:
    if cp in _CODEPOINT_NAMES:
        return _CODEPOINT_NAMES[cp]
    if cp in _KITTY_FUNCTIONAL:
        return _KITTY_FUNCTIONAL[cp]
    if cp > 32:
        ch = chr(cp)
        if ch.isprintable():
            return ch.lower()
    return None


def decode_key(data: str) -> ParsedKey | None:  # noqa: C901
    """Decode raw terminal input into a :class:`ParsedKey`, or ``None``."""
    if not data:
        return None

    # --- Kitty CSI u ---
    m = _KITTY_CSI_U_RE.match(data)
    if m:
        name = _name_for_codepoint(int(m.group(1)))
        if name is None:
            return None
        modifiers = _decode_modifier(int(m.group(4))) if m.group(4) else 0
        event_type = int(m.group(5)) if m.group(5) else 1
        return ParsedKey(name, modifiers, event_type)

    # --- modifyOtherKeys: CSI 27;<modifier>;<keycode> ~ ---
    m = _MODIFY_OTHER_KEYS_RE.match(data)
    if m:
        name = _name_for_codepoint(int(m.group(2)))
        if name is None:
            return None
        return ParsedKey(name, _decode_modifier(int(m.group(1))))

    # --- Legacy sequences ---
    if data in LEGACY_KEY_SEQUENCES:
        return ParsedKey(LEGACY_KEY_SEQUENCES[data])

    m = _MODIFIED_LETTER_RE.match(data)
    if m:
        event_type = int(m.group(2)) if m.group(2) else 1
        return ParsedKey(_LETTER_KEYS[m.group(3)], _decode_modifier(int(m.group(1))), event_type)

    m = _MODIFIED_TILDE_RE.match(data)
    if m and int(m.group(1)) in _TILDE_KEYS:
        event_type = int(m.group(3)) if m.group(3) else 1
        return ParsedKey(_TILDE_KEYS[int(m.group(1))], _decode_modifier(int(m.group(2))), event_type)

    if data == "\x1b[Z":
        return ParsedKey("tab", MODIFIERS["shift"])

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return ParsedKey("escape")
    if data in ("\r", "\n"):
        return ParsedKey("enter")
    if data == "\t":
        return ParsedKey("tab")
    if data == " ":
        return ParsedKey("space")
    if data in ("\x7f", "\x08"):
        return ParsedKey("backspace")
    if data == "\x00":
        return ParsedKey("space", MODIFIERS["ctrl"])

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return ParsedKey(chr(ord(data) + ord("a") - 1), MODIFIERS["ctrl"])

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        inner = decode_key(data[1])
        if inner is None:
            return None
        return ParsedKey(inner.key, inner.modifiers | MODIFIERS["alt"])

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        if data.isalpha() and data.isupper():
            return ParsedKey(data.lower(), MODIFIERS["shift"])
        return ParsedKey(data)

    return None


def parse_key_id(key_id: KeyId) -> ParsedKey | None:
    """Split a key identifier like ``"ctrl+shift+a"`` into its components."""
    if not key_id:
        return None

    modifiers = 0
    key_parts: list[str] = []
    for part in key_id.split("+"):
        lower = part.lower()
        if lower in MODIFIERS:
            modifiers |= MODIFIERS[lower]
        else:
            key_parts.append(part)

    key = "+".join(key_parts)
    if not key:
        return None
    if key == "esc":
        key = "escape"
    elif key == "return":
        key = "enter"
    elif len(key) == 1:
        key = key.lower()
    return ParsedKey(key, modifiers)


def matches_key(data: str, key_id: KeyId) -> bool:
    """Return ``True`` if *data* (raw terminal input) is the key *key_id*.

    Releases reported by the kitty protocol never match.
    """
    expected = parse_key_id(key_id)
    actual = decode_key(data)
    if expected is None or actual is None or actual.event_type == 3:
        return False
    return actual.key == expected.key and actual.modifiers == expected.modifiers


def parse_key(data: str) -> KeyId | None:
    """Return the key identifier for raw input, e.g. ``"ctrl+f"``."""
    parsed = decode_key(data)
    return parsed.to_key_id() if parsed is not None else None


def is_printable_input(data: str) -> bool:
    """True for a single printable character, i.e. text the user typed."""
    return len(data) == 1 and data.isprintable()
