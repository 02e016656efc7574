"""Text view keybindings manager."""

from __future__ import annotations

from typing import Literal

from sutra.tui.keys import KeyId, matches_key

TextViewAction = Literal[
    # Cursor movement
    "cursorUp",
    "cursorDown",
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    "pageUp",
    "pageDown",
    # Editing
    "deleteCharBackward",
    "newLine",
    # Host callbacks
    "save",
    "openExternalEditor",
    # Search
    "searchStart",
    "searchNext",
    "searchPrevious",
    "searchConfirm",
    "searchCancel",
]

TextViewKeybindingsConfig = dict[TextViewAction, KeyId | list[KeyId]]

DEFAULT_TEXT_VIEW_KEYBINDINGS: dict[TextViewAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorUp": "up",
    "cursorDown": "down",
    "cursorLeft": "left",
    "cursorRight": "right",
    "cursorLineStart": "home",
    "cursorLineEnd": "end",
    "pageUp": "pageUp",
    "pageDown": "pageDown",
    # Editing
    "deleteCharBackward": ["backspace", "delete"],
    "newLine": "enter",
    # Host callbacks
    "save": "ctrl+s",
    "openExternalEditor": "ctrl+e",
    # Search
    "searchStart": ["ctrl+f", "/"],
    "searchNext": ["down", "ctrl+n"],
    "searchPrevious": ["up", "ctrl+p"],
    "searchConfirm": "enter",
    "searchCancel": "escape",
}


class TextViewKeybindingsManager:
    """Maps text view actions to key identifiers, with user overrides."""

    def __init__(
        self, config: TextViewKeybindingsConfig | None = None
    ) -> None:
        self._action_to_keys: dict[TextViewAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: TextViewKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_TEXT_VIEW_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: TextViewAction) -> bool:
        """Check if input matches a specific action."""
        keys = self._action_to_keys.get(action)
        if not keys:
            return False
        return any(matches_key(data, key) for key in keys)

    def get_keys(self, action: TextViewAction) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: TextViewKeybindingsConfig) -> None:
        self._build_maps(config)


_global_text_view_keybindings: TextViewKeybindingsManager | None = None


def get_text_view_keybindings() -> TextViewKeybindingsManager:
    global _global_text_view_keybindings
    if _global_text_view_keybindings is None:
        _global_text_view_keybindings = TextViewKeybindingsManager()
    return _global_text_view_keybindings


def set_text_view_keybindings(manager: TextViewKeybindingsManager) -> None:
    global _global_text_view_keybindings
    _global_text_view_keybindings = manager
