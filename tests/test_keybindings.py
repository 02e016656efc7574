"""Tests for sutra.tui.keybindings -- text view keybindings manager."""

from __future__ import annotations

from sutra.tui.keybindings import (
    DEFAULT_TEXT_VIEW_KEYBINDINGS,
    TextViewKeybindingsManager,
    get_text_view_keybindings,
    set_text_view_keybindings,
)


# ---------------------------------------------------------------------------
# DEFAULT_TEXT_VIEW_KEYBINDINGS constant
# ---------------------------------------------------------------------------


class TestDefaultTextViewKeybindings:
    """DEFAULT_TEXT_VIEW_KEYBINDINGS has the expected shape and actions."""

    def test_has_navigation_actions(self):
        for action in [
            "cursorUp", "cursorDown", "cursorLeft", "cursorRight",
            "cursorLineStart", "cursorLineEnd", "pageUp", "pageDown",
        ]:
            assert action in DEFAULT_TEXT_VIEW_KEYBINDINGS, f"Missing action: {action}"

    def test_has_search_actions(self):
        for action in [
            "searchStart", "searchNext", "searchPrevious",
            "searchConfirm", "searchCancel",
        ]:
            assert action in DEFAULT_TEXT_VIEW_KEYBINDINGS, f"Missing action: {action}"

    def test_search_start_includes_slash(self):
        assert DEFAULT_TEXT_VIEW_KEYBINDINGS["searchStart"] == ["ctrl+f", "/"]

    def test_backspace_and_delete_both_delete_backward(self):
        assert DEFAULT_TEXT_VIEW_KEYBINDINGS["deleteCharBackward"] == ["backspace", "delete"]


# ---------------------------------------------------------------------------
# TextViewKeybindingsManager
# ---------------------------------------------------------------------------


class TestTextViewKeybindingsManager:
    def test_default_construction(self):
        mgr = TextViewKeybindingsManager()
        assert mgr.get_keys("save") == ["ctrl+s"]

    def test_multi_key_action(self):
        mgr = TextViewKeybindingsManager()
        assert mgr.get_keys("searchNext") == ["down", "ctrl+n"]

    def test_unknown_action_returns_empty(self):
        mgr = TextViewKeybindingsManager()
        assert mgr.get_keys("nonExistentAction") == []  # type: ignore[arg-type]
        assert mgr.matches("\r", "nonExistentAction") is False  # type: ignore[arg-type]

    def test_override_replaces_keys(self):
        mgr = TextViewKeybindingsManager(config={"save": "ctrl+w"})
        assert mgr.matches("\x17", "save") is True
        assert mgr.matches("\x13", "save") is False

    def test_override_preserves_other_defaults(self):
        mgr = TextViewKeybindingsManager(config={"save": "ctrl+w"})
        assert mgr.matches("\x06", "searchStart") is True

    def test_set_config_with_list(self):
        mgr = TextViewKeybindingsManager()
        mgr.set_config({"searchCancel": ["escape", "ctrl+c"]})
        assert mgr.matches("\x1b", "searchCancel") is True
        assert mgr.matches("\x03", "searchCancel") is True


class TestTextViewKeybindingsMatches:
    """Raw terminal bytes routed through the manager to actions."""

    def test_slash_starts_search(self):
        assert TextViewKeybindingsManager().matches("/", "searchStart") is True

    def test_ctrl_f_starts_search(self):
        assert TextViewKeybindingsManager().matches("\x06", "searchStart") is True

    def test_kitty_ctrl_f_starts_search(self):
        assert TextViewKeybindingsManager().matches("\x1b[102;5u", "searchStart") is True

    def test_down_arrow_is_next_match(self):
        assert TextViewKeybindingsManager().matches("\x1b[B", "searchNext") is True

    def test_ctrl_p_is_previous_match(self):
        assert TextViewKeybindingsManager().matches("\x10", "searchPrevious") is True

    def test_delete_key_deletes_backward(self):
        assert TextViewKeybindingsManager().matches("\x1b[3~", "deleteCharBackward") is True

    def test_ctrl_e_opens_external_editor(self):
        assert TextViewKeybindingsManager().matches("\x05", "openExternalEditor") is True

    def test_page_down(self):
        assert TextViewKeybindingsManager().matches("\x1b[6~", "pageDown") is True


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------


class TestGlobalKeybindings:
    def teardown_method(self):
        import sutra.tui.keybindings as kb_module
        kb_module._global_text_view_keybindings = None

    def test_get_returns_same_instance(self):
        assert get_text_view_keybindings() is get_text_view_keybindings()

    def test_set_replaces_global(self):
        custom = TextViewKeybindingsManager(config={"save": "ctrl+w"})
        set_text_view_keybindings(custom)
        assert get_text_view_keybindings() is custom
        assert get_text_view_keybindings().matches("\x17", "save") is True
