"""Tests for jsontwin/keymap.py module."""

from jsontwin.keymap import command_for_key


class TestCommandForKey:
    """Test shortcut lookup."""

    def test_ctrl_shortcuts(self):
        assert [command_for_key(k, ctrl=True) for k in "cxvzy"] == [
            "COPY", "CUT", "PASTE", "UNDO", "REDO",
        ]

    def test_ctrl_ignores_case(self):
        assert command_for_key("Z", ctrl=True) == "UNDO"

    def test_delete_key(self):
        assert command_for_key("Delete") == "DELETE_SELECTION"

    def test_plain_letters_unbound(self):
        assert command_for_key("c") is None
        assert command_for_key("q", ctrl=True) is None

    def test_text_field_swallows_everything(self):
        assert command_for_key("v", ctrl=True, in_text_field=True) is None
        assert command_for_key("Delete", in_text_field=True) is None
