# keymap.py
# Keyboard shortcuts for the tree


CTRL_KEYS = {
    "c": "COPY",
    "x": "CUT",
    "v": "PASTE",
    "z": "UNDO",
    "y": "REDO",
}

PLAIN_KEYS = {
    "Delete": "DELETE_SELECTION",
}


def command_for_key(keysym, ctrl=False, in_text_field=False):
    """Returns the action type bound to a key press, or None.

    Nothing fires while focus is in a text entry; the widget's own editing
    keys win there. ctrl means Ctrl or Cmd.
    """
    if in_text_field:
        return None
    if ctrl:
        return CTRL_KEYS.get(keysym.lower())
    return PLAIN_KEYS.get(keysym)
