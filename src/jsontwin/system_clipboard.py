# system_clipboard.py
# Plain-text system clipboard backends.
#
# A backend exposes two coroutines, read_text() and write_text(text). Reads
# are awaited: a paste suspends until the clipboard answers. The Tk backend
# lives in jsontwin.app next to the widgets it needs.

from jsontwin.errors import ClipboardUnavailable


class MemoryClipboard:
    """In-process clipboard for headless use and tests."""

    def __init__(self, text=None):
        self.text = text

    async def read_text(self):
        if self.text is None:
            raise ClipboardUnavailable("Clipboard is empty or unavailable.")
        return self.text

    async def write_text(self, text):
        self.text = text
