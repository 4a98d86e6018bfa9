# editor.py
# Runs commands against the session one at a time.
#
# Paste has to wait for the system clipboard. Commands go through a single
# lock, so a later command queues behind a pending paste instead of landing
# between its read and its apply.

import asyncio
import logging

from jsontwin import clipboard
from jsontwin.errors import ClipboardUnavailable, JsonEditError
from jsontwin.session import flat_order, reducer

logger = logging.getLogger(__name__)


class Editor:
    def __init__(self, state, system_clipboard):
        self.state = state
        self.clipboard = system_clipboard
        self._lock = asyncio.Lock()
        self._listeners = []

    def subscribe(self, fn):
        """fn(old_state, new_state, action) runs after every command."""
        self._listeners.append(fn)

    async def execute(self, action):
        async with self._lock:
            t = action["type"]
            if t in ("COPY", "CUT"):
                try:
                    await self._write_selection()
                except JsonEditError as e:
                    logger.warning("%s aborted: %s", t, e.message)
                    action = {"type": "SET_STATUS", "validity": "error", "error": e.message}
            elif t == "PASTE" and "text" not in action:
                try:
                    text = await self.clipboard.read_text()
                except ClipboardUnavailable as e:
                    logger.warning("Paste aborted: %s", e.message)
                    action = {"type": "SET_STATUS", "validity": "error", "error": e.message}
                else:
                    action = {**action, "text": text}
            self._apply(action)
            return self.state

    async def _write_selection(self):
        s = self.state
        text = clipboard.copy_text(s["doc"], s["selected_ids"], flat_order(s), indent=s["indent"])
        if text is not None:
            await self.clipboard.write_text(text)

    def _apply(self, action):
        old = self.state
        new = reducer(old, action)
        self.state = new
        for fn in self._listeners:
            fn(old, new, action)
