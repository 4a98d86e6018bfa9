"""Tests for jsontwin/editor.py module."""

import asyncio
import logging

from jsontwin.editor import Editor
from jsontwin.session import initial_state
from jsontwin.system_clipboard import MemoryClipboard


class SlowClipboard:
    """Clipboard whose reads block until released."""

    def __init__(self, text):
        self.text = text
        self.release = asyncio.Event()

    async def read_text(self):
        await self.release.wait()
        return self.text

    async def write_text(self, text):
        self.text = text


def click(node_id):
    return {"type": "CLICK", "node_id": node_id, "modifiers": []}


class TestClipboardCommands:
    """Test commands that talk to the system clipboard."""

    def test_copy_writes_selection(self):
        clip = MemoryClipboard()
        editor = Editor(initial_state({"a": 1, "b": [2]}), clip)

        async def scenario():
            await editor.execute(click("root.b"))
            await editor.execute({"type": "COPY"})

        asyncio.run(scenario())
        assert clip.text == '{\n  "b": [\n    2\n  ]\n}'
        assert editor.state["status_validity"] == "copied"

    def test_copy_without_selection_leaves_clipboard(self):
        clip = MemoryClipboard("old")
        editor = Editor(initial_state({"a": 1}), clip)
        asyncio.run(editor.execute({"type": "COPY"}))
        assert clip.text == "old"

    def test_cut_and_paste_round_trip(self):
        clip = MemoryClipboard()
        editor = Editor(initial_state([1, 2, 3]), clip)

        async def scenario():
            await editor.execute(click("root.0"))
            await editor.execute({"type": "CUT"})
            await editor.execute(click("root.2"))
            return await editor.execute({"type": "PASTE"})

        state = asyncio.run(scenario())
        assert clip.text == "[\n  1\n]"
        assert state["doc"] == [2, 3, 1]

    def test_unresolvable_selection_reported(self, caplog):
        clip = MemoryClipboard("old")
        editor = Editor(initial_state({"a.b": 1}), clip)

        async def scenario():
            await editor.execute(click("root.a.b"))
            return await editor.execute({"type": "COPY"})

        with caplog.at_level(logging.WARNING, logger="jsontwin.editor"):
            state = asyncio.run(scenario())
        assert clip.text == "old"
        assert state["doc"] == {"a.b": 1}
        assert state["status_validity"] == "error"
        assert state["status_error"]
        assert "COPY aborted" in caplog.text

    def test_paste_with_empty_clipboard(self):
        editor = Editor(initial_state({"a": 1}), MemoryClipboard())

        async def scenario():
            await editor.execute(click("root"))
            return await editor.execute({"type": "PASTE"})

        state = asyncio.run(scenario())
        assert state["doc"] == {"a": 1}
        assert state["status_error"] == "Clipboard is empty or unavailable."

    def test_explicit_text_skips_clipboard(self):
        editor = Editor(initial_state({"a": 1}), MemoryClipboard())

        async def scenario():
            await editor.execute(click("root"))
            return await editor.execute({"type": "PASTE", "text": '{"b": 2}'})

        assert asyncio.run(scenario())["doc"] == {"a": 1, "b": 2}


class TestSingleWriter:
    """Test that commands never interleave with a pending paste."""

    def test_edit_waits_for_pending_paste(self):
        seen = []

        async def scenario():
            clip = SlowClipboard("[9]")
            editor = Editor(initial_state([1, 2]), clip)
            editor.subscribe(lambda old, new, action: seen.append(action["type"]))
            await editor.execute(click("root.0"))

            paste = asyncio.create_task(editor.execute({"type": "PASTE"}))
            await asyncio.sleep(0)
            edit = asyncio.create_task(
                editor.execute({"type": "SET_VALUE", "node_id": "root.1", "value": 7}))
            await asyncio.sleep(0)
            assert editor.state["doc"] == [1, 2]

            clip.release.set()
            await asyncio.gather(paste, edit)
            return editor.state

        state = asyncio.run(scenario())
        assert seen == ["CLICK", "PASTE", "SET_VALUE"]
        assert state["doc"] == [1, 7, 2]
        assert state["past"] == ([1, 2], [1, 9, 2])

    def test_listener_sees_old_and_new(self):
        calls = []
        editor = Editor(initial_state({"a": 1}), MemoryClipboard())
        editor.subscribe(lambda old, new, action: calls.append((old["doc"], new["doc"])))
        asyncio.run(editor.execute({"type": "SET_VALUE", "node_id": "root.a", "value": 2}))
        assert calls == [({"a": 1}, {"a": 2})]
