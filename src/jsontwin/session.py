# session.py
# Editor state and the reducer that applies every command to it.
#
# The state is a plain dict and is never mutated: reducer(state, action)
# returns a new one. Edits either publish a new document together with the
# history snapshot of the old one, or leave the document untouched and report
# the error in the status line.

import logging

from jsontwin import clipboard, document, history, selection
from jsontwin.errors import REJECTIONS, JsonEditError
from jsontwin.reorder import reorder
from jsontwin.text import compact, parse_document_text, pretty

logger = logging.getLogger(__name__)


SAMPLE_DOC = {
    "name": "Crimson Voyager",
    "version": "1.0.0",
    "features": ["json-editor", "tree-view", "shadcn-ui"],
    "settings": {
        "theme": "dark",
        "notifications": True,
        "retryCount": 3,
    },
}

EDIT_ACTIONS = (
    "SET_VALUE", "APPLY_EDIT", "ADD_CHILD", "RENAME_KEY", "RETYPE",
    "DELETE_NODE", "DELETE_SELECTION", "REORDER", "PASTE",
)


def initial_state(doc, history_limit=0, indent=2):
    return {
        "doc":              doc,
        "text":             pretty(doc, indent=indent),
        "text_error":       None,
        "selected_ids":     frozenset(),
        "last_selected_id": None,
        "cut_ids":          frozenset(),
        "past":             (),
        "future":           (),
        "history_limit":    history_limit,
        "indent":           indent,
        "status_validity":  "loaded",
        "status_error":     "",
    }

def flat_order(state):
    return selection.flatten_document(state["doc"])


# ----------------------------
# reducer helpers
# ----------------------------

def _same(a, b):
    # == would equate 1, 1.0 and true, and ignore key order
    return compact(a) == compact(b)

def _publish(state, doc, validity):
    sel, last = selection.prune(doc, state["selected_ids"], state["last_selected_id"])
    return {**state,
        "doc": doc, "text": pretty(doc, indent=state["indent"]), "text_error": None,
        "selected_ids": sel, "last_selected_id": last, "cut_ids": frozenset(),
        "status_validity": validity, "status_error": "",
    }

def _commit(state, doc, validity):
    if doc is state["doc"]:
        return {**state, "status_validity": "unchanged", "status_error": ""}
    past, future = history.record(state["past"], state["future"], state["doc"],
                                  limit=state["history_limit"])
    return _publish({**state, "past": past, "future": future}, doc, validity)

def _fail(state, action, err):
    if isinstance(err, REJECTIONS):
        logger.info("%s rejected: %s", action["type"], err.message)
        validity = "rejected"
    else:
        logger.warning("%s failed: %s", action["type"], err.message)
        validity = "error"
    return {**state, "status_validity": validity, "status_error": err.message}

def _edit(state, action):
    t = action["type"]
    doc = state["doc"]
    if t == "SET_VALUE":
        return document.set_value(doc, action["node_id"], action["value"])
    if t == "APPLY_EDIT":
        return document.apply_edit(doc, action["node_id"], action.get("key"),
                                   action["value_type"], action.get("text", ""))
    if t == "ADD_CHILD":
        return document.add_child(doc, action["parent_id"], action.get("key"),
                                  action["value_type"], action.get("text", ""))
    if t == "RENAME_KEY":
        return document.rename_key(doc, action["node_id"], action["key"])
    if t == "RETYPE":
        return document.retype(doc, action["node_id"], action["value_type"])
    if t == "DELETE_NODE":
        return document.delete_node(doc, action["node_id"])
    if t == "DELETE_SELECTION":
        return document.delete_nodes(doc, selection.ordered(state["selected_ids"], flat_order(state)))
    if t == "REORDER":
        return reorder(doc, action["source_id"], action["target_id"])
    if t == "PASTE":
        return clipboard.paste(doc, state["last_selected_id"], action["text"], state["cut_ids"])
    raise ValueError(f"Not an edit action: {t}")


# ----------------------------
# reducer
# ----------------------------

def reducer(state, action):
    t = action["type"]
    if t == "LOAD_DOC":
        return initial_state(action["doc"], history_limit=state["history_limit"],
                             indent=state["indent"])

    if t in EDIT_ACTIONS:
        if t == "DELETE_SELECTION" and not state["selected_ids"]:
            return state
        try:
            doc = _edit(state, action)
        except JsonEditError as e:
            return _fail(state, action, e)
        s = _commit(state, doc, validity="pasted" if t == "PASTE" else "edited")
        if t == "DELETE_SELECTION":
            s["selected_ids"], s["last_selected_id"] = selection.clear()
        return s

    if t == "EDIT_TEXT":
        text = action["text"]
        obj, err = parse_document_text(text)
        if err:
            return {**state, "text": text, "text_error": err,
                    "status_validity": "INVALID", "status_error": err}
        if _same(obj, state["doc"]):
            return {**state, "text": text, "text_error": None,
                    "status_validity": "valid", "status_error": ""}
        s = _commit(state, obj, validity="valid")
        s["text"] = text
        return s

    if t in ("UNDO", "REDO"):
        step = history.undo if t == "UNDO" else history.redo
        past, future, doc = step(state["past"], state["future"], state["doc"])
        if doc is None:
            return {**state, "status_validity": "unchanged",
                    "status_error": f"Nothing to {t.lower()}."}
        return _publish({**state, "past": past, "future": future}, doc,
                        validity="undone" if t == "UNDO" else "redone")

    if t == "CLICK":
        sel, last = selection.click(state["selected_ids"], state["last_selected_id"],
                                    action["node_id"], action.get("modifiers", ()),
                                    flat_order(state))
        return {**state, "selected_ids": sel, "last_selected_id": last}
    if t == "CLEAR_SELECTION":
        sel, last = selection.clear()
        return {**state, "selected_ids": sel, "last_selected_id": last}

    if t == "COPY":
        if not state["selected_ids"]:
            return {**state, "cut_ids": frozenset(), "status_error": "Nothing selected to copy."}
        return {**state, "cut_ids": frozenset(),
                "status_validity": "copied", "status_error": ""}
    if t == "CUT":
        if not state["selected_ids"]:
            return {**state, "status_error": "Nothing selected to cut."}
        return {**state, "cut_ids": state["selected_ids"],
                "status_validity": "cut", "status_error": ""}

    if t == "SET_STATUS":
        s = dict(state)
        if action.get("validity") is not None:
            s["status_validity"] = action["validity"]
        if action.get("error") is not None:
            s["status_error"] = action["error"]
        return s
    return state
