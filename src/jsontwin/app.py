# app.py
# JSON Twin Editor: tree view and text view over one document

import asyncio
import logging
import sys
import tkinter as tk
from pathlib import Path
from tkinter import messagebox, ttk

from jsontwin import config
from jsontwin.document import TYPES
from jsontwin.editor import Editor
from jsontwin.errors import ClipboardUnavailable, PathError
from jsontwin.history import can_redo, can_undo
from jsontwin.keymap import command_for_key
from jsontwin.paths import ROOT, last_segment, parent_id, resolve, type_of
from jsontwin.session import SAMPLE_DOC, initial_state
from jsontwin.text import compact, parse_document_text
from jsontwin.tree import build_tree, first_bifurcation_id, label_for

logger = logging.getLogger(__name__)


# ----------------------------
# globals
# ----------------------------

g_widget_state = {
    "id_to_iid":            {},
    "iid_to_id":            {},
    "expanded_ids":         set(),
    "suppress_text_event":  0,
    "drag_source":          None,
    "drag_moved":           0,
    "_iid_counter":         0,
}

widgets = {}

g = {
    "editor": None,
    "loop":   None,
}

_SHIFT = 0x1
_CONTROL = 0x4
_COMMAND = 0x8  # Mod1; Cmd on macOS


class TkClipboard:
    def __init__(self, root):
        self.root = root

    async def read_text(self):
        try:
            return self.root.clipboard_get()
        except tk.TclError as e:
            raise ClipboardUnavailable("Clipboard is empty or unavailable.") from e

    async def write_text(self, text):
        self.root.clipboard_clear()
        self.root.clipboard_append(text)


def run(action):
    return g["loop"].run_until_complete(g["editor"].execute(action))

def state():
    return g["editor"].state


# ----------------------------
# realize sub-functions
# ----------------------------

def _new_iid():
    c = g_widget_state["_iid_counter"] + 1
    g_widget_state["_iid_counter"] = c
    return f"n{c}"

def _remember_expanded_ids():
    g_widget_state["expanded_ids"].clear()
    for iid, node_id in g_widget_state["iid_to_id"].items():
        if widgets["tree"].item(iid, "open"):
            g_widget_state["expanded_ids"].add(node_id)

def _rebuild_tree(doc, expand_to=None):
    """Rebuilds every row; keeps expansion by node id."""
    tree = widgets["tree"]
    _remember_expanded_ids()
    tree.delete(*tree.get_children(""))
    g_widget_state["id_to_iid"].clear()
    g_widget_state["iid_to_id"].clear()

    def rec(parent_iid, node):
        iid = _new_iid()
        tree.insert(parent_iid, "end", iid=iid, text=label_for(node))
        g_widget_state["iid_to_id"][iid] = node["id"]
        g_widget_state["id_to_iid"][node["id"]] = iid
        for child in node.get("children", ()):
            rec(iid, child)

    rec("", build_tree(doc))

    opened = set(g_widget_state["expanded_ids"]) | {ROOT}
    cur = expand_to
    while cur is not None:
        opened.add(cur)
        cur = parent_id(cur)
    for node_id in opened:
        iid = g_widget_state["id_to_iid"].get(node_id)
        if iid:
            tree.item(iid, open=True)

def _sync_tree_marks(s):
    tree = widgets["tree"]
    ids = g_widget_state["id_to_iid"]
    tree.selection_set([ids[i] for i in s["selected_ids"] if i in ids])
    for node_id, iid in ids.items():
        tree.item(iid, tags=("cut",) if node_id in s["cut_ids"] else ())

def set_text(s):
    t = widgets["text"]
    g_widget_state["suppress_text_event"] += 1
    try:
        t.delete("1.0", "end")
        t.insert("1.0", s)
        t.mark_set("insert", "1.0")
        t.see("1.0")
        t.edit_modified(False)
    finally:
        g_widget_state["suppress_text_event"] -= 1

def _refresh_menu_enablement(s):
    edit_menu = widgets["edit_menu"]
    has_sel = bool(s["selected_ids"])
    has_target = s["last_selected_id"] is not None
    # Edit menu indices:
    # 0 Undo
    # 1 Redo
    # 2 separator
    # 3 Cut
    # 4 Copy
    # 5 Paste
    # 6 Delete
    # 7 separator
    # 8 Edit Node
    # 9 Add Child
    # 10 Retype
    edit_menu.entryconfig(0, state=("normal" if can_undo(s["past"]) else "disabled"))
    edit_menu.entryconfig(1, state=("normal" if can_redo(s["future"]) else "disabled"))
    edit_menu.entryconfig(3, state=("normal" if has_sel else "disabled"))
    edit_menu.entryconfig(4, state=("normal" if has_sel else "disabled"))
    edit_menu.entryconfig(5, state=("normal" if has_target else "disabled"))
    edit_menu.entryconfig(6, state=("normal" if has_sel else "disabled"))
    edit_menu.entryconfig(8, state=("normal" if has_target else "disabled"))
    edit_menu.entryconfig(9, state=("normal" if has_target else "disabled"))
    edit_menu.entryconfig(10, state=("normal" if has_target else "disabled"))


# ----------------------------
# realize
# ----------------------------

def realize(old, new, action=None):
    doc_changed = (new["doc"] is not old["doc"])
    t = action["type"] if action else None

    if doc_changed or t == "LOAD_DOC":
        expand_to = first_bifurcation_id(new["doc"]) if t == "LOAD_DOC" else None
        _rebuild_tree(new["doc"], expand_to=expand_to)
        widgets["root"].title(config.window_title(new["doc"]))
    if new["text"] != widgets["text"].get("1.0", "end-1c"):
        set_text(new["text"])

    _sync_tree_marks(new)
    _refresh_menu_enablement(new)
    widgets["status_validity"].configure(text=new["status_validity"])
    widgets["status_error"].configure(text=new["status_error"])
    widgets["status_path"].configure(text=new["last_selected_id"] or "")


# ----------------------------
# event handlers
# ----------------------------

def _modifiers(event):
    mods = []
    if event.state & _SHIFT:
        mods.append("shift")
    if event.state & _CONTROL:
        mods.append("ctrl")
    if sys.platform == "darwin" and event.state & _COMMAND:
        mods.append("meta")
    return mods

def handle_tree_press(event):
    tree = widgets["tree"]
    if "indicator" in tree.identify_element(event.x, event.y):
        return None
    iid = tree.identify_row(event.y)
    g_widget_state["drag_moved"] = 0
    if not iid:
        g_widget_state["drag_source"] = None
        run({"type": "CLEAR_SELECTION"})
        return "break"
    node_id = g_widget_state["iid_to_id"][iid]
    g_widget_state["drag_source"] = node_id
    tree.focus_set()
    run({"type": "CLICK", "node_id": node_id, "modifiers": _modifiers(event)})
    return "break"

def handle_tree_motion(event):
    if g_widget_state["drag_source"] is not None:
        g_widget_state["drag_moved"] = 1

def handle_tree_release(event):
    source = g_widget_state["drag_source"]
    moved = g_widget_state["drag_moved"]
    g_widget_state["drag_source"] = None
    g_widget_state["drag_moved"] = 0
    if source is None or not moved:
        return
    iid = widgets["tree"].identify_row(event.y)
    target = g_widget_state["iid_to_id"].get(iid)
    if target is None or target == source:
        return
    run({"type": "REORDER", "source_id": source, "target_id": target})

def handle_tree_double_click(event):
    iid = widgets["tree"].identify_row(event.y)
    if iid:
        open_edit_dialog(g_widget_state["iid_to_id"][iid], adding=False)
    return "break"

def handle_text_modified(event=None):
    t = widgets["text"]
    if g_widget_state["suppress_text_event"] or not t.edit_modified():
        return
    t.edit_modified(False)
    run({"type": "EDIT_TEXT", "text": t.get("1.0", "end-1c")})

def handle_key(event):
    focus = widgets["root"].focus_get()
    in_text = isinstance(focus, (tk.Text, tk.Entry, ttk.Entry, ttk.Combobox))
    ctrl = bool(event.state & _CONTROL) or (sys.platform == "darwin" and bool(event.state & _COMMAND))
    cmd = command_for_key(event.keysym, ctrl=ctrl, in_text_field=in_text)
    if cmd is None:
        return None
    run({"type": cmd})
    return "break"

def command(action_type):
    return lambda: run({"type": action_type})


# ----------------------------
# edit dialog
# ----------------------------

def open_edit_dialog(node_id, adding):
    """Edit an existing node, or add a child under it."""
    doc = state()["doc"]
    try:
        value = resolve(doc, node_id)
    except PathError as e:
        messagebox.showerror("Edit", e.message)
        return

    parent = resolve(doc, parent_id(node_id)) if parent_id(node_id) else None
    if adding:
        key, vtype, text = "", "string", ""
        key_editable = isinstance(value, dict)
    else:
        key = last_segment(node_id)
        vtype = type_of(value)
        text = value if isinstance(value, str) else compact(value)
        key_editable = isinstance(parent, dict)

    w = tk.Toplevel(widgets["root"])
    w.title("Add New Item" if adding else "Edit Item")
    w.transient(widgets["root"])

    key_var = tk.StringVar(value=key)
    type_var = tk.StringVar(value=vtype)
    value_var = tk.StringVar(value=text)

    ttk.Label(w, text="Key").grid(row=0, column=0, sticky="e", padx=6, pady=4)
    key_entry = ttk.Entry(w, textvariable=key_var, width=40)
    key_entry.grid(row=0, column=1, sticky="ew", padx=6, pady=4)
    if not key_editable:
        key_entry.state(["disabled"])

    ttk.Label(w, text="Type").grid(row=1, column=0, sticky="e", padx=6, pady=4)
    ttk.Combobox(w, textvariable=type_var, values=TYPES, state="readonly").grid(
        row=1, column=1, sticky="ew", padx=6, pady=4)

    ttk.Label(w, text="Value").grid(row=2, column=0, sticky="e", padx=6, pady=4)
    ttk.Entry(w, textvariable=value_var, width=40).grid(row=2, column=1, sticky="ew", padx=6, pady=4)

    error = ttk.Label(w, text="", foreground="#f44747")
    error.grid(row=3, column=0, columnspan=2, sticky="w", padx=6)

    def save():
        if adding:
            action = {"type": "ADD_CHILD", "parent_id": node_id, "key": key_var.get().strip(),
                      "value_type": type_var.get(), "text": value_var.get()}
        else:
            action = {"type": "APPLY_EDIT", "node_id": node_id, "key": key_var.get().strip(),
                      "value_type": type_var.get(), "text": value_var.get()}
        s = run(action)
        if s["status_validity"] in ("error", "rejected"):
            error.configure(text=s["status_error"])
            return
        w.destroy()

    ttk.Button(w, text="Save changes", command=save).grid(row=4, column=1, sticky="e", padx=6, pady=6)
    w.bind("<Return>", lambda e: save())
    w.bind("<Escape>", lambda e: w.destroy())
    w.grid_columnconfigure(1, weight=1)

def edit_selected(adding):
    node_id = state()["last_selected_id"]
    if node_id is not None:
        open_edit_dialog(node_id, adding=adding)

def retype_selected(value_type):
    node_id = state()["last_selected_id"]
    if node_id is not None:
        run({"type": "RETYPE", "node_id": node_id, "value_type": value_type})


# ----------------------------
# ui construction
# ----------------------------

def setup_gui():
    root = widgets["root"]
    root.option_add("*tearOff", 0)
    root.grid_rowconfigure(0, weight=1)
    root.grid_columnconfigure(0, weight=1)

    # ---- menubar
    menubar = tk.Menu(root)
    edit_menu = tk.Menu(menubar)
    widgets["edit_menu"] = edit_menu
    edit_menu.add_command(label="Undo", accelerator="Ctrl+Z", command=command("UNDO"))
    edit_menu.add_command(label="Redo", accelerator="Ctrl+Y", command=command("REDO"))
    edit_menu.add_separator()
    edit_menu.add_command(label="Cut", accelerator="Ctrl+X", command=command("CUT"))
    edit_menu.add_command(label="Copy", accelerator="Ctrl+C", command=command("COPY"))
    edit_menu.add_command(label="Paste", accelerator="Ctrl+V", command=command("PASTE"))
    edit_menu.add_command(label="Delete", accelerator="Del", command=command("DELETE_SELECTION"))
    edit_menu.add_separator()
    edit_menu.add_command(label="Edit Node…", command=lambda: edit_selected(adding=False))
    edit_menu.add_command(label="Add Child…", command=lambda: edit_selected(adding=True))
    retype_menu = tk.Menu(edit_menu)
    for vt in TYPES:
        retype_menu.add_command(label=vt, command=lambda vt=vt: retype_selected(vt))
    edit_menu.add_cascade(label="Retype", menu=retype_menu)
    menubar.add_cascade(label="Edit", underline=0, menu=edit_menu)
    root.config(menu=menubar)

    # ---- editor region: text | tree
    editor = ttk.PanedWindow(root, orient="horizontal")
    editor.grid(row=0, column=0, sticky="nsew")

    text_frame = ttk.Frame(editor)
    text_frame.grid_rowconfigure(0, weight=1)
    text_frame.grid_columnconfigure(0, weight=1)
    text = tk.Text(text_frame, wrap="none", undo=False)
    widgets["text"] = text
    text.grid(row=0, column=0, sticky="nsew")
    text_ys = ttk.Scrollbar(text_frame, orient="vertical", command=text.yview)
    text_ys.grid(row=0, column=1, sticky="ns")
    text.configure(yscrollcommand=text_ys.set)

    tree_frame = ttk.Frame(editor)
    tree_frame.grid_rowconfigure(0, weight=1)
    tree_frame.grid_columnconfigure(0, weight=1)
    tree = ttk.Treeview(tree_frame, show="tree", selectmode="none")
    widgets["tree"] = tree
    tree.grid(row=0, column=0, sticky="nsew")
    tree_ys = ttk.Scrollbar(tree_frame, orient="vertical", command=tree.yview)
    tree_ys.grid(row=0, column=1, sticky="ns")
    tree.configure(yscrollcommand=tree_ys.set)
    tree.tag_configure("cut", foreground="#808080")

    editor.add(text_frame, weight=2)
    editor.add(tree_frame, weight=3)

    # ---- status bar
    status = ttk.Frame(root)
    status.grid(row=1, column=0, sticky="ew", padx=6, pady=(0, 6))
    status.grid_columnconfigure(1, weight=1)
    widgets["status_validity"] = ttk.Label(status, text="")
    widgets["status_error"] = ttk.Label(status, text="", anchor="w", foreground="#f44747")
    widgets["status_path"] = ttk.Label(status, text="", anchor="e")
    widgets["status_validity"].grid(row=0, column=0, sticky="w")
    widgets["status_error"].grid(row=0, column=1, sticky="ew", padx=12)
    widgets["status_path"].grid(row=0, column=2, sticky="e")

    # ---- bindings
    tree.bind("<Button-1>", handle_tree_press)
    tree.bind("<B1-Motion>", handle_tree_motion)
    tree.bind("<ButtonRelease-1>", handle_tree_release)
    tree.bind("<Double-Button-1>", handle_tree_double_click)
    text.bind("<<Modified>>", handle_text_modified)
    root.bind_all("<Key>", handle_key)


# ----------------------------
# main
# ----------------------------

def load_initial_doc(args):
    paths = [a for a in args if not a.startswith("--")]
    if not paths:
        return SAMPLE_DOC
    p = Path(paths[-1])
    try:
        s = p.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read %s: %s", p, e)
        return SAMPLE_DOC
    obj, err = parse_document_text(s)
    if err:
        logger.warning("Could not load %s: %s", p, err)
        return SAMPLE_DOC
    return obj

def main():
    args = sys.argv[1:]
    cfg = config.load_config()
    level = "DEBUG" if "--verbose" in args else config.log_level(cfg)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    root = tk.Tk()
    widgets["root"] = root
    setup_gui()

    g["loop"] = asyncio.new_event_loop()
    blank = initial_state({}, history_limit=config.history_limit(cfg), indent=config.text_indent(cfg))
    g["editor"] = Editor(blank, TkClipboard(root))
    g["editor"].subscribe(realize)
    run({"type": "LOAD_DOC", "doc": load_initial_doc(args)})

    try:
        root.mainloop()
    finally:
        g["loop"].close()


if __name__ == "__main__":
    main()
