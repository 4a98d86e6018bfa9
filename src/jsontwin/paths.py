# paths.py
# Node ids: "root.settings.retryCount", "root.features.0"

from jsontwin.errors import NotFound, TypeNotIndexable, UnsupportedOperation


ROOT = "root"
SEP = "."


# ----------------------------
# id helpers
# ----------------------------

def is_root(node_id):
    return node_id == ROOT

def segments(node_id):
    parts = node_id.split(SEP)
    if parts[0] != ROOT:
        raise NotFound(f"Node id must start with {ROOT!r}: {node_id!r}", node_id)
    return parts[1:]

def parent_id(node_id):
    if node_id is None or is_root(node_id):
        return None
    return node_id.rsplit(SEP, 1)[0]

def last_segment(node_id):
    if node_id is None or is_root(node_id):
        return None
    return node_id.rsplit(SEP, 1)[1]

def child_id(node_id, key):
    return f"{node_id}{SEP}{key}"

def is_same_or_descendant(node_id, ancestor_id):
    return node_id == ancestor_id or node_id.startswith(ancestor_id + SEP)


# ----------------------------
# navigation
# ----------------------------

def _index(seg, size, node_id):
    if not (seg.isascii() and seg.isdigit()):
        raise NotFound(f"{seg!r} is not an array index ({node_id})", node_id)
    i = int(seg)
    if i >= size:
        raise NotFound(f"Index {i} out of range ({node_id})", node_id)
    return i

def step(obj, seg, node_id):
    """Returns (child, key) where key is an int for arrays and a str for objects."""
    if isinstance(obj, dict):
        if seg not in obj:
            raise NotFound(f"No key {seg!r} ({node_id})", node_id)
        return obj[seg], seg
    if isinstance(obj, list):
        i = _index(seg, len(obj), node_id)
        return obj[i], i
    raise TypeNotIndexable(f"Cannot index into a {type_of(obj)} value ({node_id})", node_id)

def resolve(doc, node_id):
    obj = doc
    for seg in segments(node_id):
        obj, _ = step(obj, seg, node_id)
    return obj

def resolve_parent(doc, node_id):
    pid = parent_id(node_id)
    if pid is None:
        raise UnsupportedOperation("The root node has no parent.")
    parent = resolve(doc, pid)
    _, key = step(parent, last_segment(node_id), node_id)
    return parent, key

def type_of(value):
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    return "number"
