# document.py
# Structural edits on a JSON document.
#
# Every function takes the current document and returns a new one; the input
# is never mutated. A documented no-op returns the input object itself, so
# callers can test `new is old`.

import copy
import math

from jsontwin.errors import (
    KeyCollision, KeyRequired, RootReplacementUnsupported,
    UnsupportedOperation, ValidationError,
)
from jsontwin.paths import (
    is_root, parent_id, resolve, resolve_parent, type_of,
)
from jsontwin.text import compact


TYPES = ("string", "number", "boolean", "null", "object", "array")

_REMOVED = object()


# ----------------------------
# tiny helpers
# ----------------------------

def is_container(value):
    return isinstance(value, (dict, list))

def _replace(doc, node_id, value):
    # mutates doc, which must already be a private copy
    if is_root(node_id):
        return value
    parent, key = resolve_parent(doc, node_id)
    parent[key] = value
    return doc

def _parse_number(text):
    s = text.strip()
    if not s or not s.isascii() or "_" in s:
        return None
    try:
        return int(s)
    except ValueError:
        pass
    try:
        f = float(s)
    except ValueError:
        return None
    if not math.isfinite(f):
        return None
    return f


# ----------------------------
# coercions (retype)
# ----------------------------

def _to_string(value):
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return compact(value)

def _to_number(value):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        n = _parse_number(value)
        return 0 if n is None else n
    return 0

def _truthy(value):
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, float):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True

_CONVERTERS = {
    "string":  _to_string,
    "number":  _to_number,
    "boolean": _truthy,
    "null":    lambda value: None,
    "object":  lambda value: {},
    "array":   lambda value: [],
}


# ----------------------------
# operations
# ----------------------------

def set_value(doc, node_id, value):
    if is_root(node_id):
        if not is_container(value):
            raise RootReplacementUnsupported("Root must be an object {} or array [].")
        return copy.deepcopy(value)
    new_doc = copy.deepcopy(doc)
    return _replace(new_doc, node_id, copy.deepcopy(value))

def rename_key(doc, node_id, new_key):
    if not new_key:
        return doc
    parent, key = resolve_parent(doc, node_id)
    if not isinstance(parent, dict):
        raise UnsupportedOperation("Array elements have no key to rename.")
    if new_key == key:
        return doc
    if new_key in parent:
        raise KeyCollision(f"Key {new_key!r} already exists in this object.", new_key)

    new_doc = copy.deepcopy(doc)
    pid = parent_id(node_id)
    old_parent = resolve(new_doc, pid)
    new_parent = {}
    for k, v in old_parent.items():
        new_parent[new_key if k == key else k] = v
    return _replace(new_doc, pid, new_parent)

def retype(doc, node_id, new_type):
    if new_type not in _CONVERTERS:
        raise ValidationError(f"Unknown type {new_type!r}.")
    if is_root(node_id):
        return doc
    old = resolve(doc, node_id)
    value = _CONVERTERS[new_type](old)
    if type_of(old) == new_type and value == old:
        return doc
    return _replace(copy.deepcopy(doc), node_id, value)

def delete_node(doc, node_id):
    if is_root(node_id):
        return doc
    new_doc = copy.deepcopy(doc)
    parent, key = resolve_parent(new_doc, node_id)
    del parent[key]
    return new_doc

def delete_nodes(doc, node_ids):
    ids = [i for i in node_ids if not is_root(i)]
    if not ids:
        return doc
    new_doc = copy.deepcopy(doc)
    mark_for_removal(new_doc, ids)
    return sweep_removed(new_doc)

def insert_child(doc, parent_node_id, key, value):
    parent = resolve(doc, parent_node_id)
    if isinstance(parent, dict) and not key:
        raise KeyRequired("A key is required when adding to an object.")
    if not is_container(parent):
        raise UnsupportedOperation(f"Cannot add a child to a {type_of(parent)} value.")

    new_doc = copy.deepcopy(doc)
    parent = resolve(new_doc, parent_node_id)
    if isinstance(parent, list):
        parent.append(copy.deepcopy(value))
    else:
        parent[key] = copy.deepcopy(value)
    return new_doc


# ----------------------------
# removal by marking
# ----------------------------

def mark_for_removal(doc, node_ids):
    """Overwrites each node's slot in doc (a private copy) with a removal marker.

    Every id is resolved before any slot is touched, so array indices in
    node_ids all refer to the same snapshot.
    """
    slots = [resolve_parent(doc, i) for i in node_ids if not is_root(i)]
    for parent, key in slots:
        parent[key] = _REMOVED

def sweep_removed(obj):
    if isinstance(obj, dict):
        return {k: sweep_removed(v) for k, v in obj.items() if v is not _REMOVED}
    if isinstance(obj, list):
        return [sweep_removed(v) for v in obj if v is not _REMOVED]
    return obj


# ----------------------------
# leaf input (edit dialog)
# ----------------------------

def validate_leaf_input(text, value_type):
    if value_type == "number":
        return _parse_number(text) is not None
    if value_type == "boolean":
        return text in ("true", "false")
    return True

def coerce_leaf_input(text, value_type):
    if value_type not in TYPES:
        raise ValidationError(f"Unknown type {value_type!r}.")
    if not validate_leaf_input(text, value_type):
        raise ValidationError(f"{text!r} is not a valid {value_type}.")
    if value_type == "string":
        return text
    if value_type == "number":
        return _parse_number(text)
    if value_type == "boolean":
        return text == "true"
    if value_type == "null":
        return None
    return {} if value_type == "object" else []

def apply_edit(doc, node_id, key, value_type, text):
    """Saves the edit dialog: new value of the given type, then the key.

    A container edited as its own type keeps its children; only the key
    changes. The key is ignored for array elements and the root.
    """
    value = coerce_leaf_input(text, value_type)
    if is_root(node_id):
        if type_of(resolve(doc, node_id)) == value_type:
            return doc
        return set_value(doc, node_id, value)

    parent, old_key = resolve_parent(doc, node_id)
    renaming = isinstance(parent, dict) and bool(key) and key != old_key
    if renaming and key in parent:
        raise KeyCollision(f"Key {key!r} already exists in this object.", key)

    new_doc = doc
    current = parent[old_key]
    if not (is_container(current) and type_of(current) == value_type):
        new_doc = set_value(doc, node_id, value)
    if renaming:
        new_doc = rename_key(new_doc, node_id, key)
    return new_doc

def add_child(doc, parent_node_id, key, value_type, text):
    value = coerce_leaf_input(text, value_type)
    return insert_child(doc, parent_node_id, key, value)
