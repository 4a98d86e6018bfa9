# reorder.py
# Drag-and-drop reordering among siblings

import copy

from jsontwin.paths import is_root, parent_id, resolve_parent


def reorder(doc, source_id, target_id):
    """Moves source to target's position. Both must share a parent, else no-op."""
    pp = parent_id(source_id)
    if pp is None or source_id == target_id or parent_id(target_id) != pp:
        return doc

    new_doc = copy.deepcopy(doc)
    parent, src = resolve_parent(new_doc, source_id)
    _, dst = resolve_parent(new_doc, target_id)

    if isinstance(parent, list):
        parent.insert(dst, parent.pop(src))
        return new_doc

    # objects have no index-based move: rebuild the mapping in the new key order
    keys = list(parent.keys())
    j = keys.index(dst)
    keys.remove(src)
    keys.insert(j, src)
    new_parent = {k: parent[k] for k in keys}
    if is_root(pp):
        return new_parent
    grand, key = resolve_parent(new_doc, pp)
    grand[key] = new_parent
    return new_doc
