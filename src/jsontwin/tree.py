# tree.py
# Node descriptors handed to the tree widget

from jsontwin.paths import ROOT, child_id, type_of
from jsontwin.text import compact


def _describe(node_id, name, value, key_editable):
    node = {
        "id":            node_id,
        "name":          name,
        "value":         value,
        "type":          type_of(value),
        "isKeyEditable": key_editable,
        "draggable":     node_id != ROOT,
        "droppable":     node_id != ROOT,
    }
    if isinstance(value, dict):
        node["children"] = [_describe(child_id(node_id, k), k, v, True) for k, v in value.items()]
    elif isinstance(value, list):
        node["children"] = [_describe(child_id(node_id, i), str(i), v, False) for i, v in enumerate(value)]
    return node

def build_tree(doc):
    return _describe(ROOT, ROOT, doc, False)

def iter_nodes(tree):
    """Pre-order walk over one descriptor or a list of them."""
    stack = list(reversed(tree)) if isinstance(tree, list) else [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.get("children", ())))


# ----------------------------
# display
# ----------------------------

def label_for(node):
    # show keys/indices and type markers
    t = node["type"]
    if t == "object":
        return f"{node['name']} {{}}"
    if t == "array":
        return f"{node['name']} []"
    v = node["value"]
    shown = v if isinstance(v, str) else compact(v)
    return f"{node['name']}: {shown}"

def first_bifurcation_id(doc):
    node_id = ROOT
    obj = doc
    while True:
        if isinstance(obj, list) and len(obj) == 1:
            node_id = child_id(node_id, 0)
            obj = obj[0]
            continue
        if isinstance(obj, dict) and len(obj) == 1:
            k = next(iter(obj))
            node_id = child_id(node_id, k)
            obj = obj[k]
            continue
        return node_id
