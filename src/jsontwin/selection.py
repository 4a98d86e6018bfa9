# selection.py
# Multi-selection over the flattened tree.
#
# A selection is (selected, last_id): a frozenset of node ids plus the anchor
# of the most recent single or ctrl click.

from jsontwin.errors import PathError
from jsontwin.paths import resolve
from jsontwin.tree import build_tree, iter_nodes


def flatten(tree):
    return [node["id"] for node in iter_nodes(tree)]

def flatten_document(doc):
    return flatten(build_tree(doc))

def clear():
    return frozenset(), None

def ordered(selected, order):
    return [i for i in order if i in selected]


# ----------------------------
# clicks
# ----------------------------

def click(selected, last_id, node_id, modifiers=(), order=()):
    mods = set(modifiers)

    if "shift" in mods and last_id is not None:
        if node_id not in order or last_id not in order:
            return selected, last_id
        a = order.index(last_id)
        b = order.index(node_id)
        lo, hi = min(a, b), max(a, b)
        return frozenset(order[lo:hi + 1]), last_id

    if mods & {"ctrl", "meta"}:
        if node_id in selected:
            return selected - {node_id}, last_id
        return selected | {node_id}, node_id

    return frozenset([node_id]), node_id


# ----------------------------
# after structural edits
# ----------------------------

def _resolves(doc, node_id):
    try:
        resolve(doc, node_id)
    except PathError:
        return False
    return True

def prune(doc, selected, last_id):
    kept = frozenset(i for i in selected if _resolves(doc, i))
    if last_id is not None and not _resolves(doc, last_id):
        last_id = None
    return kept, last_id
