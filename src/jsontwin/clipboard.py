# clipboard.py
# Copy, cut and paste of tree nodes through JSON text.
#
# The system clipboard only carries text, so paste re-parses whatever is
# there and cannot assume it came from this session.

import copy
import time

from jsontwin.document import is_container, mark_for_removal, sweep_removed
from jsontwin.errors import ParseError, UnsupportedOperation
from jsontwin.paths import (
    ROOT, is_root, is_same_or_descendant, last_segment, parent_id, resolve,
)
from jsontwin.selection import ordered
from jsontwin.text import parse_json_text, pretty


# ----------------------------
# copy
# ----------------------------

def build_payload(doc, selected, order):
    """A list when the first selected node sits in an array, else a key -> value mapping."""
    ids = ordered(selected, order)
    if not ids:
        return None

    first_parent = parent_id(ids[0])
    if first_parent is not None and isinstance(resolve(doc, first_parent), list):
        return [copy.deepcopy(resolve(doc, i)) for i in ids]

    payload = {}
    for i in ids:
        key = ROOT if is_root(i) else last_segment(i)
        payload[key] = copy.deepcopy(resolve(doc, i))
    return payload

def copy_text(doc, selected, order, indent=2):
    payload = build_payload(doc, selected, order)
    if payload is None:
        return None
    return pretty(payload, indent=indent)


# ----------------------------
# keys for pasted items
# ----------------------------

def unique_key(container, key):
    if key not in container:
        return key
    n = 1
    while f"{key}_copy{n}" in container:
        n += 1
    return f"{key}_copy{n}"

def generated_key(container, index, clock=time.time):
    # a bare value carries no key of its own
    return unique_key(container, f"item_{int(clock() * 1000)}_{index}")


# ----------------------------
# paste
# ----------------------------

def _insertion_point(doc, target_id):
    """Returns (container_id, position); position None means append/upsert."""
    if is_container(resolve(doc, target_id)):
        return target_id, None
    container_id = parent_id(target_id)
    if container_id is None:
        raise UnsupportedOperation("Nothing to paste into.")
    if isinstance(resolve(doc, container_id), list):
        return container_id, int(last_segment(target_id)) + 1
    return container_id, None

def paste(doc, target_id, text, cut_ids=(), clock=time.time):
    payload, err = parse_json_text(text)
    if err:
        raise ParseError(f"Clipboard does not hold valid JSON: {err}")
    if target_id is None:
        return doc

    container_id, position = _insertion_point(doc, target_id)
    cut = [i for i in cut_ids if not is_root(i)]
    if any(is_same_or_descendant(container_id, i) for i in cut):
        raise UnsupportedOperation("Cannot paste into a node that is being cut.")

    work = copy.deepcopy(doc)
    container = resolve(work, container_id)
    # cut slots are marked before insertion so their indices stay valid
    mark_for_removal(work, cut)

    if isinstance(container, list):
        items = payload if isinstance(payload, list) else [payload]
        if position is None:
            position = len(container)
        container[position:position] = items
    elif isinstance(payload, dict):
        for k, v in payload.items():
            container[unique_key(container, k)] = v
    else:
        items = payload if isinstance(payload, list) else [payload]
        for i, v in enumerate(items):
            container[generated_key(container, i, clock)] = v

    if cut:
        return sweep_removed(work)
    return work
