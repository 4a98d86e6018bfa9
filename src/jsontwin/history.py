# history.py
# Undo/redo over whole-document snapshots.
#
# past and future are tuples; past[-1] is the most recent snapshot and
# future[0] the next one to redo. Snapshots are never mutated once recorded,
# because every edit in jsontwin.document builds a fresh document.


def record(past, future, current, limit=0):
    """Pushes the pre-mutation document; clears the redo side.

    limit > 0 keeps only the newest `limit` snapshots.
    """
    past = past + (current,)
    if limit and len(past) > limit:
        past = past[-limit:]
    return past, ()

def undo(past, future, current):
    if not past:
        return past, future, None
    return past[:-1], (current,) + future, past[-1]

def redo(past, future, current):
    if not future:
        return past, future, None
    return past + (current,), future[1:], future[0]

def can_undo(past):
    return bool(past)

def can_redo(future):
    return bool(future)
