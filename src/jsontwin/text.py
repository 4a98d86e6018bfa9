# text.py
# The text pane's view of the document

import json


def pretty(obj, indent=2):
    return json.dumps(obj, indent=indent, ensure_ascii=False, sort_keys=False)

def compact(obj):
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


# ----------------------------
# validation
# ----------------------------

def _reject_constant(name):
    raise ValueError(f"{name} is not valid JSON")

def parse_json_text(s):
    try:
        obj = json.loads(s, parse_constant=_reject_constant)
        return obj, None
    except json.JSONDecodeError as e:
        msg = f"{e.msg} (line {e.lineno}, col {e.colno})"
        return None, msg
    except ValueError as e:
        return None, str(e)

def parse_document_text(s):
    obj, err = parse_json_text(s)
    if err:
        return None, err
    if not isinstance(obj, (dict, list)):
        return None, "Root must be an object {} or array []."
    return obj, None
