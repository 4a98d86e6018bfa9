# config.py
# Settings from jsontwin.toml, plus the config a document may carry itself

import logging
import tomllib
from pathlib import Path

DEFAULT_CONFIG_NAME = "jsontwin.toml"

DEFAULTS = {
    "history": {"limit": 100},
    "text":    {"indent": 2},
    "logging": {"level": "WARNING"},
}

logger = logging.getLogger(__name__)


def _load_toml(path):
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}

def load_config(root=None, config_path=None):
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = Path(base) / DEFAULT_CONFIG_NAME
    data = _load_toml(Path(config_path))

    cfg = {}
    for section, defaults in DEFAULTS.items():
        found = data.get(section, {})
        if not isinstance(found, dict):
            found = {}
        cfg[section] = {**defaults, **found}
    return cfg

def history_limit(cfg):
    limit = cfg["history"]["limit"]
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
        return DEFAULTS["history"]["limit"]
    return limit

def text_indent(cfg):
    indent = cfg["text"]["indent"]
    if not isinstance(indent, int) or isinstance(indent, bool) or indent < 0:
        return DEFAULTS["text"]["indent"]
    return indent

def log_level(cfg):
    level = cfg["logging"]["level"]
    if isinstance(level, str) and level.upper() in logging.getLevelNamesMapping():
        return level.upper()
    return DEFAULTS["logging"]["level"]


# ----------------------------
# embedded editor config
# ----------------------------

def extract_embedded_editor_config(doc):
    # Returns a dict or None

    # Case 1: root is dict
    if isinstance(doc, dict):
        cfg = doc.get("jsontwin")
        if isinstance(cfg, dict):
            return cfg

    # Case 2: root is list, check element 0
    if isinstance(doc, list) and doc:
        first = doc[0]
        if isinstance(first, dict):
            cfg = first.get("jsontwin")
            if isinstance(cfg, dict):
                return cfg

    return None

def window_title(doc, base="JSON Twin Editor"):
    cfg = extract_embedded_editor_config(doc) or {}
    suffix = cfg.get("window-title")
    if isinstance(suffix, str) and suffix.strip():
        return f"{base}: {suffix.strip()}"
    return base
