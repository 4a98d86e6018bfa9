# errors.py
# Error taxonomy for document edits


class JsonEditError(Exception):
    """Base for every error an edit can report back to the user."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ParseError(JsonEditError):
    pass


# ----------------------------
# paths
# ----------------------------

class PathError(JsonEditError):
    def __init__(self, message, node_id=None):
        super().__init__(message)
        self.node_id = node_id


class NotFound(PathError):
    pass


class TypeNotIndexable(PathError):
    pass


# ----------------------------
# edits
# ----------------------------

class ValidationError(JsonEditError):
    pass


class KeyRequired(ValidationError):
    pass


class KeyCollision(JsonEditError):
    def __init__(self, message, key=None):
        super().__init__(message)
        self.key = key


class UnsupportedOperation(JsonEditError):
    pass


class RootReplacementUnsupported(UnsupportedOperation):
    pass


# ----------------------------
# system clipboard
# ----------------------------

class ClipboardUnavailable(JsonEditError):
    pass


# rejections are expected user outcomes, not failures
REJECTIONS = (KeyCollision, UnsupportedOperation)
