import uuid


def next_id() -> str:
    """Return a fresh 32-character hex identifier."""
    return uuid.uuid4().hex
