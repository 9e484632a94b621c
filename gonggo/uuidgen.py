"""Request identifier generation."""

import threading
import uuid

_lock = threading.Lock()


def generate_uuid() -> str:
    """Return a new random UUID in lower-case canonical form."""
    with _lock:
        return str(uuid.uuid4()).lower()