import uuid


def new_identity() -> str:
    """Return a random version‑4 UUID in its canonical text form."""
    return str(uuid.uuid4())
