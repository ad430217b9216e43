import uuid


def generate_id() -> str:
    """Globally unique, opaque identifier for pages and audit rows."""
    return str(uuid.uuid4())
