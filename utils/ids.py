import time
import uuid


def new_booking_id() -> str:
    """Millisecond timestamp prefix (sortable, easy to read out to support)
    plus 12 random hex chars so ids minted in the same instant never collide."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"


def new_contact_id() -> str:
    return f"c-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
