import uuid

from utils.dates import now_millis


def new_id(existing=()) -> str:
    """
    Time-ordered random identifier.
    Example: 18f2a9c4b10-3f9c1a2e

    Regenerates until the token is not in `existing`.
    """
    taken = set(existing)

    while True:
        token = f"{now_millis():x}-{uuid.uuid4().hex[:8]}"
        if token not in taken:
            return token
