import hashlib
import json
from typing import Any, Iterable


def payload_dict(payload: Any, exclude: Iterable[str] = ()) -> dict:
    """Plain dict view of a request payload, minus the ``exclude`` keys."""
    if hasattr(payload, "model_dump"):
        data = payload.model_dump(exclude_unset=True)
    elif isinstance(payload, dict):
        data = payload
    else:
        data = {}
    skipped = set(exclude)
    return {k: v for k, v in data.items() if k not in skipped}


def payload_hash(payload: Any, exclude: Iterable[str] = ()) -> str:
    """SHA-256 over the sorted JSON form of the payload."""
    s = json.dumps(payload_dict(payload, exclude), sort_keys=True, default=str)
    return hashlib.sha256(s.encode()).hexdigest()
