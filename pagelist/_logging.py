import hashlib
import logging
from typing import Any

# Create the library logger
logger = logging.getLogger("pagelist")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())


def redact_key(key: Any) -> str | None:
    """
    Redacts a filter key for logging.
    Hashes the value so log lines can be correlated per listing without
    revealing what the user was browsing.
    """
    if key is None:
        return None
    try:
        if isinstance(key, dict):
            # Sort keys so the same filter always hashes the same way
            flat = ",".join(f"{k}={key[k]}" for k in sorted(key, key=str))
            return hashlib.sha256(flat.encode("utf-8")).hexdigest()[:8]
        return hashlib.sha256(str(key).encode("utf-8")).hexdigest()[:8]
    except Exception:
        return "<redaction_failed>"
