"""Identifier generation for error records, violations and envelopes.

Format: ``{prefix}{unique}_{hash}`` where ``unique`` is the random tail of a
UUIDv7 and ``hash`` is a short digest of the current time in nanoseconds.
"""

import hashlib
import time

from uuid_extensions import uuid7


def generate_id(prefix: str) -> str:
    """Return a new identifier with a stable prefix.

    Example:
        >>> generate_id("gw_err_")
        'gw_err_8f0c2b9d41aa7e53_3b1f09ac'
    """
    unique = uuid7().hex[-16:]
    stamp = hashlib.sha256(str(time.time_ns()).encode()).hexdigest()[:8]
    return f"{prefix}{unique}_{stamp}"
