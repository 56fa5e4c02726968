"""Content hashing for cheap equality checks.

Digests are MD5 over a canonical JSON serialization. They detect change,
they do not authenticate content.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json(content: Any) -> str:
    """Serialize content to a stable JSON string (sorted keys, no whitespace)."""
    return json.dumps(
        content, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def content_digest(content: Any) -> str:
    """Return a hex digest of JSON-serializable content.

    Identical content yields identical digests across processes.

    Examples:
        >>> content_digest([[1, 2], ["a"]]) == content_digest([[1, 2], ["a"]])
        True
    """
    encoded = canonical_json(content).encode("utf-8")
    return hashlib.md5(encoded, usedforsecurity=False).hexdigest()
