"""Sensitive data sanitization for log output.

Provides :func:`sanitize_pem` which redacts the base64 body of PEM
blocks (CSRs, certificates, keys) before they are written to log
files.  Only the BEGIN/END markers are preserved.
"""

from __future__ import annotations

import re

# Regex matching the base64 body inside PEM blocks
_PEM_BODY_RE = re.compile(
    r"(-----BEGIN [A-Z0-9 ]+-----)"
    r"([\s\S]*?)"
    r"(-----END [A-Z0-9 ]+-----)",
)


def sanitize_pem(pem: str) -> str:
    """Replace the base64 body of PEM blocks with ``[REDACTED]``.

    Preserves BEGIN/END markers so the type of object is still visible.
    """

    def _redact(m: re.Match) -> str:
        return f"{m.group(1)}\n[REDACTED]\n{m.group(3)}"

    return _PEM_BODY_RE.sub(_redact, pem)
