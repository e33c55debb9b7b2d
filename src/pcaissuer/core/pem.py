"""Minimal PEM block codec.

:func:`decode` returns the first PEM block found in the input together
with the bytes that follow it, skipping any text before the ``BEGIN``
line.  :func:`encode` writes a block back out with its base64 body
wrapped at 64 columns and a trailing newline.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

_LINE_LENGTH = 64

_BLOCK_RE = re.compile(
    rb"-----BEGIN (?P<label>[^-\r\n]*)-----[ \t]*\r?\n"
    rb"(?P<body>.*?)"
    rb"-----END (?P=label)-----[ \t]*(?:\r?\n)?",
    re.DOTALL,
)


@dataclass(frozen=True)
class PemBlock:
    """A decoded PEM block: its label and DER payload."""

    label: str
    data: bytes


def decode(data: bytes) -> tuple[PemBlock | None, bytes]:
    """Decode the first PEM block in *data*.

    Returns ``(block, rest)``.  When no well-formed block is found the
    result is ``(None, data)``.  Blocks carrying RFC 1421 headers are
    not supported and are treated as malformed.
    """
    match = _BLOCK_RE.search(data)
    if match is None:
        return None, data

    body = match.group("body")
    if b":" in body:
        return None, data

    try:
        payload = base64.b64decode(b"".join(body.split()), validate=True)
    except (binascii.Error, ValueError):
        return None, data

    label = match.group("label").decode("ascii", errors="replace")
    return PemBlock(label=label, data=payload), data[match.end():]


def encode(block: PemBlock) -> bytes:
    """Encode *block* as PEM with 64-column lines."""
    b64 = base64.b64encode(block.data)
    lines = [b64[i:i + _LINE_LENGTH] for i in range(0, len(b64), _LINE_LENGTH)]
    header = f"-----BEGIN {block.label}-----\n".encode("ascii")
    footer = f"-----END {block.label}-----\n".encode("ascii")
    return header + b"".join(line + b"\n" for line in lines) + footer
