"""Split a PEM certificate chain into intermediates and root."""

from __future__ import annotations

import logging

from pcaissuer.ca.base import InvalidChainError
from pcaissuer.core import pem

log = logging.getLogger(__name__)

_CERTIFICATE_LABEL = "CERTIFICATE"


def split_root_ca_certificate(chain_pem: bytes) -> tuple[bytes, bytes]:
    """Return ``(intermediates, root)`` from a concatenated PEM chain.

    The chain is expected in leaf-to-root order, so the last block is
    taken as the root.  Every block is re-encoded, which normalises
    line wrapping.  A chain holding a single certificate yields empty
    intermediates.

    Raises
    ------
    InvalidChainError
        If a block cannot be decoded or is not a ``CERTIFICATE``.

    """
    intermediates = bytearray()
    remaining = chain_pem

    while True:
        block, rest = pem.decode(remaining)
        if block is None or block.label != _CERTIFICATE_LABEL:
            msg = "failed to read certificate"
            raise InvalidChainError(msg)

        encoded = pem.encode(block)
        if rest.strip():
            intermediates += encoded
            remaining = rest
        else:
            log.debug(
                "Split certificate chain: %d intermediate bytes, root %d bytes",
                len(intermediates),
                len(encoded),
            )
            return bytes(intermediates), encoded
