"""Sign a certificate request from the command line."""

from __future__ import annotations

import logging
import sys
from datetime import timedelta
from pathlib import Path

from pcaissuer.ca.backends import build_registry
from pcaissuer.ca.base import SignerError, SigningRequest
from pcaissuer.ca.registry import NamespacedName
from pcaissuer.core.cancel import CancelToken
from pcaissuer.core.types import KeyUsage

log = logging.getLogger(__name__)


def run_sign(config, args) -> None:
    """Handle the ``sign`` subcommand."""
    try:
        identity = NamespacedName.parse(args.issuer)
    except ValueError as exc:
        sys.stderr.write(f"pcaissuer: error: {exc}\n")
        sys.exit(1)

    try:
        csr = Path(args.csr).read_bytes()
    except OSError as exc:
        sys.stderr.write(f"pcaissuer: error: cannot read CSR: {exc}\n")
        sys.exit(1)

    try:
        registry = build_registry(config.settings)
    except SignerError as exc:
        sys.stderr.write(f"pcaissuer: error: {exc.detail}\n")
        sys.exit(1)

    signer = registry.lookup(identity)
    if signer is None:
        sys.stderr.write(f"pcaissuer: error: no issuer configured as '{identity}'\n")
        sys.exit(1)

    request = SigningRequest(
        csr=csr,
        namespace=args.namespace,
        name=args.name,
        usages=tuple(KeyUsage(u) for u in args.usage),
        duration=timedelta(hours=args.duration) if args.duration is not None else None,
    )
    cancel = CancelToken.with_timeout(args.deadline) if args.deadline is not None else None

    try:
        chain, root = signer.sign(request, cancel=cancel)
    except SignerError as exc:
        log.error("Signing %s failed: %s", request.idempotency_token, exc.detail)
        sys.stderr.write(f"pcaissuer: error: {exc.detail}\n")
        sys.exit(1)

    _emit(chain, args.chain_out)
    _emit(root, args.root_out)


def _emit(data: bytes, path: str | None) -> None:
    if path:
        Path(path).write_bytes(data)
        log.info("Wrote %d bytes to %s", len(data), path)
    else:
        sys.stdout.write(data.decode("ascii"))
