"""Signer registry.

A process-wide directory from a ``(namespace, name)`` identity to a
signer instance, so signers are built once from configuration instead
of per request.  Entries never expire; the last writer for an identity
wins.

The registry is an explicit object created at startup and handed to
whatever needs it, not module state.

Usage::

    from pcaissuer.ca.registry import NamespacedName, SignerRegistry

    registry = SignerRegistry()
    registry.register(NamespacedName("default", "pca-issuer"), signer)
    signer = registry.lookup(NamespacedName("default", "pca-issuer"))
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pcaissuer.ca.base import GenericSigner

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamespacedName:
    """Identity of an issuer or request: a namespace and a name."""

    namespace: str
    name: str

    @classmethod
    def parse(cls, value: str) -> NamespacedName:
        """Parse ``"namespace/name"``."""
        namespace, sep, name = value.partition("/")
        if not sep or not namespace or not name or "/" in name:
            msg = f"Invalid identity '{value}': expected 'namespace/name'"
            raise ValueError(msg)
        return cls(namespace, name)

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class SignerRegistry:
    """Thread-safe identity-to-signer directory."""

    def __init__(self) -> None:
        self._signers: dict[NamespacedName, GenericSigner] = {}
        self._lock = threading.Lock()

    def get(self, identity: NamespacedName) -> tuple[GenericSigner | None, bool]:
        """Return ``(signer, found)`` for *identity*."""
        with self._lock:
            signer = self._signers.get(identity)
        return signer, signer is not None

    def put(self, identity: NamespacedName, signer: GenericSigner) -> None:
        """Store *signer* under *identity*, replacing any previous one."""
        with self._lock:
            replaced = identity in self._signers
            self._signers[identity] = signer
        log.debug(
            "%s signer for %s",
            "Replaced" if replaced else "Registered",
            identity,
        )

    def lookup(self, identity: NamespacedName) -> GenericSigner | None:
        """Return the signer stored for *identity*, or ``None``."""
        signer, _ = self.get(identity)
        return signer

    def register(self, identity: NamespacedName, signer: GenericSigner) -> None:
        self.put(identity, signer)

    def __len__(self) -> int:
        with self._lock:
            return len(self._signers)

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._signers
