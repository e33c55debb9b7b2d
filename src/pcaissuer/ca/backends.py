"""Issuing service loader and signer factory.

Loads the configured issuing service by name and builds the signers
for every configured issuer.  Supports the built-in ``acm_pca`` service
and custom services via the ``ext:`` prefix.

Usage::

    from pcaissuer.ca.backends import build_registry

    registry = build_registry(settings)
    signer = registry.lookup(NamespacedName("default", "pca-issuer"))
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from pcaissuer.ca.base import IssuingService, SignerError
from pcaissuer.ca.registry import NamespacedName, SignerRegistry
from pcaissuer.ca.signer import PCASigner

if TYPE_CHECKING:
    from pcaissuer.config.settings import (
        AwsSettings,
        CASettings,
        IssuerSettings,
        PcaIssuerSettings,
    )

log = logging.getLogger(__name__)

# Maps config string → (module_path, class_name)
_BUILTIN_SERVICES: dict[str, tuple[str, str]] = {
    "acm_pca": ("pcaissuer.ca.acm_pca", "AcmPcaIssuingService"),
}


def load_issuing_service(
    ca_settings: CASettings,
    aws_settings: AwsSettings,
) -> IssuingService:
    """Load and return the configured issuing service.

    Built-in services are constructed with their ``from_settings``
    classmethod; ``ext:`` classes are called as
    ``cls(ca_settings, aws_settings)``.

    Raises
    ------
    SignerError
        If the service cannot be loaded.

    """
    name = ca_settings.backend

    if name in _BUILTIN_SERVICES:
        mod_path, cls_name = _BUILTIN_SERVICES[name]
        cls = _import_class(mod_path, cls_name, name)
        _validate_class(cls, name)
        service = cls.from_settings(ca_settings, aws_settings)
        log.info("Loaded issuing service: %s", name)
        return service

    if name.startswith("ext:"):
        fqn = name[4:]
        module_path, _, cls_name = fqn.rpartition(".")
        if not module_path:
            msg = (
                f"Invalid external issuing service '{fqn}': must be fully "
                "qualified (e.g. 'mypackage.module.ClassName')"
            )
            raise SignerError(msg)
        cls = _import_class(module_path, cls_name, fqn)
        _validate_class(cls, name)
        service = cls(ca_settings, aws_settings)
        log.info("Loaded external issuing service: %s", fqn)
        return service

    msg = (
        f"Unknown issuing service '{name}'; "
        f"built-in options: {sorted(_BUILTIN_SERVICES)}. "
        "Use 'ext:mypackage.module.ClassName' for custom services."
    )
    raise SignerError(msg)


def _import_class(module_path: str, cls_name: str, label: str) -> type:
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)
    except (ImportError, AttributeError) as exc:
        msg = f"Failed to load issuing service '{label}': {exc}"
        raise SignerError(msg) from exc


def _validate_class(cls: object, label: str) -> None:
    """Verify that *cls* is a concrete :class:`IssuingService`."""
    if not (isinstance(cls, type) and issubclass(cls, IssuingService)):
        msg = f"Issuing service '{label}' is not a subclass of IssuingService"
        raise SignerError(msg)

    for method_name in ("issue_certificate", "wait_until_issued", "get_certificate"):
        method = getattr(cls, method_name, None)
        if method is None or getattr(method, "__isabstractmethod__", False):
            msg = f"Issuing service '{label}' does not implement '{method_name}()'"
            raise SignerError(msg)


def new_signer(
    service: IssuingService,
    issuer: IssuerSettings,
    ca_settings: CASettings,
) -> PCASigner:
    """Return a signer bound to *issuer*'s certificate authority."""
    return PCASigner(
        service,
        issuer.authority_arn,
        issuance_timeout=ca_settings.issuance_timeout_seconds,
        default_validity_days=ca_settings.default_validity_days,
    )


def build_registry(
    settings: PcaIssuerSettings,
    service: IssuingService | None = None,
) -> SignerRegistry:
    """Create a registry holding one signer per configured issuer.

    All signers share *service*, loaded from configuration when not
    given.
    """
    if service is None:
        service = load_issuing_service(settings.ca, settings.aws)

    registry = SignerRegistry()
    for issuer in settings.issuers:
        identity = NamespacedName(issuer.namespace, issuer.name)
        registry.register(identity, new_signer(service, issuer, settings.ca))
        log.info("Registered signer %s -> %s", identity, issuer.authority_arn)
    return registry
