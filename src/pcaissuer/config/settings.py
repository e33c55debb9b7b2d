"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.
JSON Schema defaults exist only for documentation; these builders
are what the application actually reads.

Access pattern::

    from pcaissuer.config import get_config

    ca = get_config().settings.ca
    print(ca.backend, ca.issuance_timeout_seconds)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# AWS
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AwsSettings:
    """Session parameters for the boto3 ``acm-pca`` client."""

    region: str | None
    profile: str | None
    endpoint_url: str | None


def _build_aws(data: dict | None) -> AwsSettings:
    d = data or {}
    return AwsSettings(
        region=d.get("region"),
        profile=d.get("profile"),
        endpoint_url=d.get("endpoint_url"),
    )


# ---------------------------------------------------------------------------
# CA
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CASettings:
    """Issuing service selection and signing workflow limits."""

    backend: str
    default_validity_days: int
    issuance_timeout_seconds: float
    poll_interval_seconds: float


def _build_ca(data: dict | None) -> CASettings:
    d = data or {}
    return CASettings(
        backend=d.get("backend", "acm_pca"),
        default_validity_days=d.get("default_validity_days", 30),
        issuance_timeout_seconds=float(d.get("issuance_timeout_seconds", 300)),
        poll_interval_seconds=float(d.get("poll_interval_seconds", 3)),
    )


# ---------------------------------------------------------------------------
# Issuers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IssuerSettings:
    """One configured issuer: an identity bound to a CA authority."""

    namespace: str
    name: str
    authority_arn: str


def _build_issuers(data: list | None) -> tuple[IssuerSettings, ...]:
    return tuple(
        IssuerSettings(
            namespace=entry.get("namespace", "default"),
            name=entry["name"],
            authority_arn=entry["authority_arn"],
        )
        for entry in data or []
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    format: str


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    return LoggingSettings(
        level=d.get("level", "INFO"),
        format=d.get("format", "text"),
    )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PcaIssuerSettings:
    """Root of the typed settings tree."""

    aws: AwsSettings
    ca: CASettings
    issuers: tuple[IssuerSettings, ...]
    logging: LoggingSettings


def build_settings(data: dict[str, Any]) -> PcaIssuerSettings:
    """Build the full settings tree from a validated config dict."""
    return PcaIssuerSettings(
        aws=_build_aws(data.get("aws")),
        ca=_build_ca(data.get("ca")),
        issuers=_build_issuers(data.get("issuers")),
        logging=_build_logging(data.get("logging")),
    )
