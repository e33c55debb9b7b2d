"""Issuing service and signer abstractions.

All issuing services (built-in and custom) must inherit from
:class:`IssuingService` and implement its three operations:
:meth:`~IssuingService.issue_certificate`,
:meth:`~IssuingService.wait_until_issued` and
:meth:`~IssuingService.get_certificate`.

Signers implement :class:`GenericSigner`.  The signer receives a
:class:`SigningRequest` and returns the PEM certificate chain (leaf
followed by intermediates) and the PEM root certificate.

Every failure is reported as a :class:`SignerError` subclass.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import timedelta

    from pcaissuer.core.cancel import CancelToken
    from pcaissuer.core.types import KeyUsage, SigningAlgorithm, TemplateArn

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class SignerError(Exception):
    """Raised on any failure of the signing workflow.

    Parameters
    ----------
    detail:
        Human-readable description of the failure.
    retryable:
        Whether the caller may retry the whole signing operation.

    """

    retryable_default = False

    def __init__(self, detail: str, *, retryable: bool | None = None) -> None:
        self.detail = detail
        self.retryable = self.retryable_default if retryable is None else retryable
        super().__init__(detail)


class MalformedCSRError(SignerError):
    """The request does not hold a decodable PEM CSR."""


class UnsupportedKeyAlgorithmError(SignerError):
    """The CSR public key algorithm has no matching signing algorithm."""


class UnsupportedKeySizeError(SignerError):
    """The CSR public key size or curve has no matching signing algorithm."""


class InvalidChainError(SignerError):
    """The returned chain is not a sequence of PEM certificates."""


class IssuanceSubmitFailedError(SignerError):
    """The issuing service rejected or failed the issuance request."""

    retryable_default = True


class IssuanceTimeoutError(SignerError):
    """The certificate was not issued within the wait timeout."""

    retryable_default = True


class IssuanceFailedError(SignerError):
    """The issuing service reported that issuance failed."""


class RetrievalFailedError(SignerError):
    """The issued certificate could not be fetched."""

    retryable_default = True


class CancellationRequestedError(SignerError):
    """The caller cancelled the wait before the certificate was issued."""

    retryable_default = True


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SigningRequest:
    """Immutable view of a certificate request to be signed.

    Attributes
    ----------
    csr:
        PEM-encoded PKCS#10 certificate signing request.
    namespace, name:
        Identity of the originating request.  Together they form the
        idempotency token, so retries of the same request are
        deduplicated by the issuing service.
    usages:
        Requested key usages, in request order.
    duration:
        Requested certificate lifetime, or ``None`` for the default.

    """

    csr: bytes
    namespace: str
    name: str
    usages: tuple[KeyUsage, ...] = field(default_factory=tuple)
    duration: timedelta | None = None

    @property
    def idempotency_token(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class IssuedChain:
    """Issued leaf certificate and its chain as returned by the CA.

    Attributes
    ----------
    certificate:
        PEM-encoded leaf certificate.
    certificate_chain:
        Concatenated PEM intermediates followed by the root.

    """

    certificate: str
    certificate_chain: str


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------


class IssuingService(abc.ABC):
    """The external certificate authority the signer talks to."""

    @abc.abstractmethod
    def issue_certificate(
        self,
        *,
        authority_arn: str,
        signing_algorithm: SigningAlgorithm,
        template_arn: TemplateArn,
        csr: bytes,
        validity_days: int,
        idempotency_token: str,
    ) -> str:
        """Submit an issuance request and return the certificate ARN.

        Raises
        ------
        SignerError
            Typically :class:`IssuanceSubmitFailedError`.

        """

    @abc.abstractmethod
    def wait_until_issued(
        self,
        *,
        certificate_arn: str,
        authority_arn: str,
        timeout: float,
        cancel: CancelToken | None = None,
    ) -> None:
        """Block until the certificate is issued.

        Raises
        ------
        IssuanceTimeoutError
            If *timeout* seconds elapse first.
        IssuanceFailedError
            If the service reports the issuance as failed.
        CancellationRequestedError
            If *cancel* fires first.  Takes precedence over the timeout.

        """

    @abc.abstractmethod
    def get_certificate(
        self,
        *,
        certificate_arn: str,
        authority_arn: str,
    ) -> IssuedChain:
        """Fetch the issued certificate and its chain.

        Raises
        ------
        SignerError
            Typically :class:`RetrievalFailedError`.

        """


class GenericSigner(abc.ABC):
    """Anything that turns a :class:`SigningRequest` into a chain."""

    @abc.abstractmethod
    def sign(
        self,
        request: SigningRequest,
        cancel: CancelToken | None = None,
    ) -> tuple[bytes, bytes]:
        """Return ``(certificate_chain, root_certificate)`` as PEM bytes."""
