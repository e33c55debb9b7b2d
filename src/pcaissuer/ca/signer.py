"""AWS Private CA signer.

Runs one certificate request through the signing workflow::

    parse CSR -> select algorithm -> select template -> build request
      -> submit -> wait until issued -> retrieve -> split chain

Every step fails terminally; there is no internal retry.  Errors raised
by the issuing service propagate unchanged so the caller can decide
whether to retry the whole operation (the idempotency token makes that
safe).

Usage::

    from pcaissuer.ca.signer import PCASigner

    signer = PCASigner(service, "arn:aws:acm-pca:...:certificate-authority/...")
    chain, root = signer.sign(request, cancel=CancelToken.with_timeout(60))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm

from pcaissuer.ca.algorithms import PublicKeyInfo, signature_algorithm
from pcaissuer.ca.base import GenericSigner, MalformedCSRError, UnsupportedKeyAlgorithmError
from pcaissuer.ca.chain import split_root_ca_certificate
from pcaissuer.ca.templates import template_arn
from pcaissuer.core import pem
from pcaissuer.logging import signing_context
from pcaissuer.logging.sanitize import sanitize_pem

if TYPE_CHECKING:
    from datetime import timedelta

    from pcaissuer.ca.base import IssuingService, SigningRequest
    from pcaissuer.core.cancel import CancelToken

log = logging.getLogger(__name__)

DEFAULT_VALIDITY_DAYS = 30
DEFAULT_ISSUANCE_TIMEOUT_SECONDS = 300.0

_HOURS_PER_DAY = 24
_SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class ParsedCSR:
    """A decoded CSR and the strength of its public key."""

    csr: x509.CertificateSigningRequest
    key_info: PublicKeyInfo


def parse_csr(csr_pem: bytes) -> ParsedCSR:
    """Decode the first PEM block of *csr_pem* as a PKCS#10 request.

    Raises
    ------
    MalformedCSRError
        If no PEM block decodes or its payload is not a CSR.

    """
    block, _ = pem.decode(csr_pem)
    if block is None:
        msg = "failed to decode CSR"
        raise MalformedCSRError(msg)

    try:
        csr = x509.load_der_x509_csr(block.data)
    except ValueError as exc:
        msg = f"failed to parse CSR: {exc}"
        raise MalformedCSRError(msg) from exc

    try:
        public_key = csr.public_key()
    except UnsupportedAlgorithm as exc:
        msg = f"unsupported public key algorithm: {exc}"
        raise UnsupportedKeyAlgorithmError(msg) from exc
    except ValueError as exc:
        msg = f"failed to read public key: {exc}"
        raise MalformedCSRError(msg) from exc

    return ParsedCSR(csr=csr, key_info=PublicKeyInfo.from_public_key(public_key))


def validity_days(duration: timedelta | None, default: int = DEFAULT_VALIDITY_DAYS) -> int:
    """Convert a requested duration to whole days, truncating."""
    if duration is None:
        return default
    hours = duration.total_seconds() / _SECONDS_PER_HOUR
    return int(hours / _HOURS_PER_DAY)


class PCASigner(GenericSigner):
    """Signs certificate requests with one AWS Private CA authority.

    Holds no per-request state and is safe to share between threads.

    Parameters
    ----------
    service:
        The issuing service used for every request.
    authority_arn:
        ARN of the certificate authority that signs.
    issuance_timeout:
        Maximum seconds to wait for a certificate to be issued.
    default_validity_days:
        Validity used when a request sets no duration.

    """

    def __init__(
        self,
        service: IssuingService,
        authority_arn: str,
        *,
        issuance_timeout: float = DEFAULT_ISSUANCE_TIMEOUT_SECONDS,
        default_validity_days: int = DEFAULT_VALIDITY_DAYS,
    ) -> None:
        self._service = service
        self._arn = authority_arn
        self._issuance_timeout = issuance_timeout
        self._default_validity_days = default_validity_days

    @property
    def authority_arn(self) -> str:
        return self._arn

    def sign(
        self,
        request: SigningRequest,
        cancel: CancelToken | None = None,
    ) -> tuple[bytes, bytes]:
        """Sign *request* and return ``(certificate_chain, root)``.

        ``certificate_chain`` is the leaf certificate, a newline, then
        the intermediate certificates.
        """
        with signing_context(request.idempotency_token):
            return self._sign(request, cancel)

    def _sign(
        self,
        request: SigningRequest,
        cancel: CancelToken | None,
    ) -> tuple[bytes, bytes]:
        if log.isEnabledFor(logging.DEBUG):
            csr_text = request.csr.decode("ascii", errors="replace")
            log.debug("Signing CSR: %s", sanitize_pem(csr_text))
        parsed = parse_csr(request.csr)
        algorithm = signature_algorithm(parsed.key_info)
        template = template_arn(request.usages)
        days = validity_days(request.duration, self._default_validity_days)
        token = request.idempotency_token

        log.info(
            "Submitting certificate request: authority=%s, algorithm=%s, "
            "template=%s, validity_days=%d",
            self._arn,
            algorithm,
            template,
            days,
        )
        certificate_arn = self._service.issue_certificate(
            authority_arn=self._arn,
            signing_algorithm=algorithm,
            template_arn=template,
            csr=request.csr,
            validity_days=days,
            idempotency_token=token,
        )

        self._service.wait_until_issued(
            certificate_arn=certificate_arn,
            authority_arn=self._arn,
            timeout=self._issuance_timeout,
            cancel=cancel,
        )

        issued = self._service.get_certificate(
            certificate_arn=certificate_arn,
            authority_arn=self._arn,
        )

        intermediates, root = split_root_ca_certificate(
            issued.certificate_chain.encode("ascii"),
        )
        chain = (issued.certificate + "\n").encode("ascii") + intermediates

        log.info("Certificate issued: %s", certificate_arn)
        return chain, root
