"""AWS Private CA issuing service.

Implements :class:`~pcaissuer.ca.base.IssuingService` on top of the
boto3 ``acm-pca`` client:

- ``issue_certificate`` -> ``IssueCertificate``
- ``wait_until_issued`` -> the ``certificate_issued`` waiter, driven one
  attempt at a time so a caller's :class:`CancelToken` can interrupt it
- ``get_certificate``   -> ``GetCertificate``

botocore errors are wrapped in the matching :class:`SignerError`
subclass with the original exception chained as ``__cause__``.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from pcaissuer.ca.base import (
    CancellationRequestedError,
    IssuanceFailedError,
    IssuanceSubmitFailedError,
    IssuanceTimeoutError,
    IssuedChain,
    IssuingService,
    RetrievalFailedError,
)
from pcaissuer.core.types import ValidityPeriodType

if TYPE_CHECKING:
    from pcaissuer.config.settings import AwsSettings, CASettings
    from pcaissuer.core.cancel import CancelToken
    from pcaissuer.core.types import SigningAlgorithm, TemplateArn

log = logging.getLogger(__name__)

_WAITER_NAME = "certificate_issued"
_PENDING_REASON = "Max attempts exceeded"

# Error codes that will fail the same way on every retry.
_NON_RETRYABLE_CODES = frozenset(
    {
        "InvalidArgsException",
        "InvalidArnException",
        "InvalidStateException",
        "LimitExceededException",
        "MalformedCSRException",
        "ResourceNotFoundException",
        "AccessDeniedException",
    }
)


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


def _is_retryable(exc: Exception) -> bool:
    return _error_code(exc) not in _NON_RETRYABLE_CODES


class AcmPcaIssuingService(IssuingService):
    """Issues certificates through an AWS Private CA.

    Parameters
    ----------
    client:
        A boto3 ``acm-pca`` client.
    poll_interval:
        Seconds to sleep between ``GetCertificate`` polls while waiting.

    """

    def __init__(self, client: Any, *, poll_interval: float = 3.0) -> None:  # noqa: ANN401
        self._client = client
        self._poll_interval = poll_interval

    @classmethod
    def from_settings(
        cls,
        ca_settings: CASettings,
        aws_settings: AwsSettings,
    ) -> AcmPcaIssuingService:
        """Build the service from the ``ca`` and ``aws`` config sections."""
        session = boto3.session.Session(
            profile_name=aws_settings.profile,
            region_name=aws_settings.region,
        )
        client = session.client("acm-pca", endpoint_url=aws_settings.endpoint_url)
        return cls(client, poll_interval=ca_settings.poll_interval_seconds)

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
        try:
            response = self._client.issue_certificate(
                CertificateAuthorityArn=authority_arn,
                Csr=csr,
                SigningAlgorithm=str(signing_algorithm),
                TemplateArn=str(template_arn),
                Validity={
                    "Value": validity_days,
                    "Type": str(ValidityPeriodType.DAYS),
                },
                IdempotencyToken=idempotency_token,
            )
        except (ClientError, BotoCoreError) as exc:
            msg = f"IssueCertificate failed for {authority_arn}: {exc}"
            raise IssuanceSubmitFailedError(msg, retryable=_is_retryable(exc)) from exc

        certificate_arn = response["CertificateArn"]
        log.debug("IssueCertificate accepted: %s", certificate_arn)
        return certificate_arn

    def wait_until_issued(
        self,
        *,
        certificate_arn: str,
        authority_arn: str,
        timeout: float,
        cancel: CancelToken | None = None,
    ) -> None:
        waiter = self._client.get_waiter(_WAITER_NAME)
        deadline = time.monotonic() + timeout
        attempt = 0

        while True:
            if cancel is not None and cancel.cancelled:
                msg = f"Cancelled while waiting for {certificate_arn}"
                raise CancellationRequestedError(msg)

            attempt += 1
            try:
                waiter.wait(
                    CertificateArn=certificate_arn,
                    CertificateAuthorityArn=authority_arn,
                    WaiterConfig={"Delay": 1, "MaxAttempts": 1},
                )
            except WaiterError as exc:
                reason = str(exc.kwargs.get("reason", ""))
                if not reason.startswith(_PENDING_REASON):
                    msg = f"Issuance of {certificate_arn} failed: {reason}"
                    raise IssuanceFailedError(msg) from exc
            except BotoCoreError as exc:
                msg = f"Polling {certificate_arn} failed: {exc}"
                raise IssuanceFailedError(msg, retryable=True) from exc
            else:
                log.debug("Certificate %s issued after %d poll(s)", certificate_arn, attempt)
                return

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                if cancel is not None and cancel.cancelled:
                    msg = f"Cancelled while waiting for {certificate_arn}"
                    raise CancellationRequestedError(msg)
                msg = f"Certificate {certificate_arn} not issued within {timeout:.0f}s"
                raise IssuanceTimeoutError(msg)

            delay = min(self._poll_interval, remaining)
            if cancel is not None:
                if cancel.wait(delay):
                    msg = f"Cancelled while waiting for {certificate_arn}"
                    raise CancellationRequestedError(msg)
            else:
                time.sleep(delay)

    def get_certificate(
        self,
        *,
        certificate_arn: str,
        authority_arn: str,
    ) -> IssuedChain:
        try:
            response = self._client.get_certificate(
                CertificateArn=certificate_arn,
                CertificateAuthorityArn=authority_arn,
            )
        except (ClientError, BotoCoreError) as exc:
            msg = f"GetCertificate failed for {certificate_arn}: {exc}"
            raise RetrievalFailedError(msg, retryable=_is_retryable(exc)) from exc

        return IssuedChain(
            certificate=response["Certificate"],
            certificate_chain=response.get("CertificateChain", ""),
        )
