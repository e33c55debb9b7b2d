"""Certificate signing workflow.

Exports the issuing service and signer interfaces, the error types,
the AWS Private CA signer, and the signer registry.
"""

from pcaissuer.ca.base import (
    CancellationRequestedError,
    GenericSigner,
    InvalidChainError,
    IssuanceFailedError,
    IssuanceSubmitFailedError,
    IssuanceTimeoutError,
    IssuedChain,
    IssuingService,
    MalformedCSRError,
    RetrievalFailedError,
    SignerError,
    SigningRequest,
    UnsupportedKeyAlgorithmError,
    UnsupportedKeySizeError,
)
from pcaissuer.ca.registry import NamespacedName, SignerRegistry
from pcaissuer.ca.signer import PCASigner

__all__ = [
    "CancellationRequestedError",
    "GenericSigner",
    "InvalidChainError",
    "IssuanceFailedError",
    "IssuanceSubmitFailedError",
    "IssuanceTimeoutError",
    "IssuedChain",
    "IssuingService",
    "MalformedCSRError",
    "NamespacedName",
    "PCASigner",
    "RetrievalFailedError",
    "SignerError",
    "SignerRegistry",
    "SigningRequest",
    "UnsupportedKeyAlgorithmError",
    "UnsupportedKeySizeError",
]
