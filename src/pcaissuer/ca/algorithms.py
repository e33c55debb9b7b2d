"""Signature algorithm selection.

Maps the public key of a CSR to the AWS Private CA signing algorithm
of matching strength.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa

from pcaissuer.ca.base import UnsupportedKeyAlgorithmError, UnsupportedKeySizeError
from pcaissuer.core.types import KeyAlgorithm, SigningAlgorithm

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import PublicKeyTypes

# Descending thresholds, first match wins.
_RSA_THRESHOLDS: tuple[tuple[int, SigningAlgorithm], ...] = (
    (4096, SigningAlgorithm.SHA512_WITH_RSA),
    (3072, SigningAlgorithm.SHA384_WITH_RSA),
    (2048, SigningAlgorithm.SHA256_WITH_RSA),
)

# A size of 0 means "undetermined" and falls back to SHA-256.
_ECDSA_CURVES: dict[int, SigningAlgorithm] = {
    521: SigningAlgorithm.SHA512_WITH_ECDSA,
    384: SigningAlgorithm.SHA384_WITH_ECDSA,
    256: SigningAlgorithm.SHA256_WITH_ECDSA,
    0: SigningAlgorithm.SHA256_WITH_ECDSA,
}

# Only the NIST prime curves have an AWS Private CA signing algorithm.
_NIST_CURVES: tuple[type[ec.EllipticCurve], ...] = (
    ec.SECP256R1,
    ec.SECP384R1,
    ec.SECP521R1,
)


@dataclass(frozen=True)
class PublicKeyInfo:
    """Algorithm tag and strength of a public key.

    ``bit_size`` is the modulus length for RSA and DSA keys and the curve
    size for elliptic-curve keys (non-NIST curves are tagged ``UNKNOWN``);
    it is 0 for every other algorithm.
    """

    algorithm: KeyAlgorithm
    bit_size: int = 0

    @classmethod
    def from_public_key(cls, key: PublicKeyTypes) -> PublicKeyInfo:
        if isinstance(key, rsa.RSAPublicKey):
            return cls(KeyAlgorithm.RSA, key.key_size)
        if isinstance(key, ec.EllipticCurvePublicKey):
            if not isinstance(key.curve, _NIST_CURVES):
                return cls(KeyAlgorithm.UNKNOWN, key.curve.key_size)
            return cls(KeyAlgorithm.ECDSA, key.curve.key_size)
        if isinstance(key, ed25519.Ed25519PublicKey):
            return cls(KeyAlgorithm.ED25519)
        if isinstance(key, ed448.Ed448PublicKey):
            return cls(KeyAlgorithm.ED448)
        if isinstance(key, dsa.DSAPublicKey):
            return cls(KeyAlgorithm.DSA, key.key_size)
        return cls(KeyAlgorithm.UNKNOWN)


def signature_algorithm(key: PublicKeyInfo) -> SigningAlgorithm:
    """Return the signing algorithm for *key*.

    Raises
    ------
    UnsupportedKeySizeError
        For RSA keys of 1-2047 bits and unlisted curves.
    UnsupportedKeyAlgorithmError
        For any algorithm other than RSA and ECDSA.

    """
    if key.algorithm == KeyAlgorithm.RSA:
        for threshold, algorithm in _RSA_THRESHOLDS:
            if key.bit_size >= threshold:
                return algorithm
        if key.bit_size == 0:
            return SigningAlgorithm.SHA256_WITH_RSA
        msg = f"unsupported rsa keysize specified: {key.bit_size}"
        raise UnsupportedKeySizeError(msg)

    if key.algorithm == KeyAlgorithm.ECDSA:
        algorithm = _ECDSA_CURVES.get(key.bit_size)
        if algorithm is None:
            msg = f"unsupported ecdsa keysize specified: {key.bit_size}"
            raise UnsupportedKeySizeError(msg)
        return algorithm

    msg = f"unsupported public key algorithm: {key.algorithm}"
    raise UnsupportedKeyAlgorithmError(msg)
