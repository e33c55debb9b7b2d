"""Enumerated types shared across the signing workflow.

All enums inherit from :class:`enum.StrEnum` so their ``.value`` is the
exact string the AWS Private CA API (or the cert-manager
CertificateRequest resource) uses on the wire.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Requested key usages
# ---------------------------------------------------------------------------


class KeyUsage(StrEnum):
    """Usages a certificate request may ask for (cert-manager vocabulary)."""

    SIGNING = "signing"
    DIGITAL_SIGNATURE = "digital signature"
    CONTENT_COMMITMENT = "content commitment"
    KEY_ENCIPHERMENT = "key encipherment"
    KEY_AGREEMENT = "key agreement"
    DATA_ENCIPHERMENT = "data encipherment"
    CERT_SIGN = "cert sign"
    CRL_SIGN = "crl sign"
    ENCIPHER_ONLY = "encipher only"
    DECIPHER_ONLY = "decipher only"
    ANY = "any"
    SERVER_AUTH = "server auth"
    CLIENT_AUTH = "client auth"
    CODE_SIGNING = "code signing"
    EMAIL_PROTECTION = "email protection"
    SMIME = "s/mime"
    IPSEC_END_SYSTEM = "ipsec end system"
    IPSEC_TUNNEL = "ipsec tunnel"
    IPSEC_USER = "ipsec user"
    TIMESTAMPING = "timestamping"
    OCSP_SIGNING = "ocsp signing"
    MICROSOFT_SGC = "microsoft sgc"
    NETSCAPE_SGC = "netscape sgc"


# ---------------------------------------------------------------------------
# Public key algorithms
# ---------------------------------------------------------------------------


class KeyAlgorithm(StrEnum):
    RSA = "RSA"
    ECDSA = "ECDSA"
    ED25519 = "Ed25519"
    ED448 = "Ed448"
    DSA = "DSA"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# AWS Private CA vocabulary
# ---------------------------------------------------------------------------


class SigningAlgorithm(StrEnum):
    SHA256_WITH_ECDSA = "SHA256WITHECDSA"
    SHA384_WITH_ECDSA = "SHA384WITHECDSA"
    SHA512_WITH_ECDSA = "SHA512WITHECDSA"
    SHA256_WITH_RSA = "SHA256WITHRSA"
    SHA384_WITH_RSA = "SHA384WITHRSA"
    SHA512_WITH_RSA = "SHA512WITHRSA"


class TemplateArn(StrEnum):
    CODE_SIGNING = "arn:aws:acm-pca:::template/CodeSigningCertificate/V1"
    CLIENT_AUTH = "arn:aws:acm-pca:::template/EndEntityClientAuthCertificate/V1"
    SERVER_AUTH = "arn:aws:acm-pca:::template/EndEntityServerAuthCertificate/V1"
    OCSP_SIGNING = "arn:aws:acm-pca:::template/OCSPSigningCertificate/V1"
    END_ENTITY = "arn:aws:acm-pca:::template/EndEntityCertificate/V1"
    BLANK_PASSTHROUGH = (
        "arn:aws:acm-pca:::template/BlankEndEntityCertificate_CSRPassthrough/V1"
    )


class ValidityPeriodType(StrEnum):
    DAYS = "DAYS"
