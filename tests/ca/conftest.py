"""Shared fixtures for the signing workflow tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.x509.oid import NameOID

from pcaissuer.ca.base import IssuedChain, IssuingService

AUTHORITY_ARN = (
    "arn:aws:acm-pca:us-east-1:111122223333:"
    "certificate-authority/11111111-2222-3333-4444-555555555555"
)
CERTIFICATE_ARN = f"{AUTHORITY_ARN}/certificate/0123456789abcdef"


def _name(cn: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, cn)])


def _csr_pem(key) -> bytes:
    algorithm = None if isinstance(key, ed25519.Ed25519PrivateKey) else hashes.SHA256()
    csr = (
        x509.CertificateSigningRequestBuilder()
        .subject_name(_name("test.example.com"))
        .sign(key, algorithm)
    )
    return csr.public_bytes(serialization.Encoding.PEM)


def _certificate(subject: str, issuer: str, key, signing_key) -> x509.Certificate:
    now = datetime.now(UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(_name(subject))
        .issuer_name(_name(issuer))
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=30))
        .sign(signing_key, hashes.SHA256())
    )


# ---------------------------------------------------------------------------
# Keys and CSRs
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec_csr_pem(ec_key) -> bytes:
    """PEM CSR for a P-256 key."""
    return _csr_pem(ec_key)


@pytest.fixture(scope="session")
def rsa_csr_pem() -> bytes:
    """PEM CSR for a 2048-bit RSA key."""
    return _csr_pem(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def ed25519_csr_pem() -> bytes:
    """PEM CSR for an Ed25519 key."""
    return _csr_pem(ed25519.Ed25519PrivateKey.generate())


# ---------------------------------------------------------------------------
# Certificate chains
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def cert_pems() -> list[bytes]:
    """Leaf, intermediate and root certificates as PEM, leaf first."""
    root_key = ec.generate_private_key(ec.SECP256R1())
    int_key = ec.generate_private_key(ec.SECP256R1())
    leaf_key = ec.generate_private_key(ec.SECP256R1())

    root = _certificate("Test Root", "Test Root", root_key, root_key)
    intermediate = _certificate("Test Intermediate", "Test Root", int_key, root_key)
    leaf = _certificate("test.example.com", "Test Intermediate", leaf_key, int_key)
    return [c.public_bytes(serialization.Encoding.PEM) for c in (leaf, intermediate, root)]


@pytest.fixture(scope="session")
def extra_intermediate_pem() -> bytes:
    """A second, unrelated CA certificate for longer chains."""
    key = ec.generate_private_key(ec.SECP256R1())
    cert = _certificate("Test Intermediate 2", "Test Intermediate 2", key, key)
    return cert.public_bytes(serialization.Encoding.PEM)


# ---------------------------------------------------------------------------
# Issuing service test double
# ---------------------------------------------------------------------------


class FakeIssuingService(IssuingService):
    """Records calls and returns canned results.

    Set ``issue_error`` / ``wait_error`` / ``get_error`` to make the
    corresponding operation raise.
    """

    def __init__(self, certificate: str, certificate_chain: str) -> None:
        self.certificate = certificate
        self.certificate_chain = certificate_chain
        self.issue_calls: list[dict] = []
        self.wait_calls: list[dict] = []
        self.get_calls: list[dict] = []
        self.issue_error: Exception | None = None
        self.wait_error: Exception | None = None
        self.get_error: Exception | None = None

    def issue_certificate(self, **kwargs) -> str:
        self.issue_calls.append(kwargs)
        if self.issue_error is not None:
            raise self.issue_error
        return CERTIFICATE_ARN

    def wait_until_issued(self, **kwargs) -> None:
        self.wait_calls.append(kwargs)
        if self.wait_error is not None:
            raise self.wait_error

    def get_certificate(self, **kwargs) -> IssuedChain:
        self.get_calls.append(kwargs)
        if self.get_error is not None:
            raise self.get_error
        return IssuedChain(
            certificate=self.certificate,
            certificate_chain=self.certificate_chain,
        )


@pytest.fixture()
def fake_service(cert_pems) -> FakeIssuingService:
    """Issuing service returning leaf / intermediate+root (AWS formatting)."""
    leaf, intermediate, root = cert_pems
    # AWS returns the leaf and chain without a trailing newline
    return FakeIssuingService(
        certificate=leaf.decode("ascii").rstrip("\n"),
        certificate_chain=(intermediate + root).decode("ascii").rstrip("\n"),
    )


@pytest.fixture()
def authority_arn() -> str:
    return AUTHORITY_ARN


@pytest.fixture()
def certificate_arn() -> str:
    return CERTIFICATE_ARN
