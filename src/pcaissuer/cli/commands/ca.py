"""CA management subcommands."""

from __future__ import annotations

import logging
import sys

log = logging.getLogger(__name__)


def run_ca(config, args) -> None:
    """Handle ca subcommands."""
    if args.ca_command == "test-sign":
        _ca_test_sign(config, args)
    else:
        sys.exit(1)


def _ca_test_sign(config, args) -> None:
    """Sign an ephemeral CSR with each issuer to verify it is working."""
    from cryptography import x509
    from cryptography.hazmat.primitives import hashes, serialization
    from cryptography.hazmat.primitives.asymmetric import ec
    from cryptography.x509.oid import NameOID

    from pcaissuer.ca.backends import build_registry
    from pcaissuer.ca.base import SignerError, SigningRequest
    from pcaissuer.ca.registry import NamespacedName
    from pcaissuer.core.types import KeyUsage

    try:
        registry = build_registry(config.settings)
    except SignerError as exc:
        log.error("Failed to load issuing service: %s", exc.detail)
        sys.exit(1)

    if args.issuer:
        try:
            identities = [NamespacedName.parse(args.issuer)]
        except ValueError as exc:
            sys.stderr.write(f"pcaissuer: error: {exc}\n")
            sys.exit(1)
    else:
        identities = [NamespacedName(i.namespace, i.name) for i in config.settings.issuers]

    # Generate ephemeral key + CSR
    key = ec.generate_private_key(ec.SECP256R1())
    csr = (
        x509.CertificateSigningRequestBuilder()
        .subject_name(
            x509.Name(
                [
                    x509.NameAttribute(NameOID.COMMON_NAME, "test.pcaissuer.internal"),
                ]
            )
        )
        .add_extension(
            x509.SubjectAlternativeName(
                [
                    x509.DNSName("test.pcaissuer.internal"),
                ]
            ),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    csr_pem = csr.public_bytes(serialization.Encoding.PEM)

    failed = False
    for identity in identities:
        signer = registry.lookup(identity)
        if signer is None:
            log.error("No issuer configured as %s", identity)
            failed = True
            continue

        request = SigningRequest(
            csr=csr_pem,
            namespace=identity.namespace,
            name=f"test-sign-{identity.name}",
            usages=(KeyUsage.SERVER_AUTH,),
            duration=None,
        )
        try:
            signer.sign(request)
        except SignerError as exc:
            log.error("Test signing with %s failed: %s", identity, exc.detail)
            failed = True
        else:
            sys.stdout.write(f"{identity}: OK\n")

    if failed:
        sys.exit(1)
