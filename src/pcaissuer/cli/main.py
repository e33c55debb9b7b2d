"""pcaissuer command-line entry point.

Usage::

    pcaissuer -c config.yaml --validate-only
    pcaissuer -c config.yaml sign --issuer default/pca-issuer --csr req.pem \\
        --namespace default --name my-cert --usage "server auth"
    pcaissuer -c config.yaml ca test-sign
    python -m pcaissuer -c config.yaml sign ...
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pcaissuer.core.types import KeyUsage

log = logging.getLogger(__name__)


def _get_version() -> str:
    from pcaissuer import __version__

    return __version__


def _positive_float(value: str) -> float:
    """argparse type for strictly positive numbers."""
    try:
        number = float(value)
    except ValueError:
        msg = f"invalid number: '{value}'"
        raise argparse.ArgumentTypeError(msg) from None
    if not number > 0:
        msg = f"must be greater than 0, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcaissuer",
        description="pcaissuer: sign certificate requests with AWS Private CA",
    )
    parser.add_argument(
        "-c",
        "--config",
        required=True,
        metavar="PATH",
        help="Path to the configuration file (YAML or JSON).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug output (full tracebacks, verbose logging).",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Validate the configuration file and exit.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # sign
    sign_parser = subparsers.add_parser("sign", help="Sign a certificate request")
    sign_parser.add_argument(
        "--issuer",
        required=True,
        metavar="NAMESPACE/NAME",
        help="Configured issuer that signs the request.",
    )
    sign_parser.add_argument("--csr", required=True, metavar="PATH", help="PEM CSR file")
    sign_parser.add_argument(
        "--usage",
        action="append",
        default=[],
        choices=[u.value for u in KeyUsage],
        metavar="USAGE",
        help="Requested key usage (repeatable), e.g. 'server auth'.",
    )
    sign_parser.add_argument(
        "--duration",
        type=_positive_float,
        default=None,
        metavar="HOURS",
        help="Requested certificate lifetime in hours.",
    )
    sign_parser.add_argument("--namespace", required=True, help="Request namespace")
    sign_parser.add_argument("--name", required=True, help="Request name")
    sign_parser.add_argument("--chain-out", metavar="PATH", help="Write the chain here")
    sign_parser.add_argument("--root-out", metavar="PATH", help="Write the root here")
    sign_parser.add_argument(
        "--deadline",
        type=_positive_float,
        default=None,
        metavar="SECONDS",
        help="Abort the wait for issuance after this many seconds.",
    )

    # ca
    ca_parser = subparsers.add_parser("ca", help="Certificate authority checks")
    ca_sub = ca_parser.add_subparsers(dest="ca_command")
    test_sign = ca_sub.add_parser("test-sign", help="Sign an ephemeral CSR")
    test_sign.add_argument(
        "--issuer",
        default=None,
        metavar="NAMESPACE/NAME",
        help="Issuer to test (default: every configured issuer).",
    )

    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    sys.stderr.write(f"pcaissuer: error: {message}\n")


def _print_settings_summary(config) -> None:
    settings = config.settings
    sys.stdout.write(
        f"Configuration OK: backend={settings.ca.backend}, "
        f"issuers={len(settings.issuers)}, "
        f"timeout={settings.ca.issuance_timeout_seconds:.0f}s\n",
    )
    for issuer in settings.issuers:
        sys.stdout.write(f"  {issuer.namespace}/{issuer.name} -> {issuer.authority_arn}\n")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments, loads config, dispatches."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # -- resolve config path ---
    config_path = Path(args.config)
    if not config_path.is_file():
        _print_error(f"configuration file not found: {config_path}")
        sys.exit(1)

    # -- bootstrap logging early (basic stderr until config is loaded) ---
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # -- load & validate config ---
    try:
        from pcaissuer.config import ConfigValidationError, IssuerConfig

        config = IssuerConfig(config_file=str(config_path))
    except ConfigValidationError as exc:
        _print_error(str(exc))
        sys.exit(1)
    except Exception as exc:
        if args.debug:
            raise
        _print_error(f"failed to load configuration: {exc}")
        sys.exit(1)

    # -- replace bootstrap logging with structured logging ---
    from pcaissuer.logging import configure_logging

    configure_logging(config.settings.logging)

    if args.validate_only:
        _print_settings_summary(config)
        sys.exit(0)

    command = args.command

    if command == "sign":
        from pcaissuer.cli.commands.sign import run_sign

        run_sign(config, args)
    elif command == "ca":
        from pcaissuer.cli.commands.ca import run_ca

        run_ca(config, args)
    else:
        parser.print_help(sys.stderr)
        sys.exit(1)
