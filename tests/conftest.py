"""Root conftest for the pcaissuer test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import yaml

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


# ---------------------------------------------------------------------------
# Minimal config data shared by multiple test modules
# ---------------------------------------------------------------------------


@pytest.fixture()
def minimal_config_data() -> dict:
    """Return a dict containing the minimum required config fields."""
    return {
        "issuers": [
            {
                "namespace": "default",
                "name": "pca-issuer",
                "authority_arn": (
                    "arn:aws:acm-pca:us-east-1:111122223333:"
                    "certificate-authority/11111111-2222-3333-4444-555555555555"
                ),
            },
        ],
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path, minimal_config_data: dict) -> Path:
    """Write *minimal_config_data* to a temp YAML file and return its path."""
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        yaml.safe_dump(minimal_config_data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    return cfg


# ---------------------------------------------------------------------------
# Config singleton cleanup, autouse so every test gets a fresh slate
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fresh_config():
    """Reset the IssuerConfig singleton before and after every test."""
    from pcaissuer.config.issuer_config import IssuerConfig

    IssuerConfig.reset()
    yield
    IssuerConfig.reset()


@pytest.fixture(autouse=True)
def restore_pcaissuer_logger():
    """Undo ``configure_logging`` side effects on the package logger."""
    import logging

    logger = logging.getLogger("pcaissuer")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]
