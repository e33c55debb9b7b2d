"""Configuration subsystem for pcaissuer.

Public API::

    from pcaissuer.config import get_config, IssuerConfig

    # At startup (CLI only):
    IssuerConfig(config_file="config.yaml")

    # Everywhere else:
    cfg     = get_config()
    timeout = cfg.settings.ca.issuance_timeout_seconds   # typed access
"""

from pcaissuer.config.issuer_config import (
    ConfigValidationError,
    IssuerConfig,
    get_config,
)
from pcaissuer.config.settings import (
    AwsSettings,
    CASettings,
    IssuerSettings,
    LoggingSettings,
    PcaIssuerSettings,
    build_settings,
)

__all__ = [
    "AwsSettings",
    "CASettings",
    "ConfigValidationError",
    "IssuerConfig",
    "IssuerSettings",
    "LoggingSettings",
    "PcaIssuerSettings",
    "build_settings",
    "get_config",
]
