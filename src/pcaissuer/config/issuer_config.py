"""pcaissuer configuration loader.

Lifecycle::

    # 1. CLI creates the singleton (once, at startup)
    IssuerConfig(config_file="/etc/pcaissuer/config.yaml")

    # 2. Any module retrieves it afterwards
    from pcaissuer.config import get_config
    cfg = get_config()
    cfg.settings.ca.issuance_timeout_seconds  # typed access
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from pcaissuer.config.settings import PcaIssuerSettings, build_settings

_SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

_CLASS_PATH_RE = re.compile(
    r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)+$",
)

_BUILTIN_BACKENDS = frozenset({"acm_pca"})

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level singleton reference
# ---------------------------------------------------------------------------
_instance: IssuerConfig | None = None


def get_config() -> IssuerConfig:
    """Return the initialised configuration singleton.

    Raises :class:`RuntimeError` if :class:`IssuerConfig` has not been
    created yet (i.e. the CLI entry point has not run).
    """
    if _instance is None:
        msg = (
            "Configuration not initialised. "
            "IssuerConfig must be created with config_file= before calling get_config()."
        )
        raise RuntimeError(msg)
    return _instance


# ---------------------------------------------------------------------------
# Validation error collector
# ---------------------------------------------------------------------------


class ConfigValidationError(Exception):
    """Raised when schema or cross-field validation finds problems."""

    def __init__(self, errors: list[str]) -> None:
        """Store *errors* and build a human-readable message."""
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def _resolve_env_vars(
    data: Any,  # noqa: ANN401
    path: str = "",
) -> None:
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else key
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                _resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                _resolve_env_vars(item, child_path)


def _read_file(path: Path) -> dict:
    """Parse a YAML or JSON config file into a dict."""
    with path.open(encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Configuration root in {path} must be a mapping"
        raise ConfigValidationError([msg])
    return data


# ---------------------------------------------------------------------------
# Config class
# ---------------------------------------------------------------------------


class IssuerConfig:
    """Central configuration for pcaissuer.

    The JSON schema is bundled at ``config/schema.json``; users supply
    only ``config_file``.

    After construction the typed settings tree is available at
    :pyattr:`settings`.  Changing the file afterwards has no effect;
    build a new instance to pick up edits, which re-validates.
    """

    def __init__(self, *, config_file: str | Path) -> None:
        """Load, validate and publish the configuration singleton.

        Parameters
        ----------
        config_file:
            Path to the YAML/JSON configuration file.

        Raises
        ------
        ConfigValidationError
            If the schema or cross-field checks fail.

        """
        global _instance  # noqa: PLW0603

        self._path = Path(config_file)
        self._data: dict[str, Any] = {}
        self._load()
        self._validate_schema()
        self.additional_checks()

        self._settings: PcaIssuerSettings = build_settings(self._data)
        _instance = self

    # -- lifecycle ----------------------------------------------------------

    def _load(self) -> None:
        """Load config file then resolve ``${VAR}`` env-var references.

        Runs env-var resolution **before** schema validation so that
        substituted values (e.g. ``${LOG_LEVEL:-INFO}``) are checked
        against enum constraints in the schema.
        """
        self._data = _read_file(self._path)
        _resolve_env_vars(self._data)
        self._data["_source"] = str(self._path)

    def _validate_schema(self) -> None:
        with _SCHEMA_PATH.open(encoding="utf-8") as f:
            schema = json.load(f)
        validator = jsonschema.Draft202012Validator(schema)
        errors = [
            f"{'.'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
            for err in sorted(validator.iter_errors(self._data), key=lambda e: list(e.path))
        ]
        if errors:
            raise ConfigValidationError(errors)

    # -- access -------------------------------------------------------------

    @property
    def settings(self) -> PcaIssuerSettings:
        """Fully-typed, frozen settings tree."""
        return self._settings

    # -- cross-field validation ---------------------------------------------

    def additional_checks(self) -> None:
        """Semantic & cross-field validation, run after schema validation."""
        errors: list[str] = []
        warnings: list[str] = []

        ca = self._data.get("ca") or {}
        issuers = self._data.get("issuers") or []

        # -- CA --
        backend = ca.get("backend", "acm_pca")
        if backend not in _BUILTIN_BACKENDS:
            if not backend.startswith("ext:"):
                errors.append(
                    f"ca.backend '{backend}' is unknown. "
                    f"Known backends: {sorted(_BUILTIN_BACKENDS)}. "
                    "Use 'ext:fully.qualified.Class' for custom issuing services.",
                )
            elif not _CLASS_PATH_RE.match(backend[4:]):
                errors.append(
                    f"ca.backend '{backend}' is not a valid fully qualified "
                    "Python class path (expected 'ext:package.module.ClassName')",
                )

        timeout = ca.get("issuance_timeout_seconds", 300)
        poll = ca.get("poll_interval_seconds", 3)
        if poll > timeout:
            errors.append(
                f"ca.poll_interval_seconds ({poll}) must be <= "
                f"ca.issuance_timeout_seconds ({timeout})",
            )

        # -- Issuers --
        seen: set[tuple[str, str]] = set()
        for idx, entry in enumerate(issuers):
            identity = (entry.get("namespace", "default"), entry.get("name", ""))
            if identity in seen:
                errors.append(
                    f"issuers[{idx}] duplicates issuer '{identity[0]}/{identity[1]}'",
                )
            seen.add(identity)
            if "/" in identity[0] or "/" in identity[1]:
                errors.append(
                    f"issuers[{idx}] namespace and name must not contain '/'",
                )
            arn = entry.get("authority_arn", "")
            if not arn.startswith("arn:"):
                errors.append(
                    f"issuers[{idx}].authority_arn '{arn}' is not an ARN",
                )
            elif ":acm-pca:" not in arn and backend in _BUILTIN_BACKENDS:
                warnings.append(
                    f"issuers[{idx}].authority_arn '{arn}' does not look like "
                    "an AWS Private CA authority",
                )

        for w in warnings:
            log.warning("Config warning: %s", w)

        if errors:
            raise ConfigValidationError(errors)

    # -- helpers ------------------------------------------------------------

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton -- testing only."""
        global _instance  # noqa: PLW0603
        _instance = None

    def __repr__(self) -> str:
        """Return a developer-friendly representation."""
        source = self._data.get("_source", "?")
        return f"<IssuerConfig config_file={source}>"
