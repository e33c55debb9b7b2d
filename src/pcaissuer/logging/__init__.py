"""Logging subsystem for pcaissuer.

Public API::

    from pcaissuer.logging import configure_logging, signing_context

    configure_logging(settings.logging)

    with signing_context("default/my-cert"):
        log.info("tagged with request_id=default/my-cert")
"""

from pcaissuer.logging.context import current_request_id, signing_context
from pcaissuer.logging.setup import configure_logging

__all__ = ["configure_logging", "current_request_id", "signing_context"]
