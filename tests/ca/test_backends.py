"""Tests for pcaissuer.ca.backends: service loading and signer factory."""

from __future__ import annotations

import sys
import types
from unittest.mock import MagicMock, patch

import pytest

from pcaissuer.ca.acm_pca import AcmPcaIssuingService
from pcaissuer.ca.backends import build_registry, load_issuing_service, new_signer
from pcaissuer.ca.base import IssuedChain, IssuingService, SignerError
from pcaissuer.ca.registry import NamespacedName
from pcaissuer.ca.signer import PCASigner
from pcaissuer.config.settings import (
    AwsSettings,
    CASettings,
    IssuerSettings,
    build_settings,
)

_AWS = AwsSettings(region="us-east-1", profile=None, endpoint_url=None)


def _ca(backend: str = "acm_pca") -> CASettings:
    return CASettings(
        backend=backend,
        default_validity_days=14,
        issuance_timeout_seconds=60.0,
        poll_interval_seconds=2.0,
    )


class _ExtService(IssuingService):
    def __init__(self, ca_settings, aws_settings):
        self.ca_settings = ca_settings
        self.aws_settings = aws_settings

    def issue_certificate(self, **kwargs):
        return "arn"

    def wait_until_issued(self, **kwargs):
        return None

    def get_certificate(self, **kwargs):
        return IssuedChain(certificate="", certificate_chain="")


class _NotAService:
    pass


@pytest.fixture()
def ext_module(monkeypatch):
    module = types.ModuleType("pcaissuer_test_ext")
    module.ExtService = _ExtService
    module.NotAService = _NotAService
    monkeypatch.setitem(sys.modules, "pcaissuer_test_ext", module)
    return module


class TestLoadIssuingService:
    def test_builtin(self):
        with patch("pcaissuer.ca.acm_pca.boto3.session.Session"):
            service = load_issuing_service(_ca(), _AWS)

        assert isinstance(service, AcmPcaIssuingService)

    def test_external(self, ext_module):
        ca = _ca("ext:pcaissuer_test_ext.ExtService")

        service = load_issuing_service(ca, _AWS)

        assert isinstance(service, _ExtService)
        assert service.ca_settings is ca
        assert service.aws_settings is _AWS

    def test_unknown(self):
        with pytest.raises(SignerError, match="Unknown issuing service"):
            load_issuing_service(_ca("vault"), _AWS)

    def test_external_not_qualified(self):
        with pytest.raises(SignerError, match="fully"):
            load_issuing_service(_ca("ext:ExtService"), _AWS)

    def test_external_missing_module(self):
        with pytest.raises(SignerError, match="Failed to load"):
            load_issuing_service(_ca("ext:no_such_module_xyz.Service"), _AWS)

    def test_external_missing_class(self, ext_module):
        with pytest.raises(SignerError, match="Failed to load"):
            load_issuing_service(_ca("ext:pcaissuer_test_ext.Missing"), _AWS)

    def test_external_wrong_type(self, ext_module):
        with pytest.raises(SignerError, match="not a subclass"):
            load_issuing_service(_ca("ext:pcaissuer_test_ext.NotAService"), _AWS)


class TestSignerFactory:
    def test_new_signer(self):
        service = MagicMock(spec=IssuingService)
        issuer = IssuerSettings(namespace="ns", name="issuer", authority_arn="arn:aws:acm-pca:x")

        signer = new_signer(service, issuer, _ca())

        assert isinstance(signer, PCASigner)
        assert signer.authority_arn == "arn:aws:acm-pca:x"
        assert signer._issuance_timeout == 60.0
        assert signer._default_validity_days == 14

    def test_build_registry(self, minimal_config_data):
        minimal_config_data["issuers"].append(
            {"namespace": "team-b", "name": "other", "authority_arn": "arn:aws:acm-pca:b"},
        )
        settings = build_settings(minimal_config_data)
        service = MagicMock(spec=IssuingService)

        registry = build_registry(settings, service)

        assert len(registry) == 2
        other = registry.lookup(NamespacedName("team-b", "other"))
        assert other.authority_arn == "arn:aws:acm-pca:b"
        assert NamespacedName("default", "pca-issuer") in registry

    def test_build_registry_loads_service(self, minimal_config_data):
        settings = build_settings(minimal_config_data)

        with patch("pcaissuer.ca.backends.load_issuing_service") as loader:
            registry = build_registry(settings)

        loader.assert_called_once_with(settings.ca, settings.aws)
        signer = registry.lookup(NamespacedName("default", "pca-issuer"))
        assert signer._service is loader.return_value
