"""
Tests del registro de accessors por property path.
"""
from __future__ import annotations

import pytest

from metadata_sync.application.services.field_accessors import FieldAccessorRegistry, FieldPathError
from metadata_sync.infrastructure.external.sectigo.models import SectigoCertificateDetails


@pytest.fixture
def registry() -> FieldAccessorRegistry:
    return FieldAccessorRegistry(SectigoCertificateDetails)


@pytest.fixture
def details() -> SectigoCertificateDetails:
    return SectigoCertificateDetails.model_validate(
        {
            "sslId": 55,
            "commonName": "www.acme.test",
            "notBefore": "2024-01-01",
            "certType": {"id": 3, "name": "OV SSL"},
            "certificateDetails": {"issuer": "CN=Sectigo RSA", "sha1Hash": "AB12"},
            "subjectAlternativeNames": ["a.acme.test", "b.acme.test"],
        }
    )


class TestFieldAccessorRegistry:

    def test_alias_and_attribute_names(self, registry, details):
        """Se acepta el nombre camelCase del wire o el atributo snake_case."""
        assert registry.resolve(details, "notBefore") == "2024-01-01"
        assert registry.resolve(details, "not_before") == "2024-01-01"
        assert registry.resolve(details, "commonname") == "www.acme.test"

    def test_nested_path(self, registry, details):
        """Verifica la resolucion de paths anidados."""
        assert registry.resolve(details, "certificateDetails.sha1Hash") == "AB12"
        assert registry.resolve(details, "CERTTYPE.Name") == "OV SSL"

    def test_intermediate_none_returns_none(self, registry):
        """Verifica que un nivel intermedio None devuelve None."""
        empty = SectigoCertificateDetails()

        assert registry.resolve(empty, "certificateDetails.sha1Hash") is None

    def test_compile_is_cached(self, registry):
        """Verifica que el getter compilado se reutiliza."""
        assert registry.compile("certType.name") is registry.compile("CertType.Name")

    @pytest.mark.parametrize("path", ["", "missing", "certType.missing", "commonName.length"])
    def test_invalid_paths(self, registry, path):
        """Verifica que un path inexistente es rechazado."""
        with pytest.raises(FieldPathError):
            registry.compile(path)
