"""
Fixtures comunes: Settings de prueba y fields.json temporal.
"""
from __future__ import annotations

import json

import pytest

from metadata_sync.core.config import Settings


@pytest.fixture
def make_settings(tmp_path):
    """Factory de Settings validos apuntando a un CONFIG_DIR temporal."""

    def _make(**overrides) -> Settings:
        values = {
            "SECTIGO_API_URL": "https://sectigo.test",
            "SECTIGO_LOGIN": "sc-user",
            "SECTIGO_PASSWORD": "sc-pass",
            "SECTIGO_CUSTOMER_URI": "acme",
            "SSL_TYPE_IDS": [1234],
            "KEYFACTOR_API_URL": "https://keyfactor.test/KeyfactorAPI",
            "KEYFACTOR_LOGIN": "kf-user",
            "KEYFACTOR_PASSWORD": "kf-pass",
            "CONFIG_DIR": str(tmp_path),
            "LOG_FILE": "",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def write_fields_file(tmp_path):
    """Escribe un fields.json en el CONFIG_DIR temporal."""

    def _write(manual=None, custom=None):
        document = {"ManualFields": manual or [], "CustomFields": custom or []}
        path = tmp_path / "fields.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
