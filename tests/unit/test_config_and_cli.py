"""
Tests de Settings y del punto de entrada de linea de comandos.
"""
from __future__ import annotations

import pytest

from metadata_sync import __main__ as cli
from metadata_sync.shared.constants.sync_constants import SyncDirection
from metadata_sync.shared.exceptions.sync import ConfigurationError, InvalidSyncDirectionError

_REQUIRED_ENV = {
    "SECTIGO_API_URL": "https://sectigo.test",
    "SECTIGO_LOGIN": "sc-user",
    "SECTIGO_PASSWORD": "sc-pass",
    "SECTIGO_CUSTOMER_URI": "acme",
    "SSL_TYPE_IDS": "[1234]",
    "KEYFACTOR_API_URL": "https://keyfactor.test",
    "KEYFACTOR_LOGIN": "kf-user",
    "KEYFACTOR_PASSWORD": "kf-pass",
}


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Entorno sin variables del sync y sin .env en el directorio actual."""
    for name in list(_REQUIRED_ENV) + ["CONFIG_DIR", "LOG_FILE", "LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_FILE", "")
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestSettings:

    def test_defaults(self, make_settings):
        """Verifica los valores por defecto de Settings."""
        settings = make_settings()

        assert settings.KEYFACTOR_DATE_FORMAT == "M/d/yyyy h:mm:ss tt"
        assert settings.SECTIGO_PAGE_SIZE == 25
        assert settings.KEYFACTOR_PAGE_SIZE == 100
        assert settings.ISSUER_DN_LOOKUP_TERM == "Sectigo"
        assert settings.IMPORT_ALL_CUSTOM_FIELDS is False
        assert settings.fields_file.name == "fields.json"
        assert settings.banned_characters_file.name == "bannedcharacters.json"
        settings.validate_required()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"SECTIGO_API_URL": ""},
            {"KEYFACTOR_LOGIN": ""},
            {"SSL_TYPE_IDS": []},
            {"KEYFACTOR_PAGE_SIZE": 0},
            {"SANITIZER_WORKERS": 0},
        ],
    )
    def test_validate_required(self, make_settings, overrides):
        """Verifica que cada dato obligatorio faltante es error de configuracion."""
        with pytest.raises(ConfigurationError) as exc_info:
            make_settings(**overrides).validate_required()

        assert exc_info.value.exit_code == 2

    def test_reads_environment(self, clean_env):
        """Verifica la lectura desde variables de entorno."""
        for name, value in _REQUIRED_ENV.items():
            clean_env.setenv(name, value)
        clean_env.setenv("IMPORT_ALL_CUSTOM_FIELDS", "true")

        settings = cli.load_settings(config_dir="/etc/metadata-sync")

        assert settings.SSL_TYPE_IDS == [1234]
        assert settings.IMPORT_ALL_CUSTOM_FIELDS is True
        assert str(settings.config_dir) == "/etc/metadata-sync"


class TestSyncDirection:

    def test_parse_is_case_insensitive(self):
        """Verifica que el modo no distingue mayusculas."""
        assert SyncDirection.parse("sctokf") is SyncDirection.SC_TO_KF
        assert SyncDirection.parse(" KFtoSC ") is SyncDirection.KF_TO_SC

    @pytest.mark.parametrize("value", [None, "", "both"])
    def test_parse_rejects_unknown(self, value):
        """Verifica que un modo desconocido es rechazado."""
        with pytest.raises(InvalidSyncDirectionError) as exc_info:
            SyncDirection.parse(value)

        assert exc_info.value.details["valid_values"] == ["KFtoSC", "SCtoKF"]


class TestMain:
    """Codigos de salida del CLI."""

    def test_invalid_mode_exits_with_2(self, clean_env):
        """Verifica exit 2 con un modo invalido."""
        for name, value in _REQUIRED_ENV.items():
            clean_env.setenv(name, value)

        assert cli.main(["sideways"]) == 2

    def test_missing_mode_exits_with_2(self, clean_env):
        """Verifica exit 2 sin modo."""
        assert cli.main([]) == 2

    def test_missing_configuration_exits_with_2(self, clean_env):
        """Verifica exit 2 sin configuracion."""
        assert cli.main(["SCtoKF"]) == 2

    def test_malformed_setting_exits_with_2(self, clean_env):
        """Verifica exit 2 con un valor mal formado."""
        clean_env.setenv("KEYFACTOR_PAGE_SIZE", "many")

        assert cli.main(["SCtoKF"]) == 2

    def test_successful_run_exits_with_0(self, clean_env, monkeypatch):
        """Verifica exit 0 en una corrida completa."""
        calls = []

        class _StubUseCases:
            def run(self, mode):
                calls.append(mode)

        monkeypatch.setattr(cli, "build_use_cases", lambda settings: _StubUseCases())

        assert cli.main(["SCtoKF", "--config-dir", "conf"]) == 0
        assert calls == ["SCtoKF"]


class TestLogging:

    def test_file_sink_is_created(self, tmp_path):
        """Verifica que el log se escribe en el archivo configurado."""
        from loguru import logger

        from metadata_sync.core.logging import configure_logging

        log_file = tmp_path / "logs" / "metadata_sync.log"
        configure_logging("DEBUG", str(log_file))
        logger.info("[START] prueba de logging")
        logger.remove()

        assert "[START] prueba de logging" in log_file.read_text(encoding="utf-8")
