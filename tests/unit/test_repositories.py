"""
Tests de los repositorios JSON (bannedcharacters.json y fields.json).
"""
from __future__ import annotations

import json

import pytest

from metadata_sync.domain.entities.banned_characters import BannedCharacterEntry, BannedCharacterTable
from metadata_sync.infrastructure.repositories.banned_character_repository import BannedCharacterRepository
from metadata_sync.infrastructure.repositories.field_declaration_repository import load_field_declarations
from metadata_sync.shared.constants.sync_constants import FieldOrigin, MetadataDataType
from metadata_sync.shared.exceptions.sync import ConfigurationError


def _write(path, document):
    path.write_text(json.dumps(document), encoding="utf-8")


class TestBannedCharacterRepository:
    """Tests para BannedCharacterRepository."""

    def test_missing_file_gives_empty_table(self, tmp_path):
        """Verifica que sin archivo se parte de una tabla vacia."""
        table = BannedCharacterRepository(tmp_path / "bannedcharacters.json").load()

        assert len(table) == 0

    def test_load_preserves_order_and_legacy_null(self, tmp_path):
        """El string "null" se interpreta como sin reemplazo."""
        path = tmp_path / "bannedcharacters.json"
        _write(
            path,
            {
                "BannedCharacters": [
                    {"character": " ", "replacementcharacter": "_"},
                    {"character": "$", "replacementcharacter": "null"},
                    {"character": ".", "replacementcharacter": None},
                    {"character": "/", "replacementcharacter": ""},
                ]
            },
        )

        table = BannedCharacterRepository(path).load()

        assert [e.character for e in table] == [" ", "$", ".", "/"]
        assert table.get(" ").replacement == "_"
        assert table.get("$").replacement is None
        assert table.get(".").replacement is None
        assert table.get("/").replacement == ""

    def test_save_then_load(self, tmp_path):
        """Verifica que la tabla guardada se vuelve a leer igual."""
        path = tmp_path / "nested" / "bannedcharacters.json"
        repository = BannedCharacterRepository(path)
        table = BannedCharacterTable([BannedCharacterEntry("#", "-"), BannedCharacterEntry("ñ")])

        repository.save(table)

        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved == {
            "BannedCharacters": [
                {"character": "#", "replacementcharacter": "-"},
                {"character": "ñ", "replacementcharacter": None},
            ]
        }
        assert list(repository.load()) == list(table)

    @pytest.mark.parametrize(
        "document",
        [
            {"BannedCharacters": [{"character": "ab", "replacementcharacter": "_"}]},
            {"BannedCharacters": [{"character": "#", "replacementcharacter": 5}]},
            {"BannedCharacters": [{"character": "#", "replacementcharacter": "a b"}]},
            {"BannedCharacters": [{"character": "-", "replacementcharacter": "_"}]},
            {"BannedCharacters": [{"character": "#"}, {"character": "#"}]},
            {"BannedCharacters": "#"},
        ],
    )
    def test_invalid_documents(self, tmp_path, document):
        """Verifica que los documentos mal formados son rechazados."""
        path = tmp_path / "bannedcharacters.json"
        _write(path, document)

        with pytest.raises(ConfigurationError):
            BannedCharacterRepository(path).load()

    def test_allowed_character_cannot_be_banned(self, tmp_path):
        """Verifica que un caracter permitido como clave rompe la carga, asi sanitize sigue siendo idempotente."""
        path = tmp_path / "bannedcharacters.json"
        _write(
            path,
            {
                "BannedCharacters": [
                    {"character": "#", "replacementcharacter": "a"},
                    {"character": "a", "replacementcharacter": "b"},
                ]
            },
        )

        with pytest.raises(ConfigurationError) as exc_info:
            BannedCharacterRepository(path).load()

        assert "'a'" in exc_info.value.message
        assert exc_info.value.exit_code == 2

    def test_invalid_json(self, tmp_path):
        """Verifica que un JSON invalido es error de configuracion."""
        path = tmp_path / "bannedcharacters.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            BannedCharacterRepository(path).load()

        assert exc_info.value.exit_code == 2


class TestLoadFieldDeclarations:
    """Tests para load_field_declarations()."""

    def test_parses_manual_and_custom_fields(self, write_fields_file):
        """Verifica la lectura de campos Manual y Custom."""
        path = write_fields_file(
            manual=[{"sectigoFieldName": "notBefore", "keyfactorMetadataFieldName": "NotBefore"}],
            custom=[
                {
                    "sectigoFieldName": "Environment",
                    "keyfactorMetadataFieldName": "env",
                    "keyfactorDataType": "MultipleChoice",
                    "keyfactorOptions": "prod, dev,qa",
                },
                {
                    "sectigoFieldName": "Renewal",
                    "keyfactorMetadataFieldName": "renewal",
                    "keyfactorDataType": 3,
                },
            ],
        )

        declarations = load_field_declarations(path)

        assert declarations.manual_fields[0].sectigo_field_name == "notBefore"
        assert declarations.manual_fields[0].keyfactor_data_type == MetadataDataType.STRING
        environment, renewal = declarations.custom_fields
        assert environment.keyfactor_data_type == MetadataDataType.MULTIPLE_CHOICE
        assert environment.keyfactor_options == ["prod", "dev", "qa"]
        assert renewal.keyfactor_data_type == MetadataDataType.DATE

    def test_description_defaults_to_target_name(self, write_fields_file):
        """Verifica que la descripcion toma el nombre destino por defecto."""
        path = write_fields_file(custom=[{"sectigoFieldName": "Dept", "keyfactorMetadataFieldName": "dept"}])

        unified = load_field_declarations(path).custom_fields[0].to_unified(FieldOrigin.CUSTOM)

        assert unified.description == "dept"

    def test_missing_file(self, tmp_path):
        """Verifica que falta fields.json es error de configuracion."""
        with pytest.raises(ConfigurationError):
            load_field_declarations(tmp_path / "fields.json")

    def test_unknown_data_type(self, write_fields_file):
        """Verifica que un tipo de dato desconocido es rechazado."""
        path = write_fields_file(
            custom=[
                {
                    "sectigoFieldName": "Dept",
                    "keyfactorMetadataFieldName": "dept",
                    "keyfactorDataType": "Currency",
                }
            ]
        )

        with pytest.raises(ConfigurationError):
            load_field_declarations(path)

    def test_missing_required_name(self, write_fields_file):
        """Verifica que falta un nombre obligatorio es rechazado."""
        path = write_fields_file(manual=[{"sectigoFieldName": "notBefore"}])

        with pytest.raises(ConfigurationError):
            load_field_declarations(path)
