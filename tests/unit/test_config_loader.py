from __future__ import annotations

from pathlib import Path

import pytest

from crm_import.config.loader import SCHEMA_PATH, ConfigError, load_config
from crm_import.models.import_schema import EntityKind


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert cfg.encoding == "utf-8-sig"
    assert [m.pattern for m in cfg.file_mappings] == ["contacts*.csv", "google*.csv", "deals*", "offers*"]
    assert cfg.file_mappings[0].kind is EntityKind.CONTACT
    assert cfg.file_mappings[2].kind is EntityKind.DEAL
    assert cfg.store.backend == "json"
    assert cfg.store.key_prefix == "reality_mark_"
    assert cfg.database.port == 5432


def test_defaults_applied(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text('source_directory: ./data\nfile_mappings:\n  "*.csv":\n    schema: contact\n', encoding="utf-8")
    cfg = load_config(path)
    assert cfg.encoding == "utf-8-sig"
    assert cfg.store.backend == "json"
    assert cfg.store.path == "./store/crm.json"
    assert cfg.file_mappings[0].sheet == 0
    assert cfg.database.host is None


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("source_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(path)


def test_load_config_missing_required(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("source_directory: ./data\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_unknown_schema_kind(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("schema: offer", "schema: listing")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_unknown_backend(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("backend: json", "backend: sqlite")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_empty_yaml_is_validation_error(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(path)


def test_schema_file_ships_with_package():
    assert SCHEMA_PATH.exists()
    assert SCHEMA_PATH.parent.name == "config"
