"""Tests for settings, the sheet configuration schema and the config loader."""

import json

import pytest
import yaml

from jobtracker.config import (
    SHEET_CONFIG_EXAMPLE,
    ConfigLoader,
    ConfigurationError,
    SheetConfig,
    SyncSettings,
    get_settings,
    load_config_from_env
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for variable in ConfigLoader.ENV_OVERRIDES:
        monkeypatch.delenv(variable, raising=False)


class TestSettings:

    def test_defaults(self):
        settings = get_settings()

        assert settings.sheets.base_url == "https://sheets.googleapis.com"
        assert settings.sheets.default_range == "Applications!A:H"
        assert settings.sync.error_message_ttl_seconds == 5
        assert settings.sync.success_message_ttl_seconds == 3

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("JOBTRACKER_SYNC_OPERATION_TIMEOUT_SECONDS", "7.5")
        assert SyncSettings().operation_timeout_seconds == 7.5


class TestSheetConfig:

    def test_defaults(self):
        config = SheetConfig()

        assert config.spreadsheet_id == ""
        assert config.range == "Applications!A:H"
        assert not config.is_configured

    def test_blank_api_key_is_none(self):
        assert SheetConfig(spreadsheet_id="abc", api_key="  ").api_key is None

    def test_values_are_trimmed(self):
        config = SheetConfig(spreadsheet_id="  abc ", range=" Jobs!A:H ")
        assert config.spreadsheet_id == "abc"
        assert config.range == "Jobs!A:H"

    def test_storage_shape(self):
        config = SheetConfig(spreadsheet_id="abc", range="Jobs!A:H", api_key="k")

        assert config.to_storage() == {"spreadsheetId": "abc", "range": "Jobs!A:H", "apiKey": "k"}
        assert SheetConfig.from_storage(config.to_storage()) == config

    def test_from_storage_accepts_snake_case_and_missing_range(self):
        config = SheetConfig.from_storage({"spreadsheet_id": "abc"})

        assert config.spreadsheet_id == "abc"
        assert config.range == "Applications!A:H"

    def test_from_storage_empty(self):
        assert not SheetConfig.from_storage(None).is_configured

    def test_example_is_configured(self):
        assert SHEET_CONFIG_EXAMPLE.is_configured


class TestConfigLoader:

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "sheet.yaml"
        path.write_text(yaml.safe_dump({"spreadsheetId": "from-yaml", "range": "Jobs!A:H"}))

        config = ConfigLoader().load_from_file(path)

        assert config.spreadsheet_id == "from-yaml"
        assert config.range == "Jobs!A:H"

    def test_load_json(self, tmp_path):
        path = tmp_path / "sheet.json"
        path.write_text(json.dumps({"spreadsheet_id": "from-json", "api_key": "k"}))

        config = ConfigLoader().load_from_file(path)

        assert config.spreadsheet_id == "from-json"
        assert config.api_key == "k"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader().load_from_file(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "sheet.ini"
        path.write_text("[sheet]")

        with pytest.raises(ConfigurationError, match="Unsupported file format"):
            ConfigLoader().load_from_file(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "sheet.yml"
        path.write_text("spreadsheetId: [unclosed")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigLoader().load_from_file(path)

    def test_non_mapping(self):
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_from_dict(["abc"])

    def test_environment_wins_over_file_values(self, monkeypatch):
        monkeypatch.setenv("JOBTRACKER_SPREADSHEET_ID", "from-env")

        config = ConfigLoader().load_from_dict({"spreadsheetId": "from-file", "range": "Jobs!A:H"})

        assert config.spreadsheet_id == "from-env"
        assert config.range == "Jobs!A:H"

    def test_load_config_from_env(self, monkeypatch):
        monkeypatch.setenv("JOBTRACKER_SPREADSHEET_ID", "env-sheet")
        monkeypatch.setenv("JOBTRACKER_RANGE", "Env!A:H")

        config = load_config_from_env()

        assert config.spreadsheet_id == "env-sheet"
        assert config.range == "Env!A:H"

    @pytest.mark.parametrize("filename", ["saved.yaml", "saved.json"])
    def test_save_and_reload(self, tmp_path, filename):
        loader = ConfigLoader()
        path = tmp_path / "nested" / filename
        config = SheetConfig(spreadsheet_id="abc", range="Jobs!A:H")

        loader.save_to_file(config, path)

        assert loader.load_from_file(path) == config
