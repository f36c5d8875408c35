"""Tests for YAML configuration loading (sales_config)."""


import pytest
import yaml

from sales_config import CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH, get_active_config
from sales_config.loader import compute_checksum, load_config, parse_config, parse_seed_user


def _write(tmp_path, data):
    path = tmp_path / "sales.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaults:

    def test_bundled_defaults_load(self):
        config = load_config(DEFAULT_CONFIG_PATH)
        assert config.config_id == "travel-sales-default"
        assert config.storage_keys.reports == "sales_reports"
        assert config.storage_keys.users == "sales_report_all_users"
        assert config.storage_keys.session == "sales_report_user"
        assert {u.username for u in config.seed_users} >= {"Remon", "agent1", "agent2", "agent3"}
        assert "Bank Transfer" in config.reports.payment_methods

    def test_supervisor_seed_is_all_regions(self):
        config = load_config(DEFAULT_CONFIG_PATH)
        admin = next(u for u in config.seed_users if u.role == "supervisor")
        assert admin.region == "All"


class TestParsing:

    def test_minimal_document(self):
        config = parse_config({"config_id": "mini", "version": 2})
        assert config.version == 2
        assert config.database.url == "sqlite:///sales_reports.db"
        assert config.seed_users == ()
        assert config.log_level == "INFO"

    def test_missing_id_rejected(self):
        with pytest.raises(KeyError):
            parse_config({"version": 1})

    def test_unknown_seed_role_rejected(self):
        with pytest.raises(ValueError):
            parse_seed_user({"id": 1, "username": "x", "password": "p", "name": "X", "role": "root"})

    def test_seed_user_record(self):
        user = parse_seed_user({"id": 7, "username": "x", "password": 123, "name": "X", "role": "agent",
                                "region": "UAE"})
        assert user.to_record() == {
            "id": "7", "username": "x", "password": "123", "name": "X", "role": "agent", "region": "UAE",
        }

    def test_checksum_is_order_independent(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})


class TestActiveConfig:

    def test_env_var_selects_file(self, tmp_path, monkeypatch):
        path = _write(tmp_path, {"config_id": "from-env", "version": 1, "log_level": "debug"})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        config = get_active_config()
        assert config.config_id == "from-env"
        assert config.log_level == "DEBUG"

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(_write(tmp_path, {"config_id": "env", "version": 1})))
        assert get_active_config(DEFAULT_CONFIG_PATH).config_id == "travel-sales-default"

    def test_trace_logged(self, captured_logs, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        config = get_active_config()
        trace = next(r for r in captured_logs() if r["message"] == "SALES_CONFIG_TRACE")
        assert trace["checksum"] == config.checksum
        assert trace["logger"] == "sales_kernel.config"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")
