"""Tests for configuration loading (YAML + env overrides)."""
import yaml

from jobtrack.config import AppConfig, _apply_env_overrides, load_config


class TestEnvOverrides:
    def test_nested_keys_and_coercion(self, monkeypatch):
        monkeypatch.setenv("JOBTRACK__PAGINATION__DEFAULT_PAGE_SIZE", "25")
        monkeypatch.setenv("JOBTRACK__DATABASE__ECHO", "true")
        result = _apply_env_overrides({})
        assert result["pagination"]["default_page_size"] == 25
        assert result["database"]["echo"] is True

    def test_other_prefixes_ignored(self, monkeypatch):
        monkeypatch.setenv("OTHER__DATABASE__ECHO", "true")
        assert "database" not in _apply_env_overrides({})


class TestLoadConfig:
    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        config = load_config(str(tmp_path / "absent.yml"))
        assert isinstance(config, AppConfig)
        assert config.pagination.default_page_size == 10
        assert config.auth.algorithm == "HS256"
        assert config.auth.owner_claim == "sub"
        assert config.database.url.startswith("sqlite:///")

    def test_yaml_then_env(self, tmp_path, monkeypatch):
        path = tmp_path / "jobtrack.yml"
        path.write_text(yaml.safe_dump({
            "pagination": {"default_page_size": 20, "max_page_size": 50},
            "log_level": "DEBUG",
        }))
        monkeypatch.setenv("JOBTRACK__PAGINATION__MAX_PAGE_SIZE", "40")
        config = load_config(str(path))
        assert config.pagination.default_page_size == 20
        assert config.pagination.max_page_size == 40
        assert config.log_level == "DEBUG"

    def test_dedicated_env_vars(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/jobs")
        monkeypatch.setenv("JWT_SECRET_KEY", "s3cret")
        config = load_config(str(tmp_path / "absent.yml"))
        assert config.database.url == "postgresql://u:p@db/jobs"
        assert config.auth.secret_key == "s3cret"
