"""Tests for Config module."""

import os

import pytest

from modelddl.config import Config, LoaderConfig, load_config_file
from modelddl.exceptions import ConfigError
from modelddl.types import TableOrder

ENV_VARS = [
    "MODELDDL_DIALECT",
    "MODELDDL_DELIMITER",
    "MODELDDL_PROJECT_ROOT",
    "MODELDDL_TABLE_ORDER",
    "MODELDDL_CONFIG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test in an empty directory without modelddl env vars."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoaderConfig:
    """Test LoaderConfig defaults."""

    def test_defaults(self):
        config = LoaderConfig()
        assert config.delimiter is None
        assert config.join_tables == ()
        assert config.table_order is TableOrder.NAME
        assert config.positions is False

    def test_project_root_defaults_to_cwd(self):
        assert LoaderConfig().resolved_project_root() == os.getcwd()

    def test_project_root_is_made_absolute(self):
        config = LoaderConfig(project_root="app")
        assert config.resolved_project_root() == os.path.join(os.getcwd(), "app")

    def test_is_immutable(self):
        config = LoaderConfig()
        with pytest.raises(AttributeError):
            config.delimiter = "GO"


class TestConfigFile:
    """Test loading the modelddl.yaml project file."""

    def test_load_config_file(self, tmp_path):
        path = tmp_path / "modelddl.yaml"
        path.write_text(
            """
dialect: mysql
models:
  - app.models
join_tables: app.models:OrderToItem
table_order: supply
positions: true
"""
        )
        data = load_config_file(path)
        assert data["dialect"] == "mysql"
        assert data["models"] == ["app.models"]
        assert data["join_tables"] == ["app.models:OrderToItem"]
        assert data["positions"] is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / "modelddl.yaml"
        path.write_text("")
        assert load_config_file(path) == {}

    def test_unknown_fields(self, tmp_path):
        path = tmp_path / "modelddl.yaml"
        path.write_text("dialect: mysql\ncatalog: main\n")
        with pytest.raises(ConfigError, match="Unknown field\\(s\\) in config file: catalog"):
            load_config_file(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "modelddl.yaml"
        path.write_text("- mysql\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config_file(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "modelddl.yaml"
        path.write_text("dialect: [mysql\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config_file(tmp_path / "nope.yaml")

    def test_models_must_be_a_list(self, tmp_path):
        path = tmp_path / "modelddl.yaml"
        path.write_text("models:\n  app: models\n")
        with pytest.raises(ConfigError, match="'models' must be a list"):
            load_config_file(path)


class TestConfigFromEnv:
    """Test Config.from_env() precedence."""

    def test_defaults(self):
        config = Config.from_env()
        assert config.dialect is None
        assert config.models == []
        assert config.table_order is TableOrder.NAME
        assert config.positions is False

    def test_loads_from_env(self, monkeypatch):
        monkeypatch.setenv("MODELDDL_DIALECT", "oracle")
        monkeypatch.setenv("MODELDDL_DELIMITER", ";;")
        monkeypatch.setenv("MODELDDL_PROJECT_ROOT", "/srv/app")
        monkeypatch.setenv("MODELDDL_TABLE_ORDER", "supply")

        config = Config.from_env()

        assert config.dialect == "oracle"
        assert config.delimiter == ";;"
        assert config.project_root == "/srv/app"
        assert config.table_order is TableOrder.SUPPLY

    def test_reads_default_file_in_cwd(self, tmp_path):
        (tmp_path / "modelddl.yaml").write_text("dialect: sqlite\nmodels: [app]\n")
        config = Config.from_env()
        assert config.dialect == "sqlite"
        assert config.models == ["app"]

    def test_config_path_from_env(self, monkeypatch, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("dialect: mssql\n")
        monkeypatch.setenv("MODELDDL_CONFIG", str(path))
        assert Config.from_env().dialect == "mssql"

    def test_env_overrides_file(self, monkeypatch, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("dialect: mssql\n")
        monkeypatch.setenv("MODELDDL_DIALECT", "postgres")
        assert Config.from_env(config_path=path).dialect == "postgres"

    def test_explicit_overrides_env(self, monkeypatch):
        monkeypatch.setenv("MODELDDL_DIALECT", "postgres")
        monkeypatch.setenv("MODELDDL_TABLE_ORDER", "supply")
        config = Config.from_env(dialect="mysql", table_order="name")
        assert config.dialect == "mysql"
        assert config.table_order is TableOrder.NAME

    def test_explicit_models_override_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("models: [app.models]\njoin_tables: [app.models:Link]\n")
        config = Config.from_env(models=["other.models"], config_path=path)
        assert config.models == ["other.models"]
        assert config.join_tables == ["app.models:Link"]

    def test_invalid_table_order(self):
        with pytest.raises(ConfigError, match="Invalid table order 'random'"):
            Config.from_env(table_order="random")


class TestConfigValidate:
    """Test Config.validate()."""

    def test_validate_missing_everything(self):
        with pytest.raises(ConfigError) as exc_info:
            Config().validate()
        message = str(exc_info.value)
        assert message.startswith("Missing required configuration:")
        assert "dialect" in message
        assert "models" in message

    def test_validate_without_dialect(self):
        Config(models=["app.models"]).validate(require_dialect=False)

    def test_validate_passes(self):
        Config(dialect="postgres", models=["app.models"]).validate()

    def test_loader_config(self):
        config = Config(
            dialect="mssql",
            models=["app"],
            delimiter="\nGO",
            positions=True,
            table_order=TableOrder.SUPPLY,
        )
        loader_config = config.loader_config(join_tables=(int,))
        assert loader_config == LoaderConfig(
            delimiter="\nGO",
            join_tables=(int,),
            table_order=TableOrder.SUPPLY,
            positions=True,
        )
