import pytest

from stackboot.errors import BootstrapError
from stackboot.services.config_loader import ConfigLoader


def test_config_loader_loads_yaml_mapping(tmp_path):
    config_file = tmp_path / ".stackboot.yml"
    config_file.write_text(
        "compose_file: compose.yml\nreadiness_attempts: 4\n",
        encoding="utf-8",
    )

    loaded = ConfigLoader().load(str(config_file))

    assert loaded["compose_file"] == "compose.yml"
    assert loaded["readiness_attempts"] == 4


def test_config_loader_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / ".stackboot.yml"
    config_file.write_text("unknown_key: true\n", encoding="utf-8")

    with pytest.raises(BootstrapError, match="Unknown configuration keys"):
        ConfigLoader().load(str(config_file))


def test_config_loader_rejects_unknown_keys_in_mode_section(tmp_path):
    config_file = tmp_path / ".stackboot.yml"
    config_file.write_text("production:\n  source: x\n", encoding="utf-8")

    with pytest.raises(BootstrapError, match="in 'production'"):
        ConfigLoader().load(str(config_file))


def test_config_loader_missing_file_is_actionable(tmp_path):
    with pytest.raises(BootstrapError, match="Suggested action"):
        ConfigLoader().load(str(tmp_path / "missing.yml"))


def test_config_loader_empty_file_is_empty_mapping(tmp_path):
    config_file = tmp_path / ".stackboot.yml"
    config_file.write_text("", encoding="utf-8")

    assert ConfigLoader().load(str(config_file)) == {}


def test_for_mode_merges_sections_and_parses_commands(tmp_path):
    config_file = tmp_path / ".stackboot.yml"
    config_file.write_text(
        "migrate_command: npm run db:migrate\n"
        "compose_file: base.yml\n"
        "development:\n"
        "  compose_file: dev.yml\n"
        "  probe_command: [pg_isready, -U, neon]\n"
        "production:\n"
        "  compose_file: prod.yml\n",
        encoding="utf-8",
    )
    loader = ConfigLoader()
    config = loader.load(str(config_file))

    development = loader.for_mode(config, "development")

    assert development["compose_file"] == "dev.yml"
    assert development["migrate_command"] == ("npm", "run", "db:migrate")
    assert development["probe_command"] == ("pg_isready", "-U", "neon")
    assert "production" not in development
    assert loader.for_mode(config, "production")["compose_file"] == "prod.yml"


def test_parse_command_rejects_non_string_lists():
    with pytest.raises(BootstrapError, match="migrate_command"):
        ConfigLoader.parse_command(["npm", 1], "migrate_command")


def test_for_mode_coerces_numeric_keys(tmp_path):
    config_file = tmp_path / ".stackboot.yml"
    config_file.write_text(
        "readiness_attempts: '5'\n"
        "command_timeout: 30\n"
        "production:\n"
        "  readiness_interval: 0\n",
        encoding="utf-8",
    )
    loader = ConfigLoader()

    production = loader.for_mode(loader.load(str(config_file)), "production")

    assert production["readiness_attempts"] == 5
    assert production["readiness_interval"] == 0.0
    assert production["command_timeout"] == 30.0


@pytest.mark.parametrize(
    "line, key",
    [
        ("readiness_attempts: many", "readiness_attempts"),
        ("readiness_attempts: 0", "readiness_attempts"),
        ("readiness_attempts: 2.5", "readiness_attempts"),
        ("readiness_attempts: true", "readiness_attempts"),
        ("readiness_interval: -1", "readiness_interval"),
        ("command_timeout: 0", "command_timeout"),
        ("command_timeout: soon", "command_timeout"),
    ],
)
def test_for_mode_rejects_invalid_numeric_values(tmp_path, line, key):
    config_file = tmp_path / ".stackboot.yml"
    config_file.write_text(f"development:\n  {line}\n", encoding="utf-8")
    loader = ConfigLoader()
    config = loader.load(str(config_file))

    with pytest.raises(BootstrapError, match=f"Config key '{key}' must be"):
        loader.for_mode(config, "development")
