"""
Tests for database configuration resolution.
"""

import json
from pathlib import Path

import pytest

from trellisdb.database import DatabaseConfig, get_config, save_config


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Isolated project directory with no user configuration"""
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    (project_dir / "pyproject.toml").write_text("[project]\nname = 'example'\n")
    monkeypatch.chdir(project_dir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("TRELLIS_DB_ROOT", raising=False)
    return project_dir


def write_config(path: Path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestDatabaseConfig:
    """Tests for the DatabaseConfig dataclass"""

    def test_str_path_converted(self):
        assert DatabaseConfig(db_root="some/dir").db_root == Path("some/dir")

    def test_serialization(self):
        config = DatabaseConfig(db_root=Path("/db"))
        d = config.to_dict()
        assert d == {"db_root": "/db"}
        assert DatabaseConfig.from_dict(d) == config

    def test_unknown_keys_ignored(self):
        assert DatabaseConfig.from_dict({"db_root": "/db", "colour": "blue"}).db_root == Path("/db")


class TestGetConfig:
    """Tests for configuration precedence"""

    def test_default_is_project_database(self, project):
        assert get_config().db_root == project / "database"

    def test_project_config(self, project):
        write_config(project / ".trellisdb" / "config.json", {"db_root": "/project/db"})
        assert get_config().db_root == Path("/project/db")

    def test_user_config_overrides_project(self, project, tmp_path):
        write_config(project / ".trellisdb" / "config.json", {"db_root": "/project/db"})
        write_config(tmp_path / "xdg" / "trellisdb" / "config.json", {"db_root": "/user/db"})
        assert get_config().db_root == Path("/user/db")

    def test_environment_overrides_all(self, project, tmp_path, monkeypatch):
        write_config(tmp_path / "xdg" / "trellisdb" / "config.json", {"db_root": "/user/db"})
        monkeypatch.setenv("TRELLIS_DB_ROOT", "/env/db")
        assert get_config().db_root == Path("/env/db")

    def test_corrupt_config_skipped(self, project):
        path = project / ".trellisdb" / "config.json"
        path.parent.mkdir()
        path.write_text("{oops")
        assert get_config().db_root == project / "database"

    def test_non_utf8_config_skipped(self, project):
        path = project / ".trellisdb" / "config.yaml"
        path.parent.mkdir()
        path.write_bytes(b"db_root: \xff\xfe\n")
        assert get_config().db_root == project / "database"

    def test_yaml_preferred_over_json(self, project):
        write_config(project / ".trellisdb" / "config.json", {"db_root": "/json/db"})
        (project / ".trellisdb" / "config.yaml").write_text("db_root: /yaml/db\n")
        assert get_config().db_root == Path("/yaml/db")

    def test_non_mapping_config_skipped(self, project):
        path = project / ".trellisdb" / "config.yaml"
        path.parent.mkdir()
        path.write_text("- just\n- a list\n")
        assert get_config().db_root == project / "database"


class TestSaveConfig:
    """Tests for writing configuration files"""

    def test_default_location_is_user_yaml(self, project, tmp_path):
        path = save_config(DatabaseConfig(db_root=Path("/saved/db")))
        assert path == tmp_path / "xdg" / "trellisdb" / "config.yaml"
        assert get_config().db_root == Path("/saved/db")

    def test_json(self, tmp_path):
        path = save_config(DatabaseConfig(db_root=Path("/saved/db")), tmp_path / "cfg.json")
        assert json.loads(path.read_text()) == {"db_root": "/saved/db"}
