"""
Database Configuration

Locates the device database root directory.

Configuration is loaded from (in order of precedence):
1. Environment variable (TRELLIS_DB_ROOT)
2. User config file (~/.config/trellisdb/config.yaml or config.json)
3. Project config file (.trellisdb/config.yaml or config.json in the project root)
4. Default path (database/ in the project root)

In each config directory config.yaml is read in preference to config.json.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, Union

import yaml

logger = logging.getLogger(__name__)

ENV_DB_ROOT = 'TRELLIS_DB_ROOT'
CONFIG_FILENAMES = ('config.yaml', 'config.yml', 'config.json')


@dataclass
class DatabaseConfig:
    """Configuration for the device database."""

    db_root: Path = field(default_factory=lambda: Path('database'))
    """Directory containing devices.json and the per-family subdirectories."""

    def __post_init__(self):
        if isinstance(self.db_root, str):
            self.db_root = Path(self.db_root)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = asdict(self)
        result['db_root'] = str(self.db_root)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DatabaseConfig':
        """Create from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _find_project_root() -> Optional[Path]:
    """Find the project root by looking for pyproject.toml."""
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / 'pyproject.toml').exists():
            return parent
    return None


def _get_user_config_dir() -> Path:
    if os.name == 'nt':
        base = Path(os.environ.get('APPDATA', Path.home() / 'AppData' / 'Roaming'))
    else:
        base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))
    return base / 'trellisdb'


def _load_config_file(path: Path) -> Optional[Dict[str, Any]]:
    """Load configuration from a YAML or JSON file, skipping unreadable files."""
    try:
        with open(path, encoding='utf-8') as f:
            if path.suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError, IOError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return None
    if isinstance(data, dict):
        return data
    logger.warning("Ignoring config file %s: not a mapping", path)
    return None


def _load_config_dir(config_dir: Path) -> Optional[Dict[str, Any]]:
    """Load the first config file present in a config directory."""
    for name in CONFIG_FILENAMES:
        path = config_dir / name
        if path.exists():
            return _load_config_file(path)
    return None


def get_config() -> DatabaseConfig:
    """
    Get the database configuration.

    Returns:
        DatabaseConfig instance
    """
    config_data: Dict[str, Any] = {}

    # 1. Defaults
    project_root = _find_project_root()
    if project_root:
        config_data['db_root'] = project_root / 'database'

    # 2. Project config (.trellisdb/config.yaml)
    if project_root:
        project_config = _load_config_dir(project_root / '.trellisdb')
        if project_config:
            config_data.update(project_config)

    # 3. User config (~/.config/trellisdb/config.yaml)
    user_config = _load_config_dir(_get_user_config_dir())
    if user_config:
        config_data.update(user_config)

    # 4. Environment variable (highest precedence)
    env_db_root = os.environ.get(ENV_DB_ROOT)
    if env_db_root:
        logger.info("Using database root from %s: %s", ENV_DB_ROOT, env_db_root)
        config_data['db_root'] = env_db_root

    return DatabaseConfig.from_dict(config_data)


def save_config(config: DatabaseConfig, path: Union[str, Path, None] = None) -> Path:
    """
    Save configuration to a file.

    Args:
        config: Configuration to save
        path: Path to save to (default: user config.yaml). A .json suffix
            writes JSON, anything else writes YAML.

    Returns:
        Path written
    """
    path = Path(path) if path is not None else _get_user_config_dir() / 'config.yaml'
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        if path.suffix == '.json':
            json.dump(config.to_dict(), f, indent=2)
        else:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    return path
