#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("autodoc")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
PROJECT_CONFIG_FILENAMES = ['.autodoc.toml', '.autodoc.json', '.autodoc.yaml', '.autodoc.yml']

# Environment variables understood by the original autodoc.sh script.
# They take precedence over AUTODOC_* overrides and config files.
PLAIN_ENV_VARS = {
    'TARGET_REMOTE': 'remote',
    'TARGET_BRANCH': 'branch',
    'DOC_CMD': 'doc_cmd',
    'DOC_DIR': 'doc_dir',
    'DOC_SUBDIR': 'doc_subdir',
}


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. AUTODOC_CONFIG environment variable
    2. .autodoc.{toml,json,yaml,yml} in the current directory
    3. ~/.autodoc/ directory
    """
    # Check for environment variable override
    if 'AUTODOC_CONFIG' in os.environ:
        path = Path(os.environ['AUTODOC_CONFIG'])
        if path.exists():
            return path

    # Project-local config sits next to the repository being published
    for filename in PROJECT_CONFIG_FILENAMES:
        path = Path.cwd() / filename
        if path.exists():
            return path

    autodoc_dir = Path.home() / '.autodoc'
    for filename in CONFIG_FILENAMES:
        path = autodoc_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    # If no file exists, return default path for saving
    return autodoc_dir / 'config.json'


def read_config_file(config_path):
    """Parse a JSON, TOML or YAML config file into a dict."""
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        import yaml
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            file_config = read_config_file(config_path)
            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            else:
                logger.warning(f"Ignoring config {config_path}: top level is not a mapping")
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)
    config = apply_plain_env_overrides(config)

    return config


def save_config(config, config_path=None):
    """Save configuration to file."""
    config_path = Path(config_path) if config_path else get_config_path()

    try:
        # Create directory if it doesn't exist
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() in ['.toml']:
            # tomllib is read-only
            import toml
            with open(config_path, 'w') as f:
                toml.dump(config, f)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            # Default to JSON format
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")
        raise
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "publish": {
            "remote": "origin",      # git remote to fetch from and push to
            "branch": "gh-pages",    # branch receiving the generated docs
            "doc_cmd": "",           # command generating the docs (required)
            "doc_dir": "gh-pages",   # where doc_cmd writes its output
            "doc_subdir": "",        # publish only below this path of the branch
            "message": "",           # commit message override
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


def get_example_config():
    """Example configuration written by `autodoc config generate`."""
    return {
        "publish": {
            "remote": "origin",
            "branch": "gh-pages",
            "doc_cmd": "sphinx-build -b html docs gh-pages",
            "doc_dir": "gh-pages",
        }
    }


def configure_logging(config=None, debug=False):
    """Apply the logging section of the config to the autodoc logger."""
    section = (config or {}).get("logging", {})
    level_name = "DEBUG" if debug else str(section.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)
    fmt = section.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def merge_configs(base_config, override_config):
    """
    Layer a config file (or any partial config) over the defaults.

    Sections present in both are merged key by key, so a file that only
    sets ``publish.doc_cmd`` keeps the default remote and branch. Neither
    argument is modified.
    """
    merged = dict(base_config)
    for key, value in override_config.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


def _coerce_env_value(current, value):
    """Convert an env string to the type of the setting it replaces."""
    if isinstance(current, bool):
        return value.lower() in ('true', '1', 'yes', 'on')
    if isinstance(current, int) and value.lstrip('-').isdigit():
        return int(value)
    return value


def _match_config_key(section, parts):
    """
    Longest key of ``section`` spelled by the leading ``parts``.

    Keys contain underscores themselves (``doc_cmd``), so
    AUTODOC_PUBLISH_DOC_CMD splits into publish/doc/cmd and has to be
    matched greedily. Returns (key, number of parts consumed).
    """
    best_key, best_len = None, 0
    for key in section:
        key_parts = key.split('_')
        if parts[:len(key_parts)] == key_parts and len(key_parts) > best_len:
            best_key, best_len = key, len(key_parts)
    return best_key, best_len


def apply_env_overrides(config):
    """
    Apply AUTODOC_<SECTION>_<KEY> environment variables.

    AUTODOC_PUBLISH_DOC_CMD="make html" sets ``publish.doc_cmd``.
    Variables naming no existing setting are ignored; AUTODOC_CONFIG
    selects the config file and is not a setting.
    """
    env_prefix = "AUTODOC_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "AUTODOC_CONFIG":
            continue

        parts = env_key[len(env_prefix):].lower().split('_')
        section = config
        while parts:
            key, used = _match_config_key(section, parts)
            if key is None:
                break
            parts = parts[used:]
            if not parts:
                # A whole section can't be replaced by a string
                if not isinstance(section[key], dict):
                    section[key] = _coerce_env_value(section[key], value)
            elif isinstance(section[key], dict):
                section = section[key]
            else:
                break

    return config


def apply_plain_env_overrides(config):
    """
    Apply TARGET_REMOTE, TARGET_BRANCH, DOC_CMD, DOC_DIR and DOC_SUBDIR.

    Empty values are ignored, matching `${VAR:-default}` in the shell.
    """
    publish = config.setdefault("publish", {})
    for env_key, config_key in PLAIN_ENV_VARS.items():
        value = os.environ.get(env_key)
        if value:
            publish[config_key] = value
    return config
