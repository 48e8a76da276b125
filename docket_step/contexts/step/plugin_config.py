"""
Plugin configuration loading.

Each step plugin reads its settings from plugin_<title>.yaml in PLUGIN_CONFIG_DIR:

    config:
      template:
        name: docket-default      # or file: docket.xsl, or id: 1
      output:
        filename: "{process}.pdf"
        folder: master
      dotsPerInch: 300
"""

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from docket_step.contexts.resolution.exceptions import ConfigurationError, ConfigurationErrorReason
from docket_step.contexts.resolution.job_data_structures import RenderJobConfig

load_dotenv()
PLUGIN_CONFIG_DIR = Path(os.getenv("PLUGIN_CONFIG_DIR", "config"))


def plugin_config_path(title: str, config_dir: Path = None) -> Path:
    """Conventional config file location for a plugin title."""
    if config_dir is None:
        config_dir = PLUGIN_CONFIG_DIR
    return Path(config_dir) / f"plugin_{title}.yaml"


def load_plugin_config(title: str, config_path: Path = None) -> Dict[str, Any]:
    """
    Load a plugin's YAML configuration as a plain dict.

    Args:
        title: Plugin title, used to find the default config file
        config_path: Explicit config file (defaults to plugin_config_path(title))

    Returns:
        Config mapping with interpolations resolved

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigurationError: If the file is not valid YAML or its root is not a mapping
    """
    if config_path is None:
        config_path = plugin_config_path(title)

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Plugin config not found for '{title}' at {config_path}")

    try:
        data = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    except (yaml.YAMLError, OmegaConfBaseException) as e:
        raise ConfigurationError(
            ConfigurationErrorReason.INVALID_CONFIG,
            f"Plugin config for '{title}' could not be parsed",
            path=config_path,
            cause=e,
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            ConfigurationErrorReason.INVALID_CONFIG,
            f"Plugin config for '{title}' must be a mapping, got {type(data).__name__}",
            path=config_path,
        )
    return data


def load_render_job_config(title: str, config_path: Path = None) -> RenderJobConfig:
    """Load a plugin's configuration and map it onto a RenderJobConfig."""
    return RenderJobConfig.from_dict(load_plugin_config(title, config_path))
