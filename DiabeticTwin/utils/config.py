# DiabeticTwin Configuration Management
# Handles loading and accessing configuration parameters for the engines.

import yaml
import json
import logging
from typing import Dict, Any, Optional
import os

DEFAULT_CONFIG_FILENAME = "diabetic_twin_config.yaml"  # Default config filename to look for

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Loads configuration parameters from a YAML or JSON file.

    If `config_path` is not provided, this function will attempt to load
    from a file named `DEFAULT_CONFIG_FILENAME` in the current working
    directory. Missing or malformed files never raise: an empty
    dictionary is returned and the problem is logged, so every engine
    falls back to its built-in defaults.

    Args:
        config_path (Optional[str]): The full path to the configuration
            file. Supports `.yaml`, `.yml`, and `.json` extensions. If
            None, attempts to load `DEFAULT_CONFIG_FILENAME` from the
            current directory.

    Returns:
        Dict[str, Any]: The loaded configuration, or an empty dictionary
            if loading fails or no file is found.
    """
    resolved_path = config_path
    if resolved_path is None:
        if os.path.exists(DEFAULT_CONFIG_FILENAME):
            resolved_path = DEFAULT_CONFIG_FILENAME
            logger.info(
                "No config path provided, using default '%s' in CWD.",
                DEFAULT_CONFIG_FILENAME
            )
        else:
            logger.debug(
                "No config path provided and default '%s' not found in CWD. "
                "Returning empty config.", DEFAULT_CONFIG_FILENAME
            )
            return {}

    resolved_path = str(resolved_path)
    if not os.path.exists(resolved_path):
        logger.warning(
            "Configuration file not found at '%s'. Returning empty config.",
            resolved_path
        )
        return {}

    try:
        with open(resolved_path, 'r', encoding='utf-8') as f:
            if resolved_path.endswith((".yaml", ".yml")):
                config_data = yaml.safe_load(f)
            elif resolved_path.endswith(".json"):
                config_data = json.load(f)
            else:
                logger.warning(
                    "Unknown config file format for '%s'. Supported: .yaml, "
                    ".yml, .json. Returning empty config.", resolved_path
                )
                return {}
    except yaml.YAMLError as ye:
        logger.error(
            "Error parsing YAML configuration from '%s': %s. "
            "Returning empty config.", resolved_path, ye
        )
        return {}
    except json.JSONDecodeError as je:
        logger.error(
            "Error parsing JSON configuration from '%s': %s. "
            "Returning empty config.", resolved_path, je
        )
        return {}

    if not isinstance(config_data, dict):
        if config_data is not None:
            logger.warning(
                "Configuration in '%s' is not a mapping. Returning empty config.",
                resolved_path
            )
        return {}
    logger.info("Configuration loaded successfully from '%s'.", resolved_path)
    return config_data

def get_config_value(config: Dict[str, Any], key_path: str,
                     default: Optional[Any] = None) -> Any:
    """Retrieves a value from a nested config dict using a dot-separated key.

    Example:
        `get_config_value(config, "medication.max_single_dose.type1", 10)`
        looks for `config['medication']['max_single_dose']['type1']`.

    Args:
        config (Dict[str, Any]): The configuration dictionary to search.
        key_path (str): Dot-separated path to the desired key.
        default (Optional[Any]): Returned when the path is not found or an
            intermediate key does not lead to a dictionary.

    Returns:
        Any: The value found at `key_path`, or `default`.
    """
    keys = key_path.split('.')
    current_level = config
    for key in keys:
        if isinstance(current_level, dict) and key in current_level:
            current_level = current_level[key]
        else:
            return default  # Key not found or path is invalid
    return current_level


class ConfigManager:
    """A manager class for handling engine configuration.

    Loads settings from a YAML or JSON file and hands out sections to the
    engines (`predictor`, `food_safety`, `medication`).

    Attributes:
        config_data (Dict[str, Any]): The dictionary holding all loaded
            configuration parameters.
        _config_file_path (Optional[str]): The path used for the last
            load. Stored for reloading.
    """
    def __init__(self, config_file_path: Optional[str] = None):
        """Initializes the ConfigManager and loads configuration.

        Args:
            config_file_path (Optional[str]): The path to the
                configuration file (YAML or JSON). If None, the default
                file in the current directory is tried.
        """
        self._config_file_path: Optional[str] = config_file_path
        self.config_data: Dict[str, Any] = load_config(config_file_path)

        if not self.config_data and config_file_path:
            logger.warning(
                "ConfigManager: could not load configuration from '%s'. "
                "Using built-in defaults.", config_file_path
            )

    def get(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Retrieves a configuration value using a dot-separated key path."""
        return get_config_value(self.config_data, key_path, default)

    def get_section(self, section_key_path: str) -> Dict[str, Any]:
        """Retrieves an entire section of the configuration as a dictionary.

        Args:
            section_key_path (str): The dot-separated path to the desired
                section (e.g. "food_safety.thresholds").

        Returns:
            Dict[str, Any]: The section, or an empty dictionary if it is
                missing or not a mapping.
        """
        section = self.get(section_key_path, default={})
        return section if isinstance(section, dict) else {}

    def reload(self, new_config_file_path: Optional[str] = None):
        """Reloads the configuration.

        If `new_config_file_path` is provided it becomes the stored path
        for future reloads; otherwise the last known path (or the default
        file) is loaded again.
        """
        if new_config_file_path is not None:
            self._config_file_path = new_config_file_path
        logger.info(
            "ConfigManager: reloading configuration from '%s'.",
            self._config_file_path or DEFAULT_CONFIG_FILENAME
        )
        self.config_data = load_config(self._config_file_path)
