"""
Configuration loader for the modeling primer.
"""

import os
import yaml
import logging
from typing import Dict, Any, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """
    Configuration class for the modeling primer.
    Loads configuration from YAML files and environment variables.
    Environment variables take precedence over YAML configuration.
    """

    EMPTY_DOMAIN_POLICIES = ("warn", "error", "ignore")

    def __init__(self, config_path: str = None):
        """
        Initialize the configuration.

        Args:
            config_path: Path to the configuration file. If None, uses default paths.
        """
        self._config = {}
        self._config_path = config_path or self._find_config_file()
        self._load_config()
        self._override_with_env_vars()

    def _find_config_file(self) -> str:
        """
        Find the configuration file in standard locations.

        Returns:
            str: Path to the configuration file.
        """
        # Check environment variable first
        if os.environ.get("MODELING_CONFIG"):
            return os.environ["MODELING_CONFIG"]

        # Check standard locations
        possible_locations = [
            os.path.join(os.getcwd(), "config", "default.yaml"),
            os.path.join(os.getcwd(), "config.yaml"),
            os.path.join(os.path.dirname(__file__), "default.yaml"),
        ]

        for location in possible_locations:
            if os.path.exists(location):
                return location

        # Default to the package config
        return os.path.join(os.path.dirname(__file__), "default.yaml")

    def _load_config(self) -> None:
        """
        Load the configuration from the YAML file.
        """
        try:
            with open(self._config_path, "r") as f:
                self._config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.error(
                f"Error loading configuration from {self._config_path}: {e}",
                exc_info=True,
            )
            self._config = {}

    def _override_with_env_vars(self) -> None:
        """
        Override configuration values with environment variables.
        """
        if os.environ.get("LOG_LEVEL"):
            self._set_nested_value("logging.level", os.environ["LOG_LEVEL"].upper())

        if os.environ.get("SOLVER_NAME"):
            self._set_nested_value("solver.name", os.environ["SOLVER_NAME"])

        if os.environ.get("SOLVER_MSG") in ["true", "True", "1", "yes"]:
            self._set_nested_value("solver.msg", True)
        elif os.environ.get("SOLVER_MSG") in ["false", "False", "0", "no"]:
            self._set_nested_value("solver.msg", False)

        if os.environ.get("SOLVER_TIME_LIMIT"):
            try:
                time_limit = float(os.environ["SOLVER_TIME_LIMIT"])
                self._set_nested_value("solver.time_limit", time_limit)
            except ValueError:
                logging.warning(
                    f"Invalid SOLVER_TIME_LIMIT value: {os.environ['SOLVER_TIME_LIMIT']}"
                )

        if os.environ.get("EMPTY_DOMAIN_POLICY"):
            policy = os.environ["EMPTY_DOMAIN_POLICY"].lower()
            if policy in self.EMPTY_DOMAIN_POLICIES:
                self._set_nested_value("containers.empty_domain", policy)
            else:
                logging.warning(f"Invalid EMPTY_DOMAIN_POLICY value: {policy}")

    def _set_nested_value(self, key_path: str, value: Any) -> None:
        """
        Set a nested value in the configuration dictionary.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "solver.name").
            value: Value to set.
        """
        keys = key_path.split(".")
        current = self._config

        # Navigate to the nested location
        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-separated path to the configuration value (e.g., "solver.name").
            default: Default value if the key is not found.

        Returns:
            Any: The configuration value or default.
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_all(self) -> Dict[str, Any]:
        """
        Get the entire configuration.

        Returns:
            Dict[str, Any]: The entire configuration dictionary.
        """
        return self._config

    def get_logging_config(self) -> Dict[str, Any]:
        """
        Get logging configuration.

        Returns:
            Dict[str, Any]: Logging configuration.
        """
        return {
            "level": self.get("logging.level", "INFO"),
            "use_color": self.get("logging.use_color", True),
            "format": self.get(
                "logging.format",
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            ),
            "datefmt": self.get("logging.datefmt", "%Y-%m-%d %H:%M:%S"),
        }

    def get_solver_config(self) -> Dict[str, Any]:
        """
        Get solver configuration.

        Returns:
            Dict[str, Any]: Solver name, verbosity and optional time limit.
        """
        return {
            "name": self.get("solver.name", "PULP_CBC_CMD"),
            "msg": self.get("solver.msg", False),
            "time_limit": self.get("solver.time_limit"),
        }

    def get_container_config(self) -> Dict[str, Any]:
        """
        Get container resolution configuration.

        Returns:
            Dict[str, Any]: Container configuration.
        """
        policy = self.get("containers.empty_domain", "warn")
        if policy not in self.EMPTY_DOMAIN_POLICIES:
            logging.warning(f"Unknown empty domain policy {policy!r}, using 'warn'")
            policy = "warn"
        return {"empty_domain": policy}

    def get_model_name(self) -> Optional[str]:
        """Default name given to new models."""
        return self.get("model.default_name", "model")


# Create a global configuration instance
config = Config()
