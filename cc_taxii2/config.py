"""Configuration management for the TAXII client."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

from .errors import ConfigurationError

SECTIONS = ('server', 'pagination', 'credentials', 'logging')


class Config:
    """Manages configuration loading and access."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, uses default config.
        """
        self.config_dir = Path(__file__).parent / "conf"

        # Load default config
        default_config_path = self.config_dir / "default.yaml"
        with open(default_config_path, 'r') as f:
            self.config = yaml.safe_load(f)

        # Override with local config if it exists
        local_config_path = self.config_dir / "local.yaml"
        if local_config_path.exists():
            with open(local_config_path, 'r') as f:
                local_config = yaml.safe_load(f) or {}
                self._merge_configs(self.config, self._check_mapping(local_config, local_config_path))

        if config_path:
            if not os.path.exists(config_path):
                raise ConfigurationError(f"Config file not found: {config_path}")
            with open(config_path, 'r') as f:
                custom_config = yaml.safe_load(f) or {}
                self._merge_configs(self.config, self._check_mapping(custom_config, config_path))

        for section in SECTIONS:
            self._check_mapping(self.config.get(section), f"section '{section}'")

        self._apply_env_overrides()

    @staticmethod
    def _check_mapping(value: Any, source: Any) -> Dict:
        if not isinstance(value, dict):
            raise ConfigurationError(f"Config {source} must be a mapping, got {type(value).__name__}")
        return value

    def _merge_configs(self, base: Dict, override: Dict):
        """Recursively merge override config into base config."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_configs(base[key], value)
            elif key in base and isinstance(base[key], dict) and value is None:
                # an empty section keeps its defaults
                continue
            else:
                base[key] = value

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        if os.getenv('TAXII_BASE_URL'):
            self.config['server']['base_url'] = os.getenv('TAXII_BASE_URL')

        if os.getenv('TAXII_TIMEOUT'):
            try:
                self.config['server']['timeout'] = float(os.getenv('TAXII_TIMEOUT'))
            except ValueError:
                raise ConfigurationError(f"TAXII_TIMEOUT must be a number, got {os.getenv('TAXII_TIMEOUT')!r}")

        if os.getenv('TAXII_USERNAME'):
            self.config['credentials']['username'] = os.getenv('TAXII_USERNAME')
        if os.getenv('TAXII_API_KEY'):
            self.config['credentials']['api_key'] = os.getenv('TAXII_API_KEY')

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'server.timeout')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_base_url(self) -> str:
        """Get the TAXII server base URL without a trailing slash."""
        return str(self.config['server']['base_url']).rstrip('/')

    def get_timeout(self) -> float:
        """Get the per-request timeout in seconds."""
        return float(self.config['server']['timeout'])

    def get_credentials(self, username: Optional[str] = None, api_key: Optional[str] = None) -> Tuple[str, str]:
        """
        Get the account name and API key.

        Args:
            username: Value that takes precedence over the configured one
            api_key: Value that takes precedence over the configured one

        Raises:
            ConfigurationError: If either value is missing
        """
        username = username or self.get('credentials.username')
        api_key = api_key or self.get('credentials.api_key')
        if not username or not api_key:
            raise ConfigurationError(
                "TAXII credentials missing: set TAXII_USERNAME and TAXII_API_KEY"
            )
        return str(username), str(api_key)


# Global config instance
_config = None

def get_config(config_path: Optional[str] = None) -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config(config_path)
    return _config
