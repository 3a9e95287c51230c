import yaml
from pathlib import Path
from typing import Dict, Any

SUPPORTED_SNMP_VERSIONS = ('1', '2c')


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return _is_integer(value) or isinstance(value, float)


class ConfigLoader:
    """
    Load and validate the IES connection configuration from a YAML file
    """
    def __init__(self, config_path: str = "config/config.yaml"):
        self.config_path = Path(config_path)
        self.config = self._load_config()
        self._validate_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def _validate_config(self):
        """Validate configuration values"""
        if not self.get('device.hostname'):
            raise ValueError(f"{self.config_path}: device.hostname is required")

        slots = self.get('device.slots', [])
        if not isinstance(slots, list) or not all(_is_integer(s) and s > 0 for s in slots):
            raise ValueError(f"{self.config_path}: device.slots must be a list of positive slot numbers")

        # SNMP transport settings
        timeout = self.get('snmp.timeout', 2)
        if not _is_number(timeout) or timeout <= 0:
            raise ValueError(f"{self.config_path}: snmp.timeout must be a positive number, got {timeout!r}")
        retries = self.get('snmp.retries', 3)
        if not _is_integer(retries) or retries < 0:
            raise ValueError(f"{self.config_path}: snmp.retries must be a non-negative integer, got {retries!r}")
        port = self.get('snmp.port', 161)
        if not _is_integer(port) or not 0 < port < 65536:
            raise ValueError(f"{self.config_path}: snmp.port must be a UDP port number, got {port!r}")
        if str(self.get('snmp.version', '2c')) not in SUPPORTED_SNMP_VERSIONS:
            raise ValueError(f"{self.config_path}: snmp.version must be one of {', '.join(SUPPORTED_SNMP_VERSIONS)}")

        max_workers = self.get('inventory.max_workers', 1)
        if not _is_integer(max_workers) or max_workers < 1:
            raise ValueError(f"{self.config_path}: inventory.max_workers must be an integer of at least 1, got {max_workers!r}")

    def get(self, key_path: str, default=None):
        """
        Get configuration value using dot notation
        Example: config.get('snmp.timeout')
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value
