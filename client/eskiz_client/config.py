"""
Configuration for the Eskiz client, read from a JSON file with environment
variable overrides for the account credentials.
"""

import json
import logging
import os
from typing import Optional

from .client import DEFAULT_BASE_URL
from .models import Credentials

DEFAULT_SENDER = "4546"


def get_default_config_dir() -> str:
    """Get the default configuration directory following XDG standards"""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return os.path.join(xdg_config_home, "eskiz_client")

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, ".config", "eskiz_client")

    # Last resort: current directory
    return os.path.join(os.getcwd(), ".config", "eskiz_client")


class EskizConfig:
    """Configuration for Eskiz API client"""

    def __init__(self, config_path: Optional[str] = None):
        if config_path is None:
            # Try environment variable first
            config_path = os.environ.get("ESKIZ_CONFIG")
            if config_path is None:
                config_path = os.path.join(get_default_config_dir(), "config.json")

        self.config_path = config_path
        self.email: str = ""
        self.password: str = ""
        self.base_url: str = DEFAULT_BASE_URL
        self.sender: str = DEFAULT_SENDER
        self.callback_url: Optional[str] = None
        self.log_level: Optional[str] = None
        self.log_file: Optional[str] = None

        self._load_config()

    def _load_config(self):
        """Load configuration from file"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            config_data = json.load(f)

        # Credentials from the environment win over the file
        env_overrides = {
            'email': os.environ.get("ESKIZ_EMAIL"),
            'password': os.environ.get("ESKIZ_PASSWORD"),
        }
        for field, value in env_overrides.items():
            if value:
                config_data[field] = value

        required_fields = ['email', 'password']
        for field in required_fields:
            if not config_data.get(field):
                raise ValueError(f"Missing required config field: {field}")
            setattr(self, field, config_data[field])

        # Optional fields
        self.base_url = config_data.get('base_url', DEFAULT_BASE_URL)
        self.sender = config_data.get('sender', DEFAULT_SENDER)
        self.callback_url = config_data.get('callback_url')
        self.log_level = config_data.get('log_level')
        if self.log_level is not None:
            if not isinstance(self.log_level, str) or \
                    not isinstance(logging.getLevelName(self.log_level.upper()), int):
                raise ValueError(f"Invalid log_level in config: {self.log_level!r}")
        self.log_file = config_data.get('log_file')

    def credentials(self) -> Credentials:
        return Credentials(email=self.email, password=self.password)
