# Order board: configuration
# Override endpoints and timeouts via board.yaml or environment variables.

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional

from .errors import ConfigError

CONFIG_PATH = Path(__file__).parent / "board.yaml"

ENV_CONFIG = "ORDER_BOARD_CONFIG"
ENV_API_URL = "ORDER_BOARD_API_URL"
ENV_API_TOKEN = "ORDER_BOARD_API_TOKEN"


@dataclass
class BoardConfig:
    """Runtime configuration for the order board."""

    # Backend
    api_base_url: str = "http://localhost:5000"
    api_token: str = ""

    # Timeouts (seconds)
    request_timeout: float = 10.0   # per HTTP request
    move_timeout: float = 15.0      # session wait for a remote move

    def validate(self) -> "BoardConfig":
        for name in ("request_timeout", "move_timeout"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                raise ConfigError(f"{name} must be a positive number, got {value!r}")
        self.api_base_url = self.api_base_url.rstrip("/")
        return self

    def apply_env(self) -> None:
        """Environment variables win over file values."""
        if os.environ.get(ENV_API_URL):
            self.api_base_url = os.environ[ENV_API_URL]
        if os.environ.get(ENV_API_TOKEN):
            self.api_token = os.environ[ENV_API_TOKEN]

    @classmethod
    def load(cls, path: Optional[str] = None) -> "BoardConfig":
        """Load config from YAML file, falling back to defaults."""
        if path:
            cfg_path = Path(path)
        elif os.environ.get(ENV_CONFIG):
            cfg_path = Path(os.environ[ENV_CONFIG])
        else:
            cfg_path = CONFIG_PATH

        if cfg_path.exists():
            with open(cfg_path, "r") as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"Cannot parse {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{cfg_path} must contain a mapping")
            known = {f.name for f in fields(cls)}
            cfg = cls(**{k: v for k, v in data.items() if k in known})
        else:
            cfg = cls()
        cfg.apply_env()
        return cfg.validate()
