"""Centralized application configuration."""

import tomllib
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_DATA_DIR = Path.home() / ".local" / "ts-clientquery"

# Keys accepted from config.toml, with the type each must have
_TOML_KEYS: dict[str, tuple[type, ...]] = {
    "host": (str,),
    "port": (int,),
    "api_key": (str,),
    "buffer_size": (int,),
    "read_timeout": (int, float),
    "keepalive_interval": (int,),
}


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for all application data")
    host: str = Field(default="127.0.0.1", description="ClientQuery host")
    port: int = Field(default=25639, ge=1, le=65535, description="ClientQuery TCP port")
    api_key: str = Field(default="", description="ClientQuery API key (empty = skip auth)")
    buffer_size: int = Field(default=512, ge=1, description="Bytes per socket read; a shorter read ends a response")
    read_timeout: float = Field(default=2.0, gt=0, description="Seconds a single read may wait for data")
    keepalive_interval: int = Field(default=300, ge=1, description="Seconds of silence before a keep-alive while listening")

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "client.log"

    @classmethod
    def build(cls, data_dir: Path | None = None, **overrides: Any) -> Self:
        """Build a Config from defaults, optional config.toml, and explicit overrides.

        Overrides whose value is None are ignored.
        """
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key, types in _TOML_KEYS.items():
                value = toml_data.get(key)
                if isinstance(value, types) and not isinstance(value, bool):
                    kwargs[key] = value

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
