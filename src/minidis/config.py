"""Configuration loading for minidis."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import msgspec

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".minidis" / "config.toml"
TOKEN_ENV = "MINIDIS_TOKEN"


class MinidisConfig(msgspec.Struct, kw_only=True):
    """Bot settings.

    ``guild_ids`` restricts command sync to those guilds, which applies
    instantly; an empty list syncs global commands.
    """

    token: str = ""
    application_id: int | None = None
    guild_ids: list[int] = []
    sync_commands: bool = True
    log_level: str = "info"
    log_format: Literal["console", "json"] = "console"


def load_config(path: Path | None = None) -> MinidisConfig:
    """Load settings from a TOML file.

    The ``MINIDIS_TOKEN`` environment variable takes precedence over the
    file's ``token``. If no path is given and the default file does not
    exist, settings come from the environment alone.
    """
    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        try:
            config = msgspec.toml.decode(config_path.read_bytes(), type=MinidisConfig)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            raise ConfigError(f"invalid config {config_path}: {exc}") from exc
    elif path is not None:
        raise ConfigError(f"config file not found: {config_path}")
    else:
        config = MinidisConfig()

    token = os.environ.get(TOKEN_ENV)
    if token:
        config = msgspec.structs.replace(config, token=token)

    if not config.token.strip():
        raise ConfigError(f"no bot token: set `token` in {config_path} or {TOKEN_ENV}")
    return config
