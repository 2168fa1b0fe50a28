"""Slash command and component handling on top of py-cord."""

from .client import MinidisClient, PycordSession
from .commands import (
    CommandRegistry,
    OptionChoice,
    OptionSpec,
    OptionType,
    SlashCommand,
    SlashSubcommand,
    SlashSubcommandGroup,
)
from .config import MinidisConfig, load_config
from .context import FollowupContext, SlashContext, build_context
from .dispatch import Dispatcher
from .errors import ConfigError, MinidisError, RegistrySealedError
from .logging import setup_logging
from .payloads import EPHEMERAL_FLAG
from .types import ComponentContext, EditProps, FollowupProps, ReplyProps

__version__ = "0.1.0"

__all__ = [
    "EPHEMERAL_FLAG",
    "CommandRegistry",
    "ComponentContext",
    "ConfigError",
    "Dispatcher",
    "EditProps",
    "FollowupContext",
    "FollowupProps",
    "MinidisClient",
    "MinidisConfig",
    "MinidisError",
    "OptionChoice",
    "OptionSpec",
    "OptionType",
    "PycordSession",
    "RegistrySealedError",
    "ReplyProps",
    "SlashCommand",
    "SlashContext",
    "SlashSubcommand",
    "SlashSubcommandGroup",
    "build_context",
    "load_config",
    "setup_logging",
]
