"""Exception types raised by minidis itself.

Errors coming from the Discord API (``discord.HTTPException`` and friends)
are never wrapped; they reach the handler exactly as py-cord raised them.
"""

from __future__ import annotations


class MinidisError(Exception):
    """Base class for errors raised by minidis."""


class ConfigError(MinidisError):
    """Configuration could not be loaded or is invalid."""


class RegistrySealedError(MinidisError):
    """A command or handler was registered after serving started."""
