"""Slash command tree and component handler registry.

A top-level command either runs its own ``execute`` callback or routes to
subcommands and subcommand groups, never both: once a child is added the
command's callback is no longer reachable.

Registration happens once at startup. ``CommandRegistry.seal`` marks the end
of that phase; the dispatcher only reads the tree afterwards, so lookups need
no locking.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any

import msgspec

from .errors import RegistrySealedError

if TYPE_CHECKING:
    from .context import SlashContext
    from .types import ComponentContext

CommandExecute = Callable[["SlashContext"], Awaitable[None]]
ComponentExecute = Callable[["SlashContext", "ComponentContext"], Awaitable[None]]


class OptionType(IntEnum):
    """Application command option types."""

    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


class OptionChoice(msgspec.Struct):
    name: str
    value: str | int | float


class OptionSpec(msgspec.Struct, kw_only=True, omit_defaults=True):
    """A declared command option."""

    type: OptionType
    name: str
    description: str
    required: bool = False
    choices: list[OptionChoice] = []
    options: list[OptionSpec] = []
    autocomplete: bool = False


class ApplicationCommand(msgspec.Struct, kw_only=True, omit_defaults=True):
    """Payload for a chat input command in a bulk overwrite."""

    name: str
    description: str
    options: list[OptionSpec] = []
    type: int = 1


def _check_open(sealed: bool, what: str) -> None:
    if sealed:
        raise RegistrySealedError(f"cannot add {what}: registry is sealed")


@dataclass
class SlashSubcommand:
    """A leaf command; always executable."""

    name: str
    description: str
    execute: CommandExecute
    options: Sequence[OptionSpec] = ()

    def to_option(self) -> OptionSpec:
        return OptionSpec(
            type=OptionType.SUB_COMMAND,
            name=self.name,
            description=self.description,
            options=list(self.options),
        )


@dataclass
class SlashSubcommandGroup:
    """Routes to subcommands; has no callback of its own."""

    name: str
    description: str
    subcommands: dict[str, SlashSubcommand] = field(default_factory=dict)
    _sealed: bool = field(default=False, repr=False)

    def add_subcommand(self, subcommand: SlashSubcommand) -> SlashSubcommand:
        """Add a subcommand to this group, replacing one with the same name."""
        _check_open(self._sealed, f"subcommand {subcommand.name!r}")
        self.subcommands[subcommand.name] = subcommand
        return subcommand

    def to_option(self) -> OptionSpec:
        return OptionSpec(
            type=OptionType.SUB_COMMAND_GROUP,
            name=self.name,
            description=self.description,
            options=[sub.to_option() for sub in self.subcommands.values()],
        )


@dataclass
class SlashCommand:
    """A top-level slash command.

    ``execute`` only runs while the command has no subcommands or groups.
    """

    name: str
    description: str
    options: Sequence[OptionSpec] = ()
    execute: CommandExecute | None = None
    subcommand_groups: dict[str, SlashSubcommandGroup] = field(default_factory=dict)
    subcommands: dict[str, SlashSubcommand] = field(default_factory=dict)
    _sealed: bool = field(default=False, repr=False)

    @property
    def is_router(self) -> bool:
        return bool(self.subcommand_groups or self.subcommands)

    def add_subcommand(self, subcommand: SlashSubcommand) -> SlashSubcommand:
        """Add a subcommand, replacing one with the same name.

        Note: this makes the command's own ``execute`` unreachable.
        """
        _check_open(self._sealed, f"subcommand {subcommand.name!r}")
        self.subcommands[subcommand.name] = subcommand
        return subcommand

    def add_subcommand_group(
        self, group: SlashSubcommandGroup
    ) -> SlashSubcommandGroup:
        """Add a subcommand group, replacing one with the same name.

        Note: this makes the command's own ``execute`` unreachable.
        """
        _check_open(self._sealed, f"subcommand group {group.name!r}")
        self.subcommand_groups[group.name] = group
        return group

    def resolve(
        self, group: str | None = None, subcommand: str | None = None
    ) -> CommandExecute | None:
        """Find the callback for a group/subcommand path below this command."""
        if group is not None:
            found = self.subcommand_groups.get(group)
            if found is None or subcommand is None:
                return None
            leaf = found.subcommands.get(subcommand)
            return leaf.execute if leaf is not None else None
        if subcommand is not None:
            leaf = self.subcommands.get(subcommand)
            return leaf.execute if leaf is not None else None
        if self.is_router:
            return None
        return self.execute

    def to_payload(self) -> dict[str, Any]:
        """Render the command as an application command payload."""
        if self.is_router:
            options = [g.to_option() for g in self.subcommand_groups.values()]
            options.extend(s.to_option() for s in self.subcommands.values())
        else:
            options = list(self.options)
        command = ApplicationCommand(
            name=self.name, description=self.description, options=options
        )
        return msgspec.to_builtins(command)


class CommandRegistry:
    """Process-wide registry of commands and component handlers."""

    def __init__(self) -> None:
        self.commands: dict[str, SlashCommand] = {}
        self.component_handlers: dict[str, ComponentExecute] = {}
        self.custom_component_handler: ComponentExecute | None = None
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def add_command(self, command: SlashCommand) -> SlashCommand:
        """Register a top-level command. A later command with the same name wins."""
        _check_open(self._sealed, f"command {command.name!r}")
        self.commands[command.name] = command
        return command

    def command(
        self,
        name: str,
        description: str,
        *,
        options: Sequence[OptionSpec] = (),
    ) -> Callable[[CommandExecute], CommandExecute]:
        """Decorator form of :meth:`add_command` for leaf commands."""

        def decorator(func: CommandExecute) -> CommandExecute:
            self.add_command(
                SlashCommand(
                    name=name, description=description, options=options, execute=func
                )
            )
            return func

        return decorator

    def add_component_handler(self, custom_id: str, execute: ComponentExecute) -> None:
        """Register the handler for components with ``custom_id``."""
        _check_open(self._sealed, f"component handler {custom_id!r}")
        self.component_handlers[custom_id] = execute

    def set_custom_component_handler(self, execute: ComponentExecute | None) -> None:
        """Set the handler for components that have no specific handler."""
        _check_open(self._sealed, "custom component handler")
        self.custom_component_handler = execute

    def resolve(
        self,
        name: str,
        group: str | None = None,
        subcommand: str | None = None,
    ) -> CommandExecute | None:
        """Return the callback for an invoked command path, or ``None``."""
        command = self.commands.get(name)
        if command is None:
            return None
        return command.resolve(group, subcommand)

    def resolve_component(self, custom_id: str) -> ComponentExecute | None:
        handler = self.component_handlers.get(custom_id)
        if handler is not None:
            return handler
        return self.custom_component_handler

    def application_commands(self) -> list[dict[str, Any]]:
        """Payloads for every registered command, for a bulk overwrite."""
        return [command.to_payload() for command in self.commands.values()]

    def seal(self) -> None:
        """End the registration phase."""
        self._sealed = True
        for command in self.commands.values():
            command._sealed = True
            for group in command.subcommand_groups.values():
                group._sealed = True
