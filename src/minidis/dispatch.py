"""Route incoming interactions to registered handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

import discord

from .commands import OptionType
from .context import build_component_context, build_context, decode_options
from .logging import get_logger

if TYPE_CHECKING:
    from .commands import CommandRegistry
    from .session import Session

logger = get_logger(__name__)

__all__ = ["CommandPath", "Dispatcher", "command_path"]


class CommandPath(NamedTuple):
    name: str
    group: str | None = None
    subcommand: str | None = None


def command_path(data: dict[str, Any]) -> CommandPath:
    """Extract the invoked command / group / subcommand names."""
    name = data.get("name", "")
    options = decode_options(data.get("options"))
    if not options:
        return CommandPath(name)

    first = options[0]
    if first.type == OptionType.SUB_COMMAND_GROUP:
        inner = first.options
        if inner and inner[0].type == OptionType.SUB_COMMAND:
            return CommandPath(name, first.name, inner[0].name)
        return CommandPath(name, first.name)
    if first.type == OptionType.SUB_COMMAND:
        return CommandPath(name, subcommand=first.name)
    return CommandPath(name)


class Dispatcher:
    """Runs at most one handler per interaction.

    Lookup misses are not errors: Discord is the source of truth for which
    commands exist and components may belong to messages this process does
    not manage. Misses are logged at debug level only.
    """

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    async def dispatch(self, session: Session, interaction: discord.Interaction) -> None:
        if interaction.type == discord.InteractionType.application_command:
            await self.execute_slash(session, interaction)
        elif interaction.type == discord.InteractionType.component:
            await self.execute_component(session, interaction)

    async def execute_slash(
        self, session: Session, interaction: discord.Interaction
    ) -> None:
        path = command_path(interaction.data or {})
        execute = self._registry.resolve(path.name, path.group, path.subcommand)
        if execute is None:
            logger.debug(
                "dispatch.command_missing",
                command=path.name,
                group=path.group,
                subcommand=path.subcommand,
            )
            return None

        context = build_context(session, interaction, True)
        return await execute(context)

    async def execute_component(
        self, session: Session, interaction: discord.Interaction
    ) -> None:
        slash_context = build_context(session, interaction, False)
        component_context = build_component_context(interaction)

        execute = self._registry.resolve_component(component_context.custom_id)
        if execute is None:
            logger.debug(
                "dispatch.component_unhandled",
                custom_id=component_context.custom_id,
            )
            return None

        return await execute(slash_context, component_context)
