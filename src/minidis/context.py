"""Per-interaction context handed to command and component handlers.

A context wraps one incoming interaction and the session it arrived on.
Response methods map one-to-one onto Discord's interaction lifecycle:

- one initial response: ``reply*`` or ``defer_reply``
- any number of ``edit`` calls on that response, or a ``delete``
- any number of follow-up messages, each editable on its own

Nothing here tracks which of those already happened. Calling them out of
order results in whatever error the API returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import msgspec

from .commands import OptionType
from .payloads import build_deferred_reply, build_edit, build_followup, build_reply
from .types import ComponentContext, EditProps, FollowupProps, InteractionOption, ReplyProps

if TYPE_CHECKING:
    import discord

    from .session import Session

_ROUTING_TYPES = (OptionType.SUB_COMMAND, OptionType.SUB_COMMAND_GROUP)


@dataclass(slots=True)
class FollowupContext:
    """A sent follow-up message that can be edited or deleted later."""

    message: discord.WebhookMessage
    session: Session
    interaction: discord.Interaction
    app_id: int | None

    async def edit(self, content: str) -> None:
        await self.edit_with(EditProps(content=content))

    async def edit_with(self, props: EditProps) -> None:
        """Edit this follow-up message. Empty fields are left unchanged."""
        await self.session.followup_message_edit(
            self.interaction, self.message.id, build_edit(props)
        )

    async def delete(self) -> None:
        await self.session.followup_message_delete(self.interaction, self.message.id)


@dataclass(slots=True)
class SlashContext:
    """Context for a slash command or component interaction."""

    interaction: discord.Interaction
    session: Session
    app_id: int | None
    bot: discord.ClientUser | None
    author: discord.User
    member: discord.Member | None = None  # only set in guilds
    is_dm: bool = False
    # empty when a component triggered the interaction
    options: dict[str, InteractionOption] = field(default_factory=dict)

    def option(self, name: str, default: Any = None) -> Any:
        """Return the value supplied for option ``name``."""
        found = self.options.get(name)
        if found is None:
            return default
        return found.value

    async def reply(self, content: str, *embeds: discord.Embed) -> None:
        """Send ``content`` and optional embeds as the interaction response."""
        await self.reply_with(ReplyProps(content=content, embeds=embeds))

    async def reply_ephemeral(self, content: str, *embeds: discord.Embed) -> None:
        """Like :meth:`reply` but only the invoking user sees the message."""
        await self.reply_with(
            ReplyProps(content=content, embeds=embeds, is_ephemeral=True)
        )

    async def reply_with(self, props: ReplyProps) -> None:
        await self.session.interaction_respond(self.interaction, build_reply(props))

    async def defer_reply(self, ephemeral: bool = False) -> None:
        """Acknowledge now and show a loading state.

        Discord then allows 15 minutes to finish through :meth:`edit`. This
        counts as the initial response, so ``reply*`` must not follow it.
        """
        await self.session.interaction_respond(
            self.interaction, build_deferred_reply(ephemeral=ephemeral)
        )

    async def edit(self, content: str) -> None:
        await self.edit_with(EditProps(content=content))

    async def edit_with(self, props: EditProps) -> None:
        """Edit the initial response. Empty fields are left unchanged."""
        await self.session.interaction_response_edit(self.interaction, build_edit(props))

    async def delete(self) -> None:
        await self.session.interaction_response_delete(self.interaction)

    async def followup(self, content: str) -> FollowupContext:
        return await self.followup_with(FollowupProps(content=content))

    async def followup_with(self, props: ReplyProps) -> FollowupContext:
        """Send a follow-up message tied to this interaction."""
        message = await self.session.followup_message_create(
            self.interaction, build_followup(props)
        )
        return FollowupContext(
            message=message,
            session=self.session,
            interaction=self.interaction,
            app_id=self.app_id,
        )


def decode_options(raw: Any) -> list[InteractionOption]:
    return msgspec.convert(raw or [], type=list[InteractionOption])


def leaf_options(options: list[InteractionOption]) -> list[InteractionOption]:
    """Skip the subcommand group / subcommand wrappers of an invocation."""
    while len(options) == 1 and options[0].type in _ROUTING_TYPES:
        options = options[0].options
    return options


def build_context(
    session: Session, interaction: discord.Interaction, is_slash: bool
) -> SlashContext:
    """Build the context for ``interaction``.

    ``is_slash`` controls whether command options are parsed; component
    interactions carry their data elsewhere (see :func:`build_component_context`).

    For subcommand invocations ``options`` holds the invoked subcommand's own
    options, keyed by name; the group and subcommand wrapper options Discord
    nests them in are not included.
    """
    bot = session.user
    context = SlashContext(
        interaction=interaction,
        session=session,
        app_id=bot.id if bot is not None else None,
        bot=bot,
        author=interaction.user,
    )

    if is_slash:
        data = interaction.data or {}
        for option in leaf_options(decode_options(data.get("options"))):
            context.options[option.name] = option

    if interaction.guild_id is None:
        context.is_dm = True
    else:
        context.member = interaction.user
        # guild interactions always carry a discord.Member, which wraps
        # the User it was built from
        context.author = interaction.user._user

    return context


def build_component_context(interaction: discord.Interaction) -> ComponentContext:
    data = interaction.data or {}
    return ComponentContext(
        custom_id=data.get("custom_id", ""),
        component_type=data.get("component_type", 0),
        values=tuple(data.get("values", ())),
    )
