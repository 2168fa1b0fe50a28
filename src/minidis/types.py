"""Type definitions shared by handlers and the dispatcher."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import msgspec

if TYPE_CHECKING:
    import discord


@dataclass(frozen=True, slots=True)
class ReplyProps:
    """Initial interaction response."""

    content: str = ""
    embeds: Sequence[discord.Embed] = ()
    components: Sequence[discord.ui.Item] = ()
    is_ephemeral: bool = False
    attachments: Sequence[discord.File] = ()
    allowed_mentions: discord.AllowedMentions | None = None


@dataclass(frozen=True, slots=True)
class FollowupProps(ReplyProps):
    """Follow-up message; same shape as an initial reply."""


@dataclass(frozen=True, slots=True)
class EditProps:
    """Edit of an already sent response or follow-up.

    Empty collections and ``None`` mean "leave unchanged".
    """

    content: str = ""
    embeds: Sequence[discord.Embed] = ()
    components: Sequence[discord.ui.Item] = ()
    attachments: Sequence[discord.File] = ()
    allowed_mentions: discord.AllowedMentions | None = None


class InteractionOption(msgspec.Struct, kw_only=True):
    """An option value supplied with an application command."""

    name: str
    type: int
    value: Any = None
    focused: bool = False
    options: list[InteractionOption] = []


@dataclass(frozen=True, slots=True)
class ComponentContext:
    """Data carried by a message component interaction."""

    custom_id: str
    component_type: int
    values: tuple[str, ...] = ()
