"""Outgoing interaction payloads.

Discord treats an omitted field differently from an empty one: on edits an
omitted field keeps its current value while an empty list clears it. Every
optional field here therefore defaults to ``msgspec.UNSET`` and is only set
when the caller supplied something.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import discord
import msgspec
from msgspec import UNSET, UnsetType

if TYPE_CHECKING:
    from .types import EditProps, ReplyProps

# MessageFlags.ephemeral
EPHEMERAL_FLAG = 1 << 6


class InteractionResponseData(msgspec.Struct, kw_only=True):
    content: str | UnsetType = UNSET
    embeds: list[Any] | UnsetType = UNSET
    components: list[Any] | UnsetType = UNSET
    files: list[Any] | UnsetType = UNSET
    flags: int | UnsetType = UNSET
    allowed_mentions: Any | UnsetType = UNSET


class InteractionResponse(msgspec.Struct, kw_only=True):
    type: discord.InteractionResponseType
    data: InteractionResponseData


class WebhookEdit(msgspec.Struct, kw_only=True):
    content: str = ""
    embeds: list[Any] | UnsetType = UNSET
    components: list[Any] | UnsetType = UNSET
    files: list[Any] | UnsetType = UNSET
    allowed_mentions: Any | UnsetType = UNSET


class WebhookParams(msgspec.Struct, kw_only=True):
    content: str = ""
    embeds: list[Any] | UnsetType = UNSET
    components: list[Any] | UnsetType = UNSET
    files: list[Any] | UnsetType = UNSET
    flags: int | UnsetType = UNSET
    allowed_mentions: Any | UnsetType = UNSET


def present_fields(payload: msgspec.Struct) -> dict[str, Any]:
    """Return the fields of ``payload`` that were actually set."""
    return {
        name: value
        for name, value in msgspec.structs.asdict(payload).items()
        if value is not UNSET
    }


def _message_fields(props: ReplyProps | EditProps) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if len(props.embeds) > 0:
        fields["embeds"] = list(props.embeds)
    if len(props.components) > 0:
        fields["components"] = list(props.components)
    if len(props.attachments) > 0:
        fields["files"] = list(props.attachments)
    if props.allowed_mentions is not None:
        fields["allowed_mentions"] = props.allowed_mentions
    return fields


def build_reply(props: ReplyProps) -> InteractionResponse:
    """Build the initial ``channel_message`` response for ``props``."""
    fields = _message_fields(props)
    if props.is_ephemeral:
        fields["flags"] = EPHEMERAL_FLAG
    return InteractionResponse(
        type=discord.InteractionResponseType.channel_message,
        data=InteractionResponseData(content=props.content, **fields),
    )


def build_deferred_reply(*, ephemeral: bool) -> InteractionResponse:
    """Build a "thinking..." acknowledgement."""
    data = InteractionResponseData()
    if ephemeral:
        data.flags = EPHEMERAL_FLAG
    return InteractionResponse(
        type=discord.InteractionResponseType.deferred_channel_message,
        data=data,
    )


def build_edit(props: EditProps) -> WebhookEdit:
    return WebhookEdit(content=props.content, **_message_fields(props))


def build_followup(props: ReplyProps) -> WebhookParams:
    fields = _message_fields(props)
    if props.is_ephemeral:
        fields["flags"] = EPHEMERAL_FLAG
    return WebhookParams(content=props.content, **fields)
