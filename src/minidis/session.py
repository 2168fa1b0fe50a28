"""The transport operations minidis needs from a Discord client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    import discord

    from .payloads import InteractionResponse, WebhookEdit, WebhookParams


class Session(Protocol):
    """Outbound side of an interaction.

    Implementations send exactly what they are given and raise whatever the
    API returns; sequencing rules (one initial response, edit after defer,
    ...) are enforced by Discord, not here.
    """

    @property
    def user(self) -> discord.ClientUser | None: ...

    async def interaction_respond(
        self, interaction: discord.Interaction, response: InteractionResponse
    ) -> None: ...

    async def interaction_response_edit(
        self, interaction: discord.Interaction, edit: WebhookEdit
    ) -> Any: ...

    async def interaction_response_delete(
        self, interaction: discord.Interaction
    ) -> None: ...

    async def followup_message_create(
        self, interaction: discord.Interaction, params: WebhookParams
    ) -> discord.WebhookMessage: ...

    async def followup_message_edit(
        self, interaction: discord.Interaction, message_id: int, edit: WebhookEdit
    ) -> Any: ...

    async def followup_message_delete(
        self, interaction: discord.Interaction, message_id: int
    ) -> None: ...
