"""Discord client wrapper and py-cord transport adapter."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any

import anyio
import discord

from .commands import CommandRegistry
from .dispatch import Dispatcher
from .logging import get_logger, setup_logging
from .payloads import EPHEMERAL_FLAG, present_fields

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .commands import CommandExecute, ComponentExecute, SlashCommand
    from .config import MinidisConfig
    from .payloads import InteractionResponse, WebhookEdit, WebhookParams

logger = get_logger(__name__)

__all__ = ["MinidisClient", "PycordSession"]


def _component_view(components: Sequence[discord.ui.Item]) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    for item in components:
        view.add_item(item)
    return view


def _message_kwargs(fields: dict[str, Any]) -> dict[str, Any]:
    """Translate payload fields into py-cord keyword arguments."""
    kwargs: dict[str, Any] = {}
    if "content" in fields:
        kwargs["content"] = fields["content"]
    if "embeds" in fields:
        kwargs["embeds"] = fields["embeds"]
    if "components" in fields:
        kwargs["view"] = _component_view(fields["components"])
    if "files" in fields:
        kwargs["files"] = fields["files"]
    if "allowed_mentions" in fields:
        kwargs["allowed_mentions"] = fields["allowed_mentions"]
    if fields.get("flags", 0) & EPHEMERAL_FLAG:
        kwargs["ephemeral"] = True
    return kwargs


class PycordSession:
    """:class:`~minidis.session.Session` backed by py-cord interaction objects."""

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    @property
    def user(self) -> discord.ClientUser | None:
        return self._client.user

    async def interaction_respond(
        self, interaction: discord.Interaction, response: InteractionResponse
    ) -> None:
        fields = present_fields(response.data)
        if response.type == discord.InteractionResponseType.deferred_channel_message:
            await interaction.response.defer(
                ephemeral=bool(fields.get("flags", 0) & EPHEMERAL_FLAG),
                invisible=False,
            )
            return
        await interaction.response.send_message(**_message_kwargs(fields))

    async def interaction_response_edit(
        self, interaction: discord.Interaction, edit: WebhookEdit
    ) -> discord.InteractionMessage:
        return await interaction.edit_original_response(
            **_message_kwargs(present_fields(edit))
        )

    async def interaction_response_delete(
        self, interaction: discord.Interaction
    ) -> None:
        await interaction.delete_original_response()

    async def followup_message_create(
        self, interaction: discord.Interaction, params: WebhookParams
    ) -> discord.WebhookMessage:
        return await interaction.followup.send(
            wait=True, **_message_kwargs(present_fields(params))
        )

    async def followup_message_edit(
        self, interaction: discord.Interaction, message_id: int, edit: WebhookEdit
    ) -> discord.WebhookMessage:
        return await interaction.followup.edit_message(
            message_id, **_message_kwargs(present_fields(edit))
        )

    async def followup_message_delete(
        self, interaction: discord.Interaction, message_id: int
    ) -> None:
        await interaction.followup.delete_message(message_id)


class MinidisClient:
    """Connects a :class:`CommandRegistry` to Discord."""

    def __init__(
        self, config: MinidisConfig, *, registry: CommandRegistry | None = None
    ) -> None:
        self._config = config
        self._registry = registry if registry is not None else CommandRegistry()
        self._dispatcher = Dispatcher(self._registry)
        # Defer client creation until inside async context
        self._client: discord.Client | None = None
        self._session: PycordSession | None = None
        self._ready_event: asyncio.Event | None = None
        self._start_task: asyncio.Task[None] | None = None

    def _ensure_client(self) -> discord.Client:
        """Create the client if not already created. Must be called from async context."""
        if self._client is not None:
            return self._client

        # A plain Client rather than discord.Bot: Bot runs its own
        # application command handling and sync, which would clobber ours.
        self._client = discord.Client(intents=discord.Intents.default())
        self._session = PycordSession(self._client)
        self._ready_event = asyncio.Event()

        @self._client.event
        async def on_ready() -> None:
            assert self._ready_event is not None
            self._ready_event.set()

        @self._client.event
        async def on_interaction(interaction: discord.Interaction) -> None:
            await self.handle_interaction(interaction)

        return self._client

    @property
    def client(self) -> discord.Client:
        """Get the underlying py-cord client. Creates it if needed."""
        return self._ensure_client()

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def user(self) -> discord.ClientUser | None:
        if self._client is None:
            return None
        return self._client.user

    def add_command(self, command: SlashCommand) -> SlashCommand:
        return self._registry.add_command(command)

    def command(
        self, name: str, description: str, **kwargs: Any
    ) -> Callable[[CommandExecute], CommandExecute]:
        return self._registry.command(name, description, **kwargs)

    def add_component_handler(self, custom_id: str, execute: ComponentExecute) -> None:
        self._registry.add_component_handler(custom_id, execute)

    def set_custom_component_handler(self, execute: ComponentExecute | None) -> None:
        self._registry.set_custom_component_handler(execute)

    async def handle_interaction(self, interaction: discord.Interaction) -> None:
        """Dispatch one interaction, logging handler failures."""
        self._ensure_client()
        assert self._session is not None
        try:
            await self._dispatcher.dispatch(self._session, interaction)
        except Exception:
            logger.exception(
                "interaction.handler_failed",
                interaction_id=interaction.id,
                interaction_type=str(interaction.type),
            )

    async def sync_commands(self) -> int:
        """Overwrite the application's commands with the registered tree.

        Returns the number of commands sent.
        """
        client = self._ensure_client()
        application_id = self._config.application_id or client.application_id
        if application_id is None:
            raise RuntimeError("application id unknown: start the client first")

        payload = self._registry.application_commands()
        if self._config.guild_ids:
            for guild_id in self._config.guild_ids:
                await client.http.bulk_upsert_guild_commands(
                    application_id, guild_id, payload
                )
                logger.info("commands.synced", guild_id=guild_id, count=len(payload))
        else:
            await client.http.bulk_upsert_global_commands(application_id, payload)
            logger.info("commands.synced", guild_id=None, count=len(payload))
        return len(payload)

    async def start(self) -> None:
        """Seal the registry, connect, and wait until ready."""
        client = self._ensure_client()
        assert self._ready_event is not None
        self._registry.seal()

        async def _run_client() -> None:
            try:
                await client.start(self._config.token)
            except asyncio.CancelledError:
                pass
            except RuntimeError as e:
                # Suppress "Session is closed" error during shutdown
                if "Session is closed" not in str(e):
                    raise

        self._start_task = asyncio.create_task(_run_client(), name="minidis-client-start")
        ready_waiter = asyncio.create_task(self._ready_event.wait())
        await asyncio.wait(
            {ready_waiter, self._start_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if not ready_waiter.done():
            # login or connect failed before on_ready
            ready_waiter.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ready_waiter
            self._start_task.result()
            raise RuntimeError("client stopped before becoming ready")
        logger.info(
            "client.ready",
            user=client.user.name if client.user else "unknown",
            commands=len(self._registry.commands),
        )
        if self._config.sync_commands:
            await self.sync_commands()

    async def close(self) -> None:
        """Close the gateway connection."""
        if self._client is not None:
            await self._client.close()
            if self._start_task is not None and not self._start_task.done():
                self._start_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._start_task

    async def wait_until_ready(self) -> None:
        self._ensure_client()
        assert self._ready_event is not None
        await self._ready_event.wait()

    async def run(self) -> None:
        """Configure logging, start, and serve until cancelled."""
        setup_logging(self._config.log_level, self._config.log_format)
        await self.start()
        try:
            await anyio.sleep_forever()
        finally:
            await self.close()
