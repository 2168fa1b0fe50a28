"""Shared fakes for the Discord collaborator."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

BOT_ID = 1000
USER_ID = 42


def make_session(bot_id=BOT_ID):
    """A Session whose transport calls are AsyncMocks."""
    session = MagicMock()
    session.user = SimpleNamespace(id=bot_id, name="minidis-bot")
    session.interaction_respond = AsyncMock(return_value=None)
    session.interaction_response_edit = AsyncMock(return_value=None)
    session.interaction_response_delete = AsyncMock(return_value=None)
    session.followup_message_create = AsyncMock(
        return_value=SimpleNamespace(id=555)
    )
    session.followup_message_edit = AsyncMock(return_value=None)
    session.followup_message_delete = AsyncMock(return_value=None)
    return session


def make_user(user_id=USER_ID):
    return SimpleNamespace(id=user_id, name="someone")


def make_interaction(
    *,
    type=discord.InteractionType.application_command,
    data=None,
    guild_id=None,
    user=None,
):
    """An interaction from a DM, or from a guild when ``guild_id`` is set."""
    user = user or make_user()
    if guild_id is not None:
        invoker = SimpleNamespace(id=user.id, _user=user, nick="nick")
    else:
        invoker = user
    return SimpleNamespace(
        id=77,
        type=type,
        guild_id=guild_id,
        user=invoker,
        data=data if data is not None else {},
    )


def slash_data(name, options=None):
    data = {"id": "1", "name": name, "type": 1}
    if options is not None:
        data["options"] = options
    return data


def component_data(custom_id, values=None, component_type=2):
    data = {"custom_id": custom_id, "component_type": component_type}
    if values is not None:
        data["values"] = values
    return data


@pytest.fixture
def session():
    return make_session()
