"""Tests for the command tree and component registry."""

from unittest.mock import AsyncMock

import pytest

from minidis.commands import (
    CommandRegistry,
    OptionChoice,
    OptionSpec,
    OptionType,
    SlashCommand,
    SlashSubcommand,
    SlashSubcommandGroup,
)
from minidis.errors import RegistrySealedError


def _leaf(name):
    return SlashSubcommand(name=name, description=f"{name} leaf", execute=AsyncMock())


class TestResolve:
    """Tests for CommandRegistry.resolve."""

    def test_unknown_command_is_miss(self):
        registry = CommandRegistry()
        assert registry.resolve("nope") is None

    def test_leaf_command_resolves_own_execute(self):
        registry = CommandRegistry()
        execute = AsyncMock()
        registry.add_command(SlashCommand("ping", "Ping", execute=execute))
        assert registry.resolve("ping") is execute

    def test_command_without_execute_is_miss(self):
        registry = CommandRegistry()
        registry.add_command(SlashCommand("empty", "No callback"))
        assert registry.resolve("empty") is None

    def test_router_never_resolves_own_execute(self):
        registry = CommandRegistry()
        own = AsyncMock()
        command = registry.add_command(SlashCommand("admin", "Admin", execute=own))
        command.add_subcommand(_leaf("kick"))
        assert command.is_router
        assert registry.resolve("admin") is None

    def test_group_only_router_never_resolves_own_execute(self):
        registry = CommandRegistry()
        command = registry.add_command(
            SlashCommand("admin", "Admin", execute=AsyncMock())
        )
        command.add_subcommand_group(SlashSubcommandGroup("roles", "Roles"))
        assert registry.resolve("admin") is None

    def test_subcommand_path(self):
        registry = CommandRegistry()
        command = registry.add_command(SlashCommand("admin", "Admin"))
        kick = command.add_subcommand(_leaf("kick"))
        command.add_subcommand(_leaf("ban"))
        assert registry.resolve("admin", subcommand="kick") is kick.execute

    def test_group_path(self):
        registry = CommandRegistry()
        command = registry.add_command(SlashCommand("config", "Config"))
        group = command.add_subcommand_group(SlashSubcommandGroup("set", "Set"))
        flag = group.add_subcommand(_leaf("flag"))
        group.add_subcommand(_leaf("name"))
        assert registry.resolve("config", "set", "flag") is flag.execute

    def test_group_path_does_not_fall_back_to_plain_subcommand(self):
        registry = CommandRegistry()
        command = registry.add_command(SlashCommand("config", "Config"))
        command.add_subcommand(_leaf("flag"))
        command.add_subcommand_group(SlashSubcommandGroup("set", "Set"))
        assert registry.resolve("config", "set", "flag") is None

    def test_unknown_group_or_subcommand_is_miss(self):
        registry = CommandRegistry()
        command = registry.add_command(SlashCommand("config", "Config"))
        group = command.add_subcommand_group(SlashSubcommandGroup("set", "Set"))
        group.add_subcommand(_leaf("flag"))
        assert registry.resolve("config", "get", "flag") is None
        assert registry.resolve("config", "set", "other") is None
        assert registry.resolve("config", subcommand="flag") is None

    def test_resolution_independent_of_sibling_order(self):
        first = CommandRegistry()
        second = CommandRegistry()
        leaves = {name: _leaf(name) for name in ("a", "b", "c")}

        cmd1 = first.add_command(SlashCommand("x", "X"))
        for name in ("a", "b", "c"):
            cmd1.add_subcommand(leaves[name])
        cmd2 = second.add_command(SlashCommand("x", "X"))
        for name in ("c", "a", "b"):
            cmd2.add_subcommand(leaves[name])

        for name, leaf in leaves.items():
            assert first.resolve("x", subcommand=name) is leaf.execute
            assert second.resolve("x", subcommand=name) is leaf.execute


class TestRegistration:
    """Overwrite semantics and the sealed phase."""

    def test_last_command_registration_wins(self):
        registry = CommandRegistry()
        old = AsyncMock()
        new = AsyncMock()
        registry.add_command(SlashCommand("ping", "Old", execute=old))
        registry.add_command(SlashCommand("ping", "New", execute=new))
        assert registry.resolve("ping") is new
        assert len(registry.commands) == 1

    def test_subcommand_overwrites_on_collision(self):
        command = SlashCommand("admin", "Admin")
        command.add_subcommand(_leaf("kick"))
        replacement = command.add_subcommand(_leaf("kick"))
        assert command.resolve(subcommand="kick") is replacement.execute

    def test_decorator_registers_leaf_command(self):
        registry = CommandRegistry()

        @registry.command("ping", "Ping")
        async def ping(ctx):
            return None

        assert registry.resolve("ping") is ping

    def test_component_handler_overwrites(self):
        registry = CommandRegistry()
        registry.add_component_handler("btn", AsyncMock())
        newer = AsyncMock()
        registry.add_component_handler("btn", newer)
        assert registry.resolve_component("btn") is newer

    def test_component_fallback(self):
        registry = CommandRegistry()
        fallback = AsyncMock()
        assert registry.resolve_component("btn") is None
        registry.set_custom_component_handler(fallback)
        assert registry.resolve_component("btn") is fallback

    def test_seal_blocks_further_registration(self):
        registry = CommandRegistry()
        command = registry.add_command(SlashCommand("config", "Config"))
        group = command.add_subcommand_group(SlashSubcommandGroup("set", "Set"))
        registry.seal()

        assert registry.sealed
        with pytest.raises(RegistrySealedError):
            registry.add_command(SlashCommand("ping", "Ping", execute=AsyncMock()))
        with pytest.raises(RegistrySealedError):
            command.add_subcommand(_leaf("kick"))
        with pytest.raises(RegistrySealedError):
            group.add_subcommand(_leaf("flag"))
        with pytest.raises(RegistrySealedError):
            registry.add_component_handler("btn", AsyncMock())
        with pytest.raises(RegistrySealedError):
            registry.set_custom_component_handler(None)


class TestPayload:
    """Rendering the tree for a bulk command overwrite."""

    def test_leaf_command_payload(self):
        command = SlashCommand(
            "echo",
            "Echo text",
            options=[
                OptionSpec(
                    type=OptionType.STRING,
                    name="text",
                    description="What to say",
                    required=True,
                ),
                OptionSpec(
                    type=OptionType.INTEGER,
                    name="times",
                    description="Repeat count",
                    choices=[OptionChoice("once", 1), OptionChoice("twice", 2)],
                ),
            ],
            execute=AsyncMock(),
        )
        assert command.to_payload() == {
            "name": "echo",
            "description": "Echo text",
            "options": [
                {"type": 3, "name": "text", "description": "What to say", "required": True},
                {
                    "type": 4,
                    "name": "times",
                    "description": "Repeat count",
                    "choices": [
                        {"name": "once", "value": 1},
                        {"name": "twice", "value": 2},
                    ],
                },
            ],
        }

    def test_router_payload_nests_groups_and_subcommands(self):
        command = SlashCommand(
            "config",
            "Config",
            options=[OptionSpec(type=OptionType.STRING, name="ignored", description="x")],
        )
        group = command.add_subcommand_group(SlashSubcommandGroup("set", "Set"))
        group.add_subcommand(
            SlashSubcommand(
                "flag",
                "Set a flag",
                AsyncMock(),
                options=[OptionSpec(type=OptionType.BOOLEAN, name="value", description="On?")],
            )
        )
        command.add_subcommand(_leaf("show"))

        payload = command.to_payload()
        assert payload["name"] == "config"
        assert payload["options"] == [
            {
                "type": 2,
                "name": "set",
                "description": "Set",
                "options": [
                    {
                        "type": 1,
                        "name": "flag",
                        "description": "Set a flag",
                        "options": [
                            {"type": 5, "name": "value", "description": "On?"}
                        ],
                    }
                ],
            },
            {"type": 1, "name": "show", "description": "show leaf"},
        ]

    def test_application_commands_lists_every_command(self):
        registry = CommandRegistry()
        registry.add_command(SlashCommand("a", "A", execute=AsyncMock()))
        registry.add_command(SlashCommand("b", "B", execute=AsyncMock()))
        names = [payload["name"] for payload in registry.application_commands()]
        assert names == ["a", "b"]
