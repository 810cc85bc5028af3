"""
Tests for the world sinks and the block registry
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from mcs_builder.errors import OperationError
from mcs_builder.world import BlockRegistry, InMemoryWorld, RconWorld, WorldSink


class TestInMemoryWorld:
    """Test the recording world"""

    async def test_known_commands_recorded(self):
        world = InMemoryWorld()
        assert await world.run_command("fill 0 64 0 2 64 2 stone")
        assert await world.run_command("setblock 5 64 5 minecraft:torch")

        assert world.commands == ["fill 0 64 0 2 64 2 stone", "setblock 5 64 5 minecraft:torch"]
        assert world.block_at(5, 64, 5) == "minecraft:torch"

    async def test_unknown_command_rejected(self):
        world = InMemoryWorld()
        assert await world.run_command("build a house") is False
        assert world.rejected == ["build a house"]
        assert world.commands == []

    async def test_relative_setblock_not_tracked(self):
        world = InMemoryWorld()
        assert await world.run_command("setblock ~ ~1 ~ stone")
        assert world.blocks == {}

    async def test_set_block(self):
        world = InMemoryWorld()
        assert await world.set_block("minecraft:glass", 1, 2, 3)
        assert world.block_at(1, 2, 3) == "minecraft:glass"

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryWorld(), WorldSink)


class TestRconWorld:
    """Test the RCON world with a mocked connection"""

    @pytest.fixture
    def rcon(self):
        with patch("mcs_builder.world.rcon_world.MCRcon") as mock_cls:
            client = MagicMock()
            mock_cls.return_value = client
            yield mock_cls, client

    async def test_run_command(self, rcon):
        mock_cls, client = rcon
        client.command.return_value = "Successfully filled 9 block(s)"

        world = RconWorld("mc.example", "secret", port=25576)
        world.connect()

        assert await world.run_command("fill 0 64 0 2 64 2 stone")
        mock_cls.assert_called_once_with("mc.example", "secret", port=25576, timeout=5)
        client.connect.assert_called_once()
        client.command.assert_called_once_with("fill 0 64 0 2 64 2 stone")

    async def test_failure_reply(self, rcon):
        _, client = rcon
        client.command.return_value = "Unknown or incomplete command, see below for error"

        with RconWorld() as world:
            assert await world.run_command("flll 0 0 0") is False
        client.disconnect.assert_called_once()

    async def test_set_block(self, rcon):
        _, client = rcon
        client.command.return_value = "Changed the block at 1, 2, 3"

        with RconWorld() as world:
            assert await world.set_block("minecraft:stone", 1, 2, 3)
        client.command.assert_called_once_with("setblock 1 2 3 minecraft:stone")

    async def test_not_connected(self):
        with pytest.raises(OperationError, match="not connected"):
            await RconWorld().run_command("say hi")


class TestBlockRegistry:
    """Test block id resolution against minecraft-data"""

    @pytest.fixture
    def registry(self):
        BlockRegistry._instance = None
        BlockRegistry._version = None
        fake_data = SimpleNamespace(
            blocks_name={
                "stone": {"id": 1, "name": "stone"},
                "oak_stairs": {"id": 200, "name": "oak_stairs"},
                "stone_bricks": {"id": 300, "name": "stone_bricks"},
            }
        )
        with patch("mcs_builder.world.block_registry.minecraft_data", return_value=fake_data) as mock_data:
            yield BlockRegistry("1.21.1"), mock_data
        BlockRegistry._instance = None
        BlockRegistry._version = None

    @pytest.mark.parametrize(
        "block_id,expected",
        [
            ("stone", "minecraft:stone"),
            ("minecraft:stone", "minecraft:stone"),
            ("  Minecraft:Stone ", "minecraft:stone"),
            ("minecraft:oak_stairs[facing=north]", "minecraft:oak_stairs[facing=north]"),
            ("minecraft:unobtainium", None),
            ("othermod:stone", None),
            ("stone block", None),
        ],
    )
    def test_resolve(self, registry, block_id, expected):
        assert registry[0].resolve(block_id) == expected

    def test_singleton(self, registry):
        instance, mock_data = registry
        assert BlockRegistry("1.21.1") is instance
        mock_data.assert_called_once_with("1.21.1")

    def test_find_blocks(self, registry):
        names = [block["name"] for block in registry[0].find_blocks("stone")]
        assert names == ["stone", "stone_bricks"]

    def test_suggest_similar_blocks(self, registry):
        instance = registry[0]
        assert instance.suggest("minecraft:stone_brick") == ["stone_bricks"]
        assert instance.suggest("granite_stairs[facing=east]") == ["oak_stairs"]
        assert instance.suggest("unobtainium") == []
