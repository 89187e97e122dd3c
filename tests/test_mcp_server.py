"""Tests for emospine MCP server tool registration and basic returns."""

import json

import pytest

from emospine.config import Config
from emospine.mcp_server import mcp
import emospine.mcp_server as mcp_mod


EXPECTED_TOOLS = {
    "list_scenes",
    "get_scene",
    "get_layout",
    "get_edges",
    "hover",
}


@pytest.fixture(autouse=True)
def fresh_server(monkeypatch, config):
    """Each test gets its own session built from the test config."""
    monkeypatch.setattr(mcp_mod, "_config", config)
    monkeypatch.setattr(mcp_mod, "_session", None)


class TestMCPToolRegistration:
    def test_all_tools_registered(self):
        """All 5 expected tools are registered on the mcp object."""
        # FastMCP stores tools in _tool_manager._tools dict
        registered = set(mcp._tool_manager._tools.keys())
        assert EXPECTED_TOOLS.issubset(registered), (
            f"Missing tools: {EXPECTED_TOOLS - registered}"
        )

    def test_tool_count(self):
        registered = set(mcp._tool_manager._tools.keys())
        assert len(registered & EXPECTED_TOOLS) == 5


class TestMCPToolReturns:
    @pytest.mark.asyncio
    async def test_list_scenes(self):
        data = json.loads(await mcp_mod.list_scenes())
        assert len(data) == 33
        assert data[0]["scene"] == 1
        assert data[0]["section"] == "A"

    @pytest.mark.asyncio
    async def test_get_scene(self):
        data = json.loads(await mcp_mod.get_scene(scene=3))
        assert data["category"] == "grief"
        assert data["tooltip"].startswith("Scene 3")
        assert data["color"] == "#7b1fa2"

    @pytest.mark.asyncio
    async def test_error_returns_json_error(self):
        """Tools return {"error": ...} on ValueError."""
        data = json.loads(await mcp_mod.get_scene(scene=99))
        assert data == {"error": "Scene 99 not found"}

    @pytest.mark.asyncio
    async def test_get_layout(self):
        data = json.loads(await mcp_mod.get_layout())
        assert data["strategy"] == "helix"
        assert len(data["entities"]) == 33

    @pytest.mark.asyncio
    async def test_get_layout_other_strategy(self):
        data = json.loads(await mcp_mod.get_layout(strategy="golden_angle"))
        assert data["strategy"] == "golden_angle"
        assert all(e["position"][2] == 0.0 for e in data["entities"])

    @pytest.mark.asyncio
    async def test_get_layout_unknown_strategy(self):
        data = json.loads(await mcp_mod.get_layout(strategy="spiral"))
        assert "error" in data

    @pytest.mark.asyncio
    async def test_get_edges(self):
        data = json.loads(await mcp_mod.get_edges())
        assert set(data) == {"chronological", "by-speaker", "by-category"}
        assert len(data["chronological"]) == 32

    @pytest.mark.asyncio
    async def test_get_edges_bad_kind(self):
        data = json.loads(await mcp_mod.get_edges(kind="sideways"))
        assert "error" in data

    @pytest.mark.asyncio
    async def test_hover(self):
        data = json.loads(await mcp_mod.hover(scene=29))
        assert data["active"] == 29
        assert {3, 28, 30, 31}.issubset(data["related"])
        cleared = json.loads(await mcp_mod.hover())
        assert cleared["active"] is None
        assert cleared["related"] == []

    @pytest.mark.asyncio
    async def test_session_reused(self):
        await mcp_mod.list_scenes()
        first = mcp_mod._session
        await mcp_mod.get_edges()
        assert mcp_mod._session is first


class TestConfigOverride:
    def test_fixture_config_used(self, config):
        assert mcp_mod._get_config() is config
        assert isinstance(config, Config)
