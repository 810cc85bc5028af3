"""
Tests for the Claude Messages API client
"""

import json

import httpx
import pytest

from mcs_builder.api import BlockPlacementStrategy, ClaudeClient, TextCommandStrategy, get_strategy
from mcs_builder.api.prompt import MCS_STYLE_GUIDE
from mcs_builder.errors import AuthError, TransportError


def make_client(config, handler, strategy=None):
    return ClaudeClient(config, strategy=strategy, transport=httpx.MockTransport(handler))


class TestRequestBody:
    """Test request assembly for both strategies"""

    def test_text_strategy_body(self):
        body = TextCommandStrategy().build_request_body("build a hut", "claude-x", 8192)

        assert body["model"] == "claude-x"
        assert body["max_tokens"] == 8192
        assert body["messages"] == [{"role": "user", "content": MCS_STYLE_GUIDE + "build a hut"}]
        tool = body["tools"][0]
        assert tool["name"] == "generate_mcs"
        assert tool["input_schema"]["required"] == ["commands"]
        assert tool["input_schema"]["properties"]["commands"]["type"] == "string"

    def test_block_strategy_body(self):
        tool = BlockPlacementStrategy().tool_schema()
        items = tool["input_schema"]["properties"]["blocks"]["items"]
        assert tool["name"] == "place_blocks"
        assert items["required"] == ["block", "x", "y", "z"]

    def test_continuation_omits_guide(self):
        body = TextCommandStrategy().build_request_body("keep going", "claude-x", 100, include_guide=False)
        assert body["messages"][0]["content"] == "keep going"

    def test_get_strategy(self):
        assert isinstance(get_strategy("text"), TextCommandStrategy)
        assert isinstance(get_strategy("blocks"), BlockPlacementStrategy)
        with pytest.raises(ValueError, match="Unknown build mode"):
            get_strategy("voxels")


class TestClaudeClient:
    """Test the HTTP exchange"""

    async def test_send_success(self, config):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["headers"] = request.headers
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"content": [{"type": "text", "text": "hi"}]})

        reply = await make_client(config, handler).send("build a hut")

        assert reply == {"content": [{"type": "text", "text": "hi"}]}
        assert captured["headers"]["x-api-key"] == "sk-ant-test-key"
        assert captured["headers"]["anthropic-version"] == "2023-06-01"
        assert captured["headers"]["content-type"] == "application/json"
        assert captured["body"]["model"] == config.get_model()
        assert captured["body"]["tools"][0]["name"] == "generate_mcs"

    async def test_missing_key_sends_nothing(self, config):
        config.api_key = None
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        with pytest.raises(AuthError, match="API key not set"):
            await make_client(config, handler).send("build a hut")
        assert calls == []

    async def test_explicit_key_and_model(self, config):
        captured = {}

        def handler(request):
            captured["key"] = request.headers["x-api-key"]
            captured["model"] = json.loads(request.content)["model"]
            return httpx.Response(200, json={"content": []})

        await make_client(config, handler).send("x", model="claude-other", api_key="sk-ant-other")
        assert captured == {"key": "sk-ant-other", "model": "claude-other"}

    async def test_non_2xx_status(self, config):
        def handler(request):
            return httpx.Response(401, text='{"error": {"message": "invalid x-api-key"}}')

        with pytest.raises(TransportError) as exc_info:
            await make_client(config, handler).send("build a hut")

        assert exc_info.value.status_code == 401
        assert "invalid x-api-key" in exc_info.value.body
        assert "Unexpected response code" in str(exc_info.value)

    async def test_error_body_truncated(self, config):
        def handler(request):
            return httpx.Response(500, text="x" * 2000)

        with pytest.raises(TransportError) as exc_info:
            await make_client(config, handler).send("build a hut")
        assert len(exc_info.value.body) == 500

    async def test_empty_body(self, config):
        def handler(request):
            return httpx.Response(200, text="   ")

        with pytest.raises(TransportError, match="empty response"):
            await make_client(config, handler).send("build a hut")

    async def test_invalid_json(self, config):
        def handler(request):
            return httpx.Response(200, text="not json")

        with pytest.raises(TransportError, match="invalid JSON"):
            await make_client(config, handler).send("build a hut")

    async def test_timeout(self, config):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError, match="timed out after 60s"):
            await make_client(config, handler).send("build a hut")

    async def test_connection_error(self, config):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError, match="ConnectError"):
            await make_client(config, handler).send("build a hut")
