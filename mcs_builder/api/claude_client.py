"""
Claude Messages API client - sends one building request and returns the raw reply
"""

import asyncio
import json
from typing import Any, Dict, Optional

import httpx

from ..config import BuilderConfig
from ..errors import AuthError, TransportError
from ..logging_config import get_logger, mask_secret
from .strategies import BuildStrategy, get_strategy

logger = get_logger(__name__)

PREVIEW_CHARS = 100


class ClaudeClient:
    """Sends building prompts to the Claude Messages API"""

    def __init__(
        self,
        config: BuilderConfig,
        strategy: Optional[BuildStrategy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.strategy = strategy or get_strategy(config.build_mode)
        self._transport = transport

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "x-api-key": api_key,
            "anthropic-version": self.config.anthropic_version,
            "content-type": "application/json",
        }

    async def send(
        self,
        prompt: str,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        include_guide: bool = True,
    ) -> Dict[str, Any]:
        """Send a prompt to Claude

        Args:
            prompt: Prompt text
            model: Model identifier (defaults to the configured model)
            api_key: API key (defaults to the configured key)
            include_guide: Whether to embed the strategy's style guide

        Returns:
            Decoded JSON reply

        Raises:
            AuthError: No API key is configured
            TransportError: The request failed, timed out or returned a non-2xx status or empty body
        """
        api_key = api_key or self.config.get_api_key()
        if not api_key:
            raise AuthError("Claude API key not set. Please use the key command to set your API key.")

        model = model or self.config.get_model()
        body = self.strategy.build_request_body(prompt, model, self.config.max_tokens, include_guide)

        logger.info("Making Claude API request", url=self.config.api_url, model=model, mode=self.strategy.mode)
        logger.debug("Request body", body=body)
        logger.debug("Sending API request", api_key=mask_secret(api_key), anthropic_version=self.config.anthropic_version)

        timeout = httpx.Timeout(self.config.request_timeout_s, connect=self.config.connect_timeout_s)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await asyncio.wait_for(
                    client.post(self.config.api_url, headers=self._headers(api_key), json=body),
                    timeout=self.config.request_timeout_s,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error("Claude API request timed out", timeout_s=self.config.request_timeout_s)
            raise TransportError(f"Request timed out after {self.config.request_timeout_s:g}s") from e
        except httpx.HTTPError as e:
            logger.error("Error calling Claude API", error_type=type(e).__name__, error=str(e))
            raise TransportError(f"Error calling Claude API: {type(e).__name__}: {e}") from e

        status_code = response.status_code
        logger.info("Received response", status_code=status_code)

        if not 200 <= status_code < 300:
            logger.error("API error response", status_code=status_code, body=response.text)
            raise TransportError("Unexpected response code", status_code=status_code, body=response.text)

        text = response.text
        if not text or not text.strip():
            logger.error("API returned empty response", status_code=status_code)
            raise TransportError("API returned empty response", status_code=status_code)

        logger.info("Claude API response received", length=len(text), preview=text[:PREVIEW_CHARS])

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise TransportError("API returned invalid JSON", status_code=status_code, body=text) from e
