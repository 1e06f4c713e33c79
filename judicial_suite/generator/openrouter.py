"""
OpenRouter Generator
====================

Networked generator over the OpenRouter chat completions API.
Drop-in replacement for the scripted stub; stores and adjudication do not
change when it is selected.
"""

import logging
from typing import Dict, List, Mapping, Optional

import httpx

from ..errors import GenerationUnavailable
from .base import ResponseGenerator

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are the assistant of a court case management tool.

Rules:
1. Answer only from the instruction and the case context given
2. Never invent exhibits, witnesses or facts
3. When asked to evaluate and decide, start with "Ruling: In favor of <party>"
   followed by a line starting with "Reasoning:"

Keep answers short and plain."""


def build_messages(instruction: str, context: Mapping[str, str]) -> List[Dict[str, str]]:
    """Chat messages for an instruction plus its named context fields"""
    lines = [f"{key}: {value}" for key, value in context.items() if value]
    user_content = instruction
    if lines:
        user_content = "Context:\n" + "\n".join(lines) + "\n\nInstruction: " + instruction
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


class OpenRouterGenerator(ResponseGenerator):
    """
    Async client for OpenRouter.

    Usage:
        generator = OpenRouterGenerator(api_key, "anthropic/claude-3-haiku")
        text = await generator.generate("Summarize", {"caseTitle": "..."})
    """

    name = "openrouter"

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 30,
        app_name: str = "AI Judicial Suite",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.url = base_url.rstrip("/") + "/chat/completions"
        self.timeout = timeout
        self.app_name = app_name
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def generate(
        self,
        instruction: str,
        context: Mapping[str, str],
        temperature: float = 0,
        max_tokens: int = 512,
    ) -> str:
        if not self.api_key:
            raise GenerationUnavailable("OpenRouter API key not configured")

        payload = {
            "model": self.model,
            "messages": build_messages(instruction, context),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": self.app_name,
        }

        try:
            client = await self._get_client()
            response = await client.post(self.url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"OpenRouter API error: {e.response.status_code}")
            raise GenerationUnavailable(f"HTTP {e.response.status_code} from response generator") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"OpenRouter request failed: {e}")
            raise GenerationUnavailable(f"Response generator unreachable: {e.__class__.__name__}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"OpenRouter response missing content: {e}")
            raise GenerationUnavailable("Response generator returned no content") from e

        if not content:
            raise GenerationUnavailable("Response generator returned empty content")
        return content
