"""Assistant provider client for Anthropic and OpenAI models."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import anthropic
import openai

from baseforge.config import DEFAULT_MODELS, settings
from baseforge.kernel.errors import ExternalServiceError
from baseforge.kernel.types import AiConfig

logger = logging.getLogger(__name__)

# Transient error types that warrant a retry
_RETRYABLE_ANTHROPIC = (
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.InternalServerError,
)
_RETRYABLE_OPENAI = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.InternalServerError,
)

SYSTEM_PROMPT = """
You are the AI Manager of BaseForge, a no-code database platform.
Your role is to assist users with data management and platform configuration.

You can execute one command per reply by ending your response with a JSON block.

AVAILABLE ACTIONS:
1. Create Table:
```json
{ "action": "CREATE_TABLE", "name": "Table Name", "fields": [{"name": "Col1", "type": "TEXT"}] }
```

2. Add Field (to the active table):
```json
{ "action": "ADD_FIELD", "name": "Field Name", "type": "TEXT" }
```

3. Switch View:
```json
{ "action": "SWITCH_VIEW", "viewId": "kanban" }
```

Field types: TEXT, NUMBER, DATE, STATUS, USER. STATUS fields may carry "options": ["A", "B"].
View ids: table, kanban, gantt, dashboard, data_sources, ai_manager.

When asked to "create a database for X" or "add a column for Y", give a short text answer AND the JSON action block.
Style: professional, concise.
""".strip()


class AssistantClient:
    """Sends one prompt to the configured provider and returns the reply text."""

    def __init__(
        self,
        config: AiConfig,
        anthropic_client: Any = None,
        openai_client: Any = None,
        max_tokens: int | None = None,
        max_retries: int | None = None,
    ) -> None:
        self.config = config
        self.max_tokens = max_tokens or settings.AI_MAX_TOKENS
        self.max_retries = settings.AI_MAX_RETRIES if max_retries is None else max_retries
        self._anthropic_client = anthropic_client
        self._openai_client = openai_client

    @property
    def model(self) -> str:
        return self.config.model or DEFAULT_MODELS.get(self.config.provider, "")

    async def ask(self, prompt: str, context: str) -> str:
        """
        Ask the assistant.

        Args:
            prompt: The user's message
            context: One-line summary of the active table and views

        Returns:
            The assistant's reply text (may embed a JSON command block)

        Raises:
            ExternalServiceError: missing key, unknown provider, or API failure
        """
        if not self.config.api_key:
            raise ExternalServiceError(f"{self.config.provider} API key is missing.")

        system = f"{SYSTEM_PROMPT}\n\nCurrent System Context:\n{context}"

        try:
            if self.config.provider == "ANTHROPIC":
                return await self._call_anthropic(system, prompt)
            if self.config.provider == "OPENAI":
                return await self._call_openai(system, prompt)
        except (anthropic.APIError, openai.APIError) as e:
            raise ExternalServiceError(f"{self.config.provider} request failed: {e}") from e

        raise ExternalServiceError(f"Unknown AI provider: {self.config.provider}")

    async def _call_anthropic(self, system: str, prompt: str) -> str:
        client = self._anthropic_client or anthropic.AsyncAnthropic(api_key=self.config.api_key)
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await client.messages.create(
                    model=self.model,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                    max_tokens=self.max_tokens,
                )
                return "".join(block.text for block in response.content if block.type == "text")
            except _RETRYABLE_ANTHROPIC as e:
                last_error = e
                if attempt < self.max_retries:
                    wait_time = 2**attempt
                    logger.warning(
                        "assistant: Claude API error (attempt %d), retrying in %ds: %s", attempt + 1, wait_time, e
                    )
                    await asyncio.sleep(wait_time)

        raise last_error  # type: ignore[misc]

    async def _call_openai(self, system: str, prompt: str) -> str:
        client = self._openai_client or openai.AsyncOpenAI(api_key=self.config.api_key)
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                response = await client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": prompt},
                    ],
                    max_tokens=self.max_tokens,
                )
                return response.choices[0].message.content or ""
            except _RETRYABLE_OPENAI as e:
                last_error = e
                if attempt < self.max_retries:
                    wait_time = 2**attempt
                    logger.warning(
                        "assistant: OpenAI API error (attempt %d), retrying in %ds: %s", attempt + 1, wait_time, e
                    )
                    await asyncio.sleep(wait_time)

        raise last_error  # type: ignore[misc]
