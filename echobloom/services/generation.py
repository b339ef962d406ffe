"""
Text generation client — one blocking call to a hosted chat model.

Every failure mode (missing key, network, API error, empty reply) surfaces as
GenerationFailure so each call site can swap in its own fallback text.
"""

from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)

# Pick up OPENAI_API_KEY from a local .env file if present.
load_dotenv()


class GenerationFailure(Exception):
    """The text-generation service could not produce a reply."""


class TextGenerator:
    def __init__(self, api_key: Optional[str] = None, client: Optional[OpenAI] = None) -> None:
        self.api_key = api_key
        self._client = client

    @property
    def client(self) -> OpenAI:
        # Created lazily: OpenAI() raises when no key is configured.
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key) if self.api_key else OpenAI()
        return self._client

    def generate_text(self, prompt: str, model: str, max_tokens: int) -> str:
        logger.info(
            "Generating text (model=%s, max_tokens=%d, prompt_chars=%d)",
            model, max_tokens, len(prompt),
        )
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
            )
            text = response.choices[0].message.content
        except OpenAIError as exc:
            raise GenerationFailure(f"Generation request failed: {exc}") from exc
        except (IndexError, AttributeError) as exc:
            raise GenerationFailure("Generation response had no choices") from exc

        if not text or not text.strip():
            raise GenerationFailure("Generation returned an empty reply")
        return text.strip()
