from __future__ import annotations

import logging

from openai import OpenAI
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from kb_assistant.embeddings_client import TRANSIENT_OPENAI_ERRORS
from kb_assistant.prompts import SYSTEM_PROMPT

log = logging.getLogger("kb_assistant.llm")


class LLMClient:
    """
    Thin, safe wrapper around OpenAI for answering questions.
    """

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", temperature: float = 0.2) -> None:
        self._client = OpenAI(api_key=api_key)
        self._model = model
        self._temperature = temperature

    @retry(
        retry=retry_if_exception_type(TRANSIENT_OPENAI_ERRORS),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    def complete(self, prompt: str) -> str:
        """
        Send prompt to LLM and return its text output.
        Retries on transient failures.
        """
        log.debug("Sending prompt to LLM (%s chars)", len(prompt))

        response = self._client.responses.create(
            model=self._model,
            input=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self._temperature,
        )

        # Extract text output safely
        try:
            raw_text = response.output_text
        except Exception as e:
            raise RuntimeError("LLM response did not contain text output") from e

        log.debug("Raw LLM output: %s", raw_text)
        return raw_text.strip()
