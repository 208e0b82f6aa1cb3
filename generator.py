"""Turn a prompt and/or an uploaded image or PDF into a self-contained HTML app."""

import logging
import re

from google import genai
from google.genai import types

from system_prompt import (
    DEFAULT_PROMPT,
    FAILED_GENERATION_PLACEHOLDER,
    IMAGE_ANALYSIS_PROMPT,
    SYSTEM_INSTRUCTION,
    USER_INSTRUCTION_LABEL,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-pro-preview"
TEMPERATURE = 0.5

_LEADING_FENCE = re.compile(r"^```[\w+-]*\s*")
_TRAILING_FENCE = re.compile(r"```\Z")


class GenerationBlockedError(Exception):
    """The model refused the prompt and said so instead of raising."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Generation blocked: {reason}")


def build_prompt(prompt=None, has_file=False):
    user_text = prompt if prompt and prompt.strip() else None

    if has_file:
        if user_text:
            return IMAGE_ANALYSIS_PROMPT + USER_INSTRUCTION_LABEL + user_text
        return IMAGE_ANALYSIS_PROMPT

    return user_text or DEFAULT_PROMPT


def build_parts(prompt=None, file_bytes=None, mime_type=None):
    """Text part first, then the inline file part when both bytes and type are known."""
    parts = [types.Part.from_text(text=build_prompt(prompt, has_file=bool(file_bytes)))]
    if file_bytes and mime_type:
        parts.append(types.Part.from_bytes(data=file_bytes, mime_type=mime_type))
    return parts


def build_config():
    return types.GenerateContentConfig(
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=TEMPERATURE,
    )


def strip_code_fences(text):
    """Drop a markdown fence wrapped around the document, keeping everything inside it."""
    text = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", text, count=1)


def _block_reason(response):
    feedback = getattr(response, "prompt_feedback", None)
    return getattr(feedback, "block_reason", None) if feedback else None


class ArtifactGenerator:
    """
    Single-call Gemini pipeline.

    The API key is handed in by the caller; the client is only built on the
    first request, so a missing key shows up as a failed generation rather
    than at startup. Pass ``client`` to substitute a fake in tests.
    """

    def __init__(self, api_key=None, model=DEFAULT_MODEL, client=None):
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, prompt=None, file_bytes=None, mime_type=None):
        contents = build_parts(prompt, file_bytes, mime_type)

        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=contents,
                config=build_config(),
            )
        except Exception:
            logger.exception("Gemini generation failed (model=%s)", self.model)
            raise

        reason = _block_reason(response)
        if reason:
            logger.warning("Gemini blocked the prompt: %s", reason)
            raise GenerationBlockedError(reason)

        text = response.text or FAILED_GENERATION_PLACEHOLDER
        return strip_code_fences(text)
