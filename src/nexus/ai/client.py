"""Generative-text client used for document extraction."""

import base64
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from nexus.config import get_model
from nexus.domain.errors import GenerativeServiceError
from nexus.logger import get_logger

logger = get_logger(__name__)

THINKING_MAX_OUTPUT_TOKENS = 65536

SYSTEM_INSTRUCTIONS = (
    "You are a meticulous data-entry assistant for a small business. "
    "Follow the requested output format exactly and never add commentary."
)


class AIMode(str, Enum):
    """Speed/quality trade-off of a request."""

    FAST = "fast"
    STANDARD = "standard"
    THINKING = "thinking"


@dataclass(frozen=True)
class GenerationRequest:
    """A prompt, optionally with one attached document."""

    prompt: str
    document: Optional[bytes] = None
    media_type: Optional[str] = None
    filename: Optional[str] = None
    mode: AIMode = AIMode.STANDARD
    force_json: bool = False


class GenerativeClient:
    """Thin wrapper over the OpenAI Responses API.

    Any OpenAI-compatible endpoint works through ``base_url``. The response
    is returned as raw text; callers treat it as untrusted.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        models: Optional[dict[AIMode, str]] = None,
    ):
        self.api_key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        self.base_url = base_url or os.getenv("OPENAI_BASE_URL") or None
        self.models = {mode: get_model(mode.value) for mode in AIMode}
        if models:
            self.models.update(models)
        self._client: Optional[OpenAI] = None

    def _get_client(self) -> OpenAI:
        if not self.api_key:
            raise GenerativeServiceError(
                "No API key configured for the AI service; set OPENAI_API_KEY"
            )
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def generate(self, request: GenerationRequest) -> str:
        """Send a request and return the model's text output.

        Raises:
            GenerativeServiceError: On missing credentials, provider errors or
                an empty response
        """
        client = self._get_client()
        model = self.models[request.mode]
        options: dict[str, Any] = {}
        if request.mode is AIMode.THINKING:
            options["reasoning"] = {"effort": "high"}
            options["max_output_tokens"] = THINKING_MAX_OUTPUT_TOKENS
        else:
            options["temperature"] = 0.2 if request.mode is AIMode.FAST else 0.4
        if request.force_json:
            options["text"] = {"format": {"type": "json_object"}}

        logger.info("Sending %s request to %s", request.mode.value, model)
        try:
            response = client.responses.create(
                model=model,
                instructions=SYSTEM_INSTRUCTIONS,
                input=[{"role": "user", "content": self._build_content(request)}],
                **options,
            )
        except OpenAIError as e:
            logger.error("AI request failed: %s", e)
            raise GenerativeServiceError(f"AI service error ({model}): {e}") from e

        text = self._extract_output_text(response)
        if not text:
            raise GenerativeServiceError(f"AI service returned an empty response ({model})")
        return text

    @staticmethod
    def _build_content(request: GenerationRequest) -> list[dict[str, Any]]:
        content: list[dict[str, Any]] = []
        if request.document is not None:
            media_type = request.media_type or "application/pdf"
            if media_type.startswith("text/"):
                content.append(
                    {
                        "type": "input_text",
                        "text": request.document.decode("utf-8", errors="replace"),
                    }
                )
            else:
                encoded = base64.b64encode(request.document).decode("ascii")
                data_url = f"data:{media_type};base64,{encoded}"
                if media_type.startswith("image/"):
                    content.append({"type": "input_image", "image_url": data_url})
                else:
                    content.append(
                        {
                            "type": "input_file",
                            "filename": request.filename or "document",
                            "file_data": data_url,
                        }
                    )
        if request.prompt:
            content.append({"type": "input_text", "text": request.prompt})
        if not content:
            raise GenerativeServiceError("Provide a prompt or a document")
        return content

    @staticmethod
    def _extract_output_text(response: object) -> str | None:
        output_text = getattr(response, "output_text", None)
        if output_text:
            return output_text

        output = getattr(response, "output", None)
        if not output:
            return None

        parts: list[str] = []
        for item in output:
            content = getattr(item, "content", None)
            if not content:
                continue
            for block in content:
                if getattr(block, "type", None) in {"output_text", "text"}:
                    text = getattr(block, "text", None)
                    if text:
                        parts.append(text)

        if parts:
            return "".join(parts)
        return None
