"""Gemini API extraction gateway."""

from __future__ import annotations

import logging

from ..errors import GatewayMalformedResponse, GatewayUnavailable
from . import AcquisitionRecord, ConsumptionRecord, ExtractionGateway
from .parsing import (
    ACQUISITION_FORMAT,
    ACQUISITION_PROMPT_IMAGE,
    ACQUISITION_PROMPT_TEXT,
    CONSUMPTION_PROMPT,
    parse_acquisitions,
    parse_consumption,
)

logger = logging.getLogger(__name__)


class GeminiExtractionGateway(ExtractionGateway):
    """Extract food records using Google Gemini's multimodal JSON output."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    def _get_model(self):
        if not self._api_key:
            raise ValueError(
                "Chave da API Gemini não configurada. "
                "Verifique o arquivo de configuração ou a variável GEMINI_API_KEY."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        return genai.GenerativeModel(
            self._model,
            generation_config={"response_mime_type": "application/json"},
        )

    async def _generate(self, parts: list) -> str | None:
        model = self._get_model()
        try:
            response = await model.generate_content_async(parts)
        except Exception as e:
            raise GatewayUnavailable(f"Gemini request failed: {e}") from e
        try:
            text = response.text
        except (ValueError, AttributeError) as e:
            # Raised when the candidate was blocked or carries no text part.
            raise GatewayMalformedResponse(f"Gemini returned no text: {e}") from e
        logger.debug("Gemini response: %s", text)
        return text

    async def extract_acquisitions(
        self,
        text: str | None = None,
        image: bytes | None = None,
        mime_type: str = "image/jpeg",
    ) -> list[AcquisitionRecord]:
        if image is not None:
            parts: list = [
                {"mime_type": mime_type, "data": image},
                ACQUISITION_PROMPT_IMAGE + ACQUISITION_FORMAT,
            ]
        else:
            parts = [ACQUISITION_PROMPT_TEXT.format(text=text) + ACQUISITION_FORMAT]

        return parse_acquisitions(await self._generate(parts))

    async def extract_consumption(self, text: str) -> list[ConsumptionRecord]:
        parts = [CONSUMPTION_PROMPT.format(text=text)]
        return parse_consumption(await self._generate(parts))
