"""Claude API extraction gateway."""

from __future__ import annotations

import base64

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


class ClaudeExtractionGateway(ExtractionGateway):
    """Extract food records using Claude's vision and text capability."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def _complete(self, content: list[dict]) -> str:
        if not self._api_key:
            raise ValueError(
                "Chave da API Anthropic não configurada. "
                "Verifique o arquivo de configuração ou a variável ANTHROPIC_API_KEY."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=4096,
                messages=[{"role": "user", "content": content}],
            )
        except Exception as e:
            raise GatewayUnavailable(f"Claude request failed: {e}") from e

        try:
            return response.content[0].text
        except (IndexError, AttributeError) as e:
            raise GatewayMalformedResponse(f"Claude returned no text block: {e}") from e

    async def extract_acquisitions(
        self,
        text: str | None = None,
        image: bytes | None = None,
        mime_type: str = "image/jpeg",
    ) -> list[AcquisitionRecord]:
        content: list[dict] = []
        if image is not None:
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": mime_type,
                        "data": base64.standard_b64encode(image).decode(),
                    },
                }
            )
            prompt = ACQUISITION_PROMPT_IMAGE
        else:
            prompt = ACQUISITION_PROMPT_TEXT.format(text=text)
        content.append({"type": "text", "text": prompt + ACQUISITION_FORMAT})

        return parse_acquisitions(await self._complete(content))

    async def extract_consumption(self, text: str) -> list[ConsumptionRecord]:
        content = [{"type": "text", "text": CONSUMPTION_PROMPT.format(text=text)}]
        return parse_consumption(await self._complete(content))
