"""Extraction gateway base class, record types, and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..models import StorageType

if TYPE_CHECKING:
    from ..config import TrackerConfig


@dataclass
class AcquisitionRecord:
    name: str
    quantity: float
    unit: str
    storage_type: StorageType
    expiry_days: float  # estimated days until expiry
    estimated_price: float


@dataclass
class ConsumptionRecord:
    name: str
    quantity: float


class ExtractionGateway(ABC):
    """Abstract base for turning free text or photos into food records."""

    @abstractmethod
    async def extract_acquisitions(
        self,
        text: str | None = None,
        image: bytes | None = None,
        mime_type: str = "image/jpeg",
    ) -> list[AcquisitionRecord]:
        """Identify purchased foods in a text description or a photo.

        Exactly one of ``text`` or ``image`` is given.
        """
        ...

    @abstractmethod
    async def extract_consumption(self, text: str) -> list[ConsumptionRecord]:
        """Interpret a consumption statement into (name, quantity) pairs."""
        ...


def create_gateway(config: TrackerConfig) -> ExtractionGateway:
    """Create an extraction gateway based on configuration."""
    backend_name = config.gateway.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiExtractionGateway

            return GeminiExtractionGateway(
                api_key=config.gateway.gemini.api_key,
                model=config.gateway.gemini.model,
            )
        case "claude":
            from .claude import ClaudeExtractionGateway

            return ClaudeExtractionGateway(
                api_key=config.gateway.claude.api_key,
                model=config.gateway.claude.model,
            )
        case _:
            raise ValueError(
                f"Gateway de IA desconhecido: {backend_name!r}  "
                f"(escolha entre gemini / claude)"
            )
