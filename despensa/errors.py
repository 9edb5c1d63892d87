"""Error kinds raised by the gateway and the tracker boundary."""

from __future__ import annotations


class DespensaError(Exception):
    """Base class for all despensa errors."""


class GatewayError(DespensaError):
    """The extraction gateway call did not produce a usable result."""

    notice = "Não foi possível interpretar a entrada. Tente novamente."


class GatewayUnavailable(GatewayError):
    notice = "Serviço de IA indisponível no momento. Tente novamente mais tarde."


class GatewayMalformedResponse(GatewayError):
    notice = "A resposta do serviço de IA não pôde ser interpretada."


class GatewayTimeout(GatewayError):
    notice = "O serviço de IA demorou demais para responder."


class TrackerBusyError(DespensaError):
    """Another registration or consumption is already being processed."""
