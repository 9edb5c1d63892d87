"""Validation of the JSON arrays returned by the language-model backends."""

from __future__ import annotations

import json
import math
import numbers

from ..errors import GatewayMalformedResponse
from ..models import StorageType
from . import AcquisitionRecord, ConsumptionRecord

ACQUISITION_PROMPT_IMAGE = """\
Analise esta imagem e identifique os alimentos presentes, suas quantidades
aproximadas e unidades de medida. Sugira o melhor armazenamento e a validade
média para cada item.
"""

ACQUISITION_PROMPT_TEXT = """\
Identifique os alimentos descritos neste texto: "{text}".
Extraia quantidades e unidades de medida, sugerindo armazenamento e validade.
"""

ACQUISITION_FORMAT = """\
Responda somente com um array JSON no formato abaixo (nenhum outro texto):
[
  {"name": "nome comum do alimento em português",
   "quantity": 1,
   "unit": "kg, g, unidade, litros...",
   "storageType": "fora da geladeira | geladeira | freezer | despensa",
   "expiryDays": 7,
   "estimatedPrice": 0.0}
]
expiryDays é a estimativa de dias até o vencimento se armazenado corretamente;
estimatedPrice é o preço médio nacional estimado para esta quantidade.
"""

CONSUMPTION_PROMPT = """\
Interprete o seguinte comando de consumo de alimento: "{text}".
Retorne o nome do alimento e a quantidade que o usuário quer consumir.
Responda somente com um array JSON: [{{"name": "alimento", "quantity": 1}}]
"""

_ACQUISITION_FIELDS = (
    "name", "quantity", "unit", "storageType", "expiryDays", "estimatedPrice",
)

# Far beyond any shelf life, and well inside the datetime range.
_MAX_EXPIRY_DAYS = 36500


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def _load_array(text: str | None) -> list:
    if text is None:
        raise GatewayMalformedResponse("empty response body")
    try:
        data = json.loads(_strip_fences(text))
    except json.JSONDecodeError as e:
        raise GatewayMalformedResponse(f"response is not JSON: {e}") from e
    if not isinstance(data, list):
        raise GatewayMalformedResponse("response is not a JSON array")
    return data


def _number(entry: dict, key: str) -> float:
    value = entry[key]
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise GatewayMalformedResponse(f"{key!r} is not a number: {value!r}")
    if not math.isfinite(value):
        raise GatewayMalformedResponse(f"{key!r} is not finite: {value!r}")
    return float(value)


def _positive(entry: dict, key: str) -> float:
    value = _number(entry, key)
    if value <= 0:
        raise GatewayMalformedResponse(f"non-positive {key}: {value}")
    return value


def _text(entry: dict, key: str) -> str:
    value = entry[key]
    if not isinstance(value, str) or not value.strip():
        raise GatewayMalformedResponse(f"{key!r} is not a non-empty string")
    return value.strip()


def parse_acquisitions(text: str | None) -> list[AcquisitionRecord]:
    """Parse and validate an acquisition array.

    An empty array is a valid "no items" answer; anything that does not match
    the record schema raises GatewayMalformedResponse.
    """
    records: list[AcquisitionRecord] = []
    for entry in _load_array(text):
        if not isinstance(entry, dict):
            raise GatewayMalformedResponse("record is not an object")
        missing = [k for k in _ACQUISITION_FIELDS if k not in entry]
        if missing:
            raise GatewayMalformedResponse(f"record missing fields: {missing}")

        quantity = _positive(entry, "quantity")
        expiry_days = _number(entry, "expiryDays")
        if abs(expiry_days) > _MAX_EXPIRY_DAYS:
            raise GatewayMalformedResponse(f"expiryDays out of range: {expiry_days}")
        price = _number(entry, "estimatedPrice")
        if price < 0:
            raise GatewayMalformedResponse(f"negative estimatedPrice: {price}")
        try:
            storage = StorageType.parse(_text(entry, "storageType"))
        except ValueError as e:
            raise GatewayMalformedResponse(str(e)) from e

        records.append(
            AcquisitionRecord(
                name=_text(entry, "name"),
                quantity=quantity,
                unit=_text(entry, "unit"),
                storage_type=storage,
                expiry_days=expiry_days,
                estimated_price=price,
            )
        )
    return records


def parse_consumption(text: str | None) -> list[ConsumptionRecord]:
    """Parse and validate a consumption array of {name, quantity} objects."""
    records: list[ConsumptionRecord] = []
    for entry in _load_array(text):
        if not isinstance(entry, dict):
            raise GatewayMalformedResponse("record is not an object")
        if "name" not in entry or "quantity" not in entry:
            raise GatewayMalformedResponse("record missing name/quantity")
        records.append(
            ConsumptionRecord(
                name=_text(entry, "name"),
                quantity=_positive(entry, "quantity"),
            )
        )
    return records
