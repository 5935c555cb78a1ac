"""
Validates simulation payloads before they reach the interpreter.

manualPriceCost must be a JSON boolean and dealMarginPercent a finite JSON
number. Every field is checked and every problem reported, boolean field
first; callers that surface one message take the first.
"""

import json
import math
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError as PydanticValidationError

from ..errors import ValidationError
from ..workflow.models import SimulationInput

Payload = Union[str, bytes, bytearray, Mapping[str, Any], None]


class SimulationPayload(BaseModel):
    manualPriceCost: StrictBool
    dealMarginPercent: float = Field(strict=True, allow_inf_nan=False)

    model_config = ConfigDict(extra="ignore")


_FIELDS = list(SimulationPayload.model_fields)

_MESSAGES = {
    "missing": "{field} is required",
    "bool_type": "{field} must be a boolean (true or false)",
    "float_type": "{field} must be a number",
    "finite_number": "{field} must be a finite number",
}


def validate(raw: Payload) -> List[str]:
    """
    Validate the body of a simulation request.

    Returns a list of error messages; an empty list means the payload is valid.
    """
    body, errors = _load(raw)
    if errors:
        return errors

    # JSON null counts as missing
    present = {k: _as_double(v) for k, v in body.items() if v is not None}
    try:
        SimulationPayload.model_validate(present)
    except PydanticValidationError as e:
        return _messages(e)
    return []


def first_error(raw: Payload) -> Optional[str]:
    """ Returns the first validation error message, or None if valid. """
    errors = validate(raw)
    return errors[0] if errors else None


def parse_simulation_input(raw: Payload) -> SimulationInput:
    """ Validate ``raw`` and convert it, raising ValidationError on any problem. """
    errors = validate(raw)
    if errors:
        raise ValidationError(errors)
    body, _ = _load(raw)
    return SimulationInput(
        manual_price_cost=body["manualPriceCost"],
        deal_margin_percent=float(body["dealMarginPercent"]),
    )


def _load(raw: Payload):
    if raw is None:
        return None, ["Request body is required"]

    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            return None, [f"Invalid JSON: {e}"]

    if isinstance(raw, str):
        if not raw.strip():
            return None, ["Request body is required"]
        try:
            raw = json.loads(raw)
        except ValueError as e:
            return None, [f"Invalid JSON: {e}"]

    if not isinstance(raw, Mapping):
        return None, ["Request body must be a JSON object"]
    return raw, []


def _as_double(value: Any) -> Any:
    # integers beyond float range read as infinity, as a JSON double would
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            float(value)
        except OverflowError:
            return math.inf
    return value


def _messages(error: PydanticValidationError) -> List[str]:
    by_field = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else ""
        template = _MESSAGES.get(item["type"], "{field} is invalid: " + item["msg"])
        by_field.setdefault(field, template.format(field=field))
    return [by_field[f] for f in _FIELDS if f in by_field]
