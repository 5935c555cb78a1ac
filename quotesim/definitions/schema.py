from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import DefinitionError


def _entry_text(value: Any) -> str:
    # YAML turns `true`, `25` and `-` style entries into scalars; rules need the text
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class NodeSpec(BaseModel):
    id: str
    type: str
    name: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class EdgeSpec(BaseModel):
    id: Optional[str] = None
    src: str = Field(alias="from")
    dest: str = Field(alias="to")
    when: Optional[str] = None
    default: bool = False
    name: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class ProcessSpec(BaseModel):
    name: str
    description: Optional[str] = None
    version: Optional[int] = None
    nodes: List[NodeSpec] = Field(default_factory=list)
    edges: List[EdgeSpec] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class RuleSpec(BaseModel):
    when: List[str]
    then: str
    description: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("when", mode="before")
    @classmethod
    def _coerce_entries(cls, value):
        if isinstance(value, (list, tuple)):
            return [_entry_text(v) for v in value]
        return value

    @field_validator("then", mode="before")
    @classmethod
    def _coerce_output(cls, value):
        return _entry_text(value)


class DecisionTableSpec(BaseModel):
    decision: str
    name: Optional[str] = None
    hit_policy: str = "FIRST"
    inputs: List[str]
    output: str = "quoteValidity"
    rules: List[RuleSpec] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @field_validator("hit_policy", mode="before")
    @classmethod
    def _upper(cls, value):
        return value.upper() if isinstance(value, str) else value


def validate_process(raw: Dict[str, Any]) -> ProcessSpec:
    """ Validate a raw YAML dict against ProcessSpec. """
    return _validate(ProcessSpec, raw, "process")


def validate_decision_table(raw: Dict[str, Any]) -> DecisionTableSpec:
    """ Validate a raw YAML dict against DecisionTableSpec. """
    return _validate(DecisionTableSpec, raw, "decision table")


def _validate(model, raw, what: str):
    if not isinstance(raw, dict):
        raise DefinitionError(f"A {what} definition must be a YAML mapping")
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise DefinitionError(f"Invalid {what} definition: {e}") from e

