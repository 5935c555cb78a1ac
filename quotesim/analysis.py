""" Infer the input form a process and decision table expect. """

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .decision.models import DecisionTable
from .workflow.mapping import INPUT_PREFIX
from .workflow.models import ProcessModel


@dataclass(frozen=True)
class InputField:
    name: str
    type: str  # "boolean", "number" or "string"
    label: str
    default: Any
    required: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "label": self.label,
            "defaultValue": self.default,
            "required": self.required,
        }


DEFAULT_INPUT_FIELDS = (
    InputField("manualPriceCost", "boolean", "Manual Price Cost", False),
    InputField("dealMarginPercent", "number", "Deal Margin Percent", 25.0),
)

_VARIABLE = re.compile(r"\$\{([^}]+)\}|\b(bi_\w+)\b|\b([A-Za-z_][A-Za-z0-9_]*)\b")
_INPUT_HINTS = ("input", "cost", "margin", "price", "manual", "deal")
_INTERNAL_HINTS = ("status", "result", "validity")


def infer_input_fields(process: Optional[ProcessModel], table: Optional[DecisionTable] = None) -> List[InputField]:
    """
    The decision table's input columns are authoritative. Without a table,
    variable names are scraped from node names and gateway guards. Falls back
    to the two documented inputs when nothing looks like an input.
    """
    if table is not None and table.inputs:
        names = list(table.inputs)
    elif process is not None:
        names = _scrape_names(process)
    else:
        names = []

    fields: List[InputField] = []
    seen = set()
    for name in names:
        name = name[len(INPUT_PREFIX):] if name.startswith(INPUT_PREFIX) else name
        if name in seen or not name:
            continue
        seen.add(name)
        fields.append(_field_for(name))
    return fields or list(DEFAULT_INPUT_FIELDS)


def _scrape_names(process: ProcessModel) -> List[str]:
    texts = [process.name] + [n.name for n in process.nodes] + [e.condition for e in process.edges]
    names = []
    for text in texts:
        for match in _VARIABLE.finditer(text or ""):
            name = next(group for group in match.groups() if group)
            if _looks_like_input(name):
                names.append(name)
    return names


def _looks_like_input(name: str) -> bool:
    lowered = name.lower()
    if any(hint in lowered for hint in _INTERNAL_HINTS) or lowered.startswith("cim_"):
        return False
    return lowered.startswith(INPUT_PREFIX) or any(hint in lowered for hint in _INPUT_HINTS)


def _field_for(name: str) -> InputField:
    field_type = infer_type(name)
    default = {"number": 0.0, "boolean": False}.get(field_type, "")
    return InputField(name, field_type, format_label(name), default)


def infer_type(name: str) -> str:
    lowered = name.lower()
    if any(hint in lowered for hint in ("cost", "price", "margin", "percent")):
        # manualPriceCost is a flag despite the "cost"
        if lowered.startswith("manual"):
            return "boolean"
        return "number"
    if lowered.startswith(("is", "has")) or any(hint in lowered for hint in ("flag", "manual")):
        return "boolean"
    return "string"


def format_label(name: str) -> str:
    """ bi_manualPriceCost -> "Manual Price Cost" """
    if name.startswith(INPUT_PREFIX):
        name = name[len(INPUT_PREFIX):]
    words = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", name).replace("_", " ").split()
    return " ".join(w[0].upper() + w[1:] for w in words)
