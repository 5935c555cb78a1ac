"""
Task semantics resolved from task names.

Tasks carry no explicit input/output mappings, so what a task does is
derived from its display name:
  - "Prepare Values for DMN"   mirrors every bi_<name> variable to <name>
  - "Set Status Invalid"/4000  writes cim_Status = "Invalid"
  - "Set Status Valid"/3000    writes cim_Status = "Valid"
Any other task passes through unchanged. The interpreter only ever calls
resolve_task_mapping(), so a richer mapping model can replace this module.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .models import FlowNode

logger = logging.getLogger(__name__)

INPUT_PREFIX = "bi_"
STATUS_VARIABLE = "cim_Status"

INVALID_CODE = "4000"
VALID_CODE = "3000"


@dataclass(frozen=True)
class TaskMapping:
    kind: str
    apply: Callable[[Dict[str, Any]], Dict[str, Any]]


def resolve_task_mapping(node: FlowNode) -> TaskMapping:
    name = (node.name or "").lower()

    if "prepare" in name:
        return TaskMapping("prepare", _mirror_prefixed)

    if "set status" in name:
        status = status_literal(node.name)
        if status is None:
            logger.warning("Task %s (%r) looks like a status task but names no status", node.id, node.name)
            return TaskMapping("noop", _no_change)
        return TaskMapping("status", lambda variables: {STATUS_VARIABLE: status})

    return TaskMapping("noop", _no_change)


def status_literal(name: str) -> Optional[str]:
    lowered = (name or "").lower()
    # "invalid" contains "valid", so it must be checked first
    if "invalid" in lowered or INVALID_CODE in lowered:
        return "Invalid"
    if "valid" in lowered or VALID_CODE in lowered:
        return "Valid"
    return None


def _mirror_prefixed(variables: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key[len(INPUT_PREFIX):]: value
        for key, value in variables.items()
        if key.startswith(INPUT_PREFIX) and len(key) > len(INPUT_PREFIX)
    }


def _no_change(variables: Dict[str, Any]) -> Dict[str, Any]:
    return {}
