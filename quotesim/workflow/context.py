""" Execution context for a single process run. """
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ExecutionContext:
    variables: Dict[str, Any] = field(default_factory=dict)
    trace: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def visit(self, label: str):
        self.trace.append(label)

    def set_many(self, kv: Dict[str, Any]):
        self.variables.update(kv)

    def warn(self, message: str):
        self.warnings.append(message)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self.variables)
