""" Data models for decision table representation """

from dataclasses import dataclass, field
from typing import Dict, Tuple

HIT_POLICIES = ("FIRST", "UNIQUE")


@dataclass(frozen=True)
class Rule:
    conditions: Tuple[str, ...]  # aligned positionally with DecisionTable.inputs
    output: str
    description: str = ""


@dataclass(frozen=True)
class DecisionTable:
    key: str
    inputs: Tuple[str, ...]
    rules: Tuple[Rule, ...] = field(default_factory=tuple)
    output: str = "quoteValidity"
    name: str = ""
    hit_policy: str = "FIRST"

    def __post_init__(self):
        if self.hit_policy not in HIT_POLICIES:
            raise ValueError(f"Unsupported hit policy: {self.hit_policy}")
        for index, rule in enumerate(self.rules):
            if len(rule.conditions) != len(self.inputs):
                raise ValueError(
                    f"Rule {index + 1} has {len(rule.conditions)} conditions, "
                    f"table declares {len(self.inputs)} inputs"
                )


@dataclass(frozen=True)
class DecisionOutcome:
    output: str
    rule_index: int

    def to_dict(self) -> Dict[str, str]:
        return {"quoteValidity": self.output}


class NoResult:
    """ Returned by the evaluator when no rule matches. Never equal to a real output. """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_RESULT"


NO_RESULT = NoResult()
