""" The fixed scenario catalogue replayed by the validation harness. """

import re
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..errors import ScenarioNotFoundError
from ..workflow.models import SimulationInput

# key steps, matched in order by substring (see runner.path_matches)
EXPECTED_PATH_INVALID = ("Start", "Prepare", "Look-up", "Gateway", "Invalid", "End")
EXPECTED_PATH_VALID = ("Start", "Prepare", "Look-up", "Gateway", "Valid", "End")


def to_slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", (name or "").lower()).strip("-")


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    inputs: SimulationInput
    expected_status: str
    expected_path: Tuple[str, ...] = ()

    @property
    def slug(self) -> str:
        return to_slug(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "inputs": self.inputs.to_variables(),
            "expectedResult": self.expected_status,
            "expectedExecutionPath": list(self.expected_path),
        }


@dataclass(frozen=True)
class RejectionScenario:
    name: str
    description: str
    payload: str
    expected_error: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "invalidJson": self.payload,
            "expectedErrorSubstring": self.expected_error,
        }


def _invalid(name, description, manual, margin):
    return Scenario(name, description, SimulationInput(manual, margin), "Invalid", EXPECTED_PATH_INVALID)


def _valid(name, description, margin):
    return Scenario(name, description, SimulationInput(False, margin), "Valid", EXPECTED_PATH_VALID)


SCENARIOS: Tuple[Scenario, ...] = (
    # manual pricing always wins
    _invalid("Manual Pricing - Invalid", "Manual pricing always results in Invalid status", True, 30.0),
    _invalid("Manual with Zero Margin", "Manual pricing with 0% margin - still Invalid", True, 0.0),
    _invalid("Manual with High Margin",
             "Manual pricing with 99% margin - still Invalid (manual overrides margin)", True, 99.0),
    # below 25%
    _invalid("Low Margin - Invalid", "Margin below 25% results in Invalid status", False, 24.0),
    _invalid("Zero Margin", "0% margin without manual pricing - Invalid", False, 0.0),
    _invalid("One Percent Margin", "1% margin - Invalid", False, 1.0),
    _invalid("23% Margin", "23% margin - below threshold, Invalid", False, 23.0),
    _invalid("Just Below 25% - 24.99", "Edge: 24.99% margin (< 25) - Invalid", False, 24.99),
    _invalid("Just Below 25% - 24.9", "Edge: 24.9% margin - Invalid", False, 24.9),
    # 25% and above
    _valid("Valid - Exactly 25%", "Boundary: exactly 25% margin - Valid", 25.0),
    _valid("Just Above 25% - 25.01", "Edge: 25.01% margin (>= 25) - Valid", 25.01),
    _valid("Just Above 25% - 25.1", "Edge: 25.1% margin - Valid", 25.1),
    _valid("26% Margin", "26% margin - Valid", 26.0),
    _valid("High Margin - 30%", "30% margin with no manual pricing - Valid", 30.0),
    _valid("Very High Margin - 100%", "Edge: 100% margin - Valid", 100.0),
)

REJECTION_SCENARIOS: Tuple[RejectionScenario, ...] = (
    RejectionScenario(
        "Reject dealMarginPercent as string",
        "dealMarginPercent must be a number, not text",
        '{"manualPriceCost": false, "dealMarginPercent": "abc"}',
        "number",
    ),
    RejectionScenario(
        "Reject dealMarginPercent as boolean",
        "dealMarginPercent must be a number",
        '{"manualPriceCost": false, "dealMarginPercent": true}',
        "number",
    ),
    RejectionScenario(
        "Reject manualPriceCost as string",
        "manualPriceCost must be a boolean",
        '{"manualPriceCost": "yes", "dealMarginPercent": 25}',
        "boolean",
    ),
    RejectionScenario(
        "Reject manualPriceCost as number",
        "manualPriceCost must be a boolean",
        '{"manualPriceCost": 1, "dealMarginPercent": 25}',
        "boolean",
    ),
    RejectionScenario(
        "Reject missing manualPriceCost",
        "manualPriceCost is required",
        '{"dealMarginPercent": 25}',
        "manualPriceCost",
    ),
    RejectionScenario(
        "Reject missing dealMarginPercent",
        "dealMarginPercent is required",
        '{"manualPriceCost": false}',
        "dealMarginPercent",
    ),
)


def find_scenario(slug: str) -> Scenario:
    for scenario in SCENARIOS:
        if scenario.slug == slug:
            return scenario
    raise ScenarioNotFoundError(f"Scenario not found: {slug}")
