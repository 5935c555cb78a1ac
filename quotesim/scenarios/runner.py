"""
Replays the scenario catalogue through the interpreter and the input
validator, and aggregates the outcome into a single verdict.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ..errors import NoResultError, StructuralError
from ..validation.input_validator import validate
from ..workflow.models import ExecutionResult, SimulationInput
from .catalogue import REJECTION_SCENARIOS, SCENARIOS, RejectionScenario, Scenario

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " → "

# expected step -> extra substrings that also satisfy it
_STEP_SYNONYMS = {
    "end": ("terminate",),
    "gateway": ("result", "decision"),
    "invalid": ("4000",),
    "valid": ("3000",),
}

Run = Callable[[SimulationInput], ExecutionResult]


@dataclass(frozen=True)
class ScenarioResult:
    scenario_name: str
    description: str
    expected: str
    actual: str
    passed: bool
    path_passed: Optional[bool] = None
    expected_path: Optional[str] = None
    actual_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenarioName": self.scenario_name,
            "description": self.description,
            "expected": self.expected,
            "actual": self.actual,
            "passed": self.passed,
            "pathPassed": self.path_passed,
            "expectedPath": self.expected_path,
            "actualPath": self.actual_path,
        }


@dataclass(frozen=True)
class ValidationReport:
    all_passed: bool
    results: Sequence[ScenarioResult]

    @property
    def validation_message(self) -> str:
        return "BPMN is valid" if self.all_passed else "BPMN is invalid"

    def failures(self) -> List[ScenarioResult]:
        return [r for r in self.results if not r.passed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allPassed": self.all_passed,
            "validationMessage": self.validation_message,
            "scenarioResults": [r.to_dict() for r in self.results],
        }

    def format_summary(self) -> str:
        rule = "=" * 46
        lines = ["", "========== BPMN Validation Results ==========="]
        for r in self.results:
            lines.append(f"  [{'PASS' if r.passed else 'FAIL'}] {r.scenario_name}: "
                         f"expected={r.expected}, actual={r.actual}")
            if r.path_passed is not None and r.expected_path is not None:
                lines.append(f"       Path: {'PASS' if r.path_passed else 'FAIL'} | actual: {r.actual_path}")
        lines += [rule, f"  Result: {self.validation_message}", rule, ""]
        return "\n".join(lines)


def path_matches(actual_path: Optional[Iterable[str]], expected_steps: Optional[Sequence[str]]) -> bool:
    """
    Check that every expected step appears in ``actual_path``, in order.

    Steps are matched case-insensitively by substring with a single cursor
    over the trace, so entries need not be contiguous. "End" also matches
    "Terminate", "Gateway" matches "Result"/"Decision", and "Invalid"/"Valid"
    match the 4000/3000 status codes.
    """
    if actual_path is None or not expected_steps:
        return True

    actual = [step.lower() for step in actual_path if step is not None]
    cursor = 0
    for expected in expected_steps:
        needle = expected.lower()
        candidates = (needle,) + _STEP_SYNONYMS.get(needle, ())
        while cursor < len(actual) and not any(c in actual[cursor] for c in candidates):
            cursor += 1
        if cursor == len(actual):
            return False
        cursor += 1
    return True


def run_scenario(run: Run, scenario: Scenario) -> ScenarioResult:
    expected_path = PATH_SEPARATOR.join(scenario.expected_path) if scenario.expected_path else None
    try:
        result = run(scenario.inputs)
    except (StructuralError, NoResultError) as e:
        logger.warning("Scenario %r failed to execute: %s", scenario.name, e)
        return ScenarioResult(scenario.name, scenario.description, scenario.expected_status,
                              f"Error: {e}", False, False, expected_path, None)

    status_passed = result.final_status == scenario.expected_status
    path_passed = path_matches(result.trace, scenario.expected_path)
    passed = status_passed and path_passed
    if not passed:
        logger.warning("Scenario %r failed: expected %s, got %s (path %s)", scenario.name,
                       scenario.expected_status, result.final_status, "ok" if path_passed else "mismatch")
    return ScenarioResult(
        scenario_name=scenario.name,
        description=scenario.description,
        expected=scenario.expected_status,
        actual=result.final_status,
        passed=passed,
        path_passed=path_passed,
        expected_path=expected_path,
        actual_path=PATH_SEPARATOR.join(result.trace),
    )


def run_rejection(case: RejectionScenario) -> ScenarioResult:
    errors = validate(case.payload)
    needle = case.expected_error.lower()
    passed = any(needle in e.lower() for e in errors)
    actual = f"Rejected: {errors[0]}" if errors else "Accepted (expected rejection)"
    if not passed:
        logger.warning("Rejection scenario %r failed: %s", case.name, actual)
    return ScenarioResult(case.name, case.description, "Rejected", actual, passed, True)


def run_all_scenarios(run: Run, *, scenarios: Sequence[Scenario] = SCENARIOS,
                      rejections: Sequence[RejectionScenario] = REJECTION_SCENARIOS,
                      parallel: bool = False, max_workers: int = 4) -> ValidationReport:
    """
    Run every execution scenario through ``run`` and every rejection scenario
    through the input validator. Results keep catalogue order either way.

    ConfigurationError from ``run`` propagates: without a decision table there
    is nothing to validate.
    """
    if parallel:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda s: run_scenario(run, s), scenarios))
    else:
        results = [run_scenario(run, s) for s in scenarios]
    results += [run_rejection(case) for case in rejections]

    report = ValidationReport(all_passed=all(r.passed for r in results), results=tuple(results))
    logger.info("Validation finished: %s (%d/%d passed)", report.validation_message,
                len(results) - len(report.failures()), len(results))
    return report
