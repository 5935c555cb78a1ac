"""
Transport-free boundary for the simulator.

Implements the behaviour behind the HTTP API (simulate, scenarios, validate,
uploads) as plain methods returning JSON-ready dicts. A web framework only
has to route requests here and turn exceptions into responses with
``http_status_for`` and ``error_body``.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from .analysis import infer_input_fields
from .config import Settings, settings as default_settings
from .definitions.defaults import DEFAULT_DECISION_FILE, select_process
from .definitions.store import DefinitionStore
from .errors import (
    ConfigurationError,
    DefinitionError,
    NoResultError,
    ScenarioNotFoundError,
    SimulatorError,
    StructuralError,
    ValidationError,
)
from .scenarios.catalogue import REJECTION_SCENARIOS, SCENARIOS, find_scenario
from .scenarios.runner import run_all_scenarios
from .validation.input_validator import parse_simulation_input
from .workflow.executor import ProcessInterpreter
from .workflow.models import ExecutionResult, SimulationInput

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (DefinitionError, 400),
    (ScenarioNotFoundError, 404),
    (ConfigurationError, 500),
    (NoResultError, 500),
    (StructuralError, 500),
)


class SimulatorService:

    def __init__(self, store: Optional[DefinitionStore] = None, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.store = store if store is not None else DefinitionStore()
        self.interpreter = ProcessInterpreter(self._process, self.store.current_table,
                                              max_hops=self.settings.max_hops)
        self._preload()

    def _preload(self):
        s = self.settings
        if s.process_file is not None:
            self.store.store_process(s.process_file.name, s.process_file.read_bytes())
        if s.decision_file is not None:
            self.store.store_decision(s.decision_file.name, s.decision_file.read_bytes())
        elif s.use_bundled_decision and self.store.current_table() is None:
            self.store.store_decision(DEFAULT_DECISION_FILE.name, DEFAULT_DECISION_FILE.read_bytes())

    def _process(self):
        return select_process(self.store.current_process())

    def info(self) -> Dict[str, str]:
        return {
            "name": "quotesim",
            "description": "Design-time simulator for the quote validity process",
        }

    def execute(self, inputs: SimulationInput) -> ExecutionResult:
        return self.interpreter.run(inputs)

    def simulate(self, body: Any) -> Dict[str, Any]:
        inputs = parse_simulation_input(body)
        return self.execute(inputs).to_dict()

    def scenarios(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in SCENARIOS]

    def validation_scenarios(self) -> List[Dict[str, Any]]:
        return [c.to_dict() for c in REJECTION_SCENARIOS]

    def run_scenario(self, slug: str) -> Dict[str, Any]:
        scenario = find_scenario(slug)
        return self.execute(scenario.inputs).to_dict()

    def validate(self) -> Dict[str, Any]:
        report = run_all_scenarios(self.interpreter.run, parallel=self.settings.parallel_scenarios,
                                   max_workers=self.settings.scenario_workers)
        return report.to_dict()

    def upload_process(self, filename: Optional[str], content: Union[str, bytes]) -> Dict[str, Any]:
        return self._upload("BPMN", self.store.store_process, filename or "process.yaml", content)

    def upload_decision(self, filename: Optional[str], content: Union[str, bytes]) -> Dict[str, Any]:
        return self._upload("DMN", self.store.store_decision, filename or "decision.yaml", content)

    def _upload(self, kind: str, store, filename: str, content: Union[str, bytes]) -> Dict[str, Any]:
        store(filename, content)
        size = len(content.encode("utf-8") if isinstance(content, str) else content)
        return {
            "success": True,
            "message": f"{kind} file uploaded successfully",
            "filename": filename,
            "size": size,
        }

    def files(self) -> Dict[str, Any]:
        process_files = self.store.process_filenames()
        decision_files = self.store.decision_filenames()
        return {
            "bpmnFiles": process_files,
            "dmnFiles": decision_files,
            "hasBpmn": bool(process_files),
            "hasDmn": bool(decision_files),
            "dmnLoaded": self.store.current_table() is not None,
        }

    def input_fields(self) -> List[Dict[str, Any]]:
        fields = infer_input_fields(self.store.current_process(), self.store.current_table())
        return [f.to_dict() for f in fields]


def http_status_for(error: BaseException) -> int:
    for error_type, status in _STATUS_CODES:
        if isinstance(error, error_type):
            return status
    return 500


def error_body(error: BaseException) -> Dict[str, str]:
    if isinstance(error, SimulatorError):
        return {"error": str(error)}
    return {"error": f"Internal Server Error: {error}"}
