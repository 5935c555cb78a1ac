"""
Bundled definitions for the documented quote validity example.

The boundary layer picks between these and uploaded definitions before
calling the interpreter; the interpreter itself has no notion of a default.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..decision.models import DecisionTable
from ..workflow.models import ProcessModel
from .loader import load_decision_table, load_process

DEFINITIONS_DIR = Path(__file__).parent
DEFAULT_PROCESS_FILE = DEFINITIONS_DIR / "default_process.yaml"
DEFAULT_DECISION_FILE = DEFINITIONS_DIR / "default_decision.yaml"


@lru_cache(maxsize=None)
def default_process() -> ProcessModel:
    return load_process(DEFAULT_PROCESS_FILE.read_text(encoding="utf-8"))


@lru_cache(maxsize=None)
def default_decision_table() -> DecisionTable:
    return load_decision_table(DEFAULT_DECISION_FILE.read_text(encoding="utf-8"))


def select_process(uploaded: Optional[ProcessModel]) -> ProcessModel:
    return uploaded if uploaded is not None else default_process()
