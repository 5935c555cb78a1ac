""" In-memory store for uploaded process and decision definitions. """

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Optional, TypeVar, Union

from ..decision.models import DecisionTable
from ..workflow.models import ProcessModel
from .loader import load_decision_table, load_process

logger = logging.getLogger(__name__)

T = TypeVar("T")
Content = Union[str, bytes]


@dataclass(frozen=True)
class StoredDefinition(Generic[T]):
    filename: str
    content: bytes
    model: T


class _Shelf(Generic[T]):
    """ Files of one kind. The most recently stored file is the published model. """

    def __init__(self, kind: str, parse: Callable[[Content], T]):
        self.kind = kind
        self.parse = parse
        self.files: Dict[str, StoredDefinition[T]] = {}
        self.current: Optional[T] = None

    def republish(self):
        latest = next(reversed(self.files.values()), None)
        self.current = latest.model if latest else None


class DefinitionStore:
    """
    Holds uploaded definition blobs keyed by filename, and the parsed model
    currently published for each kind.

    Content is parsed before the lock is taken; a bad upload never replaces
    the published model. Readers only ever see a fully built model, swapped
    in by reference.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._processes: _Shelf[ProcessModel] = _Shelf("process", load_process)
        self._decisions: _Shelf[DecisionTable] = _Shelf("decision", load_decision_table)

    def store_process(self, filename: str, content: Content) -> ProcessModel:
        return self._store(self._processes, filename, content)

    def store_decision(self, filename: str, content: Content) -> DecisionTable:
        return self._store(self._decisions, filename, content)

    def current_process(self) -> Optional[ProcessModel]:
        return self._processes.current

    def current_table(self) -> Optional[DecisionTable]:
        return self._decisions.current

    def process_filenames(self) -> List[str]:
        with self._lock:
            return list(self._processes.files)

    def decision_filenames(self) -> List[str]:
        with self._lock:
            return list(self._decisions.files)

    def remove_process(self, filename: str) -> bool:
        return self._remove(self._processes, filename)

    def remove_decision(self, filename: str) -> bool:
        return self._remove(self._decisions, filename)

    def clear(self):
        with self._lock:
            for shelf in (self._processes, self._decisions):
                shelf.files.clear()
                shelf.current = None
        logger.info("Cleared all stored definitions")

    def _store(self, shelf: _Shelf[T], filename: str, content: Content) -> T:
        raw = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        model = shelf.parse(raw)
        with self._lock:
            shelf.files.pop(filename, None)
            shelf.files[filename] = StoredDefinition(filename, raw, model)
            shelf.current = model
        logger.info("Stored %s definition %s (%d bytes)", shelf.kind, filename, len(raw))
        return model

    def _remove(self, shelf: _Shelf[T], filename: str) -> bool:
        with self._lock:
            removed = shelf.files.pop(filename, None)
            if removed is not None:
                shelf.republish()
        if removed is not None:
            logger.info("Removed %s definition %s", shelf.kind, filename)
        return removed is not None
