""" Exception types raised by the simulator core and its collaborators. """

from typing import List, Optional


class SimulatorError(Exception):
    """ Base class for every error raised by quotesim. """


class ValidationError(SimulatorError, ValueError):
    """ Simulation payload has the wrong shape. Never reaches the interpreter. """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid input: " + "; ".join(self.errors))


class ConfigurationError(SimulatorError):
    """ No process or decision table is loaded, or the table cannot be used. """


class NoResultError(SimulatorError):
    """ The decision table was evaluated but no rule matched. """

    def __init__(self, message: str, inputs: Optional[dict] = None):
        self.inputs = dict(inputs or {})
        super().__init__(message)


class StructuralError(SimulatorError):
    """ The process graph cannot be traversed as modelled. """


class DefinitionError(SimulatorError, ValueError):
    """ A definition document could not be parsed or failed schema validation. """


class ScenarioNotFoundError(SimulatorError, LookupError):
    """ No catalogued scenario has the requested slug. """
