import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..decision.evaluator import evaluate
from ..decision.models import NO_RESULT, DecisionOutcome, DecisionTable
from ..errors import ConfigurationError, NoResultError, StructuralError
from .context import ExecutionContext
from .guards import GUARD_VARIABLE, evaluate_guard
from .mapping import INPUT_PREFIX, STATUS_VARIABLE, resolve_task_mapping
from .models import ExecutionResult, FlowEdge, FlowNode, NodeKind, ProcessModel, SimulationInput

logger = logging.getLogger(__name__)

DEFAULT_MAX_HOPS = 1000
DEFAULT_STATUS = "Completed"
DECISION_VARIABLE = GUARD_VARIABLE

_KIND_LABELS = {
    NodeKind.START: "Start",
    NodeKind.END: "End",
    NodeKind.GATEWAY: "Gateway",
}

ProcessSource = Union[ProcessModel, Callable[[], Optional[ProcessModel]], None]
TableSource = Union[DecisionTable, Callable[[], Optional[DecisionTable]], None]
Inputs = Union[SimulationInput, Mapping[str, Any]]


def execute(process: ProcessModel, table: Optional[DecisionTable], inputs: Inputs,
            *, max_hops: int = DEFAULT_MAX_HOPS) -> ExecutionResult:
    """
    Walk ``process`` from its start node to an end node and return the trace,
    final status and variable snapshot.

    Raises ConfigurationError when a decision is needed and ``table`` is None,
    NoResultError when the table has no matching rule, and StructuralError when
    the graph dead-ends or exceeds ``max_hops`` steps.
    """
    if process is None:
        raise ConfigurationError("no process definition is loaded")

    inputs = _as_variables(inputs)
    context = ExecutionContext(variables={INPUT_PREFIX + k: v for k, v in inputs.items()})
    decision: Optional[DecisionOutcome] = None
    final_status: Optional[str] = None

    node = process.start_node()
    hops = 0
    while True:
        hops += 1
        if hops > max_hops:
            raise StructuralError(
                f"Process {process.name!r} did not reach an end node within {max_hops} steps; "
                "it may contain a cycle"
            )

        label = node_label(node)
        context.visit(label)
        logger.debug("Visiting %s (%s)", label, node.kind.value)

        if node.kind == NodeKind.START:
            edge = _single_path(process, node)
        elif node.kind == NodeKind.TASK:
            mapping = resolve_task_mapping(node)
            logger.debug("Task %s runs the %s mapping", node.id, mapping.kind)
            context.set_many(mapping.apply(context.variables))
            edge = _single_path(process, node)
        elif node.kind == NodeKind.DECISION_TASK:
            decision = _decide(table, _decision_variables(table, context.variables))
            context.set_many({DECISION_VARIABLE: decision.output})
            edge = _single_path(process, node)
        elif node.kind == NodeKind.GATEWAY:
            edge = _choose_gateway_edge(process, node, context)
        elif node.kind == NodeKind.END:
            final_status = context.variables.get(STATUS_VARIABLE, DEFAULT_STATUS)
            break
        else:
            raise StructuralError(f"Unsupported node kind {node.kind!r} at {node.id}")

        node = process.node(edge.target)

    if decision is None:
        # graph had no usable decision task; evaluate straight from the caller's inputs
        logger.info("Process %r reached its end without a decision task, evaluating the decision directly",
                    process.name)
        names = table.inputs if table is not None else ()
        decision = _decide(table, {name: inputs[name] for name in names if name in inputs})
        context.set_many({DECISION_VARIABLE: decision.output})

    return ExecutionResult(
        inputs=MappingProxyType(dict(inputs)),
        decision=decision,
        trace=tuple(context.trace),
        final_status=final_status,
        variables=MappingProxyType(context.snapshot()),
        warnings=tuple(context.warnings),
    )


class ProcessInterpreter:
    """
    Binds process and decision table sources to ``execute``.

    Sources may be fixed models or zero-argument callables; callables are
    asked once per run so a store can publish new definitions between runs.
    """

    def __init__(self, process: ProcessSource, table: TableSource, max_hops: int = DEFAULT_MAX_HOPS):
        self.process = process
        self.table = table
        self.max_hops = max_hops

    def run(self, inputs: Inputs) -> ExecutionResult:
        process = _resolve(self.process)
        table = _resolve(self.table)
        return execute(process, table, inputs, max_hops=self.max_hops)

    __call__ = run


def node_label(node: FlowNode) -> str:
    return (node.name or "").strip() or _KIND_LABELS.get(node.kind) or node.id


def _resolve(source):
    return source() if callable(source) else source


def _as_variables(inputs: Inputs) -> Dict[str, Any]:
    if isinstance(inputs, SimulationInput):
        return inputs.to_variables()
    return dict(inputs)


def _single_path(process: ProcessModel, node: FlowNode) -> FlowEdge:
    edges = process.outgoing(node.id)
    if not edges:
        raise StructuralError(f"Node {node_label(node)!r} ({node.id}) has no outgoing flow and is not an end node")
    return edges[0]


def _choose_gateway_edge(process: ProcessModel, node: FlowNode, context: ExecutionContext) -> FlowEdge:
    edges = process.outgoing(node.id)
    if not edges:
        raise StructuralError(f"Gateway {node_label(node)!r} ({node.id}) has no outgoing flows")

    for edge in edges:
        if edge.is_default or not edge.condition:
            continue
        if evaluate_guard(edge.condition, context.variables):
            logger.debug("Gateway %s took %s (%s)", node.id, edge.id, edge.condition)
            return edge

    for edge in edges:
        if edge.is_default:
            logger.debug("Gateway %s took default flow %s", node.id, edge.id)
            return edge

    message = (f"Gateway {node_label(node)!r} ({node.id}) matched no condition and has no default flow; "
               f"taking first flow {edges[0].id}")
    logger.warning(message)
    context.warn(message)
    return edges[0]


def _decision_variables(table: Optional[DecisionTable], variables: Mapping[str, Any]) -> Dict[str, Any]:
    if table is None:
        return {}
    selected = {}
    for name in table.inputs:
        if name in variables:
            selected[name] = variables[name]
        elif INPUT_PREFIX + name in variables:
            selected[name] = variables[INPUT_PREFIX + name]
    return selected


def _decide(table: Optional[DecisionTable], variables: Dict[str, Any]) -> DecisionOutcome:
    logger.debug("Evaluating decision with %s", variables)
    outcome = evaluate(table, variables)
    if outcome is NO_RESULT:
        raise NoResultError(f"Decision {table.key} returned no result for {variables}", variables)
    return outcome
