""" Data models for process graph representation """

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..decision.models import DecisionOutcome
from ..errors import StructuralError


class NodeKind(str, Enum):
    START = "start"
    TASK = "task"
    DECISION_TASK = "decisionTask"
    GATEWAY = "gateway"
    END = "end"


@dataclass(frozen=True)
class FlowEdge:
    id: str
    source: str
    target: str
    condition: Optional[str] = None  # guard expression, only evaluated at gateways
    is_default: bool = False


@dataclass(frozen=True)
class FlowNode:
    id: str
    kind: NodeKind
    name: str = ""
    outgoing: Tuple[str, ...] = ()  # edge ids, declaration order


@dataclass(frozen=True)
class ProcessModel:
    name: str
    nodes: Tuple[FlowNode, ...]
    edges: Tuple[FlowEdge, ...]
    _node_index: Dict[str, FlowNode] = field(init=False, repr=False, compare=False)
    _edge_index: Dict[str, FlowEdge] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_node_index", {n.id: n for n in self.nodes})
        object.__setattr__(self, "_edge_index", {e.id: e for e in self.edges})

    def node(self, node_id: str) -> FlowNode:
        try:
            return self._node_index[node_id]
        except KeyError:
            raise StructuralError(f"Unknown node: {node_id}") from None

    def edge(self, edge_id: str) -> FlowEdge:
        try:
            return self._edge_index[edge_id]
        except KeyError:
            raise StructuralError(f"Unknown edge: {edge_id}") from None

    def outgoing(self, node_id: str) -> List[FlowEdge]:
        return [self.edge(edge_id) for edge_id in self.node(node_id).outgoing]

    def start_node(self) -> FlowNode:
        starts = [n for n in self.nodes if n.kind == NodeKind.START]
        if len(starts) != 1:
            raise StructuralError(f"Process {self.name!r} must have exactly one start node, found {len(starts)}")
        return starts[0]


def build_process(name: str, nodes: Iterable[FlowNode], edges: Iterable[FlowEdge]) -> ProcessModel:
    """
    Assemble a ProcessModel, wiring each node's outgoing edge ids in edge
    declaration order, then check the graph invariants.
    """
    nodes = list(nodes)
    edges = list(edges)

    node_ids = [n.id for n in nodes]
    duplicates = sorted({i for i in node_ids if node_ids.count(i) > 1})
    if duplicates:
        raise StructuralError(f"Duplicate node ids: {', '.join(duplicates)}")
    edge_ids = [e.id for e in edges]
    duplicates = sorted({i for i in edge_ids if edge_ids.count(i) > 1})
    if duplicates:
        raise StructuralError(f"Duplicate edge ids: {', '.join(duplicates)}")

    outgoing: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    for edge in edges:
        if edge.source not in outgoing or edge.target not in outgoing:
            raise StructuralError(f"Edge references unknown node: {edge.source} -> {edge.target}")
        outgoing[edge.source].append(edge.id)

    wired = [replace(n, outgoing=tuple(outgoing[n.id])) for n in nodes]
    model = ProcessModel(name=name, nodes=tuple(wired), edges=tuple(edges))
    _validate_process(model)
    return model


def _validate_process(model: ProcessModel) -> None:
    model.start_node()
    for node in model.nodes:
        out = model.outgoing(node.id)
        if node.kind == NodeKind.END and out:
            raise StructuralError(f"End node {node.id} must not have outgoing edges")
        defaults = [e for e in out if e.is_default]
        if len(defaults) > 1:
            raise StructuralError(f"Node {node.id} has {len(defaults)} default edges, at most one is allowed")


@dataclass(frozen=True)
class SimulationInput:
    manual_price_cost: bool
    deal_margin_percent: float

    def to_variables(self) -> Dict[str, Any]:
        return {
            "manualPriceCost": self.manual_price_cost,
            "dealMarginPercent": self.deal_margin_percent,
        }


@dataclass(frozen=True)
class ExecutionResult:
    inputs: Mapping[str, Any]
    decision: Optional[DecisionOutcome]
    trace: Tuple[str, ...]
    final_status: str
    variables: Mapping[str, Any]
    warnings: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": dict(self.inputs),
            "dmnResult": self.decision.to_dict() if self.decision else None,
            "executionPath": list(self.trace),
            "finalStatus": self.final_status,
            "processVariables": dict(self.variables),
        }
