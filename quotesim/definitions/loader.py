""" Load process and decision table definitions from YAML. """

import logging
from typing import Union

import yaml

from ..decision.evaluator import describe_rules
from ..decision.models import DecisionTable, Rule
from ..errors import DefinitionError, StructuralError
from ..workflow.models import FlowEdge, FlowNode, NodeKind, ProcessModel, build_process
from .schema import NodeSpec, validate_decision_table, validate_process

logger = logging.getLogger(__name__)

# BPMN element names accepted alongside the node kinds themselves
_KIND_ALIASES = {
    "start": NodeKind.START,
    "startevent": NodeKind.START,
    "task": NodeKind.TASK,
    "servicetask": NodeKind.TASK,
    "usertask": NodeKind.TASK,
    "scripttask": NodeKind.TASK,
    "decisiontask": NodeKind.DECISION_TASK,
    "businessruletask": NodeKind.DECISION_TASK,
    "gateway": NodeKind.GATEWAY,
    "exclusivegateway": NodeKind.GATEWAY,
    "end": NodeKind.END,
    "endevent": NodeKind.END,
}

_DECISION_HINTS = ("dmn", "decision", "look-up")


def load_process(yaml_text: Union[str, bytes]) -> ProcessModel:
    """
    Load a ProcessModel from a YAML string.
    """
    spec = validate_process(_parse_yaml(yaml_text))

    nodes = [FlowNode(id=n.id, kind=_resolve_kind(n), name=n.name or "") for n in spec.nodes]
    gateways = {n.id for n in nodes if n.kind == NodeKind.GATEWAY}

    edges = []
    for index, edge_data in enumerate(spec.edges, start=1):
        condition = (edge_data.when or "").strip() or None
        # an unconditioned flow out of a gateway is its default flow
        is_default = edge_data.default or (edge_data.src in gateways and condition is None)
        edges.append(FlowEdge(
            id=edge_data.id or f"flow_{index}",
            source=edge_data.src,
            target=edge_data.dest,
            condition=condition,
            is_default=is_default,
        ))

    try:
        model = build_process(spec.name, nodes, edges)
    except StructuralError as e:
        raise DefinitionError(f"Invalid process definition: {e}") from e
    logger.info("Loaded process %r with %d nodes and %d flows", model.name, len(model.nodes), len(model.edges))
    return model


def load_decision_table(yaml_text: Union[str, bytes]) -> DecisionTable:
    """
    Load a DecisionTable from a YAML string.
    """
    spec = validate_decision_table(_parse_yaml(yaml_text))
    try:
        table = DecisionTable(
            key=spec.decision,
            name=spec.name or spec.decision,
            inputs=tuple(spec.inputs),
            output=spec.output,
            hit_policy=spec.hit_policy,
            rules=tuple(Rule(conditions=tuple(r.when), output=r.then, description=r.description or "")
                        for r in spec.rules),
        )
    except ValueError as e:
        raise DefinitionError(f"Invalid decision table definition: {e}") from e

    logger.info("Loaded decision %r (%d rules, hit policy %s)", table.key, len(table.rules), table.hit_policy)
    logger.debug("Decision %r rules:\n%s", table.key, describe_rules(table))
    return table


def _parse_yaml(yaml_text: Union[str, bytes]):
    if isinstance(yaml_text, bytes):
        try:
            yaml_text = yaml_text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DefinitionError(f"Definition is not UTF-8 text: {e}") from e
    try:
        return yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        raise DefinitionError(f"Definition is not valid YAML: {e}") from e


def _resolve_kind(node: NodeSpec) -> NodeKind:
    key = node.type.replace("_", "").replace("-", "").lower()
    kind = _KIND_ALIASES.get(key)
    if kind is None:
        raise DefinitionError(f"Unsupported node type {node.type!r} for node {node.id}")

    # service tasks that call a decision are decision tasks; "Prepare Values for DMN" only maps values
    name = (node.name or "").lower()
    if key == "servicetask" and "prepare" not in name and any(hint in name for hint in _DECISION_HINTS):
        return NodeKind.DECISION_TASK
    return kind
