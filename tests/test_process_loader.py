"""Tests for loading process and decision definitions from YAML."""

import pytest
from quotesim.definitions.defaults import default_decision_table, default_process
from quotesim.definitions.loader import load_decision_table, load_process
from quotesim.errors import DefinitionError, StructuralError
from quotesim.workflow.models import NodeKind


def test_load_simple_process():
    """Test loading a minimal linear process."""
    yaml_text = """
name: linear
nodes:
  - id: s
    type: start
  - id: t
    type: task
    name: Do something
  - id: e
    type: end
edges:
  - { from: s, to: t }
  - { from: t, to: e }
"""
    process = load_process(yaml_text)

    assert process.name == "linear"
    assert [n.id for n in process.nodes] == ["s", "t", "e"]
    assert process.start_node().id == "s"
    assert [e.id for e in process.edges] == ["flow_1", "flow_2"]
    assert [e.target for e in process.outgoing("t")] == ["e"]


def test_load_bpmn_element_names():
    """Test BPMN element names resolve to node kinds."""
    process = default_process()

    kinds = {n.id: n.kind for n in process.nodes}
    assert kinds["start"] == NodeKind.START
    assert kinds["prepare_values"] == NodeKind.TASK
    assert kinds["lookup_results"] == NodeKind.DECISION_TASK
    assert kinds["result_gateway"] == NodeKind.GATEWAY
    assert kinds["end_valid"] == NodeKind.END


def test_service_task_calling_a_decision():
    """Test a service task named after the decision becomes a decision task."""
    yaml_text = """
name: service_lookup
nodes:
  - { id: s, type: startEvent }
  - { id: prep, type: serviceTask, name: Prepare Values for DMN }
  - { id: dmn, type: serviceTask, name: Call DMN }
  - { id: e, type: endEvent }
edges:
  - { from: s, to: prep }
  - { from: prep, to: dmn }
  - { from: dmn, to: e }
"""
    process = load_process(yaml_text)

    assert process.node("prep").kind == NodeKind.TASK
    assert process.node("dmn").kind == NodeKind.DECISION_TASK


def test_gateway_edges_keep_order_and_defaults():
    """Test guards are kept, and an unconditioned gateway flow becomes the default."""
    yaml_text = """
name: gateway
nodes:
  - { id: s, type: start }
  - { id: g, type: gateway }
  - { id: a, type: end }
  - { id: b, type: end }
edges:
  - { from: s, to: g }
  - { id: to_a, from: g, to: a, when: '=quoteValidity = "Valid"' }
  - { id: to_b, from: g, to: b }
"""
    process = load_process(yaml_text)

    edges = process.outgoing("g")
    assert [e.id for e in edges] == ["to_a", "to_b"]
    assert edges[0].condition == '=quoteValidity = "Valid"'
    assert edges[0].is_default is False
    assert edges[1].is_default is True


def test_load_process_rejects_unknown_node_type():
    """Test unsupported node types are definition errors."""
    yaml_text = """
name: bad
nodes:
  - { id: s, type: start }
  - { id: x, type: parallelGateway }
edges:
  - { from: s, to: x }
"""
    with pytest.raises(DefinitionError, match="parallelGateway"):
        load_process(yaml_text)


def test_load_process_rejects_unknown_fields():
    """Test schema validation forbids unexpected keys."""
    yaml_text = """
name: bad
nodes:
  - { id: s, type: start, params: {} }
edges: []
"""
    with pytest.raises(DefinitionError):
        load_process(yaml_text)


def test_load_process_rejects_dangling_edge():
    """Test edges must reference declared nodes."""
    yaml_text = """
name: dangling
nodes:
  - { id: s, type: start }
  - { id: e, type: end }
edges:
  - { from: s, to: missing }
"""
    with pytest.raises(DefinitionError, match="unknown node"):
        load_process(yaml_text)


def test_load_process_requires_one_start():
    """Test a process without a start node is rejected."""
    yaml_text = """
name: headless
nodes:
  - { id: t, type: task }
  - { id: e, type: end }
edges:
  - { from: t, to: e }
"""
    with pytest.raises(DefinitionError, match="start"):
        load_process(yaml_text)


def test_load_process_rejects_duplicate_ids():
    """Test node ids are unique."""
    yaml_text = """
name: dupes
nodes:
  - { id: s, type: start }
  - { id: s, type: end }
edges: []
"""
    with pytest.raises(DefinitionError, match="Duplicate"):
        load_process(yaml_text)


def test_load_process_rejects_two_default_flows():
    """Test a gateway may have only one unconditioned flow, and the graph fault is kept as the cause."""
    yaml_text = """
name: two_defaults
nodes:
  - { id: s, type: start }
  - { id: g, type: gateway }
  - { id: a, type: end }
  - { id: b, type: end }
edges:
  - { from: s, to: g }
  - { from: g, to: a }
  - { from: g, to: b }
"""
    with pytest.raises(DefinitionError, match="default edges") as excinfo:
        load_process(yaml_text)
    assert isinstance(excinfo.value.__cause__, StructuralError)


def test_load_process_rejects_empty_document():
    """Test a process without nodes is a definition error."""
    with pytest.raises(DefinitionError, match="start"):
        load_process("name: empty\n")


def test_load_process_rejects_invalid_yaml():
    """Test YAML syntax errors are definition errors."""
    with pytest.raises(DefinitionError, match="YAML"):
        load_process("name: [unclosed")
    with pytest.raises(DefinitionError, match="mapping"):
        load_process("- just\n- a list\n")


def test_load_decision_table():
    """Test YAML scalars in rule entries are kept as condition text."""
    yaml_text = """
decision: margins
hit_policy: unique
inputs: [manualPriceCost, dealMarginPercent]
rules:
  - when: [true, "-"]
    then: '"Invalid"'
  - when: [false, 25]
    then: Valid
  - when: [false, ~]
    then: '"Invalid"'
"""
    table = load_decision_table(yaml_text)

    assert table.key == "margins"
    assert table.name == "margins"
    assert table.hit_policy == "UNIQUE"
    assert table.output == "quoteValidity"
    assert [r.conditions for r in table.rules] == [("true", "-"), ("false", "25"), ("false", "-")]
    assert table.rules[1].output == "Valid"


def test_load_bundled_decision_table():
    """Test the bundled table matches the documented rules."""
    table = default_decision_table()

    assert table.key == "entry_level_camunda_exercise_v1_0"
    assert table.inputs == ("manualPriceCost", "dealMarginPercent")
    assert [r.conditions for r in table.rules] == [("true", "-"), ("false", "< 25"), ("false", ">= 25")]


def test_load_decision_table_rejects_mismatched_rules():
    """Test every rule must have one entry per input."""
    yaml_text = """
decision: short
inputs: [manualPriceCost, dealMarginPercent]
rules:
  - when: ["true"]
    then: Invalid
"""
    with pytest.raises(DefinitionError, match="conditions"):
        load_decision_table(yaml_text)


def test_load_decision_table_rejects_unknown_hit_policy():
    """Test only FIRST and UNIQUE hit policies are accepted."""
    yaml_text = """
decision: collect
hit_policy: collect
inputs: [a]
rules: []
"""
    with pytest.raises(DefinitionError, match="hit policy"):
        load_decision_table(yaml_text)
