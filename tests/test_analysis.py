"""Tests for input field inference."""

from quotesim.analysis import DEFAULT_INPUT_FIELDS, format_label, infer_input_fields, infer_type
from quotesim.definitions.defaults import default_decision_table, default_process
from quotesim.definitions.loader import load_process


def test_fields_from_decision_table():
    """Test the decision table inputs are used when a table is loaded."""
    fields = infer_input_fields(default_process(), default_decision_table())

    assert [(f.name, f.type) for f in fields] == [("manualPriceCost", "boolean"), ("dealMarginPercent", "number")]
    assert fields[0].to_dict()["defaultValue"] is False


def test_fields_scraped_from_process():
    """Test input names referenced in node names are found without a table."""
    process = load_process("""
name: scraped
nodes:
  - { id: s, type: start }
  - { id: t, type: task, name: "Check ${bi_dealMarginPercent} and bi_isExpedited" }
  - { id: e, type: end }
edges:
  - { from: s, to: t }
  - { from: t, to: e }
""")

    fields = infer_input_fields(process)

    assert [f.name for f in fields] == ["dealMarginPercent", "isExpedited"]
    assert fields[1].type == "boolean"


def test_fields_fall_back_to_defaults():
    """Test the documented inputs are offered when nothing else is found."""
    assert infer_input_fields(default_process()) == list(DEFAULT_INPUT_FIELDS)
    assert infer_input_fields(None) == list(DEFAULT_INPUT_FIELDS)


def test_infer_type():
    """Test type inference from variable names."""
    assert infer_type("manualPriceCost") == "boolean"
    assert infer_type("dealMarginPercent") == "number"
    assert infer_type("hasDiscount") == "boolean"
    assert infer_type("customerName") == "string"


def test_format_label():
    """Test camelCase and prefixed names become readable labels."""
    assert format_label("bi_manualPriceCost") == "Manual Price Cost"
    assert format_label("deal_margin") == "Deal Margin"
