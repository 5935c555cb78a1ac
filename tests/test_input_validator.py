"""Tests for simulation payload validation."""

import pytest
from quotesim.errors import ValidationError
from quotesim.validation.input_validator import first_error, parse_simulation_input, validate
from quotesim.workflow.models import SimulationInput


def test_valid_payloads():
    """Test well-formed payloads, as text, bytes and dicts."""
    assert validate('{"manualPriceCost": false, "dealMarginPercent": 25}') == []
    assert validate(b'{"manualPriceCost": true, "dealMarginPercent": 12.5}') == []
    assert validate({"manualPriceCost": False, "dealMarginPercent": 0}) == []


def test_extra_fields_are_ignored():
    """Test unknown fields do not fail validation."""
    assert validate('{"manualPriceCost": false, "dealMarginPercent": 25, "note": "x"}') == []


@pytest.mark.parametrize("body, message", [
    ('{"manualPriceCost": false, "dealMarginPercent": "abc"}', "dealMarginPercent must be a number"),
    ('{"manualPriceCost": false, "dealMarginPercent": "25"}', "dealMarginPercent must be a number"),
    ('{"manualPriceCost": false, "dealMarginPercent": true}', "dealMarginPercent must be a number"),
    ('{"manualPriceCost": "yes", "dealMarginPercent": 25}', "manualPriceCost must be a boolean (true or false)"),
    ('{"manualPriceCost": 1, "dealMarginPercent": 25}', "manualPriceCost must be a boolean (true or false)"),
    ('{"dealMarginPercent": 25}', "manualPriceCost is required"),
    ('{"manualPriceCost": false}', "dealMarginPercent is required"),
    ('{"manualPriceCost": null, "dealMarginPercent": 25}', "manualPriceCost is required"),
])
def test_rejected_fields(body, message):
    """Test each field is type-checked strictly."""
    assert first_error(body) == message


def test_all_errors_reported_boolean_first():
    """Test every problem is reported, manualPriceCost before dealMarginPercent."""
    errors = validate('{"dealMarginPercent": "abc", "manualPriceCost": "no"}')

    assert errors == [
        "manualPriceCost must be a boolean (true or false)",
        "dealMarginPercent must be a number",
    ]


def test_non_finite_margin_rejected():
    """Test NaN and infinity are not accepted as margins."""
    assert first_error({"manualPriceCost": False, "dealMarginPercent": float("nan")}) == \
        "dealMarginPercent must be a finite number"
    assert first_error({"manualPriceCost": False, "dealMarginPercent": float("inf")}) == \
        "dealMarginPercent must be a finite number"


@pytest.mark.parametrize("body, prefix", [
    (None, "Request body is required"),
    ("", "Request body is required"),
    ("   ", "Request body is required"),
    ("{not json", "Invalid JSON"),
    ("[1, 2]", "Request body must be a JSON object"),
    ("42", "Request body must be a JSON object"),
])
def test_rejected_bodies(body, prefix):
    """Test bodies that are not a JSON object."""
    assert first_error(body).startswith(prefix)


def test_parse_simulation_input():
    """Test a valid payload converts to SimulationInput with a float margin."""
    inputs = parse_simulation_input('{"manualPriceCost": false, "dealMarginPercent": 25}')

    assert inputs == SimulationInput(False, 25.0)
    assert isinstance(inputs.deal_margin_percent, float)


def test_parse_simulation_input_raises():
    """Test invalid payloads raise ValidationError carrying every message."""
    with pytest.raises(ValidationError) as excinfo:
        parse_simulation_input("{}")

    assert excinfo.value.errors == ["manualPriceCost is required", "dealMarginPercent is required"]
    assert str(excinfo.value) == "Invalid input: manualPriceCost is required; dealMarginPercent is required"


def test_margin_beyond_float_range_is_not_finite():
    """Test an integer too large for a double is reported as non-finite."""
    body = '{"manualPriceCost": false, "dealMarginPercent": 1' + "0" * 400 + "}"

    assert validate(body) == ["dealMarginPercent must be a finite number"]
    with pytest.raises(ValidationError):
        parse_simulation_input(body)
