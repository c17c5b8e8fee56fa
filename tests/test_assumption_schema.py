from __future__ import annotations

import pytest

from dcf_workbench.domain.errors import ValidationError
from dcf_workbench.domain.models.valuation import AssumptionSet
from dcf_workbench.domain.services.examples import build_example_payload


def test_example_payload_parses_into_frozen_records():
    assumption_set = AssumptionSet.from_dict(build_example_payload(5))

    assert assumption_set.assumptions.forecast_years == 5
    assert isinstance(assumption_set.assumptions.revenue_growth, tuple)
    assert assumption_set.starting_point.revenue == 400000.0
    assert assumption_set.meta.ticker == "AAPL"
    with pytest.raises(AttributeError):
        assumption_set.starting_point.revenue = 1.0  # type: ignore[misc]


def test_meta_is_optional():
    payload = build_example_payload(3)
    payload.pop("meta")

    assumption_set = AssumptionSet.from_dict(payload)

    assert assumption_set.meta.currency is None


@pytest.mark.parametrize("section", ["starting_point", "assumptions"])
def test_missing_section_is_reported(section):
    payload = build_example_payload(3)
    payload.pop(section)

    with pytest.raises(ValidationError) as excinfo:
        AssumptionSet.from_dict(payload)
    assert excinfo.value.field == section


def test_missing_field_uses_dotted_path():
    payload = build_example_payload(3)
    del payload["starting_point"]["shares_outstanding"]

    with pytest.raises(ValidationError, match=r"starting_point\.shares_outstanding is required"):
        AssumptionSet.from_dict(payload)


@pytest.mark.parametrize("bad_value", ["0.05", True, None, [0.05]])
def test_non_numeric_rate_is_rejected(bad_value):
    payload = build_example_payload(3)
    payload["assumptions"]["beta"] = bad_value

    with pytest.raises(ValidationError) as excinfo:
        AssumptionSet.from_dict(payload)
    assert excinfo.value.field == "assumptions.beta"


@pytest.mark.parametrize("years", [0, -2, 2.5, "3", None])
def test_forecast_years_must_be_positive_integer(years):
    payload = build_example_payload(3)
    payload["assumptions"]["forecast_years"] = years

    with pytest.raises(ValidationError, match="forecast_years must be a positive integer"):
        AssumptionSet.from_dict(payload)


def test_integral_float_forecast_years_is_accepted():
    payload = build_example_payload(3)
    payload["assumptions"]["forecast_years"] = 3.0

    assert AssumptionSet.from_dict(payload).assumptions.forecast_years == 3


def test_path_that_is_not_a_list_reports_expected_length():
    payload = build_example_payload(3)
    payload["assumptions"]["tax_rate_path"] = 0.25

    with pytest.raises(ValidationError) as excinfo:
        AssumptionSet.from_dict(payload)
    assert str(excinfo.value) == "tax_rate_path must be an array with exactly 3 entries."
    assert excinfo.value.expected_length == 3


def test_non_numeric_path_entry_is_located():
    payload = build_example_payload(3)
    payload["assumptions"]["operating_margin_path"][1] = "high"

    with pytest.raises(ValidationError) as excinfo:
        AssumptionSet.from_dict(payload)
    assert excinfo.value.field == "assumptions.operating_margin_path[1]"


def test_top_level_must_be_object():
    with pytest.raises(ValidationError):
        AssumptionSet.from_dict([1, 2, 3])  # type: ignore[arg-type]
