"""
Unit tests for moulding_preview.profiles.validator.

Tests:
- Valid records
- Every issue reported, not just the first
- Warnings for unknown fields
"""

import copy
import logging

import pytest

from moulding_preview.profiles.validator import (
    ProfileValidationError,
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
    ensure_valid,
    validate_profile_data,
)


def _fields(report):
    return {issue.field for issue in report.errors}


class TestValidRecords:

    def test_stepped_profile_is_valid(self, profile_data):
        report = validate_profile_data(profile_data)
        assert report.is_valid
        assert report.issues == []
        assert report.summary() == "Profile record is valid"

    def test_optional_fields(self, profile_data):
        data = copy.deepcopy(profile_data)
        data["$schema"] = "./schema.json"
        data["description"] = "Rabbet with a rounded lip"
        data["dimensions"]["depth"] = 0.5
        data["metadata"] = {"species": "walnut"}
        del data["start"]
        assert validate_profile_data(data).is_valid


class TestErrors:
    """Problems that make a record invalid."""

    def test_not_an_object(self):
        report = validate_profile_data([1, 2])
        assert not report.is_valid
        assert report.errors[0].field == "$"

    def test_all_issues_aggregated(self, profile_data):
        data = copy.deepcopy(profile_data)
        del data["name"]
        data["units"] = "yd"
        data["dimensions"]["width"] = -1
        data["contour"][0] = {"type": "spline"}
        report = validate_profile_data(data)
        assert {"name", "units", "dimensions.width", "contour[0].type", "contour[0].to"} <= _fields(report)

    def test_missing_contour(self, profile_data):
        data = copy.deepcopy(profile_data)
        del data["contour"]
        assert "contour" in _fields(validate_profile_data(data))

    def test_empty_contour(self, profile_data):
        data = copy.deepcopy(profile_data)
        data["contour"] = []
        report = validate_profile_data(data)
        assert report.errors[0].code == "EMPTY"

    def test_empty_id(self, profile_data):
        data = copy.deepcopy(profile_data)
        data["id"] = "   "
        assert "id" in _fields(validate_profile_data(data))

    def test_zero_height(self, profile_data):
        data = copy.deepcopy(profile_data)
        data["dimensions"]["height"] = 0
        report = validate_profile_data(data)
        assert [(i.code, i.field) for i in report.errors] == [("RANGE", "dimensions.height")]

    def test_boolean_is_not_a_number(self, profile_data):
        data = copy.deepcopy(profile_data)
        data["contour"][0]["to"]["x"] = True
        assert "contour[0].to.x" in _fields(validate_profile_data(data))

    def test_arc_requirements(self, profile_data):
        data = copy.deepcopy(profile_data)
        arc = data["contour"][3]
        del arc["radius"]
        arc["clockwise"] = "yes"
        arc["largeArc"] = 1
        arc["metadata"]["center"] = {"x": 1}
        fields = _fields(validate_profile_data(data))
        assert {"contour[3].radius", "contour[3].clockwise", "contour[3].largeArc",
                "contour[3].metadata.center.y"} <= fields

    def test_bad_start(self, profile_data):
        data = copy.deepcopy(profile_data)
        data["start"] = {"x": "0", "y": 0}
        assert "start.x" in _fields(validate_profile_data(data))


class TestWarnings:

    def test_unknown_field_is_warning(self, profile_data):
        data = copy.deepcopy(profile_data)
        data["finish"] = "oil"
        report = validate_profile_data(data)
        assert report.is_valid
        assert [w.code for w in report.warnings] == ["UNKNOWN_FIELD"]
        assert report.warnings[0].severity == ValidationSeverity.WARNING

    def test_ensure_valid_logs_warnings(self, profile_data, caplog):
        data = copy.deepcopy(profile_data)
        data["finish"] = "oil"
        with caplog.at_level(logging.WARNING, logger="moulding_preview.profiles.validator"):
            ensure_valid(data, "ogee.json")
        assert "finish" in caplog.text


class TestEnsureValid:

    def test_raises_with_path_and_issues(self, profile_data):
        data = copy.deepcopy(profile_data)
        data["units"] = "yd"
        data["dimensions"]["height"] = -2
        with pytest.raises(ProfileValidationError) as exc_info:
            ensure_valid(data, "data/profiles/ogee.json")
        err = exc_info.value
        assert err.path.name == "ogee.json"
        assert len(err.issues) == 2
        assert "units" in str(err) and "dimensions.height" in str(err)

    def test_returns_report(self, profile_data):
        assert isinstance(ensure_valid(profile_data), ValidationReport)


class TestIssueFormatting:

    def test_str(self):
        issue = ValidationIssue("RANGE", "dimensions.width", "must be greater than 0")
        assert str(issue) == "[ERROR] dimensions.width: must be greater than 0"

    def test_summary_lists_issues(self):
        report = ValidationReport([ValidationIssue("EMPTY", "contour", "must contain at least one command")])
        assert "contour" in report.summary()
