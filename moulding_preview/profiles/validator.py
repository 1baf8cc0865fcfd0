"""
Profile record validation.

Checks a decoded JSON record against the profile schema and reports every
problem found, not just the first:

- required fields and their types (id, name, units, dimensions, contour)
- positive dimensions, finite coordinates
- contour entries: type, ``to`` point, arc radius and flags

Unknown top-level keys are reported as warnings and do not make the
record invalid.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from moulding_preview.io.units import PROFILE_UNITS

logger = logging.getLogger(__name__)

KNOWN_KEYS = {'$schema', 'id', 'name', 'description', 'units', 'dimensions',
              'start', 'contour', 'metadata'}


class ValidationSeverity(Enum):
    """Severity level of validation issues."""
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """A single problem found in a profile record."""
    code: str
    field: str
    message: str
    severity: ValidationSeverity = ValidationSeverity.ERROR

    def __str__(self) -> str:
        return f"[{self.severity.value.upper()}] {self.field}: {self.message}"


@dataclass
class ValidationReport:
    """All issues found in one record."""
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        if not self.issues:
            return "Profile record is valid"
        return "\n".join(f"  - {issue}" for issue in self.issues)


class ProfileValidationError(Exception):
    """A profile file failed schema validation."""

    def __init__(self, path: Union[str, Path, None], issues: List[ValidationIssue]):
        self.path = Path(path) if path is not None else None
        self.issues = issues
        where = str(self.path) if self.path is not None else "<profile>"
        details = "; ".join(f"{i.field}: {i.message}" for i in issues)
        super().__init__(f"Invalid profile {where}: {details}")


def _is_number(value: Any) -> bool:
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


class _Checker:
    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []

    def error(self, code: str, path: str, message: str) -> None:
        self.issues.append(ValidationIssue(code, path, message))

    def warn(self, code: str, path: str, message: str) -> None:
        self.issues.append(ValidationIssue(code, path, message, ValidationSeverity.WARNING))

    def non_empty_string(self, data: dict, key: str, required: bool = True) -> None:
        if key not in data:
            if required:
                self.error("MISSING_FIELD", key, "is required")
            return
        value = data[key]
        if not isinstance(value, str):
            self.error("TYPE", key, "must be a string")
        elif required and not value.strip():
            self.error("EMPTY", key, "must not be empty")

    def point(self, value: Any, path: str) -> None:
        if not isinstance(value, dict):
            self.error("TYPE", path, "must be an object with numeric x and y")
            return
        for axis in ('x', 'y'):
            if axis not in value:
                self.error("MISSING_FIELD", f"{path}.{axis}", "is required")
            elif not _is_number(value[axis]):
                self.error("TYPE", f"{path}.{axis}", "must be a finite number")

    def positive(self, data: dict, key: str, path: str, required: bool = True) -> None:
        if key not in data:
            if required:
                self.error("MISSING_FIELD", path, "is required")
            return
        value = data[key]
        if not _is_number(value):
            self.error("TYPE", path, "must be a finite number")
        elif value <= 0:
            self.error("RANGE", path, "must be greater than 0")

    def contour_entry(self, entry: Any, path: str) -> None:
        if not isinstance(entry, dict):
            self.error("TYPE", path, "must be an object")
            return
        kind = entry.get('type')
        if kind not in ('line', 'arc'):
            self.error("ENUM", f"{path}.type", "must be 'line' or 'arc'")
        if 'to' not in entry:
            self.error("MISSING_FIELD", f"{path}.to", "is required")
        else:
            self.point(entry['to'], f"{path}.to")

        meta = entry.get('metadata')
        if meta is not None and not isinstance(meta, dict):
            self.error("TYPE", f"{path}.metadata", "must be an object")

        if kind != 'arc':
            return
        self.positive(entry, 'radius', f"{path}.radius")
        if 'clockwise' not in entry:
            self.error("MISSING_FIELD", f"{path}.clockwise", "is required")
        elif not isinstance(entry['clockwise'], bool):
            self.error("TYPE", f"{path}.clockwise", "must be a boolean")
        if 'largeArc' in entry and not isinstance(entry['largeArc'], bool):
            self.error("TYPE", f"{path}.largeArc", "must be a boolean")
        if isinstance(meta, dict) and 'center' in meta:
            self.point(meta['center'], f"{path}.metadata.center")


def validate_profile_data(data: Any) -> ValidationReport:
    """Validate a decoded profile record.

    Args:
        data: result of ``json.load`` on a profile file.

    Returns:
        ValidationReport listing every issue (empty when valid).
    """
    check = _Checker()

    if not isinstance(data, dict):
        check.error("TYPE", "$", "profile record must be a JSON object")
        return ValidationReport(check.issues)

    check.non_empty_string(data, 'id')
    check.non_empty_string(data, 'name')
    check.non_empty_string(data, 'description', required=False)

    if 'units' not in data:
        check.error("MISSING_FIELD", "units", "is required")
    elif data['units'] not in PROFILE_UNITS:
        check.error("ENUM", "units", f"must be one of {', '.join(PROFILE_UNITS)}")

    dims = data.get('dimensions')
    if dims is None:
        check.error("MISSING_FIELD", "dimensions", "is required")
    elif not isinstance(dims, dict):
        check.error("TYPE", "dimensions", "must be an object")
    else:
        check.positive(dims, 'width', "dimensions.width")
        check.positive(dims, 'height', "dimensions.height")
        check.positive(dims, 'depth', "dimensions.depth", required=False)

    if 'start' in data:
        check.point(data['start'], "start")

    contour = data.get('contour')
    if contour is None:
        check.error("MISSING_FIELD", "contour", "is required")
    elif not isinstance(contour, list):
        check.error("TYPE", "contour", "must be an array")
    elif not contour:
        check.error("EMPTY", "contour", "must contain at least one command")
    else:
        for i, entry in enumerate(contour):
            check.contour_entry(entry, f"contour[{i}]")

    if 'metadata' in data and not isinstance(data['metadata'], dict):
        check.error("TYPE", "metadata", "must be an object")

    for key in sorted(set(data) - KNOWN_KEYS):
        check.warn("UNKNOWN_FIELD", key, "is not part of the profile schema")

    report = ValidationReport(check.issues)
    logger.debug("Profile validation: %d errors, %d warnings",
                 len(report.errors), len(report.warnings))
    return report


def ensure_valid(data: Any, path: Optional[Union[str, Path]] = None) -> ValidationReport:
    """Validate and raise on any error-level issue.

    Raises:
        ProfileValidationError: with the path and every error found.
    """
    report = validate_profile_data(data)
    if not report.is_valid:
        raise ProfileValidationError(path, report.errors)
    for issue in report.warnings:
        logger.warning("%s: %s", path or "<profile>", issue)
    return report
