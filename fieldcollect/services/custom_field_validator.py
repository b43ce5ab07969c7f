"""
Custom field validation - checks a record's custom_fields against the
active custom columns.

Keys that match no active column are kept and reported as unknown, so
records written before a column was deactivated or deleted stay valid.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fieldcollect.models.custom_column import FieldType


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult:
    errors: List[FieldError] = field(default_factory=list)
    unknown_fields: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error_dicts(self, prefix: str = "customFields") -> List[Dict[str, str]]:
        return [{"field": f"{prefix}.{e.field}", "message": e.message} for e in self.errors]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        try:
            return math.isfinite(float(value.strip()))
        except ValueError:
            return False
    return False


def _check_value(column: Any, value: Any) -> Optional[str]:
    field_type = FieldType(column.field_type)
    if field_type == FieldType.NUMBER:
        if not _is_number(value):
            return "must be a number"
    elif field_type == FieldType.SELECT:
        options = list(column.options or [])
        if str(value) not in options:
            return f"must be one of: {', '.join(options)}"
    else:
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return "must be text"
    return None


def validate_custom_fields(
    fields: Optional[Mapping[str, Any]],
    active_columns: Iterable[Any],
) -> ValidationResult:
    """
    Validate custom field values.

    Args:
        fields: values keyed by column name (may be None)
        active_columns: the columns currently offered on record forms

    Returns:
        ValidationResult listing failures (missing required values, wrong
        type shape, select values outside the options) and unknown keys
    """
    fields = fields or {}
    result = ValidationResult()
    columns = {c.name: c for c in active_columns}

    for name, column in columns.items():
        value = fields.get(name)
        if _is_blank(value):
            if column.is_required:
                result.errors.append(FieldError(name, "is required"))
            continue
        message = _check_value(column, value)
        if message:
            result.errors.append(FieldError(name, message))

    result.unknown_fields = [name for name in fields if name not in columns]
    return result
