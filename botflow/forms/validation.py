"""
Field visibility and validation rules.
"""

import re
from typing import Any, Dict, Iterable, Optional

from ..config import DependencyCondition
from ..models import ConfigField, FieldDependency
from .widgets import widget_for


def effective_config(schema: Iterable[ConfigField], config: Dict[str, Any]) -> Dict[str, Any]:
    """Configuration with schema defaults filled in for unset keys."""
    values = {f.key: f.default_value for f in schema if f.default_value is not None}
    values.update({k: v for k, v in config.items() if v is not None})
    return values


def dependency_holds(dependency: FieldDependency, values: Dict[str, Any]) -> bool:
    """Evaluate one visibility dependency against current values."""
    current = values.get(dependency.field)
    condition = DependencyCondition(dependency.condition)

    if condition == DependencyCondition.EQUALS:
        return current == dependency.value
    if condition == DependencyCondition.NOT_EQUALS:
        return current != dependency.value
    if condition == DependencyCondition.INCLUDES:
        return isinstance(current, list) and dependency.value in current
    # NOT_INCLUDES
    return not isinstance(current, list) or dependency.value not in current


def is_visible(field: ConfigField, values: Dict[str, Any]) -> bool:
    """A field is visible iff every one of its dependencies holds."""
    return all(dependency_holds(dep, values) for dep in field.dependencies)


def validate_value(field: ConfigField, value: Any) -> Optional[str]:
    """
    Validate one field value.

    Returns:
        Error message, or None if the value is acceptable
    """
    widget = widget_for(field.type)

    if widget.is_empty(value):
        return f"{field.label} is required" if field.required else None

    error = widget.check(field, value)
    if error:
        return error

    rule = field.validation
    if rule is None:
        return None

    measured = widget.measure(value)
    if measured is not None:
        if rule.min is not None and measured < rule.min:
            return f"{field.label} must be at least {rule.min:g}"
        if rule.max is not None and measured > rule.max:
            return f"{field.label} must be at most {rule.max:g}"

    if rule.pattern and isinstance(value, str) and not re.search(rule.pattern, value):
        return f"{field.label} is not in the expected format"

    if rule.custom is not None:
        return rule.custom(value)

    return None


def validate_configuration(
    schema: Iterable[ConfigField],
    config: Dict[str, Any],
) -> Dict[str, str]:
    """
    Validate every visible field of a configuration.

    Returns:
        Dict mapping field keys to error messages (empty when valid)
    """
    schema = list(schema)
    values = effective_config(schema, config)
    errors: Dict[str, str] = {}

    for field in schema:
        if not is_visible(field, values):
            continue
        error = validate_value(field, values.get(field.key))
        if error:
            errors[field.key] = error

    return errors
