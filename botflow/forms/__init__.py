"""
Dynamic Configuration Forms.

Schema-driven forms for editing node configuration.
"""

from .engine import ConfigFormEngine, FieldState, FormSession
from .validation import (
    dependency_holds,
    effective_config,
    is_visible,
    validate_configuration,
    validate_value,
)
from .widgets import WIDGETS, FieldWidget, widget_for

__all__ = [
    "ConfigFormEngine",
    "FormSession",
    "FieldState",
    "dependency_holds",
    "effective_config",
    "is_visible",
    "validate_configuration",
    "validate_value",
    "WIDGETS",
    "FieldWidget",
    "widget_for",
]
