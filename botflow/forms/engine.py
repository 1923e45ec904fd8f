"""
Configuration Form Engine.

Builds an editable form for one node from its catalog schema. Values are
edited in a private copy; nothing reaches the graph until save().
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..exceptions import FormValidationError
from ..graph.model import FlowGraph
from ..models import ConfigField
from .validation import effective_config, is_visible, validate_configuration, validate_value
from .widgets import widget_for

logger = logging.getLogger(__name__)


@dataclass
class FieldState:
    """Render state of one visible field."""

    field: ConfigField
    value: Any
    error: Optional[str]
    widget: Dict[str, Any]


class FormSession:
    """
    In-progress edit of a node configuration.

    Features:
    - Basic/advanced split (advanced collapsed by default)
    - Visibility from field dependencies
    - Per-field validation on change
    - Save through the graph model, cancel discards
    """

    def __init__(self, graph: FlowGraph, node_id: str):
        self.graph = graph
        self.node = graph.require_node(node_id)
        self.schema: List[ConfigField] = list(graph.catalog.schema_for(self.node.type))

        self.values: Dict[str, Any] = dict(self.node.configuration)
        self.errors: Dict[str, str] = {}
        self.show_advanced = False
        self.closed = False

    @property
    def node_id(self) -> str:
        return self.node.id

    @property
    def basic_fields(self) -> List[ConfigField]:
        return [f for f in self.schema if not f.advanced]

    @property
    def advanced_fields(self) -> List[ConfigField]:
        return [f for f in self.schema if f.advanced]

    def effective_values(self) -> Dict[str, Any]:
        return effective_config(self.schema, self.values)

    def value_of(self, key: str) -> Any:
        """In-progress value of a field, else its default."""
        return self.effective_values().get(key)

    def get_field(self, key: str) -> Optional[ConfigField]:
        for config_field in self.schema:
            if config_field.key == key:
                return config_field
        return None

    def is_visible(self, key: str) -> bool:
        config_field = self.get_field(key)
        if config_field is None:
            return False
        return is_visible(config_field, self.effective_values())

    def set_value(self, key: str, raw: Any) -> Optional[str]:
        """
        Change one field from raw editor input.

        The value is coerced by the field widget and only this field is
        re-validated.

        Returns:
            The field's error message, or None
        """
        config_field = self.get_field(key)
        if config_field is None:
            # Not in the schema (stale type); stored as-is
            self.values[key] = raw
            return None

        value = widget_for(config_field.type).coerce(raw)
        self.values[key] = value

        error = validate_value(config_field, value)
        if error:
            self.errors[key] = error
        else:
            self.errors.pop(key, None)

        self._drop_hidden_errors()
        return error

    def _drop_hidden_errors(self) -> None:
        values = self.effective_values()
        for key in list(self.errors):
            config_field = self.get_field(key)
            if config_field is not None and not is_visible(config_field, values):
                del self.errors[key]

    def toggle_advanced(self) -> bool:
        self.show_advanced = not self.show_advanced
        return self.show_advanced

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def can_save(self) -> bool:
        return not self.closed and not self.has_errors

    def validate_all(self) -> Dict[str, str]:
        """Validate every visible field, replacing the current errors."""
        self.errors = validate_configuration(self.schema, self.values)
        return dict(self.errors)

    def fields(self) -> List[FieldState]:
        """Visible fields in schema order, honouring the advanced toggle."""
        values = self.effective_values()
        states = []

        for config_field in self.schema:
            if config_field.advanced and not self.show_advanced:
                continue
            if not is_visible(config_field, values):
                continue

            value = values.get(config_field.key)
            widget = widget_for(config_field.type)
            states.append(
                FieldState(
                    field=config_field,
                    value=value,
                    error=self.errors.get(config_field.key),
                    widget=widget.describe(config_field, value),
                )
            )

        return states

    def save(self) -> Dict[str, Any]:
        """
        Write the in-progress values to the node.

        Raises:
            FormValidationError: If any field reports an error
        """
        if self.has_errors:
            raise FormValidationError(dict(self.errors))

        self.graph.set_node_configuration(self.node.id, dict(self.values))
        self.closed = True

        logger.debug(f"Saved configuration of node {self.node.id}")
        return dict(self.node.configuration)

    def cancel(self) -> None:
        """Discard the in-progress values."""
        self.values = dict(self.node.configuration)
        self.errors = {}
        self.closed = True


class ConfigFormEngine:
    """Opens configuration forms for nodes of a graph."""

    def __init__(self, graph: FlowGraph):
        self.graph = graph

    def open(self, node_id: str) -> FormSession:
        """
        Open a form for a node.

        Raises:
            NodeNotFoundError: If the node is not in the flow
        """
        return FormSession(self.graph, node_id)
