"""
Data Models for the Flow Editor core.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import DependencyCondition, EdgeKind, FieldType, NodeCategory, VariableScope
from .ids import is_draft_id


# =============================================================================
# Catalog Models
# =============================================================================


@dataclass(frozen=True)
class FieldOption:
    """Choice for select/radio fields."""

    value: str
    label: str
    description: str = ""


@dataclass(frozen=True)
class ValidationRule:
    """Validation constraints for a configuration field."""

    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    # Returns an error message, or None when the value is acceptable
    custom: Optional[Callable[[Any], Optional[str]]] = None


@dataclass(frozen=True)
class FieldDependency:
    """Visibility rule: the field shows only while this holds."""

    field: str
    value: Any
    condition: DependencyCondition = DependencyCondition.EQUALS


@dataclass(frozen=True)
class ConfigField:
    """Definition of a configurable node field."""

    key: str
    label: str
    type: FieldType
    description: str = ""
    placeholder: str = ""
    required: bool = False
    default_value: Any = None
    options: Tuple[FieldOption, ...] = ()
    validation: Optional[ValidationRule] = None
    dependencies: Tuple[FieldDependency, ...] = ()
    group: Optional[str] = None
    advanced: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "type": self.type.value,
            "description": self.description,
            "placeholder": self.placeholder,
            "required": self.required,
            "default_value": self.default_value,
            "options": [{"value": o.value, "label": o.label} for o in self.options],
            "dependencies": [
                {"field": d.field, "value": d.value, "condition": d.condition.value}
                for d in self.dependencies
            ],
            "advanced": self.advanced,
        }


@dataclass(frozen=True)
class NodeDefinition:
    """Definition of a node type."""

    id: str
    category: NodeCategory
    name: str
    description: str
    icon: str
    config_schema: Tuple[ConfigField, ...] = ()

    def get_field(self, key: str) -> Optional[ConfigField]:
        for config_field in self.config_schema:
            if config_field.key == key:
                return config_field
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "config_schema": [f.to_dict() for f in self.config_schema],
        }


# =============================================================================
# Graph Models
# =============================================================================


@dataclass
class Position:
    """A point in graph space (or screen space, depending on context)."""

    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)


@dataclass
class FlowNode:
    """Instance of a node in a flow."""

    id: str
    flow_id: str
    type: str
    category: str
    position: Position
    title: str = ""
    description: str = ""
    configuration: Dict[str, Any] = field(default_factory=dict)
    enabled: bool = True
    is_start: bool = False
    is_end: bool = False


@dataclass
class FlowEdge:
    """Directed transition between two nodes."""

    id: str
    flow_id: str
    source_node_id: str
    target_node_id: str
    label: str = ""
    condition: Optional[str] = None
    kind: EdgeKind = EdgeKind.DEFAULT
    order: int = 0
    enabled: bool = True

    def touches(self, node_id: str) -> bool:
        return self.source_node_id == node_id or self.target_node_id == node_id


@dataclass
class FlowVariable:
    """Variable definition for a flow."""

    key: str
    label: str = ""
    value_type: str = "string"
    default_value: Any = None
    scope: VariableScope = VariableScope.FLOW
    required: bool = False
    description: str = ""


@dataclass
class Flow:
    """Complete flow (aggregate root)."""

    id: str
    bot_id: str
    name: str
    description: str = ""
    nodes: List[FlowNode] = field(default_factory=list)
    edges: List[FlowEdge] = field(default_factory=list)
    variables: List[FlowVariable] = field(default_factory=list)
    version: int = 1
    is_active: bool = True

    @property
    def is_draft(self) -> bool:
        return is_draft_id(self.id)


@dataclass
class FlowSummary:
    """Entry of a bot's flow listing."""

    id: str
    name: str
    version: int = 1
    is_active: bool = False


@dataclass
class Bot:
    """Chatbot metadata."""

    id: str
    name: str
    description: str = ""
    is_enabled: bool = True


# =============================================================================
# Validation Models
# =============================================================================


@dataclass
class ValidationIssue:
    """A validation issue found in a flow."""

    severity: str  # error, warning, info
    message: str
    node_id: Optional[str] = None
    edge_id: Optional[str] = None
    field_key: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of flow validation."""

    valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def infos(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "info"]


__all__ = [
    # Catalog
    "FieldOption",
    "ValidationRule",
    "FieldDependency",
    "ConfigField",
    "NodeDefinition",
    # Graph
    "Position",
    "FlowNode",
    "FlowEdge",
    "FlowVariable",
    "Flow",
    "FlowSummary",
    "Bot",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
