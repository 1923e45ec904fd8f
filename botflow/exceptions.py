"""
Exceptions raised by the flow editor core.
"""

from typing import Any, Dict, Optional


class BotflowError(Exception):
    """
    Base exception for all flow editor errors.

    Attributes:
        message: Human-readable error message
        code: Error code if available
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', code='{self.code}')"


# =============================================================================
# Catalog / Graph
# =============================================================================


class UnknownNodeTypeError(BotflowError):
    """Raised when instantiating a node whose type is not in the catalog."""

    def __init__(self, type_id: str) -> None:
        super().__init__(
            f"Unknown node type: {type_id}",
            code="UNKNOWN_NODE_TYPE",
            details={"type": type_id},
        )
        self.type_id = type_id


class NodeNotFoundError(BotflowError):
    """Raised when a node id does not exist in the flow."""

    def __init__(self, node_id: str) -> None:
        super().__init__(
            f"Node not found: {node_id}",
            code="NODE_NOT_FOUND",
            details={"node_id": node_id},
        )
        self.node_id = node_id


class EdgeNotFoundError(BotflowError):
    """Raised when an edge id does not exist in the flow."""

    def __init__(self, edge_id: str) -> None:
        super().__init__(
            f"Edge not found: {edge_id}",
            code="EDGE_NOT_FOUND",
            details={"edge_id": edge_id},
        )
        self.edge_id = edge_id


class InvalidConnection(BotflowError):
    """
    Raised when an edge cannot be created.

    This occurs when:
    - source and target are the same node
    - either endpoint is not part of the flow
    """

    def __init__(self, source_id: str, target_id: str, reason: str) -> None:
        super().__init__(
            f"Cannot connect {source_id} -> {target_id}: {reason}",
            code="INVALID_CONNECTION",
            details={"source": source_id, "target": target_id, "reason": reason},
        )
        self.source_id = source_id
        self.target_id = target_id
        self.reason = reason


# =============================================================================
# Forms
# =============================================================================


class FormValidationError(BotflowError):
    """
    Raised when saving a configuration form that still has errors.

    Attributes:
        field_errors: Dictionary mapping field keys to error messages
    """

    def __init__(self, field_errors: Dict[str, str]) -> None:
        super().__init__("Configuration has errors", code="VALIDATION_ERROR", details=field_errors)
        self.field_errors = field_errors

    def __str__(self) -> str:
        base = super().__str__()
        if self.field_errors:
            errors = ", ".join(f"{k}: {v}" for k, v in self.field_errors.items())
            return f"{base} ({errors})"
        return base


# =============================================================================
# Persistence
# =============================================================================


class PersistenceError(BotflowError):
    """
    Raised when a backend call fails.

    Attributes:
        status_code: HTTP status code, if a response was received
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: str = "PERSISTENCE_ERROR",
    ) -> None:
        super().__init__(message, code=code, details={"status_code": status_code})
        self.status_code = status_code


class FlowNotFoundError(PersistenceError):
    """Raised when the backend answers 404 for a flow or bot."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            status_code=404,
            code="NOT_FOUND",
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ServerError(PersistenceError):
    """Raised when the backend answers with a 5xx status."""

    def __init__(self, message: str = "Internal server error", status_code: int = 500) -> None:
        super().__init__(message, status_code=status_code, code="SERVER_ERROR")


class ApiConnectionError(PersistenceError):
    """Raised when the backend cannot be reached."""

    def __init__(self, message: str = "Failed to connect to the flow backend") -> None:
        super().__init__(message, code="CONNECTION_ERROR")
