"""
Configuration for the Flow Editor core.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NodeCategory(str, Enum):
    """Node categories (mirrors the backend category enum)."""

    TRIGGER = "trigger"
    CONDITION = "condition"
    ACTION = "action"
    RESPONSE = "response"
    INTEGRATION = "integration"
    AI = "ai"
    FLOW_CONTROL = "flow_control"
    VALIDATION = "validation"
    ADVANCED = "advanced"


class FieldType(str, Enum):
    """Configuration field types understood by the form engine."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    EMAIL = "email"
    URL = "url"
    PASSWORD = "password"
    SELECT = "select"
    MULTISELECT = "multiselect"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SWITCH = "switch"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    COLOR = "color"
    FILE = "file"
    JSON = "json"
    CODE = "code"
    REGEX = "regex"
    CRON = "cron"
    DURATION = "duration"
    KEY_VALUE = "key-value"
    ARRAY = "array"
    OBJECT = "object"


class DependencyCondition(str, Enum):
    """Operators for field visibility dependencies."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    INCLUDES = "includes"
    NOT_INCLUDES = "not_includes"


class EdgeKind(str, Enum):
    """Edge kinds (mirrors the backend edge kind enum)."""

    DEFAULT = "default"
    CONDITIONAL = "conditional"
    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"


class VariableScope(str, Enum):
    """Variable scope."""

    FLOW = "flow"
    SESSION = "session"
    TENANT = "tenant"


class CanvasConfig(BaseSettings):
    """Canvas configuration."""

    model_config = SettingsConfigDict(env_prefix="CANVAS_")

    # Zoom settings
    min_zoom: float = Field(default=0.5, description="Minimum zoom level")
    max_zoom: float = Field(default=2.0, description="Maximum zoom level")
    default_zoom: float = Field(default=1.0, description="Default zoom level")
    zoom_step: float = Field(default=0.1, description="Zoom increment per step")

    # Grid settings (cosmetic only)
    grid_size: int = Field(default=40, description="Background grid spacing at zoom 1")

    # Node geometry used for edge anchors
    node_width: int = Field(default=200, description="Rendered node width")
    node_height: int = Field(default=100, description="Rendered node height")


class PersistenceConfig(BaseSettings):
    """Backend API configuration."""

    model_config = SettingsConfigDict(env_prefix="BOTFLOW_API_")

    base_url: str = Field(
        default="http://localhost:5000/api/omnibridge",
        description="Base URL of the flow backend",
    )
    token: Optional[str] = Field(default=None, description="Bearer token")
    timeout_s: float = Field(default=30.0, description="Request timeout")
    max_retries: int = Field(default=2, description="Transport-level retries")

    # Auto-save
    auto_save: bool = Field(default=True, description="Save after mutations")
    auto_save_delay_s: float = Field(default=0.5, description="Debounce delay")

    # Draft flows
    default_flow_name: str = Field(default="Main flow", description="Name of synthesized drafts")


class Settings(BaseSettings):
    """Main settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="info", description="Log level")

    # Sub-configurations
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
