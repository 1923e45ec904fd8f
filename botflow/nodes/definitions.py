"""
Node Type Definitions.

Built-in node types available in the chatbot flow editor palette.
"""

from ..config import DependencyCondition, FieldType, NodeCategory
from ..models import (
    ConfigField,
    FieldDependency,
    FieldOption,
    NodeDefinition,
    ValidationRule,
)


HTTP_METHODS = (
    FieldOption("GET", "GET"),
    FieldOption("POST", "POST"),
    FieldOption("PUT", "PUT"),
    FieldOption("DELETE", "DELETE"),
    FieldOption("PATCH", "PATCH"),
)

AI_PROVIDERS = (
    FieldOption("openai", "OpenAI GPT"),
    FieldOption("claude", "Anthropic Claude"),
    FieldOption("gemini", "Google Gemini"),
    FieldOption("local", "Local model"),
)


# =============================================================================
# Trigger Nodes
# =============================================================================

TRIGGER_NODES = [
    NodeDefinition(
        id="trigger-keyword",
        category=NodeCategory.TRIGGER,
        name="Keyword",
        description="Fires when a message contains specific words",
        icon="hash",
        config_schema=(
            ConfigField(
                key="keywords",
                label="Keywords",
                type=FieldType.TEXTAREA,
                description="One keyword per line",
                placeholder="help\nsupport\nassistance",
                required=True,
            ),
            ConfigField(
                key="caseSensitive",
                label="Case sensitive",
                type=FieldType.SWITCH,
                default_value=False,
            ),
            ConfigField(
                key="matchType",
                label="Match type",
                type=FieldType.SELECT,
                options=(
                    FieldOption("exact", "Exact"),
                    FieldOption("contains", "Contains"),
                    FieldOption("starts_with", "Starts with"),
                    FieldOption("ends_with", "Ends with"),
                ),
                default_value="contains",
            ),
        ),
    ),
    NodeDefinition(
        id="trigger-intent",
        category=NodeCategory.TRIGGER,
        name="AI Intent",
        description="Recognizes the user's intent with AI",
        icon="brain",
        config_schema=(
            ConfigField(
                key="intentName",
                label="Intent name",
                type=FieldType.TEXT,
                required=True,
                placeholder="greeting, help_request, complaint",
            ),
            ConfigField(
                key="confidence",
                label="Minimum confidence",
                type=FieldType.NUMBER,
                validation=ValidationRule(min=0, max=1),
                default_value=0.7,
                description="Value between 0 and 1",
            ),
            ConfigField(
                key="aiModel",
                label="AI model",
                type=FieldType.SELECT,
                options=(
                    FieldOption("openai", "OpenAI GPT"),
                    FieldOption("claude", "Anthropic Claude"),
                    FieldOption("local", "Local model"),
                ),
                default_value="openai",
            ),
        ),
    ),
    NodeDefinition(
        id="trigger-time",
        category=NodeCategory.TRIGGER,
        name="Schedule",
        description="Fires at a date/time",
        icon="clock",
        config_schema=(
            ConfigField(
                key="schedule",
                label="Schedule",
                type=FieldType.CRON,
                description="Cron expression",
                placeholder="0 9 * * 1-5",
                required=True,
            ),
            ConfigField(
                key="timezone",
                label="Timezone",
                type=FieldType.SELECT,
                options=(
                    FieldOption("America/Sao_Paulo", "Sao Paulo (UTC-3)"),
                    FieldOption("America/New_York", "New York (UTC-5)"),
                    FieldOption("Europe/London", "London (UTC+0)"),
                    FieldOption("UTC", "UTC"),
                ),
                default_value="America/Sao_Paulo",
            ),
        ),
    ),
    NodeDefinition(
        id="trigger-event",
        category=NodeCategory.TRIGGER,
        name="Event",
        description="Fires on a system event",
        icon="calendar",
        config_schema=(
            ConfigField(
                key="eventType",
                label="Event type",
                type=FieldType.SELECT,
                options=(
                    FieldOption("user_joined", "User joined"),
                    FieldOption("user_left", "User left"),
                    FieldOption("message_sent", "Message sent"),
                    FieldOption("file_uploaded", "File uploaded"),
                    FieldOption("payment_received", "Payment received"),
                ),
                required=True,
            ),
            ConfigField(
                key="filters",
                label="Filters",
                type=FieldType.KEY_VALUE,
                description="Additional event filters",
            ),
        ),
    ),
    NodeDefinition(
        id="trigger-webhook",
        category=NodeCategory.TRIGGER,
        name="Webhook",
        description="Fires on an external webhook call",
        icon="webhook",
        config_schema=(
            ConfigField(
                key="endpoint",
                label="Endpoint",
                type=FieldType.TEXT,
                placeholder="/webhook/chatbot",
                required=True,
            ),
            ConfigField(
                key="method",
                label="HTTP method",
                type=FieldType.SELECT,
                options=HTTP_METHODS[:4],
                default_value="POST",
            ),
            ConfigField(
                key="authentication",
                label="Authentication",
                type=FieldType.SELECT,
                options=(
                    FieldOption("none", "None"),
                    FieldOption("api_key", "API Key"),
                    FieldOption("bearer", "Bearer Token"),
                    FieldOption("basic", "Basic Auth"),
                ),
                default_value="none",
            ),
            ConfigField(
                key="secret",
                label="Secret key",
                type=FieldType.PASSWORD,
                dependencies=(
                    FieldDependency("authentication", "none", DependencyCondition.NOT_EQUALS),
                ),
            ),
        ),
    ),
    NodeDefinition(
        id="trigger-button",
        category=NodeCategory.TRIGGER,
        name="Button",
        description="Fires when a button is clicked",
        icon="mouse-pointer",
    ),
    NodeDefinition(
        id="trigger-menu",
        category=NodeCategory.TRIGGER,
        name="Menu",
        description="Fires when a menu option is selected",
        icon="layers",
    ),
    NodeDefinition(
        id="trigger-location",
        category=NodeCategory.TRIGGER,
        name="Location",
        description="Fires on a GPS location",
        icon="map",
    ),
]


# =============================================================================
# Condition Nodes
# =============================================================================

CONDITION_NODES = [
    NodeDefinition(
        id="condition-text",
        category=NodeCategory.CONDITION,
        name="Text",
        description="Compares text",
        icon="message-square",
        config_schema=(
            ConfigField(
                key="text",
                label="Text to compare",
                type=FieldType.TEXT,
                required=True,
                placeholder="Type the text",
            ),
            ConfigField(
                key="operator",
                label="Operator",
                type=FieldType.SELECT,
                options=(
                    FieldOption("equals", "Equals"),
                    FieldOption("not_equals", "Not equals"),
                    FieldOption("contains", "Contains"),
                    FieldOption("not_contains", "Does not contain"),
                    FieldOption("starts_with", "Starts with"),
                    FieldOption("ends_with", "Ends with"),
                    FieldOption("regex", "Regex"),
                ),
                default_value="equals",
            ),
            ConfigField(
                key="caseSensitive",
                label="Case sensitive",
                type=FieldType.SWITCH,
                default_value=False,
            ),
        ),
    ),
    NodeDefinition(
        id="condition-number",
        category=NodeCategory.CONDITION,
        name="Number",
        description="Compares numbers",
        icon="hash",
        config_schema=(
            ConfigField(
                key="value",
                label="Value to compare",
                type=FieldType.NUMBER,
                required=True,
            ),
            ConfigField(
                key="operator",
                label="Operator",
                type=FieldType.SELECT,
                options=(
                    FieldOption("equals", "Equals"),
                    FieldOption("not_equals", "Not equals"),
                    FieldOption("greater", "Greater than"),
                    FieldOption("greater_equal", "Greater or equal"),
                    FieldOption("less", "Less than"),
                    FieldOption("less_equal", "Less or equal"),
                    FieldOption("between", "Between"),
                ),
                default_value="equals",
            ),
            ConfigField(
                key="maxValue",
                label="Maximum value",
                type=FieldType.NUMBER,
                dependencies=(
                    FieldDependency("operator", "between", DependencyCondition.EQUALS),
                ),
            ),
        ),
    ),
    NodeDefinition(
        id="condition-date",
        category=NodeCategory.CONDITION,
        name="Date",
        description="Compares dates",
        icon="calendar",
    ),
    NodeDefinition(
        id="condition-variable",
        category=NodeCategory.CONDITION,
        name="Variable",
        description="Compares a variable",
        icon="database",
    ),
    NodeDefinition(
        id="condition-user",
        category=NodeCategory.CONDITION,
        name="User",
        description="Checks user data",
        icon="users",
    ),
    NodeDefinition(
        id="condition-regex",
        category=NodeCategory.CONDITION,
        name="Regex",
        description="Matches a regex pattern",
        icon="target",
    ),
    NodeDefinition(
        id="condition-contains",
        category=NodeCategory.CONDITION,
        name="Contains",
        description="Contains text",
        icon="search",
    ),
    NodeDefinition(
        id="condition-equals",
        category=NodeCategory.CONDITION,
        name="Equals",
        description="Equal value",
        icon="check-circle",
    ),
]


# =============================================================================
# Action Nodes
# =============================================================================

ACTION_NODES = [
    NodeDefinition(
        id="action-send-text",
        category=NodeCategory.ACTION,
        name="Send Text",
        description="Sends a text message",
        icon="message-square",
        config_schema=(
            ConfigField(
                key="message",
                label="Message",
                type=FieldType.TEXTAREA,
                required=True,
                placeholder="Type your message here...",
                description="Supports variables: {{user.name}}, {{message.content}}",
            ),
            ConfigField(
                key="parseMode",
                label="Formatting",
                type=FieldType.SELECT,
                options=(
                    FieldOption("text", "Plain text"),
                    FieldOption("markdown", "Markdown"),
                    FieldOption("html", "HTML"),
                ),
                default_value="text",
            ),
            ConfigField(
                key="delay",
                label="Delay (seconds)",
                type=FieldType.NUMBER,
                validation=ValidationRule(min=0, max=60),
                default_value=0,
                advanced=True,
            ),
        ),
    ),
    NodeDefinition(
        id="action-send-image",
        category=NodeCategory.ACTION,
        name="Send Image",
        description="Sends an image",
        icon="image",
        config_schema=(
            ConfigField(
                key="imageUrl",
                label="Image URL",
                type=FieldType.URL,
                placeholder="https://example.com/image.jpg",
            ),
            ConfigField(
                key="imageFile",
                label="Image file",
                type=FieldType.FILE,
                description="Alternatively, upload an image",
            ),
            ConfigField(
                key="caption",
                label="Caption",
                type=FieldType.TEXTAREA,
                placeholder="Image caption (optional)",
            ),
        ),
    ),
    NodeDefinition(
        id="action-send-audio",
        category=NodeCategory.ACTION,
        name="Send Audio",
        description="Sends an audio clip",
        icon="mic",
    ),
    NodeDefinition(
        id="action-send-video",
        category=NodeCategory.ACTION,
        name="Send Video",
        description="Sends a video",
        icon="video",
    ),
    NodeDefinition(
        id="action-set-variable",
        category=NodeCategory.ACTION,
        name="Set Variable",
        description="Sets a variable",
        icon="database",
    ),
    NodeDefinition(
        id="action-api-call",
        category=NodeCategory.ACTION,
        name="API Call",
        description="Calls an external API",
        icon="globe",
        config_schema=(
            ConfigField(
                key="url",
                label="API URL",
                type=FieldType.URL,
                required=True,
                placeholder="https://api.example.com/endpoint",
            ),
            ConfigField(
                key="method",
                label="HTTP method",
                type=FieldType.SELECT,
                options=HTTP_METHODS,
                default_value="GET",
            ),
            ConfigField(
                key="headers",
                label="Headers",
                type=FieldType.KEY_VALUE,
                description="Custom HTTP headers",
            ),
            ConfigField(
                key="body",
                label="Request body",
                type=FieldType.JSON,
                dependencies=(
                    FieldDependency("method", "GET", DependencyCondition.NOT_EQUALS),
                ),
            ),
            ConfigField(
                key="timeout",
                label="Timeout (seconds)",
                type=FieldType.NUMBER,
                validation=ValidationRule(min=1, max=300),
                default_value=30,
                advanced=True,
            ),
        ),
    ),
    NodeDefinition(
        id="action-webhook",
        category=NodeCategory.ACTION,
        name="Webhook",
        description="Sends a webhook",
        icon="webhook",
    ),
    NodeDefinition(
        id="action-create-ticket",
        category=NodeCategory.ACTION,
        name="Create Ticket",
        description="Creates a helpdesk ticket",
        icon="file-text",
    ),
]


# =============================================================================
# Response Nodes
# =============================================================================

RESPONSE_NODES = [
    NodeDefinition(
        id="response-text",
        category=NodeCategory.RESPONSE,
        name="Plain Text",
        description="Text reply",
        icon="message-square",
    ),
    NodeDefinition(
        id="response-quick-reply",
        category=NodeCategory.RESPONSE,
        name="Quick Reply",
        description="Quick reply buttons",
        icon="zap",
        config_schema=(
            ConfigField(
                key="text",
                label="Message text",
                type=FieldType.TEXTAREA,
                required=True,
                placeholder="How can I help you?",
            ),
            ConfigField(
                key="buttons",
                label="Quick reply buttons",
                type=FieldType.ARRAY,
                required=True,
                description="At most 10 buttons",
                validation=ValidationRule(max=10),
            ),
        ),
    ),
    NodeDefinition(
        id="response-menu",
        category=NodeCategory.RESPONSE,
        name="Menu",
        description="Interactive menu",
        icon="layers",
        config_schema=(
            ConfigField(
                key="title",
                label="Menu title",
                type=FieldType.TEXT,
                required=True,
                placeholder="Select an option",
            ),
            ConfigField(
                key="description",
                label="Description",
                type=FieldType.TEXT,
                placeholder="Choose one of the options below",
            ),
            ConfigField(
                key="items",
                label="Menu items",
                type=FieldType.ARRAY,
                required=True,
                description="List of menu options",
            ),
            ConfigField(
                key="multiSelect",
                label="Multiple selection",
                type=FieldType.SWITCH,
                default_value=False,
            ),
        ),
    ),
    NodeDefinition(
        id="response-carousel",
        category=NodeCategory.RESPONSE,
        name="Carousel",
        description="Sliding cards",
        icon="shuffle",
    ),
    NodeDefinition(
        id="response-list",
        category=NodeCategory.RESPONSE,
        name="List",
        description="List of options",
        icon="file-text",
    ),
    NodeDefinition(
        id="response-form",
        category=NodeCategory.RESPONSE,
        name="Form",
        description="Collects data",
        icon="file-text",
    ),
    NodeDefinition(
        id="response-rating",
        category=NodeCategory.RESPONSE,
        name="Rating",
        description="Collects a rating",
        icon="star",
    ),
    NodeDefinition(
        id="response-payment",
        category=NodeCategory.RESPONSE,
        name="Payment",
        description="Payment link",
        icon="credit-card",
    ),
]


# =============================================================================
# AI Nodes
# =============================================================================

AI_NODES = [
    NodeDefinition(
        id="ai-nlp",
        category=NodeCategory.AI,
        name="NLP",
        description="Natural language processing",
        icon="brain",
        config_schema=(
            ConfigField(
                key="provider",
                label="AI provider",
                type=FieldType.SELECT,
                options=AI_PROVIDERS,
                default_value="openai",
                required=True,
            ),
            ConfigField(
                key="model",
                label="Model",
                type=FieldType.SELECT,
                options=(
                    FieldOption("gpt-4", "GPT-4"),
                    FieldOption("gpt-3.5-turbo", "GPT-3.5 Turbo"),
                    FieldOption("claude-3", "Claude 3"),
                ),
                default_value="gpt-3.5-turbo",
            ),
            ConfigField(
                key="prompt",
                label="System prompt",
                type=FieldType.TEXTAREA,
                required=True,
                placeholder="You are a helpful assistant that...",
            ),
            ConfigField(
                key="temperature",
                label="Temperature",
                type=FieldType.NUMBER,
                validation=ValidationRule(min=0, max=2),
                default_value=0.7,
                description="Controls how creative replies are",
            ),
            ConfigField(
                key="maxTokens",
                label="Max tokens",
                type=FieldType.NUMBER,
                validation=ValidationRule(min=1, max=4000),
                default_value=500,
                advanced=True,
            ),
        ),
    ),
    NodeDefinition(
        id="ai-sentiment",
        category=NodeCategory.AI,
        name="Sentiment",
        description="Sentiment analysis",
        icon="brain",
    ),
    NodeDefinition(
        id="ai-intent",
        category=NodeCategory.AI,
        name="Intent",
        description="Intent recognition",
        icon="target",
    ),
    NodeDefinition(
        id="ai-entity",
        category=NodeCategory.AI,
        name="Entities",
        description="Entity extraction",
        icon="tag",
    ),
    NodeDefinition(
        id="ai-translation",
        category=NodeCategory.AI,
        name="Translation",
        description="Automatic translation",
        icon="globe",
    ),
    NodeDefinition(
        id="ai-conversation",
        category=NodeCategory.AI,
        name="AI Chat",
        description="Conversational AI",
        icon="message-square",
    ),
]


# =============================================================================
# Flow Control Nodes
# =============================================================================

FLOW_CONTROL_NODES = [
    NodeDefinition(
        id="flow-delay",
        category=NodeCategory.FLOW_CONTROL,
        name="Wait",
        description="Waits for a while",
        icon="clock",
        config_schema=(
            ConfigField(
                key="duration",
                label="Duration",
                type=FieldType.DURATION,
                required=True,
                description="Time to wait before continuing",
            ),
            ConfigField(
                key="unit",
                label="Unit",
                type=FieldType.SELECT,
                options=(
                    FieldOption("seconds", "Seconds"),
                    FieldOption("minutes", "Minutes"),
                    FieldOption("hours", "Hours"),
                    FieldOption("days", "Days"),
                ),
                default_value="seconds",
            ),
        ),
    ),
    NodeDefinition(
        id="flow-loop",
        category=NodeCategory.FLOW_CONTROL,
        name="Loop",
        description="Repeats actions",
        icon="repeat",
    ),
    NodeDefinition(
        id="flow-branch",
        category=NodeCategory.FLOW_CONTROL,
        name="Branch",
        description="Splits the flow",
        icon="git-branch",
        config_schema=(
            ConfigField(
                key="branches",
                label="Branches",
                type=FieldType.ARRAY,
                required=True,
                description="Condition for each branch",
            ),
            ConfigField(
                key="defaultBranch",
                label="Default branch",
                type=FieldType.TEXT,
                description="Used when no condition matches",
            ),
        ),
    ),
    NodeDefinition(
        id="flow-merge",
        category=NodeCategory.FLOW_CONTROL,
        name="Merge",
        description="Joins flows",
        icon="git-branch",
    ),
    NodeDefinition(
        id="flow-switch",
        category=NodeCategory.FLOW_CONTROL,
        name="Switch",
        description="Multiple conditions",
        icon="git-branch",
    ),
    NodeDefinition(
        id="flow-end",
        category=NodeCategory.FLOW_CONTROL,
        name="End",
        description="Ends the flow",
        icon="flag",
    ),
    NodeDefinition(
        id="flow-transfer",
        category=NodeCategory.FLOW_CONTROL,
        name="Transfer",
        description="Transfers to a human agent",
        icon="users",
    ),
    NodeDefinition(
        id="flow-fallback",
        category=NodeCategory.FLOW_CONTROL,
        name="Fallback",
        description="Fallback action",
        icon="alert-triangle",
    ),
]


# =============================================================================
# Validation Nodes
# =============================================================================

VALIDATION_NODES = [
    NodeDefinition(
        id="validation-email",
        category=NodeCategory.VALIDATION,
        name="Email",
        description="Validates an email address",
        icon="mail",
        config_schema=(
            ConfigField(
                key="errorMessage",
                label="Error message",
                type=FieldType.TEXT,
                default_value="Please enter a valid email",
                placeholder="Message shown on error",
            ),
            ConfigField(
                key="allowDomains",
                label="Allowed domains",
                type=FieldType.ARRAY,
                description="Allowed domains (optional)",
            ),
            ConfigField(
                key="blockDomains",
                label="Blocked domains",
                type=FieldType.ARRAY,
                description="Blocked domains (optional)",
            ),
        ),
    ),
    NodeDefinition(
        id="validation-phone",
        category=NodeCategory.VALIDATION,
        name="Phone",
        description="Validates a phone number",
        icon="phone",
        config_schema=(
            ConfigField(
                key="format",
                label="Format",
                type=FieldType.SELECT,
                options=(
                    FieldOption("international", "International (+55 11 99999-9999)"),
                    FieldOption("national", "National (11 99999-9999)"),
                    FieldOption("local", "Local (99999-9999)"),
                ),
                default_value="national",
            ),
            ConfigField(
                key="country",
                label="Country",
                type=FieldType.SELECT,
                options=(
                    FieldOption("BR", "Brazil"),
                    FieldOption("US", "United States"),
                    FieldOption("AR", "Argentina"),
                ),
                default_value="BR",
            ),
        ),
    ),
]


# =============================================================================
# Advanced Nodes
# =============================================================================

ADVANCED_NODES = [
    NodeDefinition(
        id="advanced-script",
        category=NodeCategory.ADVANCED,
        name="Script",
        description="Runs custom JavaScript",
        icon="code",
        config_schema=(
            ConfigField(
                key="code",
                label="JavaScript code",
                type=FieldType.CODE,
                required=True,
                placeholder="// Your code here\nconst result = input.message;\nreturn result;",
            ),
            ConfigField(
                key="timeout",
                label="Timeout (seconds)",
                type=FieldType.NUMBER,
                validation=ValidationRule(min=1, max=30),
                default_value=10,
            ),
            ConfigField(
                key="allowUnsafe",
                label="Allow unsafe operations",
                type=FieldType.SWITCH,
                default_value=False,
                description="CAUTION: may be dangerous",
            ),
        ),
    ),
]


ALL_NODES = (
    TRIGGER_NODES
    + CONDITION_NODES
    + ACTION_NODES
    + RESPONSE_NODES
    + AI_NODES
    + FLOW_CONTROL_NODES
    + VALIDATION_NODES
    + ADVANCED_NODES
)
