"""
Field Widgets.

One widget per FieldType. A widget coerces raw editor input into a
stored value, performs the type-specific check, and describes how the
control is rendered. The mapping is checked for completeness at import.
"""

import json
import math
import re
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from croniter import croniter

from ..config import FieldType
from ..models import ConfigField

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class FieldWidget:
    """Base widget: single-line text input."""

    control = "input"
    input_type = "text"

    def coerce(self, raw: Any) -> Any:
        return raw

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        """Type-specific check on a non-empty value."""
        if not isinstance(value, str):
            return f"{field.label} must be text"
        return None

    def measure(self, value: Any) -> Optional[float]:
        """Quantity compared against min/max rules, if any."""
        return None

    def describe(self, field: ConfigField, value: Any) -> Dict[str, Any]:
        """Render descriptor for the control."""
        return {
            "control": self.control,
            "input_type": self.input_type,
            "key": field.key,
            "label": field.label,
            "placeholder": field.placeholder,
            "required": field.required,
            "value": value,
        }


class TextWidget(FieldWidget):
    pass


class PasswordWidget(FieldWidget):
    input_type = "password"


class TextAreaWidget(FieldWidget):
    control = "textarea"

    def describe(self, field: ConfigField, value: Any) -> Dict[str, Any]:
        return {**super().describe(field, value), "rows": 4}


class EmailWidget(FieldWidget):
    input_type = "email"

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
            return f"{field.label} must be a valid email address"
        return None


class UrlWidget(FieldWidget):
    input_type = "url"

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return f"{field.label} must be a valid URL"
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            return f"{field.label} must be a valid URL"
        return None


class NumberWidget(FieldWidget):
    input_type = "number"

    def coerce(self, raw: Any) -> Any:
        if isinstance(raw, str):
            text = raw.strip()
            if not text:
                return None
            try:
                number = float(text)
            except ValueError:
                return raw
            return int(number) if number.is_integer() and "." not in text else number
        return raw

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"{field.label} must be a number"
        if not math.isfinite(value):
            return f"{field.label} must be a finite number"
        return None

    def measure(self, value: Any) -> Optional[float]:
        return float(value)

    def describe(self, field: ConfigField, value: Any) -> Dict[str, Any]:
        descriptor = super().describe(field, value)
        if field.validation:
            descriptor["min"] = field.validation.min
            descriptor["max"] = field.validation.max
        return descriptor


class DurationWidget(NumberWidget):
    """Non-negative amount of time (unit chosen by a sibling field)."""

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        error = super().check(field, value)
        if error:
            return error
        if value < 0:
            return f"{field.label} cannot be negative"
        return None


class ChoiceWidget(FieldWidget):
    """Single choice among the field options."""

    control = "select"

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        allowed = {o.value for o in field.options}
        if allowed and value not in allowed:
            return f"{field.label} has an invalid option: {value}"
        return None

    def describe(self, field: ConfigField, value: Any) -> Dict[str, Any]:
        descriptor = super().describe(field, value)
        descriptor["options"] = [{"value": o.value, "label": o.label} for o in field.options]
        return descriptor


class RadioWidget(ChoiceWidget):
    control = "radio"


class MultiChoiceWidget(ChoiceWidget):
    control = "multiselect"

    def coerce(self, raw: Any) -> Any:
        if isinstance(raw, (tuple, set)):
            return list(raw)
        return raw

    def is_empty(self, value: Any) -> bool:
        return value is None or value == []

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, list):
            return f"{field.label} must be a list"
        allowed = {o.value for o in field.options}
        invalid = [v for v in value if allowed and v not in allowed]
        if invalid:
            return f"{field.label} has invalid options: {', '.join(map(str, invalid))}"
        return None

    def measure(self, value: Any) -> Optional[float]:
        return float(len(value))


class ToggleWidget(FieldWidget):
    """Boolean switch; False is a value, never 'empty'."""

    control = "switch"

    def coerce(self, raw: Any) -> Any:
        if isinstance(raw, str):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        return bool(raw) if raw is not None else None

    def is_empty(self, value: Any) -> bool:
        return value is None

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, bool):
            return f"{field.label} must be on or off"
        return None


class CheckboxWidget(ToggleWidget):
    control = "checkbox"


class TemporalWidget(FieldWidget):
    """ISO-8601 date, time or datetime text."""

    parser: Any = datetime.fromisoformat

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return f"{field.label} must be a {self.input_type}"
        try:
            self.parser(value)
        except ValueError:
            return f"{field.label} must be a valid {self.input_type}"
        return None


class DateWidget(TemporalWidget):
    input_type = "date"
    parser = date.fromisoformat


class TimeWidget(TemporalWidget):
    input_type = "time"
    parser = time.fromisoformat


class DateTimeWidget(TemporalWidget):
    input_type = "datetime-local"
    parser = datetime.fromisoformat


class ColorWidget(FieldWidget):
    input_type = "color"

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, str) or not COLOR_PATTERN.match(value):
            return f"{field.label} must be a hex color"
        return None


class FileWidget(FieldWidget):
    """Reference to an uploaded file (URL or storage key)."""

    input_type = "file"


class JsonWidget(FieldWidget):
    """JSON document; unparseable text is kept and flagged."""

    control = "code"

    def coerce(self, raw: Any) -> Any:
        if isinstance(raw, str) and raw.strip():
            try:
                return json.loads(raw)
            except ValueError:
                return raw
        return raw

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if isinstance(value, str):
            return f"{field.label} is not valid JSON"
        return None

    def describe(self, field: ConfigField, value: Any) -> Dict[str, Any]:
        descriptor = super().describe(field, value)
        if value is not None and not isinstance(value, str):
            descriptor["value"] = json.dumps(value, indent=2)
        descriptor.update(language="json", rows=6)
        return descriptor


class CodeWidget(FieldWidget):
    control = "code"

    def describe(self, field: ConfigField, value: Any) -> Dict[str, Any]:
        return {**super().describe(field, value), "language": "javascript", "rows": 6}


class RegexWidget(FieldWidget):
    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return f"{field.label} must be text"
        try:
            re.compile(value)
        except re.error as e:
            return f"{field.label} is not a valid regular expression ({e})"
        return None


class CronWidget(FieldWidget):
    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, str) or not croniter.is_valid(value):
            return f"{field.label} is not a valid cron expression"
        return None


class KeyValueWidget(FieldWidget):
    """String-to-string mapping, edited as rows of pairs."""

    control = "key-value"

    def coerce(self, raw: Any) -> Any:
        if isinstance(raw, list):
            return {str(k): v for k, v in raw}
        return raw

    def is_empty(self, value: Any) -> bool:
        return value is None or value == {}

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, dict):
            return f"{field.label} must be a set of key/value pairs"
        if any(not str(k).strip() for k in value):
            return f"{field.label} has an empty key"
        return None

    def measure(self, value: Any) -> Optional[float]:
        return float(len(value))


class ArrayWidget(FieldWidget):
    """Ordered list of items."""

    control = "list"

    def coerce(self, raw: Any) -> Any:
        if isinstance(raw, tuple):
            return list(raw)
        return raw

    def is_empty(self, value: Any) -> bool:
        return value is None or value == []

    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, list):
            return f"{field.label} must be a list"
        return None

    def measure(self, value: Any) -> Optional[float]:
        return float(len(value))


class ObjectWidget(JsonWidget):
    def check(self, field: ConfigField, value: Any) -> Optional[str]:
        if not isinstance(value, dict):
            return f"{field.label} must be an object"
        return None


WIDGETS: Dict[FieldType, FieldWidget] = {
    FieldType.TEXT: TextWidget(),
    FieldType.TEXTAREA: TextAreaWidget(),
    FieldType.NUMBER: NumberWidget(),
    FieldType.EMAIL: EmailWidget(),
    FieldType.URL: UrlWidget(),
    FieldType.PASSWORD: PasswordWidget(),
    FieldType.SELECT: ChoiceWidget(),
    FieldType.MULTISELECT: MultiChoiceWidget(),
    FieldType.RADIO: RadioWidget(),
    FieldType.CHECKBOX: CheckboxWidget(),
    FieldType.SWITCH: ToggleWidget(),
    FieldType.DATE: DateWidget(),
    FieldType.TIME: TimeWidget(),
    FieldType.DATETIME: DateTimeWidget(),
    FieldType.COLOR: ColorWidget(),
    FieldType.FILE: FileWidget(),
    FieldType.JSON: JsonWidget(),
    FieldType.CODE: CodeWidget(),
    FieldType.REGEX: RegexWidget(),
    FieldType.CRON: CronWidget(),
    FieldType.DURATION: DurationWidget(),
    FieldType.KEY_VALUE: KeyValueWidget(),
    FieldType.ARRAY: ArrayWidget(),
    FieldType.OBJECT: ObjectWidget(),
}

_missing: List[FieldType] = [t for t in FieldType if t not in WIDGETS]
if _missing:
    raise RuntimeError(f"No widget for field types: {', '.join(t.value for t in _missing)}")


def widget_for(field_type: FieldType) -> FieldWidget:
    """Widget handling a field type."""
    return WIDGETS[FieldType(field_type)]
