"""
Form widgets.

Each widget knows how to turn a posted raw value into a Python value
(``load_post``) and how to check itself (``validate``). Widget classes are
looked up by their ``widget`` name through ``WIDGETS``.
"""

from __future__ import annotations

import json
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Type, Union

if TYPE_CHECKING:
    from formbridge.data.model import DataModel
    from formbridge.forms.form import Form

_TRUTHY = {"1", "true", "on", "yes", "y"}


def humanize(name: str) -> str:
    return name.replace("_", " ").strip().title()


class FormField:
    widget = "Line"
    read_only = False

    def __init__(self, owner: "Form", name: str, caption: Optional[str] = None):
        self.owner = owner
        self.name = name
        self.caption = caption or humanize(name)
        self.value: Any = None
        self.attrs: Dict[str, Any] = {}
        self.hint: Optional[str] = None
        self.mandatory: Union[bool, str] = False
        self.source_model: Optional["DataModel"] = None
        self.value_list: Dict[Any, Any] = {}

    def set(self, value: Any) -> "FormField":
        self.value = value
        return self

    def get(self) -> Any:
        return self.value

    def set_attr(self, key: str, value: Any) -> "FormField":
        self.attrs[key] = value
        return self

    def set_field_hint(self, text: str) -> "FormField":
        self.hint = text
        return self

    def validate_not_null(self, message: Union[bool, str] = True) -> "FormField":
        self.mandatory = message or True
        return self

    def set_model(self, model: "DataModel") -> "FormField":
        self.source_model = model
        return self

    def set_value_list(self, values: Mapping[Any, Any]) -> "FormField":
        self.value_list = dict(values)
        return self

    def load_post(self, raw: Any) -> Any:
        return raw

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""

    def validate(self) -> List[str]:
        if self.mandatory and self.is_empty(self.value):
            if isinstance(self.mandatory, str):
                return [self.mandatory]
            return [f"{self.caption} must not be empty"]
        return []

    def display_value(self) -> Any:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "widget": self.widget,
            "caption": self.caption,
            "value": self.display_value(),
            "required": bool(self.mandatory),
            "attrs": dict(self.attrs),
            "hint": self.hint,
        }


def _blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


class Line(FormField):
    widget = "Line"


class Text(FormField):
    widget = "Text"


class Password(FormField):
    widget = "Password"

    def display_value(self) -> Any:
        return None


class Readonly(FormField):
    widget = "Readonly"
    read_only = True


class Number(FormField):
    widget = "Number"

    def load_post(self, raw: Any) -> Any:
        if _blank(raw):
            return None
        if isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool):
            return raw
        text = str(raw).strip()
        try:
            return int(text)
        except ValueError:
            return float(text)


class Money(FormField):
    widget = "Money"

    def load_post(self, raw: Any) -> Any:
        if _blank(raw):
            return None
        try:
            return Decimal(str(raw).strip())
        except InvalidOperation as exc:
            raise ValueError(f"not a money amount: {raw!r}") from exc


class DatePicker(FormField):
    widget = "DatePicker"

    def load_post(self, raw: Any) -> Any:
        if _blank(raw):
            return None
        if isinstance(raw, date):
            return raw
        return date.fromisoformat(str(raw).strip())


class DateTimePicker(FormField):
    widget = "DateTimePicker"

    def load_post(self, raw: Any) -> Any:
        if _blank(raw):
            return None
        if isinstance(raw, datetime):
            return raw
        return datetime.fromisoformat(str(raw).strip())


class Time(FormField):
    widget = "Time"

    def load_post(self, raw: Any) -> Any:
        if _blank(raw):
            return None
        if isinstance(raw, time):
            return raw
        return time.fromisoformat(str(raw).strip())


class Checkbox(FormField):
    widget = "Checkbox"

    def __init__(self, owner: "Form", name: str, caption: Optional[str] = None):
        super().__init__(owner, name, caption)
        self.checked_value: Any = True
        self.unchecked_value: Any = False

    def set_value_list(self, values: Mapping[Any, Any]) -> "Checkbox":
        """First key is the checked value, second the unchecked one."""
        keys = list(values)
        if keys:
            self.checked_value = keys[0]
        if len(keys) > 1:
            self.unchecked_value = keys[1]
        return self

    def load_post(self, raw: Any) -> Any:
        if raw == self.checked_value or raw is True:
            return self.checked_value
        if isinstance(raw, str) and raw.strip().lower() in _TRUTHY:
            return self.checked_value
        return self.unchecked_value

    def is_empty(self, value: Any) -> bool:
        return value is None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["checked_value"] = self.checked_value
        data["unchecked_value"] = self.unchecked_value
        return data


class Image(FormField):
    widget = "Image"


class Upload(FormField):
    widget = "Upload"


class JSON(FormField):
    widget = "JSON"

    def load_post(self, raw: Any) -> Any:
        if _blank(raw):
            return None
        if isinstance(raw, str):
            return json.loads(raw)
        return raw


class JSONArray(JSON):
    widget = "JSONArray"

    def load_post(self, raw: Any) -> Any:
        value = super().load_post(raw)
        if value is not None and not isinstance(value, list):
            raise ValueError("expected a JSON array")
        return value


class ValueList(FormField):
    """Base for widgets offering a fixed set of options."""

    def __init__(self, owner: "Form", name: str, caption: Optional[str] = None):
        super().__init__(owner, name, caption)
        self.empty_text: Optional[str] = None

    def set_empty_text(self, text: str) -> "ValueList":
        self.empty_text = text
        return self

    def set_model(self, model: "DataModel") -> "ValueList":
        super().set_model(model)
        self.value_list = dict(model.get_title_list())
        return self

    def load_post(self, raw: Any) -> Any:
        if _blank(raw):
            return None
        if not self.value_list or raw in self.value_list:
            return raw
        # Posted keys arrive as strings; match them against typed keys.
        for key in self.value_list:
            if str(key) == str(raw):
                return key
        raise ValueError(f"{raw!r} is not one of the options")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["options"] = [
            {"value": key, "label": label} for key, label in self.value_list.items()
        ]
        data["empty_text"] = self.empty_text
        return data


class DropDown(ValueList):
    widget = "DropDown"


class Radio(ValueList):
    widget = "Radio"


WIDGETS: Dict[str, Type[FormField]] = {
    cls.widget: cls
    for cls in (
        Line,
        Text,
        Number,
        Money,
        DatePicker,
        DateTimePicker,
        Time,
        Checkbox,
        Readonly,
        DropDown,
        Password,
        Radio,
        Image,
        Upload,
        JSONArray,
        JSON,
    )
}


def register_widget(cls: Type[FormField]) -> Type[FormField]:
    """Decorator to make a custom widget available to ``Form.add_field``."""
    WIDGETS[cls.widget] = cls
    return cls
