from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional

from formbridge.exceptions import ConfigurationError, ValidationError
from formbridge.forms.fields import WIDGETS, FormField

if TYPE_CHECKING:
    from formbridge.controllers.model_form import ModelFormController
    from formbridge.data.model import DataModel

logger = logging.getLogger(__name__)


def unique_name(existing: Mapping[str, Any], base: str) -> str:
    if base not in existing:
        return base
    n = 2
    while f"{base}_{n}" in existing:
        n += 1
    return f"{base}_{n}"


class Form:
    def __init__(self, name: str = "form", model: Optional["DataModel"] = None):
        self.name = name
        self.model = model
        self.controller: Optional["ModelFormController"] = None
        self.elements: Dict[str, FormField] = {}
        self.errors: Dict[str, str] = {}
        self._hooks: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def add_field(
        self, widget_type: str, name: str, caption: Optional[str] = None
    ) -> FormField:
        cls = WIDGETS.get(widget_type)
        if cls is None:
            raise ConfigurationError(
                f"Unknown form widget: {widget_type}", config_key="widget", field=name
            )
        if name in self.elements:
            raise ConfigurationError(f"Duplicate form field: {name}", field=name)
        field = cls(self, name, caption)
        self.elements[name] = field
        return field

    def get(self, name: Optional[str] = None) -> Any:
        if name is None:
            return {key: field.get() for key, field in self.elements.items()}
        return self.elements[name].get()

    def set(self, name: str, value: Any) -> "Form":
        self.elements[name].set(value)
        return self

    def add_hook(self, spot: str, callback: Callable[..., Any]) -> "Form":
        self._hooks[spot].append(callback)
        return self

    def hook(self, spot: str, *args: Any) -> None:
        for callback in list(self._hooks.get(spot, ())):
            callback(self, *args)

    def set_model(
        self, model: "DataModel", fields: Any = None
    ) -> "ModelFormController":
        """Bind ``model`` to this form and import ``fields`` from it."""
        from formbridge.controllers.model_form import ModelFormController

        self.model = model
        controller = ModelFormController(self)
        controller.set_actual_fields(fields)
        self.controller = controller
        return controller

    def submit(self, data: Mapping[str, Any]) -> "Form":
        """
        Load posted values, validate, then fire the ``update`` hooks.

        Raises ValidationError (with ``details["errors"]``) when any field
        fails; in that case no hook runs.
        """
        errors: Dict[str, str] = {}
        for name, field in self.elements.items():
            if field.read_only or name not in data:
                continue
            try:
                field.set(field.load_post(data[name]))
            except (TypeError, ValueError) as exc:
                logger.debug("Field %s rejected %r: %s", name, data[name], exc)
                errors[name] = f"{field.caption} has an invalid value"

        for name, field in self.elements.items():
            if name in errors:
                continue
            messages = field.validate()
            if messages:
                errors[name] = messages[0]

        self.errors = errors
        if errors:
            raise ValidationError(
                f"Form '{self.name}' contains invalid fields", errors=errors
            )
        self.hook("update")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "model": getattr(self.model, "name", None),
            "fields": [field.to_dict() for field in self.elements.values()],
            "errors": dict(self.errors),
        }
