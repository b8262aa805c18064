"""
Connects a Form with a data model and imports some of its fields.

Once bound, the form's ``update`` hook pushes submitted values back into the
model(s) and saves them, and the model's ``after_load`` hook refreshes the
form whenever a record is loaded.

In most cases binding through the form is enough:

    form.set_model(model)

To import fields from several models into one form:

    ctl = ModelFormController(form)
    ctl.import_fields(person, ["name", "surname"])
    ctl.import_fields(address, ["city"])

``import_field`` adds a single field later on and returns the new form field:

    age = ctl.import_field("age")
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from formbridge.config import get_settings
from formbridge.data.fields import ModelField
from formbridge.data.model import DataModel
from formbridge.exceptions import ConfigurationError
from formbridge.forms.fields import Checkbox, FormField, ValueList
from formbridge.forms.form import Form, unique_name

logger = logging.getLogger(__name__)

# model field type -> form widget
TYPE_ASSOCIATIONS: Mapping[str, str] = MappingProxyType(
    {
        "string": "Line",
        "text": "Text",
        "int": "Number",
        "integer": "Number",
        "numeric": "Number",
        "money": "Money",
        "real": "Number",
        "float": "Number",
        "date": "DatePicker",
        "datetime": "DateTimePicker",
        "daytime": "Time",
        "time": "Time",
        "boolean": "Checkbox",
        "reference": "Readonly",
        "reference_id": "DropDown",
        "password": "Password",
        "list": "DropDown",
        "radio": "Radio",
        "readonly": "Readonly",
        "image": "Image",
        "file": "Upload",
        "array": "JSONArray",
        "struct": "JSON",  # deprecated alias of object
        "object": "JSON",
    }
)

DEFAULT_WIDGET = "Line"

FieldSelection = Union[None, bool, str, Sequence[str]]


class ModelFormController:
    type_associations: Mapping[str, str] = TYPE_ASSOCIATIONS

    def __init__(self, form: Form):
        if not isinstance(form.model, DataModel):
            raise ConfigurationError(
                "ModelFormController requires a form bound to a data model",
                config_key="form.model",
                form=form.name,
            )
        self.owner = form
        self.form = form
        self.model: DataModel = form.model
        # form field name -> model field
        self.field_associations: Dict[str, ModelField] = {}
        self._hooks_set = False

    def set_actual_fields(self, fields: FieldSelection) -> None:
        self.import_fields(self.owner.model, fields)

    def import_fields(
        self, model: DataModel, fields: FieldSelection = None
    ) -> "ModelFormController":
        """
        Import model fields into the form.

        ``fields=False`` associates the model with the form without creating
        any form field. An empty selection imports the model's
        ``only_fields``, or every editable, visible field.
        """
        self.model = model
        self.form = self.owner

        if fields is False:
            return self

        if not fields:
            if model.only_fields:
                fields = list(model.only_fields)
            else:
                fields = [
                    name
                    for name, element in model.elements.items()
                    if isinstance(element, ModelField)
                    and element.is_editable()
                    and not element.is_hidden()
                ]

        if isinstance(fields, str):
            fields = [fields]

        for field in fields:
            self.import_field(field)

        if not self._hooks_set:
            self.owner.add_hook("update", self.update)
            model.add_hook("after_load", self.set_fields)
            self._hooks_set = True
            logger.debug("Bound form %s to model %s", self.owner.name, model.name)

        return self

    def import_field(
        self, field: str, field_name: Optional[str] = None
    ) -> Optional[FormField]:
        """Import one model field; returns the new form field, or None if skipped."""
        model_field = self.model.has_element(field)
        if (
            model_field is None
            or not model_field.is_editable()
            or model_field.is_hidden()
        ):
            logger.debug("Skipping field %s of %s", field, self.model.name)
            return None

        if field_name is None:
            field_name = unique_name(self.owner.elements, model_field.short_name)

        ui = model_field.ui
        form_field = self.owner.add_field(
            self.get_field_type(model_field), field_name, ui.get("caption")
        )
        self.field_associations[field_name] = model_field
        form_field.set(model_field.get())

        reference = self.model.has_ref(model_field.short_name)
        if reference is not None:
            form_field.set_model(reference.get_model())

        if model_field.enum is not None:
            values = ui.get("valueList")
            if values is None:
                values = {value: value for value in model_field.enum}
            elif not isinstance(values, Mapping):
                values = {value: value for value in values}
            if isinstance(form_field, Checkbox):
                values = dict(reversed(list(values.items())))
            form_field.set_value_list(values)

        if model_field.mandatory:
            form_field.validate_not_null(model_field.mandatory)

        placeholder = ui.get("placeholder")
        if placeholder:
            form_field.set_attr("placeholder", placeholder)

        hint = ui.get("hint")
        if hint is not None:
            form_field.set_field_hint(hint)

        if isinstance(form_field, ValueList) and not model_field.mandatory:
            form_field.set_empty_text(get_settings().EMPTY_OPTION_TEXT)

        return form_field

    def set_fields(self, *_args: Any) -> None:
        """Copy model field values into the form."""
        for form_field, model_field in self.field_associations.items():
            self.form.set(form_field, model_field.get())

    def get_fields(self) -> List[DataModel]:
        """Copy form values into the model; returns the distinct models touched."""
        models: Dict[int, DataModel] = {}
        for form_field, model_field in self.field_associations.items():
            model_field.set(self.form.get(form_field))
            owner = model_field.owner
            models.setdefault(id(owner), owner)
        return list(models.values())

    def get_field_type(self, field: ModelField) -> str:
        """
        Form widget for a model field.

        Override in a subclass to handle your own field types.
        """
        display = field.ui.get("display")
        if display is not None:
            if isinstance(display, Mapping) and "form" in display:
                display = display["form"]
            if isinstance(display, str) and display:
                return display

        if self.model.has_ref(field.short_name) is not None:
            return "DropDown"

        if field.enum is not None and field.type != "boolean":
            return "DropDown"

        return self.type_associations.get(field.type, DEFAULT_WIDGET)

    def update(self, form: Form) -> None:
        for model in self.get_fields():
            model.save()
