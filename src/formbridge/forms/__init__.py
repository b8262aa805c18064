from formbridge.forms.fields import (
    WIDGETS,
    Checkbox,
    DropDown,
    FormField,
    ValueList,
    register_widget,
)
from formbridge.forms.form import Form, unique_name

__all__ = [
    "WIDGETS",
    "Checkbox",
    "DropDown",
    "Form",
    "FormField",
    "ValueList",
    "register_widget",
    "unique_name",
]
