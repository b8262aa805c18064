from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence, Union

if TYPE_CHECKING:
    from formbridge.data.model import DataModel


class ModelField:
    """
    One field of a data model, as the form layer sees it.

    UI metadata lives in ``ui``:
    caption, hint, placeholder, display, valueList, editable, hidden.
    """

    def __init__(
        self,
        short_name: str,
        *,
        type: str = "string",
        ui: Optional[Mapping[str, Any]] = None,
        enum: Optional[Sequence[Any]] = None,
        mandatory: Union[bool, str] = False,
        read_only: bool = False,
        never_persist: bool = False,
        system: bool = False,
        owner: Optional["DataModel"] = None,
    ) -> None:
        self.short_name = short_name
        self.type = type or "string"
        self.ui: Dict[str, Any] = dict(ui or {})
        self.enum = list(enum) if enum is not None else None
        self.mandatory = mandatory
        self.read_only = read_only
        self.never_persist = never_persist
        self.system = system
        self.owner = owner

    def is_editable(self) -> bool:
        if "editable" in self.ui:
            return bool(self.ui["editable"])
        return not (self.read_only or self.never_persist or self.system)

    def is_hidden(self) -> bool:
        return bool(self.ui.get("hidden", False))

    def get(self) -> Any:
        return self.owner.get(self.short_name)

    def set(self, value: Any) -> "ModelField":
        self.owner.set(self.short_name, value)
        return self

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ModelField {self.short_name} type={self.type}>"
