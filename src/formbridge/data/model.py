"""
Data model capability and its SQLAlchemy implementation.

The form layer never talks to SQLAlchemy directly; it binds against the
``DataModel`` protocol below. ``SqlaDataModel`` adapts a declaratively mapped
class (plus a session) to that protocol.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Type,
    runtime_checkable,
)

from sqlalchemy import (
    ARRAY,
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    Float,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Text,
    Time,
    inspect,
    select,
)
from sqlalchemy.orm import Session

from formbridge.data.fields import ModelField
from formbridge.exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)

Hook = Callable[..., Any]

# Checked in order; subclasses come before their bases (Enum/Text < String).
COLUMN_TYPE_TAGS: Tuple[Tuple[type, str], ...] = (
    (Boolean, "boolean"),
    (Integer, "integer"),
    (Float, "float"),
    (Numeric, "numeric"),
    (DateTime, "datetime"),
    (Date, "date"),
    (Time, "time"),
    (Enum, "list"),
    (Text, "text"),
    (String, "string"),
    (JSON, "object"),
    (ARRAY, "array"),
    (LargeBinary, "file"),
)

# Column.info keys copied onto ModelField as-is.
_FIELD_INFO_KEYS = ("type", "ui", "enum", "mandatory", "read_only", "never_persist", "system")


class Reference(Protocol):
    def get_model(self) -> "DataModel": ...


@runtime_checkable
class DataModel(Protocol):
    """What a model must expose before a form can bind to it."""

    name: str
    elements: Mapping[str, Any]
    only_fields: Sequence[str]

    def has_element(self, name: str) -> Optional[ModelField]: ...

    def has_ref(self, name: str) -> Optional[Reference]: ...

    def get(self, name: str) -> Any: ...

    def set(self, name: str, value: Any) -> Any: ...

    def get_title_list(self) -> Dict[Any, Any]: ...

    def add_hook(self, spot: str, callback: Hook) -> Any: ...

    def load(self, record_id: Any) -> Any: ...

    def save(self) -> Any: ...


def column_type_tag(column) -> str:
    for sqla_type, tag in COLUMN_TYPE_TAGS:
        if isinstance(column.type, sqla_type):
            return tag
    return "string"


class SqlaReference:
    """Foreign key from a model field to another mapped class."""

    def __init__(self, session: Session, target_cls: Type[Any], field_name: str):
        self.session = session
        self.target_cls = target_cls
        self.field_name = field_name

    def get_model(self) -> "SqlaDataModel":
        return SqlaDataModel(self.session, self.target_cls)


class SqlaDataModel:
    def __init__(
        self,
        session: Session,
        mapped_cls: Type[Any],
        *,
        name: Optional[str] = None,
        only_fields: Optional[Sequence[str]] = None,
    ):
        self.session = session
        self.mapped_cls = mapped_cls
        self.mapper = inspect(mapped_cls)
        self.name = name or self.mapper.local_table.name
        self.only_fields: List[str] = list(only_fields or [])
        self.entity = mapped_cls()
        self.loaded = False
        self._hooks: Dict[str, List[Hook]] = defaultdict(list)
        self._refs: Dict[str, SqlaReference] = {}
        self.elements: Dict[str, ModelField] = self._introspect()

    def _introspect(self) -> Dict[str, ModelField]:
        elements: Dict[str, ModelField] = {}
        for attr in self.mapper.column_attrs:
            column = attr.columns[0]
            opts: Dict[str, Any] = {
                "type": column_type_tag(column),
                "system": bool(column.primary_key),
                "mandatory": (
                    not column.primary_key
                    and not column.nullable
                    and column.default is None
                    and column.server_default is None
                ),
            }
            if isinstance(column.type, Enum):
                opts["enum"] = list(column.type.enums)
            for key in _FIELD_INFO_KEYS:
                if key in column.info:
                    opts[key] = column.info[key]
            elements[attr.key] = ModelField(attr.key, owner=self, **opts)

            target = self._reference_target(column)
            if target is not None:
                self._refs[attr.key] = SqlaReference(self.session, target, attr.key)
        return elements

    def _reference_target(self, column) -> Optional[Type[Any]]:
        for fk in column.foreign_keys:
            for mapper in self.mapper.registry.mappers:
                if mapper.local_table is fk.column.table:
                    return mapper.class_
        return None

    def has_element(self, name: str) -> Optional[ModelField]:
        return self.elements.get(name)

    def has_ref(self, name: str) -> Optional[SqlaReference]:
        return self._refs.get(name)

    def get(self, name: str) -> Any:
        return getattr(self.entity, name)

    def set(self, name: str, value: Any) -> "SqlaDataModel":
        setattr(self.entity, name, value)
        return self

    @property
    def id(self) -> Any:
        identity = inspect(self.entity).identity
        return identity[0] if identity else None

    def add_hook(self, spot: str, callback: Hook) -> "SqlaDataModel":
        self._hooks[spot].append(callback)
        return self

    def hook(self, spot: str, *args: Any) -> None:
        for callback in list(self._hooks.get(spot, ())):
            callback(self, *args)

    def _coerce_id(self, record_id: Any) -> Any:
        # Ids from URLs arrive as strings.
        if not isinstance(record_id, str):
            return record_id
        try:
            python_type = self.mapper.primary_key[0].type.python_type
        except NotImplementedError:
            return record_id
        if python_type is str:
            return record_id
        try:
            return python_type(record_id)
        except (TypeError, ValueError) as exc:
            raise RecordNotFoundError(self.name, record_id) from exc

    def load(self, record_id: Any) -> "SqlaDataModel":
        record_id = self._coerce_id(record_id)
        entity = self.session.get(self.mapped_cls, record_id)
        if entity is None:
            raise RecordNotFoundError(self.name, record_id)
        self.entity = entity
        self.loaded = True
        self.hook("after_load")
        return self

    def save(self) -> "SqlaDataModel":
        self.hook("before_save")
        self.session.add(self.entity)
        self.session.flush()
        self.loaded = True
        logger.info("Saved %s/%s", self.name, self.id)
        self.hook("after_save")
        return self

    def _title_key(self) -> str:
        title = getattr(self.mapped_cls, "__title_field__", None)
        if title:
            return title
        if "name" in self.elements:
            return "name"
        return self._pk_key()

    def _pk_key(self) -> str:
        return self.mapper.get_property_by_column(self.mapper.primary_key[0]).key

    def get_title_list(self) -> Dict[Any, Any]:
        pk_key = self._pk_key()
        title_key = self._title_key()
        rows = (
            self.session.execute(
                select(self.mapped_cls).order_by(getattr(self.mapped_cls, pk_key))
            )
            .scalars()
            .all()
        )
        return {getattr(row, pk_key): getattr(row, title_key) for row in rows}
