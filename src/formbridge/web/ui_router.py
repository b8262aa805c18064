from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from formbridge.config import get_settings
from formbridge.context import get_page_context
from formbridge.data.model import SqlaDataModel
from formbridge.database import get_db
from formbridge.forms import Form
from formbridge.menu import menu_from_config
from formbridge.web.registry import get_form_model

ui_router = APIRouter(prefix="/ui", tags=["UI"])


def _bind_form(db: Session, model_name: str) -> Tuple[Form, SqlaDataModel]:
    entry = get_form_model(model_name)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Unknown form model '{model_name}'")
    mapped_cls, only_fields = entry
    model = SqlaDataModel(db, mapped_cls, name=model_name, only_fields=only_fields)
    form = Form(name=f"{model_name}_form")
    form.set_model(model)
    return form, model


def _submit(
    db: Session, form: Form, model: SqlaDataModel, payload: Dict[str, Any]
) -> Dict[str, Any]:
    try:
        form.submit(payload)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return jsonable_encoder({"id": model.id, **form.to_dict()})


@ui_router.get("/forms/{model_name}")
def get_blank_form(model_name: str, db: Session = Depends(get_db)):
    """Form definition for a new record."""
    form, _model = _bind_form(db, model_name)
    return jsonable_encoder(form.to_dict())


@ui_router.get("/forms/{model_name}/{record_id}")
def get_record_form(model_name: str, record_id: str, db: Session = Depends(get_db)):
    """Form definition filled with the values of one record."""
    form, model = _bind_form(db, model_name)
    model.load(record_id)
    return jsonable_encoder({"id": model.id, **form.to_dict()})


@ui_router.post("/forms/{model_name}")
def create_record(
    model_name: str,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    form, model = _bind_form(db, model_name)
    return _submit(db, form, model, payload)


@ui_router.post("/forms/{model_name}/{record_id}")
def update_record(
    model_name: str,
    record_id: str,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    form, model = _bind_form(db, model_name)
    model.load(record_id)
    return _submit(db, form, model, payload)


@ui_router.get("/menu", response_class=HTMLResponse)
def get_menu(page: Optional[str] = None):
    settings = get_settings()
    menu = menu_from_config(
        settings.MENU_ITEMS,
        page_context=get_page_context(page),
        app_info={"name": "formbridge"},
    )
    return HTMLResponse(str(menu.render()))
