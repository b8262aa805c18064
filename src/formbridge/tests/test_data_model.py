import pytest

from formbridge.data.model import DataModel, SqlaDataModel
from formbridge.exceptions import RecordNotFoundError


def test_sqla_model_satisfies_protocol(session, models):
    assert isinstance(SqlaDataModel(session, models.Ticket), DataModel)
    assert not isinstance(object(), DataModel)


def test_column_types_become_type_tags(session, models):
    elements = SqlaDataModel(session, models.Ticket).elements

    assert elements["id"].type == "integer"
    assert elements["title"].type == "string"
    assert elements["body"].type == "text"
    assert elements["kind"].type == "list"
    assert elements["priority"].type == "integer"
    assert elements["due"].type == "date"
    assert elements["urgent"].type == "boolean"
    # info overrides the derived tag
    assert elements["amount"].type == "money"
    assert elements["secret"].type == "password"
    assert elements["flag"].type == "boolean"


def test_enum_column_exposes_values(session, models):
    elements = SqlaDataModel(session, models.Ticket).elements

    assert elements["kind"].enum == ["bug", "feature"]
    assert elements["status"].enum == ["open", "closed"]
    assert elements["body"].enum is None


def test_flags_derived_from_columns(session, models):
    elements = SqlaDataModel(session, models.Ticket).elements

    assert elements["id"].system is True
    assert not elements["id"].is_editable()
    assert elements["title"].mandatory is True
    assert elements["kind"].mandatory is False  # has a default
    assert elements["body"].mandatory is False
    assert not elements["created_by"].is_editable()
    assert elements["internal"].is_hidden()
    assert elements["title"].ui["caption"] == "Subject"


def test_ui_editable_overrides_flags(session, models):
    model = SqlaDataModel(session, models.Ticket)
    field = model.elements["created_by"]
    field.ui["editable"] = True
    assert field.is_editable()


def test_has_ref_only_for_foreign_keys(session, models):
    model = SqlaDataModel(session, models.Ticket)

    ref = model.has_ref("country_id")
    assert ref is not None
    assert ref.get_model().mapped_cls is models.Country
    assert model.has_ref("title") is None


def test_title_list(session, models, country):
    assert SqlaDataModel(session, models.Country).get_title_list() == {
        1: "Ruritania",
        2: "Freedonia",
    }


def test_load_fires_after_load(session, models, ticket):
    model = SqlaDataModel(session, models.Ticket)
    seen = []
    model.add_hook("after_load", lambda m: seen.append(m.get("title")))

    model.load("10")

    assert model.loaded
    assert model.id == 10
    assert seen == ["Printer on fire"]


def test_load_missing_record(session, models):
    model = SqlaDataModel(session, models.Ticket)

    with pytest.raises(RecordNotFoundError) as exc_info:
        model.load(404)
    assert exc_info.value.status_code == 404

    with pytest.raises(RecordNotFoundError):
        model.load("abc")


def test_save_flushes_and_runs_hooks(session, models):
    model = SqlaDataModel(session, models.Country)
    calls = []
    model.add_hook("before_save", lambda m: calls.append("before"))
    model.add_hook("after_save", lambda m: calls.append(("after", m.id)))

    model.set("name", "Grand Fenwick").save()

    assert calls == ["before", ("after", model.id)]
    assert model.id is not None
    assert model.elements["name"].get() == "Grand Fenwick"
