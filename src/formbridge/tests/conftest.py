from types import SimpleNamespace

import pytest
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, sessionmaker

from formbridge.database import create_db_engine

TestBase = declarative_base()


class Country(TestBase):
    __tablename__ = "countries"

    id = Column(Integer, primary_key=True)
    name = Column(String(64), nullable=False)


class Ticket(TestBase):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True)
    title = Column(
        String(128),
        nullable=False,
        info={
            "ui": {
                "caption": "Subject",
                "placeholder": "Short summary",
                "hint": "Shown in ticket lists",
            }
        },
    )
    body = Column(Text)
    status = Column(String(16), info={"type": "list", "enum": ["open", "closed"]})
    kind = Column(Enum("bug", "feature", name="ticket_kind"), default="bug")
    priority = Column(Integer, default=1)
    amount = Column(Numeric(10, 2), info={"type": "money"})
    due = Column(Date)
    urgent = Column(Boolean, default=False)
    flag = Column(String(1), default="N", info={"type": "boolean", "enum": ["N", "Y"]})
    country_id = Column(Integer, ForeignKey("countries.id"))
    secret = Column(String(64), info={"type": "password"})
    notes = Column(Text, info={"ui": {"display": {"form": "Line"}}})
    internal = Column(String(32), info={"ui": {"hidden": True}})
    created_by = Column(String(32), info={"read_only": True})


@pytest.fixture
def models():
    return SimpleNamespace(Ticket=Ticket, Country=Country)


@pytest.fixture
def engine():
    eng = create_db_engine("sqlite:///:memory:")
    TestBase.metadata.create_all(bind=eng)
    yield eng
    TestBase.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session(engine):
    factory = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )
    db = factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def country(session):
    row = Country(id=1, name="Ruritania")
    session.add_all([row, Country(id=2, name="Freedonia")])
    session.commit()
    return row


@pytest.fixture
def ticket(session, country):
    row = Ticket(
        id=10,
        title="Printer on fire",
        body="Smoke everywhere",
        status="open",
        kind="bug",
        priority=3,
        flag="Y",
        country_id=country.id,
        internal="x",
        created_by="alice",
    )
    session.add(row)
    session.commit()
    return row
