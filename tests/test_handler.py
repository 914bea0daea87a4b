import sqlite3

import pytest
import requests
from docker.errors import APIError, NotFound

from conftest import FakeEngine
from swarmsvc import db
from swarmsvc.api_models import RemoveRequest, ServiceDescription
from swarmsvc.handler import ServiceHandler
from swarmsvc.settings import settings


def _not_found(ident: str) -> NotFound:
    resp = requests.Response()
    resp.status_code = 404
    return NotFound(f"No such service: {ident}", response=resp, explanation=f"service {ident} not found")


def test_create_returns_engine_id_and_sends_translated_spec(web_description):
    engine = FakeEngine(service_id="abc123")
    handler = ServiceHandler(engine)

    resp = handler.create(ServiceDescription(**web_description))

    assert resp.id == "abc123"
    assert len(engine.created) == 1
    spec = engine.created[0]
    assert spec.name == "web"
    assert spec.labels[settings.role_label_key] == "user"

    ev = db.latest_events(1)[0]
    assert ev["level"] == "INFO"
    assert ev["service_id"] == "abc123"
    assert "web" in ev["message"]


def test_create_passes_engine_error_through_unchanged(web_description):
    err = APIError("name conflicts with an existing object")
    handler = ServiceHandler(FakeEngine(error=err))

    with pytest.raises(APIError) as excinfo:
        handler.create(ServiceDescription(**web_description))

    assert excinfo.value is err
    assert db.latest_events(1)[0]["level"] == "ERROR"


def test_remove_echoes_exact_identifier():
    engine = FakeEngine()
    handler = ServiceHandler(engine)

    resp = handler.remove(RemoveRequest(ident=" svc 123 "))

    assert engine.removed == [" svc 123 "]
    assert resp.ident == " svc 123 "
    assert db.latest_events(1)[0]["service_id"] == " svc 123 "


def test_remove_not_found_returns_engine_error():
    err = _not_found("svc123")
    engine = FakeEngine(error=err)
    handler = ServiceHandler(engine)

    with pytest.raises(NotFound) as excinfo:
        handler.remove(RemoveRequest(ident="svc123"))

    assert excinfo.value is err
    assert engine.removed == ["svc123"]


def _locked_db():
    raise sqlite3.OperationalError("database is locked")


def test_event_log_failure_keeps_engine_error(monkeypatch, web_description):
    monkeypatch.setattr(db, "connect", _locked_db)
    err = APIError("name conflicts with an existing object")
    handler = ServiceHandler(FakeEngine(error=err))

    with pytest.raises(APIError) as excinfo:
        handler.create(ServiceDescription(**web_description))
    assert excinfo.value is err

    with pytest.raises(APIError) as excinfo:
        handler.remove(RemoveRequest(ident="svc123"))
    assert excinfo.value is err


def test_event_log_failure_still_returns_created_id(monkeypatch, web_description):
    monkeypatch.setattr(db, "connect", _locked_db)
    engine = FakeEngine(service_id="abc123")
    handler = ServiceHandler(engine)

    assert handler.create(ServiceDescription(**web_description)).id == "abc123"
    assert handler.remove(RemoveRequest(ident="abc123")).ident == "abc123"
    assert len(engine.created) == 1
