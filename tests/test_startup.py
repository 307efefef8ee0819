# tests/test_startup.py
import logging

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from dashboard_api import main


def test_unreachable_store_at_startup_is_logged_not_fatal(monkeypatch, caplog):
    def fail_init_db():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(main, "init_db", fail_init_db)

    with caplog.at_level(logging.ERROR, logger="dashboard_api"):
        with TestClient(main.app) as c:
            response = c.post("/api/logout")

    assert response.status_code == 200
    assert response.json() == {"message": "Logout successful"}
    assert any(
        "Transaction store connection failed" in record.getMessage()
        for record in caplog.records
    )

def test_reachable_store_at_startup_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(main, "init_db", lambda: None)

    with caplog.at_level(logging.INFO, logger="dashboard_api"):
        with TestClient(main.app):
            pass

    assert any(
        "Connected to the transaction store" in record.getMessage()
        for record in caplog.records
    )
