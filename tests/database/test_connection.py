from __future__ import annotations

import mysql.connector
from mysql.connector.constants import ClientFlag

from hrm_system.database.connection import DBConfig, DatabaseConnection


def test_connect_reports_matched_rows(monkeypatch):
    captured: dict = {}

    def fake_connect(**kwargs):
        captured.update(kwargs)
        return object()

    monkeypatch.setattr(mysql.connector, "connect", fake_connect)
    conn = DatabaseConnection(DBConfig.from_dict({"database": "hrm_test_db", "port": "3307"}))

    conn.connect()

    assert ClientFlag.FOUND_ROWS in captured["client_flags"]
    assert (captured["database"], captured["port"]) == ("hrm_test_db", 3307)


def test_from_dict_defaults():
    cfg = DBConfig.from_dict({})
    assert (cfg.host, cfg.port, cfg.user, cfg.database) == ("localhost", 3306, "root", "hrm_db")
