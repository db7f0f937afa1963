from __future__ import annotations

import app.database.init_db as init_db_module


def test_sqlite_file_resolves_only_file_backed_urls(tmp_path):
    assert init_db_module.sqlite_file("postgresql+psycopg2://u:p@localhost/clienthub") is None
    assert init_db_module.sqlite_file("sqlite:///:memory:") is None
    assert init_db_module.sqlite_file(f"sqlite:///{tmp_path / 'portal.db'}") == tmp_path / "portal.db"
    assert init_db_module.sqlite_file("sqlite:///./portal.db") == (init_db_module.PROJECT_ROOT / "portal.db").resolve()


def test_backup_moves_existing_file_aside_and_rebinds_engine(tmp_path, monkeypatch):
    db_file = tmp_path / "portal.db"
    db_file.write_bytes(b"stale")
    url = f"sqlite:///{db_file}"
    rebound: list[str] = []
    monkeypatch.setattr(init_db_module.db_module, "reset_engine", rebound.append)

    backup = init_db_module.backup_sqlite_file(url)

    assert backup is not None
    assert backup.parent == tmp_path
    assert backup.name.startswith("portal.backup_")
    assert backup.read_bytes() == b"stale"
    assert not db_file.exists()
    assert rebound == [url]


def test_backup_without_existing_file_only_rebinds(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'missing.db'}"
    rebound: list[str] = []
    monkeypatch.setattr(init_db_module.db_module, "reset_engine", rebound.append)

    assert init_db_module.backup_sqlite_file(url) is None
    assert rebound == [url]
