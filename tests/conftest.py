import pandas as pd
import pytest
from openpyxl import Workbook
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sheetdesk.core.config import settings
from sheetdesk.core.db import get_db, make_engine
from sheetdesk.core.init_db import init_db
from sheetdesk.main import app


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", path)
    return path


@pytest.fixture
def client(session_factory, upload_dir):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_workbook(tmp_path):
    """Write rows to an .xlsx file and return its path."""
    def _make(rows, name="people.xlsx", sheet_name="People", columns=None):
        path = tmp_path / name
        pd.DataFrame(rows, columns=columns).to_excel(path, sheet_name=sheet_name, index=False)
        return path

    return _make


@pytest.fixture
def write_sheet(tmp_path):
    """Write raw cell rows (header row first) to an .xlsx file with openpyxl."""
    def _write(cells, name="raw.xlsx", sheet_name="Sheet1"):
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_name
        for row in cells:
            ws.append(row)
        path = tmp_path / name
        wb.save(path)
        return path

    return _write


@pytest.fixture
def people_rows():
    return [{"name": "Ann", "age": 30}, {"name": "Bo", "age": 25}]
