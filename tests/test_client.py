import io
from unittest.mock import MagicMock

import pytest
import requests

from sheetdesk.client.api_client import ClientError, SheetDeskClient
from sheetdesk.client.cli import build_parser, main, run


def fake_response(status=200, body=None):
    resp = MagicMock()
    resp.ok = 200 <= status < 300
    resp.status_code = status
    resp.json.return_value = body
    resp.text = str(body)
    return resp


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def api(session):
    return SheetDeskClient(base_url="http://api.test/", session=session)


def test_fetch_rows_calls_rows_endpoint(api, session):
    session.request.return_value = fake_response(body=[{"id": 1, "name": "Ann"}])

    rows = api.fetch_rows(7)

    assert rows == [{"id": 1, "name": "Ann"}]
    session.request.assert_called_once_with(
        "GET", "http://api.test/rows", timeout=api.timeout, params={"dataset_id": 7}
    )


def test_error_carries_status_and_detail(api, session):
    session.request.return_value = fake_response(status=404, body={"detail": "Dataset not found"})

    with pytest.raises(ClientError) as exc:
        api.delete_dataset(9)

    assert exc.value.status_code == 404
    assert str(exc.value) == "Dataset not found"
    assert session.request.call_args[0] == ("DELETE", "http://api.test/datasets/9")


def test_connection_failure_becomes_client_error(api, session):
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(ClientError) as exc:
        api.list_datasets()

    assert exc.value.status_code is None


def test_upload_sends_file_field(api, session, tmp_path):
    path = tmp_path / "people.xlsx"
    path.write_bytes(b"data")
    session.request.return_value = fake_response(body={"dataset_id": 1, "rows_saved": 2, "sheet_name": "S"})

    api.upload(path)

    files = session.request.call_args[1]["files"]
    assert files["file"][0] == "people.xlsx"


def test_cli_show_applies_filters():
    client = MagicMock()
    client.fetch_rows.return_value = [
        {"id": 1, "name": "Ann", "age": 30},
        {"id": 2, "name": "Bo", "age": 25},
    ]
    args = build_parser().parse_args(["show", "3", "--filter", "name=an"])
    out = io.StringIO()

    assert run(args, client, out=out) == 0

    client.fetch_rows.assert_called_once_with(3)
    text = out.getvalue()
    assert "Ann" in text
    assert "Bo" not in text
    assert "Rows: 1" in text


def test_cli_list_prints_datasets():
    client = MagicMock()
    client.list_datasets.return_value = [
        {"id": 2, "originalname": "b.xlsx", "uploaded_at": "2024-01-02T00:00:00"},
    ]
    out = io.StringIO()

    run(build_parser().parse_args(["list"]), client, out=out)

    assert "b.xlsx (#2)" in out.getvalue()
    assert "Found 1 dataset(s)." in out.getvalue()


def test_cli_delete_with_yes_skips_prompt():
    client = MagicMock()
    out = io.StringIO()

    run(build_parser().parse_args(["delete", "5", "--yes"]), client, out=out)

    client.delete_dataset.assert_called_once_with(5)


def test_cli_bad_filter_syntax_exits():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["show", "1", "--filter", "nameonly"])


def test_cli_main_reports_client_errors(monkeypatch, capsys):
    def failing_list(self):
        raise ClientError("boom", status_code=500)

    monkeypatch.setattr(SheetDeskClient, "list_datasets", failing_list)

    assert main(["--api-url", "http://api.test", "list"]) == 2
    assert "boom" in capsys.readouterr().err
