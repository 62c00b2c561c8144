import io
import json

import pandas as pd
import pytest

from watersurvey.ingest.pipeline import import_sheet
from watersurvey.models import SurveyResponse

SHEET_CSV = (
    "Timestamp,Respondent Type,Locality,Current Brand,Pain Points,Monthly Spend,Mobile\n"
    "2026-02-01,Office,Ring Road,Bisleri,\"Leakage, High price\",300,09876500000\n"
    ",,,,,,\n"
    "2026-02-02,,Ring Road,Kinley,,150,\n"
)


def test_import_sheet_maps_mirror_columns(app, tmp_path):
    p = tmp_path / "export.csv"
    p.write_text(SHEET_CSV, encoding="utf-8")

    assert import_sheet(p) == 2
    rows = sorted(SurveyResponse.list_recent(), key=lambda r: r["id"])
    assert rows[0]["area"] == "Ring Road"
    assert rows[0]["type"] == "Office"
    assert rows[0]["monthly_20l"] == "300"
    # leading zero survives, cells are read as text
    assert rows[0]["mobile"] == "09876500000"
    assert json.loads(rows[0]["problems"]) == ["Leakage", "High price"]
    assert rows[1]["type"] == "Household"
    assert rows[1]["problems"] == "[]"


def test_import_sheet_rejects_unknown_layout(app, tmp_path):
    p = tmp_path / "other.csv"
    p.write_text("foo,bar\n1,2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        import_sheet(p)


def test_upload_endpoint(client):
    resp = client.post(
        "/api/upload",
        data={"file": (io.BytesIO(SHEET_CSV.encode("utf-8")), "sheet.csv")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "ingested", "rows": 2}


def test_upload_non_ascii_filename(client, app, tmp_path):
    resp = client.post(
        "/api/upload",
        data={"file": (io.BytesIO(SHEET_CSV.encode("utf-8")), "सर्वे.csv")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "ingested", "rows": 2}
    # temp copy is removed after ingest
    assert list((tmp_path / "uploads").iterdir()) == []


def test_upload_rejects_bad_extension(client):
    resp = client.post(
        "/api/upload",
        data={"file": (io.BytesIO(b"x"), "sheet.txt")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400


def test_export_csv(client):
    client.post("/api/survey", json={"name": "Meena", "area": "Bazaar", "currentBrand": "Aquafina"})
    resp = client.get("/api/export?format=csv")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    df = pd.read_csv(io.StringIO(resp.get_data(as_text=True)))
    assert list(df["name"]) == ["Meena"]
    assert "created_at" in df.columns


def test_export_xlsx(client):
    client.post("/api/survey", json={"name": "Meena"})
    resp = client.get("/api/export")
    assert resp.status_code == 200
    df = pd.read_excel(io.BytesIO(resp.data), engine="openpyxl")
    assert df.loc[0, "name"] == "Meena"


def test_export_empty_store(client):
    resp = client.get("/api/export")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "No data to export"}
