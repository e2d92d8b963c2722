"""
HTTP API tests: upload, gated analysis, state, timeline and deletion.
S3 and the Groq call are replaced in conftest.
"""
from io import BytesIO

import pytest

from config.config import config


def upload(client, text, file_name="RJS-0123.txt", well_name="RJS-0123"):
    data = {"file": (BytesIO(text.encode("utf-8")), file_name)}
    if well_name:
        data["well_name"] = well_name
    return client.post("/api/reports/upload", data=data, content_type="multipart/form-data")


@pytest.fixture
def uploaded(client, report_text):
    res = upload(client, report_text)
    assert res.status_code == 201
    result = res.get_json()["data"]["uploads"][0]
    ids = [i["id"] for i in result["interventions"]]
    return result["well"]["id"], result["report"]["id"], ids


def analyze(client, intervention_id, **body):
    return client.post(f"/api/interventions/{intervention_id}/analyze", json=body or {})


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"success": True, "message": "", "data": {"status": "ok"}}


class TestUpload:

    def test_upload_segments_report(self, client, uploaded):
        well_id, report_id, ids = uploaded
        assert len(ids) == 3

        wells = client.get("/api/wells").get_json()["data"]
        assert [w["name"] for w in wells] == ["RJS-0123"]

        well = client.get(f"/api/wells/{well_id}").get_json()["data"]
        assert well["reports"][0]["id"] == report_id
        assert well["reports"][0]["interventions_count"] == 3
        assert well["reports"][0]["s3_url"] == f"s3://test-bucket/reports/{well_id}/RJS-0123.txt"

        reports = client.get("/api/reports").get_json()["data"]
        assert reports[0]["well_name"] == "RJS-0123"

    def test_list_reports_limit(self, client, report_text):
        upload(client, report_text)
        upload(client, report_text, file_name="segundo.txt")
        reports = client.get("/api/reports?limit=1").get_json()["data"]
        assert len(reports) == 1
        assert "status" not in reports[0]
        assert len(client.get("/api/reports").get_json()["data"]) == 2

    def test_well_name_defaults_to_file_stem(self, client, report_text):
        res = upload(client, report_text, file_name="Pozo 7.txt", well_name=None)
        assert res.get_json()["data"]["uploads"][0]["well"]["name"] == "Pozo 7"

    def test_same_well_name_accumulates(self, client, report_text):
        upload(client, report_text)
        upload(client, report_text, file_name="segundo.txt")
        wells = client.get("/api/wells").get_json()["data"]
        assert len(wells) == 1

    def test_no_file(self, client):
        res = client.post("/api/reports/upload", data={}, content_type="multipart/form-data")
        assert res.status_code == 400
        assert res.get_json()["success"] is False

    def test_unsupported_extension(self, client):
        res = upload(client, "~VERSION INFORMATION", file_name="perfil.las")
        assert res.status_code == 400

    def test_report_without_text_reports_error(self, client):
        res = upload(client, "   ", file_name="vacio.txt")
        assert res.status_code == 201
        assert "error" in res.get_json()["data"]["uploads"][0]

    def test_segment_without_storing(self, client, report_text):
        res = client.post("/api/reports/segment", json={"text": report_text})
        data = res.get_json()["data"]
        assert data["count"] == 3
        assert data["blocks"][2]["fecha_iso"] == "1983-01-03"
        assert client.get("/api/wells").get_json()["data"] == []

    def test_segment_requires_text(self, client):
        assert client.post("/api/reports/segment", json={}).status_code == 400


class TestAnalysis:

    def test_chronology_gates_analysis(self, client, uploaded, fake_oracle, scenario_answers):
        well_id, _, ids = uploaded
        oracle = fake_oracle(scenario_answers)

        chrono = client.get(f"/api/wells/{well_id}/interventions").get_json()["data"]
        assert chrono["chronology"]["next_index"] == ids[0]
        assert [i["can_analyze"] for i in chrono["interventions"]] == [True, False, False]

        res = analyze(client, ids[2])
        assert res.status_code == 400
        assert oracle.calls == []

    def test_full_history_folds_in_order(self, client, uploaded, fake_oracle, scenario_answers):
        well_id, _, ids = uploaded
        fake_oracle(scenario_answers)

        res = analyze(client, ids[0])
        assert res.status_code == 200
        state = res.get_json()["data"]["state"]
        assert len(state["perforations"]) == 1
        assert state["perforations"][0]["status"] == "open"
        assert state["perforations"][0]["id"] == f"i{ids[0]}-1"
        assert state["last_updated"] == "1982-05-12"

        state = analyze(client, ids[1]).get_json()["data"]["state"]
        assert state["perforations"][0]["status"] == "closed"
        assert state["perforations"][0]["closed_by"] == "squeeze"
        assert len(state["squeezes"]) == 1
        assert state["squeezes"][0]["id"] == f"i{ids[1]}-1"

        state = analyze(client, ids[2]).get_json()["data"]["state"]
        assert len(state["bpps"]) == 1
        assert state["bpps"][0]["depth"] == 639.0
        assert state["bpps"][0]["zone"] == "CPS-01"
        assert len(state["perforations"]) == 1

        stored = client.get(f"/api/wells/{well_id}/state").get_json()["data"]
        assert stored == state

        timeline = client.get(f"/api/wells/{well_id}/timeline").get_json()["data"]["timeline"]
        assert [e["intervention_id"] for e in timeline] == ids
        assert [e["summary"]["open_count"] for e in timeline] == [1, 0, 0]
        assert timeline[2]["summary"]["bpps"] == [639.0]

        chrono = client.get(f"/api/wells/{well_id}/interventions").get_json()["data"]
        assert chrono["chronology"]["next_index"] is None

    def test_reanalysis_keeps_identities(self, client, uploaded, fake_oracle, scenario_answers):
        well_id, _, ids = uploaded
        fake_oracle(scenario_answers)
        for i in ids:
            analyze(client, i)
        before = client.get(f"/api/wells/{well_id}/state").get_json()["data"]

        res = analyze(client, ids[0], detail="breve")
        assert res.status_code == 200
        assert res.get_json()["data"]["intervention"]["mode"] == "breve"
        after = res.get_json()["data"]["state"]
        assert after["perforations"] == before["perforations"]
        assert after["bpps"] == before["bpps"]

    def test_failed_extraction_leaves_state_untouched(self, client, uploaded, fake_oracle, scenario_answers, monkeypatch):
        well_id, _, ids = uploaded
        fake_oracle(scenario_answers)
        analyze(client, ids[0])
        before = client.get(f"/api/wells/{well_id}/state").get_json()["data"]

        from services import extraction_service

        def broken(messages):
            raise RuntimeError("upstream timeout")

        monkeypatch.setattr(extraction_service, "_call_groq", broken)
        res = analyze(client, ids[1])
        assert res.status_code == 500
        assert "upstream timeout" in res.get_json()["message"]

        assert client.get(f"/api/wells/{well_id}/state").get_json()["data"] == before
        failed = client.get(f"/api/interventions/{ids[1]}").get_json()["data"]
        assert failed["status"] == "failed"
        assert failed["error"] == "upstream timeout"
        chrono = client.get(f"/api/wells/{well_id}/interventions").get_json()["data"]
        assert chrono["chronology"]["next_index"] == ids[1]

    def test_missing_api_key_is_a_client_error(self, client, uploaded, monkeypatch):
        _, _, ids = uploaded
        monkeypatch.setattr(config, "GROQ_API_KEY", "")
        res = analyze(client, ids[0])
        assert res.status_code == 400
        assert "GROQ_API_KEY" in res.get_json()["message"]

    def test_rebuild_matches_stored_state(self, client, uploaded, fake_oracle, scenario_answers):
        well_id, _, ids = uploaded
        fake_oracle(scenario_answers)
        analyze(client, ids[0])
        analyze(client, ids[1])
        stored = client.get(f"/api/wells/{well_id}/state").get_json()["data"]
        rebuilt = client.post(f"/api/wells/{well_id}/state/rebuild").get_json()["data"]
        assert rebuilt["perforations"] == stored["perforations"]
        assert rebuilt["squeezes"] == stored["squeezes"]


class TestDeletion:

    def test_delete_report_refolds_well(self, client, uploaded, fake_oracle, scenario_answers):
        well_id, report_id, ids = uploaded
        fake_oracle(scenario_answers)
        analyze(client, ids[0])

        res = client.delete(f"/api/reports/{report_id}")
        assert res.status_code == 200
        assert res.get_json()["data"]["state"]["perforations"] == []
        assert client.get(f"/api/interventions/{ids[0]}").status_code == 404
        assert client.get(f"/api/wells/{well_id}/timeline").get_json()["data"]["timeline"] == []

    def test_delete_well(self, client, uploaded):
        well_id, _, _ = uploaded
        assert client.delete(f"/api/wells/{well_id}").status_code == 200
        assert client.get(f"/api/wells/{well_id}").status_code == 404


@pytest.mark.parametrize("method,path", [
    ("get", "/api/wells/999"),
    ("get", "/api/wells/999/state"),
    ("post", "/api/wells/999/state/rebuild"),
    ("get", "/api/wells/999/timeline"),
    ("get", "/api/wells/999/interventions"),
    ("get", "/api/interventions/999"),
    ("post", "/api/interventions/999/analyze"),
    ("get", "/api/reports/999/download"),
    ("delete", "/api/reports/999"),
    ("delete", "/api/wells/999"),
    ("get", "/api/nope"),
])
def test_not_found(client, method, path):
    res = getattr(client, method)(path)
    assert res.status_code == 404
    assert res.get_json()["success"] is False
