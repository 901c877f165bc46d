"""API tests for /insights, /export and /settings."""
import json

import pytest

from conftest import StatusError


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------


def test_insights_initially_empty(client):
    body = client.get("/insights").json()
    assert body["analysis"] is None
    assert body["loading"] is False
    assert body["status"]["configured"] is True


def test_analyze_requires_dataset(client, fake_llm):
    resp = client.post("/insights/analyze")
    assert resp.status_code == 404
    assert fake_llm.call_count == 0


def test_analyze_stores_result(loaded_client, fake_llm):
    resp = loaded_client.post("/insights/analyze")
    assert resp.status_code == 200
    assert resp.json()["insights"][0]["title"] == "North leads revenue"
    assert fake_llm.call_count == 1

    stored = loaded_client.get("/insights").json()
    assert stored["analysis"]["insights"][0]["id"].startswith("insight_")
    assert stored["loading"] is False


def test_second_analyze_hits_cache(loaded_client, fake_llm):
    loaded_client.post("/insights/analyze")
    again = loaded_client.post("/insights/analyze")
    assert again.status_code == 200
    assert again.json()["cached"] is True
    assert fake_llm.call_count == 1


def test_new_upload_clears_analysis(loaded_client, sales_csv):
    loaded_client.post("/insights/analyze")
    loaded_client.post("/dataset/upload", files={"file": ("again.csv", sales_csv.encode(), "text/csv")})
    assert loaded_client.get("/insights").json()["analysis"] is None


def test_analyze_failure_maps_status_and_resets_loading(loaded_client, fake_llm):
    fake_llm._responses = [StatusError(401)]
    resp = loaded_client.post("/insights/analyze")
    assert resp.status_code == 502
    assert resp.json()["kind"] == "authentication"
    assert loaded_client.get("/insights").json()["loading"] is False


def test_malformed_reply_is_502(loaded_client, fake_llm):
    fake_llm._responses = ["not json"]
    resp = loaded_client.post("/insights/analyze")
    assert resp.status_code == 502
    assert resp.json()["kind"] == "malformed_response"


def test_local_rate_limit(loaded_client, insight_client, fake_llm):
    insight_client.gate.min_interval = 60
    fake_llm._responses = ["First answer."]
    assert loaded_client.post("/insights/ask", json={"question": "one?"}).status_code == 200
    resp = loaded_client.post("/insights/ask", json={"question": "two?"})
    assert resp.status_code == 429
    assert resp.json()["kind"] == "local_rate_limit"
    assert resp.json()["wait_seconds"] >= 1
    assert fake_llm.call_count == 1


def test_ask(loaded_client, fake_llm):
    fake_llm._responses = ["North leads."]
    resp = loaded_client.post("/insights/ask", json={"question": "Who leads?"})
    assert resp.status_code == 200
    assert resp.json() == {"question": "Who leads?", "answer": "North leads."}


def test_ask_blank_question_rejected(loaded_client, fake_llm):
    resp = loaded_client.post("/insights/ask", json={"question": "   "})
    assert resp.status_code == 422
    assert fake_llm.call_count == 0


def test_ai_chart_suggestions(loaded_client, fake_llm):
    fake_llm._responses = [json.dumps({"suggestions": [
        {"chartType": "pie", "categoryColumn": "product", "title": "Mix", "reasoning": "Share"},
    ]})]
    body = loaded_client.post("/insights/chart-suggestions").json()
    assert body["total"] == 1
    assert body["items"][0]["category_column"] == "product"


def test_disabled_ai_is_503(loaded_client, insight_client, fake_llm):
    insight_client.enabled = False
    resp = loaded_client.post("/insights/analyze")
    assert resp.status_code == 503
    assert resp.json()["detail"] == "AI features are disabled in configuration"
    assert fake_llm.call_count == 0


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "fmt,prefix,media",
    [
        ("csv", "analytics-data-", "text/csv"),
        ("xlsx", "analytics-data-", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
        ("json", "analytics-export-", "application/json"),
        ("pdf", "analytics-report-", "application/pdf"),
    ],
)
def test_export_formats(loaded_client, fmt, prefix, media):
    resp = loaded_client.get(f"/export/{fmt}")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith(media)
    disposition = resp.headers["content-disposition"]
    assert f'filename="{prefix}' in disposition
    assert disposition.endswith(f'.{fmt}"')


def test_export_json_contents(loaded_client):
    loaded_client.post("/charts", json={"chart_type": "pie", "category_column": "region"})
    package = loaded_client.get("/export/json").json()
    assert package["metadata"]["dataRows"] == 6
    assert package["metadata"]["totalCharts"] == 1
    assert package["metadata"]["hasAIInsights"] is False


def test_export_pdf_with_data(loaded_client):
    resp = loaded_client.get("/export/pdf", params={"include_data": True})
    assert resp.content.startswith(b"%PDF")


def test_export_requires_dataset(client):
    assert client.get("/export/csv").status_code == 404


def test_export_unknown_format(loaded_client):
    assert loaded_client.get("/export/docx").status_code == 422


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def test_preferences_round_trip(client):
    assert client.get("/settings/preferences").json() == {"dark_mode": False}
    assert client.put("/settings/preferences", json={"dark_mode": True}).json() == {"dark_mode": True}
    assert client.put("/settings/preferences", json={"toggle": True}).json() == {"dark_mode": False}


def test_ai_status(client):
    body = client.get("/settings/ai").json()
    assert body["configured"] is True
    assert body["enabled"] is True
    assert body["min_call_interval"] == 0
