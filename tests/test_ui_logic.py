import json

import httpx
import pytest

from chartwise.api.schemas.charts import ChartCreate
from chartwise.api.schemas.export import ExportFormat
from chartwise.models.chart import BarPoint, ChartConfig, ChartData, ChartType, PiePoint, ScatterPoint
from chartwise.ui.api_client import APIError, ChartwiseClient
from chartwise.ui.charts import build_figure
from chartwise.ui.validation import validate_backend_connection, validate_data_dir, validate_upload


def test_validate_upload():
    assert validate_upload("data.csv", 10) == []
    assert validate_upload("DATA.CSV", 10) == []
    assert validate_upload("notes.txt", 10) == ["notes.txt is not a CSV file. Please upload a .csv file."]
    assert validate_upload("data.csv", 0) == ["CSV file is empty. Please upload a file with data."]


def test_validation():
    # Data dir validation should pass with a real data dir
    errors = validate_data_dir()
    assert isinstance(errors, list)

    # Backend connection will fail in test (no server), but should not crash
    errors = validate_backend_connection()
    assert isinstance(errors, list)


# ---------------------------------------------------------------------------
# build_figure
# ---------------------------------------------------------------------------


def test_bar_figure():
    config = ChartConfig(chart_type=ChartType.BAR, x_column="region", y_column="revenue", title="Revenue")
    data = ChartData(
        chart_type=ChartType.BAR,
        points=[BarPoint(name="North", value=10, count=2, min=4, max=6)],
        is_valid=True,
    )
    fig = build_figure(config, data)
    assert fig.data[0].type == "bar"
    assert list(fig.data[0].x) == ["North"]
    assert fig.layout.title.text == "Revenue"


def test_pie_and_scatter_figures():
    pie = build_figure(
        ChartConfig(chart_type=ChartType.PIE, category_column="c"),
        ChartData(points=[PiePoint(name="a", value=1)], is_valid=True),
        dark_mode=True,
    )
    assert pie.data[0].type == "pie"
    assert pie.layout.showlegend is True

    scatter = build_figure(
        ChartConfig(chart_type=ChartType.SCATTER, x_column="x", y_column="y"),
        ChartData(points=[ScatterPoint(x=1, y=2, name="Point 1")], is_valid=True),
    )
    assert scatter.data[0].mode == "markers"


def test_invalid_data_has_no_figure():
    config = ChartConfig(chart_type=ChartType.BAR, x_column="x", y_column="y")
    assert build_figure(config, ChartData(error='Column "x" not found')) is None
    assert build_figure(config, ChartData(is_valid=True)) is None


# ---------------------------------------------------------------------------
# ChartwiseClient against a mock transport
# ---------------------------------------------------------------------------


def _client(handler) -> ChartwiseClient:
    return ChartwiseClient(base_url="http://testserver", transport=httpx.MockTransport(handler))


def test_missing_dataset_returns_none():
    client = _client(lambda request: httpx.Response(404, json={"detail": "No dataset", "kind": "NotFoundError"}))
    assert client.get_dataset() is None


def test_error_body_becomes_api_error():
    client = _client(lambda request: httpx.Response(422, json={"detail": "bad column", "kind": "ChartConfigError"}))
    with pytest.raises(APIError) as exc_info:
        client.create_chart(ChartCreate(chart_type=ChartType.BAR, x_column="a", y_column="b"))
    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == "bad column"
    assert exc_info.value.kind == "ChartConfigError"


def test_validation_error_list_is_flattened():
    body = {"detail": [{"msg": "field required"}, {"msg": "too short"}]}
    client = _client(lambda request: httpx.Response(422, json=body))
    with pytest.raises(APIError) as exc_info:
        client.ask("")
    assert exc_info.value.detail == "field required; too short"


def test_export_reads_filename_header():
    def handler(request):
        assert request.url.path == "/export/csv"
        return httpx.Response(
            200,
            content=b"a\n1\n",
            headers={"content-disposition": 'attachment; filename="analytics-data-2024-05-01.csv"'},
        )

    content, filename = _client(handler).export(ExportFormat.CSV)
    assert content == b"a\n1\n"
    assert filename == "analytics-data-2024-05-01.csv"


def test_set_dark_mode_sends_payload():
    seen = {}

    def handler(request):
        seen["body"] = request.content
        return httpx.Response(200, json={"dark_mode": True})

    prefs = _client(handler).set_dark_mode(True)
    assert prefs.dark_mode is True
    assert json.loads(seen["body"]) == {"dark_mode": True}


def test_api_errors_get_friendly_ai_messages():
    from chartwise.ai.helpers import describe_ai_error

    auth = APIError(502, "Error code: 401", kind="authentication")
    assert describe_ai_error(auth) == "Invalid API key. Please check your OpenAI API key in Settings."
    wait = APIError(429, "Please wait 2 seconds before making another request to avoid rate limits.", kind="local_rate_limit")
    assert describe_ai_error(wait).startswith("Please wait 2 seconds")
    assert describe_ai_error(APIError(404, "No dataset loaded", kind="NotFoundError")) == "No dataset loaded"
