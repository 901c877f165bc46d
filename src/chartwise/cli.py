import json
import os
import sys
from pathlib import Path
from typing import Optional

import typer

from chartwise.config import settings
from chartwise.domain.exceptions import ChartwiseError
from chartwise.logging import logger, get_session_id

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main():
    """
    Chartwise: CSV analytics with charts and AI insights.
    """
    pass


def _load(path: Path):
    from chartwise.services.dataset_service import build_dataset
    try:
        dataset = build_dataset(path.read_bytes(), path.name, "text/csv")
    except OSError as e:
        print(f"❌ Cannot read {path}: {e}")
        raise typer.Exit(code=1)
    except ChartwiseError as e:
        print(f"❌ {e.message}")
        raise typer.Exit(code=1)
    for warning in dataset.warnings:
        print(f"⚠️  {warning}")
    return dataset


def _dump(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


@app.command(name="doctor")
def doctor():
    """
    Check configuration and environment health.
    """
    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 Chartwise Doctor\n")

    # ── Check 1: Environment / Interpreter ──────────────────────────────────
    print("[Environment]")
    print(f"  Python:     {sys.version.split()[0]}")
    print(f"  Session ID: {get_session_id()}")
    passed += 1

    # ── Check 2: AI configuration ────────────────────────────────────────────
    print("\n[AI]")
    from chartwise.ai.helpers import ai_config_status
    status = ai_config_status(settings.AI_ENABLED, settings.openai_api_key)
    print(f"  AI_ENABLED:          {settings.AI_ENABLED}")
    print(f"  OPENAI_MODEL:        {settings.OPENAI_MODEL}")
    print(f"  AI_MIN_CALL_INTERVAL:{settings.AI_MIN_CALL_INTERVAL:>6}s")
    if status.configured or not settings.AI_ENABLED:
        print(f"  Status:              ✅ {status.message}")
        passed += 1
    else:
        print(f"  Status:              ❌ {status.message}")
        failures.append(status.message)

    # ── Check 3: Data directory ──────────────────────────────────────────────
    print("\n[Data Directory]")
    data_dir = settings.data_dir
    if data_dir.exists() and data_dir.is_dir():
        if os.access(data_dir, os.W_OK):
            print(f"  {data_dir}/  ✅ Found and writable: {data_dir.absolute()}")
            passed += 1
        else:
            print(f"  {data_dir}/  ❌ Not writable")
            failures.append(f"{data_dir} is not writable; preferences cannot be saved")
    else:
        print(f"  {data_dir}/  ❌ Missing: {data_dir.absolute()}")
        failures.append(f"{data_dir} not found; run `mkdir {data_dir}`")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed, all good ✅")
        print()


@app.command(name="profile")
def profile(file: Path):
    """Print inferred column types and dataset summary."""
    dataset = _load(file)
    summary = dataset.summary
    print(f"{dataset.file_name}: {summary.total_rows} rows, {summary.total_columns} columns")
    print(f"Completeness {summary.completeness}% | quality {summary.quality_score} | {summary.memory_size}")
    for col in dataset.columns:
        print(f"  {col.name:<24} {col.type.value:<10} nulls={col.null_count} unique={col.unique_count}")


@app.command(name="chart")
def chart(
    file: Path,
    chart_type: str = typer.Option(..., "--type", help="bar, line, pie or scatter"),
    x: Optional[str] = typer.Option(None, "--x"),
    y: Optional[str] = typer.Option(None, "--y"),
    category: Optional[str] = typer.Option(None, "--category"),
    value: Optional[str] = typer.Option(None, "--value"),
    agg: Optional[str] = typer.Option(None, "--agg", help="sum, avg, count, min or max"),
    top_n: Optional[int] = typer.Option(None, "--top-n"),
):
    """Aggregate a CSV into chart points and print them as JSON."""
    from chartwise.charts.transformers import build_chart_data
    from chartwise.charts.validation import to_chart_config
    dataset = _load(file)
    raw = {
        "chartType": chart_type, "xColumn": x, "yColumn": y,
        "categoryColumn": category, "valueColumn": value, "aggregation": agg, "topN": top_n,
    }
    try:
        config = to_chart_config({k: v for k, v in raw.items() if v is not None})
    except ValueError as e:
        print(f"❌ Invalid chart options: {e}")
        raise typer.Exit(code=1)
    data = build_chart_data(list(dataset.rows), config, list(dataset.columns))
    if not data.is_valid:
        print(f"❌ {data.error}")
        raise typer.Exit(code=1)
    _dump(data.model_dump(mode="json"))


@app.command(name="suggest")
def suggest(
    file: Path,
    x: Optional[str] = typer.Option(None, "--x"),
    y: Optional[str] = typer.Option(None, "--y"),
):
    """Suggest a chart type from column types."""
    from chartwise.charts.suggest import suggest_chart_type
    dataset = _load(file)
    suggestion = suggest_chart_type(list(dataset.columns), x, y)
    if suggestion.chart_type is None:
        print(suggestion.reason)
        raise typer.Exit(code=1)
    _dump(suggestion.model_dump(mode="json", exclude_none=True))


@app.command(name="export")
def export(
    file: Path,
    fmt: str = typer.Option("json", "--format", help="csv, json, xlsx or pdf"),
    out: Optional[Path] = typer.Option(None, "--out"),
    include_data: bool = typer.Option(False, "--include-data"),
):
    """Export a CSV through the dashboard exporters."""
    from chartwise.api.schemas.export import ExportFormat
    from chartwise.services.export_service import ExportService
    from chartwise.state.store import AppStore, LoadDataset

    try:
        export_format = ExportFormat(fmt.lower())
    except ValueError:
        print(f"❌ Unknown format: {fmt}")
        raise typer.Exit(code=1)

    store = AppStore()
    store.dispatch(LoadDataset(_load(file)))
    try:
        result = ExportService(store).export(export_format, include_data=include_data)
    except ChartwiseError as e:
        print(f"❌ {e.message}")
        raise typer.Exit(code=1)
    target = out or Path(result.filename)
    target.write_bytes(result.content)
    print(f"✅ Wrote {target} ({len(result.content)} bytes)")


@app.command(name="analyze")
def analyze(file: Path):
    """Run AI analysis over a CSV and print the result as JSON."""
    from chartwise.ai.helpers import describe_ai_error
    from chartwise.ai.insights import InsightClient
    dataset = _load(file)
    try:
        result = InsightClient().analyze_data(list(dataset.rows), list(dataset.columns))
    except ChartwiseError as e:
        logger.error(f"Analysis failed: {e.message}")
        print(f"❌ {describe_ai_error(e)}")
        raise typer.Exit(code=1)
    _dump(result.model_dump(mode="json"))


@app.command(name="ask")
def ask(file: Path, question: str):
    """Ask a natural-language question about a CSV."""
    from chartwise.ai.helpers import describe_ai_error
    from chartwise.ai.insights import InsightClient
    dataset = _load(file)
    try:
        answer = InsightClient().answer_question(question, list(dataset.rows), list(dataset.columns))
    except ChartwiseError as e:
        print(f"❌ {describe_ai_error(e)}")
        raise typer.Exit(code=1)
    print(answer)


@app.command(name="serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Run the API server."""
    import uvicorn
    uvicorn.run("chartwise.api.app:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
