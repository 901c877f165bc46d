"""PDF report: fpdf2 layout with matplotlib chart snapshots."""
from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from datetime import datetime

from fpdf import FPDF
from fpdf.enums import XPos, YPos
from fpdf.errors import FPDFException
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from chartwise.domain.exceptions import ExportError
from chartwise.ingest.csv_parser import EXTRA_FIELDS_KEY
from chartwise.models.chart import ChartConfig, ChartData, ChartType
from chartwise.models.dataset import ColumnType, Dataset
from chartwise.models.insight import AnalysisResult

logger = logging.getLogger(__name__)

MAX_REPORT_INSIGHTS = 5
MAX_REPORT_RECOMMENDATIONS = 5
MAX_REPORT_CHARTS = 3
PREVIEW_ROWS = 20
PREVIEW_COLUMNS = 6
_PREVIEW_CELL_CHARS = 15

_BLUE = (30, 64, 175)
_GREEN = (21, 128, 61)
_GRAY = (100, 100, 100)


def _latin1(text: object) -> str:
    # core PDF fonts only cover latin-1
    return str(text).encode("latin-1", "replace").decode("latin-1")


def render_chart_png(config: ChartConfig, data: ChartData) -> bytes | None:
    """Rasterise chart points to PNG bytes, or ``None`` when nothing can be drawn.

    Draws on a standalone ``Figure`` with its own Agg canvas, never pyplot.
    """
    if not data.is_valid or not data.points:
        return None

    fig = Figure(figsize=(7, 3.5))
    FigureCanvasAgg(fig)
    ax = fig.add_subplot()
    try:
        points = data.points
        if config.chart_type is ChartType.BAR:
            ax.bar([p.name for p in points], [p.value for p in points], color="#3b82f6")
        elif config.chart_type is ChartType.LINE:
            ax.plot([p.name for p in points], [p.value for p in points], marker="o", color="#3b82f6")
        elif config.chart_type is ChartType.PIE:
            ax.pie([p.value for p in points], labels=[p.name for p in points], autopct="%1.1f%%")
            ax.axis("equal")
        else:
            ax.scatter([p.x for p in points], [p.y for p in points], color="#3b82f6", alpha=0.7)
            ax.set_xlabel(config.x_column or "")
            ax.set_ylabel(config.y_column or "")
        if config.chart_type in (ChartType.BAR, ChartType.LINE):
            ax.tick_params(axis="x", labelrotation=45)
            ax.grid(True, axis="y", linestyle="--", linewidth=0.5, alpha=0.5)
        ax.set_title(config.title or f"{config.chart_type.value.title()} chart")
        fig.tight_layout()

        buffer = io.BytesIO()
        fig.savefig(buffer, format="png", dpi=120)
        return buffer.getvalue()
    except ValueError as exc:
        logger.warning("Could not render chart %s: %s", config.id, exc)
        return None


class ReportPDF(FPDF):
    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("Helvetica", "", 8)
        self.set_text_color(*_GRAY)
        self.cell(0, 10, f"Page {self.page_no()} of {{nb}} | AI-Enhanced Analytics Dashboard", align="C")

    def heading(self, text: str, color: tuple[int, int, int] = _BLUE) -> None:
        self.ln(4)
        self.set_font("Helvetica", "B", 16)
        self.set_text_color(*color)
        self.cell(0, 10, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def paragraph(self, text: str, size: int = 10, style: str = "", color=(0, 0, 0)) -> None:
        self.set_font("Helvetica", style, size)
        self.set_text_color(*color)
        self.multi_cell(0, size * 0.5, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def placeholder(self, *lines: str) -> None:
        for line in lines:
            self.paragraph(line, size=9, style="I", color=_GRAY)


def _date_range(dataset: Dataset) -> str | None:
    for column in dataset.columns:
        if column.type is ColumnType.DATE and column.min_date and column.max_date:
            return f"{column.min_date[:10]} to {column.max_date[:10]}"
    return None


def _write_summary(pdf: ReportPDF, dataset: Dataset | None) -> None:
    pdf.heading("Data Summary")
    if dataset is None:
        pdf.placeholder("No dataset loaded.")
        return
    summary = dataset.summary
    pdf.paragraph(f"File: {dataset.file_name}")
    pdf.paragraph(f"Total Rows: {summary.total_rows}")
    pdf.paragraph(f"Columns: {summary.total_columns}")
    pdf.paragraph(f"Completeness: {summary.completeness}%  (quality score {summary.quality_score}/100)")
    date_range = _date_range(dataset)
    if date_range:
        pdf.paragraph(f"Date Range: {date_range}")


def _write_analysis(pdf: ReportPDF, analysis: AnalysisResult | None) -> None:
    pdf.heading("AI-Generated Insights")
    insights = analysis.insights[:MAX_REPORT_INSIGHTS] if analysis else []
    if insights:
        for index, insight in enumerate(insights, start=1):
            pdf.paragraph(f"{index}. [{insight.type}] {insight.title}", size=10, style="B", color=_BLUE)
            if insight.description:
                pdf.paragraph(insight.description, size=9)
    else:
        pdf.placeholder(
            "No AI insights generated yet.",
            "Visit the AI Insights page to generate intelligent analysis of your data.",
        )

    pdf.heading("AI Recommendations", color=_GREEN)
    recommendations = analysis.recommendations[:MAX_REPORT_RECOMMENDATIONS] if analysis else []
    if recommendations:
        for index, rec in enumerate(recommendations, start=1):
            pdf.paragraph(f"{index}. ({rec.priority}) {rec.action}", size=10, style="B", color=_GREEN)
            if rec.reason:
                pdf.paragraph(rec.reason, size=9)
    else:
        pdf.placeholder(
            "No AI recommendations available yet.",
            "Generate AI insights to receive actionable recommendations.",
        )


def _write_charts(pdf: ReportPDF, charts: Sequence[tuple[ChartConfig, ChartData]]) -> None:
    pdf.heading("Dashboard Charts")
    if not charts:
        pdf.placeholder(
            "No charts configured yet.",
            "Create charts on the Dashboard page to include them in reports.",
        )
        return
    for index, (config, data) in enumerate(charts[:MAX_REPORT_CHARTS], start=1):
        pdf.paragraph(config.title or f"Chart {index}", size=10, style="B")
        image = render_chart_png(config, data)
        if image is None:
            pdf.placeholder(data.error or "No data to display for this chart.")
            continue
        pdf.image(io.BytesIO(image), w=pdf.epw)
        pdf.ln(4)


def _write_preview(pdf: ReportPDF, dataset: Dataset) -> None:
    pdf.add_page()
    pdf.heading(f"Data Preview (First {PREVIEW_ROWS} Rows)")
    headers = [h for h in dataset.column_names if h != EXTRA_FIELDS_KEY][:PREVIEW_COLUMNS]
    if not headers:
        return
    width = pdf.epw / len(headers)
    pdf.set_text_color(0, 0, 0)
    pdf.set_font("Helvetica", "B", 7)
    for header in headers:
        pdf.cell(width, 5, _latin1(header[:_PREVIEW_CELL_CHARS]))
    pdf.ln(5)
    pdf.set_font("Helvetica", "", 7)
    for row in dataset.rows[:PREVIEW_ROWS]:
        for header in headers:
            value = row.get(header)
            pdf.cell(width, 5, _latin1("" if value is None else value)[:_PREVIEW_CELL_CHARS])
        pdf.ln(5)


def build_pdf_report(
    dataset: Dataset | None,
    charts: Sequence[tuple[ChartConfig, ChartData]] = (),
    analysis: AnalysisResult | None = None,
    *,
    include_charts: bool = True,
    include_insights: bool = True,
    include_data: bool = False,
    generated_at: datetime | None = None,
) -> bytes:
    """Render the dashboard report and return the PDF bytes."""
    try:
        pdf = ReportPDF(format="A4")
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        pdf.set_fill_color(59, 130, 246)
        pdf.rect(0, 0, pdf.w, 40, style="F")
        pdf.set_xy(pdf.l_margin, 10)
        pdf.set_font("Helvetica", "B", 24)
        pdf.set_text_color(255, 255, 255)
        pdf.cell(0, 12, "Analytics Dashboard Report", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("Helvetica", "", 10)
        stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
        pdf.cell(0, 8, f"Generated on {stamp}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_y(45)

        _write_summary(pdf, dataset)
        if include_insights:
            _write_analysis(pdf, analysis)
        if include_charts:
            _write_charts(pdf, charts)
        if include_data and dataset is not None and dataset.rows:
            _write_preview(pdf, dataset)

        return bytes(pdf.output())
    except (FPDFException, OSError) as exc:
        logger.exception("PDF export failed")
        raise ExportError(f"PDF export failed: {exc}") from exc
