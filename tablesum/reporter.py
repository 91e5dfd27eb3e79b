"""Report generation for a completed run.

Produces two self-contained artifacts from a RunResult:
- an Excel workbook with one row per page plus a summary sheet
- an interactive Plotly HTML dashboard of page subtotals and the running
  grand total

Reports are optional; main.py only builds them when ``export_reports`` is set.
"""

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from config.settings import GlobalConfig, get_config
from tablesum.exceptions import ReportGenerationError
from tablesum.logger import get_logger
from tablesum.runner import RunResult

log = get_logger(__name__)

PAGE_COLUMNS = [
    "url",
    "status",
    "subtotal",
    "cells",
    "tokens",
    "values",
    "rejected",
    "error",
    "elapsed_sec",
]


class ReportGenerator:
    """Generates Excel and HTML reports from run results.

    Attributes:
        config: GlobalConfig instance for output paths.
        _timestamp: Report generation timestamp for file naming.

    Example:
        reporter = ReportGenerator()
        paths = reporter.generate_all(result)
    """

    def __init__(self, config: GlobalConfig | None = None) -> None:
        self.config = config or get_config()
        self._timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")

    def _ensure_output_dir(self) -> Path:
        """Ensure output directory exists and return path.

        Raises:
            ReportGenerationError: If directory cannot be created.
        """
        try:
            self.config.output_dir.mkdir(parents=True, exist_ok=True)
            return self.config.output_dir
        except OSError as exc:
            raise ReportGenerationError(
                report_type="output_directory",
                reason=f"Cannot create output directory: {exc}",
                output_path=str(self.config.output_dir),
            ) from exc

    def result_to_dataframe(self, result: RunResult) -> pd.DataFrame:
        """One row per page, in run order, with a running grand total."""
        records = [
            {
                "url": page.url,
                "status": "ok" if page.succeeded else "failed",
                "subtotal": page.subtotal,
                "cells": page.cells,
                "tokens": page.tokens,
                "values": page.values,
                "rejected": page.rejected,
                "error": page.error or "",
                "elapsed_sec": round(page.elapsed_sec, 3),
            }
            for page in result.pages
        ]
        df = pd.DataFrame(records, columns=PAGE_COLUMNS)
        df["running_total"] = df["subtotal"].cumsum()
        return df

    def _summary(self, result: RunResult) -> dict[str, Any]:
        return {
            "Report Generated": datetime.now(UTC).isoformat(),
            "Pages Attempted": result.pages_attempted,
            "Pages Succeeded": result.pages_succeeded,
            "Pages Failed": result.pages_failed,
            "Grand Total": result.grand_total,
        }

    def generate_excel(self, result: RunResult, filename: str | None = None) -> Path:
        """Write the ``Pages`` and ``Summary`` sheets.

        Raises:
            ReportGenerationError: If the workbook cannot be written.
        """
        output_dir = self._ensure_output_dir()
        filename = filename or f"tablesum_export_{self._timestamp}"
        output_path = output_dir / f"{filename}.xlsx"

        log.info("Generating Excel report", output_path=str(output_path))

        try:
            df = self.result_to_dataframe(result)

            with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
                df[PAGE_COLUMNS].to_excel(writer, sheet_name="Pages", index=False)
                pd.DataFrame([self._summary(result)]).to_excel(
                    writer, sheet_name="Summary", index=False
                )

        except Exception as exc:
            raise ReportGenerationError(
                report_type="Excel",
                reason=str(exc),
                output_path=str(output_path),
            ) from exc

        log.info("Excel report generated", output_path=str(output_path), pages=len(df))
        return output_path

    def generate_dashboard(self, result: RunResult, filename: str | None = None) -> Path:
        """Write an HTML dashboard with page subtotals and the running total.

        Raises:
            ReportGenerationError: If there are no pages or rendering fails.
        """
        output_dir = self._ensure_output_dir()
        filename = filename or f"tablesum_dashboard_{self._timestamp}"
        output_path = output_dir / f"{filename}.html"

        if not result.pages:
            raise ReportGenerationError(
                report_type="Dashboard",
                reason="No pages available for visualization",
                output_path=str(output_path),
            )

        log.info("Generating HTML dashboard", output_path=str(output_path))

        try:
            df = self.result_to_dataframe(result)
            colors = ["#3498db" if status == "ok" else "#e74c3c" for status in df["status"]]

            fig = make_subplots(
                rows=2,
                cols=1,
                subplot_titles=("Page Subtotals", "Running Grand Total"),
                vertical_spacing=0.15,
            )

            fig.add_trace(
                go.Bar(
                    x=df["url"],
                    y=df["subtotal"],
                    marker_color=colors,
                    customdata=df[["status", "error"]],
                    hovertemplate=(
                        "<b>%{x}</b><br>Subtotal: %{y:,.2f}<br>"
                        "Status: %{customdata[0]}<br>%{customdata[1]}<extra></extra>"
                    ),
                ),
                row=1,
                col=1,
            )

            fig.add_trace(
                go.Scatter(
                    x=df["url"],
                    y=df["running_total"],
                    mode="lines+markers",
                    line={"color": "#27ae60"},
                    hovertemplate="<b>%{x}</b><br>Running total: %{y:,.2f}<extra></extra>",
                ),
                row=2,
                col=1,
            )

            fig.update_layout(
                title={
                    "text": (
                        f"<b>{self.config.app_name} Dashboard</b><br>"
                        f"<sup>Grand total: {result.grand_total:,.2f} | "
                        f"Pages: {result.pages_attempted} "
                        f"({result.pages_failed} failed) | "
                        f"Generated: {datetime.now(UTC).strftime('%Y-%m-%d %H:%M UTC')}</sup>"
                    ),
                    "x": 0.5,
                    "xanchor": "center",
                },
                showlegend=False,
                height=800,
                template="plotly_white",
            )

            fig.write_html(str(output_path), include_plotlyjs=True, full_html=True)

        except Exception as exc:
            raise ReportGenerationError(
                report_type="Dashboard",
                reason=str(exc),
                output_path=str(output_path),
            ) from exc

        log.info("HTML dashboard generated", output_path=str(output_path))
        return output_path

    def generate_all(self, result: RunResult) -> dict[str, Path]:
        """Generate both reports.

        Returns:
            Dictionary mapping report type to file path.
        """
        return {
            "excel": self.generate_excel(result),
            "dashboard": self.generate_dashboard(result),
        }
