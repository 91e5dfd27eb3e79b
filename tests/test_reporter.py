"""Tests for Excel and HTML report generation."""

import pandas as pd
import pytest

from config.settings import GlobalConfig
from tablesum.exceptions import ReportGenerationError
from tablesum.reporter import PAGE_COLUMNS, ReportGenerator
from tablesum.runner import PageResult, RunResult


@pytest.fixture
def run_result() -> RunResult:
    return RunResult(
        pages=[
            PageResult(url="https://test.example.com/a", subtotal=900.0, cells=4, tokens=2, values=2),
            PageResult(url="https://test.example.com/b", error="HTTP 503"),
            PageResult(url="https://test.example.com/c", subtotal=-12.5, cells=1, tokens=2, values=1),
        ],
        grand_total=887.5,
    )


class TestReportGenerator:
    """Test suite for ReportGenerator."""

    def test_dataframe_has_running_total(
        self, mock_config: GlobalConfig, run_result: RunResult
    ) -> None:
        df = ReportGenerator(mock_config).result_to_dataframe(run_result)

        assert list(df.columns) == PAGE_COLUMNS + ["running_total"]
        assert df["status"].tolist() == ["ok", "failed", "ok"]
        assert df["rejected"].tolist() == [0, 0, 1]
        assert df["running_total"].tolist() == [900.0, 900.0, 887.5]

    def test_generate_excel(self, mock_config: GlobalConfig, run_result: RunResult) -> None:
        path = ReportGenerator(mock_config).generate_excel(run_result, filename="run")

        assert path == mock_config.output_dir / "run.xlsx"
        pages = pd.read_excel(path, sheet_name="Pages")
        summary = pd.read_excel(path, sheet_name="Summary")

        assert pages["url"].tolist() == [page.url for page in run_result.pages]
        assert summary.loc[0, "Grand Total"] == pytest.approx(887.5)
        assert summary.loc[0, "Pages Failed"] == 1

    def test_generate_dashboard(self, mock_config: GlobalConfig, run_result: RunResult) -> None:
        path = ReportGenerator(mock_config).generate_dashboard(run_result, filename="run")

        html = path.read_text(encoding="utf-8")
        assert path.suffix == ".html"
        assert "Page Subtotals" in html
        assert "Running Grand Total" in html

    def test_dashboard_requires_pages(self, mock_config: GlobalConfig) -> None:
        with pytest.raises(ReportGenerationError):
            ReportGenerator(mock_config).generate_dashboard(RunResult(pages=[]))

    def test_generate_all(self, mock_config: GlobalConfig, run_result: RunResult) -> None:
        reports = ReportGenerator(mock_config).generate_all(run_result)

        assert set(reports) == {"excel", "dashboard"}
        assert all(path.exists() for path in reports.values())

    def test_output_dir_created(self, mock_config: GlobalConfig, run_result: RunResult) -> None:
        config = mock_config.model_copy(update={"output_dir": mock_config.output_dir / "deep" / "dir"})

        path = ReportGenerator(config).generate_excel(run_result)

        assert path.parent == config.output_dir
        assert path.exists()
