"""
Tests for HTML and JSON report generation.
"""

import json

import pytest

from src.core.types import StepRecord, StepStatus, TestResult, TestStatus
from src.error_handling.exceptions import ReportingError
from src.monitoring.reporter import ReportGenerator
from src.runner.scenario import SCENARIO_STEPS


@pytest.fixture
def passed_result() -> TestResult:
    result = TestResult(username="user1234ab")
    for index, name in enumerate(SCENARIO_STEPS):
        result.record_step(
            StepRecord(name=name, status=StepStatus.PASSED, duration_ms=100 * (index + 1))
        )
    result.finalize(TestStatus.PASSED)
    return result


@pytest.fixture
def failed_result() -> TestResult:
    result = TestResult(username="user9876zz")
    result.record_step(
        StepRecord(name=SCENARIO_STEPS[0], status=StepStatus.PASSED, duration_ms=40)
    )
    result.record_step(
        StepRecord(
            name=SCENARIO_STEPS[1],
            status=StepStatus.FAILED,
            duration_ms=10000,
            error="Timeout 10000ms exceeded",
        )
    )
    result.record_error(SCENARIO_STEPS[1], "Timeout 10000ms exceeded")
    result.finalize(TestStatus.FAILED)
    return result


class TestHTMLReport:
    def test_passed_report(self, settings, passed_result):
        html = ReportGenerator(settings).to_html(passed_result)

        assert "user1234ab" in html
        assert '<div class="status-badge">PASSED</div>' in html
        assert "error-section" not in html.split("</style>")[1]
        for name in SCENARIO_STEPS:
            assert name in html
        assert "Duration:</strong> 1500ms" in html

    def test_failed_report_has_error_details(self, settings, failed_result):
        html = ReportGenerator(settings).to_html(failed_result)
        body = html.split("</style>")[1]

        assert '<div class="status-badge">FAILED</div>' in html
        assert '<div class="error-section">' in body
        assert "Error Details" in body
        assert "Timeout 10000ms exceeded" in body

    def test_escapes_page_text(self, settings):
        result = TestResult(username="user1")
        result.record_error("Verify", "<script>alert(1)</script>")
        result.finalize(TestStatus.FAILED)

        html = ReportGenerator(settings).to_html(result)

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html

    def test_pending_result_without_steps_renders(self, settings):
        html = ReportGenerator(settings).to_html(TestResult())

        assert "PENDING" in html
        assert "Total Steps:</strong> 0" in html


class TestJSONReport:
    def test_summary_counts(self, settings, failed_result):
        payload = ReportGenerator(settings).to_dict(failed_result)

        summary = payload["summary"]
        assert summary["total"] == len(payload["steps"]) == 2
        assert summary["passed"] + summary["failed"] == summary["total"]
        assert payload["duration"] == 10040
        assert payload["steps"][1]["error"] == "Timeout 10000ms exceeded"
        assert "error" not in payload["steps"][0]

    def test_fields(self, settings, passed_result):
        payload = ReportGenerator(settings).to_dict(passed_result)

        assert payload["testCase"] == "TC 001"
        assert payload["status"] == "PASSED"
        assert payload["username"] == "user1234ab"
        assert payload["startTime"].endswith("Z")
        assert payload["endTime"] >= payload["startTime"]
        assert payload["errors"] == []
        assert payload["summary"] == {"total": 5, "passed": 5, "failed": 0}


class TestGenerate:
    def test_writes_both_files(self, settings, passed_result):
        html_path, json_path = ReportGenerator(settings).generate(passed_result)

        assert html_path == settings.reports_dir / "test-execution-report.html"
        assert json_path == settings.reports_dir / "test-results.json"
        assert "user1234ab" in html_path.read_text(encoding="utf-8")
        assert json.loads(json_path.read_text())["status"] == "PASSED"

    def test_creates_missing_directory(self, settings, passed_result, tmp_path):
        target = tmp_path / "nested" / "out"
        ReportGenerator(settings, reports_dir=target).generate(passed_result)

        assert (target / "test-results.json").exists()

    def test_unwritable_directory_raises_reporting_error(self, settings, passed_result, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        with pytest.raises(ReportingError) as exc_info:
            ReportGenerator(settings, reports_dir=blocker).generate(passed_result)

        assert exc_info.value.path == str(blocker)
        assert isinstance(exc_info.value.cause, OSError)
