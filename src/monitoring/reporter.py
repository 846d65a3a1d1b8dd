"""
Test execution reporting.

Renders a finished ``TestResult`` into an HTML page for people and a JSON
document for CI. Rendering never depends on the run having passed: the
harness calls it from the failure path as well.
"""

import json
import platform
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from jinja2 import Template

from src.config.settings import (
    HTML_REPORT_NAME,
    JSON_REPORT_NAME,
    Settings,
    get_settings,
)
from src.core.types import StepStatus, TestResult, TestStatus
from src.error_handling.exceptions import ReportingError
from src.monitoring.logger import get_logger

logger = get_logger(__name__)

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S UTC"
TIME_FORMAT = "%H:%M:%S"


def _iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    stamp = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def _display(value: Optional[datetime], fmt: str = DISPLAY_FORMAT) -> str:
    if value is None:
        return "-"
    return value.astimezone(timezone.utc).strftime(fmt)


class ReportGenerator:
    """Writes the HTML and JSON artifacts for one run."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        reports_dir: Optional[Path] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.reports_dir = Path(reports_dir or self.settings.reports_dir)

    @property
    def html_path(self) -> Path:
        return self.reports_dir / HTML_REPORT_NAME

    @property
    def json_path(self) -> Path:
        return self.reports_dir / JSON_REPORT_NAME

    def to_dict(self, result: TestResult) -> Dict[str, Any]:
        """Machine-readable summary of the run."""
        return {
            "testCase": result.test_case,
            "description": result.description,
            "status": result.status.value,
            "startTime": _iso(result.start_time),
            "endTime": _iso(result.end_time),
            "duration": result.total_duration_ms,
            "username": result.username,
            "steps": [
                {
                    "name": step.name,
                    "status": step.status.value,
                    "duration": step.duration_ms,
                    "timestamp": _iso(step.timestamp),
                    **({"error": step.error} if step.error else {}),
                }
                for step in result.steps
            ],
            "errors": [
                {
                    "step": error.step,
                    "error": error.error,
                    "timestamp": _iso(error.timestamp),
                }
                for error in result.errors
            ],
            "summary": {
                "total": len(result.steps),
                "passed": result.passed_count,
                "failed": result.failed_count,
            },
            "testSuite": result.test_suite_title,
        }

    def to_json(self, result: TestResult, indent: int = 2) -> str:
        return json.dumps(self.to_dict(result), indent=indent)

    def to_html(self, result: TestResult) -> str:
        """Render the HTML report."""
        template = Template(HTML_REPORT_TEMPLATE, autoescape=True)
        return template.render(
            result=result,
            passed=result.status == TestStatus.PASSED,
            status=result.status.value,
            started=_display(result.start_time),
            completed=_display(result.end_time),
            total_duration=result.total_duration_ms,
            username=result.username or "-",
            total_steps=len(result.steps),
            passed_steps=result.passed_count,
            failed_steps=result.failed_count,
            steps=[
                {
                    "number": index,
                    "name": step.name,
                    "css": step.status.value.lower(),
                    "icon": "✅" if step.status == StepStatus.PASSED else "❌",
                    "duration": step.duration_ms,
                    "time": _display(step.timestamp, TIME_FORMAT),
                    "error": step.error,
                }
                for index, step in enumerate(result.steps, start=1)
            ],
            errors=[
                {
                    "step": error.step,
                    "error": error.error,
                    "time": _display(error.timestamp),
                }
                for error in result.errors
            ],
            browser_mode="Headless" if self.settings.browser_headless else "Headed",
            python_version=platform.python_version(),
            generated_at=_display(datetime.now(timezone.utc)),
        )

    def generate(self, result: TestResult) -> Tuple[Path, Path]:
        """
        Write both report artifacts.

        Returns:
            Paths of the HTML and JSON files

        Raises:
            ReportingError: if the reports directory or a file cannot be written
        """
        logger.info("Generating test execution report")
        html = self.to_html(result)
        payload = self.to_json(result)

        try:
            self.reports_dir.mkdir(parents=True, exist_ok=True)
            self.html_path.write_text(html, encoding="utf-8")
            logger.info(f"HTML report saved to {self.html_path}")
            self.json_path.write_text(payload, encoding="utf-8")
            logger.info(f"JSON results saved to {self.json_path}")
        except OSError as e:
            raise ReportingError(
                f"Failed to write report: {e}",
                path=str(self.reports_dir),
                cause=e,
            ) from e

        return self.html_path, self.json_path


HTML_REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Test Execution Report - ParaBank</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            margin: 0;
            padding: 20px;
            background-color: #f5f5f5;
        }
        .container { max-width: 1200px; margin: 0 auto; background: white; border-radius: 10px; overflow: hidden; box-shadow: 0 4px 6px rgba(0,0,0,0.1); }
        .header {
            background: {% if passed %}linear-gradient(135deg, #667eea 0%, #764ba2 100%){% else %}linear-gradient(135deg, #f093fb 0%, #f5576c 100%){% endif %};
            color: white;
            padding: 30px;
            text-align: center;
        }
        .content { padding: 30px; }
        .status-badge {
            display: inline-block;
            padding: 8px 16px;
            border-radius: 20px;
            font-weight: bold;
            color: white;
            background: {% if passed %}#10b981{% else %}#ef4444{% endif %};
        }
        .info-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(250px, 1fr)); gap: 20px; margin: 20px 0; }
        .info-card { background: #f8fafc; padding: 20px; border-radius: 8px; border-left: 4px solid #3b82f6; }
        .step { display: flex; align-items: center; padding: 15px; margin: 10px 0; border-radius: 8px; background: #f9fafb; }
        .step.passed { border-left: 4px solid #10b981; }
        .step.failed { border-left: 4px solid #ef4444; background: #fef2f2; }
        .step-icon { margin-right: 12px; font-size: 18px; }
        .step-details { flex: 1; }
        .step-duration { color: #6b7280; font-size: 0.875rem; }
        .step-error { color: #ef4444; margin-top: 5px; }
        .error-section { background: #fef2f2; padding: 20px; border-radius: 8px; border-left: 4px solid #ef4444; margin: 20px 0; }
        .tech-stack { background: #f0f9ff; padding: 20px; border-radius: 8px; border-left: 4px solid #0ea5e9; margin: 20px 0; }
        .username-highlight { background: #fef3c7; padding: 2px 6px; border-radius: 4px; font-family: monospace; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>Test Execution Report</h1>
            <p>Automated browser testing with Playwright</p>
            <div class="status-badge">{{ status }}</div>
        </div>

        <div class="content">
            <h2>Test Case: {{ result.test_case }}</h2>
            <p><strong>Description:</strong> {{ result.description }}</p>

            <div class="info-grid">
                <div class="info-card">
                    <h3>Execution Time</h3>
                    <p><strong>Started:</strong> {{ started }}</p>
                    <p><strong>Completed:</strong> {{ completed }}</p>
                    <p><strong>Duration:</strong> {{ total_duration }}ms</p>
                </div>

                <div class="info-card">
                    <h3>Test Data</h3>
                    <p><strong>Username:</strong> <span class="username-highlight">{{ username }}</span></p>
                    <p><strong>Test Type:</strong> End-to-End Registration</p>
                    <p><strong>Environment:</strong> ParaBank Demo</p>
                </div>

                <div class="info-card">
                    <h3>Results Summary</h3>
                    <p><strong>Total Steps:</strong> {{ total_steps }}</p>
                    <p><strong>Passed:</strong> {{ passed_steps }}</p>
                    <p><strong>Failed:</strong> {{ failed_steps }}</p>
                </div>
            </div>

            <div class="steps-container">
                <h3>Test Steps Execution</h3>
                {% for step in steps %}
                <div class="step {{ step.css }}">
                    <div class="step-icon">{{ step.icon }}</div>
                    <div class="step-details">
                        <strong>Step {{ step.number }}:</strong> {{ step.name }}
                        <div class="step-duration">Duration: {{ step.duration }}ms | {{ step.time }}</div>
                        {% if step.error %}<div class="step-error">Error: {{ step.error }}</div>{% endif %}
                    </div>
                </div>
                {% endfor %}
            </div>

            {% if errors %}
            <div class="error-section">
                <h3>Error Details</h3>
                {% for error in errors %}
                <div class="error-entry">
                    <strong>Step:</strong> {{ error.step }}<br>
                    <strong>Error:</strong> {{ error.error }}<br>
                    <strong>Time:</strong> {{ error.time }}
                </div>
                {% endfor %}
            </div>
            {% endif %}

            <div class="tech-stack">
                <h3>Technology Stack</h3>
                <p><strong>Framework:</strong> Playwright for Python</p>
                <p><strong>Browser:</strong> Chromium ({{ browser_mode }})</p>
                <p><strong>Runtime:</strong> Python {{ python_version }}</p>
                <p><strong>Test Runner:</strong> ParaBank registration harness</p>
                <p><strong>Report Generated:</strong> {{ generated_at }}</p>
            </div>
        </div>
    </div>
</body>
</html>
"""
