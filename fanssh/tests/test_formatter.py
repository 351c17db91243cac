import json

import yaml
from rich.console import Console

from fanssh.core.models import (
    BatchReport,
    ExecutionResult,
    ExecutionStatus,
    FailureKind,
)
from fanssh.ui.formatter import OutputFormatter
from fanssh.ui.summary import print_summary


def _report() -> BatchReport:
    return BatchReport(
        total=3,
        results=[
            ExecutionResult(host="a", status=ExecutionStatus.SUCCESS, stdout="up\n", exit_code=0),
            ExecutionResult(
                host="b",
                status=ExecutionStatus.ERROR,
                failure=FailureKind.CONNECT,
                error_message="Create connection: [Errno 111] Connection refused",
            ),
        ],
        timed_out=True,
        unreported=["c"],
        elapsed=5.0,
    )


class TestOutputFormatter:
    """测试输出格式化"""

    def test_outcome_lines(self):
        formatter = OutputFormatter()
        report = _report()

        assert formatter.outcome_line(report.results[0]) == "a OK"
        line = formatter.outcome_line(report.results[1])
        assert line.startswith("ERROR")
        assert "host b" in line
        assert "Connection refused" in line

    def test_timeout_line(self):
        assert OutputFormatter().timeout_line("c") == "c Timed out!"

    def test_default_report(self):
        text = OutputFormatter().format_report(_report())

        lines = text.splitlines()
        assert lines[0] == "a OK"
        assert lines[1].startswith("ERROR")
        assert lines[2] == "c Timed out!"
        assert len(lines) == 3

    def test_json_report(self):
        data = json.loads(OutputFormatter("json").format_report(_report()))

        assert data["timed_out"] is True
        assert data["unreported"] == ["c"]
        assert data["results"][0]["status"] == "success"
        assert data["results"][1]["failure"] == "connect"

    def test_yaml_report(self):
        data = yaml.safe_load(OutputFormatter("YAML").format_report(_report()))

        assert data["total"] == 3
        assert [r["host"] for r in data["results"]] == ["a", "b"]

    def test_streaming_only_for_default(self):
        assert OutputFormatter().streaming
        assert not OutputFormatter("json").streaming


class TestSummary:
    """测试汇总输出"""

    def test_print_summary(self):
        console = Console(record=True, width=120)

        print_summary(_report(), console=console)

        text = console.export_text()
        assert "Execution Summary" in text
        assert "Unreported" in text
        assert "[Errno 111] Connection refused" in text

    def test_undecodable_host_is_printable(self):
        formatter = OutputFormatter("json")
        result = ExecutionResult(host="h\udce9st", status=ExecutionStatus.SUCCESS, exit_code=0)
        report = BatchReport(total=2, results=[result], unreported=["x\udcff"])

        assert formatter.outcome_line(result) == "h\ufffdst OK"
        assert formatter.timeout_line("x\udcff") == "x\ufffd Timed out!"
        data = json.loads(formatter.format_report(report))
        assert data["results"][0]["host"] == "h\ufffdst"
        assert data["unreported"] == ["x\ufffd"]
