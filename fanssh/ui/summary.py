from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.models import BatchReport


def _percent(count: int, total: int) -> str:
    if not total:
        return "-"
    return f"{(count / total) * 100:.1f}%"


def build_summary_table(report: BatchReport) -> Table:
    """批次汇总表格"""
    table = Table(title="Execution Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="white")
    table.add_column("Percentage", style="white")

    total = report.total
    table.add_row("Total Hosts", str(total), _percent(total, total))
    table.add_row("OK", str(len(report.succeeded)), _percent(len(report.succeeded), total))
    table.add_row("Errors", str(len(report.failed)), _percent(len(report.failed), total))
    table.add_row(
        "Unreported", str(len(report.unreported)), _percent(len(report.unreported), total)
    )
    table.add_row("Timed Out", "yes" if report.timed_out else "no", "-")
    table.add_row("Total Time", f"{report.elapsed:.2f}s", "-")
    return table


def print_summary(report: BatchReport, console: Console = None):
    # 汇总写到 stderr，stdout 只保留每个主机的结果行
    console = console or Console(stderr=True)
    console.print(build_summary_table(report))

    if report.failed:
        console.print("\n[bold red]Failed Hosts:[/bold red]")
        for result in report.failed:
            console.print(f"   [red]{escape(result.host)}: {escape(result.error_message)}[/red]")
