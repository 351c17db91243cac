"""输出格式化模块"""

import json
import yaml
from typing import Any, Dict

from ..core.models import BatchReport, ExecutionResult


def _printable(text: str) -> str:
    # 主机列表中无法解码的字节显示为替换字符，避免输出时编码失败
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


class OutputFormatter:
    """输出格式化器"""

    def __init__(self, format_type: str = "default"):
        self.format_type = format_type.lower()

    @property
    def streaming(self) -> bool:
        """默认格式逐行输出，结构化格式在批次结束后整体输出"""
        return self.format_type == "default"

    def outcome_line(self, result: ExecutionResult) -> str:
        if result.ok:
            return _printable(f"{result.host} OK")
        return _printable(
            f"ERROR: Failed running cmd on host {result.host} with error: {result.error_message}"
        )

    def timeout_line(self, host: str) -> str:
        return _printable(f"{host} Timed out!")

    def format_report(self, report: BatchReport) -> str:
        """格式化整个批次"""
        if self.format_type == "json":
            return json.dumps(self._report_dict(report), indent=2, ensure_ascii=False)
        elif self.format_type == "yaml":
            return yaml.dump(
                self._report_dict(report), indent=2, allow_unicode=True, sort_keys=False
            )
        else:
            return self._format_default(report)

    def _format_default(self, report: BatchReport) -> str:
        lines = [self.outcome_line(result) for result in report.results]
        if report.timed_out and report.unreported:
            lines.append(self.timeout_line(report.unreported[0]))
        return "\n".join(lines)

    def _result_dict(self, result: ExecutionResult) -> Dict[str, Any]:
        item = result.__dict__.copy()
        # 转换枚举值
        for key, value in item.items():
            if hasattr(value, "value"):
                item[key] = value.value
            elif isinstance(value, str):
                item[key] = _printable(value)
        return item

    def _report_dict(self, report: BatchReport) -> Dict[str, Any]:
        return {
            "total": report.total,
            "timed_out": report.timed_out,
            "elapsed": round(report.elapsed, 3),
            "results": [self._result_dict(r) for r in report.results],
            "unreported": [_printable(h) for h in report.unreported],
        }
