from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class ExecutionStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"


class FailureKind(Enum):
    CONNECT = "connect"
    SESSION = "session"
    COMMAND = "command"


# 失败原因的简短描述，用于输出行
FAILURE_LABELS = {
    FailureKind.CONNECT: "Create connection",
    FailureKind.SESSION: "Create session",
    FailureKind.COMMAND: "Run command",
}


@dataclass(frozen=True)
class Credential:
    """运行期共享的只读凭据"""

    username: str
    private_key: object
    key_path: Optional[Path] = None


@dataclass
class ExecutionResult:
    host: str
    status: ExecutionStatus
    stdout: str = ""
    error_message: str = ""
    failure: Optional[FailureKind] = None
    exit_code: Optional[int] = None
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    execution_time: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == ExecutionStatus.SUCCESS


@dataclass
class BatchReport:
    """一次批量执行的汇总"""

    total: int
    results: List[ExecutionResult] = field(default_factory=list)
    timed_out: bool = False
    unreported: List[str] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def succeeded(self) -> List[ExecutionResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[ExecutionResult]:
        return [r for r in self.results if not r.ok]
