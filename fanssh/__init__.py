"""fanssh - Fan-out SSH command executor"""

__version__ = "0.1.0"

from .core.executor import SSHExecutor
from .core.hosts import load_hosts
from .core.credentials import load_credential
from .config.settings import RunnerConfig, load_config
from .core.errors import ConfigError, CredentialError
from .core.models import (
    BatchReport,
    Credential,
    ExecutionResult,
    ExecutionStatus,
    FailureKind,
)

__all__ = [
    "SSHExecutor",
    "load_hosts",
    "load_credential",
    "RunnerConfig",
    "load_config",
    "ConfigError",
    "CredentialError",
    "BatchReport",
    "Credential",
    "ExecutionResult",
    "ExecutionStatus",
    "FailureKind",
]
