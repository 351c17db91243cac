"""运行配置"""

import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from fanssh.core.errors import ConfigError

logger = logging.getLogger(__name__)

# 用于存储 fanssh 相关文件的主目录
MAIN_DIR = Path.home() / ".fanssh"
DEFAULT_CONFIG_PATH = MAIN_DIR / "config.yaml"


@dataclass
class RunnerConfig:
    """一次批量执行的全部可调参数"""

    key_path: Path = field(default_factory=lambda: Path("~/.ssh/id_rsa").expanduser())
    user: str = "root"
    port: int = 22
    timeout: float = 5.0
    verify_host_identity: bool = True
    known_hosts: Optional[Path] = None
    buffer_size: int = 10

    def __post_init__(self):
        self.key_path = Path(self.key_path).expanduser()
        if self.known_hosts is not None:
            self.known_hosts = Path(self.known_hosts).expanduser()
        self._validate()

    def _validate(self):
        if not self.user:
            raise ConfigError("user must not be empty")
        if isinstance(self.port, bool) or not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ConfigError(f"Invalid port: {self.port!r}")
        if (
            isinstance(self.timeout, bool)
            or not isinstance(self.timeout, (int, float))
            or not math.isfinite(self.timeout)
            or self.timeout <= 0
        ):
            raise ConfigError(f"timeout must be a positive number: {self.timeout!r}")
        if not isinstance(self.verify_host_identity, bool):
            raise ConfigError(
                f"verify_host_identity must be true or false: {self.verify_host_identity!r}"
            )
        if not isinstance(self.buffer_size, int) or self.buffer_size < 1:
            raise ConfigError(f"buffer_size must be >= 1: {self.buffer_size!r}")

    def merge(self, **overrides) -> "RunnerConfig":
        """用非 None 的命令行参数覆盖配置"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def _parse_config(raw: Dict[str, Any]) -> RunnerConfig:
    known = {f.name for f in fields(RunnerConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    try:
        return RunnerConfig(**raw)
    except TypeError as e:
        raise ConfigError(f"Invalid config value: {e}") from e


def load_config(config_path: Union[str, Path, None] = None) -> RunnerConfig:
    """加载 YAML 配置

    未指定路径时读取 ~/.fanssh/config.yaml，不存在则使用默认值。
    """
    explicit = config_path is not None
    config_path = Path(config_path).expanduser() if explicit else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        return RunnerConfig()

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    logger.debug(f"Loaded config from {config_path}")
    return _parse_config(raw)
