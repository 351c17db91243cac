import asyncio
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Dict, List, Optional

import asyncssh
import pytest

from fanssh.config.settings import RunnerConfig
from fanssh.core.models import Credential


@dataclass
class HostBehavior:
    """假传输层中单个主机的行为"""

    stdout: str = ""
    exit_status: int = 0
    delay: float = 0.0
    connect_error: Optional[Exception] = None
    session_error: Optional[Exception] = None
    run_error: Optional[Exception] = None
    hang_connect: bool = False
    hang_run: bool = False


async def _hang(transport: "FakeTransport", host: str):
    try:
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        transport.cancelled.append(host)
        raise


class FakeProcess:
    def __init__(self, transport: "FakeTransport", host: str, command: str, behavior: HostBehavior):
        self.transport = transport
        self.host = host
        self.command = command
        self.behavior = behavior
        self.close_calls = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.close_calls += 1

    async def wait(self, check: bool = False):
        behavior = self.behavior
        if behavior.hang_run:
            await _hang(self.transport, self.host)
        if behavior.run_error:
            raise behavior.run_error
        if check and behavior.exit_status != 0:
            raise asyncssh.ProcessError(
                env=None,
                command=self.command,
                subsystem=None,
                exit_status=behavior.exit_status,
                exit_signal=None,
                returncode=behavior.exit_status,
                stdout=behavior.stdout,
                stderr="",
                reason=f"Process exited with non-zero exit status {behavior.exit_status}",
            )
        return SimpleNamespace(stdout=behavior.stdout, exit_status=behavior.exit_status)


class FakeConnection:
    def __init__(self, transport: "FakeTransport", host: str, behavior: HostBehavior):
        self.transport = transport
        self.host = host
        self.behavior = behavior
        self.close_calls = 0
        self.processes: List[FakeProcess] = []
        self.stderr_args = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.close_calls += 1

    async def create_process(self, command: str, stderr=None):
        self.stderr_args.append(stderr)
        if self.behavior.session_error:
            raise self.behavior.session_error
        process = FakeProcess(self.transport, self.host, command, self.behavior)
        self.processes.append(process)
        return process


class FakeTransport:
    """记录连接参数和资源释放情况的假 asyncssh.connect"""

    def __init__(self, behaviors: Dict[str, HostBehavior] = None):
        self.behaviors = behaviors or {}
        self.calls: List[dict] = []
        self.connections: List[FakeConnection] = []
        self.cancelled: List[str] = []

    async def connect(self, **kwargs):
        self.calls.append(kwargs)
        host = kwargs["host"]
        behavior = self.behaviors.get(host, HostBehavior(stdout=f"{host}\n"))

        if behavior.delay:
            await asyncio.sleep(behavior.delay)
        if behavior.hang_connect:
            await _hang(self, host)
        if behavior.connect_error:
            raise behavior.connect_error

        conn = FakeConnection(self, host, behavior)
        self.connections.append(conn)
        return conn

    def connection_for(self, host: str) -> FakeConnection:
        return next(c for c in self.connections if c.host == host)


@pytest.fixture
def credential() -> Credential:
    return Credential(username="root", private_key=object())


@pytest.fixture
def config() -> RunnerConfig:
    return RunnerConfig(timeout=1.0)


@pytest.fixture
def private_key_file(tmp_path):
    """生成真实的私钥文件"""
    path = tmp_path / "id_ed25519"
    asyncssh.generate_private_key("ssh-ed25519").write_private_key(str(path))
    return path
