import asyncio
import asyncssh
import time
from typing import Callable, List
import logging

from fanssh.config.settings import RunnerConfig
from fanssh.core.logs import get_host_logger
from fanssh.core.models import (
    FAILURE_LABELS,
    BatchReport,
    Credential,
    ExecutionResult,
    ExecutionStatus,
    FailureKind,
)

# 截止时间到达后，等待被取消任务收尾的最长时间
CANCEL_GRACE = 2.0


class SSHExecutor:
    """扇出式 SSH 执行器

    每个主机一个任务，结果经有界队列回到收集循环，整个批次共用一个截止时间。
    """

    def __init__(
        self,
        config: RunnerConfig,
        credential: Credential,
        progress_callback: Callable = None,
        connect: Callable = None,
    ):
        self.config = config
        self.credential = credential
        self.progress_callback = progress_callback
        self.logger = logging.getLogger(__name__)
        # 默认使用 asyncssh.connect，测试时可替换为假的传输层
        self._connect = connect

    def _connect_kwargs(self, host: str) -> dict:
        connect_kwargs = {
            "host": host,
            "port": self.config.port,
            "username": self.credential.username,
            "client_keys": [self.credential.private_key],
        }

        if not self.config.verify_host_identity:
            connect_kwargs["known_hosts"] = None
        elif self.config.known_hosts:
            connect_kwargs["known_hosts"] = str(self.config.known_hosts)

        return connect_kwargs

    async def execute_parallel(self, hosts: List[str], command: str) -> BatchReport:
        """在所有主机上并行执行命令，按到达顺序收集结果直到全部完成或超时"""

        loop = asyncio.get_running_loop()
        queue = asyncio.Queue(maxsize=self.config.buffer_size)

        tasks = [
            asyncio.create_task(self._dispatch(queue, host, command)) for host in hosts
        ]

        report = BatchReport(total=len(hosts))
        unreported = list(hosts)
        started = loop.time()
        deadline = started + self.config.timeout

        try:
            for _ in hosts:
                remaining = deadline - loop.time()
                try:
                    if remaining <= 0:
                        # 截止时间已到，只取已经在队列中的结果
                        result = queue.get_nowait()
                    else:
                        result = await asyncio.wait_for(queue.get(), timeout=remaining)
                except (asyncio.TimeoutError, asyncio.QueueEmpty):
                    report.timed_out = True
                    self.logger.warning(
                        f"Batch timed out after {self.config.timeout}s, "
                        f"{len(unreported)} hosts unreported"
                    )
                    break

                unreported.remove(result.host)
                report.results.append(result)

                if self.progress_callback:
                    self.progress_callback(len(report.results), report.total, result)
        finally:
            await self._cancel_pending(tasks)

        report.unreported = unreported
        report.elapsed = loop.time() - started
        return report

    async def _dispatch(self, queue: asyncio.Queue, host: str, command: str):
        """执行单个主机并把唯一的结果放入队列"""
        try:
            result = await self.execute_single(host, command)
        except Exception as e:
            self.logger.error(f"Unexpected error for {host}: {e}")
            result = ExecutionResult(
                host=host,
                status=ExecutionStatus.ERROR,
                error_message=f"Unexpected error: {e}",
            )

        await queue.put(result)

    async def _cancel_pending(self, tasks: List[asyncio.Task]):
        pending = [task for task in tasks if not task.done()]
        if not pending:
            return

        for task in pending:
            task.cancel()

        _, still_running = await asyncio.wait(pending, timeout=CANCEL_GRACE)
        if still_running:
            self.logger.warning(
                f"{len(still_running)} tasks did not finish within {CANCEL_GRACE}s of cancellation"
            )

    async def execute_single(self, host: str, command: str) -> ExecutionResult:
        """在单个主机上执行命令

        连接和命令通道都在 async with 中获取，任何退出路径都会被关闭。
        除取消外，所有错误都转换为失败结果，不会向外抛出。
        """

        result = ExecutionResult(
            host=host, status=ExecutionStatus.ERROR, start_time=time.time()
        )
        log = get_host_logger(host)
        connect = self._connect or asyncssh.connect

        try:
            try:
                conn = await connect(**self._connect_kwargs(host))
            except (OSError, asyncssh.Error) as e:
                return self._fail(result, FailureKind.CONNECT, e, log)

            async with conn:
                try:
                    process = await conn.create_process(
                        command, stderr=asyncssh.DEVNULL
                    )
                except (OSError, asyncssh.Error) as e:
                    return self._fail(result, FailureKind.SESSION, e, log)

                async with process:
                    try:
                        completed = await process.wait(check=True)
                    except asyncssh.ProcessError as e:
                        result.exit_code = e.exit_status
                        result.stdout = e.stdout or ""
                        return self._fail(result, FailureKind.COMMAND, e, log)
                    except (OSError, asyncssh.Error) as e:
                        return self._fail(result, FailureKind.COMMAND, e, log)

            result.stdout = completed.stdout or ""
            result.exit_code = completed.exit_status
            result.status = ExecutionStatus.SUCCESS
            log.info("command finished")
            return result

        finally:
            result.end_time = time.time()
            result.execution_time = result.end_time - result.start_time

    def _fail(
        self,
        result: ExecutionResult,
        kind: FailureKind,
        error: Exception,
        log: logging.LoggerAdapter,
    ) -> ExecutionResult:
        result.status = ExecutionStatus.ERROR
        result.failure = kind
        result.error_message = f"{FAILURE_LABELS[kind]}: {error}"
        log.error(result.error_message)
        return result
