"""主命令行接口"""

import asyncio
import click

from fanssh import __version__
from fanssh.config.settings import load_config
from fanssh.core.credentials import load_credential
from fanssh.core.errors import ConfigError, CredentialError
from fanssh.core.executor import SSHExecutor
from fanssh.core.hosts import load_hosts
from fanssh.core.logs import setup_logging
from fanssh.ui.formatter import OutputFormatter
from fanssh.ui.summary import print_summary


def _fatal(ctx: click.Context, message: str):
    click.echo(message, err=True)
    ctx.exit(1)


@click.command()
@click.version_option(version=__version__)
@click.argument("command")
@click.argument("hosts_file", type=click.Path())
@click.option("--key", "-k", type=click.Path(), help="私钥路径，默认 ~/.ssh/id_rsa")
@click.option("--user", "-u", help="远程登录用户，默认 root")
@click.option("--port", "-p", type=int, help="SSH 端口，默认 22")
@click.option("--timeout", "-t", type=float, help="整个批次的超时时间（秒），默认 5")
@click.option(
    "--verify-host/--no-verify-host",
    default=None,
    help="是否校验主机身份（known_hosts）",
)
@click.option("--known-hosts", type=click.Path(), help="校验主机身份时使用的 known_hosts 文件")
@click.option("--config", "-c", "config_path", type=click.Path(), help="YAML 配置文件路径")
@click.option(
    "--log-level",
    "-l",
    default="WARN",
    type=click.Choice(["NOTSET", "DEBUG", "INFO", "WARN", "ERROR", "FATAL"]),
    help="日志级别",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["default", "json", "yaml"]),
    default="default",
    help="输出格式",
)
@click.option("--summary", is_flag=True, help="在 stderr 输出执行汇总")
@click.pass_context
def cli(
    ctx,
    command,
    hosts_file,
    key,
    user,
    port,
    timeout,
    verify_host,
    known_hosts,
    config_path,
    log_level,
    output,
    summary,
):
    """在 HOSTS_FILE 列出的每台主机上并行执行 COMMAND

    HOSTS_FILE 每行一个主机。所有主机共用一个超时时间，超时后未返回的主机不再等待。
    """
    setup_logging(log_level)

    try:
        config = load_config(config_path).merge(
            key_path=key,
            user=user,
            port=port,
            timeout=timeout,
            verify_host_identity=verify_host,
            known_hosts=known_hosts,
        )
    except ConfigError as e:
        _fatal(ctx, f"ERROR: Invalid configuration: {e}")

    try:
        hosts = load_hosts(hosts_file)
    except OSError as e:
        _fatal(ctx, f"ERROR: Failed read hosts file {e}")

    try:
        credential = load_credential(config.key_path, config.user)
    except CredentialError as e:
        _fatal(ctx, f"ERROR: {e}")

    formatter = OutputFormatter(output)

    progress_callback = None
    if formatter.streaming:

        def progress_callback(completed, total, result):
            click.echo(formatter.outcome_line(result))

    executor = SSHExecutor(config, credential, progress_callback=progress_callback)
    report = asyncio.run(executor.execute_parallel(hosts, command))

    if formatter.streaming:
        if report.timed_out and report.unreported:
            click.echo(formatter.timeout_line(report.unreported[0]))
    else:
        click.echo(formatter.format_report(report))

    if summary:
        print_summary(report)


def main():
    """主入口函数"""
    cli()


if __name__ == "__main__":
    main()
