import logging

SSH_LOG_FORMAT = "%(asctime)s [%(hostname)s][%(levelname)s] %(message)s"
LOG_FORMAT = "%(asctime)s:%(name)s:%(levelname)s:%(message)s"

ssh_logger = logging.getLogger("fanssh.ssh")
# 主机日志只走自己的 handler
ssh_logger.propagate = False


def _reset_handler(logger: logging.Logger, fmt: str):
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=fmt))
    logger.addHandler(handler)


def setup_logging(level: str = "WARN"):
    """配置 stderr 日志，可重复调用"""
    level = level.upper()
    _reset_handler(ssh_logger, SSH_LOG_FORMAT)
    ssh_logger.setLevel(level)

    root = logging.getLogger("fanssh")
    _reset_handler(root, LOG_FORMAT)
    root.setLevel(level)


def get_host_logger(host: str) -> logging.LoggerAdapter:
    return logging.LoggerAdapter(logger=ssh_logger, extra={"hostname": host})
