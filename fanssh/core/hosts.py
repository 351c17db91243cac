"""主机列表加载"""

import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


def _decode_line(raw: bytes) -> str:
    # 只去掉 \r\n 中的 \r，行内单独的 \r 原样保留
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    # 任意字节都接受，无法解码的字节用 surrogateescape 保留
    return raw.decode("utf-8", errors="surrogateescape")


def load_hosts(path: Union[str, Path]) -> List[str]:
    """按行读取主机列表

    每个非空行就是一个主机，保持文件中的顺序和重复项，只按 \\n 分行并去掉行尾换行符。
    文件无法打开或读取时抛出 OSError。
    """
    with open(path, "rb") as f:
        data = f.read()

    hosts = []
    for raw in data.split(b"\n"):
        host = _decode_line(raw)
        if host:
            hosts.append(host)

    logger.debug(f"Loaded {len(hosts)} hosts from {path}")
    return hosts
