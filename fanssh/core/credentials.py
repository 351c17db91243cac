"""私钥凭据加载"""

import logging
from pathlib import Path
from typing import Optional, Union

import asyncssh

from fanssh.core.errors import CredentialError
from fanssh.core.models import Credential

logger = logging.getLogger(__name__)


def load_credential(
    key_path: Union[str, Path], username: str, passphrase: Optional[str] = None
) -> Credential:
    """读取并解析私钥，整个批次只加载一次"""
    key_path = Path(key_path).expanduser()

    try:
        with open(key_path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise CredentialError(f"Unable to read private key: {e}", e) from e

    try:
        private_key = asyncssh.import_private_key(data, passphrase)
    except (asyncssh.KeyImportError, asyncssh.KeyEncryptionError) as e:
        raise CredentialError(f"Unable to parse private key: {e}", e) from e

    logger.debug(f"Loaded {private_key.get_algorithm()} key from {key_path}")
    return Credential(username=username, private_key=private_key, key_path=key_path)
