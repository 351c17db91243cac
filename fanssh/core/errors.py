class FansshError(Exception):
    """启动阶段的致命错误"""


class CredentialError(FansshError):
    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class ConfigError(FansshError):
    pass
