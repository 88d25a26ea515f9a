"""api_session ライブラリの例外型定義"""

from __future__ import annotations


class SessionError(Exception):
    """api_session ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class InvalidConfigurationError(SessionError):
    """オプションの構造不正・必須項目の欠落。I/O 前に検出される。"""


class SessionConnectionError(SessionError):
    """セッションを確立できない、または要求された有効期間を保証できない。"""


class TokenRequestError(SessionError):
    """認可サーバーへのトークン要求の失敗。"""


class SessionErrorCodes:
    """SessionError のエラーコード定数。"""

    INVALID_OPTIONS: str = "INVALID_OPTIONS"
    MISSING_GRANT_OPTION: str = "MISSING_GRANT_OPTION"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    DURATION_START_MISSING: str = "DURATION_START_MISSING"
    DURATION_LIMIT_EXCEEDED: str = "DURATION_LIMIT_EXCEEDED"
    DURATION_NOT_GUARANTEED: str = "DURATION_NOT_GUARANTEED"
    AUTHENTICATION_FAILED: str = "AUTHENTICATION_FAILED"
    TOKEN_REQUEST_FAILED: str = "TOKEN_REQUEST_FAILED"
    INVALID_TOKEN_RESPONSE: str = "INVALID_TOKEN_RESPONSE"
