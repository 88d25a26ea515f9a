"""OAuth2 グラント戦略"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from .exceptions import InvalidConfigurationError, SessionErrorCodes
from .models import AccessToken, AccessTokenSession, SessionManagerOptions
from .provider import TokenProvider
from .storage import SessionStorage

logger = logging.getLogger(__name__)


class Grant(ABC):
    """グラント戦略抽象基底クラス。

    認証方式ごとに、トークンの取得方法と必須グラントオプションを定義する。
    """

    required_options: ClassVar[tuple[str, ...]] = ()

    @property
    @abstractmethod
    def name(self) -> str:
        """OAuth2 の grant_type。"""
        ...

    def check(self, grant_options: dict[str, Any]) -> None:
        """指定済みの必須オプションの形式を検証する。欠落は検証しない。

        Raises:
            InvalidConfigurationError: 必須オプションが空または文字列でない場合
        """
        for key in self.required_options:
            if key not in grant_options:
                continue
            value = grant_options[key]
            if not isinstance(value, str) or not value:
                raise InvalidConfigurationError(
                    code=SessionErrorCodes.INVALID_OPTIONS,
                    message=f"Grant option {key!r} must be a non-empty string",
                )

    def validate(self, grant_options: dict[str, Any]) -> None:
        """必須オプションが揃っているか検証する。認証直前に呼ばれる。

        Raises:
            InvalidConfigurationError: 必須オプションが欠けている場合
        """
        missing = [key for key in self.required_options if not grant_options.get(key)]
        if missing:
            raise InvalidConfigurationError(
                code=SessionErrorCodes.MISSING_GRANT_OPTION,
                message=f"Missing required grant options for {self.name}: {', '.join(missing)}",
            )

    def prepare(
        self, options: SessionManagerOptions, storage: SessionStorage
    ) -> SessionManagerOptions:
        """欠けているグラントオプションを補完したオプションを返す。"""
        return options

    def authenticate(
        self, provider: TokenProvider, grant_options: dict[str, Any]
    ) -> AccessToken:
        """プロバイダーからアクセストークンを取得する。"""
        return provider.get_access_token(self.name, dict(grant_options))


class ClientCredentialsGrant(Grant):
    """Client Credentials グラント。scope は任意。"""

    @property
    def name(self) -> str:
        return "client_credentials"


class PasswordGrant(Grant):
    """Resource Owner Password Credentials グラント。scope は任意。"""

    required_options = ("username", "password")

    @property
    def name(self) -> str:
        return "password"


class RefreshTokenGrant(Grant):
    """Refresh Token グラント。

    refresh_token が指定されていない場合、同じタイプ ID で保存されている
    セッション（期限切れを含む）のトークンから取り出す。
    """

    required_options = ("refresh_token",)

    @property
    def name(self) -> str:
        return "refresh_token"

    def prepare(
        self, options: SessionManagerOptions, storage: SessionStorage
    ) -> SessionManagerOptions:
        if options.grant.get("refresh_token"):
            return options

        session = storage.get(options.type_id, ignore_expired=False)
        if session is None:
            logger.debug(
                "No stored session to take a refresh token from",
                extra={"type_id": options.type_id},
            )
            return options
        if not isinstance(session, AccessTokenSession):
            return options

        refresh_token = session.access_token.refresh_token
        if not refresh_token:
            logger.debug(
                "Stored session has no refresh token",
                extra={"type_id": options.type_id},
            )
            return options

        grant = dict(options.grant)
        grant["refresh_token"] = refresh_token
        return options.model_copy(update={"grant": grant})
