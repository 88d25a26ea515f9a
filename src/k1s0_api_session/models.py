"""セッション・トークン・オプションのデータモデル"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SESSION_TYPE_ID_DEFAULT = "default"


@dataclass
class AccessToken:
    """認可サーバーが発行したアクセストークン。"""

    access_token: str
    expires: int | None = None  # Unix timestamp。None は無期限
    refresh_token: str = ""
    token_type: str = "Bearer"
    scope: str = ""
    values: dict[str, Any] = field(default_factory=dict)

    def has_expired(self, now: float | None = None) -> bool:
        """トークンの有効期限が切れているか確認する。無期限なら常に False。"""
        if self.expires is None:
            return False
        if now is None:
            now = time.time()
        return now >= self.expires

    @classmethod
    def from_response(
        cls, response: dict[str, Any], now: float | None = None
    ) -> AccessToken:
        """OAuth2 トークンレスポンス辞書から AccessToken を生成する。

        expires_in（相対秒）は絶対時刻に変換する。expires（絶対時刻）はそのまま使う。
        どちらも無ければ無期限トークンとして扱う。

        Raises:
            ValueError: access_token が含まれていない場合
        """
        if not response.get("access_token"):
            raise ValueError("Token response does not contain an access_token")
        if now is None:
            now = time.time()

        expires: int | None = None
        if response.get("expires_in") is not None:
            expires = int(now) + int(response["expires_in"])
        elif response.get("expires") is not None:
            expires = int(response["expires"])

        known = {"access_token", "token_type", "expires_in", "expires", "refresh_token", "scope"}
        return cls(
            access_token=response["access_token"],
            expires=expires,
            refresh_token=response.get("refresh_token") or "",
            token_type=response.get("token_type", "Bearer"),
            scope=response.get("scope", ""),
            values={k: v for k, v in response.items() if k not in known},
        )


class Session(ABC):
    """API クライアントセッション抽象基底クラス。

    セッションタイプ ID はセッションの「用途」を表す（例: ``my_app.user_import``）。
    生成後に変更されることはない。複数の用途を扱うアプリケーションは
    一意なプレフィックス付きのタイプ ID を使うこと。
    """

    def __init__(self, type_id: str = SESSION_TYPE_ID_DEFAULT) -> None:
        if not type_id:
            raise ValueError("Session type ID must be a non-empty string")
        self._type_id = type_id

    @property
    def type_id(self) -> str:
        return self._type_id

    @property
    @abstractmethod
    def expires(self) -> int | None:
        """有効期限（Unix timestamp）。未定義なら None。"""
        ...

    @abstractmethod
    def has_expired(self, now: float | None = None) -> bool:
        """セッションの有効期限が切れているか確認する。"""
        ...

    @abstractmethod
    def renew(self, access_token: AccessToken) -> Session:
        """新しいトークンで更新されたセッションを返す。"""
        ...


class AccessTokenSession(Session):
    """アクセストークンセッション。

    トークンが変われば別セッションとみなす。renew() は常に新しいオブジェクトを返す。
    """

    def __init__(
        self, access_token: AccessToken, type_id: str = SESSION_TYPE_ID_DEFAULT
    ) -> None:
        super().__init__(type_id)
        self._access_token = access_token

    @property
    def access_token(self) -> AccessToken:
        return self._access_token

    @property
    def expires(self) -> int | None:
        return self._access_token.expires

    def has_expired(self, now: float | None = None) -> bool:
        return self._access_token.has_expired(now)

    def renew(self, access_token: AccessToken) -> Session:
        return type(self)(access_token, self._type_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type_id={self._type_id!r}, expires={self.expires!r})"


class RefreshableAccessTokenSession(AccessTokenSession):
    """トークン更新を「同じセッションの継続」とみなすアクセストークンセッション。

    renew() はトークンを差し替えて自分自身を返す。
    """

    def set_access_token(self, access_token: AccessToken) -> None:
        """アクセストークンを差し替える。"""
        self._access_token = access_token

    def renew(self, access_token: AccessToken) -> Session:
        self.set_access_token(access_token)
        return self


class DurationOptions(BaseModel):
    """セッションの最低有効期間の要求。"""

    model_config = ConfigDict(extra="forbid")

    interval: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)
    start: int | None = None


class SessionManagerOptions(BaseModel):
    """セッションマネージャー設定。"""

    model_config = ConfigDict(extra="forbid")

    type_id: str = Field(default=SESSION_TYPE_ID_DEFAULT, min_length=1)
    duration: DurationOptions = Field(default_factory=DurationOptions)
    grant: dict[str, Any] = Field(default_factory=dict)
