"""SessionManager — セッションの再利用・更新・新規作成の判定"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from .config import deep_merge, parse_options
from .exceptions import SessionConnectionError, SessionErrorCodes
from .grants import Grant
from .models import AccessToken, AccessTokenSession, Session, SessionManagerOptions
from .provider import TokenProvider
from .storage import SessionStorage, SupportsExpirationSessionStorage

logger = logging.getLogger(__name__)


def check_duration(interval: int | None, limit: int | None, start: int | None) -> None:
    """要求された最低有効期間が保証可能か、I/O の前に検証する。

    Raises:
        SessionConnectionError: 基準時刻が無い場合、またはプロバイダーの上限を超える場合
    """
    if interval is None:
        return
    if start is None:
        raise SessionConnectionError(
            code=SessionErrorCodes.DURATION_START_MISSING,
            message="A session duration was requested without a start time to measure it from",
        )
    if limit is not None and interval > limit:
        raise SessionConnectionError(
            code=SessionErrorCodes.DURATION_LIMIT_EXCEEDED,
            message=(
                f"The requested session duration ({interval}s) exceeds the maximum "
                f"duration supported by the provider ({limit}s)"
            ),
        )


def is_duration_sufficient(expires: int | None, interval: int | None, start: int) -> bool:
    """start から数えて interval 秒以上の有効期間が残っているか。無期限なら常に True。"""
    if interval is None or expires is None:
        return True
    return expires - start >= interval


class SessionManager:
    """セッションマネージャー。

    connect() のたびに保存済みセッションを再利用するか、更新するか、
    新規に認証するかを判定する。保存済みセッションが期限切れ、または
    要求された最低有効期間を満たさない場合のみ認証を行う。

    同じタイプ ID に対する並行 connect() は両方が認証しうる（後勝ち）。
    """

    def __init__(
        self,
        grant: Grant,
        provider: TokenProvider,
        storage: SessionStorage,
        options: dict[str, Any] | SessionManagerOptions | None = None,
        *,
        defaults: dict[str, Any] | None = None,
        session_class: Callable[[AccessToken, str], Session] = AccessTokenSession,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._grant = grant
        self._provider = provider
        self._storage = storage
        self._defaults: dict[str, Any] = dict(defaults or {})
        self._session_class = session_class
        self._clock = clock
        self._configured = SessionManagerOptions()
        self._options = SessionManagerOptions()
        self.set_options(options)

    def set_options(self, options: dict[str, Any] | SessionManagerOptions | None = None) -> None:
        """マネージャーのデフォルト値にオプションをマージして設定する。

        必須グラントオプションの欠落はここでは検証しない（connect() 時に検証）。

        Raises:
            InvalidConfigurationError: オプションの構造が不正な場合
        """
        merged = deep_merge(self._defaults, options if options is not None else {})
        parsed = parse_options(merged)
        self._grant.check(parsed.grant)
        self._configured = parsed
        self._options = self._grant.prepare(parsed, self._storage)

    def get_options(self) -> SessionManagerOptions:
        """現在のオプションのコピーを返す。"""
        return self._options.model_copy(deep=True)

    def connect(self) -> Session:
        """有効なセッションを返す。必要な場合のみ認証する。

        Raises:
            InvalidConfigurationError: 必須グラントオプションが欠けている場合
            SessionConnectionError: 認証に失敗した場合、または要求された
                有効期間を保証できない場合
        """
        # 補完されるグラントオプションは保存済みセッションから毎回取り直す
        options = self._grant.prepare(self._configured.model_copy(deep=True), self._storage)
        now = self._clock()
        duration = options.duration
        start = duration.start if duration.start is not None else int(now)
        check_duration(duration.interval, duration.limit, start)

        session = self._storage.get(options.type_id)
        if session is None:
            # 期限切れのセッションは更新元としてのみ使う
            previous = self._storage.get(options.type_id, ignore_expired=False)
            logger.info("No active session found, authenticating", extra={"type_id": options.type_id})
        elif session.has_expired(now):
            previous = session
            logger.info("Stored session has expired, authenticating", extra={"type_id": options.type_id})
        elif not is_duration_sufficient(session.expires, duration.interval, start):
            previous = session
            logger.info(
                "Stored session does not last for the requested duration, authenticating",
                extra={"type_id": options.type_id, "expires": session.expires},
            )
        else:
            logger.debug("Reusing stored session", extra={"type_id": options.type_id})
            return session

        token = self._authenticate(options)
        if token.has_expired(now):
            raise SessionConnectionError(
                code=SessionErrorCodes.DURATION_NOT_GUARANTEED,
                message=f"The issued access token has already expired at {token.expires}",
            )
        if not is_duration_sufficient(token.expires, duration.interval, start):
            raise SessionConnectionError(
                code=SessionErrorCodes.DURATION_NOT_GUARANTEED,
                message=(
                    f"The issued access token expires at {token.expires}, before the "
                    f"requested duration of {duration.interval}s from {start}"
                ),
            )

        if previous is not None:
            renewed = previous.renew(token)
        else:
            renewed = self._session_class(token, options.type_id)
        self._storage.set(renewed)
        logger.info(
            "Session connected",
            extra={"type_id": options.type_id, "expires": renewed.expires},
        )
        return renewed

    def disconnect(self) -> None:
        """保存済みセッションを閉じる。

        ストレージが期限切れのスケジュールをサポートしていれば即時期限切れにし、
        そうでなければ削除する。
        """
        type_id = self._options.type_id
        if isinstance(self._storage, SupportsExpirationSessionStorage):
            self._storage.expire(type_id, 0)
        else:
            self._storage.delete(type_id)

    def _authenticate(self, options: SessionManagerOptions) -> AccessToken:
        self._grant.validate(options.grant)
        try:
            return self._grant.authenticate(self._provider, options.grant)
        except Exception as e:
            logger.warning(
                "Authentication failed",
                extra={"type_id": options.type_id, "grant": self._grant.name, "error": str(e)},
            )
            raise SessionConnectionError(
                code=SessionErrorCodes.AUTHENTICATION_FAILED,
                message=f"Could not authenticate using the {self._grant.name} grant: {e}",
                cause=e,
            ) from e
