"""OAuth2 トークンエンドポイント実装"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from .exceptions import SessionErrorCodes, TokenRequestError
from .models import AccessToken
from .provider import TokenProvider


@dataclass
class TokenProviderConfig:
    """トークンエンドポイント設定。"""

    token_url: str
    client_id: str
    client_secret: str = ""
    timeout_seconds: float = 10.0


class HttpTokenProvider(TokenProvider):
    """httpx を使った OAuth2 トークンプロバイダー。"""

    def __init__(self, config: TokenProviderConfig) -> None:
        self._config = config

    def _request_token(self, grant: str, params: dict[str, Any]) -> dict[str, Any]:
        data = {
            "grant_type": grant,
            "client_id": self._config.client_id,
        }
        if self._config.client_secret:
            data["client_secret"] = self._config.client_secret
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                # OAuth2 の scope などはスペース区切りで送る
                value = " ".join(str(v) for v in value)
            data[key] = str(value)
        try:
            with httpx.Client(timeout=self._config.timeout_seconds) as client:
                resp = client.post(self._config.token_url, data=data)
            resp.raise_for_status()
            result: dict[str, Any] = resp.json()
            return result
        except httpx.HTTPStatusError as e:
            raise TokenRequestError(
                code=SessionErrorCodes.TOKEN_REQUEST_FAILED,
                message=f"Token request failed: HTTP {e.response.status_code}",
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise TokenRequestError(
                code=SessionErrorCodes.TOKEN_REQUEST_FAILED,
                message=f"Token request failed: {e}",
                cause=e,
            ) from e
        except ValueError as e:
            raise TokenRequestError(
                code=SessionErrorCodes.INVALID_TOKEN_RESPONSE,
                message="Token response is not valid JSON",
                cause=e,
            ) from e

    def get_access_token(self, grant: str, params: dict[str, Any]) -> AccessToken:
        """トークンエンドポイントに問い合わせて新しいアクセストークンを取得する。"""
        response = self._request_token(grant, params)
        if not isinstance(response, dict):
            raise TokenRequestError(
                code=SessionErrorCodes.INVALID_TOKEN_RESPONSE,
                message="Token response is not a JSON object",
            )
        try:
            return AccessToken.from_response(response)
        except (TypeError, ValueError) as e:
            raise TokenRequestError(
                code=SessionErrorCodes.INVALID_TOKEN_RESPONSE,
                message=f"Malformed token response: {e}",
                cause=e,
            ) from e
