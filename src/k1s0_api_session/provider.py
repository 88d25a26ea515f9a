"""TokenProvider 抽象基底クラス"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .models import AccessToken


class TokenProvider(ABC):
    """認可サーバーからアクセストークンを取得するプロバイダー抽象基底クラス。"""

    @abstractmethod
    def get_access_token(self, grant: str, params: dict[str, Any]) -> AccessToken:
        """指定されたグラントタイプとパラメータでアクセストークンを取得する。"""
        ...
