"""SessionStorage 抽象基底クラス

API プロバイダーはリクエストごとにアクセストークンを要求するため、
同じセッションに属する呼び出しが再利用できるよう保存しておく必要がある。
具体的なデータストアはアプリケーション側で実装する。

読み取り系メソッドはデフォルトで期限切れセッションを「存在しない」ものとして扱う。
物理的な削除のタイミングはストレージ実装に依存する。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import SESSION_TYPE_ID_DEFAULT, Session


class SessionStorage(ABC):
    """セッションストレージ抽象基底クラス。"""

    @abstractmethod
    def set(self, session: Session) -> None:
        """セッションを保存する。同じタイプ ID のセッションは上書きされる。"""
        ...

    @abstractmethod
    def get(
        self,
        type_id: str = SESSION_TYPE_ID_DEFAULT,
        ignore_expired: bool = True,
    ) -> Session | None:
        """タイプ ID に対応するセッションを取得する。

        存在しない場合、または期限切れで ignore_expired が True の場合は None。
        """
        ...

    @abstractmethod
    def exists(
        self,
        type_id: str = SESSION_TYPE_ID_DEFAULT,
        ignore_expired: bool = True,
    ) -> bool:
        """タイプ ID に対応するセッションが存在するか確認する。"""
        ...

    @abstractmethod
    def delete(self, type_id: str = SESSION_TYPE_ID_DEFAULT) -> None:
        """セッションを削除する。存在しなくてもエラーにしない。"""
        ...

    @abstractmethod
    def count(self, ignore_expired: bool = True) -> int:
        """保存されているセッション数を返す。"""
        ...


class SupportsExpirationSessionStorage(SessionStorage):
    """セッションの期限切れをスケジュールできるストレージ。"""

    @abstractmethod
    def expire(
        self,
        type_id: str = SESSION_TYPE_ID_DEFAULT,
        interval: int = 0,
    ) -> None:
        """現在時刻から interval 秒後にセッションを期限切れにする。

        存在しないタイプ ID の場合は何もしない。
        """
        ...


class SessionStorageWithGarbageCollection(SupportsExpirationSessionStorage):
    """期限切れセッションの物理削除（ガベージコレクション）をサポートするストレージ。"""

    @abstractmethod
    def delete_expired(self, type_id: str | None = None) -> None:
        """期限切れセッションを削除する。type_id が None なら全タイプが対象。"""
        ...
