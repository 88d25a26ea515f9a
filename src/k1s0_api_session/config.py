"""セッションマネージャーオプションの読み込みとマージ"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from .exceptions import InvalidConfigurationError, SessionErrorCodes
from .models import SessionManagerOptions


def deep_merge(
    base: dict[str, Any], override: dict[str, Any] | BaseModel
) -> dict[str, Any]:
    """base と override をディープマージして新しい辞書を返す。

    override の値が優先される。リストは置換（マージしない）。
    override がモデルの場合は明示的に設定されたフィールドだけをマージする。
    """
    if isinstance(override, BaseModel):
        override = override.model_dump(exclude_unset=True)
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def parse_options(data: dict[str, Any] | SessionManagerOptions) -> SessionManagerOptions:
    """辞書を検証して SessionManagerOptions を返す。

    Raises:
        InvalidConfigurationError: 構造が不正な場合
    """
    if isinstance(data, SessionManagerOptions):
        return data.model_copy(deep=True)
    try:
        return SessionManagerOptions.model_validate(data)
    except ValidationError as e:
        raise InvalidConfigurationError(
            code=SessionErrorCodes.INVALID_OPTIONS,
            message=f"Session manager options validation failed: {e}",
            cause=e,
        ) from e


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML ファイルを読み込む。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidConfigurationError(
            code=SessionErrorCodes.READ_FILE,
            message=f"Failed to read options file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(
            code=SessionErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise InvalidConfigurationError(
            code=SessionErrorCodes.PARSE_YAML,
            message=f"Options file must contain a mapping: {path}",
        )
    return data


def load_options(base_path: Path, env_path: Path | None = None) -> SessionManagerOptions:
    """オプションファイルを読み込んで SessionManagerOptions を返す。

    base_path: ベースオプションファイルパス（必須）
    env_path: 環境別オプションファイルパス（オプション）。存在する場合はベースにマージ。
    """
    data = _read_yaml(base_path)
    if env_path is not None and env_path.exists():
        data = deep_merge(data, _read_yaml(env_path))
    return parse_options(data)
