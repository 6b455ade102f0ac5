"""Rust 風格 Result 錯誤處理工具。

此模組提供：
- Ok / Err 包裝類型與 Result 聯集型別
- 具備 map/and_then 等鏈式操作方法
- 基礎錯誤類型階層（攜帶 context 與 cause）
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, Mapping, TypeVar, Union, cast

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


_SENSITIVE_KEYS: tuple[str, ...] = (
    "password",
    "passwd",
    "secret",
    "token",
    "api_key",
    "apikey",
    "authorization",
)


def _sanitize_context(context: Mapping[str, Any] | None) -> dict[str, Any]:
    """對錯誤 context 進行敏感資訊遮罩處理。

    - 僅針對 key 名稱包含敏感關鍵字的欄位做遮罩
    - 遞迴處理巢狀 dict
    """
    if not context:
        return {}

    def _sanitize(value: Any) -> Any:
        if isinstance(value, dict):
            mapping = cast(Mapping[str, Any], value)
            return {
                k: "***redacted***"
                if any(sk in str(k).lower() for sk in _SENSITIVE_KEYS)
                else _sanitize(v)
                for k, v in mapping.items()
            }
        return value

    return _sanitize(dict(context))


# --- 錯誤型別階層 ---


class Error(Exception):
    """基礎錯誤類型，攜帶訊息、可選的 context 與 cause。"""

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})
        self.cause: BaseException | None = cause

    def __str__(self) -> str:  # pragma: no cover - 委派給 message
        return self.message

    def log_safe_context(self) -> dict[str, Any]:
        """回傳已遮罩敏感資訊後可安全寫入日誌的 context。"""
        return _sanitize_context(self.context)


class DatabaseError(Error):
    """驅動層級的錯誤；預設用於寫入期望中的模擬失敗。"""


# --- Result / Ok / Err ---


@dataclass(slots=True)
class Ok(Generic[T, E]):
    """代表成功結果的包裝類型。"""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> E:
        raise RuntimeError("Called unwrap_err() on Ok value.")

    def map(self, fn: Callable[[T], U]) -> "Result[U, E]":
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[E], F]) -> "Result[T, F]":
        return Ok(self.value)

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return fn(self.value)

    def unwrap_or(self, default: T) -> T:
        return self.value

    def __iter__(self) -> Iterator[T]:
        yield self.value


@dataclass(slots=True)
class Err(Generic[T, E]):
    """代表失敗結果的包裝類型。"""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        raise RuntimeError(f"Called unwrap() on Err value: {self.error!r}")

    def unwrap_err(self) -> E:
        return self.error

    def map(self, fn: Callable[[T], U]) -> "Result[U, E]":
        return Err(self.error)

    def map_err(self, fn: Callable[[E], F]) -> "Result[T, F]":
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return Err(self.error)

    def unwrap_or(self, default: T) -> T:
        return default

    # Err 視為空集合
    def __iter__(self) -> Iterator[T]:
        return iter(())


Result = Union[Ok[T, E], Err[T, E]]


__all__ = [
    "Ok",
    "Err",
    "Result",
    "Error",
    "DatabaseError",
]
