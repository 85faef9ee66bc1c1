"""Raw argument types for Redis commands.

コマンドの引数はすべて「生のバイト列に変換できる値」(Rawable) として扱います。
コマンド名やキーワードも Rawable なので、引数リストの中では同じように並びます。
"""

from dataclasses import dataclass
from enum import Enum

from mini_resp.constants import CHARSET


def encode(value: str) -> bytes:
    """文字列を UTF-8 のバイト列に変換する."""
    if value is None:
        raise TypeError("value must not be None")
    return value.encode(CHARSET)


def decode(data: bytes) -> str:
    """バイト列を UTF-8 の文字列に戻す."""
    if data is None:
        raise TypeError("data must not be None")
    return bytes(data).decode(CHARSET, errors="replace")


class Rawable:
    """生のバイト列を持つ値の基底クラス.

    等価性とハッシュは raw のバイト列だけで決まります。
    そのため Keyword.BYSCORE と RawParam(b"BYSCORE") は等しくなります。
    """

    @property
    def raw(self) -> bytes:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rawable):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.raw)


@dataclass(frozen=True, eq=False)
class RawParam(Rawable):
    """任意のバイト列を保持する引数 (一度作ったら変更しない)"""
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes):
            raise TypeError(f"RawParam requires bytes, got {type(self.value).__name__}")

    @property
    def raw(self) -> bytes:
        return self.value

    def __repr__(self) -> str:
        return f"RawParam({decode(self.value)!r})"


class Command(Rawable, Enum):
    """コマンド名. raw はコマンド名の ASCII 表現."""

    PING = "PING"
    ECHO = "ECHO"
    GET = "GET"
    SET = "SET"
    ZADD = "ZADD"
    ZRANGE = "ZRANGE"

    @property
    def raw(self) -> bytes:
        return self.value.encode("ascii")

    def __repr__(self) -> str:
        return f"Command.{self.name}"

    def __str__(self) -> str:
        return self.value


class Keyword(Rawable, Enum):
    """コマンド引数の中で使う固定キーワード."""

    BYSCORE = "BYSCORE"
    BYLEX = "BYLEX"
    REV = "REV"
    LIMIT = "LIMIT"
    NX = "NX"
    EX = "EX"

    @property
    def raw(self) -> bytes:
        return self.value.encode("ascii")

    def __repr__(self) -> str:
        return f"Keyword.{self.name}"

    def __str__(self) -> str:
        return self.value
