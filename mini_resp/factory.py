"""Factory functions that turn native values into Rawable arguments.

数値は必ず10進数の文字列として ASCII でエンコードします。
整数は float を経由しないので、32ビットを超える値でも精度が落ちません。
"""

import math

from mini_resp.args import Keyword, RawParam, Rawable, encode
from mini_resp.constants import (
    INT_MAX,
    INT_MIN,
    LONG_MAX,
    LONG_MIN,
    NEGATIVE_INFINITY_BYTES,
    POSITIVE_INFINITY_BYTES,
)


def _require_int(value: int, low: int, high: int, kind: str) -> int:
    if value is None:
        raise TypeError(f"{kind} value must not be None")
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{kind} value must be an int, got {type(value).__name__}")
    if not low <= value <= high:
        raise ValueError(f"{kind} value out of range: {value}")
    return value


def from_long(value: int) -> Rawable:
    """64ビット整数を10進数の文字列として変換する."""
    _require_int(value, LONG_MIN, LONG_MAX, "long")
    return RawParam(str(value).encode("ascii"))


def from_int(value: int) -> Rawable:
    """32ビット整数を変換する.

    描画は from_long に任せるので、同じ値なら from_long と同じバイト列になります。
    """
    return from_long(_require_int(value, INT_MIN, INT_MAX, "int"))


def from_float(value: float) -> Rawable:
    """浮動小数点数を往復可能な10進表現で変換する.

    例: 0.1 → b"0.1", 1.0 → b"1.0", inf → b"+inf"
    """
    if value is None:
        raise TypeError("float value must not be None")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"float value must be a float, got {type(value).__name__}")
    try:
        value = float(value)
    except OverflowError as e:
        raise ValueError(f"float value out of range: {value}") from e
    if math.isnan(value):
        raise ValueError("NaN cannot be sent as a command argument")
    if value == math.inf:
        return RawParam(POSITIVE_INFINITY_BYTES)
    if value == -math.inf:
        return RawParam(NEGATIVE_INFINITY_BYTES)
    return RawParam(repr(value).encode("ascii"))


def from_str(value: str) -> Rawable:
    if not isinstance(value, str):
        raise TypeError(f"expected str, got {type(value).__name__}")
    return RawParam(encode(value))


def from_bytes(value: bytes | bytearray | memoryview) -> Rawable:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected bytes, got {type(value).__name__}")
    return RawParam(bytes(value))


def from_keyword(keyword: Keyword) -> Rawable:
    if not isinstance(keyword, Keyword):
        raise TypeError(f"expected Keyword, got {type(keyword).__name__}")
    return keyword


def from_value(value) -> Rawable:
    """型に応じて適切な変換関数を選ぶ.

    Raises:
        TypeError: None、bool、または対応していない型の場合
    """
    if value is None:
        raise TypeError("command argument must not be None")
    if isinstance(value, Rawable):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return from_bytes(value)
    if isinstance(value, str):
        return from_str(value)
    if isinstance(value, bool):
        raise TypeError("bool is not a valid command argument")
    if isinstance(value, int):
        return from_long(value)
    if isinstance(value, float):
        return from_float(value)
    raise TypeError(f"Unsupported type: {type(value)}")
