"""Parameter builders that append typed arguments to a command.

ZRANGE の範囲指定を例に、int と float で異なるワイヤ表現になることを扱います。
"""

from mini_resp import factory
from mini_resp.args import Keyword, Rawable
from mini_resp.arguments import CommandArguments


class IParams:
    """CommandArguments にパラメータを追加するビルダの基底クラス."""

    def add_params(self, args: CommandArguments) -> None:
        raise NotImplementedError


class ZRangeParams(IParams):
    """ZRANGE の範囲・LIMIT パラメータ.

    ワイヤ上の並び: min max [BYSCORE|BYLEX] [REV] [LIMIT offset count]

    整数の範囲はインデックス範囲、float の範囲は BYSCORE 付きのスコア範囲になります。
    add_params() に渡した後でこのオブジェクトを変更しても、
    すでに追加された引数には影響しません。
    """

    def __init__(self, min: int | float, max: int | float) -> None:
        if isinstance(min, float) or isinstance(max, float):
            self._init(Keyword.BYSCORE, factory.from_float(min), factory.from_float(max))
        else:
            self._init(None, factory.from_long(min), factory.from_long(max))

    def _init(self, by: Keyword | None, min: Rawable, max: Rawable) -> None:
        self._by = by
        self._min = min
        self._max = max
        self._rev = False
        self._limit = False
        self._offset = 0
        self._count = 0

    @classmethod
    def _create(cls, by: Keyword | None, min: Rawable, max: Rawable) -> "ZRangeParams":
        params = cls.__new__(cls)
        params._init(by, min, max)
        return params

    @classmethod
    def zrange_params(cls, min: int, max: int) -> "ZRangeParams":
        """インデックス範囲. 32ビットを超える値もそのまま10進で送る."""
        return cls._create(None, factory.from_long(min), factory.from_long(max))

    @classmethod
    def zrange_by_score_params(cls, min: float, max: float) -> "ZRangeParams":
        return cls._create(Keyword.BYSCORE, factory.from_float(min), factory.from_float(max))

    @classmethod
    def zrange_by_lex_params(cls, min: str, max: str) -> "ZRangeParams":
        """辞書順の範囲. min/max は "[a" や "(b" や "-" "+" の形式."""
        return cls._create(Keyword.BYLEX, factory.from_str(min), factory.from_str(max))

    def rev(self) -> "ZRangeParams":
        self._rev = True
        return self

    def limit(self, offset: int, count: int) -> "ZRangeParams":
        # 範囲外の値はここで弾く
        factory.from_long(offset)
        factory.from_long(count)
        self._limit = True
        self._offset = offset
        self._count = count
        return self

    def add_params(self, args: CommandArguments) -> None:
        args.append(self._min).append(self._max)
        if self._by is not None:
            args.append(self._by)
        if self._rev:
            args.append(Keyword.REV)
        if self._limit:
            args.append(Keyword.LIMIT)
            args.append(factory.from_long(self._offset))
            args.append(factory.from_long(self._count))

    def _key(self) -> tuple:
        return (self._by, self._min, self._max, self._rev, self._limit, self._offset, self._count)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZRangeParams):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"ZRangeParams(by={self._by!r}, min={self._min!r}, max={self._max!r}, "
            f"rev={self._rev}, limit={(self._offset, self._count) if self._limit else None})"
        )
