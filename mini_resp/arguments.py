"""Ordered argument list for a single Redis command.

位置0は常にコマンド名で、パラメータは追加した順に位置1..Nへ並びます。
1つのインスタンスは1つのコマンドの組み立てにだけ使い、共有しません。
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING

from mini_resp import factory
from mini_resp.args import Rawable, decode

if TYPE_CHECKING:
    from mini_resp.params import IParams


class CommandArguments:
    """コマンド名とパラメータのリスト.

    責務:
    - コマンド名 (構築時に一度だけ設定) の保持
    - Rawable パラメータの追加と位置によるアクセス
    """

    def __init__(self, command: Rawable) -> None:
        """引数リストを初期化.

        Args:
            command: コマンド名 (通常は Command のメンバ)

        Raises:
            TypeError: command が Rawable でない場合
        """
        if not isinstance(command, Rawable):
            raise TypeError(f"command must be Rawable, got {type(command).__name__}")
        self._command = command
        self._params: list[Rawable] = []

    @property
    def command(self) -> Rawable:
        return self._command

    def get_command(self) -> Rawable:
        return self._command

    def append(self, param: Rawable) -> "CommandArguments":
        """Rawable を1つ末尾に追加する."""
        if not isinstance(param, Rawable):
            raise TypeError(f"param must be Rawable, got {type(param).__name__}")
        self._params.append(param)
        return self

    def add(self, value) -> "CommandArguments":
        """ネイティブ値を Rawable に変換してから追加する."""
        return self.append(factory.from_value(value))

    def add_objects(self, *values) -> "CommandArguments":
        for value in values:
            self.add(value)
        return self

    def add_params(self, params: "IParams") -> "CommandArguments":
        params.add_params(self)
        return self

    def size(self) -> int:
        """コマンド名を含む引数の数."""
        return len(self._params) + 1

    def get(self, index: int) -> Rawable:
        """指定位置の引数を返す (0はコマンド名).

        Raises:
            IndexError: 範囲外の位置を指定した場合
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"index must be an int, got {type(index).__name__}")
        if index < 0 or index >= self.size():
            raise IndexError(f"argument index {index} out of range (size: {self.size()})")
        if index == 0:
            return self._command
        return self._params[index - 1]

    def arguments(self, include_command: bool = False) -> Iterator[Rawable]:
        if include_command:
            yield self._command
        yield from self._params

    def __len__(self) -> int:
        return self.size()

    def __getitem__(self, index: int) -> Rawable:
        return self.get(index)

    def __iter__(self) -> Iterator[Rawable]:
        return iter(self._params)

    def __repr__(self) -> str:
        decoded = [decode(arg.raw) for arg in self.arguments(include_command=True)]
        return f"CommandArguments({decoded!r})"
