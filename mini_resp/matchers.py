"""Matchers for asserting on CommandArguments.

バイト列ではなく引数の並び (論理的な同一性) で CommandArguments を検証します。
各マッチャは matches() と describe() を持ち、不一致の場合は
describe_mismatch() で実際の値を説明します。

アサーションでの使い方::

    assert_that(args, has_command(Command.ZRANGE))
    assert_that(args, has_argument_count(3))
    assert_that(args, has_argument_at(1, factory.from_long(100)))
    assert_that(args, has_arguments(Command.ZRANGE, factory.from_long(0), factory.from_long(100)))

マッチャは __eq__ で matches() を呼ぶので、unittest.mock の検証にもそのまま使えます::

    mock.send.assert_called_with(command_is(Command.GET))
    mock.send.assert_called_with(command_with_args(Command.SET, "key"))
"""

from mini_resp.args import Rawable, decode
from mini_resp.arguments import CommandArguments


def _text(arg: Rawable) -> str:
    return decode(arg.raw)


class Matcher:
    """述語オブジェクトの基底クラス."""

    def matches(self, item) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def describe_mismatch(self, item) -> str:
        return f"was {item!r}"

    def __eq__(self, other: object) -> bool:
        return self.matches(other)

    def __ne__(self, other: object) -> bool:
        return not self.matches(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"<{self.describe()}>"


class CommandArgumentsMatcher(Matcher):
    """CommandArguments 以外 (None を含む) は常に不一致として扱う."""

    def matches(self, item) -> bool:
        if not isinstance(item, CommandArguments):
            return False
        return self.matches_safely(item)

    def describe_mismatch(self, item) -> str:
        if not isinstance(item, CommandArguments):
            return f"was {item!r}"
        return self.describe_mismatch_safely(item)

    def matches_safely(self, args: CommandArguments) -> bool:
        raise NotImplementedError

    def describe_mismatch_safely(self, args: CommandArguments) -> str:
        return f"was {args!r}"


class HasCommand(CommandArgumentsMatcher):
    def __init__(self, command: Rawable) -> None:
        self.command = command

    def matches_safely(self, args: CommandArguments) -> bool:
        return self.command == args.command

    def describe(self) -> str:
        return f"CommandArguments with command {_text(self.command)!r}"

    def describe_mismatch_safely(self, args: CommandArguments) -> str:
        return f"was CommandArguments with command {_text(args.command)!r}"


class HasArgumentCount(CommandArgumentsMatcher):
    def __init__(self, expected_size: int) -> None:
        self.expected_size = expected_size

    def matches_safely(self, args: CommandArguments) -> bool:
        return args.size() == self.expected_size

    def describe(self) -> str:
        return f"CommandArguments with argument count {self.expected_size}"

    def describe_mismatch_safely(self, args: CommandArguments) -> str:
        return f"was CommandArguments with argument count {args.size()}"


class HasArgumentAt(CommandArgumentsMatcher):
    """指定位置 (0はコマンド名) の引数が等しいか. 範囲外は不一致."""

    def __init__(self, index: int, expected: Rawable) -> None:
        self.index = index
        self.expected = expected

    def _in_range(self, args: CommandArguments) -> bool:
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            return False
        return 0 <= self.index < args.size()

    def matches_safely(self, args: CommandArguments) -> bool:
        if not self._in_range(args):
            return False
        return self.expected == args.get(self.index)

    def describe(self) -> str:
        return f"CommandArguments with argument at index {self.index} equal to {_text(self.expected)!r}"

    def describe_mismatch_safely(self, args: CommandArguments) -> str:
        if not self._in_range(args):
            return f"index {self.index} is out of bounds (size: {args.size()})"
        return f"argument at index {self.index} was {_text(args.get(self.index))!r}"


class HasArguments(CommandArgumentsMatcher):
    """コマンド名を含む引数の並び全体が一致するか."""

    def __init__(self, expected: tuple[Rawable, ...]) -> None:
        self.expected = expected

    def matches_safely(self, args: CommandArguments) -> bool:
        if args.size() != len(self.expected):
            return False
        actual = args.arguments(include_command=True)
        return all(expected == arg for expected, arg in zip(self.expected, actual))

    def describe(self) -> str:
        decoded = [_text(arg) for arg in self.expected]
        return f"CommandArguments with arguments {decoded!r}"

    def describe_mismatch_safely(self, args: CommandArguments) -> str:
        decoded = [_text(arg) for arg in args.arguments(include_command=True)]
        return f"was CommandArguments with arguments {decoded!r}"


class HasArgument(CommandArgumentsMatcher):
    """デコードした引数のいずれかが expected と等しいか."""

    def __init__(self, expected: str) -> None:
        self.expected = expected

    def matches_safely(self, args: CommandArguments) -> bool:
        return any(
            self.expected == _text(arg) for arg in args.arguments(include_command=True)
        )

    def describe(self) -> str:
        return f"CommandArguments containing argument {self.expected!r}"

    def describe_mismatch_safely(self, args: CommandArguments) -> str:
        decoded = [_text(arg) for arg in args.arguments(include_command=True)]
        return f"was CommandArguments with arguments {decoded!r}"


class AllOf(Matcher):
    def __init__(self, matchers: tuple[Matcher, ...]) -> None:
        self.matchers = matchers

    def matches(self, item) -> bool:
        return all(matcher.matches(item) for matcher in self.matchers)

    def describe(self) -> str:
        return " and ".join(f"({matcher.describe()})" for matcher in self.matchers)

    def describe_mismatch(self, item) -> str:
        for matcher in self.matchers:
            if not matcher.matches(item):
                return f"{matcher.describe()} {matcher.describe_mismatch(item)}"
        return f"was {item!r}"


def has_command(command: Rawable) -> Matcher:
    return HasCommand(command)


def has_argument_count(expected_size: int) -> Matcher:
    """コマンド名を含む引数の数."""
    return HasArgumentCount(expected_size)


def has_argument_at(index: int, expected: Rawable) -> Matcher:
    return HasArgumentAt(index, expected)


def has_arguments(*expected: Rawable) -> Matcher:
    """先頭はコマンド名、続いてパラメータを順に指定する."""
    return HasArguments(expected)


def has_argument(expected: str) -> Matcher:
    return HasArgument(expected)


def all_of(*matchers: Matcher) -> Matcher:
    return AllOf(matchers)


# mock 検証用の名前. アサーション用と同じ実装を使う
command_is = has_command


def command_with_args(command: Rawable, expected_arg: str) -> Matcher:
    """コマンド名と、指定した引数を含むことの両方を要求する."""
    return all_of(has_command(command), has_argument(expected_arg))


def assert_that(item, matcher: Matcher, reason: str = "") -> None:
    """マッチしない場合、期待値と実際の値を説明する AssertionError を送出する."""
    if matcher.matches(item):
        return
    message = f"Expected: {matcher.describe()}\n     but: {matcher.describe_mismatch(item)}"
    if reason:
        message = f"{reason}\n{message}"
    raise AssertionError(message)
