"""RESP (REdis Serialization Protocol) request encoder.

このモジュールは、CommandArguments を RESP のマルチバルク形式
(バイト列) にエンコードする処理を担当します。

    *<N>\\r\\n
    $<len(arg0)>\\r\\n<arg0>\\r\\n
    ...

N はコマンド名を含む引数の数、len は文字数ではなくバイト長です。
"""

import logging
from asyncio import StreamWriter
from collections.abc import Iterator

from mini_resp.args import decode
from mini_resp.arguments import CommandArguments
from mini_resp.constants import ASTERISK_BYTE, CRLF, DOLLAR_BYTE
from mini_resp.stream import RedisOutputStream

logger = logging.getLogger(__name__)


class RESPEncoder:
    """RESPリクエストのエンコーダ.

    責務:
    - 引数リストをマルチバルク形式へ変換
    - 出力全体を組み立てずに、先頭から順にシンクへ書き出す
    """

    def encode_array_header(self, count: int) -> bytes:
        """配列ヘッダをエンコードする (例: 3 → b'*3\\r\\n')"""
        return ASTERISK_BYTE + str(count).encode("ascii") + CRLF

    def encode_bulk_string(self, raw: bytes) -> bytes:
        """Bulk Stringをエンコードする (例: b'foo' → b'$3\\r\\nfoo\\r\\n')"""
        if raw is None:
            raise TypeError("bulk string must not be None")
        return DOLLAR_BYTE + str(len(raw)).encode("ascii") + CRLF + raw + CRLF

    def iter_command(self, args: CommandArguments) -> Iterator[bytes]:
        """コマンドのワイヤ表現を先頭から1ブロックずつ返す."""
        if not isinstance(args, CommandArguments):
            raise TypeError(f"Unsupported type: {type(args)}")

        yield self.encode_array_header(args.size())
        for arg in args.arguments(include_command=True):
            yield self.encode_bulk_string(arg.raw)

    def encode_command(self, args: CommandArguments) -> bytes:
        """コマンド全体をバイト列として返す."""
        return b"".join(self.iter_command(args))

    def send_command(self, out: RedisOutputStream, args: CommandArguments) -> None:
        """コマンドを出力ストリームへ書き込む.

        flush() は呼ばないので、パイプラインで複数コマンドをまとめて送れます。

        Raises:
            OSError: シンクへの書き込みに失敗した場合
        """
        if not isinstance(args, CommandArguments):
            raise TypeError(f"Unsupported type: {type(args)}")

        logger.debug(f"Sending {_command_name(args)} with {len(args)} arguments")

        for chunk in self.iter_command(args):
            out.write(chunk)

    async def write_command(self, writer: StreamWriter, args: CommandArguments) -> None:
        """asyncio の StreamWriter へコマンドを書き込み、drain() で送信を待つ."""
        if not isinstance(args, CommandArguments):
            raise TypeError(f"Unsupported type: {type(args)}")

        logger.debug(f"Writing {_command_name(args)} with {len(args)} arguments")

        for chunk in self.iter_command(args):
            writer.write(chunk)
        await writer.drain()


def _command_name(args: CommandArguments) -> str:
    return decode(args.command.raw)
