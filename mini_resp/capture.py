"""Capture the RESP bytes a command would put on the wire.

テストで `"*3\\r\\n$6\\r\\nZRANGE\\r\\n..."` のような文字列と直接比較するための
ヘルパーです。メモリ上のシンクは失敗しないので、失敗はすべて
AssertionError として扱います。
"""

import io
import logging

from mini_resp.arguments import CommandArguments
from mini_resp.constants import CAPTURE_CHARSET
from mini_resp.protocol import RESPEncoder
from mini_resp.stream import RedisOutputStream

logger = logging.getLogger(__name__)


def capture_command_bytes(args: CommandArguments) -> bytes:
    """RESPEncoder.send_command() の出力をバイト列で返す.

    Raises:
        AssertionError: メモリ上への書き込みで例外が発生した場合
    """
    buffer = io.BytesIO()
    out = RedisOutputStream(buffer)
    try:
        RESPEncoder().send_command(out, args)
        out.flush()
    except (OSError, ValueError) as e:
        # BytesIO への書き込みは失敗しないはずなので、テスト側の不具合
        raise AssertionError("Failed to serialize command arguments") from e

    data = buffer.getvalue()
    logger.debug(f"Captured {len(data)} bytes")
    return data


def capture_command_output(args: CommandArguments) -> str:
    """RESP出力を1バイト=1文字でデコードした文字列で返す.

    例: "*3\\r\\n$6\\r\\nZRANGE\\r\\n$10\\r\\n3000000000\\r\\n$10\\r\\n3000000099\\r\\n"
    """
    return capture_command_bytes(args).decode(CAPTURE_CHARSET)
