"""Buffered binary output stream for RESP requests.

書き込みは内部バッファに貯めて、バッファが一杯になったときか
flush() が呼ばれたときだけ下位のシンクへ書き出します。
"""

import logging
from typing import BinaryIO

from mini_resp.constants import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)


class RedisOutputStream:
    """バイナリシンクをラップするバッファ付き出力ストリーム.

    責務:
    - 小さな書き込みをまとめてシンクへ送る
    - シンクの OSError をそのまま呼び出し元へ伝える
    """

    def __init__(self, out: BinaryIO, size: int = DEFAULT_BUFFER_SIZE) -> None:
        """ストリームを初期化.

        Args:
            out: write() と flush() を持つバイナリシンク (BytesIO, socket.makefile("wb") など)
            size: 内部バッファのサイズ (バイト)
        """
        if out is None:
            raise TypeError("out must not be None")
        if size <= 0:
            raise ValueError(f"Buffer size must be positive: {size}")
        self._out = out
        self._size = size
        self._buf = bytearray()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("write to closed RedisOutputStream")

    def _write_all(self, data: bytes) -> None:
        """シンクが一部しか受け取らなくても、全バイトを書き切る.

        Raises:
            OSError: シンクが1バイトも受け取らなかった場合
        """
        view = memoryview(data)
        while view:
            written = self._out.write(view)
            if written is None:
                raise BlockingIOError(f"sink would block with {len(view)} bytes unwritten")
            if written <= 0:
                raise OSError(f"sink accepted no data, {len(view)} bytes unwritten")
            view = view[written:]

    def _flush_buffer(self) -> None:
        if self._buf:
            logger.debug(f"Flushing {len(self._buf)} bytes to sink")
            self._write_all(bytes(self._buf))
            self._buf.clear()

    def write(self, data: bytes) -> None:
        self._check_open()
        if len(data) >= self._size:
            # バッファより大きいデータは直接書き出す
            self._flush_buffer()
            self._write_all(bytes(data))
            return
        if len(self._buf) + len(data) > self._size:
            self._flush_buffer()
        self._buf += data

    def flush(self) -> None:
        self._check_open()
        self._flush_buffer()
        self._out.flush()

    def close(self) -> None:
        if self._closed:
            return
        try:
            self.flush()
        finally:
            self._closed = True

    def __enter__(self) -> "RedisOutputStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
