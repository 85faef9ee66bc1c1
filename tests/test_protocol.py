"""Tests for RESP request encoding."""

import io

import pytest

from mini_resp import factory
from mini_resp.args import Command, RawParam
from mini_resp.arguments import CommandArguments
from mini_resp.params import ZRangeParams
from mini_resp.protocol import RESPEncoder
from mini_resp.stream import RedisOutputStream


@pytest.fixture
def encoder() -> RESPEncoder:
    return RESPEncoder()


@pytest.fixture
def zrange_args() -> CommandArguments:
    args = CommandArguments(Command.ZRANGE)
    ZRangeParams.zrange_params(3_000_000_000, 3_000_000_099).add_params(args)
    return args


class FailingSink:
    """write() で常に失敗するシンク."""

    def write(self, data: bytes) -> int:
        raise OSError("connection reset")

    def flush(self) -> None:
        pass


class ShortWriteSink(io.RawIOBase):
    """1回の write() で最大 4 バイトしか受け取らないシンク."""

    def __init__(self) -> None:
        self.data = bytearray()

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        chunk = bytes(b[:4])
        self.data += chunk
        return len(chunk)


class ZeroWriteSink(io.RawIOBase):
    """何も受け取らないシンク."""

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        return 0


class FakeStreamWriter:
    """asyncio.StreamWriter の代わりに書き込みを記録する."""

    def __init__(self) -> None:
        self.chunks: list[bytes] = []
        self.drained = False

    def write(self, data: bytes) -> None:
        self.chunks.append(data)

    async def drain(self) -> None:
        self.drained = True


class TestRESPEncoder:
    """マルチバルク形式のエンコードのテスト."""

    def test_encode_bulk_string(self, encoder: RESPEncoder) -> None:
        assert encoder.encode_bulk_string(b"foo") == b"$3\r\nfoo\r\n"
        assert encoder.encode_bulk_string(b"") == b"$0\r\n\r\n"
        # CRLF を含むデータもそのまま (バイナリセーフ)
        assert encoder.encode_bulk_string(b"foo\r\nbar") == b"$8\r\nfoo\r\nbar\r\n"

    def test_encode_array_header(self, encoder: RESPEncoder) -> None:
        assert encoder.encode_array_header(1) == b"*1\r\n"
        assert encoder.encode_array_header(12) == b"*12\r\n"

    def test_encode_command(self, encoder: RESPEncoder, zrange_args: CommandArguments) -> None:
        expected = b"*3\r\n$6\r\nZRANGE\r\n$10\r\n3000000000\r\n$10\r\n3000000099\r\n"
        assert encoder.encode_command(zrange_args) == expected

    def test_command_only(self, encoder: RESPEncoder) -> None:
        assert encoder.encode_command(CommandArguments(Command.PING)) == b"*1\r\n$4\r\nPING\r\n"

    def test_length_is_byte_length(self, encoder: RESPEncoder) -> None:
        """長さは文字数ではなくバイト長."""
        args = CommandArguments(Command.SET).add("key").add("日本")
        encoded = encoder.encode_command(args)
        assert b"$6\r\n" + "日本".encode("utf-8") + b"\r\n" in encoded

    def test_binary_argument(self, encoder: RESPEncoder) -> None:
        args = CommandArguments(Command.SET).add("k").append(RawParam(b"\x00\xff"))
        assert encoder.encode_command(args) == b"*3\r\n$3\r\nSET\r\n$1\r\nk\r\n$2\r\n\x00\xff\r\n"

    def test_encoding_is_deterministic(self, encoder: RESPEncoder, zrange_args: CommandArguments) -> None:
        assert encoder.encode_command(zrange_args) == encoder.encode_command(zrange_args)

    def test_iter_command_streams_blocks(self, encoder: RESPEncoder) -> None:
        args = CommandArguments(Command.GET).add("foo")
        chunks = list(encoder.iter_command(args))
        assert chunks == [b"*2\r\n", b"$3\r\nGET\r\n", b"$3\r\nfoo\r\n"]

    def test_rejects_non_arguments(self, encoder: RESPEncoder) -> None:
        with pytest.raises(TypeError):
            encoder.encode_command(["GET", "foo"])  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            encoder.encode_bulk_string(None)  # type: ignore[arg-type]


class TestSendCommand:
    """出力ストリームへの書き込みのテスト."""

    def test_send_command_matches_encode_command(
        self, encoder: RESPEncoder, zrange_args: CommandArguments
    ) -> None:
        sink = io.BytesIO()
        out = RedisOutputStream(sink)
        encoder.send_command(out, zrange_args)
        out.flush()
        assert sink.getvalue() == encoder.encode_command(zrange_args)

    def test_send_command_does_not_flush(self, encoder: RESPEncoder, zrange_args: CommandArguments) -> None:
        sink = io.BytesIO()
        out = RedisOutputStream(sink)
        encoder.send_command(out, zrange_args)
        assert sink.getvalue() == b""

    def test_pipelined_commands(self, encoder: RESPEncoder) -> None:
        sink = io.BytesIO()
        out = RedisOutputStream(sink)
        encoder.send_command(out, CommandArguments(Command.PING))
        encoder.send_command(out, CommandArguments(Command.GET).add("foo"))
        out.flush()
        assert sink.getvalue() == b"*1\r\n$4\r\nPING\r\n*2\r\n$3\r\nGET\r\n$3\r\nfoo\r\n"

    def test_small_buffer_produces_same_bytes(
        self, encoder: RESPEncoder, zrange_args: CommandArguments
    ) -> None:
        """バッファが小さくても出力は同じ."""
        sink = io.BytesIO()
        out = RedisOutputStream(sink, size=4)
        encoder.send_command(out, zrange_args)
        out.flush()
        assert sink.getvalue() == encoder.encode_command(zrange_args)

    def test_sink_failure_propagates(self, encoder: RESPEncoder, zrange_args: CommandArguments) -> None:
        out = RedisOutputStream(FailingSink())
        encoder.send_command(out, zrange_args)
        with pytest.raises(OSError, match="connection reset"):
            out.flush()

    def test_short_writes_are_completed(
        self, encoder: RESPEncoder, zrange_args: CommandArguments
    ) -> None:
        """シンクが一部しか受け取らなくても、全バイトが届く."""
        sink = ShortWriteSink()
        out = RedisOutputStream(sink)
        encoder.send_command(out, zrange_args)
        out.flush()
        assert bytes(sink.data) == encoder.encode_command(zrange_args)

    def test_short_writes_with_large_chunks(self, encoder: RESPEncoder) -> None:
        """バッファより大きい引数を直接書く場合も同じ."""
        args = CommandArguments(Command.SET).add("key").add("v" * 100)
        sink = ShortWriteSink()
        out = RedisOutputStream(sink, size=16)
        encoder.send_command(out, args)
        out.flush()
        assert bytes(sink.data) == encoder.encode_command(args)

    def test_sink_accepting_nothing_raises(
        self, encoder: RESPEncoder, zrange_args: CommandArguments
    ) -> None:
        out = RedisOutputStream(ZeroWriteSink())
        encoder.send_command(out, zrange_args)
        with pytest.raises(OSError, match="accepted no data"):
            out.flush()

    def test_sink_failure_during_send(self, encoder: RESPEncoder, zrange_args: CommandArguments) -> None:
        out = RedisOutputStream(FailingSink(), size=4)
        with pytest.raises(OSError):
            encoder.send_command(out, zrange_args)


class TestRedisOutputStream:
    """RedisOutputStream のテスト."""

    def test_write_after_close(self) -> None:
        sink = io.BytesIO()
        out = RedisOutputStream(sink)
        out.write(b"abc")
        out.close()
        assert sink.getvalue() == b"abc"
        assert out.closed
        with pytest.raises(ValueError):
            out.write(b"x")

    def test_context_manager_flushes(self) -> None:
        sink = io.BytesIO()
        with RedisOutputStream(sink) as out:
            out.write(b"42\r\n")
        assert sink.getvalue() == b"42\r\n"

    def test_large_write_bypasses_buffer(self) -> None:
        sink = io.BytesIO()
        out = RedisOutputStream(sink, size=8)
        out.write(b"ab")
        out.write(b"0123456789")
        assert sink.getvalue() == b"ab0123456789"

    def test_invalid_arguments(self) -> None:
        with pytest.raises(TypeError):
            RedisOutputStream(None)  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            RedisOutputStream(io.BytesIO(), size=0)


class TestWriteCommand:
    """asyncio の StreamWriter への書き込みのテスト."""

    @pytest.mark.asyncio
    async def test_write_command(self, encoder: RESPEncoder) -> None:
        writer = FakeStreamWriter()
        args = CommandArguments(Command.ZRANGE).add_params(ZRangeParams(0, 1))

        await encoder.write_command(writer, args)  # type: ignore[arg-type]

        assert b"".join(writer.chunks) == b"*3\r\n$6\r\nZRANGE\r\n$1\r\n0\r\n$1\r\n1\r\n"
        assert writer.drained

    @pytest.mark.asyncio
    async def test_write_command_rejects_non_arguments(self, encoder: RESPEncoder) -> None:
        writer = FakeStreamWriter()
        with pytest.raises(TypeError):
            await encoder.write_command(writer, None)  # type: ignore[arg-type]
        assert writer.chunks == []

    @pytest.mark.asyncio
    async def test_write_command_to_real_stream(self, encoder: RESPEncoder) -> None:
        """実際のソケット接続でも同じバイト列が届く."""
        import asyncio

        received: list[bytes] = []
        done = asyncio.Event()

        async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            received.append(await reader.readexactly(len(expected)))
            writer.close()
            await writer.wait_closed()
            done.set()

        args = CommandArguments(Command.GET).add(factory.from_long(3_000_000_000))
        expected = encoder.encode_command(args)

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        async with server:
            _, writer = await asyncio.open_connection("127.0.0.1", port)
            await encoder.write_command(writer, args)
            await asyncio.wait_for(done.wait(), timeout=5)
            writer.close()
            await writer.wait_closed()

        assert received == [expected]
