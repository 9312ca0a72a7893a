import pytest

from relaychain.primitives import (
    BlockData,
    CodecError,
    Extrinsic,
    OutgoingMessage,
    Reader,
    blake2_256,
    encode_bytes,
    encode_compact,
    encode_u32,
)


def test_pinned_wire_values():
    assert encode_compact(1) == b"\x04"
    assert encode_u32(1) == b"\x01\x00\x00\x00"
    assert encode_compact(64) == b"\x01\x01"


@pytest.mark.parametrize(
    "value", [0, 1, 63, 64, 16383, 16384, 2**30 - 1, 2**30, 2**32, 2**64 - 1, 2**128]
)
def test_compact_round_trip(value):
    reader = Reader(encode_compact(value))
    assert reader.read_compact() == value
    assert reader.remaining() == 0


def test_compact_grows_with_value():
    assert len(encode_compact(63)) < len(encode_compact(64))
    assert len(encode_compact(16383)) < len(encode_compact(16384))


def test_compact_negative_rejected():
    with pytest.raises(ValueError):
        encode_compact(-1)


def test_u32_range():
    with pytest.raises(ValueError):
        encode_u32(2**32)
    with pytest.raises(ValueError):
        encode_u32(-1)
    assert Reader(encode_u32(2**32 - 1)).read_u32() == 2**32 - 1


def test_encode_bytes_prefixes_length():
    assert encode_bytes(b"abc") == encode_compact(3) + b"abc"
    assert Reader(encode_bytes(b"abc")).read_bytes() == b"abc"


def test_reader_truncated():
    reader = Reader(b"\x01\x02")
    with pytest.raises(CodecError):
        reader.read_u32()


def test_reader_truncated_bytes():
    reader = Reader(encode_compact(10) + b"abc")
    with pytest.raises(CodecError):
        reader.read_bytes()


def test_reader_remaining_tracks_position():
    reader = Reader(b"abcdef")
    assert reader.read(2) == b"ab"
    assert reader.remaining() == 4


def test_block_data_round_trip():
    block = BlockData(bytes(range(255)))
    assert BlockData.decode(Reader(block.encode())) == block


def test_outgoing_message_encoding():
    message = OutgoingMessage(3, b"\x01")
    assert message.encode() == encode_u32(3) + encode_bytes(b"\x01")
    assert OutgoingMessage.decode(Reader(message.encode())) == message


def test_extrinsic_round_trip():
    ex = Extrinsic([OutgoingMessage(1, b"\x01\x02\x03"), OutgoingMessage(2, b"")])
    reader = Reader(ex.encode())
    assert Extrinsic.decode(reader) == ex
    assert reader.remaining() == 0


def test_empty_extrinsic_round_trip():
    ex = Extrinsic()
    assert ex.encode() == encode_compact(0)
    assert Extrinsic.decode(Reader(ex.encode())) == ex


def test_blake2_256_properties():
    digest = blake2_256(b"abc")
    assert len(digest) == 32
    assert blake2_256(b"abc") == digest
    assert blake2_256(b"abd") != digest