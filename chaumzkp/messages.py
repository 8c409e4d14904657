"""Wire messages exchanged between the Chaum-Pedersen client and server.

Messages use the protocol-buffer wire format. Each field has a fixed number.
Big integers travel as minimal big-endian byte strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from chaumzkp.protocol import Commitment, ProofChallenge, PublicParameters

__all__ = [
    "SERVICE_NAME",
    "int_to_bytes",
    "int_from_bytes",
    "InitializeRequest",
    "InitializeResponse",
    "CommitmentRequest",
    "ChallengeResponse",
    "VerifyProofRequest",
    "VerifyProofResponse",
    "encode_message",
    "decode_message",
]

SERVICE_NAME = "zkp.ChaumPedersenService"

_VARINT = 0
_FIXED64 = 1
_LENGTH_DELIMITED = 2
_FIXED32 = 5
_MAX_VARINT_BYTES = 10
_UINT32_LIMIT = 1 << 32


class _Kind(Enum):
    UINT32 = "uint32"
    BOOL = "bool"
    STRING = "string"
    BIGINT = "bigint"


def int_to_bytes(value: int) -> bytes:
    """Minimal big-endian encoding of a non-negative integer; zero is one zero byte."""
    if value < 0:
        raise ValueError("value must be non-negative")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def int_from_bytes(data: bytes) -> int:
    """Decode a big-endian byte string; the empty string is zero."""
    return int.from_bytes(data, "big")


@dataclass(frozen=True)
class InitializeRequest:
    bit_size: int = 0


@dataclass(frozen=True)
class InitializeResponse:
    session_id: str = ""
    params: PublicParameters | None = None


@dataclass(frozen=True)
class CommitmentRequest:
    session_id: str = ""
    commitment: Commitment | None = None
    challenge_values: ProofChallenge | None = None


@dataclass(frozen=True)
class ChallengeResponse:
    challenge: int = 0


@dataclass(frozen=True)
class VerifyProofRequest:
    session_id: str = ""
    z: int = 0


@dataclass(frozen=True)
class VerifyProofResponse:
    verified: bool = False
    message: str = ""


_SCHEMAS: dict[type, tuple[tuple[str, int, Any], ...]] = {
    PublicParameters: (("p", 1, _Kind.BIGINT), ("q", 2, _Kind.BIGINT), ("g", 3, _Kind.BIGINT)),
    Commitment: (("a1", 1, _Kind.BIGINT), ("b1", 2, _Kind.BIGINT), ("c1", 3, _Kind.BIGINT)),
    ProofChallenge: (("y1", 1, _Kind.BIGINT), ("y2", 2, _Kind.BIGINT)),
    InitializeRequest: (("bit_size", 1, _Kind.UINT32),),
    InitializeResponse: (("session_id", 1, _Kind.STRING), ("params", 2, PublicParameters)),
    CommitmentRequest: (
        ("session_id", 1, _Kind.STRING),
        ("commitment", 2, Commitment),
        ("challenge_values", 3, ProofChallenge),
    ),
    ChallengeResponse: (("challenge", 1, _Kind.BIGINT),),
    VerifyProofRequest: (("session_id", 1, _Kind.STRING), ("z", 2, _Kind.BIGINT)),
    VerifyProofResponse: (("verified", 1, _Kind.BOOL), ("message", 2, _Kind.STRING)),
}

_DEFAULTS = {_Kind.UINT32: 0, _Kind.BOOL: False, _Kind.STRING: "", _Kind.BIGINT: 0}


def _schema_for(cls: type) -> tuple[tuple[str, int, Any], ...]:
    try:
        return _SCHEMAS[cls]
    except KeyError:
        raise TypeError(f"{cls.__name__} is not a wire message") from None


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        bits = value & 0x7F
        value >>= 7
        if value:
            out.append(bits | 0x80)
        else:
            out.append(bits)
            return bytes(out)


def _decode_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    for shift_index in range(_MAX_VARINT_BYTES):
        if pos >= len(data):
            raise ValueError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << (7 * shift_index)
        if not byte & 0x80:
            return result, pos
    raise ValueError("varint too long")


def _key(number: int, wire_type: int) -> bytes:
    return _encode_varint((number << 3) | wire_type)


def _length_delimited(number: int, payload: bytes) -> bytes:
    return _key(number, _LENGTH_DELIMITED) + _encode_varint(len(payload)) + payload


def encode_message(message: Any) -> bytes:
    """Serialise a message to wire bytes."""
    parts: list[bytes] = []
    for name, number, kind in _schema_for(type(message)):
        value = getattr(message, name)
        if kind is _Kind.UINT32:
            if not 0 <= value < _UINT32_LIMIT:
                raise ValueError(f"{name} does not fit in 32 unsigned bits")
            if value:
                parts.append(_key(number, _VARINT) + _encode_varint(value))
        elif kind is _Kind.BOOL:
            if value:
                parts.append(_key(number, _VARINT) + b"\x01")
        elif kind is _Kind.STRING:
            if value:
                parts.append(_length_delimited(number, value.encode("utf-8")))
        elif kind is _Kind.BIGINT:
            parts.append(_length_delimited(number, int_to_bytes(value)))
        elif value is not None:
            parts.append(_length_delimited(number, encode_message(value)))
    return b"".join(parts)


def decode_message(cls: type, data: bytes) -> Any:
    """Parse wire bytes into an instance of ``cls``; unknown fields are skipped."""
    schema = _schema_for(cls)
    by_number = {number: (name, kind) for name, number, kind in schema}
    values: dict[str, Any] = {
        name: _DEFAULTS.get(kind) if isinstance(kind, _Kind) else None
        for name, _, kind in schema
    }
    data = bytes(data)
    pos = 0
    while pos < len(data):
        key, pos = _decode_varint(data, pos)
        number, wire_type = key >> 3, key & 0x07
        if wire_type == _VARINT:
            raw, pos = _decode_varint(data, pos)
        elif wire_type == _LENGTH_DELIMITED:
            length, pos = _decode_varint(data, pos)
            end = pos + length
            if end > len(data):
                raise ValueError("truncated length-delimited field")
            raw, pos = data[pos:end], end
        elif wire_type == _FIXED64:
            pos += 8
            raw = None
        elif wire_type == _FIXED32:
            pos += 4
            raw = None
        else:
            raise ValueError(f"unsupported wire type {wire_type}")
        if pos > len(data):
            raise ValueError("truncated fixed-width field")

        field = by_number.get(number)
        if field is None:
            continue
        name, kind = field
        expected = _VARINT if kind in (_Kind.UINT32, _Kind.BOOL) else _LENGTH_DELIMITED
        if wire_type != expected:
            raise ValueError(f"field {name} has wire type {wire_type}, expected {expected}")

        if kind is _Kind.UINT32:
            values[name] = raw & (_UINT32_LIMIT - 1)
        elif kind is _Kind.BOOL:
            values[name] = bool(raw)
        elif kind is _Kind.STRING:
            values[name] = raw.decode("utf-8")
        elif kind is _Kind.BIGINT:
            values[name] = int_from_bytes(raw)
        else:
            values[name] = decode_message(kind, raw)
    return cls(**values)