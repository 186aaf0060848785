"""Fixed-size binary treasure records as stored in a hunt's treasures.dat."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

MAX_ID_SIZE = 64
MAX_USERNAME_SIZE = 64
MAX_CLUETEXT_SIZE = 128

TREASURES_FILE = "treasures.dat"

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

# id, user name, latitude, longitude, clue text, value, then padding to an
# 8-byte boundary.
_RECORD = struct.Struct(
    f"<{MAX_ID_SIZE}s{MAX_USERNAME_SIZE}sdd{MAX_CLUETEXT_SIZE}si4x"
)
RECORD_SIZE = _RECORD.size

PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class Treasure:
    """One treasure of a hunt."""

    treasure_id: str
    user_name: str
    latitude: float
    longitude: float
    clue_text: str
    value: int


def _encode_text(text: str, size: int) -> bytes:
    """Encode text to fit a NUL-terminated field of ``size`` bytes."""
    raw = text.encode("utf-8")[: size - 1]
    # Drop any multi-byte character cut in half by the truncation.
    return raw.decode("utf-8", errors="ignore").encode("utf-8")


def _decode_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def pack_treasure(treasure: Treasure) -> bytes:
    """Serialise a treasure into one fixed-size record."""
    value = int(treasure.value)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"treasure value {value} does not fit in 32 bits")
    return _RECORD.pack(
        _encode_text(treasure.treasure_id, MAX_ID_SIZE),
        _encode_text(treasure.user_name, MAX_USERNAME_SIZE),
        float(treasure.latitude),
        float(treasure.longitude),
        _encode_text(treasure.clue_text, MAX_CLUETEXT_SIZE),
        value,
    )


def unpack_treasure(data: bytes) -> Treasure:
    """Deserialise one fixed-size record."""
    if len(data) != RECORD_SIZE:
        raise ValueError(
            f"a treasure record is {RECORD_SIZE} bytes, got {len(data)}"
        )
    tid, user, lat, lon, clue, value = _RECORD.unpack(data)
    return Treasure(
        treasure_id=_decode_text(tid),
        user_name=_decode_text(user),
        latitude=lat,
        longitude=lon,
        clue_text=_decode_text(clue),
        value=value,
    )


def read_treasures(path: PathLike) -> Iterator[Treasure]:
    """Yield every complete record of a treasure file; a trailing partial record is ignored."""
    with open(path, "rb") as handle:
        while len(chunk := handle.read(RECORD_SIZE)) == RECORD_SIZE:
            yield unpack_treasure(chunk)


def append_treasure(path: PathLike, treasure: Treasure) -> None:
    """Append one record to a treasure file, creating it if needed."""
    record = pack_treasure(treasure)
    with open(path, "ab") as handle:
        handle.write(record)


def count_treasures(path: PathLike) -> int:
    """Number of complete records in a treasure file."""
    return Path(path).stat().st_size // RECORD_SIZE