"""
Decoding of Fluent Bit record chunks.

A chunk is a concatenation of MessagePack arrays, one per event, in one of
two shapes:

* ``[timestamp, record]`` (Fluent Bit 1.x/2.x),
* ``[[timestamp, metadata], record]`` (Fluent Bit 2.1+ with metadata).

Timestamps are either integers or the ``EventTime`` extension (type ``0``,
big‑endian seconds and nanoseconds).  Only the record part is returned; the
caller normalizes it before delivery.  Map keys are left untouched here, so
a record may still carry non‑string keys and raw byte buffers.
"""

import logging
import struct
from typing import Any, List, Optional

import msgpack

EVENT_TIME_EXT_CODE = 0
EVENT_TIME_FORMAT = ">II"


def _ext_hook(code: int, data: bytes) -> Any:
    if code == EVENT_TIME_EXT_CODE and len(data) == 8:
        seconds, nanoseconds = struct.unpack(EVENT_TIME_FORMAT, data)
        return seconds + nanoseconds / 1e9
    return msgpack.ExtType(code, data)


def _record_of(entry: Any) -> Any:
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return entry[1]
    raise ValueError(f"expected [timestamp, record], got {type(entry).__name__}")


def decode_records(data: bytes, logger: Optional[logging.Logger] = None) -> List[Any]:
    """
    Decode a chunk into the list of raw records it carries, in order.

    Malformed entries are logged and skipped.  Decoding stops with a warning
    at the first corrupt byte sequence; records decoded before it are kept.

    Parameters
    ----------
    data : bytes
        Raw chunk as handed over by the host pipeline.
    logger : Optional[logging.Logger]
        Logger instance; if omitted, a module‑level logger is created.

    Returns
    -------
    List[Any]
        Raw records (usually mappings).
    """
    logger = logger or logging.getLogger(__name__)
    unpacker = msgpack.Unpacker(
        raw=False,
        strict_map_key=False,
        unicode_errors="replace",
        timestamp=1,
        ext_hook=_ext_hook,
    )
    unpacker.feed(data)

    records = []
    try:
        for position, entry in enumerate(unpacker):
            try:
                records.append(_record_of(entry))
            except ValueError as exc:
                logger.warning("Skipping malformed entry %d: %s", position, exc)
    except (ValueError, TypeError) as exc:
        logger.warning(
            "Corrupt chunk, stopped after %d records: %s", len(records), exc
        )
    return records
