"""
P-MATRIX -- Wire Codec

JSON encode/decode for runtime state records. This is the decode boundary:
anything that is not exactly a canonical record (unknown keys, missing keys,
wrong types, non-canonical mode / risk_level strings) fails here with a
DecodeError and never reaches the invariant validator.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError

from pmatrix.primitives.record import RuntimeStateRecord
from pmatrix.systems.conformance.errors import DecodeError

logger = structlog.get_logger()


def encode_record(record: RuntimeStateRecord, indent: int | None = None) -> str:
    """Serialise a record to JSON. ``indent`` pretty-prints."""
    return record.model_dump_json(indent=indent)


def _summarise(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def decode_record(data: str | bytes) -> RuntimeStateRecord:
    """Parse one JSON object into a record, or raise DecodeError."""
    try:
        return RuntimeStateRecord.model_validate_json(data)
    except ValidationError as e:
        message = _summarise(e)
        logger.warning("record_decode_failed", error=message)
        raise DecodeError(message) from e


def decode_stream(data: str | bytes) -> list[RuntimeStateRecord]:
    """
    Parse a JSON Lines stream: one record per non-blank line, in emission
    order. The first malformed line aborts the whole stream.

    Lines break on LF only, with a trailing CR dropped. JSON strings may
    hold U+2028, U+0085 and other Unicode line breaks unescaped.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"stream is not valid UTF-8: {e}") from e

    records: list[RuntimeStateRecord] = []
    for lineno, line in enumerate(data.split("\n"), start=1):
        line = line.removesuffix("\r")
        if not line.strip():
            continue
        try:
            records.append(RuntimeStateRecord.model_validate_json(line))
        except ValidationError as e:
            message = _summarise(e)
            logger.warning("record_decode_failed", line=lineno, error=message)
            raise DecodeError(message, line=lineno) from e
    return records
