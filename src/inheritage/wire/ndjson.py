"""NDJSON (Newline-Delimited JSON) decoding for streamed list responses.

This module provides:

* **decode_ndjson** -- decodes a fully buffered NDJSON body.
* **NDJSONReader** -- decodes records incrementally from an async byte
  stream (typically ``httpx.Response.aiter_bytes()``).

Framing rules:
- Each record is one JSON document on its own line.
- Blank lines are silently skipped.
- Records are returned in encounter order.
- When a record ceiling is given, decoding stops as soon as that many
  records are held; remaining input is neither read nor parsed.
"""
from __future__ import annotations

import codecs
import json
from collections.abc import AsyncIterator, Iterable
from typing import Any

from inheritage.core.errors import DecodeError


def parse_record(line: str, *, line_number: int) -> Any:
    """Parse one NDJSON line.

    Raises
    ------
    DecodeError
        If *line* is not a valid JSON document.
    """
    try:
        return json.loads(line)
    except json.JSONDecodeError as exc:
        raise DecodeError(
            f"Invalid JSON in NDJSON line {line_number}: {exc.msg}",
            line=line_number,
            position=exc.pos,
        ) from exc
    except (ValueError, RecursionError) as exc:
        raise DecodeError(
            f"Invalid JSON in NDJSON line {line_number}: {exc}",
            line=line_number,
        ) from exc


def _ceiling_reached(records: list[Any], max_records: int | None) -> bool:
    return max_records is not None and len(records) >= max_records


def iter_lines(raw: str | bytes) -> Iterable[str]:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"NDJSON body is not valid UTF-8: {exc.reason}",
                position=exc.start,
            ) from exc
    # str.splitlines() would also break on U+2028, which JSON allows inside strings
    return [line.removesuffix("\r") for line in raw.split("\n")]


def decode_ndjson(raw: str | bytes, *, max_records: int | None = None) -> list[Any]:
    """Decode a buffered NDJSON body into an ordered list of records.

    Parameters
    ----------
    raw:
        The response body.
    max_records:
        Optional ceiling.  ``0`` or a negative value yields an empty list.

    Raises
    ------
    DecodeError
        If a non-blank line is not valid JSON.
    """
    records: list[Any] = []
    if _ceiling_reached(records, max_records):
        return records
    for index, line in enumerate(iter_lines(raw), start=1):
        if not line.strip():
            continue
        records.append(parse_record(line, line_number=index))
        if _ceiling_reached(records, max_records):
            break
    return records


class NDJSONReader:
    """Reads NDJSON records from an async stream of raw byte chunks.

    Chunks (typically ``httpx.Response.aiter_bytes()``) may split a record,
    or a multi-byte character, anywhere.  Bytes are decoded as strict
    UTF-8 and lines are reassembled on ``\\n`` before parsing.

    Parameters
    ----------
    chunks:
        Async iterator of body bytes.
    """

    def __init__(self, chunks: AsyncIterator[bytes]) -> None:
        self._chunks = chunks
        self._decoder = codecs.getincrementaldecoder("utf-8")()

    def _decode(self, chunk: bytes, *, final: bool = False) -> str:
        try:
            return self._decoder.decode(chunk, final)
        except UnicodeDecodeError as exc:
            raise DecodeError(f"NDJSON body is not valid UTF-8: {exc.reason}") from exc

    async def _lines(self) -> AsyncIterator[str]:
        buffer = ""
        async for chunk in self._chunks:
            buffer += self._decode(chunk)
            *complete, buffer = buffer.split("\n")
            for line in complete:
                yield line.removesuffix("\r")
        buffer += self._decode(b"", final=True)
        if buffer:
            yield buffer.removesuffix("\r")

    async def read_records(self, *, max_records: int | None = None) -> list[Any]:
        """Read records until the stream ends or *max_records* are held.

        Raises
        ------
        DecodeError
            If a non-blank line is not valid JSON, or the body is not
            valid UTF-8.
        """
        records: list[Any] = []
        if _ceiling_reached(records, max_records):
            return records
        line_number = 0
        lines = self._lines()
        try:
            async for line in lines:
                line_number += 1
                if not line.strip():
                    continue
                records.append(parse_record(line, line_number=line_number))
                if _ceiling_reached(records, max_records):
                    break
        finally:
            await lines.aclose()
        return records
