"""
JSON-lines trace of a single event stream run.

One record per line:

    {"ts": ..., "kind": "chunk", "index": 1, "raw": "event:stdout\\ndata:hi", "event": {"name": "stdout", "data": "hi"}}
    {"ts": ..., "kind": "action", "index": 1, "action": "WriteStdout", "fields": {"text": "hi"}}

Malformed chunks are recorded with "event": null and "malformed": true.
Once the byte budget is spent a final {"kind": "truncated"} record is
written and everything after it is dropped.
"""

from __future__ import annotations

import dataclasses
import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, TYPE_CHECKING

from sse_events.parser import StreamEvent

if TYPE_CHECKING:
    from sse_events import Action, ParseResult

logger = logging.getLogger(__name__)


def _trace_file_name(run_id: str, route: str) -> str:
    safe_route = "".join(c if c.isalnum() or c in "-." else "-" for c in route) or "stream"
    timestamp = datetime.datetime.now(datetime.timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"{timestamp}_{safe_route}_{run_id}.jsonl"


class StreamTracer:
    """Appends trace records for one run to a .jsonl file."""

    def __init__(self, path: Path, max_bytes: Optional[int] = None):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open("w", encoding="utf-8")
        self._budget = max_bytes if isinstance(max_bytes, int) and max_bytes > 0 else None
        self._written = 0
        self.truncated = False

    @classmethod
    def open(cls, base_dir: str, run_id: str, route: str, max_bytes: Optional[int] = None) -> "StreamTracer":
        tracer = cls(Path(base_dir) / _trace_file_name(run_id, route), max_bytes=max_bytes)
        tracer.note(f"run {run_id} started for {route}")
        return tracer

    def chunk(self, index: int, raw: str, result: "ParseResult") -> None:
        """Record a raw chunk together with what it parsed into."""
        if isinstance(result, StreamEvent):
            self._record("chunk", index=index, raw=raw, event=dataclasses.asdict(result), malformed=False)
        else:
            self._record("chunk", index=index, raw=raw, event=None, malformed=True)

    def action(self, index: int, action: "Action") -> None:
        """Record the action chunk `index` resolved to."""
        self._record("action", index=index, action=type(action).__name__, fields=dataclasses.asdict(action))

    def note(self, message: str) -> None:
        self._record("note", message=message)

    def error(self, message: str) -> None:
        self._record("error", message=message)

    def close(self) -> None:
        if not self._file.closed:
            self._record("note", message="trace closed")
            self._file.close()

    def __enter__(self) -> "StreamTracer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _record(self, kind: str, **fields: Any) -> None:
        if self._file.closed or self.truncated:
            return

        record: Dict[str, Any] = {
            "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="milliseconds"),
            "kind": kind,
            **fields,
        }
        line = json.dumps(record, ensure_ascii=False) + "\n"
        size = len(line.encode("utf-8"))

        if self._budget is not None and self._written + size > self._budget:
            self.truncated = True
            self._file.write(json.dumps({"kind": "truncated", "written_bytes": self._written}) + "\n")
            self._file.flush()
            logger.debug(f"Stream trace {self.path} reached {self._budget} bytes, further records dropped")
            return

        self._file.write(line)
        self._file.flush()
        self._written += size
