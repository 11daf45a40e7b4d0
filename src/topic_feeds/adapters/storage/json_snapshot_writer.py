"""JSON file snapshot writer."""

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path

from topic_feeds.core import FailureRecord, FeedError, Snapshot, SnapshotWriter

FALLBACK_SOURCE_NAME = "script"


def fallback_snapshot(error: BaseException, now: datetime) -> Snapshot:
    """Minimal valid snapshot recording a run-level failure."""
    return Snapshot(
        generated_at=now,
        failures=[
            FailureRecord(
                name=FALLBACK_SOURCE_NAME,
                url="",
                error=FeedError.from_exception(error, default_kind="fatal"),
            )
        ],
        items=[],
    )


class JsonSnapshotWriter(SnapshotWriter):
    """Write snapshots as pretty-printed JSON, replacing the file atomically."""
    
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
    
    def write(self, snapshot: Snapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)
        
        # Temp file in the same directory so os.replace stays on one filesystem
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
