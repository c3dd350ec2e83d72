"""Placeholder export — background SVG rendering with progress and cancel.

Renders one ``<id>.svg`` per tape that has no artwork, using the same
PatternGenerator as on-demand requests so offline and live output agree.
"""

import json
import logging
import os
import re
import threading
from dataclasses import dataclass, field
from enum import Enum

import sentry_sdk

from engine.generator import PatternGenerator
from engine.models import Identity, PatternConfig
from engine.svg import save_svg

logger = logging.getLogger(__name__)

# Cover value the site uses when a tape has no real cover
BLANK_COVER = "/media/site/blank-tape.svg"
UNKNOWN_CREATOR = "Unknown"

_SAFE_ID = re.compile(r"^[A-Za-z0-9._-]+$")


class ExportStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass(frozen=True)
class PlaceholderRequest:
    tape_id: str
    identity: Identity


def needs_placeholder(tape: dict) -> bool:
    """True when a tape has neither a real cover nor any side image."""
    images = tape.get("images") or {}
    cover = images.get("cover")
    has_cover = bool(cover) and cover != BLANK_COVER
    has_sides = any(side.get("image") for side in tape.get("sides") or [])
    return not (has_cover or has_sides)


def tape_identity(tape: dict) -> Identity:
    djs = tape.get("djs") or []
    creator = (djs[0].get("name") if djs else None) or UNKNOWN_CREATOR
    released = tape.get("released")
    year = str(released) if released not in (None, "") else None
    return Identity(creator, str(tape.get("title", "")), year)


def placeholder_requests(tapes: list[dict]) -> tuple[list[PlaceholderRequest], int]:
    """Select the tapes that need a placeholder.

    Returns (requests, skipped) where skipped counts tapes with artwork and
    tapes whose id is not safe to use as a file name.
    """
    requests = []
    skipped = 0
    for tape in tapes:
        if not needs_placeholder(tape):
            skipped += 1
            continue
        tape_id = str(tape.get("id", ""))
        if not _SAFE_ID.match(tape_id):
            logger.warning("Skipping tape with unusable id %r", tape_id)
            skipped += 1
            continue
        requests.append(PlaceholderRequest(tape_id, tape_identity(tape)))
    return requests, skipped


def load_tapes(path: str) -> list[dict]:
    """Read a tapes JSON file (a list of tape records).

    Raises:
        ValueError: If the file does not hold a JSON list.
    """
    with open(path, encoding="utf-8") as f:
        tapes = json.load(f)
    if not isinstance(tapes, list):
        raise ValueError(f"Expected a list of tapes in {path}")
    return tapes


@dataclass
class ExportJob:
    """Tracks state of a background placeholder export."""

    status: ExportStatus = ExportStatus.IDLE
    current: int = 0
    total: int = 0
    skipped: int = 0
    error: str | None = None
    output_dir: str = ""
    _lock: threading.Lock = field(default_factory=threading.Lock)
    _cancel_event: threading.Event = field(default_factory=threading.Event)
    _thread: threading.Thread | None = field(default=None, repr=False)

    @property
    def progress(self) -> float:
        if self.total == 0:
            return 0.0
        return self.current / self.total

    def cancel(self):
        self._cancel_event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the worker exits. Returns False on timeout."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()


class PlaceholderExporter:
    """Manages background placeholder exports. One job at a time."""

    def __init__(
        self,
        generator: PatternGenerator,
        config: PatternConfig | None = None,
    ):
        self.generator = generator
        self.config = config if config is not None else PatternConfig()
        self._job: ExportJob | None = None

    @property
    def job(self) -> ExportJob | None:
        return self._job

    def start(self, tapes: list[dict], output_dir: str) -> ExportJob:
        """Start a background export. Returns the job for status tracking.

        Raises:
            RuntimeError: If an export is already running.
        """
        if self._job is not None and self._job.status == ExportStatus.RUNNING:
            raise RuntimeError("Export already in progress")

        requests, skipped = placeholder_requests(tapes)
        job = ExportJob(output_dir=output_dir, total=len(requests), skipped=skipped)
        self._job = job

        thread = threading.Thread(
            target=self._run_export,
            args=(job, requests, output_dir),
            daemon=True,
        )
        job._thread = thread
        job.status = ExportStatus.RUNNING
        thread.start()

        return job

    def _run_export(
        self,
        job: ExportJob,
        requests: list[PlaceholderRequest],
        output_dir: str,
    ):
        try:
            os.makedirs(output_dir, exist_ok=True)

            for i, request in enumerate(requests):
                if job._cancel_event.is_set():
                    with job._lock:
                        job.status = ExportStatus.CANCELLED
                    return

                identity = request.identity
                pattern = self.generator.generate_pattern(
                    identity.creator_name,
                    identity.item_title,
                    identity.year,
                    self.config,
                )
                path = os.path.join(output_dir, f"{request.tape_id}.svg")
                save_svg(pattern, path)
                logger.debug("Wrote placeholder %s", path)

                with job._lock:
                    job.current = i + 1

            with job._lock:
                job.status = ExportStatus.COMPLETE
            logger.info(
                "Generated %d placeholders, skipped %d tapes",
                job.current,
                job.skipped,
            )

        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.exception("Placeholder export failed")
            with job._lock:
                job.status = ExportStatus.ERROR
                job.error = f"Export failed: {type(e).__name__}"

    def get_status(self) -> dict:
        """Return serializable status dict."""
        if self._job is None:
            return {
                "status": ExportStatus.IDLE.value,
                "progress": 0.0,
                "current": 0,
                "total": 0,
                "skipped": 0,
            }
        with self._job._lock:
            return {
                "status": self._job.status.value,
                "progress": round(self._job.progress, 4),
                "current": self._job.current,
                "total": self._job.total,
                "skipped": self._job.skipped,
                "output_dir": self._job.output_dir,
                "error": self._job.error,
            }

    def cancel(self) -> bool:
        """Cancel the running export. Returns True if a job was cancelled."""
        if self._job is None:
            return False
        with self._job._lock:
            if self._job.status == ExportStatus.RUNNING:
                self._job.cancel()
                return True
        return False
