from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

import structlog

from lawsearch.core.exceptions import LawIOError
from lawsearch.report.models import SearchReport

logger = structlog.get_logger()

OUTPUT_FORMATS = ("json", "jsonl")


def render_report(report: SearchReport, fmt: str = "json") -> str:
    if fmt == "json":
        return json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2) + "\n"
    if fmt == "jsonl":
        lines = [json.dumps(m.model_dump(mode="json"), ensure_ascii=False) for m in report.matches]
        return "".join(line + "\n" for line in lines)
    raise ValueError(f"unknown output format: {fmt}")


def emit_report(report: SearchReport, destination: str | Path, fmt: str = "json") -> Path:
    """Scrive il report in modo atomico (file temporaneo + replace)."""
    path = Path(destination)
    payload = render_report(report, fmt)

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as handle:
            tmp_name = handle.name
            handle.write(payload)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name:
            Path(tmp_name).unlink(missing_ok=True)
        raise LawIOError(f"cannot write report to {path}: {exc.strerror or exc}") from exc

    logger.info("report_written", path=str(path), format=fmt, matches=len(report.matches))
    return path
