from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

import structlog

from lawsearch.core.config import SearchOptions
from lawsearch.core.exceptions import ConfigError, LawIOError, ParseError
from lawsearch.ingestion.catalog import LawRecord, resolve_path
from lawsearch.ingestion.law_reader import read_law_xml
from lawsearch.parsing.law_parser import EGovLawParser
from lawsearch.parsing.walker import walk
from lawsearch.report.models import DocumentFailure, MatchRecord, SearchReport, SkippedElements
from lawsearch.search.aggregator import MatchAggregator

logger = structlog.get_logger()


@dataclass
class DocumentResult:
    index: int
    law_id: str
    matches: list[MatchRecord] = field(default_factory=list)
    found_words: set[str] = field(default_factory=set)
    skipped: dict[str, int] = field(default_factory=dict)
    failure: Optional[DocumentFailure] = None
    error: Optional[Exception] = None


def process_document(index: int, record: LawRecord, corpus_root: Path, options: SearchOptions) -> DocumentResult:
    """parse -> walk -> match -> aggregate per un singolo documento, senza stato condiviso."""
    path = resolve_path(corpus_root, record)
    try:
        document = EGovLawParser().parse(read_law_xml(path))
    except (ParseError, LawIOError) as exc:
        logger.warning("document_failed", law_id=record.law_id, file=record.file_name, error=str(exc))
        return DocumentResult(
            index=index,
            law_id=record.law_id,
            failure=_failure_of(record, exc),
            error=exc,
        )

    aggregator = MatchAggregator(record, options, law_num=document.law_num)
    for visit in walk(document.root):
        aggregator.add(visit)
    matches = aggregator.records()

    logger.info("document_ok", law_id=record.law_id, file=record.file_name, matches=len(matches))
    return DocumentResult(
        index=index,
        law_id=record.law_id,
        matches=matches,
        found_words=aggregator.found_words,
        skipped=document.skipped,
    )


def search_corpus(records: Sequence[LawRecord], corpus_root: str | Path, options: SearchOptions) -> SearchReport:
    root = Path(corpus_root)
    if not root.is_dir():
        raise ConfigError(f"corpus root {root} is not a readable directory")

    logger.info("search_start", documents=len(records), words=list(options.words), workers=options.workers)

    if options.workers > 1 and len(records) > 1:
        results = _run_parallel(records, root, options)
    else:
        results = _run_sequential(records, root, options)

    report = _merge(results, options, total=len(records))
    logger.info(
        "search_complete",
        documents=report.documents_total,
        failed=report.documents_failed,
        matches=len(report.matches),
    )
    return report


def _run_sequential(records: Sequence[LawRecord], root: Path, options: SearchOptions) -> list[DocumentResult]:
    results: list[DocumentResult] = []
    for index, record in enumerate(records):
        result = process_document(index, record, root, options)
        if options.fail_fast and result.error is not None:
            raise result.error
        results.append(result)
    return results


def _run_parallel(records: Sequence[LawRecord], root: Path, options: SearchOptions) -> list[DocumentResult]:
    results: list[DocumentResult] = []
    with ProcessPoolExecutor(max_workers=min(options.workers, len(records))) as executor:
        futures = {
            executor.submit(process_document, index, record, root, options): index
            for index, record in enumerate(records)
        }
        for future in as_completed(futures):
            result = future.result()
            if options.fail_fast and result.error is not None:
                for pending in futures:
                    pending.cancel()
                raise result.error
            results.append(result)
    return results


def _merge(results: list[DocumentResult], options: SearchOptions, total: int) -> SearchReport:
    # i batch arrivano in ordine di completamento: si riordina per indice del catalogo
    ordered = sorted(results, key=lambda r: r.index)

    matches: list[MatchRecord] = []
    failures: list[DocumentFailure] = []
    found: set[str] = set()
    skipped: list[SkippedElements] = []
    for result in ordered:
        matches.extend(result.matches)
        found |= result.found_words
        if result.failure is not None:
            failures.append(result.failure)
        if result.skipped:
            skipped.append(SkippedElements(law_id=result.law_id, counts=result.skipped))

    return SearchReport(
        search_words=list(options.words),
        match_mode=options.match_mode,
        granularity=options.granularity,
        documents_total=total,
        documents_failed=len(failures),
        matches=matches,
        failures=failures,
        words_not_found=[w for w in options.words if w not in found],
        skipped=skipped,
    )


def _failure_of(record: LawRecord, exc: Exception) -> DocumentFailure:
    kind = exc.kind.value if isinstance(exc, ParseError) else None
    return DocumentFailure(
        law_id=record.law_id,
        file_name=record.file_name,
        error_type=type(exc).__name__,
        kind=kind,
        message=str(exc),
    )
