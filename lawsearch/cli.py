# lawsearch/cli.py
from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from loguru import logger

from lawsearch.core.config import GRANULARITIES, MATCH_MODES, SearchOptions, get_settings
from lawsearch.core.exceptions import CatalogError, ConfigError, LawIOError, ParseError
from lawsearch.core.logging import configure_logging
from lawsearch.ingestion.catalog import load_catalog
from lawsearch.pipeline import search_corpus
from lawsearch.report.emitter import OUTPUT_FORMATS, emit_report

EXIT_OK = 0
EXIT_FAILURE = 1


# ----------------------------
# COMANDO
# ----------------------------

def cmd_search(args: argparse.Namespace) -> int:
    try:
        options = SearchOptions.from_settings(
            args.search_words or [],
            match_mode=args.match_mode,
            granularity=args.granularity,
            excerpt_chars=args.excerpt_chars,
            workers=args.workers,
            fail_fast=True if args.fail_fast else None,
        )

        logger.info("[START] load index: {}", args.index_file)
        records = load_catalog(args.index_file)
        logger.info("[END] load index: {} laws", len(records))

        report = search_corpus(records, args.work, options)
        emit_report(report, args.output, fmt=args.format)

    except CatalogError as exc:
        logger.error("index file error: {}", exc)
        for issue in exc.issues:
            logger.error("  {}", issue)
        return EXIT_FAILURE
    except ConfigError as exc:
        logger.error("configuration error: {}", exc)
        return EXIT_FAILURE
    except (ParseError, LawIOError) as exc:
        # solo in fail-fast o per output non scrivibile
        logger.error("aborted: {}", exc)
        return EXIT_FAILURE

    for failure in report.failures:
        logger.warning("skipped {} ({}): {}", failure.law_id, failure.file_name, failure.message)
    for word in report.words_not_found:
        logger.warning("word not found in any provision: {}", word)
    logger.info(
        "[END] {} documents, {} failed, {} matches -> {}",
        report.documents_total,
        report.documents_failed,
        len(report.matches),
        args.output,
    )
    return EXIT_OK


# ----------------------------
# PARSER ARGOMENTI
# ----------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lawsearch",
        description="Cerca le disposizioni (条・項・号) che contengono le parole date nei testi XML e-Gov.",
    )
    parser.add_argument("-o", "--output", required=True, help="File JSON di output")
    parser.add_argument("-w", "--work", required=True, help="Cartella con i file XML delle leggi")
    parser.add_argument("-i", "--index-file", required=True, help="Manifest JSON con l'elenco delle leggi")
    parser.add_argument(
        "-s", "--search-words", action="append", required=True, metavar="WORD", help="Parola da cercare (ripetibile)"
    )
    parser.add_argument("--match-mode", choices=MATCH_MODES, default=None, help="any = almeno una parola, all = tutte")
    parser.add_argument("--granularity", choices=GRANULARITIES, default=None)
    parser.add_argument("--excerpt-chars", type=int, default=None, help="Lunghezza massima dell'estratto (0 = intero)")
    parser.add_argument("--workers", type=int, default=None, help="Processi paralleli")
    parser.add_argument("--fail-fast", action="store_true", help="Interrompi al primo documento non valido")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="json")
    parser.add_argument("--log-level", default=None)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigError as exc:
        configure_logging(args.log_level or "INFO")
        logger.error("configuration error: {}", exc)
        return EXIT_FAILURE

    configure_logging(args.log_level or settings.log_level)
    return cmd_search(args)


if __name__ == "__main__":
    sys.exit(main())
