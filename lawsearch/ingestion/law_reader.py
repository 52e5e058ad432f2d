from __future__ import annotations

from pathlib import Path

from lxml import etree

from lawsearch.core.exceptions import LawIOError, ParseError, ParseErrorKind


def _xml_parser() -> etree.XMLParser:
    # niente recover: un XML rotto deve emergere come errore del documento
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        recover=False,
        huge_tree=True,
        remove_comments=True,
        remove_pis=True,
    )


def parse_law_bytes(data: bytes | str) -> etree._ElementTree:
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data.strip():
        raise ParseError(ParseErrorKind.EMPTY, "empty document")
    try:
        root = etree.fromstring(data, parser=_xml_parser())
    except etree.XMLSyntaxError as exc:
        raise ParseError(ParseErrorKind.MALFORMED, exc.msg or str(exc), exc.lineno) from exc
    return root.getroottree()


def read_law_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise LawIOError(f"cannot read {path}: {exc.strerror or exc}") from exc


def read_law_xml(path: Path) -> etree._ElementTree:
    return parse_law_bytes(read_law_bytes(path))
