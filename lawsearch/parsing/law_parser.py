# lawsearch/parsing/law_parser.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

import structlog
from lxml import etree

from lawsearch.core.exceptions import ParseError, ParseErrorKind
from lawsearch.core.tag_config import DEFAULT_TAG_CONFIG, TagConfig, subitem_depth
from lawsearch.ingestion.law_reader import parse_law_bytes
from lawsearch.parsing.law_models import (
    PROVISION_ROLES,
    ROLE_RANK,
    ContainerNode,
    DocumentNode,
    LawDocument,
    Role,
    TextLeaf,
    count_leaves,
)

logger = structlog.get_logger()


# ----------------------------
# STATO INTERNO
# ----------------------------

@dataclass
class _ParseState:
    law_num: str = ""
    law_title: str = ""
    skipped: dict[str, int] = field(default_factory=dict)


# ----------------------------
# PARSER
# ----------------------------

class EGovLawParser:
    """
    Parser deterministico per l'XML standard dei testi di legge e-Gov.

    - I tag strutturali (Part, Chapter, Article, Paragraph, Item, Subitem1..10, ...)
      diventano ContainerNode; i wrapper (LawBody, ParagraphSentence, Column, Table*, ...)
      vengono appiattiti nel nodo padre mantenendo l'ordine del documento.
    - Solo <Sentence> produce TextLeaf; il markup inline viene ridotto a testo,
      le letture furigana (<Rt>) vengono scartate.
    - I blocchi a contenuto libero (NewProvision, NoteStruct, ...) diventano foglie di
      testo; gli allegati (Appdx*) sono unità citabili come le altre.
    - Un tag sconosciuto è un errore: nessuna disposizione deve sparire in silenzio.
    """

    def __init__(self, tag_config: TagConfig = DEFAULT_TAG_CONFIG) -> None:
        self.tag_config = tag_config

    # ----------------------------
    # API PUBBLICA
    # ----------------------------

    def parse(self, xml_tree: etree._ElementTree) -> LawDocument:
        root = xml_tree.getroot()
        tag = self._strip_ns(root.tag)
        if self.tag_config.role_tags.get(tag) is not Role.LAW:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_STRUCTURE,
                f"root element must be <Law>, got <{tag}>",
                root.sourceline,
            )

        state = _ParseState()
        law = self._build_container(root, Role.LAW, depth=0, state=state)

        if count_leaves(law) == 0:
            raise ParseError(ParseErrorKind.EMPTY, "law contains no sentences", root.sourceline)

        if state.skipped:
            logger.debug("parse_skipped_subtrees", law_num=state.law_num, skipped=state.skipped)

        return LawDocument(
            root=law,
            law_num=state.law_num,
            law_title=state.law_title,
            skipped=dict(sorted(state.skipped.items())),
        )

    # ----------------------------
    # VISITA RICORSIVA
    # ----------------------------

    def _build_container(self, elem: etree._Element, role: Role, depth: int, state: _ParseState) -> ContainerNode:
        children: list[DocumentNode] = []
        headings: dict[str, str] = {}
        rank = ROLE_RANK[role] + depth

        self._collect(elem, role, rank, children, headings, state)

        heading = self._pick_heading(headings)
        number = self._number_of(elem, role)
        if role is Role.APPENDIX and not number:
            # allegato senza Num: lo si cita col titolo
            number = heading or ""

        node = ContainerNode(
            role=role,
            number=number,
            children=tuple(children),
            heading=heading,
            depth=depth,
        )

        if role in PROVISION_ROLES and count_leaves(node) == 0:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_STRUCTURE,
                f"<{self._strip_ns(elem.tag)}> without any <Sentence>",
                elem.sourceline,
            )
        return node

    def _collect(
        self,
        elem: etree._Element,
        owner: Role,
        owner_rank: int,
        children: list[DocumentNode],
        headings: dict[str, str],
        state: _ParseState,
    ) -> None:
        self._reject_loose_text(elem.text, elem)

        for child in elem:
            if not isinstance(child.tag, str):
                continue
            tag = self._strip_ns(child.tag)

            if tag == self.tag_config.sentence_tag:
                children.append(self._build_sentence(child))

            elif tag in self.tag_config.role_tags:
                role = self.tag_config.role_tags[tag]
                depth = subitem_depth(tag) or 0
                if ROLE_RANK[role] + depth <= owner_rank:
                    raise ParseError(
                        ParseErrorKind.UNEXPECTED_STRUCTURE,
                        f"<{tag}> cannot be nested inside a {owner.value}",
                        child.sourceline,
                    )
                children.append(self._build_container(child, role, depth, state))

            elif tag in self.tag_config.wrapper_tags:
                self._collect(child, owner, owner_rank, children, headings, state)

            elif tag in self.tag_config.heading_tags:
                text = self._normalize_whitespace(self._plain_text(child))
                headings.setdefault(tag, text)
                if tag == "LawNum" and not state.law_num:
                    state.law_num = text
                elif tag == "LawTitle" and not state.law_title:
                    state.law_title = text

            elif tag in self.tag_config.verbatim_tags:
                children.extend(self._verbatim_leaves(child))

            elif tag in self.tag_config.skipped_tags:
                state.skipped[tag] = state.skipped.get(tag, 0) + 1

            else:
                raise ParseError(
                    ParseErrorKind.UNEXPECTED_STRUCTURE,
                    f"unrecognized element <{tag}> inside a {owner.value}",
                    child.sourceline,
                )

            self._reject_loose_text(child.tail, child)

    # ----------------------------
    # TESTO DELLE <Sentence>
    # ----------------------------

    def _build_sentence(self, elem: etree._Element) -> TextLeaf:
        parts: list[str] = []
        self._sentence_text(elem, parts)
        return TextLeaf(text="".join(parts), number=elem.get("Num"))

    def _sentence_text(self, elem: etree._Element, parts: list[str]) -> None:
        if elem.text:
            parts.append(elem.text)

        for child in elem:
            if isinstance(child.tag, str):
                tag = self._strip_ns(child.tag)
                if tag not in self.tag_config.inline_tags:
                    raise ParseError(
                        ParseErrorKind.UNEXPECTED_STRUCTURE,
                        f"unrecognized element <{tag}> inside a sentence",
                        child.sourceline,
                    )
                if tag == "QuoteStruct":
                    # citazioni testuali di altre leggi: il contenuto è libero
                    parts.append(self._plain_text(child))
                elif tag not in self.tag_config.dropped_inline_tags:
                    self._sentence_text(child, parts)

            if child.tail:
                parts.append(child.tail)

    def _verbatim_leaves(self, elem: etree._Element) -> list[TextLeaf]:
        """Una foglia per ogni <Sentence> del blocco; senza <Sentence>, il testo intero."""
        leaves: list[TextLeaf] = []
        self._collect_verbatim(elem, leaves)
        if not leaves:
            text = self._normalize_whitespace(self._plain_text(elem))
            if text:
                leaves.append(TextLeaf(text=text))
        return leaves

    def _collect_verbatim(self, elem: etree._Element, leaves: list[TextLeaf]) -> None:
        for child in elem:
            if not isinstance(child.tag, str):
                continue
            if self._strip_ns(child.tag) == self.tag_config.sentence_tag:
                leaves.append(TextLeaf(text=self._plain_text(child), number=child.get("Num")))
            else:
                self._collect_verbatim(child, leaves)

    def _plain_text(self, elem: etree._Element) -> str:
        parts: list[str] = [elem.text or ""]
        for child in elem:
            if isinstance(child.tag, str) and self._strip_ns(child.tag) not in self.tag_config.dropped_inline_tags:
                parts.append(self._plain_text(child))
            parts.append(child.tail or "")
        return "".join(parts)

    # ----------------------------
    # HELPERS
    # ----------------------------

    def _number_of(self, elem: etree._Element, role: Role) -> Optional[str]:
        if role is Role.LAW:
            return None
        if role is Role.SUPPL_PROVISION:
            # "" = disposizioni supplementari della legge originaria
            return elem.get("AmendLawNum") or ""
        num = elem.get("Num")
        return num.strip() if num and num.strip() else None

    def _pick_heading(self, headings: dict[str, str]) -> Optional[str]:
        for suffix in ("Caption", "Title", "Label"):
            for tag, text in headings.items():
                if tag.endswith(suffix) and tag != "LawTitle" and text:
                    return text
        return headings.get("LawTitle") or None

    def _reject_loose_text(self, text: Optional[str], elem: etree._Element) -> None:
        if text and text.strip():
            raise ParseError(
                ParseErrorKind.UNEXPECTED_STRUCTURE,
                f"text outside of <Sentence> near <{self._strip_ns(elem.tag)}>",
                elem.sourceline,
            )

    def _strip_ns(self, tag: str) -> str:
        return tag.split("}")[-1]

    def _normalize_whitespace(self, text: str) -> str:
        return re.sub(r"\s+", " ", text).strip()


def parse_law(data: bytes | str, tag_config: TagConfig = DEFAULT_TAG_CONFIG) -> LawDocument:
    return EGovLawParser(tag_config).parse(parse_law_bytes(data))
