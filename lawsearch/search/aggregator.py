from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Optional

from lawsearch.core.config import SearchOptions
from lawsearch.core.utils_text import clip_around, normalize_whitespace
from lawsearch.ingestion.catalog import LawRecord
from lawsearch.parsing.law_models import ContainerNode, LawDocument, Role
from lawsearch.parsing.walker import CitationPath, LeafVisit, deepest, numbers, walk
from lawsearch.report.models import MatchRecord
from lawsearch.search.matcher import find, locate


@dataclass
class _Unit:
    path: CitationPath
    ancestors: tuple[ContainerNode, ...]
    texts: list[str] = field(default_factory=list)
    sentence_numbers: list[str] = field(default_factory=list)
    words: set[str] = field(default_factory=set)


class MatchAggregator:
    """
    Raccoglie le foglie di un documento in MatchRecord, in ordine di documento.

    Unità di citazione (`granularity`):
    - "sentence": un record per ogni <Sentence>
    - "provision": un record per disposizione numerata più profonda
      (articolo/comma/numero/sotto-numero), le frasi vengono unite
    - "paragraph": numeri e sotto-numeri confluiscono nel loro comma
    """

    def __init__(self, record: LawRecord, options: SearchOptions, law_num: str = "") -> None:
        self.record = record
        self.options = options
        self.law_num = law_num
        self._units: dict[Hashable, _Unit] = {}
        self._leaf_count = 0
        self.found_words: set[str] = set()

    def add(self, visit: LeafVisit) -> None:
        self._leaf_count += 1
        words = find(visit.leaf.text, self.options.words)
        if not words:
            return

        key = self._unit_key(visit.path)
        unit = self._units.get(key)
        if unit is None:
            unit = self._units[key] = _Unit(path=self._unit_path(visit.path), ancestors=visit.ancestors)
        unit.texts.append(visit.leaf.text)
        if visit.leaf.number is not None:
            unit.sentence_numbers.append(visit.leaf.number)
        unit.words |= words
        self.found_words |= words

    def records(self) -> list[MatchRecord]:
        return [self._to_record(unit) for unit in self._units.values() if self._accepts(unit.words)]

    # ----------------------------
    # HELPERS
    # ----------------------------

    def _accepts(self, words: set[str]) -> bool:
        if self.options.match_mode == "all":
            return words.issuperset(self.options.words)
        return bool(words)

    def _unit_key(self, path: CitationPath) -> Hashable:
        if self.options.granularity == "sentence":
            return self._leaf_count
        return self._unit_path(path)

    def _unit_path(self, path: CitationPath) -> CitationPath:
        trimmed = tuple(step for step in path if step.role is not Role.SENTENCE)
        if self.options.granularity != "paragraph":
            return trimmed
        for index in range(len(trimmed) - 1, -1, -1):
            if trimmed[index].role is Role.PARAGRAPH:
                return trimmed[: index + 1]
        return trimmed

    def _to_record(self, unit: _Unit) -> MatchRecord:
        path = unit.path
        ordered_words = [w for w in self.options.words if w in unit.words]
        return MatchRecord(
            law_id=self.record.law_id,
            law_num=self.law_num,
            title=self.record.title,
            suppl_provision=deepest(path, Role.SUPPL_PROVISION),
            appendix=deepest(path, Role.APPENDIX),
            part_number=deepest(path, Role.PART),
            chapter_number=deepest(path, Role.CHAPTER),
            section_number=deepest(path, Role.SECTION),
            subsection_number=deepest(path, Role.SUBSECTION),
            division_number=deepest(path, Role.DIVISION),
            article_number=deepest(path, Role.ARTICLE),
            article_caption=self._article_caption(unit.ancestors),
            paragraph_number=deepest(path, Role.PARAGRAPH),
            item_number=deepest(path, Role.ITEM),
            subitem_numbers=numbers(path, Role.SUBITEM),
            sentence_numbers=unit.sentence_numbers,
            matched_words=ordered_words,
            excerpt=self._excerpt(unit.texts, ordered_words),
        )

    def _excerpt(self, texts: list[str], words: list[str]) -> str:
        text = " ".join(texts)
        hits = locate(text, words)
        start = hits[0].start if hits else 0
        return normalize_whitespace(clip_around(text, start, self.options.excerpt_chars))

    def _article_caption(self, ancestors: tuple[ContainerNode, ...]) -> Optional[str]:
        for node in reversed(ancestors):
            if node.role is Role.ARTICLE:
                return node.heading
        return None


def aggregate_document(record: LawRecord, document: LawDocument, options: SearchOptions) -> list[MatchRecord]:
    aggregator = MatchAggregator(record, options, law_num=document.law_num)
    for visit in walk(document.root):
        aggregator.add(visit)
    return aggregator.records()
