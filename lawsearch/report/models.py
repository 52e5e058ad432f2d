from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class MatchRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    law_id: str
    law_num: str = ""
    title: str
    suppl_provision: Optional[str] = None
    appendix: Optional[str] = None
    part_number: Optional[str] = None
    chapter_number: Optional[str] = None
    section_number: Optional[str] = None
    subsection_number: Optional[str] = None
    division_number: Optional[str] = None
    article_number: Optional[str] = None
    article_caption: Optional[str] = None
    paragraph_number: Optional[str] = None
    item_number: Optional[str] = None
    subitem_numbers: list[str] = Field(default_factory=list)
    sentence_numbers: list[str] = Field(default_factory=list)
    matched_words: list[str]
    excerpt: str

    @computed_field
    @property
    def citation(self) -> str:
        parts: list[str] = []
        if self.suppl_provision is not None:
            parts.append(f"Suppl. Prov. ({self.suppl_provision})" if self.suppl_provision else "Suppl. Prov.")
        if self.appendix is not None:
            parts.append(f"Appx. {_label(self.appendix)}" if self.appendix else "Appx.")
        if self.article_number:
            parts.append(f"Art. {_label(self.article_number)}")
        if self.paragraph_number:
            parts.append(f"para. {_label(self.paragraph_number)}")
        if self.item_number:
            parts.append(f"item {_label(self.item_number)}")
        if self.subitem_numbers:
            parts.append("subitem " + "-".join(_label(n) for n in self.subitem_numbers))
        return ", ".join(parts)


class DocumentFailure(BaseModel):
    law_id: str
    file_name: str
    error_type: str
    kind: Optional[str] = None
    message: str


class SkippedElements(BaseModel):
    """Elementi non cercati di un documento (indici, formule di promulgazione, figure)."""

    law_id: str
    counts: dict[str, int]


class SearchReport(BaseModel):
    search_words: list[str]
    match_mode: str
    granularity: str
    documents_total: int = 0
    documents_failed: int = 0
    matches: list[MatchRecord] = Field(default_factory=list)
    failures: list[DocumentFailure] = Field(default_factory=list)
    words_not_found: list[str] = Field(default_factory=list)
    skipped: list[SkippedElements] = Field(default_factory=list)


def _label(number: str) -> str:
    # "3_2" = 第三条の二
    return number.replace("_", "-")
