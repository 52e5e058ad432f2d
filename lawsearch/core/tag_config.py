from __future__ import annotations
from dataclasses import dataclass

from lawsearch.parsing.law_models import Role

SUBITEM_MAX_DEPTH = 10
SUBLIST_MAX_DEPTH = 3


@dataclass(frozen=True)
class TagConfig:
    role_tags: dict[str, Role]
    wrapper_tags: frozenset[str]
    heading_tags: frozenset[str]
    skipped_tags: frozenset[str]
    inline_tags: frozenset[str]
    dropped_inline_tags: frozenset[str]
    # blocchi a contenuto libero (testo citato, nuove disposizioni): letti come testo
    verbatim_tags: frozenset[str] = frozenset()
    sentence_tag: str = "Sentence"

    def is_known(self, tag: str) -> bool:
        return (
            tag in self.role_tags
            or tag in self.wrapper_tags
            or tag in self.heading_tags
            or tag in self.skipped_tags
            or tag in self.verbatim_tags
            or tag == self.sentence_tag
        )


def subitem_depth(tag: str) -> int | None:
    """`Subitem3` -> 3, altrimenti None."""
    if not tag.startswith("Subitem"):
        return None
    suffix = tag[len("Subitem"):]
    if suffix.isdigit() and 1 <= int(suffix) <= SUBITEM_MAX_DEPTH:
        return int(suffix)
    return None


_SUBITEM_LEVELS = range(1, SUBITEM_MAX_DEPTH + 1)
_SUBLIST_LEVELS = range(1, SUBLIST_MAX_DEPTH + 1)
_APPENDIX_TAGS = (
    "Appdx", "AppdxTable", "AppdxNote", "AppdxStyle", "AppdxFormat", "AppdxFig",
    "SupplProvisionAppdx", "SupplProvisionAppdxTable", "SupplProvisionAppdxStyle",
)

# VOCABOLARIO XML STANDARD DEI TESTI DI LEGGE e-Gov (法令標準XML)
DEFAULT_TAG_CONFIG = TagConfig(
    role_tags={
        # UNITA' GERARCHICHE: compaiono nel percorso di citazione
        "Law": Role.LAW,
        "SupplProvision": Role.SUPPL_PROVISION,
        "Part": Role.PART,
        "Chapter": Role.CHAPTER,
        "Section": Role.SECTION,
        "Subsection": Role.SUBSECTION,
        "Division": Role.DIVISION,
        "Article": Role.ARTICLE,
        "Paragraph": Role.PARAGRAPH,
        "Item": Role.ITEM,
        **{f"Subitem{n}": Role.SUBITEM for n in _SUBITEM_LEVELS},
        # ALLEGATI: cercati, citati come allegato
        **{tag: Role.APPENDIX for tag in _APPENDIX_TAGS},
    },
    wrapper_tags=frozenset({
        # WRAPPER: nessun numero, i figli vengono agganciati al nodo padre
        "LawBody", "MainProvision", "Preamble",
        "ParagraphSentence", "ItemSentence", "Column",
        "TableStruct", "Table", "TableRow", "TableHeaderRow", "TableColumn", "TableHeaderColumn",
        "List", "ListSentence", "Remarks",
        "AmendProvision", "AmendProvisionSentence", "Class", "ClassSentence",
        *(f"Subitem{n}Sentence" for n in _SUBITEM_LEVELS),
        *(f"Sublist{n}" for n in _SUBLIST_LEVELS),
        *(f"Sublist{n}Sentence" for n in _SUBLIST_LEVELS),
    }),
    heading_tags=frozenset({
        # TITOLI: servono alla citazione, non vengono cercati
        "LawNum", "LawTitle", "PartTitle", "ChapterTitle", "SectionTitle", "SubsectionTitle",
        "DivisionTitle", "ArticleCaption", "ArticleTitle", "ParagraphCaption", "ParagraphNum",
        "ItemTitle", "SupplProvisionLabel", "TableStructTitle", "RemarksLabel",
        "SupplNote", "ClassTitle", "RelatedArticleNum", "ArithFormulaNum",
        *(f"{tag}Title" for tag in _APPENDIX_TAGS),
        *(f"Subitem{n}Title" for n in _SUBITEM_LEVELS),
    }),
    skipped_tags=frozenset({
        # INDICI, FORMULE DI PROMULGAZIONE E FIGURE: esclusi dalla ricerca, contati nel report
        "TOC", "EnactStatement", "FigStruct", "Fig",
    }),
    inline_tags=frozenset({
        # CONTENUTI dentro <Sentence>: appiattiti in testo
        "Ruby", "Rt", "Sup", "Sub", "Line", "QuoteStruct", "ArithFormula", "ArithFormulaNum",
    }),
    dropped_inline_tags=frozenset({"Rt"}),
    verbatim_tags=frozenset({
        "NewProvision", "NoteStruct", "StyleStruct", "FormatStruct", "ArithFormula",
    }),
)
