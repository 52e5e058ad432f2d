from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    LAW = "law"
    SUPPL_PROVISION = "suppl_provision"
    APPENDIX = "appendix"
    PART = "part"
    CHAPTER = "chapter"
    SECTION = "section"
    SUBSECTION = "subsection"
    DIVISION = "division"
    ARTICLE = "article"
    PARAGRAPH = "paragraph"
    ITEM = "item"
    SUBITEM = "subitem"
    SENTENCE = "sentence"


# Ordine di annidamento: un figlio deve avere rango strettamente maggiore del padre.
# SUBITEM aggiunge la profondità (Subitem1 < Subitem2 < ...).
# APPENDIX condivide il rango di PART: un allegato non contiene parti né capitoli.
ROLE_RANK: dict[Role, int] = {
    Role.LAW: 0,
    Role.SUPPL_PROVISION: 1,
    Role.APPENDIX: 2,
    Role.PART: 2,
    Role.CHAPTER: 3,
    Role.SECTION: 4,
    Role.SUBSECTION: 5,
    Role.DIVISION: 6,
    Role.ARTICLE: 7,
    Role.PARAGRAPH: 8,
    Role.ITEM: 9,
    Role.SUBITEM: 10,
}

# Unità che devono contenere almeno una <Sentence>
PROVISION_ROLES = frozenset({Role.ARTICLE, Role.PARAGRAPH, Role.ITEM, Role.SUBITEM})


@dataclass(frozen=True)
class TextLeaf:
    text: str
    number: Optional[str] = None
    role: Role = Role.SENTENCE

    def __post_init__(self) -> None:
        if self.role is not Role.SENTENCE:
            raise ValueError(f"text leaf must be a sentence, got {self.role.value}")
        if not self.text.strip():
            object.__setattr__(self, "text", "")


@dataclass(frozen=True)
class ContainerNode:
    role: Role
    number: Optional[str] = None
    children: tuple["DocumentNode", ...] = field(default_factory=tuple)
    heading: Optional[str] = None
    depth: int = 0

    def __post_init__(self) -> None:
        if self.role is Role.SENTENCE:
            raise ValueError("a sentence cannot contain child nodes")
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if self.role is Role.SUBITEM and self.depth < 1:
            raise ValueError("subitem nodes need a depth >= 1")

    @property
    def rank(self) -> int:
        return ROLE_RANK[self.role] + self.depth


DocumentNode = Union[ContainerNode, TextLeaf]


@dataclass(frozen=True)
class LawDocument:
    root: ContainerNode
    law_num: str = ""
    law_title: str = ""
    # elementi esclusi dalla ricerca (indici, formule di promulgazione, figure)
    skipped: dict[str, int] = field(default_factory=dict)


def count_leaves(node: DocumentNode) -> int:
    if isinstance(node, TextLeaf):
        return 1
    return sum(count_leaves(child) for child in node.children)
