from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from lawsearch.parsing.law_models import ContainerNode, DocumentNode, Role, TextLeaf


@dataclass(frozen=True)
class CitationStep:
    role: Role
    number: str
    depth: int = 0


CitationPath = tuple[CitationStep, ...]


@dataclass(frozen=True)
class LeafVisit:
    path: CitationPath
    leaf: TextLeaf
    # ContainerNode antenati, dal Law alla foglia (serve per le rubriche)
    ancestors: tuple[ContainerNode, ...] = ()


def walk(root: DocumentNode) -> Iterator[LeafVisit]:
    """
    Visita in profondità, in ordine di documento.

    Il percorso viene passato per valore a ogni frame: entrando in un nodo
    numerato si crea una nuova tupla (push), uscendo il chiamante riprende
    la propria (pop). Nessun frame può sporcare quello di un fratello.
    """
    yield from _visit(root, (), ())


def _visit(node: DocumentNode, path: CitationPath, ancestors: tuple[ContainerNode, ...]) -> Iterator[LeafVisit]:
    if node.number is not None:
        depth = node.depth if isinstance(node, ContainerNode) else 0
        path = path + (CitationStep(node.role, node.number, depth),)

    if isinstance(node, TextLeaf):
        yield LeafVisit(path=path, leaf=node, ancestors=ancestors)
        return

    ancestors = ancestors + (node,)
    for child in node.children:
        yield from _visit(child, path, ancestors)


def deepest(path: CitationPath, role: Role) -> Optional[str]:
    for step in reversed(path):
        if step.role is role:
            return step.number
    return None


def numbers(path: CitationPath, role: Role) -> list[str]:
    return [step.number for step in path if step.role is role]
