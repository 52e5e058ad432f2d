from __future__ import annotations

from enum import Enum
from typing import Optional


class LawSearchError(Exception):
    """Errore base per lawsearch."""


class CatalogError(LawSearchError):
    """Manifest illeggibile o malformato."""

    def __init__(self, message: str, issues: Optional[list[str]] = None) -> None:
        self.message = message
        self.issues = list(issues or [])
        text = f"{message}: " + "; ".join(self.issues) if self.issues else message
        super().__init__(text)

    def __reduce__(self):
        return (type(self), (self.message, self.issues))


class ParseErrorKind(str, Enum):
    MALFORMED = "malformed"
    UNEXPECTED_STRUCTURE = "unexpected_structure"
    EMPTY = "empty"


class ParseError(LawSearchError):
    """Documento XML non conforme allo schema atteso."""

    def __init__(self, kind: ParseErrorKind, message: str, line: Optional[int] = None) -> None:
        self.kind = kind
        self.message = message
        self.line = line
        where = f" (line {line})" if line else ""
        super().__init__(f"{kind.value}: {message}{where}")

    def __reduce__(self):
        # i worker del pool restituiscono eccezioni via pickle
        return (type(self), (self.kind, self.message, self.line))


class LawIOError(LawSearchError, OSError):
    """Errore di lettura/scrittura file."""


class ConfigError(LawSearchError):
    """Configurazione di ricerca non valida."""
