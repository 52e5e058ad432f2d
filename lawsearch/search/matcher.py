from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, order=True)
class WordHit:
    start: int
    word: str

    @property
    def end(self) -> int:
        return self.start + len(self.word)


def find(text: str, words: Iterable[str]) -> set[str]:
    """
    Parole di `words` contenute in `text` come sottostringa letterale.

    Niente confini di parola né normalizzazione: "bar" è contenuto in "barbarian".
    """
    if not text:
        return set()
    return {word for word in words if word and word in text}


def locate(text: str, words: Iterable[str]) -> list[WordHit]:
    """Tutte le occorrenze (anche sovrapposte), ordinate per posizione."""
    hits: list[WordHit] = []
    for word in set(words):
        if not word:
            continue
        start = text.find(word)
        while start != -1:
            hits.append(WordHit(start=start, word=word))
            start = text.find(word, start + 1)
    return sorted(hits)
