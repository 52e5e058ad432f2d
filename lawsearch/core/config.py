from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from lawsearch.core.exceptions import ConfigError

MATCH_MODES = ("any", "all")
GRANULARITIES = ("provision", "sentence", "paragraph")


def load_env() -> None:
    load_dotenv()


class Settings(BaseModel):
    log_level: str = Field("INFO", alias="LAWSEARCH_LOG_LEVEL")
    workers: int = Field(1, alias="LAWSEARCH_WORKERS")
    match_mode: str = Field("any", alias="LAWSEARCH_MATCH_MODE")
    granularity: str = Field("provision", alias="LAWSEARCH_GRANULARITY")
    excerpt_chars: int = Field(200, alias="LAWSEARCH_EXCERPT_CHARS")
    fail_fast: bool = Field(False, alias="LAWSEARCH_FAIL_FAST")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        load_env()
        try:
            _settings = Settings(**os.environ)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise ConfigError(f"invalid environment settings: {problems}") from exc
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


@dataclass(frozen=True)
class SearchOptions:
    """
    Parametri di una ricerca.

    `words` mantiene l'ordine del chiamante (serve solo per il report e per
    la diagnostica "parola mai trovata"); i duplicati vengono rimossi.
    """

    words: tuple[str, ...]
    match_mode: str = "any"
    granularity: str = "provision"
    excerpt_chars: int = 200
    workers: int = 1
    fail_fast: bool = False
    _MAX_WORKERS: ClassVar[int] = 64

    def __post_init__(self) -> None:
        words = tuple(dict.fromkeys(self.words))
        if not words:
            raise ConfigError("nessuna parola da cercare")
        if any(not w or not w.strip() for w in words):
            raise ConfigError("parole di ricerca vuote non ammesse")
        object.__setattr__(self, "words", words)

        if self.match_mode not in MATCH_MODES:
            raise ConfigError(f"match_mode deve essere uno tra {MATCH_MODES}")
        if self.granularity not in GRANULARITIES:
            raise ConfigError(f"granularity deve essere uno tra {GRANULARITIES}")
        if self.excerpt_chars < 0:
            raise ConfigError("excerpt_chars deve essere >= 0")
        if not (1 <= self.workers <= self._MAX_WORKERS):
            raise ConfigError(f"workers deve essere tra 1 e {self._MAX_WORKERS}")

    @classmethod
    def from_settings(cls, words: list[str] | tuple[str, ...], settings: Settings | None = None, **overrides) -> "SearchOptions":
        settings = settings or get_settings()
        values = {
            "match_mode": settings.match_mode,
            "granularity": settings.granularity,
            "excerpt_chars": settings.excerpt_chars,
            "workers": settings.workers,
            "fail_fast": settings.fail_fast,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(words=tuple(words), **values)
