from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from lawsearch.core.exceptions import CatalogError


class LawRecord(BaseModel):
    """Voce del manifest: accetta anche i nomi di campo dell'indice e-Gov (num/name/file)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    law_id: str = Field(validation_alias=AliasChoices("law_id", "num"))
    title: str = Field(validation_alias=AliasChoices("title", "name"))
    file_name: str = Field(validation_alias=AliasChoices("file_name", "file"))

    @field_validator("law_id", "title", "file_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


def load_catalog(manifest_path: str | Path) -> list[LawRecord]:
    path = Path(manifest_path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f"cannot read manifest {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"manifest {path} is not valid JSON: {exc}") from exc

    entries = _entries_of(data, path)
    records: list[LawRecord] = []
    issues: list[str] = []
    seen: dict[str, int] = {}

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            issues.append(f"entry {index}: expected an object, got {type(entry).__name__}")
            continue
        try:
            record = LawRecord.model_validate(entry)
        except ValidationError as exc:
            for err in exc.errors():
                field = ".".join(str(p) for p in err["loc"]) or "entry"
                issues.append(f"entry {index}: field '{field}' {err['msg'].lower()}")
            continue

        if record.law_id in seen:
            issues.append(f"entry {index}: duplicate law_id '{record.law_id}' (first at entry {seen[record.law_id]})")
            continue
        seen[record.law_id] = index
        records.append(record)

    if issues:
        raise CatalogError(f"invalid manifest {path}", issues)
    return records


def resolve_path(corpus_root: str | Path, record: LawRecord) -> Path:
    return Path(corpus_root) / record.file_name


def _entries_of(data: Any, path: Path) -> list[Any]:
    if isinstance(data, dict) and "laws" in data:
        data = data["laws"]
    if not isinstance(data, list):
        raise CatalogError(f"manifest {path} must contain a list of laws")
    return data
