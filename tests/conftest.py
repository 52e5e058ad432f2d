import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


def law_xml(provisions: str, law_num: str = "令和元年法律第九十九号", title: str = "テスト法") -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<Law Era="Reiwa" Year="01" Num="099" LawType="Act" Lang="ja"><LawNum>{law_num}</LawNum>'
        f"<LawBody><LawTitle>{title}</LawTitle><MainProvision>{provisions}</MainProvision></LawBody></Law>"
    )


def article(num: str, *paragraphs: str) -> str:
    return f'<Article Num="{num}"><ArticleTitle>第{num}条</ArticleTitle>{"".join(paragraphs)}</Article>'


def paragraph(num: str, *sentences: str) -> str:
    body = "".join(f'<Sentence Num="{i}">{s}</Sentence>' for i, s in enumerate(sentences, 1))
    return f'<Paragraph Num="{num}"><ParagraphNum/><ParagraphSentence>{body}</ParagraphSentence></Paragraph>'


@pytest.fixture
def sample_xml() -> bytes:
    return (FIXTURES / "sample_law.xml").read_bytes()


@pytest.fixture
def make_corpus(tmp_path: Path):
    """Scrive i file XML e il manifest; restituisce (corpus_dir, manifest_path)."""

    def _make(docs: list[tuple[str, str, str]]) -> tuple[Path, Path]:
        corpus = tmp_path / "corpus"
        corpus.mkdir(exist_ok=True)
        entries = []
        for law_id, file_name, content in docs:
            if content is not None:
                (corpus / file_name).write_text(content, encoding="utf-8")
            entries.append({"law_id": law_id, "title": f"title {law_id}", "file_name": file_name})
        manifest = tmp_path / "index.json"
        manifest.write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")
        return corpus, manifest

    return _make


@pytest.fixture
def amend_xml() -> bytes:
    return (FIXTURES / "amend_law.xml").read_bytes()
