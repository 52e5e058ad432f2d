from lawsearch.core.config import SearchOptions
from lawsearch.ingestion.catalog import LawRecord
from lawsearch.parsing.law_models import ContainerNode, LawDocument, Role, TextLeaf
from lawsearch.parsing.law_parser import parse_law
from lawsearch.search.aggregator import aggregate_document

RECORD = LawRecord(law_id="501AC0000000001", title="試験法", file_name="sample_law.xml")


def _search(doc, *words, **opts):
    return aggregate_document(RECORD, doc, SearchOptions(words=words, **opts))


def test_citation_correctness_on_synthetic_tree():
    root = ContainerNode(
        role=Role.LAW,
        children=(
            ContainerNode(
                role=Role.CHAPTER,
                number="1",
                children=(
                    ContainerNode(
                        role=Role.ARTICLE,
                        number="3",
                        children=(
                            ContainerNode(
                                role=Role.PARAGRAPH,
                                number="1",
                                children=(TextLeaf(text="text containing W"),),
                            ),
                        ),
                    ),
                ),
            ),
        ),
    )
    (record,) = _search(LawDocument(root=root), "W")
    assert record.article_number == "3"
    assert record.paragraph_number == "1"
    assert record.chapter_number == "1"
    assert record.item_number is None
    assert record.law_id == RECORD.law_id
    assert record.title == "試験法"
    assert record.matched_words == ["W"]
    assert record.excerpt == "text containing W"


def test_provision_granularity_merges_sentences_of_one_paragraph(sample_xml: bytes):
    records = _search(parse_law(sample_xml), "事務")
    assert [(r.article_number, r.paragraph_number, r.item_number) for r in records] == [
        ("1", "1", None),
        ("2", "1", "1"),
        ("2", "2", None),
        (None, None, None),
    ]
    assert records[-1].appendix == "1"
    merged = records[2]
    assert merged.sentence_numbers == ["1", "2"]
    assert merged.excerpt == "前項の事務は、政令で定める。 ただし、条例で定める事務については、この限りでない。"
    assert merged.article_caption == "（定義）"
    assert merged.law_num == "令和元年法律第一号"


def test_sentence_granularity_one_record_per_leaf(sample_xml: bytes):
    records = _search(parse_law(sample_xml), "事務", granularity="sentence")
    assert len(records) == 6
    assert [r.sentence_numbers for r in records[3:5]] == [["1"], ["2"]]


def test_paragraph_granularity_folds_items(sample_xml: bytes):
    records = _search(parse_law(sample_xml), "事務", granularity="paragraph")
    assert [(r.article_number, r.paragraph_number, r.item_number) for r in records] == [
        ("1", "1", None),
        ("2", "1", None),
        ("2", "2", None),
        (None, None, None),
    ]


def test_any_mode_reports_each_word_in_caller_order(sample_xml: bytes):
    records = _search(parse_law(sample_xml), "政令", "事務")
    art2p2 = [r for r in records if r.article_number == "2" and r.paragraph_number == "2"][0]
    assert art2p2.matched_words == ["政令", "事務"]


def test_all_mode_requires_every_word(sample_xml: bytes):
    records = _search(parse_law(sample_xml), "事務", "政令", match_mode="all")
    assert [(r.article_number, r.paragraph_number) for r in records] == [("2", "2"), (None, None)]


def test_supplementary_provisions_are_cited(sample_xml: bytes):
    records = _search(parse_law(sample_xml), "施行")
    assert [(r.suppl_provision, r.article_number, r.paragraph_number) for r in records] == [
        (None, "3_2", "2"),
        ("", None, "1"),
        ("令和二年法律第五号", "1", "1"),
    ]
    assert [r.citation for r in records] == [
        "Art. 3-2, para. 2",
        "Suppl. Prov., para. 1",
        "Suppl. Prov. (令和二年法律第五号), Art. 1, para. 1",
    ]


def test_subitem_chain(sample_xml: bytes):
    (record,) = _search(parse_law(sample_xml), "市町村長")
    assert record.item_number == "2"
    assert record.subitem_numbers == ["2"]
    assert record.citation == "Art. 2, para. 1, item 2, subitem 2"


def test_ruby_reading_is_not_searched(sample_xml: bytes):
    assert _search(parse_law(sample_xml), "じむ") == []


def test_appendix_table_is_searched_and_cited(sample_xml: bytes):
    # "政令で定める事務" compare solo nell'AppdxTable
    (record,) = _search(parse_law(sample_xml), "政令で定める事務")
    assert record.appendix == "1"
    assert (record.article_number, record.paragraph_number) == (None, None)
    assert record.citation == "Appx. 1"
    assert record.excerpt == "政令で定める事務"


def test_excerpt_is_clipped_around_first_hit():
    text = "あ" * 50 + "政令" + "い" * 50
    root = ContainerNode(
        role=Role.LAW,
        children=(ContainerNode(role=Role.ARTICLE, number="1", children=(TextLeaf(text=text),)),),
    )
    (record,) = _search(LawDocument(root=root), "政令", excerpt_chars=10)
    assert record.excerpt == "…あああああ政令いいい…"


def test_amend_provisions_are_searched_in_main_and_supplementary(amend_xml: bytes):
    records = _search(parse_law(amend_xml), "報告")
    assert [r.citation for r in records] == [
        "Art. 1, para. 1",
        "Suppl. Prov. (令和四年法律第二号), Art. 2, para. 1",
    ]
    assert records[0].article_caption == "（試験法の一部改正）"
    assert records[0].sentence_numbers == ["1"]


def test_word_only_in_amend_provision_sentence_is_found(amend_xml: bytes):
    (record,) = _search(parse_law(amend_xml), "省令")
    assert (record.article_number, record.paragraph_number) == ("1", "1")
    assert record.excerpt == "第二条第二項中「政令」を「省令」に改める。"


def test_word_only_in_table_remarks_is_found(amend_xml: bytes):
    (record,) = _search(parse_law(amend_xml), "特別区")
    assert record.citation == "Art. 2, para. 1"
    assert record.excerpt == "この表の区分は、特別区を含む。"


def test_word_only_in_class_sentence_is_found(amend_xml: bytes):
    (record,) = _search(parse_law(amend_xml), "登録免許")
    assert (record.article_number, record.paragraph_number) == ("2", "1")
