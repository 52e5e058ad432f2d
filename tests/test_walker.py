from lawsearch.parsing.law_models import ContainerNode, Role, TextLeaf, count_leaves
from lawsearch.parsing.law_parser import parse_law
from lawsearch.parsing.walker import CitationStep, deepest, numbers, walk


def _tree() -> ContainerNode:
    return ContainerNode(
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
                            ContainerNode(
                                role=Role.PARAGRAPH,
                                number="2",
                                children=(TextLeaf(text="second", number="1"), TextLeaf(text="third", number="2")),
                            ),
                        ),
                    ),
                ),
            ),
            ContainerNode(role=Role.ARTICLE, number="4", children=(TextLeaf(text="sibling"),)),
        ),
    )


def test_walk_visits_every_leaf_once_in_document_order():
    tree = _tree()
    texts = [visit.leaf.text for visit in walk(tree)]
    assert texts == ["text containing W", "second", "third", "sibling"]
    assert len(texts) == count_leaves(tree)


def test_walk_citation_path_reflects_numbered_ancestors():
    visits = list(walk(_tree()))
    assert visits[0].path == (
        CitationStep(Role.CHAPTER, "1"),
        CitationStep(Role.ARTICLE, "3"),
        CitationStep(Role.PARAGRAPH, "1"),
    )
    assert visits[2].path[-1] == CitationStep(Role.SENTENCE, "2")


def test_walk_does_not_leak_frames_into_siblings():
    visits = list(walk(_tree()))
    # Article 4 è fratello del Chapter 1: niente capitolo né comma nel percorso
    assert visits[-1].path == (CitationStep(Role.ARTICLE, "4"),)


def test_walk_exposes_container_ancestors():
    visit = next(iter(walk(_tree())))
    assert [a.role for a in visit.ancestors] == [Role.LAW, Role.CHAPTER, Role.ARTICLE, Role.PARAGRAPH]


def test_walk_totality_on_parsed_law(sample_xml: bytes):
    root = parse_law(sample_xml).root
    visits = list(walk(root))
    assert len(visits) == count_leaves(root)
    assert len({id(v.leaf) for v in visits}) == len(visits)


def test_path_helpers():
    path = (
        CitationStep(Role.ARTICLE, "2"),
        CitationStep(Role.ITEM, "2"),
        CitationStep(Role.SUBITEM, "1", 1),
        CitationStep(Role.SUBITEM, "3", 2),
    )
    assert deepest(path, Role.ARTICLE) == "2"
    assert deepest(path, Role.PARAGRAPH) is None
    assert deepest(path, Role.SUBITEM) == "3"
    assert numbers(path, Role.SUBITEM) == ["1", "3"]
