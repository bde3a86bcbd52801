from infographic_models import (
    DATA_FIELDS,
    FIELD_PRIORITY,
    InfographicDocument,
    InfographicItem,
    InfographicRelation,
)


def test_populated_fields_follow_priority():
    item = InfographicItem(icon="i", desc="d", id="x", label="")
    assert item.populated_fields() == [("id", "x"), ("desc", "d"), ("icon", "i")]


def test_priority_table():
    assert FIELD_PRIORITY == ("id", "label", "time", "desc", "value", "icon")
    assert DATA_FIELDS[-1] == "root"


def test_document_defaults():
    document = InfographicDocument(template="x")
    assert document.data_field == "items"
    assert document.items == []
    assert document.relations is None
    assert document.theme is None
    assert document.is_empty


def test_relations_alone_are_not_empty():
    document = InfographicDocument(template="relation-x", relations=[InfographicRelation(raw="A -> B")])
    assert not document.is_empty


def test_structural_equality():
    left = InfographicItem(label="A", children=[InfographicItem(label="B")])
    right = InfographicItem(label="A", children=[InfographicItem(label="B")])
    assert left == right
    assert left.children[0] is not right.children[0]
