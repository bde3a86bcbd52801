"""
Tests for the template prefix table and catalog.
"""

import pytest

from template_catalog import ALL_TEMPLATES, TEMPLATE_GROUPS, data_field_for_template, template_family


@pytest.mark.parametrize(
    "template, expected",
    [
        ("list-row-horizontal-icon-arrow", "lists"),
        ("sequence-timeline-simple", "sequences"),
        ("compare-swot", "compares"),
        ("chart-pie-plain-text", "values"),
        ("relation-dagre-flow-tb-badge-card", "nodes"),
        ("hierarchy-structure", "items"),
        ("hierarchy-tree-tech-style-badge-card", "root"),
        ("hierarchy-structure-extra", "root"),
        ("unknown-template", "items"),
        ("", "items"),
        ("list", "items"),
    ],
)
def test_data_field_for_template(template, expected):
    assert data_field_for_template(template) == expected


def test_compare_hierarchy_is_a_compare_template():
    assert data_field_for_template("compare-hierarchy-left-right-circle-node-pill-badge") == "compares"


class TestCatalog:
    def test_groups_cover_every_family(self):
        assert [group for group, _ in TEMPLATE_GROUPS] == [
            "List",
            "Sequence",
            "Chart",
            "Compare",
            "Hierarchy",
            "Relation",
        ]

    def test_all_templates_flattens_groups(self):
        assert len(ALL_TEMPLATES) == sum(len(names) for _, names in TEMPLATE_GROUPS)
        assert len(set(ALL_TEMPLATES)) == len(ALL_TEMPLATES)
        assert "hierarchy-structure" in ALL_TEMPLATES

    def test_group_members_share_a_family(self):
        for group, names in TEMPLATE_GROUPS:
            assert {template_family(name) for name in names} == {group.lower()}

    def test_unknown_family(self):
        assert template_family("mystery-card") is None
