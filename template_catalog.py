from typing import List, Optional, Tuple

from infographic_models import DataField


# (template prefix, data field) in lookup order; an exact match for
# "hierarchy-structure" is handled before the generic hierarchy prefix.
_PREFIX_DATA_FIELDS: Tuple[Tuple[str, DataField], ...] = (
    ("list-", "lists"),
    ("sequence-", "sequences"),
    ("compare-", "compares"),
    ("chart-", "values"),
    ("relation-", "nodes"),
)
_EXACT_DATA_FIELDS: Tuple[Tuple[str, DataField], ...] = (
    ("hierarchy-structure", "items"),
)
_HIERARCHY_PREFIX = "hierarchy-"

TEMPLATE_FAMILIES = ("list", "sequence", "chart", "compare", "hierarchy", "relation")

TEMPLATE_GROUPS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "List",
        (
            "list-row-horizontal-icon-arrow",
            "list-column-done-list",
            "list-column-simple-vertical-arrow",
            "list-column-vertical-icon-arrow",
            "list-grid-badge-card",
            "list-grid-candy-card-lite",
            "list-grid-ribbon-card",
            "list-sector-plain-text",
            "list-zigzag-down-compact-card",
            "list-zigzag-down-simple",
            "list-zigzag-up-compact-card",
            "list-zigzag-up-simple",
        ),
    ),
    (
        "Sequence",
        (
            "sequence-timeline-rounded-rect-node",
            "sequence-timeline-simple",
            "sequence-ascending-stairs-3d-underline-text",
            "sequence-ascending-steps",
            "sequence-circular-simple",
            "sequence-color-snake-steps-horizontal-icon-line",
            "sequence-cylinders-3d-simple",
            "sequence-filter-mesh-simple",
            "sequence-funnel-simple",
            "sequence-horizontal-zigzag-underline-text",
            "sequence-mountain-underline-text",
            "sequence-pyramid-simple",
            "sequence-roadmap-vertical-plain-text",
            "sequence-roadmap-vertical-simple",
            "sequence-snake-steps-compact-card",
            "sequence-snake-steps-simple",
            "sequence-snake-steps-underline-text",
            "sequence-stairs-front-compact-card",
            "sequence-stairs-front-pill-badge",
            "sequence-zigzag-pucks-3d-simple",
            "sequence-zigzag-steps-underline-text",
        ),
    ),
    (
        "Chart",
        (
            "chart-bar-plain-text",
            "chart-column-simple",
            "chart-line-plain-text",
            "chart-pie-compact-card",
            "chart-pie-donut-pill-badge",
            "chart-pie-donut-plain-text",
            "chart-pie-plain-text",
            "chart-wordcloud",
        ),
    ),
    (
        "Compare",
        (
            "compare-binary-horizontal-badge-card-arrow",
            "compare-binary-horizontal-simple-fold",
            "compare-binary-horizontal-underline-text-vs",
            "compare-hierarchy-left-right-circle-node-pill-badge",
            "compare-hierarchy-row-letter-card-rounded-rect-node",
            "compare-quadrant-quarter-circular",
            "compare-quadrant-quarter-simple-card",
            "compare-swot",
        ),
    ),
    (
        "Hierarchy",
        (
            "hierarchy-mindmap-branch-gradient-capsule-item",
            "hierarchy-mindmap-level-gradient-compact-card",
            "hierarchy-structure",
            "hierarchy-tree-curved-line-rounded-rect-node",
            "hierarchy-tree-tech-style-badge-card",
            "hierarchy-tree-tech-style-capsule-item",
        ),
    ),
    (
        "Relation",
        (
            "relation-dagre-flow-tb-animated-badge-card",
            "relation-dagre-flow-tb-animated-simple-circle-node",
            "relation-dagre-flow-tb-badge-card",
            "relation-dagre-flow-tb-simple-circle-node",
        ),
    ),
)

ALL_TEMPLATES: List[str] = [name for _, names in TEMPLATE_GROUPS for name in names]


def data_field_for_template(template: str) -> DataField:
    """Return the data keyword a template expects (``items`` when unknown)."""
    for prefix, data_field in _PREFIX_DATA_FIELDS:
        if template.startswith(prefix):
            return data_field
    for name, data_field in _EXACT_DATA_FIELDS:
        if template == name:
            return data_field
    if template.startswith(_HIERARCHY_PREFIX):
        return "root"
    return "items"


def template_family(template: str) -> Optional[str]:
    for family in TEMPLATE_FAMILIES:
        if template.startswith(f"{family}-"):
            return family
    return None
