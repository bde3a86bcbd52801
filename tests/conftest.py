"""
Shared DSL samples for the test suite.
"""

import pytest


LIST_DOCUMENT = """infographic list-row-simple-horizontal-arrow
data
  title T
  desc D
  items
    - label A
      desc B
theme light
  palette #fff,#000"""

HIERARCHY_DOCUMENT = """infographic hierarchy-tree-tech-style-badge-card
data
  title Company
  root
    label CEO
    desc Runs things
    children
      - label CTO
        children
          - label Platform
          - label Product
      - label CFO
theme dark
  palette antv
  stylize rough"""

RELATION_DOCUMENT = """infographic relation-dagre-flow-tb-badge-card
data
  title Approval flow
  nodes
    - id A
      label Request
    - id B
      label Approve
  relations
    A - approves -> B
    B -> A"""

NESTED_DOCUMENT = """infographic compare-hierarchy-row-letter-card-rounded-rect-node
data
  compares
    - label Level 1
      children
        - label Level 2a
          children
            - label Level 3a
              children
                - label Leaf 1
                - label Leaf 2
                - label Leaf 3
        - label Level 2b
    - label Sibling"""


@pytest.fixture
def list_document():
    return LIST_DOCUMENT


@pytest.fixture
def hierarchy_document():
    return HIERARCHY_DOCUMENT


@pytest.fixture
def relation_document():
    return RELATION_DOCUMENT


@pytest.fixture
def nested_document():
    return NESTED_DOCUMENT


@pytest.fixture(params=[LIST_DOCUMENT, HIERARCHY_DOCUMENT, RELATION_DOCUMENT, NESTED_DOCUMENT])
def any_document(request):
    return request.param
