"""Value-returning edits applied by the form editor.

Every helper builds a new document or item and leaves its argument
untouched; the editor re-serializes the returned value after each change.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from infographic_models import (
    FIELD_PRIORITY,
    InfographicDocument,
    InfographicItem,
    InfographicRelation,
    InfographicTheme,
)
from template_catalog import data_field_for_template


@dataclass(frozen=True)
class FormFlags:
    is_relation: bool
    is_root: bool
    show_value: bool
    show_children: bool


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


def _check_index(items: List[InfographicItem], index: int) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"item index {index} out of range for {len(items)} items")


def with_template(document: InfographicDocument, template: str) -> InfographicDocument:
    """Switch template; the data field follows the new template family."""
    if not template:
        return document
    return replace(document, template=template, data_field=data_field_for_template(template))


def with_field(document: InfographicDocument, key: str, value: str) -> InfographicDocument:
    if key not in ("title", "desc"):
        raise KeyError(key)
    return replace(document, **{key: _blank_to_none(value)})


def add_item(document: InfographicDocument) -> InfographicDocument:
    return replace(document, items=[*document.items, InfographicItem(label="", desc="")])


def remove_item(document: InfographicDocument, index: int) -> InfographicDocument:
    _check_index(document.items, index)
    return replace(document, items=[item for i, item in enumerate(document.items) if i != index])


def update_item(document: InfographicDocument, index: int, item: InfographicItem) -> InfographicDocument:
    _check_index(document.items, index)
    items = list(document.items)
    items[index] = item
    return replace(document, items=items)


def move_item(document: InfographicDocument, index: int, new_index: int) -> InfographicDocument:
    """Move one item, as a drag-and-drop reorder would. ``new_index`` is clamped."""
    _check_index(document.items, index)
    items = list(document.items)
    moved = items.pop(index)
    new_index = max(0, min(new_index, len(items)))
    items.insert(new_index, moved)
    return replace(document, items=items)


def with_item_field(item: InfographicItem, key: str, value: str) -> InfographicItem:
    if key not in FIELD_PRIORITY:
        raise KeyError(key)
    return replace(item, **{key: _blank_to_none(value)})


def add_child(item: InfographicItem) -> InfographicItem:
    children = list(item.children or [])
    children.append(InfographicItem(label=""))
    return replace(item, children=children)


def remove_child(item: InfographicItem, index: int) -> InfographicItem:
    children = list(item.children or [])
    _check_index(children, index)
    del children[index]
    return replace(item, children=children)


ItemPath = Tuple[int, ...]


def item_at(document: InfographicDocument, path: ItemPath) -> InfographicItem:
    """Follow ``path`` (top-level index, then child indexes) to an item."""
    if not path:
        raise IndexError("empty item path")
    items = document.items
    item = None
    for index in path:
        _check_index(items, index)
        item = items[index]
        items = item.children or []
    return item


def _replace_in(items: List[InfographicItem], path: ItemPath, item: Optional[InfographicItem]) -> List[InfographicItem]:
    index, rest = path[0], path[1:]
    _check_index(items, index)
    updated = list(items)
    if rest:
        parent = updated[index]
        children = _replace_in(parent.children or [], rest, item)
        updated[index] = replace(parent, children=children)
    elif item is None:
        del updated[index]
    else:
        updated[index] = item
    return updated


def replace_item_at(document: InfographicDocument, path: ItemPath, item: InfographicItem) -> InfographicDocument:
    if not path:
        raise IndexError("empty item path")
    return replace(document, items=_replace_in(document.items, path, item))


def remove_item_at(document: InfographicDocument, path: ItemPath) -> InfographicDocument:
    """Remove a nested item; a parent keeps an empty ``children`` list."""
    if not path:
        raise IndexError("empty item path")
    return replace(document, items=_replace_in(document.items, path, None))


def add_relation(document: InfographicDocument, raw: str) -> InfographicDocument:
    raw = raw.strip()
    if not raw:
        return document
    return replace(document, relations=[*(document.relations or []), InfographicRelation(raw=raw)])


def remove_relation(document: InfographicDocument, index: int) -> InfographicDocument:
    relations = list(document.relations or [])
    if not 0 <= index < len(relations):
        raise IndexError(f"relation index {index} out of range for {len(relations)} relations")
    del relations[index]
    return replace(document, relations=relations or None)


def with_relation(document: InfographicDocument, index: int, raw: str) -> InfographicDocument:
    """Rewrite one edge line; a blank line removes the edge."""
    if not raw.strip():
        return remove_relation(document, index)
    relations = list(document.relations or [])
    if not 0 <= index < len(relations):
        raise IndexError(f"relation index {index} out of range for {len(relations)} relations")
    relations[index] = InfographicRelation(raw=raw.strip())
    return replace(document, relations=relations)


def with_palette_text(document: InfographicDocument, text: str) -> InfographicDocument:
    """Apply a comma separated palette typed by the user."""
    palette = [color.strip() for color in text.split(",")]
    palette = [color for color in palette if color]
    theme = document.theme or InfographicTheme()
    return replace(document, theme=replace(theme, palette=palette or None))


def with_theme_mode(document: InfographicDocument, mode: Optional[str]) -> InfographicDocument:
    theme = document.theme or InfographicTheme()
    return replace(document, theme=replace(theme, mode=mode or None))


def form_flags(document: InfographicDocument) -> FormFlags:
    is_root = document.data_field == "root"
    return FormFlags(
        is_relation=document.template.startswith("relation-"),
        is_root=is_root,
        show_value=document.template.startswith("chart-") or document.data_field == "values",
        show_children=(
            document.template.startswith("compare-")
            or document.template.startswith("hierarchy-")
            or is_root
        ),
    )
