from typing import List, Optional, Tuple

from infographic_models import (
    FIELD_PRIORITY,
    LIST_DATA_FIELDS,
    InfographicDocument,
    InfographicItem,
    InfographicRelation,
    InfographicTheme,
)
from log_utils import get_logger


logger = get_logger(__name__)

HEADER_PREFIX = "infographic "
_ITEM_FIELD_KEYS = frozenset(FIELD_PRIORITY)


class MalformedHeaderError(ValueError):
    """Raised by ``from_dsl(..., strict=True)`` when the header line is missing."""

    def __init__(self, first_line: str) -> None:
        super().__init__(f"expected 'infographic <template>' header, got {first_line!r}")
        self.first_line = first_line


def scan_line(line: str) -> Tuple[int, str]:
    """Return ``(indent, trimmed)`` for a single line.

    Only space characters count towards the indent; a leading tab yields
    indent 0.
    """
    return len(line) - len(line.lstrip(" ")), line.strip()


def _apply_item_field(item: InfographicItem, text: str) -> None:
    key, sep, value = text.partition(" ")
    if not sep:
        return
    if key not in _ITEM_FIELD_KEYS:
        logger.debug("Ignoring unknown item field %r", key)
        return
    setattr(item, key, value)


def _parse_item_list(
    lines: List[str], start: int, base_indent: int
) -> Tuple[List[InfographicItem], int]:
    """Parse ``- key value`` items at ``base_indent``.

    Returns the items and the index of the first line that was not consumed
    (the first non-blank line indented less than ``base_indent``, or the end).
    """
    items: List[InfographicItem] = []
    i = start

    while i < len(lines):
        indent, trimmed = scan_line(lines[i])
        if not trimmed:
            i += 1
            continue
        if indent < base_indent:
            break
        if indent != base_indent or not trimmed.startswith("- "):
            i += 1
            continue

        item = InfographicItem()
        _apply_item_field(item, trimmed[2:])
        i += 1

        while i < len(lines):
            indent, trimmed = scan_line(lines[i])
            if not trimmed:
                i += 1
                continue
            if indent <= base_indent:
                break
            if indent == base_indent + 2:
                if trimmed == "children":
                    item.children, i = _parse_item_list(lines, i + 1, base_indent + 4)
                else:
                    _apply_item_field(item, trimmed)
                    i += 1
            elif indent > base_indent + 2:
                # Unknown nested content outside a children block.
                i += 1
            else:
                break

        items.append(item)

    return items, i


def _parse_root_item(
    lines: List[str], start: int, base_indent: int
) -> Optional[InfographicItem]:
    """Parse the single root of a hierarchy template.

    The root's fields sit directly at ``base_indent`` without a ``- `` marker.
    Returns ``None`` when neither a label nor a children block was found.
    """
    item = InfographicItem()
    i = start

    while i < len(lines):
        indent, trimmed = scan_line(lines[i])
        if not trimmed:
            i += 1
            continue
        if indent < base_indent:
            break
        if indent == base_indent:
            if trimmed == "children":
                item.children, _ = _parse_item_list(lines, i + 1, base_indent + 2)
                break
            _apply_item_field(item, trimmed)
        i += 1

    if item.label or item.children is not None:
        return item
    return None


def _parse_relation_section(
    lines: List[str],
) -> Tuple[bool, List[InfographicItem], List[InfographicRelation]]:
    """Collect the ``nodes`` list and raw ``relations`` lines of a relation template.

    Returns whether a ``nodes`` keyword was seen, the nodes and the edges.
    """
    found_nodes = False
    items: List[InfographicItem] = []
    relations: List[InfographicRelation] = []
    in_relations = False

    for index, line in enumerate(lines):
        indent, trimmed = scan_line(line)
        if not trimmed:
            continue
        if indent == 2 and trimmed == "nodes":
            found_nodes = True
            in_relations = False
            items, _ = _parse_item_list(lines, index + 1, 4)
        elif indent == 2 and trimmed == "relations":
            in_relations = True
        elif in_relations:
            if indent >= 4:
                relations.append(InfographicRelation(raw=trimmed))
            elif indent == 2:
                in_relations = False
            # Stray lines at other indents are skipped; the block stays open.

    return found_nodes, items, relations


def _split_palette(value: str) -> List[str]:
    if "," in value or value.startswith("#"):
        return [color.strip() for color in value.split(",")]
    # Named palette such as "antv".
    return [value]


def _parse_palette_block(lines: List[str], start: int) -> Tuple[List[str], int]:
    colors: List[str] = []
    i = start
    while i < len(lines):
        indent, trimmed = scan_line(lines[i])
        if not trimmed or indent < 4:
            break
        if trimmed.startswith("- "):
            colors.append(trimmed[2:].strip())
        i += 1
    return colors, i


def _parse_theme(lines: List[str], theme_index: int) -> InfographicTheme:
    theme = InfographicTheme()

    # "theme", "theme light" or "theme dark"
    tokens = lines[theme_index].split()
    if len(tokens) > 1:
        theme.mode = tokens[1]

    i = theme_index + 1
    while i < len(lines):
        indent, trimmed = scan_line(lines[i])
        if not trimmed:
            i += 1
            continue
        if indent == 0:
            break

        if indent == 2:
            if trimmed.startswith("palette"):
                inline_value = trimmed[len("palette"):].strip()
                if inline_value:
                    theme.palette = _split_palette(inline_value)
                else:
                    theme.palette, i = _parse_palette_block(lines, i + 1)
                    continue
            elif trimmed.startswith("stylize "):
                theme.stylize = trimmed[len("stylize "):].strip()
        i += 1

    return theme


def _parse_data_section(document: InfographicDocument, lines: List[str]) -> None:
    for index, line in enumerate(lines):
        indent, trimmed = scan_line(line)
        if indent != 2 or not trimmed:
            continue
        if trimmed.startswith("title "):
            document.title = trimmed[len("title "):]
        elif trimmed.startswith("desc "):
            document.desc = trimmed[len("desc "):]
        elif trimmed.startswith("order "):
            # Legacy directive, accepted and dropped.
            continue
        elif trimmed in LIST_DATA_FIELDS:
            document.data_field = trimmed  # type: ignore[assignment]
            document.items, _ = _parse_item_list(lines, index + 1, 4)
            break
        elif trimmed == "root":
            document.data_field = "root"
            root = _parse_root_item(lines, index + 1, 4)
            if root is not None:
                document.items = [root]
            break

    # Relation templates carry two sibling collections, so they are re-read
    # whatever the generic pass above picked up.
    if document.template.startswith("relation-"):
        found_nodes, items, relations = _parse_relation_section(lines)
        document.items = items
        if found_nodes:
            document.data_field = "nodes"
        document.relations = relations or None


def from_dsl(content: str, *, strict: bool = False) -> Optional[InfographicDocument]:
    """Parse infographic DSL text into an ``InfographicDocument``.

    Only the header line is validated. A first line that is not
    ``infographic <template>`` makes this return ``None`` (or raise
    ``MalformedHeaderError`` when ``strict`` is set). Anything else that
    cannot be understood is skipped, so a half-typed document still yields
    whatever could be recognised.
    """
    lines = content.split("\n")
    first_line = lines[0].strip()
    if not first_line.startswith(HEADER_PREFIX):
        logger.debug("Rejected document header %r", first_line)
        if strict:
            raise MalformedHeaderError(first_line)
        return None

    document = InfographicDocument(template=first_line[len(HEADER_PREFIX):].strip())

    data_index: Optional[int] = None
    theme_index: Optional[int] = None
    for index in range(1, len(lines)):
        indent, trimmed = scan_line(lines[index])
        if indent != 0:
            continue
        if trimmed == "data":
            if data_index is None:
                data_index = index
        elif trimmed.startswith("theme"):
            if theme_index is None:
                theme_index = index

    if data_index is not None:
        if theme_index is not None and theme_index > data_index:
            data_end = theme_index
        else:
            data_end = len(lines)
        _parse_data_section(document, lines[data_index + 1:data_end])
    else:
        logger.debug("No data section in %r document", document.template)

    if theme_index is not None:
        document.theme = _parse_theme(lines, theme_index)

    return document


def _write_item(item: InfographicItem, lines: List[str], indent: int) -> None:
    prefix = " " * indent
    field_prefix = " " * (indent + 2)

    fields = item.populated_fields()
    if fields:
        key, value = fields[0]
        lines.append(f"{prefix}- {key} {value}")
    else:
        lines.append(f"{prefix}- label ")
    for key, value in fields[1:]:
        lines.append(f"{field_prefix}{key} {value}")

    if item.children is not None:
        lines.append(f"{field_prefix}children")
        for child in item.children:
            _write_item(child, lines, indent + 4)


def _write_root_item(item: InfographicItem, lines: List[str], indent: int) -> None:
    prefix = " " * indent
    for key, value in item.populated_fields():
        lines.append(f"{prefix}{key} {value}")
    if item.children is not None:
        lines.append(f"{prefix}children")
        for child in item.children:
            _write_item(child, lines, indent + 2)


def _write_theme(theme: InfographicTheme, lines: List[str]) -> None:
    lines.append(f"theme {theme.mode}" if theme.mode else "theme")

    if theme.palette is not None:
        if not theme.palette:
            lines.append("  palette")
        elif len(theme.palette) == 1 and not theme.palette[0].startswith("#"):
            lines.append(f"  palette {theme.palette[0]}")
        else:
            # Color lists always come out inline, even if they were read
            # from the multi-line form.
            lines.append(f"  palette {','.join(theme.palette)}")

    if theme.stylize:
        lines.append(f"  stylize {theme.stylize}")


def to_dsl(document: InfographicDocument) -> str:
    """Serialize an ``InfographicDocument`` back to DSL text.

    Item fields are written in ``FIELD_PRIORITY`` order rather than the
    order they were read in; the first populated one goes on the ``- `` line.
    """
    if document is None:
        raise ValueError("document must not be None")

    lines: List[str] = [f"{HEADER_PREFIX}{document.template}", "data"]

    if document.title:
        lines.append(f"  title {document.title}")
    if document.desc:
        lines.append(f"  desc {document.desc}")

    if document.data_field == "root" and document.items:
        lines.append("  root")
        _write_root_item(document.items[0], lines, 4)
    else:
        lines.append(f"  {document.data_field}")
        for item in document.items:
            _write_item(item, lines, 4)

    if document.relations:
        lines.append("  relations")
        for relation in document.relations:
            lines.append(f"    {relation.raw}")

    if document.theme is not None:
        _write_theme(document.theme, lines)

    return "\n".join(lines)
