from __future__ import annotations

from dataclasses import dataclass, replace
import json
import os
from pathlib import Path
import subprocess
import sys
from typing import Optional
import webbrowser

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Input, OptionList, Static, Tree
from textual.widgets.option_list import Option, OptionDoesNotExist
from textual.widgets.tree import TreeNode
from rich.text import Text

from dsl_io import from_dsl, to_dsl
import form_edits
from infographic_models import InfographicDocument, InfographicItem, InfographicTheme
from log_utils import get_logger, setup_logging
from template_catalog import TEMPLATE_GROUPS


logger = get_logger(__name__)

DEFAULT_DOCUMENT_PATH = Path("infographic.txt")
DEFAULT_PREVIEW_PATH = "infographic_preview.html"
DEFAULT_LOG_FILE = "infographic-editor.log"
THEME_MODES = (None, "light", "dark")
STARTER_DSL = """infographic list-row-horizontal-icon-arrow
data
  title New infographic
  lists
    - label First point
      desc What it is about
"""


@dataclass(frozen=True)
class TreeEntry:
    """What a tree row stands for: document, field, item, relations, relation or theme."""

    kind: str
    path: tuple[int, ...] = ()
    key: str = ""


def build_preview_html(document: InfographicDocument) -> str:
    """HTML page that hands the raw DSL to the AntV Infographic renderer."""
    source = json.dumps(to_dsl(document)).replace("</", "<\\/")
    mode = document.theme.mode if document.theme and document.theme.mode in ("light", "dark") else "light"
    background = "#0f0f0f" if mode == "dark" else "#ffffff"
    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>{document.template} preview</title>
    <meta name="viewport" content="width=device-width,initial-scale=1" />
    <style>
      :root, html, body {{
        height: 100%;
      }}
      body {{
        margin: 0;
        background: {background};
      }}
      #infographic {{
        width: 100%;
        height: 100%;
      }}
    </style>
  </head>
  <body>
    <div id="infographic"></div>
    <script type="module">
      import {{ Infographic }} from "https://esm.sh/@antv/infographic";
      const source = {source};
      const infographic = new Infographic({{
        container: document.getElementById("infographic"),
        width: "100%",
        height: "100%",
        theme: "{mode}",
      }});
      infographic.render(source);
    </script>
  </body>
</html>
"""


class DocumentTree(Tree[TreeEntry]):
    """Tree widget listing the parts of an ``InfographicDocument``."""

    def process_label(self, label) -> Text:
        if isinstance(label, str):
            return Text(label)
        return label


class TemplateSelectorScreen(ModalScreen[str | None]):
    """Modal dialog that lets the user pick a template from the catalog."""

    DEFAULT_CSS = """
    TemplateSelectorScreen {
        align: center middle;
    }

    #template-selector-panel {
        min-width: 50;
        max-width: 80;
        max-height: 80%;
        background: $panel;
        border: round $secondary;
        padding: 1 2 2 2;
        box-sizing: border-box;
    }

    #template-selector-title {
        content-align: center middle;
        text-style: bold;
        padding-bottom: 1;
    }

    #template-selector-list {
        border: none;
        background: $surface;
        padding: 0;
    }
    """

    def __init__(self, current_template: str) -> None:
        super().__init__()
        self._current_template = current_template

    def compose(self) -> ComposeResult:
        options: list[Option] = []
        for group, templates in TEMPLATE_GROUPS:
            options.append(Option(Text(group, style="bold"), disabled=True))
            options.extend(Option(f"  {name}", id=name) for name in templates)
        with Vertical(id="template-selector-panel"):
            yield Static("Select template", id="template-selector-title")
            yield OptionList(*options, id="template-selector-list")

    def on_mount(self) -> None:
        option_list = self.query_one("#template-selector-list", OptionList)
        option_list.focus()
        try:
            option_list.highlighted = option_list.get_option_index(self._current_template)
        except OptionDoesNotExist:
            option_list.highlighted = 1 if option_list.option_count > 1 else None
        option_list.scroll_to_highlight()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.dismiss(event.option_id)

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            event.stop()
            self.dismiss(None)


class TextPromptScreen(ModalScreen[str | None]):
    """Single line prompt; Enter applies, Escape cancels."""

    DEFAULT_CSS = """
    TextPromptScreen {
        align: center middle;
        background: transparent;
    }

    #text-prompt-panel {
        width: 70;
        height: auto;
        background: $panel;
        border: round $secondary;
        padding: 0 1;
    }

    #text-prompt-field {
        border: round $secondary;
        background: $surface;
    }
    """

    def __init__(self, prompt: str, initial_value: str = "", placeholder: str = "") -> None:
        super().__init__()
        self._prompt = prompt
        self._initial_value = initial_value
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        with Vertical(id="text-prompt-panel"):
            yield Static(self._prompt)
            yield Input(value=self._initial_value, placeholder=self._placeholder, id="text-prompt-field")

    def on_mount(self) -> None:
        self.query_one("#text-prompt-field", Input).focus()

    def on_key(self, event: events.Key) -> None:
        field = self.query_one("#text-prompt-field", Input)
        if event.key == "escape":
            event.stop()
            self.dismiss(None)
        elif event.key == "enter":
            event.stop()
            self.dismiss(field.value)


class ItemEditorScreen(ModalScreen[dict[str, str] | None]):
    """Form with one input per item field. Tab moves, Enter applies."""

    DEFAULT_CSS = """
    ItemEditorScreen {
        align: center middle;
        background: transparent;
    }

    #item-editor-panel {
        width: 70;
        height: auto;
        background: $panel;
        border: round $secondary;
        padding: 0 1;
    }

    .item-editor-label {
        color: $text-muted;
    }
    """

    def __init__(self, item: InfographicItem, keys: list[str]) -> None:
        super().__init__()
        self._item = item
        self._keys = keys

    def compose(self) -> ComposeResult:
        with Vertical(id="item-editor-panel"):
            for key in self._keys:
                yield Static(key, classes="item-editor-label")
                yield Input(value=getattr(self._item, key) or "", id=f"item-field-{key}")

    def on_mount(self) -> None:
        self.query_one(f"#item-field-{self._keys[0]}", Input).focus()

    def _gather_values(self) -> dict[str, str]:
        return {key: self.query_one(f"#item-field-{key}", Input).value for key in self._keys}

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            event.stop()
            self.dismiss(None)
        elif event.key == "enter":
            event.stop()
            self.dismiss(self._gather_values())


class InfographicApp(App[None]):
    """Textual form editor over an infographic DSL file."""

    TITLE = "infographic-dsl"

    CSS = """
    #document-tree {
        width: 1fr;
    }
    #dsl-source {
        width: 1fr;
        padding: 0 1;
        border-left: solid $secondary;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=False),
        Binding("s", "save", "Save"),
        Binding("o", "open", "Open", show=False),
        Binding("e", "edit_node", "(edit)"),
        Binding("a", "add_item", "(item +)"),
        Binding("+", "add_child", "(child +)"),
        Binding("0", "delete_node", "(del)"),
        Binding("r", "add_relation", "(edge +)"),
        Binding("t", "choose_template", "Template"),
        Binding("m", "cycle_theme_mode", "Mode"),
        Binding("c", "edit_palette", "Palette"),
        Binding("p", "preview", "Preview"),
    ]

    def __init__(self, initial_path: str | Path | None = None) -> None:
        super().__init__()
        self.title = "infographic-dsl"
        self._tree_widget: Optional[DocumentTree] = None
        self.document: InfographicDocument = from_dsl(STARTER_DSL, strict=True)
        self._active_path: Optional[Path] = None
        self._initial_load_path: Optional[Path] = Path(initial_path).expanduser() if initial_path else None
        self._preview_path = Path(os.environ.get("INFOGRAPHIC_PREVIEW_PATH", DEFAULT_PREVIEW_PATH))

    def compose(self) -> ComposeResult:
        yield Header()
        tree = DocumentTree("Infographic", id="document-tree")
        tree.show_root = True
        tree.auto_expand = False
        self._tree_widget = tree
        with Horizontal():
            yield tree
            yield Static(id="dsl-source")
        yield Footer()

    def on_mount(self) -> None:
        self.rebuild_tree()
        if self._initial_load_path:
            self._load_document(self._initial_load_path)

    def require_tree(self) -> DocumentTree:
        if self._tree_widget is None:
            raise RuntimeError("Tree widget not initialised")
        return self._tree_widget

    # -- tree rendering -------------------------------------------------

    @staticmethod
    def _item_label(item: InfographicItem) -> Text:
        fields = item.populated_fields()
        if not fields:
            return Text("(empty item)", style="dim italic")
        _, value = fields[0]
        label = Text(value, style="bold")
        for other_key, other_value in fields[1:]:
            label.append(f"  {other_key}: {other_value}", style="dim")
        return label

    @staticmethod
    def _theme_label(theme: Optional[InfographicTheme]) -> Text:
        if theme is None:
            return Text("theme (none)", style="dim italic")
        parts = [f"mode: {theme.mode or '-'}"]
        if theme.palette is not None:
            parts.append(f"palette: {','.join(theme.palette)}")
        if theme.stylize:
            parts.append(f"stylize: {theme.stylize}")
        return Text("theme  " + "  ".join(parts))

    def _populate_item(self, parent: TreeNode[TreeEntry], item: InfographicItem, path: tuple[int, ...]) -> None:
        entry = TreeEntry("item", path=path)
        if item.children:
            node = parent.add(self._item_label(item), data=entry, expand=True)
            for index, child in enumerate(item.children):
                self._populate_item(node, child, path + (index,))
        else:
            parent.add_leaf(self._item_label(item), data=entry)

    def rebuild_tree(self, select: Optional[TreeEntry] = None) -> None:
        document = self.document
        tree = self.require_tree()
        tree.clear()
        root = tree.root
        root.set_label(Text(f"{document.template}  [{document.data_field}]", style="bold"))
        root.data = TreeEntry("document")

        for key in ("title", "desc"):
            value = getattr(document, key)
            label = Text(f"{key}: {value}") if value else Text(f"{key}: -", style="dim")
            root.add_leaf(label, data=TreeEntry("field", key=key))
        for index, item in enumerate(document.items):
            self._populate_item(root, item, (index,))
        if document.relations or form_edits.form_flags(document).is_relation:
            relations_node = root.add(Text("relations", style="bold"), data=TreeEntry("relations"), expand=True)
            for index, relation in enumerate(document.relations or []):
                relations_node.add_leaf(Text(relation.raw), data=TreeEntry("relation", path=(index,)))
        root.add_leaf(self._theme_label(document.theme), data=TreeEntry("theme"))
        root.expand()

        self.query_one("#dsl-source", Static).update(Text(to_dsl(document)))
        tree.focus()
        tree.call_after_refresh(self._restore_cursor, select)

    def _restore_cursor(self, select: Optional[TreeEntry]) -> None:
        tree = self.require_tree()
        target = self._find_tree_node(tree.root, select) if select else None
        tree.select_node(target if target is not None else tree.root)

    def _find_tree_node(self, node: TreeNode[TreeEntry], entry: TreeEntry) -> Optional[TreeNode[TreeEntry]]:
        if node.data == entry:
            return node
        for child in node.children:
            found = self._find_tree_node(child, entry)
            if found is not None:
                return found
        return None

    def selected_entry(self) -> Optional[TreeEntry]:
        node = self.require_tree().cursor_node
        if node is None or not isinstance(node.data, TreeEntry):
            return None
        return node.data

    def apply_edit(self, document: InfographicDocument, message: str, select: Optional[TreeEntry] = None) -> None:
        self.document = document
        self.rebuild_tree(select)
        self.show_status(message)

    def show_status(self, message: str) -> None:
        location = self._active_path or DEFAULT_DOCUMENT_PATH
        self.sub_title = f"{message} | {location}"

    def _item_field_keys(self, item: InfographicItem) -> list[str]:
        flags = form_edits.form_flags(self.document)
        keys = ["label", "desc"]
        if flags.show_value or item.value:
            keys.append("value")
        keys.extend(["icon", "time"])
        if flags.is_relation or item.id:
            keys.append("id")
        return keys

    # -- actions --------------------------------------------------------

    def action_edit_node(self) -> None:
        entry = self.selected_entry()
        if entry is None:
            self.bell()
            self.show_status("No node selected.")
            return

        if entry.kind == "document":
            self.action_choose_template()
        elif entry.kind == "field":
            self._edit_document_field(entry)
        elif entry.kind == "item":
            self._edit_item(entry)
        elif entry.kind == "relations":
            self.action_add_relation()
        elif entry.kind == "relation":
            self._edit_relation(entry)
        elif entry.kind == "theme":
            self.action_edit_palette()

    def _edit_document_field(self, entry: TreeEntry) -> None:
        def apply_value(result: str | None) -> None:
            if result is None:
                self.show_status(f"{entry.key.capitalize()} unchanged.")
                return
            self.apply_edit(
                form_edits.with_field(self.document, entry.key, result.strip()),
                f"{entry.key.capitalize()} updated.",
                select=entry,
            )

        current = getattr(self.document, entry.key) or ""
        self.push_screen(TextPromptScreen(f"Edit {entry.key}", current), apply_value)

    def _edit_item(self, entry: TreeEntry) -> None:
        item = form_edits.item_at(self.document, entry.path)

        def apply_fields(result: dict[str, str] | None) -> None:
            if result is None:
                self.show_status("Item unchanged.")
                return
            updated = item
            for key, value in result.items():
                updated = form_edits.with_item_field(updated, key, value.strip())
            self.apply_edit(
                form_edits.replace_item_at(self.document, entry.path, updated),
                "Item updated.",
                select=entry,
            )

        self.push_screen(ItemEditorScreen(item, self._item_field_keys(item)), apply_fields)

    def _edit_relation(self, entry: TreeEntry) -> None:
        index = entry.path[0]
        current = (self.document.relations or [])[index].raw

        def apply_edge(result: str | None) -> None:
            if result is None:
                self.show_status("Relation unchanged.")
                return
            self.apply_edit(
                form_edits.with_relation(self.document, index, result),
                "Relation updated." if result.strip() else "Relation removed.",
                select=entry if result.strip() else TreeEntry("relations"),
            )

        self.push_screen(TextPromptScreen("Edit relation", current), apply_edge)

    def action_add_item(self) -> None:
        document = self.document
        if document.data_field == "root":
            if not document.items:
                self.apply_edit(
                    replace(document, items=[InfographicItem(label="")]),
                    "Root added.",
                    select=TreeEntry("item", path=(0,)),
                )
                return
            root = form_edits.add_child(document.items[0])
            self.apply_edit(
                form_edits.replace_item_at(document, (0,), root),
                "Child added to root.",
                select=TreeEntry("item", path=(0, len(root.children) - 1)),
            )
            return
        updated = form_edits.add_item(document)
        self.apply_edit(updated, "Item added.", select=TreeEntry("item", path=(len(updated.items) - 1,)))

    def action_add_child(self) -> None:
        entry = self.selected_entry()
        if entry is None or entry.kind != "item":
            self.bell()
            self.show_status("Select an item to add a child.")
            return
        item = form_edits.add_child(form_edits.item_at(self.document, entry.path))
        self.apply_edit(
            form_edits.replace_item_at(self.document, entry.path, item),
            "Child added.",
            select=TreeEntry("item", path=entry.path + (len(item.children) - 1,)),
        )

    def action_delete_node(self) -> None:
        entry = self.selected_entry()
        if entry is None:
            self.bell()
            self.show_status("No node selected.")
            return
        document = self.document
        if entry.kind == "item":
            self.apply_edit(form_edits.remove_item_at(document, entry.path), "Item deleted.")
        elif entry.kind == "relation":
            self.apply_edit(
                form_edits.remove_relation(document, entry.path[0]),
                "Relation deleted.",
                select=TreeEntry("relations"),
            )
        elif entry.kind == "field":
            self.apply_edit(form_edits.with_field(document, entry.key, ""), f"{entry.key.capitalize()} cleared.", select=entry)
        elif entry.kind == "theme":
            self.apply_edit(replace(document, theme=None), "Theme removed.", select=entry)
        else:
            self.bell()
            self.show_status("Nothing deleted.")

    def action_add_relation(self) -> None:
        def apply_edge(result: str | None) -> None:
            if not result or not result.strip():
                self.show_status("No relation added.")
                return
            updated = form_edits.add_relation(self.document, result)
            self.apply_edit(
                updated,
                "Relation added.",
                select=TreeEntry("relation", path=(len(updated.relations) - 1,)),
            )

        self.push_screen(TextPromptScreen("New relation", placeholder="A - approves -> B"), apply_edge)

    def action_choose_template(self) -> None:
        def apply_selection(selection: str | None) -> None:
            if not selection or selection == self.document.template:
                self.show_status(f"Template unchanged ({self.document.template}).")
                return
            updated = form_edits.with_template(self.document, selection)
            self.apply_edit(updated, f"Template set to {selection} ({updated.data_field}).")

        self.push_screen(TemplateSelectorScreen(self.document.template), apply_selection)

    def action_cycle_theme_mode(self) -> None:
        theme = self.document.theme
        current = theme.mode if theme else None
        position = THEME_MODES.index(current) if current in THEME_MODES else 0
        mode = THEME_MODES[(position + 1) % len(THEME_MODES)]
        self.apply_edit(
            form_edits.with_theme_mode(self.document, mode),
            f"Theme mode: {mode or 'default'}.",
            select=TreeEntry("theme"),
        )

    def action_edit_palette(self) -> None:
        theme = self.document.theme
        current = ",".join(theme.palette) if theme and theme.palette else ""

        def apply_palette(result: str | None) -> None:
            if result is None:
                self.show_status("Palette unchanged.")
                return
            self.apply_edit(
                form_edits.with_palette_text(self.document, result),
                "Palette updated.",
                select=TreeEntry("theme"),
            )

        self.push_screen(TextPromptScreen("Palette (name or comma separated colors)", current, "#1f77b4,#ff7f0e"), apply_palette)

    def _write_preview(self) -> Path:
        path = self._preview_path.expanduser()
        path.write_text(build_preview_html(self.document), encoding="utf-8")
        return path

    def _open_preview(self, path: Path) -> None:
        uri = path.resolve().as_uri()
        if sys.platform == "darwin":
            try:
                subprocess.Popen(["open", "-g", uri])
                return
            except OSError as exc:
                logger.info("open -g failed (%s), falling back to webbrowser", exc)
        webbrowser.open(uri, new=2)

    def action_preview(self) -> None:
        try:
            path = self._write_preview()
        except OSError as exc:
            self.bell()
            self.show_status(f"Preview failed: {exc}")
            return
        self._open_preview(path)
        self.show_status(f"Opened preview {path} in a browser tab.")

    def _load_document(self, path: Path) -> bool:
        target = path.expanduser()
        if not target.exists():
            self.bell()
            self.show_status(f"{target} not found.")
            return False
        try:
            content = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.bell()
            self.show_status(f"Failed to load {target}: {exc}")
            return False
        document = from_dsl(content)
        if document is None:
            self.bell()
            self.show_status(f"{target} is not an infographic document.")
            return False
        self._active_path = target
        logger.info("Loaded %s (%s, %d items)", target, document.template, len(document.items))
        self.apply_edit(document, f"Loaded {target}")
        return True

    def action_save(self) -> None:
        path = (self._active_path or DEFAULT_DOCUMENT_PATH).expanduser()
        path.write_text(to_dsl(self.document) + "\n", encoding="utf-8")
        self._active_path = path
        logger.info("Saved %s", path)
        self.show_status(f"Saved to {path}")

    def action_open(self) -> None:
        self._load_document(self._active_path or DEFAULT_DOCUMENT_PATH)


def main() -> None:
    setup_logging(log_file=os.environ.get("INFOGRAPHIC_LOG_FILE", DEFAULT_LOG_FILE))
    initial_path = sys.argv[1] if len(sys.argv) > 1 else None
    InfographicApp(initial_path).run()


if __name__ == "__main__":
    main()
