"""
Headless tests for the Textual editor.
"""

import asyncio

from app import STARTER_DSL, InfographicApp, build_preview_html
from dsl_io import from_dsl


def run_app(app, steps):
    async def run():
        async with app.run_test() as pilot:
            await pilot.pause()
            await steps(pilot)

    asyncio.run(run())


def test_loads_document(tmp_path, hierarchy_document):
    path = tmp_path / "org.txt"
    path.write_text(hierarchy_document, encoding="utf-8")
    app = InfographicApp(path)

    async def steps(pilot):
        assert app.document == from_dsl(hierarchy_document)
        assert "Loaded" in app.sub_title

    run_app(app, steps)


def test_add_item_and_save(tmp_path, list_document):
    path = tmp_path / "list.txt"
    path.write_text(list_document, encoding="utf-8")
    app = InfographicApp(path)

    async def steps(pilot):
        await pilot.press("a")
        await pilot.pause()
        assert len(app.document.items) == 2
        await pilot.press("s")
        await pilot.pause()

    run_app(app, steps)

    saved = from_dsl(path.read_text(encoding="utf-8"))
    assert len(saved.items) == 2
    assert saved.items[0].label == "A"
    assert saved.theme.palette == ["#fff", "#000"]


def test_add_item_to_root_adds_child(tmp_path, hierarchy_document):
    path = tmp_path / "org.txt"
    path.write_text(hierarchy_document, encoding="utf-8")
    app = InfographicApp(path)

    async def steps(pilot):
        await pilot.press("a")
        await pilot.pause()
        assert len(app.document.items) == 1
        assert len(app.document.items[0].children) == 3

    run_app(app, steps)


def test_cycle_theme_mode(tmp_path, list_document):
    path = tmp_path / "list.txt"
    path.write_text(list_document, encoding="utf-8")
    app = InfographicApp(path)

    async def steps(pilot):
        await pilot.press("m")
        await pilot.pause()
        assert app.document.theme.mode == "dark"
        await pilot.press("m")
        await pilot.pause()
        assert app.document.theme.mode is None

    run_app(app, steps)


def test_missing_file_keeps_starter(tmp_path):
    app = InfographicApp(tmp_path / "missing.txt")

    async def steps(pilot):
        assert app.document == from_dsl(STARTER_DSL)
        assert "not found" in app.sub_title

    run_app(app, steps)


def test_rejects_non_infographic_file(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("# Just markdown\n", encoding="utf-8")
    app = InfographicApp(path)

    async def steps(pilot):
        assert "not an infographic document" in app.sub_title
        assert app.document.template == "list-row-horizontal-icon-arrow"

    run_app(app, steps)


def test_preview_html_embeds_source(relation_document):
    document = from_dsl(relation_document + "\ntheme dark")
    html = build_preview_html(document)
    assert "<title>relation-dagre-flow-tb-badge-card preview</title>" in html
    assert '"infographic relation-dagre-flow-tb-badge-card\\ndata' in html
    assert 'theme: "dark"' in html


def test_preview_html_escapes_script_end():
    document = from_dsl("infographic x\ndata\n  title </script>")
    html = build_preview_html(document)
    assert "title <\\/script>" in html
    assert html.count("</script>") == 1


def test_write_preview_uses_configured_path(tmp_path, monkeypatch, list_document):
    target = tmp_path / "preview.html"
    monkeypatch.setenv("INFOGRAPHIC_PREVIEW_PATH", str(target))
    app = InfographicApp()
    app.document = from_dsl(list_document)

    assert app._write_preview() == target
    assert 'theme: "light"' in target.read_text(encoding="utf-8")
