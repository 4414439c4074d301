"""Tests for the editing session façade and its view state."""

from __future__ import annotations

import threading

import pytest

from feedweaver.codec import read_opml
from feedweaver.config import Settings
from feedweaver.errors import InvalidPathKey, InvalidTarget, ParseError, PathNotFound, UnsupportedMutation
from feedweaver.events import EditAction
from feedweaver.models import Feed, Folder, NodeEdit
from feedweaver.recording import FileEventRecorder, iter_events
from feedweaver.session import OutlineEditor


@pytest.fixture
def editor(sample_opml: str) -> OutlineEditor:
    ed = OutlineEditor(settings=Settings())
    ed.import_text(sample_opml)
    return ed


def _shape(nodes) -> list[tuple]:
    shape = []
    for node in nodes:
        if isinstance(node, Folder):
            shape.append(("folder", node.label, _shape(node.children or ())))
        else:
            shape.append(("feed", node.label, node.feed_url, node.site_url))
    return shape


def test_end_to_end_session(editor: OutlineEditor) -> None:
    """Import, add a folder, drop a feed onto a folder, export and re-import."""

    editor.add("folder")
    result = editor.move("2", "1")

    expected = [
        ("folder", "New Folder", []),
        ("folder", "Tech", [("feed", "News", "u2", None), ("feed", "A", "u1", "h1")]),
    ]
    assert _shape(editor.document.nodes) == expected
    assert result.path == (1, 0)
    assert editor.state.is_expanded((1,))

    exported = editor.export_text()
    reloaded = OutlineEditor()
    reloaded.import_text(exported)
    assert _shape(reloaded.document.nodes) == expected


def test_failed_import_keeps_document_and_state(editor: OutlineEditor) -> None:
    editor.select("0-0")
    before = editor.document

    with pytest.raises(ParseError):
        editor.import_text("<opml><body>")

    assert editor.document is before
    assert editor.state.selected == (0, 0)


def test_import_resets_view_state(editor: OutlineEditor, sample_opml: str) -> None:
    editor.select("1")
    editor.toggle("0")

    editor.import_text(sample_opml)

    assert editor.state.selected is None
    assert editor.state.expanded == set()


def test_add_uses_selection_and_expands_it(editor: OutlineEditor) -> None:
    editor.select("0")
    editor.add("feed")

    assert [n.label for n in editor.document.nodes[0].children] == ["A", "New RSS Feed"]
    assert editor.state.expanded == {"0"}


def test_add_under_selected_feed_is_rejected(editor: OutlineEditor) -> None:
    editor.select("1")
    before = editor.document

    with pytest.raises(InvalidTarget):
        editor.add("feed")
    assert editor.document is before


def test_edit_defaults_to_selection(editor: OutlineEditor) -> None:
    assert editor.edit(NodeEdit(label="ignored")) is editor.document

    editor.select("0")
    editor.edit(NodeEdit(label="Technology", feed_url="http://nope"))

    assert editor.selected_node == Folder(label="Technology", children=editor.document.nodes[0].children)


def test_delete_clears_selection_inside_deleted_subtree(editor: OutlineEditor) -> None:
    """It should drop a selection that pointed into the deleted branch."""

    editor.select("0-0")
    editor.delete("0")

    assert editor.state.selected is None
    assert [n.label for n in editor.document.nodes] == ["News"]


def test_delete_keeps_unrelated_selection(editor: OutlineEditor) -> None:
    editor.select("0")
    editor.delete("0-0")

    assert editor.state.selected == (0,)
    assert editor.document.nodes[0].children == ()


def test_selection_follows_moved_node(editor: OutlineEditor) -> None:
    editor.select("1")
    editor.move("1", "0")

    assert editor.state.selected == (0, 0)
    assert editor.selected_node == Feed(label="News", feed_url="u2")


def test_failed_move_leaves_everything_untouched(editor: OutlineEditor) -> None:
    editor.select("0")
    before = editor.document

    with pytest.raises(PathNotFound):
        editor.move("3", "0")

    assert editor.document is before
    assert editor.state.selected == (0,)


def test_drag_hover_expands_and_survives_cancel(editor: OutlineEditor) -> None:
    editor.begin_drag("1")

    assert editor.hover("0") is True
    assert editor.hover("0") is False
    assert editor.hover("1") is False

    editor.cancel_drag()

    assert editor.state.dragging is None
    assert editor.state.drag_expanded == set()
    assert editor.state.is_expanded((0,))


def test_drop_applies_move_and_ends_session(editor: OutlineEditor) -> None:
    editor.begin_drag("1")
    result = editor.drop("0")

    assert result is not None
    assert result.path == (0, 0)
    assert editor.state.dragging is None
    assert [n.label for n in editor.document.nodes[0].children] == ["News", "A"]


def test_drop_without_target_is_a_noop(editor: OutlineEditor) -> None:
    before = editor.document
    editor.begin_drag("1")

    assert editor.drop(None) is None
    assert editor.drop("0") is None
    assert editor.document is before
    assert editor.state.dragging is None


def test_apply_dispatch(editor: OutlineEditor) -> None:
    node = editor.apply("select", "1")
    assert node.label == "News"

    editor.apply("edit", "1", {"label": "World", "feed_url": "u3", "site_url": "h3"})
    assert editor.resolve("1") == Feed(label="World", feed_url="u3", site_url="h3")

    assert editor.apply("select", None) is None
    editor.apply("add", None, {"kind": "folder"})
    assert editor.document.nodes[0].label == "New Folder"

    result = editor.apply("move", "2", {"dest": "0"})
    assert result.path == (0, 0)

    editor.apply("delete", "0")
    assert [n.label for n in editor.document.nodes] == ["Tech"]

    with pytest.raises(UnsupportedMutation):
        editor.apply("undo", "0")
    with pytest.raises(UnsupportedMutation):
        editor.apply("move", "0")


def test_apply_edit_only_replaces_given_fields(editor: OutlineEditor) -> None:
    """It should keep a feed's URLs when the payload only renames it."""

    editor.apply("edit", "0-0", {"label": "Renamed"})
    assert editor.resolve("0-0") == Feed(label="Renamed", feed_url="u1", site_url="h1")

    editor.apply("edit", "0-0", {"site_url": None})
    assert editor.resolve("0-0") == Feed(label="Renamed", feed_url="u1")


def test_edit_merge_defaults_to_selection(editor: OutlineEditor) -> None:
    editor.select("1")
    editor.edit(NodeEdit(site_url="h2"), merge=True)

    assert editor.selected_node == Feed(label="News", feed_url="u2", site_url="h2")


def test_apply_move_parses_into_folder_flag(editor: OutlineEditor) -> None:
    """It should read a string "false" as a gap move, not as a truthy value."""

    editor.add("folder")
    result = editor.apply("move", "2", {"dest": "1", "into_folder": "false"})

    assert result.opened is None
    assert result.path == (2,)
    assert [n.label for n in editor.document.nodes] == ["New Folder", "Tech", "News"]
    assert [n.label for n in editor.document.nodes[1].children] == ["A"]


@pytest.mark.parametrize(
    ("kind", "path", "payload"),
    [
        ("move", "1", {"dest": 0}),
        ("move", "1", {}),
        ("move", "1", {"dest": "0", "into_folder": "sideways"}),
        ("edit", "1", {"label": ["x"]}),
        ("add", None, {"kind": "bookmark"}),
    ],
)
def test_apply_rejects_malformed_payloads(editor: OutlineEditor, kind: str, path, payload: dict) -> None:
    before = editor.document

    with pytest.raises(UnsupportedMutation):
        editor.apply(kind, path, payload)
    assert editor.document is before


def test_apply_rejects_non_key_paths(editor: OutlineEditor) -> None:
    with pytest.raises(InvalidPathKey):
        editor.apply("delete", 0)


def test_concurrent_applies_are_serialized(tmp_path, sample_opml: str) -> None:
    """It should lose no update when several threads mutate one editor."""

    journal = tmp_path / "events.jsonl"
    editor = OutlineEditor(recorder=FileEventRecorder(journal))
    editor.import_text(sample_opml)

    def worker() -> None:
        for _ in range(50):
            editor.apply("add", None, {"kind": "feed"})

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(editor.document.nodes) == 2 + 8 * 50
    assert [e.seq for e in iter_events(journal)] == list(range(1, 2 + 8 * 50))


def test_journal_records_applied_actions(tmp_path, sample_opml: str) -> None:
    """It should append one event per applied operation, numbered in order."""

    journal = tmp_path / "journal" / "events.jsonl"
    editor = OutlineEditor(recorder=FileEventRecorder(journal), session_id="s1")

    editor.import_text(sample_opml)
    editor.add("folder")
    editor.move("2", "1")
    with pytest.raises(PathNotFound):
        editor.delete("7")
    editor.export_text()

    events = iter_events(journal)
    assert [e.action for e in events] == [EditAction.IMPORT, EditAction.ADD, EditAction.MOVE, EditAction.EXPORT]
    assert [e.seq for e in events] == [1, 2, 3, 4]
    assert all(e.session_id == "s1" for e in events)
    assert events[2].path == "2"
    assert events[2].data["landed"] == "1-0"


def test_journal_path_from_settings(tmp_path, sample_opml: str) -> None:
    journal = tmp_path / "events.jsonl"
    editor = OutlineEditor(settings=Settings(journal_path=journal))

    editor.import_text(sample_opml)

    assert len(iter_events(journal)) == 1


def test_export_file_uses_configured_name(editor: OutlineEditor, tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    target = editor.export_file()

    assert target.name == "exported_opml.opml"
    assert 'type="folder"' in (tmp_path / "exported_opml.opml").read_text(encoding="utf-8")


def test_export_file_creates_parent_directories(editor: OutlineEditor, tmp_path) -> None:
    journal = tmp_path / "events.jsonl"
    editor = OutlineEditor(editor.document, recorder=FileEventRecorder(journal))

    target = editor.export_file(tmp_path / "out" / "subs.opml")

    assert target == tmp_path / "out" / "subs.opml"
    assert [n.label for n in read_opml(target).nodes] == ["Tech", "News"]
    assert iter_events(journal)[0].data == {"file": str(target)}
