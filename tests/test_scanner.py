import hashlib

from pathsel.scanner import iter_selected_paths, scan_selected_files
from pathsel.selector import PathSelector


def test_scan_reference_tree(tree):
    selector = PathSelector(tree, ["**/*.txt"], ["biz/**"])
    records = scan_selected_files(tree, selector)

    assert [record.path for record in records] == ["foo/bar/leaf.txt", "root.txt"]
    assert all(record.sha256 is None for record in records)
    assert records[1].size == len("root")


def test_scan_with_digest(tree):
    selector = PathSelector(tree, ["root.txt"])
    records = scan_selected_files(tree, selector, with_digest=True)

    assert len(records) == 1
    assert records[0].sha256 == hashlib.sha256(b"root").hexdigest()


def test_pruned_directories_are_not_visited(tree):
    visited = []

    class RecordingSelector(PathSelector):
        __slots__ = ()

        def is_selected(self, path):
            visited.append(path.relative_to(tree).as_posix())
            return super().is_selected(path)

    selector = RecordingSelector(tree, None, ["biz/**"])
    paths = [path.relative_to(tree).as_posix() for path in iter_selected_paths(tree, selector)]

    assert paths == ["foo/bar/leaf.txt", "root.txt"]
    assert "biz/excluded.txt" not in visited


def test_root_that_cannot_hold_selected_files(tree):
    selector = PathSelector(tree, None, ["biz/**"])
    assert list(iter_selected_paths(tree / "biz", selector)) == []


def test_default_excludes_skip_scm_directories(tree):
    (tree / ".git").mkdir()
    (tree / ".git" / "HEAD").write_text("ref: refs/heads/main")

    with_defaults = scan_selected_files(tree, PathSelector(tree, None, None, True))
    without_defaults = scan_selected_files(tree, PathSelector(tree))

    assert ".git/HEAD" not in [record.path for record in with_defaults]
    assert ".git/HEAD" in [record.path for record in without_defaults]


def test_unreadable_directory_is_skipped(tree, monkeypatch):
    iterdir = type(tree).iterdir

    def guarded_iterdir(self):
        if self.name == "biz":
            raise PermissionError(13, "Permission denied", str(self))
        return iterdir(self)

    monkeypatch.setattr(type(tree), "iterdir", guarded_iterdir)
    records = scan_selected_files(tree, PathSelector(tree))

    assert [record.path for record in records] == ["foo/bar/leaf.txt", "root.txt"]
