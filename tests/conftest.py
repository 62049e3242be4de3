import pytest


@pytest.fixture
def tree(tmp_path):
    """Creates the reference tree: root.txt, foo/bar/leaf.txt and biz/excluded.txt."""
    base = tmp_path / "tree"
    (base / "foo" / "bar").mkdir(parents=True)
    (base / "biz").mkdir()

    (base / "root.txt").write_text("root")
    (base / "foo" / "bar" / "leaf.txt").write_text("leaf")
    (base / "biz" / "excluded.txt").write_text("excluded")

    return base


@pytest.fixture(autouse=True)
def no_default_excludes_env(monkeypatch):
    monkeypatch.delenv("PATHSEL_DEFAULT_EXCLUDES", raising=False)
