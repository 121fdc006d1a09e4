"""Shared fixtures: isolate afx directories under a temporary path."""

import pytest

from afx.models.package import Local, Plugin


@pytest.fixture(autouse=True)
def afx_dirs(tmp_path, monkeypatch):
    root = tmp_path / "afx-root"
    bin_dir = tmp_path / "bin"
    monkeypatch.setenv("AFX_ROOT", str(root))
    monkeypatch.setenv("AFX_BIN", str(bin_dir))
    monkeypatch.delenv("AFX_SHELL", raising=False)
    return {"root": root, "bin": bin_dir}


@pytest.fixture
def plugin_home(tmp_path):
    """A local package directory containing bin/init.sh."""
    home = tmp_path / "plugin-home"
    (home / "bin").mkdir(parents=True)
    (home / "bin" / "init.sh").write_text("echo init\n")
    return home


@pytest.fixture
def make_local(plugin_home):
    def _make(name="local-pkg", directory=None, **plugin):
        plugin.setdefault("sources", ["bin/*.sh"])
        return Local(name=name, directory=str(directory or plugin_home), plugin=Plugin(**plugin))

    return _make
