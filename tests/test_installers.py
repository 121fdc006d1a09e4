"""Tests for package installers, downloads and command links."""

import io
import os
import subprocess
import tarfile
import zipfile
from types import SimpleNamespace

import httpx
import pytest
from github import GithubException

from afx.core.errors import InstallError
from afx.core.resilience import ExponentialBackoff
from afx.installers import (
    GistInstaller,
    GitHubInstaller,
    HTTPInstaller,
    LocalInstaller,
    get_installer,
    install,
    link_command,
)
from afx.installers.download import unpack
from afx.models.package import HTTP, Command, Gist, GitHub, Link, Local, Release

NO_WAIT = ExponentialBackoff(base_delay=0.0, max_delay=0.0, max_retries=2)


def tar_bytes(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


# ═══════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════


class TestGetInstaller:
    def test_dispatch_on_kind(self):
        client = mock_client(lambda request: httpx.Response(200))
        assert isinstance(get_installer(GitHub(name="a", owner="o", repo="r"), client), GitHubInstaller)
        assert isinstance(get_installer(Gist(name="b", owner="o", id="1"), client), GistInstaller)
        assert isinstance(get_installer(Local(name="c", directory="/tmp"), client), LocalInstaller)
        assert isinstance(get_installer(HTTP(name="d", url="https://x.io/d"), client), HTTPInstaller)


# ═══════════════════════════════════════════
# HTTP Installer
# ═══════════════════════════════════════════


class TestHTTPInstaller:
    def test_downloads_unpacks_and_links(self, afx_dirs):
        archive = tar_bytes({"tool/bin/tool": b"#!/bin/sh\necho tool\n"})
        requested = []

        def handler(request):
            requested.append(str(request.url))
            return httpx.Response(200, content=archive)

        pkg = HTTP(
            name="tool",
            url="https://example.com/dl/tool.tar.gz",
            command=Command(link=[Link(from_="tool/bin/tool")]),
        )
        install(pkg, mock_client(handler))

        assert requested == ["https://example.com/dl/tool.tar.gz"]
        assert os.path.isfile(os.path.join(pkg.home, "tool", "bin", "tool"))
        link = afx_dirs["bin"] / "tool"
        assert link.is_symlink()
        assert os.readlink(link) == os.path.join(pkg.home, "tool", "bin", "tool")
        assert pkg.installed() is True

    def test_retries_transport_errors(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("boom", request=request)
            return httpx.Response(200, content=b"#!/bin/sh\n")

        pkg = HTTP(name="script", url="https://example.com/script.sh")
        HTTPInstaller(mock_client(handler), backoff=NO_WAIT).install(pkg)
        assert len(attempts) == 2
        path = os.path.join(pkg.home, "script.sh")
        assert os.access(path, os.X_OK)

    def test_http_error(self):
        pkg = HTTP(name="gone", url="https://example.com/gone.sh")
        installer = HTTPInstaller(mock_client(lambda request: httpx.Response(404)), backoff=NO_WAIT)
        with pytest.raises(InstallError, match="HTTP 404"):
            installer.install(pkg)

    def test_gives_up_after_retries(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        pkg = HTTP(name="down", url="https://example.com/down.sh")
        with pytest.raises(InstallError, match="failed to download"):
            HTTPInstaller(mock_client(handler), backoff=NO_WAIT).install(pkg)


# ═══════════════════════════════════════════
# GitHub Installer
# ═══════════════════════════════════════════


class FakeRelease:
    def __init__(self, assets):
        self.assets = assets

    def get_assets(self):
        return self.assets


class FakeRepo:
    def __init__(self, release):
        self.release = release
        self.tags = []

    def get_release(self, tag):
        self.tags.append(tag)
        return self.release

    def get_latest_release(self):
        self.tags.append("latest")
        return self.release


class FakeGithub:
    def __init__(self, repo):
        self.repo = repo
        self.names = []

    def get_repo(self, name):
        self.names.append(name)
        if self.repo is None:
            raise GithubException(404, {"message": "Not Found"}, None)
        return self.repo


class TestGitHubInstaller:
    def test_release_asset(self):
        asset = SimpleNamespace(name="bar_linux_amd64", browser_download_url="https://dl.example.com/bar")
        repo = FakeRepo(FakeRelease([asset]))
        gh = FakeGithub(repo)
        client = mock_client(lambda request: httpx.Response(200, content=b"\x7fELF"))
        pkg = GitHub(name="bar", owner="foo", repo="bar", release=Release(name="bar_linux_amd64", tag="v1.0"))

        GitHubInstaller(client, gh=gh).install(pkg)

        assert gh.names == ["foo/bar"]
        assert repo.tags == ["v1.0"]
        assert os.path.isfile(os.path.join(pkg.home, "bar_linux_amd64"))

    def test_latest_release_when_no_tag(self):
        asset = SimpleNamespace(name="bar", browser_download_url="https://dl.example.com/bar")
        repo = FakeRepo(FakeRelease([asset]))
        client = mock_client(lambda request: httpx.Response(200, content=b"bin"))
        pkg = GitHub(name="bar", owner="foo", repo="bar", release=Release(name="bar"))
        GitHubInstaller(client, gh=FakeGithub(repo)).install(pkg)
        assert repo.tags == ["latest"]

    def test_missing_asset(self):
        asset = SimpleNamespace(name="other", browser_download_url="https://dl.example.com/other")
        gh = FakeGithub(FakeRepo(FakeRelease([asset])))
        pkg = GitHub(name="bar", owner="foo", repo="bar", release=Release(name="bar"))
        installer = GitHubInstaller(mock_client(lambda request: httpx.Response(200)), gh=gh)
        with pytest.raises(InstallError, match="found: other"):
            installer.install(pkg)

    def test_repository_not_found(self):
        pkg = GitHub(name="bar", owner="foo", repo="bar", release=Release(name="bar"))
        installer = GitHubInstaller(mock_client(lambda request: httpx.Response(200)), gh=FakeGithub(None))
        with pytest.raises(InstallError, match="failed to get release latest"):
            installer.install(pkg)

    def test_clone_without_release(self, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, "", "")

        monkeypatch.setattr(subprocess, "run", fake_run)
        pkg = GitHub(name="enhancd", owner="b4b4r07", repo="enhancd", branch="main")
        GitHubInstaller(mock_client(lambda request: httpx.Response(200))).install(pkg)
        assert calls == [
            ["git", "clone", "--depth", "1", "--branch", "main", "https://github.com/b4b4r07/enhancd", pkg.home]
        ]


# ═══════════════════════════════════════════
# Gist and Local Installers
# ═══════════════════════════════════════════


class TestGistInstaller:
    def test_clone(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            subprocess, "run", lambda cmd, **kwargs: calls.append(cmd) or subprocess.CompletedProcess(cmd, 0)
        )
        pkg = Gist(name="snippets", owner="me", id="abc")
        GistInstaller().install(pkg)
        assert calls == [["git", "clone", "--depth", "1", "https://gist.github.com/me/abc.git", pkg.home]]

    def test_clone_failure(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(128, cmd, output="", stderr="fatal: repository not found\n")

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(InstallError, match="repository not found"):
            GistInstaller().install(Gist(name="snippets", owner="me", id="abc"))


class TestLocalInstaller:
    def test_existing_directory(self, tmp_path):
        LocalInstaller().install(Local(name="dots", directory=str(tmp_path)))

    def test_missing_directory(self, tmp_path):
        with pytest.raises(InstallError, match="no such directory"):
            LocalInstaller().install(Local(name="dots", directory=str(tmp_path / "missing")))


# ═══════════════════════════════════════════
# Unpacking and Linking
# ═══════════════════════════════════════════


class TestUnpack:
    def test_zip(self, tmp_path):
        archive = tmp_path / "pkg.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("pkg/init.sh", "echo hi\n")
        unpack("pkg", archive, tmp_path / "out")
        assert (tmp_path / "out" / "pkg" / "init.sh").read_text() == "echo hi\n"

    def test_corrupt_tar(self, tmp_path):
        archive = tmp_path / "broken.tar.gz"
        archive.write_bytes(b"not a tarball")
        with pytest.raises(InstallError, match="failed to unpack"):
            unpack("broken", archive, tmp_path / "out")


class TestLinkCommand:
    def test_replaces_existing_target(self, tmp_path, afx_dirs):
        home = tmp_path / "home"
        home.mkdir()
        (home / "tool").write_text("")
        afx_dirs["bin"].mkdir()
        (afx_dirs["bin"] / "t").write_text("stale")

        pkg = Local(name="tools", directory=str(home), command=Command(link=[Link(from_="tool", to="t")]))
        targets = link_command(pkg)

        assert [t.target for t in targets] == [str(afx_dirs["bin"] / "t")]
        assert os.readlink(afx_dirs["bin"] / "t") == str(home / "tool")

    def test_nothing_matched(self, tmp_path):
        pkg = Local(name="tools", directory=str(tmp_path), command=Command(link=[Link(from_="nope")]))
        with pytest.raises(InstallError, match="no files matched"):
            link_command(pkg)

    def test_release_archive_is_not_linked(self, tmp_path, afx_dirs):
        home = tmp_path / "home"
        (home / "bar").mkdir(parents=True)
        (home / "bar_linux_amd64.tar.gz").write_text("")
        (home / "bar" / "bar").write_text("")
        pkg = Local(
            name="bar",
            directory=str(home),
            command=Command(link=[Link(from_="**/bar_linux_amd64.tar.gz"), Link(from_="bar/bar")]),
        )
        targets = link_command(pkg)
        assert [t.source for t in targets] == [str(home / "bar" / "bar")]
        assert not (afx_dirs["bin"] / "bar_linux_amd64.tar.gz").exists()

    def test_only_archive_matched(self, tmp_path):
        (tmp_path / "bar.zip").write_text("")
        pkg = Local(name="bar", directory=str(tmp_path), command=Command(link=[Link(from_="**/bar.zip")]))
        with pytest.raises(InstallError, match="no files matched"):
            link_command(pkg)

    def test_no_command(self, tmp_path):
        assert link_command(Local(name="tools", directory=str(tmp_path))) == []
