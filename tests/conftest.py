"""
Shared fixtures: throwaway git repositories with a bare remote.
"""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from autodoc.config import PLAIN_ENV_VARS, get_default_config

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(cwd, *args) -> str:
    """Run git and return stripped stdout; raises on failure."""
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def ref_exists(repo, ref) -> bool:
    result = subprocess.run(
        ["git", "show-ref", "--quiet", "--verify", ref],
        cwd=str(repo),
    )
    return result.returncode == 0


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, tmp_path_factory, monkeypatch):
    """Keep user config, git identity and autodoc variables out of tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Doc Bot")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "docbot@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Doc Bot")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "docbot@example.com")
    for key in list(os.environ):
        if key.startswith("AUTODOC_") or key in PLAIN_ENV_VARS:
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def config():
    return get_default_config()


@pytest.fixture
def remote_repo(tmp_path) -> Path:
    """An empty bare repository standing in for the remote."""
    path = tmp_path / "remote.git"
    git(tmp_path, "init", "--bare", "-q", str(path))
    return path


@pytest.fixture
def work_repo(tmp_path, remote_repo) -> Path:
    """A repository on branch main with one commit and `origin` pointing at remote_repo."""
    path = tmp_path / "work"
    path.mkdir()
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    git(path, "remote", "add", "origin", str(remote_repo))
    (path / "README.md").write_text("# project\n")
    (path / ".gitignore").write_text("gh-pages/\n")
    git(path, "add", "README.md", ".gitignore")
    git(path, "commit", "-q", "-m", "Initial commit")
    return path
