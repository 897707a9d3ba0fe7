"""Shared test fixtures and configuration."""

import shutil
import subprocess
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def run_git():
    """Run a git command in a directory and return its stdout."""

    def _run(repo: Path, *args: str, input_text: str | None = None) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=repo,
            input=input_text,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    return _run


@pytest.fixture
def git_repo(temp_dir, run_git, monkeypatch):
    """Create an empty git repository with a test identity.

    Skipped when git is not installed.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    # Keep discovery from walking into a repository above the temp dir
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(temp_dir))

    repo = temp_dir / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")
    run_git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    run_git(repo, "config", "user.name", "Test User")
    run_git(repo, "config", "user.email", "test@example.com")
    run_git(repo, "config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def committed_repo(git_repo, run_git):
    """A repository with one commit containing tracked.txt."""
    (git_repo / "tracked.txt").write_text("line one\nline two\n")
    run_git(git_repo, "add", "tracked.txt")
    run_git(git_repo, "commit", "-q", "-m", "initial")
    return git_repo


@pytest.fixture
def config_dir(temp_dir, mocker):
    """Point the global configuration at a temporary directory."""
    config_path = temp_dir / ".gitscribe"
    mocker.patch("gitscribe.global_config._CONFIG_DIR", config_path)
    return config_path


@pytest.fixture
def clean_api_env(monkeypatch):
    """Remove provider API key variables from the environment."""
    from gitscribe.config import API_KEY_ENV_VARS

    for env_var in API_KEY_ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv("GH_TOKEN", raising=False)
