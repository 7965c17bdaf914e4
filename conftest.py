"""Pytest fixtures for devlog tests."""

import json
from pathlib import Path

import httpx
import pytest
from git import Actor, Repo

from config.settings import get_settings
from shared.models import DevLogConfig

TEST_ACTOR = Actor("Test User", "test@example.com")


def make_commit(repo: Repo, message: str, filename: str = "notes.txt"):
    """Write a file change and commit it with ``message``."""
    path = Path(repo.working_tree_dir) / filename
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{message}\n")
    repo.index.add([str(path)])
    return repo.index.commit(message, author=TEST_ACTOR, committer=TEST_ACTOR)


class RecordingHandler:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, status_code: int = 200, body=None, text: str = None):
        self.status_code = status_code
        self.body = body if body is not None else {"message": "Log appended"}
        self.text = text
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory, monkeypatch):
    """Point the settings at a throwaway config file for every test."""
    config_dir = tmp_path_factory.mktemp("devlog-home")
    monkeypatch.setenv("DEVLOG_STORAGE__CONFIG_PATH", str(config_dir / "devlog.json"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def config_path(isolated_settings) -> Path:
    return isolated_settings.storage.config_path


@pytest.fixture
def sample_config() -> DevLogConfig:
    return DevLogConfig(
        api_key="k",
        api_base_url="http://x",
        include_commit_hash=True,
        include_date=True,
    )


@pytest.fixture
def git_repo(tmp_path_factory, monkeypatch) -> Repo:
    """An empty git repository used as the working directory."""
    repo_dir = tmp_path_factory.mktemp("repo")
    repo = Repo.init(repo_dir)
    (Path(repo.git_dir) / "hooks").mkdir(exist_ok=True)
    monkeypatch.chdir(repo_dir)
    return repo


@pytest.fixture
def plain_dir(tmp_path_factory, monkeypatch) -> Path:
    """A working directory outside any git repository."""
    directory = tmp_path_factory.mktemp("plain")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(directory.parent))
    monkeypatch.chdir(directory)
    return directory
