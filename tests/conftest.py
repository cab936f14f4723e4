"""
pytest 설정:

로컬 작업 환경에 설치된 다른 버전의 release_kit 패키지가 존재할 때,
`pytest` 실행 시 site-packages 쪽이 먼저 import 되어 테스트가 깨질 수 있다.

테스트는 항상 현재 레포의 소스를 대상으로 해야 하므로, repo root 를 sys.path 최상단에 고정한다.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from typing import Callable, List, Optional

import pytest


def pytest_configure() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


class FakeRepo:
    """
    GitRepository 대역. 실제 git 대신 메모리 상의 태그 목록으로 동작한다.

    attach=False 이면 create_tag 가 HEAD 에 태그를 붙이지 못한 상황을 흉내낸다.
    """

    def __init__(
        self,
        *,
        clean: bool = True,
        tags: Optional[List[str]] = None,
        diff: str = "",
        attach: bool = True,
        branch: str = "main",
    ) -> None:
        self.clean = clean
        self.branch = branch
        self.tags: List[str] = list(tags or [])
        self.head: List[str] = []
        self.diff = diff
        self.attach = attach
        self.created: List[str] = []
        self.diff_calls: List[tuple[str, str, str]] = []

    def status(self):  # noqa: ANN201
        # sys.path 고정(pytest_configure) 이후에 import 한다.
        from release_kit.git_repo import RepositoryStatus

        return RepositoryStatus(branch=self.branch, is_clean=self.clean)

    def list_tags(self) -> List[str]:
        return list(self.tags)

    def create_tag(self, name: str) -> None:
        self.created.append(name)
        self.tags.append(name)
        if self.attach:
            self.head.append(name)

    def tags_at_head(self) -> List[str]:
        return list(self.head)

    def diff_stat(self, path_spec: str, tag_a: str, tag_b: str) -> str:
        self.diff_calls.append((path_spec, tag_a, tag_b))
        return self.diff


@pytest.fixture
def make_repo() -> Callable[..., FakeRepo]:
    return FakeRepo


# -----------------------------
# 실제 git 저장소 fixture
# -----------------------------


def run_git(cwd, *args: str, date: Optional[str] = None) -> str:  # noqa: ANN001
    """
    테스트 준비용 git 실행. date 를 주면 커밋/태그 시각을 그 값으로 고정한다.
    """
    env = dict(os.environ)
    if date is not None:
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_DATE"] = date
    result = subprocess.run(
        ["git", *args], cwd=cwd, env=env, check=True, capture_output=True, text=True
    )
    return result.stdout


@pytest.fixture
def git() -> Callable[..., str]:
    return run_git


@pytest.fixture
def real_repo(tmp_path, monkeypatch: pytest.MonkeyPatch):  # noqa: ANN001, ANN201
    """sql/schema.sql 과 index.js 를 담은 커밋 하나가 있는 저장소 (브랜치 main)."""
    if shutil.which("git") is None:
        pytest.skip("git 이 설치되어 있지 않습니다.")

    for key, value in {
        "GIT_AUTHOR_NAME": "Release Bot",
        "GIT_AUTHOR_EMAIL": "release@example.com",
        "GIT_COMMITTER_NAME": "Release Bot",
        "GIT_COMMITTER_EMAIL": "release@example.com",
        "GIT_CONFIG_GLOBAL": os.devnull,
        "GIT_CONFIG_NOSYSTEM": "1",
    }.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("GIT_AUTHOR_DATE", raising=False)
    monkeypatch.delenv("GIT_COMMITTER_DATE", raising=False)

    run_git(tmp_path, "init", "-q", "-b", "main")
    (tmp_path / "sql").mkdir()
    (tmp_path / "sql" / "schema.sql").write_text("create table a (id int);\n", encoding="utf-8")
    (tmp_path / "index.js").write_text("exports.handler = async () => 1;\n", encoding="utf-8")
    run_git(tmp_path, "add", ".")
    run_git(tmp_path, "commit", "-q", "-m", "initial", date="2024-01-01T10:00:00")
    return tmp_path
