"""
git_repo
--------

git 명령 출력을 구조화된 값으로 바꿔주는 저장소 추상화.
git 출력 파싱은 이 모듈 안에서만 한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional

from .errors import ParseError
from .logging_utils import get_logger
from .subprocess_utils import run_command


logger = get_logger(__name__)

_BRANCH_HEAD_PREFIX = "# branch.head "


@dataclass(frozen=True)
class RepositoryStatus:
    branch: str
    is_clean: bool


class GitRepository:
    def __init__(self, workdir: str = ".", env: Optional[Mapping[str, str]] = None) -> None:
        self.workdir = workdir
        self.env = env

    def _git(self, *args: str) -> str:
        result = run_command(["git", *args], cwd=self.workdir, env=self.env)
        return result.stdout

    def _status_lines(self) -> List[str]:
        out = self._git("status", "--porcelain=v2", "--branch")
        return [line for line in out.splitlines() if line.strip()]

    @staticmethod
    def _parse_branch(lines: List[str]) -> str:
        for line in lines:
            if line.startswith(_BRANCH_HEAD_PREFIX):
                branch = line[len(_BRANCH_HEAD_PREFIX):].strip()
                if branch and branch != "(detached)":
                    return branch
                raise ParseError(
                    "현재 브랜치를 확인할 수 없습니다. (detached HEAD 상태에서는 릴리스할 수 없습니다)"
                )
        raise ParseError("git status 출력에서 브랜치 정보를 찾을 수 없습니다.")

    @staticmethod
    def _parse_clean(lines: List[str]) -> bool:
        # "#" 로 시작하지 않는 줄은 변경/추적되지 않은 파일 항목이다.
        return not any(not line.startswith("#") for line in lines)

    def status(self) -> RepositoryStatus:
        lines = self._status_lines()
        return RepositoryStatus(
            branch=self._parse_branch(lines),
            is_clean=self._parse_clean(lines),
        )

    def current_branch(self) -> str:
        return self._parse_branch(self._status_lines())

    def is_clean(self) -> bool:
        return self._parse_clean(self._status_lines())

    def list_tags(self) -> List[str]:
        """
        태그 목록을 생성 시각 오름차순으로 돌려준다. (사전순 아님)
        주석 태그의 creatordate 는 태그를 만든 시각이다.
        """
        out = self._git(
            "for-each-ref",
            "--sort=creatordate",
            "--format=%(refname:strip=2)",
            "refs/tags",
        )
        return [line.strip() for line in out.splitlines() if line.strip()]

    def diff_stat(self, path_spec: str, tag_a: str, tag_b: str) -> str:
        """
        두 ref 사이에서 path_spec 아래의 변경 요약(--stat)을 돌려준다.
        빈 문자열이면 변경 없음.
        """
        return self._git("diff", "--stat", tag_a, tag_b, "--", path_spec).strip()

    def create_tag(self, name: str) -> None:
        """
        HEAD 에 주석(annotated) 태그를 만든다.
        경량 태그는 creatordate 가 커밋 시각이 되어 생성 순서를 알 수 없다.
        """
        logger.info("태그 생성: %s", name)
        self._git("tag", "-a", name, "-m", name)

    def tags_at_head(self) -> List[str]:
        out = self._git("tag", "--points-at", "HEAD")
        return [line.strip() for line in out.splitlines() if line.strip()]
