"""
schema_guard
------------

같은 환경의 최근 두 릴리스 태그 사이에서 스키마 경로가 바뀌었는지 확인하고,
바뀌었거나 비교할 기준이 없으면 사용자에게 계속 진행할지 묻는다.

비교 대상: 이번 실행에서 만든 태그와, 그 태그를 제외한 같은 환경의 최신 태그.
즉 방금 태그한 릴리스를 직전 릴리스와 비교한다. 태그를 만들지 않은 실행은 최신 두 태그를 비교한다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from . import console
from .config import Environment, ReleaseConfig
from .errors import UserDeclined
from .git_repo import GitRepository
from .logging_utils import get_logger


logger = get_logger(__name__)

CONTINUE_QUESTION = "Continue?"


@dataclass(frozen=True)
class TagPair:
    newer: str
    older: str


@dataclass(frozen=True)
class SchemaCheckResult:
    pair: Optional[TagPair]
    diff: str
    prompted: bool


def environment_tags(tags: Sequence[str], prefix: str, environment: Environment) -> List[str]:
    """생성 순 오름차순 태그 목록에서 해당 환경의 태그만 골라 최신순으로 돌려준다."""
    marker = f"{prefix}-{environment.label}-"
    return [t for t in reversed(list(tags)) if t.startswith(marker)]


def select_tag_pair(
    tags: Sequence[str],
    prefix: str,
    environment: Environment,
    current: Optional[str] = None,
) -> Optional[TagPair]:
    """
    current 가 주어지면 (current, 그 외 최신 태그) 로 고정한다.
    이전 커밋으로 롤백하는 릴리스도 직전 릴리스와 비교된다.
    """
    env_tags = environment_tags(tags, prefix, environment)
    if current is not None:
        earlier = [t for t in env_tags if t != current]
        if not earlier:
            return None
        return TagPair(newer=current, older=earlier[0])
    if len(env_tags) < 2:
        return None
    return TagPair(newer=env_tags[0], older=env_tags[1])


def check_schema_changes(
    repo: GitRepository,
    cfg: ReleaseConfig,
    confirm_fn: Callable[[str, bool], bool],
    current_tag: Optional[str] = None,
) -> SchemaCheckResult:
    pair = select_tag_pair(repo.list_tags(), cfg.tag_prefix, cfg.environment, current_tag)

    if pair is None:
        console.warning(f"ATTENTION Schema ({cfg.schema_path}) not yet created.")
        console.warning("Please take the required actions!")
        if not confirm_fn(CONTINUE_QUESTION, False):
            raise UserDeclined("스키마 기준 릴리스가 없어 진행을 중단합니다.")
        return SchemaCheckResult(pair=None, diff="", prompted=True)

    logger.info("스키마 비교: %s <-> %s (%s)", pair.older, pair.newer, cfg.schema_path)
    diff = repo.diff_stat(cfg.schema_path, pair.newer, pair.older)
    if not diff:
        logger.info("스키마 변경 없음")
        return SchemaCheckResult(pair=pair, diff="", prompted=False)

    console.info("Changes of schema since last release:\n")
    console.plain(diff)
    console.warning("ATTENTION Schema changed")
    console.warning("Please take the required actions!")
    if not confirm_fn(CONTINUE_QUESTION, False):
        raise UserDeclined("스키마 변경으로 진행을 중단합니다.")
    return SchemaCheckResult(pair=pair, diff=diff, prompted=True)
