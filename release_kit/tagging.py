"""
tagging
-------

릴리스 태그 이름 계산, 생성, 그리고 현재 커밋에 실제로 붙었는지 검증.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .config import Environment, ReleaseConfig
from .errors import TagVerificationError
from .git_repo import GitRepository
from .logging_utils import get_logger


logger = get_logger(__name__)


def build_tag_name(prefix: str, environment: Environment, now: datetime) -> str:
    """
    <prefix>-<ENV>-<DD>-<MM>-<YYYY>-<H>-<M>

    일/월은 두 자리로 채우고, 시/분은 채우지 않는다.
    """
    return (
        f"{prefix}-{environment.label}-"
        f"{now.day:02d}-{now.month:02d}-{now.year:04d}-{now.hour}-{now.minute}"
    )


def create_release_tag(
    repo: GitRepository,
    cfg: ReleaseConfig,
    now: Optional[datetime] = None,
) -> str:
    """
    현재 커밋에 릴리스 태그를 만들고 검증한다.

    같은 분 안에 두 번 실행하면 같은 이름이 나오므로, 생성 전에 충돌을 확인하고
    덮어쓰지 않고 실패한다. 생성 후에는 HEAD 에 붙은 태그 목록을 다시 읽어
    계산한 이름이 들어 있는지 확인한다. 확인되지 않으면 배포로 넘어가지 않는다.
    """
    name = build_tag_name(cfg.tag_prefix, cfg.environment, now or datetime.now())

    if name in repo.list_tags():
        raise TagVerificationError(
            f"태그 {name} 이(가) 이미 존재합니다. 같은 분에 릴리스가 중복 실행되었을 수 있습니다."
        )

    repo.create_tag(name)

    at_head = repo.tags_at_head()
    if name not in at_head:
        found = ", ".join(at_head) if at_head else "(none)"
        raise TagVerificationError(
            f"태그 {name} 이(가) 현재 커밋에서 확인되지 않습니다. (HEAD 태그: {found})"
        )

    logger.info("태그 검증 완료: %s", name)
    return name
