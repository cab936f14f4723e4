from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from .config import Environment, ReleaseConfig
from .errors import DirtyWorkingTreeError
from .logging_utils import get_logger
from . import (
    console,
    git_repo,
    packager,
    prompt,
    schema_guard,
    tagging,
)


logger = get_logger(__name__)

# plan 출력 및 로그에서 사용하는 단계 이름
ALL_STEPS: List[str] = [
    "confirm",
    "status",
    "tag",
    "schema",
    "package",
    "upload",
]


def _step_enabled(name: str, cfg: ReleaseConfig) -> bool:
    if name in ("status", "tag"):
        return not cfg.skip_tagging
    return True


def _intent_question(cfg: ReleaseConfig) -> str:
    return (
        f"Deploy {cfg.target.function_name or '(function not set)'} "
        f"({cfg.target.region}) to {cfg.environment.label}?"
    )


def plan_release(cfg: ReleaseConfig) -> str:
    """
    현재 설정과 실행될 단계를 요약한다.
    git/AWS 호출이나 파일 변경은 하지 않는다.
    """
    lines: List[str] = []
    lines.append("# Release plan")
    lines.append(f"- environment: {cfg.environment.value} ({cfg.environment.label})")
    lines.append(f"- region: {cfg.target.region}")
    lines.append(f"- function: {cfg.target.function_name or '(not set)'}")
    lines.append("")

    lines.append("## Config summary")
    lines.append(f"- workdir: {cfg.workdir}")
    lines.append(f"- tag_prefix: {cfg.tag_prefix}")
    lines.append(f"- tag_example: {tagging.build_tag_name(cfg.tag_prefix, cfg.environment, datetime.now())}")
    lines.append(f"- schema_path: {cfg.schema_path}")
    lines.append(f"- artifact_name: {cfg.artifact_name}")
    lines.append(f"- install_command: {' '.join(cfg.install_command)}")
    lines.append(f"- skip_tagging: {cfg.skip_tagging}")
    lines.append("")

    lines.append("## Steps")
    for name in ALL_STEPS:
        status = "ENABLED" if _step_enabled(name, cfg) else "SKIPPED"
        lines.append(f"- {name}: {status}")

    return "\n".join(lines)


def apply_release(cfg: ReleaseConfig, now: Optional[datetime] = None) -> str:
    """
    릴리스 워크플로를 처음부터 끝까지 실행한다.

    확인 거부나 실패는 예외로 그대로 전파되며, 업로드 이전 단계에서 멈춘다.

    Returns:
        summary: 사람이 읽기 좋은 텍스트 요약
    """
    function_name = cfg.require_function_name()
    logger.info(
        "릴리스 시작: env=%s region=%s function=%s",
        cfg.environment.label,
        cfg.target.region,
        function_name,
    )

    # 개발 환경은 기본 Yes, 프로덕션은 기본 No
    prompt.require(_intent_question(cfg), cfg.environment is Environment.DEVELOPMENT)

    repo = git_repo.GitRepository(cfg.workdir, cfg.child_env)

    branch: Optional[str] = None
    tag: Optional[str] = None
    if cfg.skip_tagging:
        logger.info("SKIP_TAGGING=true 로 브랜치 점검 및 태그 생성을 건너뜁니다.")
    else:
        status = repo.status()
        branch = status.branch
        console.info(f"Branch: {branch}")
        if not status.is_clean:
            raise DirtyWorkingTreeError(
                "커밋되지 않은 변경 사항이 있습니다. 작업 트리를 정리한 뒤 다시 실행하세요."
            )
        tag = tagging.create_release_tag(repo, cfg, now=now)
        console.info(f"Tagged: {tag}")

    schema = schema_guard.check_schema_changes(repo, cfg, prompt.confirm, current_tag=tag)

    packager.package_and_upload(cfg)

    if schema.pair is None:
        schema_status = "no baseline (confirmed)"
    elif schema.diff:
        schema_status = f"changed {schema.pair.older} -> {schema.pair.newer} (confirmed)"
    else:
        schema_status = f"unchanged {schema.pair.older} -> {schema.pair.newer}"

    lines: List[str] = []
    lines.append("# Release summary")
    lines.append(f"- environment: {cfg.environment.label}")
    lines.append(f"- region: {cfg.target.region}")
    lines.append(f"- function: {function_name}")
    lines.append(f"- branch: {branch or '(skipped)'}")
    lines.append(f"- tag: {tag or '(skipped)'}")
    lines.append(f"- schema: {schema_status}")
    return "\n".join(lines)
