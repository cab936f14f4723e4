from __future__ import annotations

import enum
import os
import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dotenv import load_dotenv

from .subprocess_utils import child_environment


ENV_FILES_DEFAULT_ORDER = [".env", ".env.release"]

DEFAULT_REGION = "eu-central-1"
DEFAULT_TAG_PREFIX = "BE"
DEFAULT_SCHEMA_PATH = "sql"
DEFAULT_ARTIFACT_NAME = "lambda.zip"
DEFAULT_INSTALL_COMMAND = "npm ci --production"


def load_env_files(base_dir: str = ".",
                   files: Optional[List[str]] = None) -> None:
    """
    주어진 디렉토리에서 .env 계열 파일을 순서대로 로드한다.
    후순위 파일이 같은 키를 덮어쓴다.
    """
    order = files or ENV_FILES_DEFAULT_ORDER
    for name in order:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path, override=True)


def _get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "y"}


class Environment(enum.Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @property
    def label(self) -> str:
        """태그 이름에 들어가는 환경 표기."""
        return "PROD" if self is Environment.PRODUCTION else "dev"

    @classmethod
    def from_flag(cls, production: bool) -> "Environment":
        return cls.PRODUCTION if production else cls.DEVELOPMENT


@dataclass(frozen=True)
class DeploymentTarget:
    region: str
    function_name: Optional[str] = None


@dataclass
class ReleaseConfig:
    environment: Environment
    target: DeploymentTarget

    # 작업 디렉토리 및 자식 프로세스 env (프로세스 전역 상태 대신 명시적으로 전달)
    workdir: str = "."
    child_env: Dict[str, str] = field(default_factory=child_environment)

    tag_prefix: str = DEFAULT_TAG_PREFIX
    schema_path: str = DEFAULT_SCHEMA_PATH
    artifact_name: str = DEFAULT_ARTIFACT_NAME
    install_command: List[str] = field(
        default_factory=lambda: shlex.split(DEFAULT_INSTALL_COMMAND)
    )

    # 태그 생성/브랜치 점검을 건너뛰는 변형 워크플로
    skip_tagging: bool = False

    @property
    def artifact_path(self) -> str:
        return os.path.join(self.workdir, self.artifact_name)

    @classmethod
    def from_env(
        cls,
        *,
        region: Optional[str] = None,
        function_name: Optional[str] = None,
        production: bool = False,
        workdir: str = ".",
        skip_tagging: Optional[bool] = None,
    ) -> "ReleaseConfig":
        """
        환경변수(및 load_env_files 로 읽은 .env 값)로 설정을 만든다.
        CLI 에서 넘긴 인자가 환경변수보다 우선한다.
        """
        install_raw = os.getenv("INSTALL_COMMAND") or DEFAULT_INSTALL_COMMAND
        install_command = shlex.split(install_raw)
        if not install_command:
            raise ValueError("INSTALL_COMMAND 가 비어 있습니다.")

        return cls(
            environment=Environment.from_flag(production),
            target=DeploymentTarget(
                region=region or os.getenv("DEFAULT_REGION") or DEFAULT_REGION,
                function_name=function_name or os.getenv("FUNCTION_NAME") or None,
            ),
            workdir=workdir,
            child_env=child_environment(),
            tag_prefix=os.getenv("RELEASE_TAG_PREFIX") or DEFAULT_TAG_PREFIX,
            schema_path=os.getenv("SCHEMA_PATH") or DEFAULT_SCHEMA_PATH,
            artifact_name=os.getenv("ARTIFACT_NAME") or DEFAULT_ARTIFACT_NAME,
            install_command=install_command,
            skip_tagging=(
                skip_tagging if skip_tagging is not None else _get_bool("SKIP_TAGGING", False)
            ),
        )

    def require_function_name(self) -> str:
        if not self.target.function_name:
            raise ValueError(
                "업로드할 Lambda 함수 이름이 필요합니다. (FUNCTION_NAME 인자 또는 환경변수)"
            )
        return self.target.function_name
