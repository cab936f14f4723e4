"""
packager
--------

Lambda 배포 아티팩트(zip) 생성 및 업로드를 담당하는 모듈.

순서대로 실행되며 한 단계가 실패하면 나머지는 실행하지 않는다.
1. 이전 아티팩트 삭제 (없으면 무시)
2. 프로덕션 의존성 설치
3. 작업 디렉토리 압축
4. Lambda 함수 코드 업로드
5. 아티팩트 삭제 (실패 시 에러)
"""

from __future__ import annotations

import os
import zipfile
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from . import console
from .config import ReleaseConfig
from .errors import ExecutionError
from .logging_utils import get_logger
from .subprocess_utils import run_command


logger = get_logger(__name__)


def _lambda_client(region: str):  # noqa: ANN202
    return boto3.client("lambda", region_name=region)


def remove_stale_artifact(path: str) -> None:
    try:
        os.remove(path)
        logger.info("이전 아티팩트를 삭제했습니다: %s", path)
    except FileNotFoundError:
        logger.debug("삭제할 이전 아티팩트가 없습니다: %s", path)


def install_dependencies(cfg: ReleaseConfig) -> None:
    console.info("Installing packages...")
    run_command(
        cfg.install_command,
        cwd=cfg.workdir,
        env=cfg.child_env,
        stream_output=True,
    )


def create_archive(cfg: ReleaseConfig) -> Path:
    """
    작업 디렉토리 전체를 zip 으로 묶는다.

    `zip -r <artifact> ./*` 과 같은 범위를 담는다. 최상위의 숨김 항목(.git, .env 등)과
    아티팩트 자신만 빠지고 그 외 필터링은 하지 않는다. 제외 정책은 호출 측 책임이다.
    zip -r 처럼 빈 디렉토리도 항목으로 남기고, 심볼릭 링크 디렉토리는 따라 들어간다.
    """
    console.info("Zipping...")
    root = Path(cfg.workdir).resolve()
    archive = root / cfg.artifact_name

    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for top in sorted(root.iterdir()):
            if top.name.startswith(".") or top == archive:
                continue
            if top.is_dir():
                for dirpath, dirnames, filenames in os.walk(top, followlinks=True):
                    dirnames.sort()
                    rel_dir = Path(os.path.relpath(dirpath, root)).as_posix()
                    zf.write(dirpath, arcname=rel_dir + "/")
                    for name in sorted(filenames):
                        zf.write(os.path.join(dirpath, name), arcname=f"{rel_dir}/{name}")
            elif top.is_file():
                zf.write(top, arcname=top.name)

    logger.info("아티팩트 생성: %s (%d bytes)", archive, archive.stat().st_size)
    return archive


def upload_archive(cfg: ReleaseConfig, archive: Path) -> None:
    function_name = cfg.require_function_name()
    region = cfg.target.region
    console.info("Uploading...")
    logger.info("Lambda 코드 업로드: function=%s region=%s", function_name, region)

    command = ["lambda:UpdateFunctionCode", f"--region={region}", f"--function-name={function_name}"]
    try:
        client = _lambda_client(region)
        client.update_function_code(
            FunctionName=function_name,
            ZipFile=archive.read_bytes(),
        )
    except ClientError as e:
        error = e.response.get("Error", {})
        raise ExecutionError(
            command,
            exit_code=1,
            output=f"{error.get('Code', 'ClientError')}: {error.get('Message', str(e))}",
        ) from e
    except BotoCoreError as e:
        raise ExecutionError(command, spawn_error=e) from e


def cleanup_artifact(path: str) -> None:
    os.remove(path)
    logger.info("아티팩트를 정리했습니다: %s", path)


def package_and_upload(cfg: ReleaseConfig) -> None:
    remove_stale_artifact(cfg.artifact_path)
    install_dependencies(cfg)
    archive = create_archive(cfg)
    upload_archive(cfg, archive)
    cleanup_artifact(str(archive))
