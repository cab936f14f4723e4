import sys
from typing import Optional

import click

from . import console
from .config import load_env_files, ReleaseConfig
from .errors import ReleaseError, UserDeclined
from .logging_utils import setup_logging, get_logger
from .orchestrator import apply_release, plan_release


logger = get_logger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("region", required=False)
@click.argument("function_name", metavar="FUNCTION_NAME", required=False)
@click.option(
    "--production",
    is_flag=True,
    help="프로덕션 환경(PROD 태그)으로 배포합니다. 생략하면 dev 환경입니다.",
)
@click.option(
    "--skip-tagging",
    is_flag=True,
    help="브랜치 점검과 릴리스 태그 생성을 건너뜁니다. (SKIP_TAGGING 환경변수와 동일)",
)
@click.option(
    "--plan",
    "show_plan",
    is_flag=True,
    help="실제 배포 없이 설정과 실행될 단계만 출력합니다.",
)
@click.option(
    "-C",
    "--chdir",
    "chdir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=".",
    help="작업 디렉토리 (기본: 현재 디렉토리)",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="로그 레벨을 DEBUG로 올립니다. (-vv 는 boto3 로그까지 출력)",
)
def main(
    region: Optional[str],
    function_name: Optional[str],
    production: bool,
    skip_tagging: bool,
    show_plan: bool,
    chdir: str,
    verbose: int,
) -> None:
    """git 태그를 남기고 AWS Lambda 함수 코드를 배포하는 CLI

    REGION 기본값은 eu-central-1 입니다.
    """
    setup_logging(verbose)

    try:
        load_env_files(chdir)
        cfg = ReleaseConfig.from_env(
            region=region,
            function_name=function_name,
            production=production,
            workdir=chdir,
            skip_tagging=True if skip_tagging else None,
        )
    except Exception as e:  # noqa: BLE001
        console.error(f"설정 로드 실패: {e}")
        sys.exit(1)
    logger.debug("Config loaded: %s", cfg)

    if show_plan:
        click.echo(plan_release(cfg))
        return

    try:
        summary = apply_release(cfg)
    except UserDeclined as e:
        logger.debug("사용자 거부: %s", e)
        console.info("Aborted.")
        sys.exit(1)
    except (ReleaseError, ValueError) as e:
        console.error(str(e))
        sys.exit(1)
    except Exception as e:  # noqa: BLE001
        logger.exception("릴리스 중 오류 발생")
        console.error(f"릴리스 실패: {e}")
        sys.exit(1)

    click.echo(summary)
    console.info("Done.")
