from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from textwrap import shorten
from typing import Dict, Mapping, Sequence

from .errors import ExecutionError
from .logging_utils import get_logger


logger = get_logger(__name__)

# 명령 출력을 항상 같은 언어/인코딩으로 파싱하기 위해 강제하는 로케일
FORCED_LOCALE = "en_US.UTF-8"


def child_environment(base: Mapping[str, str] | None = None) -> Dict[str, str]:
    """
    자식 프로세스에 넘길 환경변수를 만든다.
    base(기본: 현재 프로세스 env)를 복사하고 LC_ALL 만 덮어쓴다.
    """
    env = dict(os.environ if base is None else base)
    env["LC_ALL"] = FORCED_LOCALE
    return env


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: str
    stderr: str


def _stream(cmd: Sequence[str], *, cwd: str | None, env: Dict[str, str]) -> RunResult:
    # npm 등은 stderr 로도 진행 로그를 내보내므로 STDOUT 으로 합친다.
    try:
        proc = subprocess.Popen(  # noqa: S603
            list(cmd),
            cwd=cwd,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except OSError as e:
        raise ExecutionError(cmd, spawn_error=e) from e

    out_lines: list[str] = []
    try:
        assert proc.stdout is not None
        for line in proc.stdout:
            out_lines.append(line)
            sys.stdout.write(line)
            sys.stdout.flush()
        returncode = proc.wait()
    finally:
        if proc.stdout is not None:
            proc.stdout.close()

    combined = "".join(out_lines)
    if returncode != 0:
        raise ExecutionError(
            cmd,
            exit_code=returncode,
            output=shorten(combined.strip(), width=2000) if combined.strip() else "",
        )
    return RunResult(returncode=returncode, stdout=combined, stderr="")


def run_command(
    cmd: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    stream_output: bool = False,
) -> RunResult:
    """
    subprocess 실행 공통 유틸.

    - stream_output=False: stdout/stderr 캡처, 실패 시 요약을 ExecutionError 에 담는다
    - stream_output=True : stdout/stderr 를 합쳐 실시간으로 터미널에 흘린다

    env 를 주지 않으면 현재 환경 + LC_ALL 강제값을 사용한다.
    타임아웃은 두지 않는다. 명령은 끝날 때까지 기다린다.
    """
    logger.info("명령 실행: %s", " ".join(cmd))
    effective_env = dict(env) if env is not None else child_environment()

    if stream_output:
        return _stream(cmd, cwd=cwd, env=effective_env)

    try:
        result = subprocess.run(  # noqa: S603
            list(cmd),
            check=True,
            capture_output=True,
            text=True,
            cwd=cwd,
            env=effective_env,
        )
    except subprocess.CalledProcessError as e:
        stdout = (e.stdout or "").strip()
        stderr = (e.stderr or "").strip()
        detail = ""
        if stderr:
            detail = "stderr:\n" + shorten(stderr, width=2000)
        elif stdout:
            detail = "stdout:\n" + shorten(stdout, width=2000)
        raise ExecutionError(cmd, exit_code=e.returncode, output=detail) from e
    except OSError as e:
        # 실행 파일 없음(FileNotFoundError), 권한 없음 등
        raise ExecutionError(cmd, spawn_error=e) from e

    if result.stdout:
        logger.debug("명령 stdout: %s", shorten(result.stdout.strip(), width=2000))
    if result.stderr:
        logger.debug("명령 stderr: %s", shorten(result.stderr.strip(), width=2000))
    return RunResult(returncode=result.returncode, stdout=result.stdout or "", stderr=result.stderr or "")
