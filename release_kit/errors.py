"""
errors
------

릴리스 워크플로에서 사용하는 예외 계층.
어느 단계도 로컬에서 복구하지 않으며, 모든 예외는 CLI 까지 전파되어 exit 1 로 끝난다.
"""

from __future__ import annotations

from typing import Optional, Sequence


class ReleaseError(Exception):
    """릴리스 도중 발생한 모든 실패의 기반 클래스."""


class ExecutionError(ReleaseError):
    """
    외부 명령이 0 이 아닌 코드로 종료했거나 실행 자체에 실패한 경우.

    exit_code 와 spawn_error 중 정확히 하나가 채워진다.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        exit_code: Optional[int] = None,
        spawn_error: Optional[BaseException] = None,
        output: str = "",
    ) -> None:
        self.command = list(command)
        self.exit_code = exit_code
        self.spawn_error = spawn_error
        self.output = output

        joined = " ".join(self.command)
        if spawn_error is not None:
            message = f"명령을 실행할 수 없습니다: {joined} ({spawn_error})"
        else:
            message = f"명령 실행 실패: {joined} (exit={exit_code})"
            if output:
                message += "\n" + output
        super().__init__(message)


class ParseError(ReleaseError):
    """명령 출력에서 기대한 패턴을 찾지 못한 경우."""


class TagVerificationError(ReleaseError):
    """방금 만든 릴리스 태그가 현재 커밋에 붙어 있지 않은 경우."""


class DirtyWorkingTreeError(ReleaseError):
    """커밋되지 않은 변경 사항이 있는 작업 트리."""


class UserDeclined(ReleaseError):
    """확인 프롬프트에서 사용자가 진행을 거부한 경우."""
