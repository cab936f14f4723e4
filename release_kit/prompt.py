"""
prompt
------

y/n 확인 프롬프트. 한 줄만 읽고 한 번만 해석한다. (재질문 없음)
"""

from __future__ import annotations

import sys
from typing import IO, Optional

import click

from .errors import UserDeclined


def _suffix(default: bool) -> str:
    return "[Y/n]" if default else "[y/N]"


def confirm(
    question: str,
    default: bool,
    *,
    input_stream: Optional[IO[str]] = None,
    output_stream: Optional[IO[str]] = None,
) -> bool:
    """
    질문을 출력하고 입력 한 줄을 읽어 bool 로 정규화한다.

    - 빈 줄: default
    - "y"/"Y": True
    - 그 외 모든 입력: False
    - EOF: False
    """
    out = output_stream if output_stream is not None else sys.stdout
    src = input_stream if input_stream is not None else sys.stdin

    out.write(click.style("? ", fg="yellow") + f"{question} {_suffix(default)} ")
    out.flush()

    line = src.readline()
    if line == "":
        # EOF: 입력이 닫혔으면 진행하지 않는다.
        out.write("\n")
        return False

    answer = line.strip()
    if answer == "":
        return default
    return answer.lower() == "y"


def require(question: str, default: bool) -> None:
    """confirm 이 False 를 돌려주면 UserDeclined 를 던진다."""
    if not confirm(question, default):
        raise UserDeclined(question)
