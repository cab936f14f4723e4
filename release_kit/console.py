"""
console
-------

사용자에게 보여주는 메시지 출력 헬퍼. (로그와 별개로 항상 출력된다)
"""

from __future__ import annotations

import click


INFO = click.style("i", fg="green")
WARNING = click.style("WARNING:", fg="yellow")
ERROR = click.style("ERROR:", fg="red")


def info(message: str) -> None:
    click.echo(f"{INFO} {message}")


def warning(message: str) -> None:
    click.echo(f"{WARNING} {message}")


def error(message: str) -> None:
    click.echo(f"{ERROR} {message}", err=True)


def plain(message: str) -> None:
    click.echo(message)
