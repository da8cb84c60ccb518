"""Console output and async glue for click commands."""

from __future__ import annotations

import asyncio
import json
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

import click

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

P = ParamSpec("P")
R = TypeVar("R")


def coro(func: Callable[P, Coroutine[Any, Any, R]]) -> Callable[P, R]:
    """Let a click command be written as ``async def``.

    Usage:
        @cli.command()
        @coro
        async def kinds() -> None:
            ...
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        return asyncio.run(func(*args, **kwargs))

    return wrapper


def success(message: str) -> None:
    click.secho(f"✓ {message}", fg="green", err=True)


def info(message: str) -> None:
    click.secho(message, fg="blue", err=True)


def error(message: str) -> None:
    click.secho(f"✗ {message}", fg="red", err=True)


def echo_json(data: Any) -> None:
    """Print ``data`` to stdout as indented JSON; unknown types fall back to ``str``."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))
