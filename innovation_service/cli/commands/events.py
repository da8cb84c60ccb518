"""Notification event commands.

Example:
    innovation-notifications kinds
    innovation-notifications dispatch LOCK_USER \
        --context '{"id": "u1", "identity_id": "i1", "current_role": {"id": "r1", "role": "ADMIN"}}' \
        --payload '{"identity_id": "identity-123"}'
"""

from __future__ import annotations

import dataclasses
import json
import sys
from typing import IO, Any

import click
from pydantic import ValidationError

from innovation_service.cli.utils import coro, echo_json, error, info, success
from innovation_service.core.exceptions import AppException
from innovation_service.core.settings import get_identity_settings
from innovation_service.features.notifications.identity import IdentityProviderClient
from innovation_service.features.notifications.registry import HANDLERS, create_notification_dispatcher
from innovation_service.infra.database import close_database
from innovation_service.utils.retry import RetryError


def parse_json_object(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise click.BadParameter("expected a JSON object")
    return data


def _json_option(ctx: click.Context, param: click.Parameter, value: str | None) -> dict[str, Any] | None:
    return None if value is None else parse_json_object(value)


@click.command()
def kinds() -> None:
    """List every event kind and the handler that serves it."""
    for kind in sorted(HANDLERS):
        click.echo(f"{kind.value:<45} {HANDLERS[kind].__name__}")


@click.command()
@click.argument("kind")
@click.option("--context", required=True, callback=_json_option, help="DomainContext as JSON")
@click.option("--payload", callback=_json_option, help="Event payload as JSON")
@click.option("--payload-file", type=click.File("r"), help="Read the payload from a JSON file ('-' for stdin)")
@coro
async def dispatch(
    kind: str,
    context: dict[str, Any],
    payload: dict[str, Any] | None,
    payload_file: IO[str] | None,
) -> None:
    """Dispatch one event and print what was delivered."""
    if payload_file is not None:
        payload = parse_json_object(payload_file.read())

    info(f"Dispatching {kind}")
    try:
        async with IdentityProviderClient.from_settings(get_identity_settings()) as identity:
            dispatcher = create_notification_dispatcher(identity)
            result = await dispatcher.dispatch(kind, payload or {}, context)
    except ValidationError as exc:
        error(f"Invalid event: {exc.error_count()} validation error(s)")
        click.echo(exc, err=True)
        sys.exit(1)
    except AppException as exc:
        error(f"{exc.type}: {exc.detail}")
        sys.exit(1)
    except RetryError as exc:
        error(f"Upstream unavailable after {exc.attempts} attempts: {exc.last_exception}")
        sys.exit(1)
    finally:
        await close_database()

    success(
        f"{result.kind}: {len(result.emails)} email(s), "
        f"{len(result.suppressed)} suppressed, {len(result.in_app)} in-app"
    )
    echo_json(dataclasses.asdict(result))
