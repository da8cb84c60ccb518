"""Helpers shared by CLI commands: running coroutines and coloured output."""

from innovation_service.cli.utils.console import coro, echo_json, error, info, success

__all__ = ["coro", "echo_json", "error", "info", "success"]
