"""Clients for external HTTP services."""

from innovation_service.infra.external.base_client import BaseHTTPClient

__all__ = ["BaseHTTPClient"]
