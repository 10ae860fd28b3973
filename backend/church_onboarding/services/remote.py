"""Remote operation capability backed by the church-management GraphQL API.

Anything that can `await execute(operation, variables)` and return the
GraphQL `data` object satisfies `RemoteExecutor`; the wizard core only
depends on that protocol. `GraphQLClient` is the production
implementation over httpx.

Failures of any kind (transport, non-2xx, GraphQL `errors`) surface as
`RemoteOperationError`.
"""

import logging
import re
from typing import Any, Protocol

import httpx

from church_onboarding.config import settings
from church_onboarding.errors import RemoteOperationError

logger = logging.getLogger(__name__)

_OPERATION_NAME_RE = re.compile(r"\b(?:query|mutation)\s+(\w+)")


class RemoteExecutor(Protocol):
    async def execute(self, operation: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        ...


def operation_name(operation: str) -> str:
    match = _OPERATION_NAME_RE.search(operation)
    return match.group(1) if match else "anonymous"


class GraphQLClient:
    """POSTs GraphQL documents to a single endpoint."""

    def __init__(
        self,
        endpoint: str,
        api_token: str = "",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self.api_token = api_token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def execute(self, operation: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        name = operation_name(operation)
        body = {"query": operation, "variables": variables or {}, "operationName": name}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, json=body, headers=self._headers())
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("GraphQL %s returned HTTP %s", name, e.response.status_code)
            raise RemoteOperationError(
                f"{name} failed with HTTP {e.response.status_code}", operation=name
            ) from e
        except httpx.HTTPError as e:
            logger.warning("GraphQL %s transport error: %s", name, e)
            raise RemoteOperationError(f"{name} request failed: {e}", operation=name) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteOperationError(f"{name} returned a non-JSON response", operation=name) from e

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            logger.warning("GraphQL %s returned errors: %s", name, messages)
            raise RemoteOperationError(f"{name} failed: {messages}", operation=name)

        data = payload.get("data") if isinstance(payload, dict) else None
        return data or {}


def get_remote_executor() -> RemoteExecutor:
    """FastAPI dependency: GraphQL client configured from settings."""
    return GraphQLClient(
        endpoint=settings.graphql_endpoint,
        api_token=settings.graphql_api_token,
        timeout=settings.graphql_timeout_seconds,
    )
