"""
Odoo JSON-RPC Client

Handles communication with an Odoo ERP instance over ``/jsonrpc``.
Includes async-safe authentication and error handling.
"""
import asyncio
import itertools
import logging
from typing import TYPE_CHECKING, Any

import httpx

from .exceptions import (
    OdooAuthenticationError,
    OdooConnectionError,
    OdooServerError,
    map_connection_error,
    map_jsonrpc_error,
)

if TYPE_CHECKING:
    from ..config import OdooConfig

logger = logging.getLogger(__name__)


class OdooClient:
    """
    Async client for the Odoo JSON-RPC API.

    Thread/task-safe: Uses asyncio.Lock around authentication so that
    concurrent requests share a single login round trip.

    Error Handling: JSON-RPC errors and transport failures are mapped to
    typed exceptions at this boundary.
    """

    def __init__(
        self,
        url: str,
        database: str,
        username: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        client_id: str = "default",
        client_name: str = "Default Client",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.url = url.rstrip("/")
        self.database = database
        self.username = username
        self.password = password
        self.api_key = api_key
        self.client_id = client_id
        self.client_name = client_name

        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None
        self._request_ids = itertools.count(1)
        self._uid: int | None = None

        self._uid_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        config: "OdooConfig",
        http_client: httpx.AsyncClient | None = None,
    ) -> "OdooClient":
        """Build a client from a validated ``OdooConfig``."""
        return cls(
            url=config.url,
            database=config.database,
            username=config.username,
            password=config.password,
            api_key=config.api_key,
            client_id=config.client_id,
            client_name=config.client_name,
            timeout=config.timeout,
            http_client=http_client,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.url}/jsonrpc"

    @property
    def uid(self) -> int | None:
        return self._uid

    @property
    def is_authenticated(self) -> bool:
        return self._uid is not None

    @property
    def auth_password(self) -> str | None:
        """API key when configured, otherwise the password."""
        return self.api_key or self.password

    def reset(self) -> None:
        """Forget the cached UID; the next request authenticates again."""
        self._uid = None

    async def call(self, service: str, method: str, *args) -> Any:
        """
        Post one JSON-RPC envelope and return its ``result``.

        Raises:
            OdooConnectionError: Transport failure or non-200 status
            OdooServerError: Body is not a JSON-RPC response
            OdooError: Mapped from the JSON-RPC ``error`` member
        """
        payload = {
            "jsonrpc": "2.0",
            "method": "call",
            "params": {
                "service": service,
                "method": method,
                "args": list(args),
            },
            "id": next(self._request_ids),
        }

        try:
            response = await self._http.post(
                self.endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise map_connection_error(e) from e

        if response.status_code != 200:
            raise OdooConnectionError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise OdooServerError(f"Could not decode Odoo response: {e}") from e

        if not isinstance(body, dict):
            raise OdooServerError("Invalid JSON-RPC response")

        error = body.get("error")
        if error:
            if not isinstance(error, dict):
                raise OdooServerError(str(error))
            raise map_jsonrpc_error(error)

        return body.get("result")

    async def get_version(self) -> dict:
        """Get Odoo server version"""
        return await self.call("common", "version")

    async def authenticate(self) -> int:
        """
        Authenticate and return user ID.

        Thread-safe: Uses async lock to prevent race conditions
        when multiple coroutines try to authenticate simultaneously.
        """
        if self._uid:
            return self._uid

        async with self._uid_lock:
            if self._uid:
                return self._uid

            if self.api_key:
                logger.info(f"Authenticating with Odoo using API key (client: {self.client_name})")
                login = self.username or "admin"
            else:
                logger.info(f"Authenticating with Odoo using username/password (client: {self.client_name})")
                login = self.username

            result = await self.call(
                "common", "authenticate",
                self.database, login, self.auth_password, {},
            )

            # Odoo answers ``false`` for rejected credentials; bool is an int subclass
            if isinstance(result, bool) or not isinstance(result, int) or result == 0:
                raise OdooAuthenticationError(
                    "Authentication failed - check credentials",
                    username=login,
                )

            self._uid = result
            logger.info(f"Authenticated with Odoo. UID: {self._uid} (client: {self.client_name})")
            return self._uid

    async def execute_kw(
        self,
        model: str,
        method: str,
        args: list,
        kwargs: dict | None = None,
    ) -> Any:
        """Execute method on Odoo model. Requires a prior authenticate()."""
        if not self._uid:
            raise OdooAuthenticationError("Client is not authenticated")

        try:
            return await self.call(
                "object", "execute_kw",
                self.database,
                self._uid,
                self.auth_password,
                model,
                method,
                args,
                kwargs or {},
            )
        except OdooAuthenticationError:
            # Revoked key or changed password: log in again on the next request
            self.reset()
            raise

    async def search_read(
        self,
        model: str,
        domain: list,
        fields: list[str] | None = None,
    ) -> Any:
        """Search and read records"""
        kwargs = {}
        if fields:
            kwargs["fields"] = fields

        return await self.execute_kw(model, "search_read", [domain], kwargs)

    async def read(
        self,
        model: str,
        ids: list[int],
        fields: list[str] | None = None,
    ) -> Any:
        """Read specific records"""
        kwargs = {}
        if fields:
            kwargs["fields"] = fields

        return await self.execute_kw(model, "read", [ids], kwargs)

    async def close(self):
        """Cleanup resources"""
        if self._owns_http:
            await self._http.aclose()
