"""
Pytest Fixtures for Odoo Quickpass Sync Tests

Provides an in-process fake of Odoo's /jsonrpc endpoint (served through
httpx.MockTransport) and clients wired to it.
"""

import json
import os

import httpx
import pytest

from odoo_quickpass_sync.odoo.client import OdooClient

# Configuration from environment (live integration tests only)
TEST_CONFIG = {
    "odoo_url": os.getenv("TEST_ODOO_URL"),
    "odoo_database": os.getenv("TEST_ODOO_DATABASE"),
    "odoo_username": os.getenv("TEST_ODOO_USERNAME"),
    "odoo_password": os.getenv("TEST_ODOO_PASSWORD"),
    "odoo_api_key": os.getenv("TEST_ODOO_API_KEY"),
}

SAMPLE_EMPLOYEE = {
    "id": 12,
    "identification_id": "12.345.678-9",
    "name": "Ana Pérez Soto",
    "country_id": [46, "Chile"],
    "work_email": "ana.perez@example.com",
    "private_email": False,
    "work_phone": "+56 2 2345 6789",
    "private_phone": False,
    "private_street": "Av. Providencia 1234",
    "private_city": "Santiago",
    "private_state_id": [1175, "Región Metropolitana"],
    "hr_commune": [301, "Providencia"],
    "image_1920": "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg==",
    "birthday": "1990-05-17",
    "gender": "female",
}

SPARSE_EMPLOYEE = {
    "id": 13,
    "identification_id": False,
    "name": "Bruno",
    "country_id": False,
    "work_email": False,
    "private_email": False,
    "work_phone": False,
    "private_phone": False,
    "private_street": False,
    "private_city": False,
    "private_state_id": False,
    "hr_commune": False,
    "image_1920": False,
    "birthday": False,
    "gender": False,
}


class FakeOdoo:
    """
    Minimal stand-in for Odoo's JSON-RPC endpoint.

    Records every envelope it receives. Errors can be injected per RPC
    method name ("authenticate", "search_read", "read", ...).
    """

    def __init__(self, uid: int = 7, secrets: tuple[str, ...] = ("secret_key", "user_password")):
        self.uid = uid
        self.secrets = set(secrets)
        self.employees: dict[int, dict] = {}
        self.requests: list[dict] = []
        self.errors: dict[str, dict] = {}
        self.status_code = 200

    def add_employee(self, record: dict):
        self.employees[record["id"]] = dict(record)

    def rpc_methods(self) -> list[str]:
        """Method names received so far; execute_kw calls report the model method."""
        names = []
        for payload in self.requests:
            params = payload["params"]
            if params["method"] == "execute_kw":
                names.append(params["args"][4])
            else:
                names.append(params["method"])
        return names

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)

        if self.status_code != 200:
            return httpx.Response(self.status_code, text="Bad Gateway")

        params = payload["params"]
        service, method, args = params["service"], params["method"], params["args"]
        name = args[4] if method == "execute_kw" else method

        if name in self.errors:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": payload["id"], "error": self.errors[name]},
            )

        if service == "common" and method == "authenticate":
            result = self.uid if args[2] in self.secrets else False
        elif service == "common" and method == "version":
            result = {"server_version": "17.0", "protocol_version": 1}
        elif name == "search_read":
            result = list(self.employees.values())
        elif name == "read":
            ids = args[5][0]
            result = [self.employees[i] for i in ids if i in self.employees]
        else:
            result = None

        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": payload["id"], "result": result},
        )


def odoo_error(name: str, message: str) -> dict:
    """Build a JSON-RPC error object the way Odoo serializes exceptions."""
    return {
        "code": 200,
        "message": "Odoo Server Error",
        "data": {
            "name": name,
            "message": message,
            "debug": "Traceback (most recent call last): ...",
        },
    }


@pytest.fixture
def test_config() -> dict:
    """Return live test configuration."""
    return TEST_CONFIG


@pytest.fixture
def fake_odoo() -> FakeOdoo:
    odoo = FakeOdoo()
    odoo.add_employee(SAMPLE_EMPLOYEE)
    odoo.add_employee(SPARSE_EMPLOYEE)
    return odoo


@pytest.fixture
def odoo_client(fake_odoo) -> OdooClient:
    """OdooClient (API key auth) talking to the fake Odoo."""
    return OdooClient(
        url="https://odoo.test/",
        database="test_db",
        username="api@example.com",
        api_key="secret_key",
        client_name="Test Client",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_odoo.handler)),
    )
