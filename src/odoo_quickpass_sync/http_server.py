"""
HTTP API for Odoo employees

Re-exposes hr.employee records from Odoo as a small REST API.
Authentication against Odoo happens lazily, on the first request that needs it.
"""

import logging
import re
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings
from .odoo.client import OdooClient
from .odoo.employee import EmployeeService
from .odoo.exceptions import OdooError

logger = logging.getLogger(__name__)

# Global state
settings = Settings()
odoo_client: OdooClient | None = None

SERVICE_NAME = "Odoo Quickpass Sync Middleware"

_EMPLOYEE_ID_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)

# Signed 64-bit range, as accepted by the upstream integer parsing
_EMPLOYEE_ID_MIN = -(2**63)
_EMPLOYEE_ID_MAX = 2**63 - 1


def _parse_employee_id(value: str) -> int | None:
    """Parse an ASCII decimal ID; None when malformed or out of range."""
    if not _EMPLOYEE_ID_RE.fullmatch(value):
        return None
    employee_id = int(value)
    if not _EMPLOYEE_ID_MIN <= employee_id <= _EMPLOYEE_ID_MAX:
        return None
    return employee_id


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global odoo_client

    try:
        config = settings.odoo_config()
    except OdooError as e:
        logger.warning(f"Odoo is not configured: {e.message}")
        logger.warning("Starting without an Odoo connection")
        config = None

    if config is not None:
        odoo_client = OdooClient.from_config(config)
        try:
            await odoo_client.authenticate()
        except OdooError as e:
            logger.warning(f"Could not authenticate with Odoo: {e}")
            logger.warning("Starting anyway; authentication will be retried on the next request")

    logger.info(f"{SERVICE_NAME} listening on {settings.http_host}:{settings.port}")

    yield

    # Cleanup
    if odoo_client:
        await odoo_client.close()
        odoo_client = None


app = FastAPI(
    title=SERVICE_NAME,
    description="REST API over Odoo hr.employee records",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log every request on arrival and on completion."""
    start = time.perf_counter()
    logger.info(f"--> {request.method} {request.url.path}")
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"<-- {request.method} {request.url.path} {response.status_code} ({elapsed_ms:.1f}ms)")
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render routing errors with the same {"error": ...} body as the API."""
    message = exc.detail
    if exc.status_code == 405:
        message = "Method not allowed. Use GET"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


def _error(status_code: int, message: str, error: OdooError | None = None) -> JSONResponse:
    content = {"error": message}
    if error is not None:
        content["code"] = error.error_code
    return JSONResponse(status_code=status_code, content=content)


def _status_error(message: str, error: OdooError) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"status": "error", "message": message, "code": error.error_code},
    )


async def _authenticated_client() -> tuple[OdooClient | None, JSONResponse | None]:
    """Return the Odoo client, logging in first if no UID is held yet."""
    client = odoo_client
    if client is None:
        return None, _error(503, "Odoo client not configured")

    if not client.is_authenticated:
        try:
            await client.authenticate()
        except OdooError as e:
            return None, _error(503, f"Error authenticating with Odoo: {e.message}", e)

    return client, None


# =============================================================================
# Service Endpoints
# =============================================================================


@app.get("/")
async def home():
    return {
        "service": SERVICE_NAME,
        "version": __version__,
        "status": "running",
        "message": f"Welcome to the {SERVICE_NAME} Service",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }


@app.get("/odoo/status")
async def odoo_status():
    """Check the Odoo connection, authenticating if needed."""
    if odoo_client is None:
        return JSONResponse(
            status_code=503,
            content={"status": "error", "message": "Odoo client not configured"},
        )

    try:
        uid = await odoo_client.authenticate()
    except OdooError as e:
        return _status_error(f"Error authenticating with Odoo: {e.message}", e)

    try:
        version = await odoo_client.get_version()
    except OdooError as e:
        return _status_error(f"Error reading Odoo server version: {e.message}", e)

    return {
        "status": "connected",
        "client_name": odoo_client.client_name,
        "uid": uid,
        "database": odoo_client.database,
        "server_version": version.get("server_version") if isinstance(version, dict) else None,
    }


# =============================================================================
# Employees API (v1)
# =============================================================================


@app.get("/api/v1/employees")
@app.get("/api/v1/employees/", include_in_schema=False)
async def list_employees():
    """GET /api/v1/employees - all employees."""
    client, failure = await _authenticated_client()
    if failure is not None:
        return failure

    try:
        employees = await EmployeeService(client).get_all_employees()
    except OdooError as e:
        logger.error(f"Error fetching employees: {e}")
        return _error(500, f"Error fetching employees: {e.message}", e)

    return {
        "success": True,
        "count": len(employees),
        "data": employees,
    }


@app.get("/api/v1/employees/{employee_id}")
async def get_employee(employee_id: str):
    """GET /api/v1/employees/{id} - a single employee."""
    parsed_id = _parse_employee_id(employee_id)
    if parsed_id is None:
        return _error(400, "Invalid employee ID")

    client, failure = await _authenticated_client()
    if failure is not None:
        return failure

    try:
        employee = await EmployeeService(client).get_employee_by_id(parsed_id)
    except OdooError as e:
        logger.warning(f"Employee {employee_id} lookup failed: {e}")
        return _error(404, f"Employee not found: {e.message}", e)

    return {
        "success": True,
        "data": employee,
    }


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Run HTTP server."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(
        "odoo_quickpass_sync.http_server:app",
        host=settings.http_host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
