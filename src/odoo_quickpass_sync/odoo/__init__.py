"""Odoo JSON-RPC client and employee mapping."""

from .client import OdooClient
from .employee import (
    EMPLOYEE_FIELDS,
    Address,
    Commune,
    Country,
    EmployeeService,
    HrEmployee,
    parse_employee,
)
from .exceptions import (
    OdooAuthenticationError,
    OdooConfigurationError,
    OdooConnectionError,
    OdooError,
    OdooPermissionError,
    OdooRecordNotFoundError,
    OdooServerError,
    OdooTimeoutError,
    OdooValidationError,
    map_connection_error,
    map_jsonrpc_error,
)

__all__ = [
    "OdooClient",
    # Employees
    "EMPLOYEE_FIELDS",
    "Address",
    "Commune",
    "Country",
    "EmployeeService",
    "HrEmployee",
    "parse_employee",
    # Exceptions
    "OdooError",
    "OdooAuthenticationError",
    "OdooConfigurationError",
    "OdooConnectionError",
    "OdooPermissionError",
    "OdooRecordNotFoundError",
    "OdooServerError",
    "OdooTimeoutError",
    "OdooValidationError",
    # Utilities
    "map_connection_error",
    "map_jsonrpc_error",
]
