"""
Employee records (hr.employee)

Reads employees from Odoo and maps Odoo's loosely typed field values
into typed records:

- many2one fields arrive as ``[id, display_name]`` pairs
- empty fields arrive as ``false`` instead of null
- ``image_1920`` is a base64 string or ``false``
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

from .exceptions import (
    OdooAuthenticationError,
    OdooRecordNotFoundError,
    OdooServerError,
)

logger = logging.getLogger(__name__)

EMPLOYEE_MODEL = "hr.employee"

EMPLOYEE_FIELDS = [
    "id",
    "identification_id",
    "name",
    "country_id",
    "work_email",
    "private_email",
    "work_phone",
    "private_phone",
    "private_street",
    "private_city",
    "private_state_id",
    "hr_commune",
    "image_1920",
    "birthday",
    "gender",
]

PHOTO_URL_TEMPLATE = "/web/image?model=hr.employee&id={id}&field=image_1920"

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


class Country(BaseModel):
    id: int
    # read() only returns the display name; the ISO code needs a res.country lookup
    code: str = ""
    name: str


class Commune(BaseModel):
    id: int
    name: str


class Address(BaseModel):
    street: str
    city: str
    state: str


class HrEmployee(BaseModel):
    """Employee as exposed by the REST API."""

    id: int = 0
    identification_id: str = ""
    name: str = ""
    first_name: str = ""
    surname: str = ""
    second_surname: str = ""
    country_id: list[Any] | None = None  # raw [id, name]
    nationality: Country | None = None
    work_email: str = ""
    private_email: str = ""
    work_phone: str = ""
    private_phone: str = ""
    private_street: str = ""
    private_city: str = ""
    private_state_id: list[Any] | None = None  # raw [id, name]
    private_address: Address | None = None
    hr_commune: list[Any] | None = None  # raw [id, name]
    commune: Commune | None = None
    image_1920: Any = None  # base64 or false
    photo_url: str = ""
    birthday: Any = None  # "YYYY-MM-DD" or false
    birthday_parsed: datetime | None = None
    gender: str = ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _string(data: dict, key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _many2one(value: Any) -> list | None:
    """Return the raw ``[id, name]`` pair, or None for false/malformed values."""
    if isinstance(value, list) and len(value) == 2:
        return value
    return None


def _parse_date(value: Any) -> datetime | None:
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_employee(data: dict) -> HrEmployee:
    """Convert a raw hr.employee record into an HrEmployee."""
    employee_id = int(data["id"]) if _is_number(data.get("id")) else 0
    name = _string(data, "name")

    # "First Surname SecondSurname"
    parts = name.split(" ") if name else []
    first_name = parts[0] if len(parts) > 0 else ""
    surname = parts[1] if len(parts) > 1 else ""
    second_surname = parts[2] if len(parts) > 2 else ""

    country_id = _many2one(data.get("country_id"))
    nationality = None
    if country_id and _is_number(country_id[0]) and isinstance(country_id[1], str):
        nationality = Country(id=int(country_id[0]), name=country_id[1])

    private_street = _string(data, "private_street")
    private_city = _string(data, "private_city")

    private_state_id = _many2one(data.get("private_state_id"))
    state_name = ""
    if private_state_id and isinstance(private_state_id[1], str):
        state_name = private_state_id[1]

    private_address = None
    if private_street:
        private_address = Address(street=private_street, city=private_city, state=state_name)

    hr_commune = _many2one(data.get("hr_commune"))
    commune = None
    if hr_commune and _is_number(hr_commune[0]) and isinstance(hr_commune[1], str):
        commune = Commune(id=int(hr_commune[0]), name=hr_commune[1])

    image = data.get("image_1920")
    photo_url = ""
    if image is not False and image is not None:
        photo_url = PHOTO_URL_TEMPLATE.format(id=employee_id)

    birthday = data.get("birthday")

    return HrEmployee(
        id=employee_id,
        identification_id=_string(data, "identification_id"),
        name=name,
        first_name=first_name,
        surname=surname,
        second_surname=second_surname,
        country_id=country_id,
        nationality=nationality,
        work_email=_string(data, "work_email"),
        private_email=_string(data, "private_email"),
        work_phone=_string(data, "work_phone"),
        private_phone=_string(data, "private_phone"),
        private_street=private_street,
        private_city=private_city,
        private_state_id=private_state_id,
        private_address=private_address,
        hr_commune=hr_commune,
        commune=commune,
        image_1920=image,
        photo_url=photo_url,
        birthday=birthday,
        birthday_parsed=_parse_date(birthday),
        gender=_string(data, "gender"),
    )


class EmployeeService:
    """Employee operations on top of an authenticated OdooClient."""

    def __init__(self, client):
        self.client = client

    def _ensure_authenticated(self):
        if not self.client.is_authenticated:
            raise OdooAuthenticationError("Client is not authenticated")

    async def get_all_employees(self) -> list[HrEmployee]:
        """Fetch every employee visible to the API user."""
        self._ensure_authenticated()
        logger.info("Fetching all employees from Odoo")

        result = await self.client.search_read(EMPLOYEE_MODEL, [], EMPLOYEE_FIELDS)
        if not isinstance(result, list):
            raise OdooServerError("Invalid response format")

        employees = [parse_employee(item) for item in result if isinstance(item, dict)]

        logger.info(f"Fetched {len(employees)} employees")
        return employees

    async def get_employee_by_id(self, employee_id: int) -> HrEmployee:
        """
        Fetch a single employee.

        Raises:
            OdooRecordNotFoundError: If Odoo returns no record for the ID
        """
        self._ensure_authenticated()
        logger.info(f"Looking up employee ID: {employee_id}")

        result = await self.client.read(EMPLOYEE_MODEL, [employee_id], EMPLOYEE_FIELDS)
        if not isinstance(result, list) or not result:
            raise OdooRecordNotFoundError(
                f"Employee not found with ID: {employee_id}",
                employee_id=employee_id,
            )

        if not isinstance(result[0], dict):
            raise OdooServerError("Invalid response format")

        employee = parse_employee(result[0])
        logger.info(f"Found employee: {employee.name}")
        return employee
