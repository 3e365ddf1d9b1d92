"""
employee_store.api.routers.employees

Employee lookup endpoints.

Responsibilities:
- retrieve-all / retrieve-by-id / save / delete over `EmployeeGateway`.
- Explicit fetch of an employee's pay stubs.
- Map NotFound to 404 and ConstraintViolation to 409.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field, field_validator
from starlette.status import (
    HTTP_201_CREATED,
    HTTP_204_NO_CONTENT,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

from employee_store.api.deps import employee_gateway
from employee_store.db.models import Employee, EmployeeType
from employee_store.errors import ConstraintViolation, NotFound
from employee_store.services.gateway import EmployeeGateway

router = APIRouter(prefix="/v1/employees", tags=["employees"])


class EmployeeCreateRequest(BaseModel):
    ssn: str = Field(min_length=1, max_length=10)
    name: str | None = Field(default=None, max_length=150)
    age: int = Field(default=0, ge=0)
    dob: date | None = None
    type: EmployeeType | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _type_by_name(cls, value: object) -> object:
        # Responses carry the member name (FULL_TIME); accept it back as written.
        if isinstance(value, str) and value in EmployeeType.__members__:
            return EmployeeType[value]
        return value


class AccessCardResponse(BaseModel):
    id: int
    issued_date: date | None
    is_active: bool
    firmware_version: str | None


class EmployeeResponse(BaseModel):
    id: int
    ssn: str
    name: str | None
    age: int
    dob: date | None
    type: str | None
    access_card: AccessCardResponse | None
    email_groups: list[str]


class PayStubResponse(BaseModel):
    id: int
    pay_period_start: date
    pay_period_end: date
    salary: float


def _to_response(e: Employee) -> EmployeeResponse:
    card = e.access_card
    return EmployeeResponse(
        id=e.id,
        ssn=e.ssn,
        name=e.name,
        age=e.age,
        dob=e.dob,
        type=e.type.name if e.type is not None else None,
        access_card=(
            AccessCardResponse(
                id=card.id,
                issued_date=card.issued_date,
                is_active=card.is_active,
                firmware_version=card.firmware_version,
            )
            if card is not None
            else None
        ),
        email_groups=[g.name for g in e.email_groups],
    )


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    min_age: int | None = None,
    employees: EmployeeGateway = Depends(employee_gateway),
) -> list[EmployeeResponse]:
    if min_age is None:
        found = await employees.find_all()
    else:
        found = await employees.find_by_min_age(min_age)
    return [_to_response(e) for e in found]


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: int,
    employees: EmployeeGateway = Depends(employee_gateway),
) -> EmployeeResponse:
    try:
        return _to_response(await employees.get_by_id(employee_id))
    except NotFound as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{employee_id}/pay-stubs", response_model=list[PayStubResponse])
async def list_pay_stubs(
    employee_id: int,
    employees: EmployeeGateway = Depends(employee_gateway),
) -> list[PayStubResponse]:
    try:
        employee = await employees.get_by_id(employee_id)
    except NotFound as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e
    stubs = await employees.fetch_pay_stubs(employee)
    return [
        PayStubResponse(
            id=s.id,
            pay_period_start=s.pay_period_start,
            pay_period_end=s.pay_period_end,
            salary=s.salary,
        )
        for s in stubs
    ]


@router.post("", response_model=EmployeeResponse, status_code=HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreateRequest,
    employees: EmployeeGateway = Depends(employee_gateway),
) -> EmployeeResponse:
    try:
        saved = await employees.save(
            Employee(ssn=body.ssn, name=body.name, age=body.age, dob=body.dob, type=body.type)
        )
    except ConstraintViolation as e:
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=str(e)) from e
    return _to_response(saved)


@router.delete("/{employee_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: int,
    employees: EmployeeGateway = Depends(employee_gateway),
) -> Response:
    try:
        await employees.delete_by_id(employee_id)
    except NotFound as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e
    return Response(status_code=HTTP_204_NO_CONTENT)


# --- Module Notes -----------------------------------------------------------
# Responses are built from entities already loaded by the gateway (access card and
# email groups are joined eagerly); pay stubs have their own endpoint.
