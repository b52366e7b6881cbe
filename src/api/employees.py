"""API endpoints for employee CRUD, branch deletion and undo."""

import time
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from src.database.database import get_db
from src.schemas.employee import (
    EmployeeCollection,
    EmployeeCreateRequest,
    EmployeeRecord,
    EmployeeUpdateRequest,
    RestoreRequest,
)
from src.schemas.org_chart import IdListResponse
from src.services.interaction_log import log_add_node, log_reassignment
from src.services.org_chart_service import OrgChartService
from src.services.undo_service import UndoBuffer
from src.utils.errors import APIError, NotFoundError


# =============================================================================
# Response Models
# =============================================================================

class EmployeeResponseWrapper(BaseModel):
    """Response wrapper for a single employee."""

    data: EmployeeRecord


class EmployeeListResponseWrapper(BaseModel):
    """Response wrapper for a list of employees."""

    data: List[EmployeeRecord]


# =============================================================================
# Dependency Injection
# =============================================================================

def get_org_chart_service(
    session: Annotated[Session, Depends(get_db)],
) -> OrgChartService:
    """Get org chart service instance."""
    return OrgChartService(session)


def get_undo_buffer(request: Request) -> UndoBuffer:
    """Application-wide undo buffer."""
    return request.app.state.undo_buffer


# =============================================================================
# Router Setup
# =============================================================================

employees_router = APIRouter(
    prefix="/api/employees",
    tags=["Employees"],
)


@employees_router.get(
    "",
    response_model=EmployeeCollection,
    summary="List Employees",
    description="All employees with roots, reporting lines and levels.",
)
async def list_employees(
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> EmployeeCollection:
    return service.list_employees()


@employees_router.post(
    "",
    response_model=EmployeeResponseWrapper,
    status_code=status.HTTP_201_CREATED,
    summary="Add Employee",
)
async def create_employee(
    request: Request,
    data: EmployeeCreateRequest,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> EmployeeResponseWrapper:
    """
    Add an employee.

    - Tier defaults to one level below the manager
    - Id and display code are generated
    """
    record = service.create_employee(data)
    request.app.state.interactions = log_add_node(
        request.app.state.interactions,
        new_employee_id=record.id,
        manager_id=record.manager_id,
        tier=record.tier.value,
        success=True,
    )
    return EmployeeResponseWrapper(data=record)


@employees_router.get(
    "/search",
    response_model=EmployeeListResponseWrapper,
    summary="Search Employees",
    description="Match by name, designation and display code; all given queries must match.",
)
async def search_employees(
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
    name: Annotated[Optional[str], Query(max_length=200)] = None,
    designation: Annotated[Optional[str], Query(max_length=200)] = None,
    employee_code: Annotated[Optional[str], Query(alias="employee_id", max_length=20)] = None,
) -> EmployeeListResponseWrapper:
    return EmployeeListResponseWrapper(
        data=service.search_employees(name, designation, employee_code)
    )


@employees_router.post(
    "/restore",
    response_model=EmployeeListResponseWrapper,
    status_code=status.HTTP_201_CREATED,
    summary="Restore Employees",
    description="Re-insert records returned by a delete, unchanged.",
)
async def restore_employees(
    body: RestoreRequest,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> EmployeeListResponseWrapper:
    return EmployeeListResponseWrapper(data=service.restore_employees(body.employees))


@employees_router.post(
    "/undo",
    response_model=EmployeeListResponseWrapper,
    summary="Undo Last Delete",
    description="Restore the most recent deletion if it is still inside the undo window.",
)
async def undo_last_delete(
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
    undo_buffer: Annotated[UndoBuffer, Depends(get_undo_buffer)],
) -> EmployeeListResponseWrapper:
    operation = undo_buffer.peek(time.monotonic())
    if operation is None:
        undo_buffer.clear()
        raise NotFoundError(message="Nothing to undo")

    # Stays pending when the restore fails
    restored = service.restore_employees(operation.records)
    undo_buffer.clear()
    return EmployeeListResponseWrapper(data=restored)


@employees_router.get(
    "/{employee_id}",
    response_model=EmployeeResponseWrapper,
    summary="Get Employee",
)
async def get_employee(
    employee_id: str,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> EmployeeResponseWrapper:
    return EmployeeResponseWrapper(data=service.get_employee(employee_id))


@employees_router.patch(
    "/{employee_id}",
    response_model=EmployeeResponseWrapper,
    summary="Update Employee",
    description="Partial update. Changing manager_id is rejected with 409 if it would create a cycle.",
)
async def update_employee(
    request: Request,
    employee_id: str,
    data: EmployeeUpdateRequest,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> EmployeeResponseWrapper:
    if "manager_id" not in data.model_fields_set:
        return EmployeeResponseWrapper(data=service.update_employee(employee_id, data))

    previous_manager_id = service.get_employee(employee_id).manager_id
    if previous_manager_id == data.manager_id:
        return EmployeeResponseWrapper(data=service.update_employee(employee_id, data))

    try:
        record = service.update_employee(employee_id, data)
    except APIError as e:
        request.app.state.interactions = log_reassignment(
            request.app.state.interactions,
            employee_id=employee_id,
            previous_manager_id=previous_manager_id,
            new_manager_id=data.manager_id,
            success=False,
            reason=e.error_code,
        )
        raise

    request.app.state.interactions = log_reassignment(
        request.app.state.interactions,
        employee_id=employee_id,
        previous_manager_id=previous_manager_id,
        new_manager_id=record.manager_id,
        success=True,
    )
    return EmployeeResponseWrapper(data=record)


@employees_router.delete(
    "/{employee_id}",
    response_model=EmployeeListResponseWrapper,
    summary="Delete Employee",
    description=(
        "Delete an employee. Employees with reports need cascade=true, which "
        "removes the whole branch. Returns the removed records."
    ),
)
async def delete_employee(
    employee_id: str,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
    undo_buffer: Annotated[UndoBuffer, Depends(get_undo_buffer)],
    cascade: Annotated[bool, Query(description="Remove all descendants too")] = False,
) -> EmployeeListResponseWrapper:
    removed = service.delete_employee(employee_id, cascade=cascade)
    target, *descendants = removed
    undo_buffer.record_delete(
        target,
        now=time.monotonic(),
        children=descendants,
        parent_id=target.manager_id,
    )
    return EmployeeListResponseWrapper(data=removed)


@employees_router.get(
    "/{employee_id}/descendants",
    response_model=IdListResponse,
    summary="List Descendants",
    description="Every transitive report, breadth-first.",
)
async def get_descendants(
    employee_id: str,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> IdListResponse:
    return IdListResponse(employee_id=employee_id, data=service.get_descendants(employee_id))


@employees_router.get(
    "/{employee_id}/valid-targets",
    response_model=IdListResponse,
    summary="List Valid Drop Targets",
    description="Employees this employee can be moved under without creating a cycle.",
)
async def get_valid_targets(
    employee_id: str,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> IdListResponse:
    return IdListResponse(
        employee_id=employee_id,
        data=service.get_valid_drop_targets(employee_id),
    )


@employees_router.get(
    "/{employee_id}/path",
    response_model=EmployeeListResponseWrapper,
    summary="Get Management Chain",
    description="Managers from the top of the tree down to the employee.",
)
async def get_hierarchy_path(
    employee_id: str,
    service: Annotated[OrgChartService, Depends(get_org_chart_service)],
) -> EmployeeListResponseWrapper:
    return EmployeeListResponseWrapper(data=service.get_hierarchy_path(employee_id))
