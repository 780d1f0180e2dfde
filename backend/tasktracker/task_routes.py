from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from .deps import DbSession
from .schemas import DeletedOut, TaskCreate, TaskOut, TaskUpdate
from .session_deps import CurrentIdentity
from .task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_task_service(db: DbSession, identity: CurrentIdentity) -> TaskService:
    return TaskService(db, identity)


TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]


# handlers return ORM rows; TaskOut reads them by attribute
@router.get("", response_model=list[TaskOut])
def list_tasks(
    service: TaskServiceDep,
    status: str | None = Query(None),
    search: str | None = Query(None),
):
    return service.list_tasks(status=status, search=search)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TaskOut)
def create_task(body: TaskCreate, service: TaskServiceDep):
    return service.create_task(body)


@router.put("/{task_id}", response_model=TaskOut)
def update_task(task_id: str, body: TaskUpdate, service: TaskServiceDep):
    return service.update_task(task_id, body)


@router.delete("/{task_id}", response_model=DeletedOut)
def delete_task(task_id: str, service: TaskServiceDep):
    return DeletedOut(id=service.delete_task(task_id))
