from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import errors
from .logger import get_logger
from .models import Task, TaskPriority, TaskStatus
from .schemas import TaskCreate, TaskUpdate
from .session_deps import Identity

logger = get_logger(__name__)

ALL_STATUSES = "All"
NON_NULLABLE_FIELDS = ("title", "status", "priority")


class TaskService:
    def __init__(self, db: Session, identity: Identity):
        self.db = db
        self.identity = identity

    def list_tasks(self, status: str | None = None, search: str | None = None) -> list[Task]:
        query = select(Task).where(Task.user_id == self.identity.id)

        if status and status != ALL_STATUSES:
            query = query.where(Task.status == status)

        if search:
            query = query.where(
                or_(
                    Task.title.icontains(search, autoescape=True),
                    Task.description.icontains(search, autoescape=True),
                )
            )

        tasks = list(self.db.execute(query.order_by(Task.created_at.desc())).scalars().all())
        logger.info(f"Retrieved {len(tasks)} tasks for user {self.identity.id}")
        return tasks

    def create_task(self, data: TaskCreate) -> Task:
        title = (data.title or "").strip()
        if not title:
            raise errors.ValidationError("Please add a title")

        try:
            task = Task(
                user_id=self.identity.id,
                title=title,
                description=data.description,
                due_date=data.due_date,
                priority=(data.priority or TaskPriority.MEDIUM).value,
                status=(data.status or TaskStatus.TODO).value,
            )
            self.db.add(task)
            self.db.commit()
            self.db.refresh(task)

            logger.info(f"Task created: {task.id}")
            return task

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating task: {e}")
            raise errors.InternalError(str(e)) from e

    def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        task = self._get_owned(task_id)

        update_data = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in update_data and update_data[field] is None:
                raise errors.ValidationError(f"{field} cannot be null")
        if "title" in update_data:
            update_data["title"] = update_data["title"].strip()
            if not update_data["title"]:
                raise errors.ValidationError("Please add a title")

        try:
            for field, value in update_data.items():
                if isinstance(value, (TaskStatus, TaskPriority)):
                    value = value.value
                setattr(task, field, value)

            self.db.commit()
            self.db.refresh(task)

            logger.info(f"Task updated: {task.id}")
            return task

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating task {task_id}: {e}")
            raise errors.InternalError(str(e)) from e

    def delete_task(self, task_id: str) -> str:
        task = self._get_owned(task_id)

        try:
            self.db.delete(task)
            self.db.commit()

            logger.info(f"Task deleted: {task_id}")
            return task_id

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting task {task_id}: {e}")
            raise errors.InternalError(str(e)) from e

    def _get_owned(self, task_id: str) -> Task:
        task = self.db.get(Task, task_id)
        if task is None:
            raise errors.NotFound("Task not found")
        if task.user_id != self.identity.id:
            logger.warning(f"User {self.identity.id} denied access to task {task_id}")
            raise errors.Forbidden("User not authorized")
        return task
