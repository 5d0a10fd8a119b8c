"""Project and task schemas."""

from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from evorbrain.core.utils.validation import (
    MAX_ESTIMATED_MINUTES,
    TASK_DESCRIPTION_MAX_LENGTH,
    check_task_due_date,
    clean_description,
    clean_name,
)

ProjectStatus = Literal["planning", "active", "on_hold", "completed", "cancelled"]
TaskStatus = Literal["todo", "in_progress", "completed", "cancelled"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


class ProjectCreate(BaseModel):
    goal_id: str
    title: str
    description: Optional[str] = None
    status: ProjectStatus = "planning"
    start_date: Optional[dt.date] = None
    due_date: Optional[dt.date] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        return clean_name(value, field="Title")

    @field_validator("description")
    @classmethod
    def check_description(cls, value: Optional[str]) -> Optional[str]:
        return clean_description(value)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.due_date and self.start_date > self.due_date:
            raise ValueError("Start date must be before or equal to due date")
        return self


class ProjectUpdate(ProjectCreate):
    goal_id: Optional[str] = None
    title: Optional[str] = None
    status: Optional[ProjectStatus] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> Optional[str]:
        return clean_name(value, field="Title") if value is not None else None


class ProjectListFilter(BaseModel):
    goal_id: Optional[str] = None
    status: Optional[ProjectStatus] = None
    include_archived: bool = False


class TaskCreate(BaseModel):
    project_id: Optional[str] = None
    parent_task_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    due_date: Optional[dt.datetime] = None
    estimated_minutes: Optional[int] = Field(default=None, ge=0, le=MAX_ESTIMATED_MINUTES)

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        return clean_name(value, field="Title")

    @field_validator("description")
    @classmethod
    def check_description(cls, value: Optional[str]) -> Optional[str]:
        return clean_description(value, max_length=TASK_DESCRIPTION_MAX_LENGTH)

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, value: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return check_task_due_date(value)


class TaskUpdate(TaskCreate):
    title: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    actual_minutes: Optional[int] = Field(default=None, ge=0)

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> Optional[str]:
        return clean_name(value, field="Title") if value is not None else None


class TaskListFilter(BaseModel):
    project_id: Optional[str] = None
    parent_task_id: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    include_archived: bool = False


class TaskBulkUpdate(BaseModel):
    ids: List[str] = Field(min_length=1)
    project_id: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    @model_validator(mode="after")
    def check_changes(self):
        if self.project_id is None and self.status is None and self.priority is None:
            raise ValueError("Nothing to update: give project_id, status or priority")
        return self
