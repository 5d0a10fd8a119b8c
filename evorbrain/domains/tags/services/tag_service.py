"""Tag service layer."""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func, select

from evorbrain.core.errors import ConflictError
from evorbrain.core.utils.queries import get_or_raise
from evorbrain.domains.projects.models.project_models import Project, Task
from evorbrain.domains.tags.models.tag_models import Tag
from evorbrain.extensions import db

logger = logging.getLogger(__name__)


def list_tags() -> List[Tag]:
    return list(db.session.execute(select(Tag).order_by(Tag.name)).scalars())


def get_tag(tag_id: str) -> Tag:
    return get_or_raise(Tag, tag_id, "Tag")


def create_tag(*, name: str, color: str | None = None) -> Tag:
    existing = db.session.execute(
        select(Tag).where(func.lower(Tag.name) == name.lower())
    ).scalar_one_or_none()
    if existing is not None:
        raise ConflictError(f"Tag '{name}' already exists")
    tag = Tag(name=name, color=color)
    db.session.add(tag)
    db.session.commit()
    return tag


def delete_tag(tag_id: str) -> None:
    tag = get_tag(tag_id)
    db.session.delete(tag)
    db.session.commit()
    # Junction rows go through ON DELETE CASCADE; drop loaded tag collections.
    db.session.expire_all()
    logger.info("Deleted tag %s", tag_id)


def tag_task(task_id: str, tag_id: str) -> Task:
    task = get_or_raise(Task, task_id, "Task")
    tag = get_tag(tag_id)
    if tag not in task.tags:
        task.tags.append(tag)
        db.session.commit()
    return task


def untag_task(task_id: str, tag_id: str) -> Task:
    task = get_or_raise(Task, task_id, "Task")
    tag = get_tag(tag_id)
    if tag in task.tags:
        task.tags.remove(tag)
        db.session.commit()
    return task


def tag_project(project_id: str, tag_id: str) -> Project:
    project = get_or_raise(Project, project_id, "Project")
    tag = get_tag(tag_id)
    if tag not in project.tags:
        project.tags.append(tag)
        db.session.commit()
    return project


def untag_project(project_id: str, tag_id: str) -> Project:
    project = get_or_raise(Project, project_id, "Project")
    tag = get_tag(tag_id)
    if tag in project.tags:
        project.tags.remove(tag)
        db.session.commit()
    return project
