"""Tests for cascading archive, restore and guarded hard delete."""

import uuid

import pytest
from sqlalchemy import func, select

pytestmark = pytest.mark.integration

from evorbrain.core.errors import ConflictError, NotFoundError
from evorbrain.core.hierarchy import archive_service
from evorbrain.core.hierarchy.graph import HIERARCHY
from evorbrain.domains.goals.models.goal_models import Goal
from evorbrain.domains.life_areas.models.life_area_models import LifeArea
from evorbrain.domains.notes.models.note_models import Note
from evorbrain.domains.projects.models.project_models import Project, Task
from evorbrain.domains.projects.services import create_task
from evorbrain.extensions import db


def _archived_at(model, row_id):
    return db.session.execute(select(model.archived_at).where(model.id == row_id)).scalar_one()


def _snapshot():
    rows = {}
    for model in (LifeArea, Goal, Project, Task, Note):
        for row_id, archived_at, updated_at in db.session.execute(
            select(model.id, model.archived_at, model.updated_at)
        ):
            rows[row_id] = (archived_at, updated_at)
    return rows


class TestGraph:
    def test_every_edge_names_real_columns(self, app):
        for edge in HIERARCHY:
            table = archive_service.TABLES[edge.child]
            assert edge.foreign_key in table.c
            assert edge.parent in archive_service.TABLES

    def test_collect_descendants_terminates_on_subtasks(self, app, hierarchy):
        found = archive_service.collect_descendants("tasks", hierarchy["task"].id)
        assert found["tasks"] == {hierarchy["subtask"].id}
        assert found["notes"] == {hierarchy["notes"]["task"].id, hierarchy["notes"]["subtask"].id}


class TestArchiveCascade:
    """Archiving a root archives every unarchived dependent with one timestamp."""

    def test_archive_goal_leaves_parent_untouched(self, app, hierarchy):
        summary = archive_service.archive_goal_cascade(hierarchy["goal"].id)

        stamp = summary.timestamp
        assert _archived_at(LifeArea, hierarchy["life_area"].id) is None
        assert _archived_at(Note, hierarchy["notes"]["life_area"].id) is None
        assert _archived_at(Goal, hierarchy["goal"].id) == stamp
        assert _archived_at(Project, hierarchy["project"].id) == stamp
        assert _archived_at(Task, hierarchy["task"].id) == stamp
        assert _archived_at(Task, hierarchy["subtask"].id) == stamp
        for key in ("goal", "project", "task", "subtask"):
            assert _archived_at(Note, hierarchy["notes"][key].id) == stamp
        assert summary.counts == {"goals": 1, "projects": 1, "tasks": 2, "notes": 4}

    def test_updated_at_matches_archived_at(self, app, hierarchy):
        summary = archive_service.archive_life_area_cascade(hierarchy["life_area"].id)
        rows = _snapshot()
        assert len(rows) == 10
        for archived_at, updated_at in rows.values():
            assert archived_at == summary.timestamp
            assert updated_at == summary.timestamp

    def test_already_archived_descendant_keeps_its_timestamp(self, app, hierarchy):
        first = archive_service.archive_task_cascade(hierarchy["subtask"].id)
        second = archive_service.archive_project_cascade(hierarchy["project"].id)

        assert _archived_at(Task, hierarchy["subtask"].id) == first.timestamp
        assert _archived_at(Note, hierarchy["notes"]["subtask"].id) == first.timestamp
        assert _archived_at(Task, hierarchy["task"].id) == second.timestamp
        assert second.counts["tasks"] == 1

    def test_walk_descends_through_archived_rows(self, app, hierarchy):
        archive_service.archive_project_cascade(hierarchy["project"].id)
        # A subtask added beneath an archived task after the fact
        late = create_task(parent_task_id=hierarchy["subtask"].id, title="Late addition")
        summary = archive_service.archive_goal_cascade(hierarchy["goal"].id)

        assert _archived_at(Task, late.id) == summary.timestamp
        assert summary.counts["tasks"] == 1

    def test_rearchive_is_noop(self, app, hierarchy):
        first = archive_service.archive_goal_cascade(hierarchy["goal"].id)
        second = archive_service.archive_goal_cascade(hierarchy["goal"].id)
        assert second.total == 0
        assert _archived_at(Goal, hierarchy["goal"].id) == first.timestamp

    def test_missing_root_changes_nothing(self, app, hierarchy):
        before = _snapshot()
        with pytest.raises(NotFoundError):
            archive_service.archive_goal_cascade(str(uuid.uuid4()))
        assert _snapshot() == before

    def test_archive_note_has_no_dependents(self, app, hierarchy):
        summary = archive_service.archive_note(hierarchy["notes"]["goal"].id)
        assert summary.counts == {"notes": 1}
        assert _archived_at(Goal, hierarchy["goal"].id) is None


class TestRestore:
    def test_restore_is_not_cascading_by_default(self, app, hierarchy):
        archive_service.archive_goal_cascade(hierarchy["goal"].id)
        archive_service.restore("goals", hierarchy["goal"].id)

        assert _archived_at(Goal, hierarchy["goal"].id) is None
        assert _archived_at(Project, hierarchy["project"].id) is not None
        assert _archived_at(Task, hierarchy["task"].id) is not None

    def test_cascading_restore_only_touches_same_cascade(self, app, hierarchy):
        earlier = archive_service.archive_task_cascade(hierarchy["subtask"].id)
        archive_service.archive_goal_cascade(hierarchy["goal"].id)

        summary = archive_service.restore("goals", hierarchy["goal"].id, cascade=True)

        assert _archived_at(Goal, hierarchy["goal"].id) is None
        assert _archived_at(Project, hierarchy["project"].id) is None
        assert _archived_at(Task, hierarchy["task"].id) is None
        assert _archived_at(Task, hierarchy["subtask"].id) == earlier.timestamp
        assert summary.counts["tasks"] == 1

    def test_restore_unarchived_row_is_noop(self, app, hierarchy):
        summary = archive_service.restore("projects", hierarchy["project"].id)
        assert summary.total == 0

    def test_restore_missing_row(self, app):
        with pytest.raises(NotFoundError):
            archive_service.restore("tasks", str(uuid.uuid4()))


class TestHardDelete:
    def test_blocked_by_direct_children(self, app, hierarchy):
        with pytest.raises(ConflictError) as excinfo:
            archive_service.hard_delete("goals", hierarchy["goal"].id)
        assert excinfo.value.blocking_count == 1
        assert db.session.get(Goal, hierarchy["goal"].id) is not None

    def test_blocking_counts_archived_children_too(self, app, hierarchy):
        create_task(project_id=hierarchy["project"].id, title="Second task")
        archive_service.archive_task_cascade(hierarchy["task"].id)
        with pytest.raises(ConflictError) as excinfo:
            archive_service.hard_delete("projects", hierarchy["project"].id)
        # Both top-level tasks and the subtask reference the project.
        assert excinfo.value.blocking_count == 3

    def test_leaf_delete_removes_attached_notes(self, app, hierarchy):
        subtask_id = hierarchy["subtask"].id
        archive_service.hard_delete("tasks", subtask_id)

        assert db.session.get(Task, subtask_id) is None
        remaining = db.session.execute(
            select(func.count()).select_from(Note).where(Note.task_id == subtask_id)
        ).scalar_one()
        assert remaining == 0

    def test_notes_do_not_block(self, app, hierarchy):
        from evorbrain.domains.life_areas.services.life_area_service import create_life_area
        from evorbrain.domains.notes.services.note_service import create_note

        area_id = create_life_area(name="Finance").id
        note_id = create_note(life_area_id=area_id, title="Budget", content="").id
        archive_service.hard_delete("life_areas", area_id)
        assert db.session.get(LifeArea, area_id) is None
        assert db.session.get(Note, note_id) is None

    def test_missing_row(self, app):
        with pytest.raises(NotFoundError):
            archive_service.hard_delete("projects", str(uuid.uuid4()))
