import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from evorbrain import create_app
from evorbrain.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app(tmp_path):
    """Per-test app backed by a fresh SQLite file, migrated on start-up."""
    app = create_app("testing", overrides={"DATA_DIR": str(tmp_path)})
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.remove()
        db.engine.dispose()
        ctx.pop()
        app.extensions["log_store"].detach()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def hierarchy(app):
    """Life area -> goal -> project -> task -> subtask, with a note on every level."""
    from evorbrain.domains.goals.services.goal_service import create_goal
    from evorbrain.domains.life_areas.services.life_area_service import create_life_area
    from evorbrain.domains.notes.services.note_service import create_note
    from evorbrain.domains.projects.services import create_project, create_task

    life_area = create_life_area(name="Health", color="#22AA44")
    goal = create_goal(
        life_area_id=life_area.id,
        title="Run a marathon",
        target_date=date.today() + timedelta(days=180),
    )
    project = create_project(goal_id=goal.id, title="Training plan", status="active")
    task = create_task(project_id=project.id, title="Buy running shoes", priority="high")
    subtask = create_task(parent_task_id=task.id, title="Measure feet")
    notes = {
        "life_area": create_note(life_area_id=life_area.id, title="Why", content="Feel better"),
        "goal": create_note(goal_id=goal.id, title="Race list", content="Berlin, Chicago"),
        "project": create_note(project_id=project.id, title="Plan", content="16 weeks"),
        "task": create_note(task_id=task.id, title="Shops", content="Downtown"),
        "subtask": create_note(task_id=subtask.id, title="Sizes", content="EU 43"),
    }
    return {
        "life_area": life_area,
        "goal": goal,
        "project": project,
        "task": task,
        "subtask": subtask,
        "notes": notes,
    }
