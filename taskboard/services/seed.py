"""
Начальное заполнение БД демо-данными.

Вызывается при старте приложения, если SEED_ON_STARTUP=true.
Срабатывает только на пустой БД (нет ни одной задачи).
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..validation import EntityKind, validate_insert
from .project import ProjectService
from .tag import TagService
from .task import TaskService

logger = get_logger(__name__)

PROJECTS = [
    {"name": "Work", "slug": "work", "color": "#3b82f6"},
    {"name": "Personal", "slug": "personal", "color": "#10b981"},
]

TAGS = [
    {"name": "Urgent", "color": "#ef4444"},
    {"name": "Learning", "color": "#8b5cf6"},
]

# project/tags ссылаются на slug проекта и названия тегов выше
TASKS = [
    {
        "project": "work",
        "tags": ["Urgent"],
        "data": {
            "title": "Complete project proposal",
            "description": "Draft the initial requirements and timeline",
            "priority": "high",
            "status": "todo",
        },
    },
    {
        "project": "personal",
        "tags": [],
        "data": {
            "title": "Buy groceries",
            "description": "Milk, eggs, bread",
            "priority": "medium",
            "status": "todo",
        },
    },
    {
        "project": "personal",
        "tags": ["Learning"],
        "data": {
            "title": "Learn Python type hints",
            "description": "Read documentation and practice",
            "priority": "low",
            "status": "in_progress",
        },
    },
]


async def seed_database(db: AsyncSession) -> bool:
    """
    Заполнить пустую БД проектами, тегами и задачами.

    Returns:
        True если данные созданы, False если БД уже не пустая
    """
    task_service = TaskService(db)
    if await task_service.task_repo.count() > 0:
        return False

    project_service = ProjectService(db)
    tag_service = TagService(db)

    projects = {}
    for payload in PROJECTS:
        project = await project_service.create_project(
            validate_insert(EntityKind.PROJECT, payload)
        )
        projects[project.slug] = project

    tags = {}
    for payload in TAGS:
        tag = await tag_service.create_tag(validate_insert(EntityKind.TAG, payload))
        tags[tag.name] = tag

    for item in TASKS:
        payload = {**item["data"], "projectId": projects[item["project"]].id}
        request = validate_insert(EntityKind.TASK, payload)
        await task_service.create_task(
            request.task_fields(), tag_ids=[tags[name].id for name in item["tags"]]
        )

    logger.info(
        "Database seeded",
        extra={"projects": len(PROJECTS), "tags": len(TAGS), "tasks": len(TASKS)},
    )
    return True
