import logging
from datetime import UTC

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Priority, Task, TaskStatus
from .nlp.parser import ParsedTask
from .schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

SORTABLE = {
    "due_date": Task.due_date,
    "priority": Task.priority,
    "status": Task.status,
    "task_name": Task.task_name,
    "assignee": Task.assignee,
    "created_at": Task.created_at,
    "updated_at": Task.updated_at,
}


def _normalize_due(dt):
    if dt is None:
        return None
    # If tz-aware, convert to UTC and drop tzinfo (store naive UTC)
    if getattr(dt, "tzinfo", None) is not None:
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt


async def create_task(db: AsyncSession, payload: TaskCreate) -> Task:
    data = payload.model_dump()
    data["due_date"] = _normalize_due(data.get("due_date"))
    data["priority"] = Priority(data["priority"])
    data["status"] = TaskStatus(data["status"])
    task = Task(**data)
    db.add(task)
    await db.commit()
    await db.refresh(task)
    logger.info("Created task %s (%s, %s)", task.id, task.priority.value, task.task_name)
    return task


async def create_from_parsed(db: AsyncSession, parsed: ParsedTask) -> Task:
    # Same limits as a structured create; raises pydantic.ValidationError
    payload = TaskCreate(
        task_name=parsed.task_name,
        assignee=parsed.assignee,
        due_date=parsed.due_date,
        priority=parsed.priority,
        status=TaskStatus.pending,
    )
    logger.debug("Creating task from text: %s", parsed)
    return await create_task(db, payload)


async def get_task(db: AsyncSession, task_id: int) -> Task | None:
    res = await db.execute(select(Task).where(Task.id == task_id))
    return res.scalar_one_or_none()


async def list_tasks(
    db: AsyncSession,
    status: str | None = None,
    priority: str | None = None,
    assignee: str | None = None,
    tags: list[str] | None = None,
    search: str | None = None,
    sort_by: str = "due_date",
    sort_order: str = "asc",
    limit: int = 100,
    offset: int = 0,
) -> list[Task]:
    column = SORTABLE.get(sort_by, Task.due_date)
    order = column.desc() if sort_order == "desc" else column.asc()
    stmt = select(Task).order_by(order, Task.id)
    if status:
        stmt = stmt.where(Task.status == TaskStatus(status))
    if priority:
        stmt = stmt.where(Task.priority == Priority(priority))
    if assignee:
        stmt = stmt.where(Task.assignee == assignee)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Task.task_name.ilike(pattern), Task.description.ilike(pattern)))

    if not tags:
        stmt = stmt.limit(limit).offset(offset)
        res = await db.execute(stmt)
        return list(res.scalars().all())

    # JSON list column: any-of match is done here rather than in SQL
    wanted = set(tags)
    res = await db.execute(stmt)
    matched = [t for t in res.scalars().all() if wanted.intersection(t.tags or [])]
    return matched[offset : offset + limit]


async def update_task(db: AsyncSession, task_id: int, payload: TaskUpdate):
    task = await get_task(db, task_id)
    if not task:
        return None
    updates = payload.model_dump(exclude_unset=True)
    if "due_date" in updates:
        updates["due_date"] = _normalize_due(updates["due_date"])
    if updates.get("priority") is not None:
        updates["priority"] = Priority(updates["priority"])
    if updates.get("status") is not None:
        updates["status"] = TaskStatus(updates["status"])
    for k, v in updates.items():
        if v is None and k in ("task_name", "assignee", "due_date", "priority", "status"):
            continue
        setattr(task, k, v)
    await db.commit()
    await db.refresh(task)
    return task


async def set_status(db: AsyncSession, task_id: int, status: TaskStatus):
    task = await get_task(db, task_id)
    if not task:
        return None
    task.status = status
    await db.commit()
    await db.refresh(task)
    return task


async def delete_task(db: AsyncSession, task_id: int) -> bool:
    task = await get_task(db, task_id)
    if not task:
        return False
    await db.delete(task)
    await db.commit()
    logger.info("Deleted task %s", task_id)
    return True
