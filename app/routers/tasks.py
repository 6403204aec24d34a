from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..db import get_session
from ..models import Priority, TaskStatus
from ..nlp.parser import parse_task_input
from ..schemas import ParseIn, StatusIn, TaskCreate, TaskOut, TaskUpdate

router = APIRouter()


@router.post("/parse", response_model=TaskOut, status_code=201)
async def parse_task(payload: ParseIn, db: AsyncSession = Depends(get_session)):
    """Create a pending task from one free-text sentence."""
    if not payload.input:
        raise HTTPException(400, "Input is required")
    parsed = parse_task_input(payload.input)
    return await crud.create_from_parsed(db, parsed)


@router.post("", response_model=TaskOut, status_code=201)
async def create_task(payload: TaskCreate, db: AsyncSession = Depends(get_session)):
    return await crud.create_task(db, payload)


@router.get("", response_model=list[TaskOut])
async def list_tasks(
    status: TaskStatus | None = Query(None, description="Filter by status"),
    priority: Priority | None = Query(None, description="Filter by priority"),
    assignee: str | None = None,
    tags: str | None = Query(None, description="Comma separated; matches any"),
    search: str | None = Query(None, description="Substring of name or description"),
    sort_by: Literal[
        "due_date", "priority", "status", "task_name", "assignee", "created_at", "updated_at"
    ] = "due_date",
    sort_order: Literal["asc", "desc"] = "asc",
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_session),
):
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    return await crud.list_tasks(
        db,
        status=status,
        priority=priority,
        assignee=assignee,
        tags=tag_list,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(task_id: int, db: AsyncSession = Depends(get_session)):
    task = await crud.get_task(db, task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    return task


@router.put("/{task_id}", response_model=TaskOut)
async def update_task(task_id: int, payload: TaskUpdate, db: AsyncSession = Depends(get_session)):
    task = await crud.update_task(db, task_id, payload)
    if not task:
        raise HTTPException(404, "Task not found")
    return task


@router.patch("/{task_id}/status", response_model=TaskOut)
async def update_status(task_id: int, payload: StatusIn, db: AsyncSession = Depends(get_session)):
    try:
        status = TaskStatus(payload.status)
    except ValueError:
        raise HTTPException(400, "Invalid status") from None
    task = await crud.set_status(db, task_id, status)
    if not task:
        raise HTTPException(404, "Task not found")
    return task


@router.delete("/{task_id}")
async def delete_task(task_id: int, db: AsyncSession = Depends(get_session)):
    ok = await crud.delete_task(db, task_id)
    if not ok:
        raise HTTPException(404, "Task not found")
    return {"message": "Task deleted successfully"}
