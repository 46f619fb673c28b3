"""
Program catalog endpoints, mounted at ``/api/programs``.

Reads are public; writes need an admin bearer token.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from certverify.api.dependencies import get_current_admin_user, get_db
from certverify.exceptions import BadRequestException
from certverify.models import User
from certverify.programs import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_programs(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    category: Optional[str] = Query(default=None),
    level: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """List programs. ``status=all`` (or no status) returns every program."""
    programs = service.list_programs(
        db, status=status_filter, category=category, level=level, search=search
    )
    return {"success": True, "count": len(programs), "data": [p.to_dict() for p in programs]}


@router.get("/by-name/{name}")
def get_program_by_name(name: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Resolve a URL slug such as ``ai-ml-internship`` to a program."""
    return {"success": True, "data": service.find_program_by_name(db, name).to_dict()}


@router.get("/{program_id}")
def get_program(program_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    return {"success": True, "data": service.get_program(db, program_id).to_dict()}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_program(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
) -> Dict[str, Any]:
    program = service.create_program(db, payload)
    return {"success": True, "message": "Program added successfully", "data": program.to_dict()}


@router.put("/{program_id}")
def update_program(
    program_id: int,
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
) -> Dict[str, Any]:
    program = service.update_program(db, program_id, payload)
    return {"success": True, "message": "Program updated successfully", "data": program.to_dict()}


@router.delete("")
def delete_all_programs(
    all_: Optional[str] = Query(default=None, alias="all"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
) -> Dict[str, Any]:
    """Delete every program; requires ``?all=true``."""
    if all_ != "true":
        raise BadRequestException(
            "To delete all programs, use: DELETE /api/programs?all=true"
        )
    deleted = service.delete_all_programs(db)
    return {
        "success": True,
        "message": f"Successfully deleted {deleted} program(s)",
        "deletedCount": deleted,
    }


@router.delete("/{program_id}")
def delete_program(
    program_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
) -> Dict[str, Any]:
    program = service.delete_program(db, program_id)
    return {
        "success": True,
        "message": "Program deleted successfully",
        "data": {"id": program.id, "title": program.title},
    }
