"""
Categories API endpoints.

Scoped category listing with per-viewer prompt counts, lifecycle operations
and the can-use check. Domain errors raised by the services are mapped to
HTTP responses by the handler registered in ``promptscope.api.main``.
"""
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from promptscope.api.deps import (
    get_category_aggregator,
    get_category_service,
    get_current_user_context,
    get_optional_user_context,
    parse_id,
)
from promptscope.db import schemas
from promptscope.db.database import get_db
from promptscope.db.repositories import prompts as prompt_repo
from promptscope.errors import NotFoundError, PermissionDeniedError
from promptscope.services import CategoryAggregator, CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=schemas.GroupedCategoryList)
def list_categories(
    aggregator: CategoryAggregator = Depends(get_category_aggregator),
    user_context=Depends(get_optional_user_context),
):
    """Categories visible to the caller grouped by scope; guests only see public ones."""
    viewer_id = user_context[0].id if user_context else None
    groups = aggregator.grouped(viewer_id)
    return {
        "categories": groups,
        "total": sum(len(items) for items in groups.values()),
    }


@router.get("/stats", response_model=schemas.CategoryStats)
def category_stats(
    service: CategoryService = Depends(get_category_service),
    user_context=Depends(get_current_user_context),
):
    return service.get_category_stats()


@router.get("/my", response_model=List[schemas.CategoryWithCount])
def my_categories(
    aggregator: CategoryAggregator = Depends(get_category_aggregator),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    return aggregator.my_categories(user.id)


@router.get("/team/{team_id}", response_model=List[schemas.CategoryWithCount])
def team_categories(
    team_id: str,
    aggregator: CategoryAggregator = Depends(get_category_aggregator),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    return aggregator.team_categories(parse_id(team_id, "team_id"), user.id)


@router.post("/", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: schemas.CategoryCreate,
    service: CategoryService = Depends(get_category_service),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    return service.create_category(payload, user.id)


@router.put("/{category_id}", response_model=schemas.Category)
def update_category(
    category_id: str,
    payload: schemas.CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    return service.update_category(parse_id(category_id, "category_id"), payload, user.id)


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    service.delete_category(parse_id(category_id, "category_id"), user.id)
    return {"message": "Category deleted successfully"}


@router.get("/{category_id}/can-use", response_model=schemas.CategoryUsage)
def can_use_category(
    category_id: str,
    service: CategoryService = Depends(get_category_service),
    user_context=Depends(get_current_user_context),
):
    user, _ = user_context
    cid = parse_id(category_id, "category_id")
    return {
        "can_use": service.can_use(user.id, cid),
        "category_id": cid,
        "user_id": user.id,
    }


@router.get("/{category_id}/prompts", response_model=List[schemas.Prompt])
def list_category_prompts(
    category_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    service: CategoryService = Depends(get_category_service),
    user_context=Depends(get_optional_user_context),
):
    """Prompts in a category the caller may use, filtered by prompt visibility."""
    viewer_id = user_context[0].id if user_context else None
    cid = parse_id(category_id, "category_id")
    if service.get_category(cid) is None:
        raise NotFoundError()
    if not service.can_use(viewer_id, cid):
        raise PermissionDeniedError("No access to this category")
    return prompt_repo.list_by_category(db, cid, viewer_id, skip=skip, limit=limit)
