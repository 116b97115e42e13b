"""Story API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import StoryCreate, StoryFeedResponse, StoryResponse
from ..services import create_story, get_current_user, get_optional_user, list_story_groups, mark_story_viewed

router = APIRouter(prefix="/stories", tags=["stories"])


@router.get("", response_model=StoryFeedResponse)
async def list_stories_endpoint(
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> StoryFeedResponse:
    groups = list_story_groups(db, viewer_id=viewer.id if viewer else None)
    return StoryFeedResponse.model_validate({"groups": groups})


@router.post("", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story_endpoint(
    payload: StoryCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> StoryResponse:
    story = create_story(db, author=current_user, payload=payload)
    return StoryResponse.model_validate(story, from_attributes=True)


@router.post("/{story_id}/view", status_code=status.HTTP_204_NO_CONTENT)
async def mark_viewed_endpoint(
    story_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    mark_story_viewed(db, story_id=story_id, viewer_id=current_user.id)
