"""Article lifecycle endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from blogsync.core.db import get_db_session
from blogsync.models.articles import ArticleResponse
from blogsync.repositories.article_repository import ArticleRepository
from blogsync.services.publish_listener import get_event_bus

router = APIRouter(prefix="/api/articles", tags=["articles"])


def get_article_repository(
    db: Annotated[Session, Depends(get_db_session)],
) -> ArticleRepository:
    return ArticleRepository(db, events=get_event_bus())


@router.post("/{document_id}/publish", response_model=ArticleResponse)
def publish_article(
    document_id: str,
    articles: Annotated[ArticleRepository, Depends(get_article_repository)],
) -> ArticleResponse:
    """Publish a draft. Social posting happens in the background worker."""
    article = articles.publish(document_id)
    if article is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return ArticleResponse.model_validate(article)
