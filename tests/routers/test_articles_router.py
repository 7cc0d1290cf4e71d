"""Tests for the article publish endpoint."""

import pytest

from blogsync.main import app
from blogsync.models.contracts import TaskType
from blogsync.repositories.article_repository import ArticleRepository
from blogsync.routers.articles import get_article_repository
from blogsync.services.publish_events import DocumentEventBus
from blogsync.services.publish_listener import LinkedInPublishListener
from blogsync.services.queue import QueueService


@pytest.fixture
def queue(db_factory):
    return QueueService(db_factory=db_factory)


@pytest.fixture
def repo(client, db_session, db_factory, queue, settings):
    bus = DocumentEventBus()
    bus.subscribe(LinkedInPublishListener(queue=queue, db_factory=db_factory, settings=settings))
    repository = ArticleRepository(db_session, events=bus)
    app.dependency_overrides[get_article_repository] = lambda: repository
    return repository


def test_publish_enqueues_linkedin_post(client, repo, queue):
    article = repo.create(title="Go Channels", slug="go-channels", content="Body")

    response = client.post(f"/api/articles/{article.document_id}/publish")

    assert response.status_code == 200
    body = response.json()
    assert body["document_id"] == article.document_id
    assert body["status"] == "published"
    assert body["published_at"] is not None

    task = queue.dequeue()
    assert task["task_type"] == TaskType.POST_TO_LINKEDIN.value
    assert task["payload"]["slug"] == "go-channels"


def test_publish_unknown_article_returns_404(client, repo, queue):
    response = client.post("/api/articles/does-not-exist/publish")

    assert response.status_code == 404
    assert queue.dequeue() is None


def test_publish_survives_listener_failure(client, repo, monkeypatch):
    def broken_enqueue(*args, **kwargs):
        raise RuntimeError("queue down")

    article = repo.create(title="Go Channels", slug="go-channels", content="Body")
    listener = repo.events._listeners[0]
    monkeypatch.setattr(listener.queue, "enqueue", broken_enqueue)

    response = client.post(f"/api/articles/{article.document_id}/publish")

    assert response.status_code == 200
    assert response.json()["status"] == "published"
