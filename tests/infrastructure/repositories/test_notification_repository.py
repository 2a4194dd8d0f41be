"""Tests for the SQLAlchemy notification persistence layer."""

from datetime import datetime, timedelta, timezone

import pytest

from app.domain.entities import (
    MAX_OFFSET,
    Notification,
    NotificationCategory,
    NotificationFilters,
    NotificationSeverity,
)
from app.domain.exceptions import NotificationPersistenceError
from app.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from app.infrastructure.repositories import NotificationRepository, SqlAlchemyNotificationStore

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_database_engine("sqlite:///:memory:")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    factory = create_session_factory(engine)
    with factory() as session:
        yield session


@pytest.fixture
def repository(session):
    return NotificationRepository(session)


@pytest.fixture
def sql_store(engine):
    return SqlAlchemyNotificationStore(create_session_factory(engine))


def _notification(user_id="alice", title="Title", *, minutes=0, **overrides):
    values = {
        "id": None,
        "user_id": user_id,
        "title": title,
        "message": "Body",
        "category": NotificationCategory.TIP,
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    }
    values.update(overrides)
    return Notification(**values)


def test_create_assigns_id_and_round_trips_fields(repository):
    saved = repository.create(
        _notification(
            category=NotificationCategory.USAGE,
            severity=NotificationSeverity.WARNING,
            action_url="/settings/usage",
            action_button_text="Upgrade",
            callback="usage.open",
            metadata={"percentage": 90},
        )
    )

    page = repository.list_for_user("alice", NotificationFilters())
    stored = page.notifications[0]
    assert saved.id and len(saved.id) == 36
    assert stored.id == saved.id
    assert stored.category is NotificationCategory.USAGE
    assert stored.severity is NotificationSeverity.WARNING
    assert stored.action_url == "/settings/usage"
    assert stored.action_button_text == "Upgrade"
    assert stored.callback == "usage.open"
    assert stored.metadata == {"percentage": 90}
    assert stored.read is False
    assert stored.created_at == BASE_TIME


def test_list_orders_newest_first_and_reports_total(repository):
    for minute in range(5):
        repository.create(_notification(title=f"n{minute}", minutes=minute))
    repository.create(_notification("bob", "other"))

    page = repository.list_for_user("alice", NotificationFilters(limit=2, offset=1))

    assert page.total == 5
    assert [n.title for n in page.notifications] == ["n3", "n2"]


def test_list_filters_by_category_and_read_state(repository):
    tip = repository.create(_notification(title="tip", minutes=1))
    repository.create(
        _notification(title="login", minutes=2, category=NotificationCategory.SECURITY)
    )
    repository.set_read("alice", [tip.id])

    by_category = repository.list_for_user(
        "alice", NotificationFilters(category=NotificationCategory.SECURITY)
    )
    unread = repository.list_for_user("alice", NotificationFilters(read=False))
    read = repository.list_for_user("alice", NotificationFilters(read=True))

    assert [n.title for n in by_category.notifications] == ["login"]
    assert [n.title for n in unread.notifications] == ["login"]
    assert [n.id for n in read.notifications] == [tip.id]


def test_set_read_is_scoped_to_the_owner(repository):
    saved = repository.create(_notification())

    assert repository.set_read("bob", [saved.id]) == 0
    assert repository.count_unread("alice") == 1
    assert repository.set_read("alice", [saved.id]) == 1
    assert repository.count_unread("alice") == 0


def test_set_read_without_ids_marks_every_unread_row(repository):
    for minute in range(3):
        repository.create(_notification(minutes=minute))
    repository.create(_notification("bob"))

    assert repository.set_read("alice", None) == 3
    assert repository.set_read("alice", None) == 0
    assert repository.count_unread("alice") == 0
    assert repository.count_unread("bob") == 1


def test_set_read_with_empty_ids_changes_nothing(repository):
    repository.create(_notification())

    assert repository.set_read("alice", []) == 0
    assert repository.count_unread("alice") == 1


def test_delete_requires_ownership(repository):
    saved = repository.create(_notification())

    assert repository.delete("bob", saved.id) is False
    assert repository.delete("alice", saved.id) is True
    assert repository.delete("alice", saved.id) is False


def test_stats_group_by_category(repository):
    first = repository.create(_notification(minutes=1))
    repository.create(_notification(minutes=2))
    repository.create(_notification(minutes=3, category=NotificationCategory.PROCESSING))
    repository.set_read("alice", [first.id])

    stats = repository.stats("alice")

    assert stats.total == 3
    assert stats.unread == 2
    assert stats.by_category[NotificationCategory.TIP] == 2
    assert stats.by_category[NotificationCategory.PROCESSING] == 1
    assert stats.by_category[NotificationCategory.SECURITY] == 0


def test_delete_read_older_than_keeps_unread_and_recent_rows(repository):
    old_read = repository.create(_notification(title="old read", minutes=-60 * 24 * 40))
    repository.create(_notification(title="old unread", minutes=-60 * 24 * 40))
    recent = repository.create(_notification("bob", "recent", minutes=0))
    repository.set_read("alice", [old_read.id])
    repository.set_read("bob", [recent.id])

    removed = repository.delete_read_older_than(BASE_TIME - timedelta(days=30))

    assert removed == 1
    assert [n.title for n in repository.list_for_user("alice", NotificationFilters()).notifications] == [
        "old unread"
    ]
    assert repository.list_for_user("bob", NotificationFilters()).total == 1


@pytest.mark.anyio
async def test_store_runs_operations_in_worker_threads(sql_store):
    saved = await sql_store.insert(_notification())

    assert await sql_store.count_unread("alice") == 1
    assert await sql_store.set_read("alice", iter([saved.id])) == 1
    assert (await sql_store.query("alice", NotificationFilters(read=True))).total == 1
    assert (await sql_store.stats("alice")).total == 1
    assert await sql_store.delete("alice", saved.id) is True


@pytest.mark.anyio
async def test_store_wraps_database_errors():
    engine = create_database_engine("sqlite:///:memory:")
    store = SqlAlchemyNotificationStore(create_session_factory(engine))

    with pytest.raises(NotificationPersistenceError):
        await store.count_unread("alice")
    with pytest.raises(NotificationPersistenceError):
        await store.insert(_notification())
    engine.dispose()


def test_huge_offset_is_clamped_to_a_backend_safe_value(repository):
    repository.create(_notification())
    filters = NotificationFilters(offset=2**63).clamped(max_limit=100)

    page = repository.list_for_user("alice", filters)

    assert filters.offset == MAX_OFFSET
    assert page.total == 1
    assert page.notifications == []
