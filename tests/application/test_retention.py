from datetime import datetime, timedelta, timezone

import anyio
import pytest

from app.application.use_cases.notifications import NotificationCleanupTask
from app.domain.entities import Notification, NotificationCategory
from app.domain.exceptions import NotificationPersistenceError
from app.domain.retention import RetentionPolicy
from app.utils import now_in_app_timezone

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _notification(*, read: bool, age_days: int) -> Notification:
    return Notification(
        id="n1",
        user_id="alice",
        title="Title",
        message="Body",
        category=NotificationCategory.TIP,
        read=read,
        created_at=NOW - timedelta(days=age_days),
    )


def test_policy_only_purges_old_read_notifications():
    policy = RetentionPolicy(days_old=30)
    cutoff = policy.cutoff(NOW)

    assert cutoff == NOW - timedelta(days=30)
    assert RetentionPolicy.is_purgeable(_notification(read=True, age_days=31), cutoff)
    assert not RetentionPolicy.is_purgeable(_notification(read=False, age_days=400), cutoff)
    assert not RetentionPolicy.is_purgeable(_notification(read=True, age_days=29), cutoff)
    assert not RetentionPolicy.is_purgeable(_notification(read=True, age_days=30), cutoff)


def test_policy_rejects_negative_age():
    with pytest.raises(ValueError):
        RetentionPolicy(days_old=-1)


def test_with_days_returns_a_new_policy():
    policy = RetentionPolicy()

    assert policy.with_days(7).days_old == 7
    assert policy.days_old == 30


def test_cleanup_task_requires_positive_interval(service):
    with pytest.raises(ValueError):
        NotificationCleanupTask(service, interval_seconds=0)


@pytest.mark.anyio
async def test_cleanup_task_run_once_reports_removed_rows(service, store, audit):
    await store.insert(
        Notification(None, "alice", "old", "Body", NotificationCategory.TIP, read=True,
                     created_at=now_in_app_timezone() - timedelta(days=60))
    )
    task = NotificationCleanupTask(service, interval_seconds=60)

    assert await task.run_once() == 1
    assert await task.run_once() == 0
    assert audit.actions() == ["notification.cleanup", "notification.cleanup"]


@pytest.mark.anyio
async def test_cleanup_task_survives_store_failures(service, store):
    async def failing_sweep(cutoff):
        raise NotificationPersistenceError("database is down")

    store.delete_read_older_than = failing_sweep
    task = NotificationCleanupTask(service, interval_seconds=60)

    assert await task.run_once() == 0


@pytest.mark.anyio
async def test_run_forever_keeps_sweeping_after_an_unexpected_error(service):
    calls: list[int] = []
    second_sweep = anyio.Event()

    async def flaky_cleanup(days_old=None):
        calls.append(len(calls))
        if len(calls) == 1:
            raise RuntimeError("clock went backwards")
        second_sweep.set()
        return 0

    service.cleanup_old_notifications = flaky_cleanup
    task = NotificationCleanupTask(service, interval_seconds=0.01)

    async with anyio.create_task_group() as tg:
        tg.start_soon(task.run_forever)
        with anyio.fail_after(2):
            await second_sweep.wait()
        tg.cancel_scope.cancel()

    assert len(calls) >= 2
