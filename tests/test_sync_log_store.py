from datetime import timedelta

import pytest
from tortoise import timezone

from app.models.sync_log import SyncLog, SyncStatus
from app.services import sync_log_store


async def _log(order_id, status=SyncStatus.FAILED, days_ago=0, execution_time=0.0, **fields):
    entry = await sync_log_store.append_log(
        order_id=order_id,
        order_number=str(order_id),
        customer_email="reader@example.com",
        customer_name="Ada Lovelace",
        products_data=[{"sku": "BK-1", "name": "Ebook One"}],
        sync_status=status,
        response_message=fields.pop("response_message", "HTTP 500: boom"),
        execution_time=execution_time,
        **fields,
    )
    if days_ago:
        await SyncLog.filter(id=entry.id).update(sync_time=timezone.now() - timedelta(days=days_ago))
    return entry


@pytest.mark.asyncio
async def test_append_stores_snapshot(db):
    entry = await _log(42, SyncStatus.SUCCESS, response_code=200, response_data='{"ok":true}', execution_time=0.2)

    stored = await SyncLog.get(id=entry.id)
    assert stored.order_id == 42
    assert stored.sync_status == SyncStatus.SUCCESS
    assert stored.response_code == 200
    assert stored.products_data == [{"sku": "BK-1", "name": "Ebook One"}]
    assert stored.retry_count == 0
    assert stored.sync_time is not None


@pytest.mark.asyncio
async def test_list_is_newest_first_with_status_filter_and_paging(db):
    oldest = await _log(1, SyncStatus.SUCCESS, days_ago=3)
    middle = await _log(2, SyncStatus.FAILED, days_ago=2)
    newest = await _log(3, SyncStatus.FAILED, days_ago=1)

    assert [e.id for e in await sync_log_store.list_logs()] == [newest.id, middle.id, oldest.id]
    assert [e.id for e in await sync_log_store.list_logs(status=SyncStatus.FAILED)] == [newest.id, middle.id]
    assert [e.id for e in await sync_log_store.list_logs(limit=1, offset=1)] == [middle.id]
    assert await sync_log_store.count_logs() == 3
    assert await sync_log_store.count_logs(status=SyncStatus.SUCCESS) == 1


@pytest.mark.asyncio
async def test_find_latest_for_order(db):
    await _log(45, SyncStatus.FAILED, days_ago=2)
    latest = await _log(45, SyncStatus.SUCCESS)
    await _log(46, SyncStatus.FAILED)

    found = await sync_log_store.find_latest_for_order(45)

    assert found.id == latest.id
    assert await sync_log_store.find_latest_for_order(999) is None


@pytest.mark.asyncio
async def test_purge_older_than_days_keeps_newer_rows(db):
    await _log(1, days_ago=40)
    await _log(2, days_ago=31)
    recent = await _log(3, days_ago=5)
    today = await _log(4)

    deleted = await sync_log_store.purge_logs(30)

    assert deleted == 2
    assert sorted(await SyncLog.all().values_list("id", flat=True)) == [recent.id, today.id]


@pytest.mark.asyncio
async def test_purge_zero_deletes_everything(db):
    await _log(1, days_ago=40)
    await _log(2)

    assert await sync_log_store.purge_logs(0) == 2
    assert await SyncLog.all().count() == 0


@pytest.mark.asyncio
async def test_purge_rejects_negative_days(db):
    with pytest.raises(ValueError):
        await sync_log_store.purge_logs(-1)


@pytest.mark.asyncio
async def test_stats(db):
    await _log(1, SyncStatus.SUCCESS, execution_time=0.5)
    await _log(2, SyncStatus.FAILED, execution_time=1.5)
    await _log(3, SyncStatus.FAILED, execution_time=0.0)
    await _log(4, SyncStatus.SUCCESS, days_ago=2, execution_time=1.0)
    await _log(5, SyncStatus.SUCCESS, days_ago=20, execution_time=1.0)

    stats = await sync_log_store.get_stats()

    assert stats.total == 5
    assert stats.success == 3
    assert stats.failed == 2
    assert stats.pending == 0
    assert stats.recent_7d == 4
    # Zero durations (attempts that never reached delivery) are left out
    assert stats.avg_execution_time == pytest.approx(1.0)
    assert len(stats.daily_breakdown) == 2
    today = stats.daily_breakdown[0]
    assert (today.total, today.success, today.failed) == (3, 1, 2)
    assert stats.daily_breakdown[0].date > stats.daily_breakdown[1].date


@pytest.mark.asyncio
async def test_stats_on_empty_table(db):
    stats = await sync_log_store.get_stats()

    assert stats.total == 0
    assert stats.avg_execution_time == 0.0
    assert stats.daily_breakdown == []


@pytest.mark.asyncio
async def test_stats_counts_pending_without_daily_success_or_failure(db):
    await _log(1, SyncStatus.PENDING)
    await _log(2, SyncStatus.SUCCESS)

    stats = await sync_log_store.get_stats()

    assert (stats.total, stats.success, stats.failed, stats.pending) == (2, 1, 0, 1)
    today = stats.daily_breakdown[0]
    assert (today.total, today.success, today.failed) == (2, 1, 0)
