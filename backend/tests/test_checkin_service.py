"""체크인 기록 정책(메시지 ID upsert, 사용자/일자 중복 억제)과 조회 집계를 검증합니다."""

from datetime import date, datetime
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from beacon.exceptions import StorageError
from beacon.models.checkin import Checkin
from beacon.services import checkin_service
from beacon.services.checkin_service import CheckinOutcome, bucket_label
from beacon.services.status_classifier import CheckinStatus
from tests.conftest import add_checkin


def _record(db, **overrides):
    params = {
        "user_id": "u1",
        "user_name": "Alice",
        "user_email": "alice@example.com",
        "status": CheckinStatus.WFH,
        "message_id": "m1",
        "timestamp": datetime(2024, 1, 1, 9, 0, 0),
    }
    params.update(overrides)
    return checkin_service.record_checkin(db, **params)


def test_record_checkin_inserts_row(db):
    assert _record(db) == CheckinOutcome.RECORDED

    rows = db.query(Checkin).all()
    assert len(rows) == 1
    assert rows[0].user_id == "u1"
    assert rows[0].status == "WFH"
    assert rows[0].message_id == "m1"
    assert rows[0].timestamp == datetime(2024, 1, 1, 9, 0, 0)


def test_same_message_id_overwrites_all_fields(db):
    first = _record(db, user_id="unknown", user_name="Unknown User", user_email=None, status=CheckinStatus.WFH)
    second = _record(
        db,
        user_id="unknown",
        user_name="Renamed",
        user_email="renamed@example.com",
        status=CheckinStatus.OFFICE,
        timestamp=datetime(2024, 1, 1, 10, 0, 0),
    )

    assert first == CheckinOutcome.RECORDED
    assert second == CheckinOutcome.RECORDED
    db.expire_all()
    rows = db.query(Checkin).all()
    assert len(rows) == 1
    assert rows[0].user_name == "Renamed"
    assert rows[0].user_email == "renamed@example.com"
    assert rows[0].status == "Office"
    assert rows[0].timestamp == datetime(2024, 1, 1, 10, 0, 0)


def test_redelivery_for_other_day_replaces_row_in_place(db):
    _record(db, message_id="m1", timestamp=datetime(2024, 1, 1, 9, 0, 0))
    original_id = db.query(Checkin.id).scalar()

    outcome = _record(db, message_id="m1", status=CheckinStatus.OFFICE, timestamp=datetime(2024, 1, 2, 9, 0, 0))

    assert outcome == CheckinOutcome.RECORDED
    db.expire_all()
    rows = db.query(Checkin).all()
    assert len(rows) == 1
    assert rows[0].id == original_id
    assert rows[0].status == "Office"


def test_second_message_same_user_same_day_is_suppressed(db):
    first = _record(db, message_id="m1", timestamp=datetime(2024, 1, 1, 9, 0, 0))
    second = _record(db, message_id="m2", status=CheckinStatus.OFFICE, timestamp=datetime(2024, 1, 1, 17, 30, 0))

    assert first == CheckinOutcome.RECORDED
    assert second == CheckinOutcome.SUPPRESSED
    rows = db.query(Checkin).filter(Checkin.user_id == "u1").all()
    assert len(rows) == 1
    assert rows[0].message_id == "m1"
    assert rows[0].status == "WFH"


def test_redelivered_message_for_known_user_same_day_is_suppressed(db):
    first = _record(db, message_id="m1", status=CheckinStatus.WFH)
    second = _record(db, message_id="m1", user_name="Alice Renamed", status=CheckinStatus.OFFICE)

    assert first == CheckinOutcome.RECORDED
    assert second == CheckinOutcome.SUPPRESSED
    db.expire_all()
    rows = db.query(Checkin).all()
    assert len(rows) == 1
    assert rows[0].user_name == "Alice"
    assert rows[0].status == "WFH"


def test_suppression_is_anchored_on_message_day_not_server_day(db):
    add_checkin(db, user_id="u1", status="WFH", timestamp=datetime(2023, 12, 31, 8, 0, 0), message_id="old")

    late = _record(db, message_id="late", timestamp=datetime(2023, 12, 31, 20, 0, 0))
    next_day = _record(db, message_id="next", timestamp=datetime(2024, 1, 1, 0, 0, 0))

    assert late == CheckinOutcome.SUPPRESSED
    assert next_day == CheckinOutcome.RECORDED
    assert db.query(Checkin).count() == 2


def test_unknown_user_bypasses_daily_cap(db):
    first = _record(db, user_id="unknown", message_id="m1")
    second = _record(db, user_id="unknown", message_id="m2")

    assert first == CheckinOutcome.RECORDED
    assert second == CheckinOutcome.RECORDED
    assert db.query(Checkin).filter(Checkin.user_id == "unknown").count() == 2


def test_different_users_same_day_are_both_recorded(db):
    assert _record(db, user_id="u1", message_id="m1") == CheckinOutcome.RECORDED
    assert _record(db, user_id="u2", message_id="m2") == CheckinOutcome.RECORDED
    assert db.query(Checkin).count() == 2


def test_storage_failure_raises_storage_error(db, monkeypatch):
    def _boom(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "execute", _boom)
    with pytest.raises(StorageError) as exc_info:
        _record(db, user_id="unknown")
    assert "database is locked" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_unsupported_dialect_raises_storage_error(db, monkeypatch):
    oracle = SimpleNamespace(dialect=SimpleNamespace(name="oracle"))
    monkeypatch.setattr(db, "get_bind", lambda *args, **kwargs: oracle)

    with pytest.raises(StorageError) as exc_info:
        _record(db, user_id="unknown")
    assert "not supported for dialect 'oracle'" in str(exc_info.value)

    monkeypatch.undo()
    assert db.query(Checkin).count() == 0


def test_today_report_returns_only_today_newest_first(db):
    add_checkin(db, user_id="u1", status="WFH", timestamp=datetime(2024, 1, 1, 9, 0, 0), message_id="a")
    add_checkin(db, user_id="u2", status="Office", timestamp=datetime(2024, 1, 1, 11, 0, 0), message_id="b")
    add_checkin(db, user_id="u3", status="WFH", timestamp=datetime(2023, 12, 31, 23, 59, 0), message_id="c")
    add_checkin(db, user_id="u4", status="WFH", timestamp=datetime(2024, 1, 2, 0, 0, 0), message_id="d")

    rows = checkin_service.get_today_report(db, today=date(2024, 1, 1))

    assert [row.message_id for row in rows] == ["b", "a"]


def test_bucket_label_aligns_to_quarter_hours():
    assert bucket_label(datetime(2024, 1, 1, 9, 7)) == "09:00"
    assert bucket_label(datetime(2024, 1, 1, 9, 20)) == "09:15"
    assert bucket_label(datetime(2024, 1, 1, 9, 30)) == "09:30"
    assert bucket_label(datetime(2024, 1, 1, 23, 59)) == "23:45"


def test_dashboard_stats_without_profiles_reports_zero_percentage(db):
    add_checkin(db, user_id="u1", status="WFH", timestamp=datetime(2024, 1, 1, 9, 7, 0), message_id="a")
    add_checkin(db, user_id="u2", status="WFH", timestamp=datetime(2024, 1, 1, 9, 20, 0), message_id="b")

    stats = checkin_service.get_dashboard_stats(db, today=date(2024, 1, 1))

    assert stats["wfh_count"] == 2
    assert stats["total_users"] == 0
    assert stats["wfh_percentage"] == 0
    assert stats["time_buckets"] == [{"time": "09:00", "count": 1}, {"time": "09:15", "count": 1}]
    assert stats["breakdown"] == [{"label": "Unknown", "count": 2}]


def test_dashboard_stats_groups_by_profile_attribute(db, seed_profiles):
    day = datetime(2024, 1, 1)
    add_checkin(db, user_id="u1", status="WFH", timestamp=day.replace(hour=9, minute=1), message_id="a",
                user_email="Alice@Example.com")
    add_checkin(db, user_id="u3", status="WFH", timestamp=day.replace(hour=9, minute=44), message_id="c",
                user_email="carol@example.com")
    add_checkin(db, user_id="u2", status="Office", timestamp=day.replace(hour=8, minute=30), message_id="b",
                user_email="bob@example.com")
    add_checkin(db, user_id="u4", status="WFH", timestamp=day.replace(hour=10, minute=0), message_id="d",
                user_email="dave@example.com")
    add_checkin(db, user_id="u9", status="WFH", timestamp=day.replace(hour=10, minute=5), message_id="e",
                user_email="stranger@example.com")

    stats = checkin_service.get_dashboard_stats(db, today=date(2024, 1, 1), group_by="city")

    assert stats["wfh_count"] == 4
    assert stats["total_users"] == 4
    assert stats["wfh_percentage"] == 100
    assert stats["group_by"] == "city"
    assert stats["breakdown"] == [
        {"label": "Seoul", "count": 2},
        {"label": "Unknown", "count": 2},
    ]
    assert [bucket["time"] for bucket in stats["time_buckets"]] == ["08:30", "09:00", "09:30", "10:00"]
    assert stats["time_buckets"][-1]["count"] == 2


def test_dashboard_stats_by_job_title_and_rounding(db, seed_profiles):
    add_checkin(db, user_id="u1", status="WFH", timestamp=datetime(2024, 1, 1, 9, 0), message_id="a",
                user_email="alice@example.com")

    stats = checkin_service.get_dashboard_stats(db, today=date(2024, 1, 1), group_by="job_title")

    assert stats["wfh_percentage"] == 25
    assert stats["breakdown"] == [{"label": "Engineer", "count": 1}]


def test_dashboard_counts_distinct_wfh_users(db, seed_profiles):
    add_checkin(db, user_id="unknown", status="WFH", timestamp=datetime(2024, 1, 1, 9, 0), message_id="a")
    add_checkin(db, user_id="unknown", status="WFH", timestamp=datetime(2024, 1, 1, 9, 5), message_id="b")
    add_checkin(db, user_id="u1", status="WFH", timestamp=datetime(2024, 1, 1, 9, 10), message_id="c")

    stats = checkin_service.get_dashboard_stats(db, today=date(2024, 1, 1))

    assert stats["wfh_count"] == 2
    assert stats["wfh_percentage"] == 50
    assert sum(bucket["count"] for bucket in stats["time_buckets"]) == 3


def test_dashboard_rejects_unknown_group_by(db):
    with pytest.raises(ValueError):
        checkin_service.get_dashboard_stats(db, today=date(2024, 1, 1), group_by="company")
