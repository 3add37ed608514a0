"""Tests for scheduled alert processing"""
from datetime import datetime, timedelta

import pytest

from conftest import RecordingTransport, TestingSessionLocal
from hiresphere.app.models.job_alert import JobAlert
from hiresphere.app.services.alert_notifier import AlertNotifier
from hiresphere.app.services.alert_processor import AlertProcessor, process_job_alerts
from hiresphere.app.services.alert_service import mark_alert_sent
from hiresphere.app.services.personalizer import NoopPersonalizer


def _processor(transport):
    notifier = AlertNotifier(
        transport=transport,
        personalizer=NoopPersonalizer(),
        frontend_url="https://hiresphere.test",
        sender="alerts@hiresphere.test",
    )
    return AlertProcessor(session_factory=TestingSessionLocal, notifier=notifier)


def _reload(db_session, alert_id):
    db_session.expire_all()
    return db_session.get(JobAlert, alert_id)


def test_no_active_alerts_is_a_clean_noop(db_session, make_job):
    make_job(title="Python Developer")
    transport = RecordingTransport()

    summary = _processor(transport).process_alerts("daily")

    assert (summary.total, summary.sent, summary.skipped, summary.failed) == (0, 0, 0, 0)
    assert transport.sent == []


def test_sends_and_advances_last_sent_at(db_session, make_job, make_alert):
    now = datetime.utcnow()
    make_job(title="Python Developer", created_at=now - timedelta(hours=3))
    job = make_job(title="Python Lead", created_at=now - timedelta(hours=1))
    alert = make_alert(keywords=["python"])
    transport = RecordingTransport()

    summary = _processor(transport).process_alerts("daily")

    assert summary.sent == 1
    assert len(transport.sent) == 1
    assert f"/jobs/{job.id}" in transport.sent[0].html_body
    assert _reload(db_session, alert.id).last_sent_at == job.created_at


def test_second_run_without_new_jobs_sends_nothing(db_session, make_job, make_alert):
    make_job(title="Python Developer")
    make_alert(keywords=["python"])
    transport = RecordingTransport()
    processor = _processor(transport)

    processor.process_alerts("daily")
    summary = processor.process_alerts("daily")

    assert summary.sent == 0
    assert summary.skipped == 1
    assert len(transport.sent) == 1


def test_only_alerts_of_requested_frequency(db_session, make_job, make_alert):
    make_job(title="Python Developer")
    weekly = make_alert(keywords=["python"], frequency="weekly")
    transport = RecordingTransport()

    summary = _processor(transport).process_alerts("daily")

    assert summary.total == 0
    assert _reload(db_session, weekly.id).last_sent_at is None


def test_inactive_alerts_are_ignored(db_session, make_job, make_alert):
    make_job(title="Python Developer")
    make_alert(keywords=["python"], is_active=False)
    transport = RecordingTransport()

    assert _processor(transport).process_alerts("daily").total == 0
    assert transport.sent == []


def test_skips_when_seeker_disabled_alerts(db_session, make_job, make_alert, job_seeker):
    make_job(title="Python Developer")
    alert = make_alert(keywords=["python"])
    job_seeker.alerts_enabled = False
    db_session.commit()
    transport = RecordingTransport()

    summary = _processor(transport).process_alerts("daily")

    assert summary.skipped == 1
    assert transport.sent == []
    assert _reload(db_session, alert.id).last_sent_at is None


def test_skips_when_seeker_missing(db_session, make_job, make_alert):
    make_job(title="Python Developer")
    make_alert(keywords=["python"], job_seeker_id=9999)
    transport = RecordingTransport()

    summary = _processor(transport).process_alerts("daily")

    assert summary.skipped == 1
    assert summary.failed == 0
    assert transport.sent == []


def test_failed_send_keeps_last_sent_at(db_session, make_job, make_alert):
    make_job(title="Python Developer")
    previous = datetime.utcnow() - timedelta(days=2)
    make_job(title="Python Lead", created_at=previous + timedelta(hours=1))
    alert = make_alert(keywords=["python"], last_sent_at=previous)

    summary = _processor(RecordingTransport(result=False)).process_alerts("daily")

    assert summary.sent == 0
    assert _reload(db_session, alert.id).last_sent_at == previous


def test_one_alert_failure_does_not_abort_batch(db_session, make_job, make_alert):
    make_job(title="Python Developer")
    first = make_alert(keywords=["python"])
    second = make_alert(keywords=["python"])
    transport = RecordingTransport()
    processor = _processor(transport)
    original = processor._process_alert

    def flaky(db, alert_id):
        if alert_id == first.id:
            raise RuntimeError("unexpected")
        return original(db, alert_id)

    processor._process_alert = flaky
    summary = processor.process_alerts("daily")

    assert summary.failed == 1
    assert summary.sent == 1
    assert len(transport.sent) == 1
    assert _reload(db_session, second.id).last_sent_at is not None
    assert _reload(db_session, first.id).last_sent_at is None


def test_unknown_frequency_rejected():
    with pytest.raises(ValueError):
        _processor(RecordingTransport()).process_alerts("monthly")


def test_immediate_alerts_processed_by_frequency(db_session, make_job, make_alert):
    make_job(title="Python Developer")
    make_alert(keywords=["python"], frequency="immediate")
    transport = RecordingTransport()

    assert _processor(transport).process_alerts("immediate").sent == 1


def test_process_job_alerts_module_entry(db_session, make_job, make_alert, notifier, transport):
    make_job(title="Python Developer")
    make_alert(keywords=["python"], frequency="weekly")

    summary = process_job_alerts("weekly", session_factory=TestingSessionLocal, notifier=notifier)

    assert summary.sent == 1
    assert len(transport.sent) == 1


def test_mark_alert_sent_never_moves_backwards(db_session, make_alert):
    alert = make_alert()
    later = datetime.utcnow()
    earlier = later - timedelta(hours=3)

    assert mark_alert_sent(db_session, alert.id, later) is True
    assert mark_alert_sent(db_session, alert.id, earlier) is False
    assert mark_alert_sent(db_session, alert.id, later) is False
    assert _reload(db_session, alert.id).last_sent_at == later


def test_last_sent_at_monotonic_across_runs(db_session, make_job, make_alert):
    alert = make_alert(keywords=["python"])
    transport = RecordingTransport()
    processor = _processor(transport)
    seen = []

    for i in range(3):
        make_job(title=f"Python Developer {i}", created_at=datetime.utcnow())
        processor.process_alerts("daily")
        seen.append(_reload(db_session, alert.id).last_sent_at)

    assert all(ts is not None for ts in seen)
    assert seen == sorted(seen)


def test_job_posted_during_run_is_sent_exactly_once(db_session, make_job, make_alert):
    now = datetime.utcnow()
    first = make_job(title="Python Developer", created_at=now - timedelta(hours=2))
    alert = make_alert(keywords=["python"])
    transport = RecordingTransport()
    processor = _processor(transport)

    processor.process_alerts("daily")
    # Posted after the newest emailed job but before the next run
    late = make_job(title="Python Lead", created_at=now - timedelta(hours=1))
    processor.process_alerts("daily")
    processor.process_alerts("daily")

    assert len(transport.sent) == 2
    assert f"/jobs/{first.id}" in transport.sent[0].html_body
    assert f"/jobs/{late.id}" in transport.sent[1].html_body
    assert f"/jobs/{first.id}" not in transport.sent[1].html_body
    assert _reload(db_session, alert.id).last_sent_at == late.created_at
