"""Tests for the alert -> jobs matcher"""
from datetime import datetime, timedelta
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from hiresphere.app.services.job_matcher import (
    find_jobs_for_seeker,
    find_matching_jobs,
    find_recent_matches,
)


def _ids(jobs):
    return [j.id for j in jobs]


def test_keyword_matches_open_job_only(db_session, make_job, make_alert):
    """'react' alert returns the open React job created yesterday, not the closed one from today."""
    now = datetime.utcnow()
    open_job = make_job(title="Senior React Engineer", created_at=now - timedelta(days=1))
    make_job(title="React Intern", status="closed", created_at=now)
    alert = make_alert(keywords=["react"])

    assert _ids(find_matching_jobs(db_session, alert)) == [open_job.id]


def test_location_is_case_insensitive_substring(db_session, make_job, make_alert):
    remote = make_job(location="Remote, US")
    make_job(location="New York")
    alert = make_alert(locations=["remote"])

    assert _ids(find_matching_jobs(db_session, alert)) == [remote.id]


def test_salary_min_excludes_lower_job_minimum(db_session, make_job, make_alert):
    """Job min 40000 < alert min 50000 -> excluded."""
    make_job(salary_min=40000, salary_max=90000)
    alert = make_alert(salary_min=50000, salary_max=80000)

    assert find_matching_jobs(db_session, alert) == []


def test_salary_band_inclusive_bounds(db_session, make_job, make_alert):
    inside = make_job(salary_min=50000, salary_max=80000)
    make_job(salary_min=55000, salary_max=85000)
    alert = make_alert(salary_min=50000, salary_max=80000)

    assert _ids(find_matching_jobs(db_session, alert)) == [inside.id]


def test_salary_min_only_has_no_upper_bound(db_session, make_job, make_alert):
    job = make_job(salary_min=70000, salary_max=250000)
    alert = make_alert(salary_min=60000, salary_max=0)

    assert _ids(find_matching_jobs(db_session, alert)) == [job.id]


def test_empty_criteria_impose_no_restriction(db_session, make_job, make_alert):
    now = datetime.utcnow()
    jobs = [
        make_job(title="Designer", location="Paris", type="contract", created_at=now - timedelta(hours=3)),
        make_job(title="Accountant", location="Lagos", type="part-time", created_at=now - timedelta(hours=2)),
        make_job(title="Barista", location="Remote", type="internship", created_at=now - timedelta(hours=1)),
    ]
    alert = make_alert()

    assert _ids(find_matching_jobs(db_session, alert)) == [j.id for j in reversed(jobs)]


def test_closed_jobs_never_match(db_session, make_job, make_alert):
    make_job(title="Python Developer", status="closed")
    alert = make_alert(keywords=["python"], locations=["berlin"], job_types=["full-time"])

    assert find_matching_jobs(db_session, alert) == []


def test_keyword_searches_description_and_requirements(db_session, make_job, make_alert):
    by_description = make_job(title="Engineer", description="We use Kubernetes daily.")
    by_requirements = make_job(title="Engineer II", requirements="Experience with KUBERNETES")
    make_job(title="Engineer III")
    alert = make_alert(keywords=["kubernetes"])

    assert set(_ids(find_matching_jobs(db_session, alert))) == {by_description.id, by_requirements.id}


def test_keywords_and_locations_combine_with_and(db_session, make_job, make_alert):
    match = make_job(title="Go Developer", location="Remote")
    make_job(title="Go Developer", location="Munich")
    make_job(title="Java Developer", location="Remote")
    alert = make_alert(keywords=["go developer", "rust"], locations=["remote", "lisbon"])

    assert _ids(find_matching_jobs(db_session, alert)) == [match.id]


def test_job_types_filter_is_case_insensitive(db_session, make_job, make_alert):
    contract = make_job(type="Contract")
    make_job(type="full-time")
    alert = make_alert(job_types=["contract"])

    assert _ids(find_matching_jobs(db_session, alert)) == [contract.id]


def test_since_excludes_jobs_created_before_or_at_timestamp(db_session, make_job, make_alert):
    cutoff = datetime.utcnow() - timedelta(hours=6)
    make_job(title="Old", created_at=cutoff - timedelta(hours=1))
    make_job(title="Same instant", created_at=cutoff)
    new = make_job(title="New", created_at=cutoff + timedelta(minutes=5))
    alert = make_alert()

    assert _ids(find_matching_jobs(db_session, alert, cutoff)) == [new.id]


def test_results_newest_first_and_capped_at_ten(db_session, make_job, make_alert):
    base = datetime.utcnow() - timedelta(days=1)
    jobs = [make_job(title=f"Job {i}", created_at=base + timedelta(minutes=i)) for i in range(12)]
    alert = make_alert()

    found = find_matching_jobs(db_session, alert)

    assert len(found) == 10
    assert _ids(found) == [j.id for j in reversed(jobs)][:10]


def test_keywords_match_literally(db_session, make_job, make_alert):
    """LIKE wildcards in a keyword are not treated as wildcards."""
    make_job(title="Engineer")
    pct = make_job(title="100% remote engineer")
    alert = make_alert(keywords=["100%"])

    assert _ids(find_matching_jobs(db_session, alert)) == [pct.id]


def test_blank_keywords_are_ignored(db_session, make_job, make_alert):
    job = make_job(title="Anything")
    alert = make_alert(keywords=["", "   "])

    assert _ids(find_matching_jobs(db_session, alert)) == [job.id]


def test_matching_is_idempotent(db_session, make_job, make_alert):
    make_job(title="Data Engineer")
    make_job(title="Data Analyst")
    alert = make_alert(keywords=["data"])

    first = _ids(find_matching_jobs(db_session, alert))
    second = _ids(find_matching_jobs(db_session, alert))

    assert first == second
    assert len(first) == 2


def test_matched_jobs_carry_employer(db_session, make_job, make_alert, employer):
    make_job(title="Platform Engineer")
    alert = make_alert(keywords=["platform"])

    [job] = find_matching_jobs(db_session, alert)

    assert job.employer_display_name == "Acme Corp"


def test_query_error_returns_no_matches():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
    alert = MagicMock(id=1, job_seeker_id=2, keywords=["python"], locations=[], job_types=[])

    assert find_matching_jobs(db, alert) == []
    db.rollback.assert_called_once()


def test_recent_matches_dedupes_across_alerts(db_session, make_job, make_alert, job_seeker):
    now = datetime.utcnow()
    both = make_job(title="Python React Developer", created_at=now - timedelta(days=1))
    py_only = make_job(title="Python Developer", created_at=now - timedelta(days=2))
    make_job(title="Python Veteran", created_at=now - timedelta(days=30))
    make_alert(keywords=["python"])
    make_alert(keywords=["react"])
    make_alert(keywords=["python"], is_active=False)

    result = find_recent_matches(db_session, job_seeker.id, days=7)

    assert result["total_matches"] == 2
    assert [m["id"] for m in result["matches"]] == [both.id, py_only.id]


def test_jobs_for_seeker_pools_criteria_across_alerts(db_session, make_job, make_alert, job_seeker):
    now = datetime.utcnow()
    old_python = make_job(title="Python Developer", location="Munich", created_at=now - timedelta(days=90))
    react_berlin = make_job(title="React Engineer", location="Berlin", created_at=now - timedelta(days=1))
    make_job(title="Go Engineer", location="Berlin", created_at=now)
    make_job(title="Python Developer", location="Paris", created_at=now)
    make_job(title="React Engineer", location="Berlin", status="closed", created_at=now)
    make_alert(keywords=["python"], locations=["munich"])
    make_alert(keywords=["react"], locations=["berlin"])
    make_alert(keywords=["go"], is_active=False)

    jobs = find_jobs_for_seeker(db_session, job_seeker.id)

    # Pooled: (python OR react) AND (munich OR berlin), open only, no time window
    assert _ids(jobs) == [react_berlin.id, old_python.id]


def test_jobs_for_seeker_pools_job_types(db_session, make_job, make_alert, job_seeker):
    contract = make_job(title="Python Contractor", type="contract")
    make_job(title="Python Intern", type="internship")
    full_time = make_job(title="Python Engineer", type="full-time")
    make_alert(keywords=["python"], job_types=["contract"])
    make_alert(keywords=["python"], job_types=["Full-Time"])

    assert set(_ids(find_jobs_for_seeker(db_session, job_seeker.id))) == {contract.id, full_time.id}


def test_jobs_for_seeker_capped_at_twenty(db_session, make_job, make_alert, job_seeker):
    now = datetime.utcnow()
    jobs = [make_job(title=f"Python Dev {i}", created_at=now - timedelta(minutes=i)) for i in range(25)]
    make_alert(keywords=["python"])

    result = find_jobs_for_seeker(db_session, job_seeker.id)

    assert _ids(result) == _ids(jobs[:20])


def test_jobs_for_seeker_without_active_alerts(db_session, make_job, make_alert, job_seeker):
    make_job(title="Python Developer")
    make_alert(keywords=["python"], is_active=False)

    assert find_jobs_for_seeker(db_session, job_seeker.id) == []
