#!/usr/bin/env python3
"""
Repository tests against an in-memory SQLite database.

Exercises the provider implementations and the SQL match store, both
directly and through MatchingService.
"""

import os
import tempfile
import unittest
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, event

from core.app_context import build_matching_service
from core.config_loader import BatchConfig, MatchingConfig, MatchStoreConfig
from core.matching.exceptions import (
    CandidateNotFoundError,
    InvalidStatusTransitionError,
    JobNotFoundError,
    MatchNotFoundError,
    SkillDataUnavailableError,
)
from core.ranking import BrowseFilters
from database.models import (
    Base,
    CandidateProfile,
    Company,
    Education,
    Job,
    JobMatch,
    JobSkill,
    Skill,
    User,
    UserSkillScore,
    WorkExperience,
)
from database.repository import MatchingRepository
from tests import create_test_engine, create_test_session_factory

NOW = datetime.now(timezone.utc)


class SqliteTestCase(unittest.TestCase):
    """Fresh schema per test plus a few builders."""

    def make_engine(self):
        return create_test_engine()

    def setUp(self):
        self.engine = self.make_engine()
        self.session = create_test_session_factory(self.engine)()
        self.repo = MatchingRepository(self.session)

        self.python = Skill(name="Python")
        self.sql = Skill(name="SQL")
        self.session.add_all([self.python, self.sql])
        self.session.flush()

    def tearDown(self):
        self.session.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def add_candidate(self, email, scores=None, visibility="public", active=True, role="candidate", **profile):
        user = User(email=email, role=role, active=active)
        user.profile = CandidateProfile(profile_visibility=visibility, **profile)
        for skill_row, score, days_left in (scores or []):
            user.skill_scores.append(UserSkillScore(
                skill=skill_row,
                score=score,
                source="interview",
                expires_at=NOW + timedelta(days=days_left),
            ))
        self.session.add(user)
        self.session.flush()
        return user

    def add_job(self, title="Backend Engineer", status="active", posted_days_ago=1, requirements=None, **kwargs):
        job = Job(
            title=title,
            status=status,
            company=Company(name="Acme"),
            created_at=NOW - timedelta(days=posted_days_ago),
            **kwargs
        )
        if requirements is None:
            requirements = [(self.python, 0.6, 70, True), (self.sql, 0.4, 60, True)]
        for skill_row, weight, minimum, required in requirements:
            job.skills.append(JobSkill(skill=skill_row, weight=weight, minimum_score=minimum, required=required))
        self.session.add(job)
        self.session.flush()
        return job

    def service(self, policy="preserve_advanced"):
        config = MatchingConfig(
            batch=BatchConfig(max_workers=2, timeout_seconds=10, lookup_retry_wait_seconds=0),
            store=MatchStoreConfig(recalculation_policy=policy)
        )
        return build_matching_service(self.repo, config)


@pytest.mark.db
class TestProviderRepositories(SqliteTestCase):

    def test_skill_scores_skip_expired_entries(self):
        user = self.add_candidate("a@example.com", [(self.python, 85, 30), (self.sql, 75, -1)])

        entries = self.repo.skills.get_candidate_skill_scores(str(user.id))
        self.assertEqual([e.skill_name for e in entries], ["Python"])
        self.assertEqual(entries[0].score, 85.0)
        self.assertEqual(entries[0].skill_id, str(self.python.id))

    def test_skill_scores_for_unknown_or_malformed_id(self):
        self.assertEqual(self.repo.skills.get_candidate_skill_scores(str(uuid.uuid4())), [])
        self.assertEqual(self.repo.skills.get_candidate_skill_scores("not-a-uuid"), [])

    def test_eligible_candidates(self):
        keep = self.add_candidate("keep@example.com")
        self.add_candidate("anon@example.com", visibility="anonymous")
        self.add_candidate("private@example.com", visibility="private")
        self.add_candidate("inactive@example.com", active=False)
        self.add_candidate("boss@example.com", role="employer")

        eligible = self.repo.candidates.get_eligible_candidates()
        self.assertEqual(len(eligible), 2)
        self.assertIn(str(keep.id), eligible)
        self.assertEqual(eligible, sorted(eligible))

    def test_profile_factors(self):
        user = self.add_candidate(
            "a@example.com", years_experience=6, city="Austin", state="TX",
            remote_preference="hybrid", willing_to_relocate=True
        )
        user.profile.education.append(Education(degree="masters", field_of_study="Statistics"))
        user.profile.work_experience.append(WorkExperience(title="Data Engineer", company="Initech"))
        self.session.flush()

        profile = self.repo.candidates.get_candidate_profile_factors(str(user.id))
        self.assertEqual(profile.years_experience, 6)
        self.assertEqual(profile.remote_preference, "hybrid")
        self.assertTrue(profile.willing_to_relocate)
        self.assertEqual(profile.education[0].field_of_study, "Statistics")
        self.assertEqual(profile.work_history[0].title, "Data Engineer")

    def test_profile_factors_unknown_candidate(self):
        with self.assertRaises(CandidateNotFoundError):
            self.repo.candidates.get_candidate_profile_factors(str(uuid.uuid4()))
        with self.assertRaises(CandidateNotFoundError):
            self.repo.candidates.get_candidate_profile_factors("nope")

    def test_job_snapshot(self):
        job = self.add_job(experience_level="senior", remote_option="remote")

        snapshot = self.repo.jobs.get_job(str(job.id))
        self.assertEqual(snapshot.title, "Backend Engineer")
        self.assertEqual(snapshot.company_name, "Acme")
        self.assertTrue(snapshot.is_remote)
        weights = {req.skill_name: req.weight for req in snapshot.skills}
        self.assertEqual(weights, {"Python": 0.6, "SQL": 0.4})
        self.assertEqual(len(self.repo.jobs.get_job_requirements(str(job.id))), 2)

    def test_unknown_job(self):
        with self.assertRaises(JobNotFoundError):
            self.repo.jobs.get_job(str(uuid.uuid4()))
        with self.assertRaises(JobNotFoundError):
            self.repo.jobs.get_job("job-1")

    def test_active_jobs(self):
        newer = self.add_job(title="Newer", remote_option="remote", posted_days_ago=1)
        older = self.add_job(title="Older", remote_option="onsite", posted_days_ago=5)
        self.add_job(title="Closed", status="closed")
        self.add_job(title="Draft", status="draft")

        jobs = self.repo.jobs.get_active_jobs()
        self.assertEqual([j.job_id for j in jobs], [str(newer.id), str(older.id)])

        remote = self.repo.jobs.get_active_jobs(BrowseFilters(location_types=["remote"]))
        self.assertEqual([j.title for j in remote], ["Newer"])


@pytest.mark.db
class TestMatchStoreRepository(SqliteTestCase):

    def setUp(self):
        super().setUp()
        self.job = self.add_job()
        self.alice = self.add_candidate("alice@example.com", [(self.python, 85, 30), (self.sql, 75, 30)])
        self.bob = self.add_candidate("bob@example.com", [(self.python, 85, 30)])
        self.carol = self.add_candidate("carol@example.com", [(self.python, 95, 30), (self.sql, 90, 30)])
        self.session.commit()
        self.job_id = str(self.job.id)

    def test_calculate_persists_strict_ranking(self):
        result = self.service().calculate_job_matches(self.job_id)

        self.assertEqual(result.match_count, 2)
        self.assertEqual(result.skipped_count, 0)

        stored = self.service().get_job_candidates(self.job_id)
        self.assertEqual([r.candidate_id for r in stored], [str(self.carol.id), str(self.alice.id)])
        self.assertEqual([r.rank for r in stored], [1, 2])
        self.assertAlmostEqual(stored[1].overall_score, 81.0)
        self.assertEqual(stored[0].status, "matched")
        self.assertEqual({item["skill_name"] for item in stored[0].skill_breakdown}, {"Python", "SQL"})

    def test_recalculation_is_idempotent(self):
        self.service().calculate_job_matches(self.job_id)
        first = [(r.match_id, r.rank, r.overall_score) for r in self.repo.matches.get_job_candidates(self.job_id)]

        self.service().calculate_job_matches(self.job_id)
        second = [(r.match_id, r.rank, r.overall_score) for r in self.repo.matches.get_job_candidates(self.job_id)]

        self.assertEqual(first, second)
        self.assertEqual(self.session.query(JobMatch).count(), 2)

    def test_status_lifecycle(self):
        self.service().calculate_job_matches(self.job_id)
        match = self.repo.matches.get_job_candidates(self.job_id)[0]
        service = self.service()

        with self.assertRaises(InvalidStatusTransitionError):
            service.update_match_status(match.match_id, "hired", actor="emp-1")

        viewed = service.record_match_view(match.match_id, actor="emp-1")
        self.assertEqual(viewed.status, "viewed")
        self.assertIsNotNone(viewed.reviewed_at)

        contacted = service.contact_candidate(match.match_id, actor="emp-1")
        self.assertEqual(contacted.status, "contacted")
        self.assertIsNotNone(contacted.contacted_at)
        self.assertEqual(contacted.reviewed_at, viewed.reviewed_at)

        hired = service.update_match_status(match.match_id, "hired", actor="emp-2")
        self.assertEqual(hired.status, "hired")
        self.assertEqual(hired.status_updated_by, "emp-2")

    def test_compare_and_swap_rejects_stale_expected_status(self):
        self.service().calculate_job_matches(self.job_id)
        match = self.repo.matches.get_job_candidates(self.job_id)[0]

        at = datetime.now(timezone.utc)
        self.assertIsNotNone(self.repo.matches.transition_status(match.match_id, "matched", "viewed", "emp-1", at))
        self.assertIsNone(self.repo.matches.transition_status(match.match_id, "matched", "viewed", "emp-2", at))
        self.assertEqual(self.repo.matches.get_match(match.match_id).status_updated_by, "emp-1")

    def test_preserve_advanced_keeps_contacted_match_unranked(self):
        service = self.service()
        service.calculate_job_matches(self.job_id)
        alice_match = next(
            r for r in self.repo.matches.get_job_candidates(self.job_id) if r.candidate_id == str(self.alice.id)
        )
        service.record_match_view(alice_match.match_id)
        service.contact_candidate(alice_match.match_id)

        # Alice's SQL score expires: she no longer qualifies
        for score in self.session.query(UserSkillScore).filter_by(user_id=self.alice.id, skill_id=self.sql.id):
            score.expires_at = NOW - timedelta(days=1)
        self.session.commit()

        result = self.service().calculate_job_matches(self.job_id)
        self.assertEqual(result.match_count, 1)

        ranked = self.repo.matches.get_job_candidates(self.job_id)
        self.assertEqual([r.candidate_id for r in ranked], [str(self.carol.id)])

        kept = self.repo.matches.get_match(alice_match.match_id)
        self.assertEqual(kept.status, "contacted")
        self.assertIsNone(kept.rank)
        self.assertEqual(len(self.repo.matches.get_job_candidates(self.job_id, include_unranked=True)), 2)

    def test_reset_policy_replaces_everything(self):
        self.service().calculate_job_matches(self.job_id)
        match = self.repo.matches.get_job_candidates(self.job_id)[0]
        self.service().record_match_view(match.match_id)

        self.service(policy="reset").calculate_job_matches(self.job_id)

        stored = self.repo.matches.get_job_candidates(self.job_id)
        self.assertEqual([r.status for r in stored], ["matched", "matched"])
        with self.assertRaises(MatchNotFoundError):
            self.repo.matches.get_match(match.match_id)

    def test_candidate_matches_ordered_by_score(self):
        second_job = self.add_job(title="Python Only", requirements=[(self.python, 1.0, 50, True)])
        self.session.commit()
        self.service().calculate_job_matches(self.job_id)
        self.service().calculate_job_matches(str(second_job.id))

        matches = self.service().get_candidate_matches(str(self.alice.id))
        self.assertEqual([m.job_id for m in matches], [str(second_job.id), self.job_id])
        scores = [m.overall_score for m in matches]
        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_unknown_match(self):
        with self.assertRaises(MatchNotFoundError):
            self.repo.matches.get_match(str(uuid.uuid4()))
        with self.assertRaises(MatchNotFoundError):
            self.repo.matches.get_match("abc")


@pytest.mark.db
class TestLookupFailureRecovery(SqliteTestCase):
    """
    A dropped connection during one candidate's lookup.

    Uses a file database so the data survives the connection being
    invalidated and reopened.
    """

    def make_engine(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        engine = create_engine(f"sqlite:///{os.path.join(self.tmpdir.name, 'matching.db')}")
        Base.metadata.create_all(engine)
        return engine

    def setUp(self):
        super().setUp()
        self.job = self.add_job()
        self.alice = self.add_candidate("alice@example.com", [(self.python, 85, 30), (self.sql, 75, 30)])
        self.bob = self.add_candidate("bob@example.com", [(self.python, 95, 30), (self.sql, 90, 30)])
        self.carol = self.add_candidate("carol@example.com", [(self.python, 90, 30), (self.sql, 80, 30)])
        self.session.commit()

        self.failures_left = 0
        self.failures_seen = 0
        event.listen(self.engine, "before_cursor_execute", self._break_skill_query, retval=True)
        event.listen(self.engine, "handle_error", self._mark_disconnect)

    def tearDown(self):
        event.remove(self.engine, "before_cursor_execute", self._break_skill_query)
        event.remove(self.engine, "handle_error", self._mark_disconnect)
        super().tearDown()
        self.tmpdir.cleanup()

    def _break_skill_query(self, conn, cursor, statement, parameters, context, executemany):
        if self.failures_left and "user_skill_scores" in statement and statement.lstrip().upper().startswith("SELECT"):
            self.failures_left -= 1
            self.failures_seen += 1
            return "SELECT missing_column FROM missing_table", parameters
        return statement, parameters

    def _mark_disconnect(self, context):
        context.is_disconnect = True

    def test_session_usable_after_failed_lookup(self):
        self.failures_left = 1

        with self.assertRaises(SkillDataUnavailableError):
            self.repo.skills.get_candidate_skill_scores(str(self.alice.id))
        self.assertEqual(self.failures_seen, 1)

        entries = self.repo.skills.get_candidate_skill_scores(str(self.alice.id))
        self.assertEqual({e.skill_name for e in entries}, {"Python", "SQL"})
        self.assertIsNotNone(self.repo.candidates.get_candidate_profile_factors(str(self.bob.id)))

    def test_one_dropped_lookup_does_not_abort_batch(self):
        self.failures_left = 1

        result = self.service().calculate_job_matches(str(self.job.id))

        self.assertEqual(self.failures_seen, 1)
        self.assertEqual(result.skipped_count, 0)
        self.assertEqual(result.match_count, 3)
        stored = self.repo.matches.get_job_candidates(str(self.job.id))
        self.assertEqual(
            [r.candidate_id for r in stored],
            [str(self.bob.id), str(self.carol.id), str(self.alice.id)]
        )


if __name__ == "__main__":
    unittest.main()
