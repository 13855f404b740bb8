#!/usr/bin/env python3
"""
Test suite for profile affinity bonuses.
"""

import unittest

from core.config_loader import ScorerConfig
from core.scorer import bonuses
from core.scorer.models import EducationEntry, JobRequirements, ProfileFactors, WorkHistoryEntry


class TestExperienceBonus(unittest.TestCase):

    def setUp(self):
        self.config = ScorerConfig()

    def bonus(self, level, years):
        return bonuses.calculate_experience_bonus(
            JobRequirements(job_id="j", experience_level=level),
            ProfileFactors(years_experience=years),
            self.config
        )

    def test_inside_band_gets_full_bonus(self):
        self.assertEqual(self.bonus("entry", 0), 5.0)
        self.assertEqual(self.bonus("mid", 4), 5.0)
        self.assertEqual(self.bonus("senior", 10), 5.0)
        self.assertEqual(self.bonus("lead", 25), 5.0)
        self.assertEqual(self.bonus("executive", 10), 5.0)

    def test_adjacent_band_gets_partial_bonus(self):
        self.assertEqual(self.bonus("entry", 5), 2.0)
        self.assertEqual(self.bonus("mid", 8), 2.0)
        self.assertEqual(self.bonus("senior", 3), 2.0)

    def test_outside_both_bands(self):
        self.assertEqual(self.bonus("entry", 9), 0.0)
        self.assertEqual(self.bonus("mid", 12), 0.0)
        self.assertEqual(self.bonus("lead", 4), 0.0)
        self.assertEqual(self.bonus("senior", 1), 0.0)

    def test_unknown_years_or_level(self):
        self.assertEqual(self.bonus("mid", None), 0.0)
        self.assertEqual(self.bonus(None, 4), 0.0)
        self.assertEqual(self.bonus("intern", 1), 0.0)


class TestLocationBonus(unittest.TestCase):

    def setUp(self):
        self.config = ScorerConfig()

    def bonus(self, job, profile):
        return bonuses.calculate_location_bonus(job, profile, self.config)

    def test_remote_job(self):
        job = JobRequirements(job_id="j", remote_option="remote")
        self.assertEqual(self.bonus(job, ProfileFactors(remote_preference="remote")), 5.0)
        self.assertEqual(self.bonus(job, ProfileFactors(remote_preference="flexible")), 5.0)
        self.assertAlmostEqual(self.bonus(job, ProfileFactors(remote_preference="hybrid")), 3.0)
        self.assertEqual(self.bonus(job, ProfileFactors(remote_preference="onsite")), 0.0)

    def test_flexible_job_counts_as_remote(self):
        job = JobRequirements(job_id="j", remote_option="flexible")
        self.assertEqual(self.bonus(job, ProfileFactors(remote_preference="remote")), 5.0)

    def test_onsite_job_proximity(self):
        job = JobRequirements(job_id="j", remote_option="onsite", city="Austin", state="TX")

        same_city = ProfileFactors(city="austin", state="tx")
        same_state_relocate = ProfileFactors(city="Dallas", state="TX", willing_to_relocate=True)
        same_state = ProfileFactors(city="Dallas", state="TX")
        other_state_relocate = ProfileFactors(city="Denver", state="CO", willing_to_relocate=True)
        other_state = ProfileFactors(city="Denver", state="CO")

        self.assertEqual(self.bonus(job, same_city), 5.0)
        self.assertAlmostEqual(self.bonus(job, same_state_relocate), 3.0)
        self.assertAlmostEqual(self.bonus(job, same_state), 1.0)
        self.assertAlmostEqual(self.bonus(job, other_state_relocate), 2.0)
        self.assertEqual(self.bonus(job, other_state), 0.0)

    def test_same_city_name_in_other_state_is_not_same_city(self):
        job = JobRequirements(job_id="j", remote_option="hybrid", city="Portland", state="OR")
        self.assertEqual(self.bonus(job, ProfileFactors(city="Portland", state="ME")), 0.0)

    def test_missing_location_gives_nothing(self):
        job = JobRequirements(job_id="j", remote_option="onsite", city="Austin")
        self.assertEqual(self.bonus(job, ProfileFactors(city="Austin", state="TX")), 0.0)


class TestEducationAndWorkHistoryBonus(unittest.TestCase):

    def setUp(self):
        self.config = ScorerConfig()
        self.job = JobRequirements(
            job_id="j",
            title="Senior Data Engineer",
            description="We build pipelines for statistics and machine learning teams."
        )

    def test_field_of_study_in_posting(self):
        profile = ProfileFactors(education=[EducationEntry(degree="masters", field_of_study="Statistics")])
        self.assertEqual(bonuses.calculate_education_bonus(self.job, profile, self.config), 3.0)

    def test_relevant_degree_only(self):
        profile = ProfileFactors(education=[EducationEntry(degree="bachelors", field_of_study="History")])
        self.assertEqual(bonuses.calculate_education_bonus(self.job, profile, self.config), 1.0)

    def test_short_field_of_study_is_ignored(self):
        profile = ProfileFactors(education=[EducationEntry(degree="associate", field_of_study="ML")])
        self.assertEqual(bonuses.calculate_education_bonus(self.job, profile, self.config), 0.0)

    def test_prior_title_shares_word(self):
        profile = ProfileFactors(work_history=[
            WorkHistoryEntry(title="Barista"),
            WorkHistoryEntry(title="Data Analyst"),
        ])
        self.assertEqual(bonuses.calculate_work_history_bonus(self.job, profile, self.config), 2.0)

    def test_no_shared_word(self):
        profile = ProfileFactors(work_history=[WorkHistoryEntry(title="Accountant")])
        self.assertEqual(bonuses.calculate_work_history_bonus(self.job, profile, self.config), 0.0)


class TestTotalBonus(unittest.TestCase):

    def test_components_and_cap(self):
        job = JobRequirements(
            job_id="j", title="Senior Data Engineer", description="statistics",
            experience_level="senior", remote_option="remote"
        )
        profile = ProfileFactors(
            years_experience=6,
            remote_preference="remote",
            education=[EducationEntry(degree="masters", field_of_study="statistics")],
            work_history=[WorkHistoryEntry(title="Data Engineer")],
        )

        total, components = bonuses.calculate_bonus_points(job, profile, ScorerConfig())
        self.assertEqual(components, {"experience": 5.0, "location": 5.0, "education": 3.0, "work_history": 2.0})
        self.assertEqual(total, 15.0)

        capped, _ = bonuses.calculate_bonus_points(job, profile, ScorerConfig(bonus_cap=10))
        self.assertEqual(capped, 10.0)

    def test_empty_profile_has_no_bonus(self):
        total, components = bonuses.calculate_bonus_points(
            JobRequirements(job_id="j", title="Engineer"), ProfileFactors(), ScorerConfig()
        )
        self.assertEqual(total, 0.0)
        self.assertTrue(all(value == 0.0 for value in components.values()))


if __name__ == "__main__":
    unittest.main()
