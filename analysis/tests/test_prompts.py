from django.test import SimpleTestCase

from analysis.prompts import (
    COMPANY_PLACEHOLDER,
    JOB_MATCH_CHARS,
    POSITION_PLACEHOLDER,
    PROMPT_BUILDERS,
    RESUME_MATCH_CHARS,
    STANDARD_INTERVIEW_QUESTIONS,
    PromptKind,
    build_company_fit_prompt,
    build_cover_letter_prompt,
    build_interview_prep_prompt,
    build_match_analysis_prompt,
    build_prompt,
    build_specific_cover_letter_prompt,
    truncate,
)


PROFILE = {
    "name": "Dana Reyes",
    "currentTitle": "Data Engineer",
    "yearsExperience": 6,
    "hardSkills": [f"skill-{i}" for i in range(20)],
    "targetTitles": ["Staff Data Engineer"],
    "achievements": ["Cut pipeline costs by 30%"],
}


class PromptBuilderTests(SimpleTestCase):
    """Prompt templates are pure functions of their inputs."""

    def test_every_kind_has_a_builder(self) -> None:
        self.assertEqual(set(PROMPT_BUILDERS), set(PromptKind))

    def test_identical_inputs_give_identical_prompts(self) -> None:
        fields = {
            PromptKind.MATCH_ANALYSIS: {"resume_text": "r" * 9000, "job_description": "j" * 9000},
            PromptKind.PROFILE_EXTRACTION: {"resume_text": "resume"},
            PromptKind.COVER_LETTER: {"resume_text": "resume", "job_description": "jd", "tone": "warm"},
            PromptKind.SPECIFIC_COVER_LETTER: {"profile": PROFILE, "job_description": "jd", "company_name": "Acme"},
            PromptKind.INTERVIEW_PREP: {"profile": PROFILE, "job_description": "jd"},
            PromptKind.RESUME_OPTIMIZATION: {"resume_text": "resume", "job_description": "jd"},
            PromptKind.COMPANY_FIT: {"profile": PROFILE, "company_name": "Acme", "role_keywords": ["data"]},
            PromptKind.COMPANY_RESEARCH: {"company_name": "Acme"},
            PromptKind.JOB_SEARCH: {"profile": PROFILE, "location": "Berlin"},
            PromptKind.JOB_SCORE: {"profile": PROFILE, "job": {"title": "Analyst", "requirements": ["SQL"]}},
        }
        for kind, kind_fields in fields.items():
            with self.subTest(kind=kind):
                self.assertEqual(build_prompt(kind, kind_fields), build_prompt(kind.value, dict(kind_fields)))

    def test_match_prompt_truncates_inputs(self) -> None:
        prompt = build_match_analysis_prompt("R" * 9000, "J" * 9000)
        self.assertIn("R" * RESUME_MATCH_CHARS, prompt)
        self.assertNotIn("R" * (RESUME_MATCH_CHARS + 1), prompt)
        self.assertIn("J" * JOB_MATCH_CHARS, prompt)
        self.assertNotIn("J" * (JOB_MATCH_CHARS + 1), prompt)

    def test_truncate_handles_missing_text(self) -> None:
        self.assertEqual(truncate(None, 10), "")
        self.assertEqual(truncate("abcdef", 3), "abc")

    def test_cover_letter_placeholders(self) -> None:
        prompt = build_cover_letter_prompt(resume_text="resume", job_description="jd")
        self.assertIn(f"JOB: {POSITION_PLACEHOLDER} at {COMPANY_PLACEHOLDER}", prompt)

    def test_specific_cover_letter_missing_context(self) -> None:
        prompt = build_specific_cover_letter_prompt(job_description="jd")
        self.assertIn("Name: Candidate", prompt)
        self.assertIn("Current Role: Professional", prompt)
        self.assertIn("Match Score: N/A%", prompt)
        self.assertIn("Areas to Address: None identified", prompt)
        self.assertIn("Limited public information available", prompt)

    def test_interview_prep_lists_standard_questions_in_order(self) -> None:
        prompt = build_interview_prep_prompt(
            profile=PROFILE,
            job_description="jd",
            company_name="Acme",
            achievements=PROFILE["achievements"],
            analysis={"overallScore": 71, "dealbreakers": [{"requirement": "Spark"}]},
        )
        positions = [prompt.index(f"{i}. {q}") for i, q in enumerate(STANDARD_INTERVIEW_QUESTIONS, 1)]
        self.assertEqual(positions, sorted(positions))
        self.assertIn("1. Cut pipeline costs by 30%", prompt)
        self.assertIn("Match Score: 71%", prompt)
        self.assertIn("Gaps/Weaknesses: Spark", prompt)

    def test_company_fit_caps_skills(self) -> None:
        prompt = build_company_fit_prompt(profile=PROFILE, company_name="Acme")
        self.assertIn("skill-14", prompt)
        self.assertNotIn("skill-15", prompt)
        self.assertIn("Targeting roles containing: General Match", prompt)

    def test_unknown_kind_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            build_prompt("haiku", {})
