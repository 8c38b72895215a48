import json
from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from analysis.exceptions import InvalidRequest, MalformedJson, NoJsonFound, ProviderError
from analysis.prompts import PromptKind, STANDARD_INTERVIEW_QUESTIONS
from analysis.services import (
    COMPANY_INFO_UNAVAILABLE,
    MIN_JOB_DESCRIPTION_CHARS,
    NO_COMPANY_INFO,
    CareerAnalysisService,
)

from .fakes import ScriptedGateway


RESUME = "Dana Reyes\nData Engineer at Acme, 2018-present\nPython, SQL, Airflow, dbt\n" * 3
JOB_DESCRIPTION = "Senior Data Engineer. Build batch and streaming pipelines in Python and SQL on AWS."
PROFILE = {"name": "Dana Reyes", "currentTitle": "Data Engineer", "hardSkills": ["Python", "SQL"]}


def match_reply(**fields) -> str:
    body = {"overallScore": 78, "verdict": "MODERATE MATCH", "summary": "Good fit."}
    body.update(fields)
    return "Here is my analysis:\n" + json.dumps(body) + "\nGood luck!"


class CompletionDefaultsTests(SimpleTestCase):
    def test_every_kind_has_defaults(self) -> None:
        self.assertEqual(set(CareerAnalysisService.COMPLETION_DEFAULTS), set(PromptKind))

    def test_match_analysis_defaults(self) -> None:
        config = CareerAnalysisService.completion_config(PromptKind.MATCH_ANALYSIS)
        self.assertEqual((config.temperature, config.max_output_tokens, config.timeout), (0.3, 3000, 120))
        self.assertIsNone(config.model)


class MatchAnalysisTests(SimpleTestCase):
    """Job description length gate and the analysis pipeline."""

    def test_short_job_description_is_rejected_before_provider_call(self) -> None:
        gateway = ScriptedGateway(match_reply())
        service = CareerAnalysisService(gateway=gateway)

        with self.assertRaises(InvalidRequest):
            service.analyze_match(RESUME, "x" * (MIN_JOB_DESCRIPTION_CHARS - 1))
        self.assertEqual(gateway.calls, [])

    def test_fifty_character_job_description_is_accepted(self) -> None:
        gateway = ScriptedGateway(match_reply())
        service = CareerAnalysisService(gateway=gateway)

        result = service.analyze_match(RESUME, "x" * MIN_JOB_DESCRIPTION_CHARS)

        self.assertEqual(len(gateway.calls), 1)
        self.assertEqual(result["overallScore"], 78)

    def test_whitespace_does_not_count_towards_minimum(self) -> None:
        gateway = ScriptedGateway(match_reply())
        with self.assertRaises(InvalidRequest):
            CareerAnalysisService(gateway=gateway).analyze_match(RESUME, "  " + "x" * 49 + "   ")
        self.assertEqual(gateway.calls, [])

    def test_pipeline_normalizes_reply(self) -> None:
        gateway = ScriptedGateway(match_reply(overallScore=137, resumeRewrites=[{"section": str(i)} for i in range(7)]))

        result = CareerAnalysisService(gateway=gateway).analyze_match(RESUME, JOB_DESCRIPTION)

        self.assertEqual(result.kind, "match_analysis")
        self.assertEqual(result["overallScore"], 100)
        self.assertEqual([r["section"] for r in result["resumeRewrites"]], ["0", "1", "2"])
        prompt, config = gateway.calls[0]
        self.assertIn(JOB_DESCRIPTION, prompt)
        self.assertEqual(config.max_output_tokens, 3000)
        self.assertEqual(config.model, "scripted-model")

    def test_reply_without_json_fails_the_request(self) -> None:
        service = CareerAnalysisService(gateway=ScriptedGateway("I'm sorry, I can't help with that."))
        with self.assertRaises(NoJsonFound):
            service.analyze_match(RESUME, JOB_DESCRIPTION)

    def test_malformed_reply_fails_the_request(self) -> None:
        service = CareerAnalysisService(gateway=ScriptedGateway("{overallScore: 80}"))
        with self.assertRaises(MalformedJson):
            service.analyze_match(RESUME, JOB_DESCRIPTION)

    def test_provider_errors_propagate(self) -> None:
        service = CareerAnalysisService(gateway=ScriptedGateway(ProviderError()))
        with self.assertRaises(ProviderError):
            service.analyze_match(RESUME, JOB_DESCRIPTION)

    def test_empty_json_is_fully_defaulted(self) -> None:
        result = CareerAnalysisService(gateway=ScriptedGateway("{}")).analyze_match(RESUME, JOB_DESCRIPTION)
        self.assertEqual(result["overallScore"], 50)
        self.assertEqual(result.missing_required, ("overallScore", "verdict", "summary"))


class GenerationTests(SimpleTestCase):
    def test_extract_profile(self) -> None:
        reply = json.dumps({"name": "Dana Reyes", "yearsExperience": "6", "hardSkills": ["Python"]})
        gateway = ScriptedGateway(reply)

        profile = CareerAnalysisService(gateway=gateway).extract_profile(RESUME)

        self.assertEqual(profile["name"], "Dana Reyes")
        self.assertEqual(profile["yearsExperience"], 6)
        self.assertEqual(gateway.calls[0][1].temperature, 0.2)

    def test_interview_prep_returns_all_standard_questions(self) -> None:
        reply = json.dumps([{"question": "What motivates you?", "suggestedAnswer": "Shipping.", "tips": ""}])
        service = CareerAnalysisService(gateway=ScriptedGateway(reply))

        prep = service.generate_interview_prep(PROFILE, JOB_DESCRIPTION, company_name="Acme")

        self.assertEqual(len(prep["questions"]), len(STANDARD_INTERVIEW_QUESTIONS))

    def test_company_fit(self) -> None:
        reply = '{"score": "91", "status": "strong match", "analysis": "Same domain."}'
        fit = CareerAnalysisService(gateway=ScriptedGateway(reply)).analyze_company_fit(PROFILE, "Acme")
        self.assertEqual(fit.to_dict(), {"score": 91, "status": "Strong Match", "analysis": "Same domain."})

    def test_company_fit_requires_company(self) -> None:
        gateway = ScriptedGateway()
        with self.assertRaises(InvalidRequest):
            CareerAnalysisService(gateway=gateway).analyze_company_fit(PROFILE, "  ")

    def test_optimize_resume(self) -> None:
        reply = json.dumps({"auditScore": {"total": "7/10"}, "changesSummary": "Tightened bullets."})
        result = CareerAnalysisService(gateway=ScriptedGateway(reply)).optimize_resume(RESUME, JOB_DESCRIPTION)
        self.assertEqual(result["auditScore"]["total"], "7/10")
        self.assertEqual(len(result["auditScore"]["sections"]), 10)

    def test_cover_letter_is_plain_text(self) -> None:
        gateway = ScriptedGateway("\n\nDear Hiring Manager,\n\nI build pipelines.\n")
        letter = CareerAnalysisService(gateway=gateway).generate_cover_letter(RESUME, JOB_DESCRIPTION)
        self.assertEqual(letter, "Dear Hiring Manager,\n\nI build pipelines.")
        self.assertEqual(gateway.calls[0][1].max_output_tokens, 800)

    def test_empty_cover_letter_is_a_provider_error(self) -> None:
        with self.assertRaises(ProviderError):
            CareerAnalysisService(gateway=ScriptedGateway("   ")).generate_specific_cover_letter(
                PROFILE, JOB_DESCRIPTION, company_name="Acme"
            )


class JobSearchTests(SimpleTestCase):
    def test_listings_are_scored_and_sorted(self) -> None:
        listings = json.dumps(
            [
                {"id": "a", "title": "Analytics Engineer", "company": "Acme"},
                {"title": "Data Engineer", "company": "Globex"},
            ]
        )
        gateway = ScriptedGateway(
            listings,
            '{"matchScore": 55, "matchLevel": "MODERATE"}',
            '{"matchScore": 88, "matchLevel": "EXCELLENT"}',
        )

        jobs = CareerAnalysisService(gateway=gateway).search_jobs(PROFILE, search_query="data", location="Remote")

        self.assertEqual([job["id"] for job in jobs], ["job-2", "a"])
        self.assertEqual(jobs[0]["matchScore"], 88)
        self.assertEqual(jobs[0]["company"], "Globex")
        self.assertEqual(len(gateway.calls), 3)
        self.assertIn("Analytics Engineer", gateway.calls[1][0])

    def test_scoring_failure_fails_the_search(self) -> None:
        gateway = ScriptedGateway('[{"id": "a", "title": "Role"}]', "no json here")
        with self.assertRaises(NoJsonFound):
            CareerAnalysisService(gateway=gateway).search_jobs(PROFILE)


@override_settings(TAVILY_API_KEY="")
class CompanyResearchTests(SimpleTestCase):
    def setUp(self) -> None:
        patcher = mock.patch.dict("os.environ", {"TAVILY_API_KEY": ""})
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_short_names_skip_research(self) -> None:
        gateway = ScriptedGateway()
        self.assertEqual(CareerAnalysisService(gateway=gateway).research_company("A"), NO_COMPANY_INFO)
        self.assertEqual(CareerAnalysisService(gateway=gateway).research_company(None), NO_COMPANY_INFO)
        self.assertEqual(gateway.calls, [])

    def test_provider_research(self) -> None:
        gateway = ScriptedGateway("Acme makes anvils.")
        research = CareerAnalysisService(gateway=gateway).research_company("Acme")
        self.assertEqual(research, "Acme makes anvils.")
        self.assertEqual(gateway.calls[0][1].max_output_tokens, 300)

    def test_provider_failure_degrades_to_placeholder(self) -> None:
        gateway = ScriptedGateway(ProviderError())
        with self.assertLogs("analysis.services", level="WARNING"):
            research = CareerAnalysisService(gateway=gateway).research_company("Acme")
        self.assertEqual(research, COMPANY_INFO_UNAVAILABLE)

    @override_settings(TAVILY_API_KEY="tvly-test")
    @mock.patch("analysis.services.requests.post")
    def test_tavily_research(self, post) -> None:
        response = mock.Mock()
        response.raise_for_status.return_value = None
        response.json.return_value = {
            "answer": "Acme is a manufacturer.",
            "results": [{"title": "Acme news", "content": "Acme opened a plant."}],
        }
        post.return_value = response
        gateway = ScriptedGateway()

        research = CareerAnalysisService(gateway=gateway).research_company("Acme")

        self.assertIn("Overview: Acme is a manufacturer.", research)
        self.assertIn("1. Acme news\nAcme opened a plant.", research)
        self.assertEqual(gateway.calls, [])
        self.assertEqual(post.call_args.kwargs["json"]["api_key"], "tvly-test")

    @override_settings(TAVILY_API_KEY="tvly-test")
    @mock.patch("analysis.services.requests.post", side_effect=requests.ConnectionError("down"))
    def test_tavily_failure_falls_back_to_provider(self, post) -> None:
        gateway = ScriptedGateway("Acme makes anvils.")
        with self.assertLogs("analysis.services", level="WARNING"):
            research = CareerAnalysisService(gateway=gateway).research_company("Acme")
        self.assertEqual(research, "Acme makes anvils.")
