"""
Analysis app services

Orchestrates the prompt-and-parse pipeline behind every generation feature:

- Prompt building from truncated, untrusted input text
- One completion call through the provider gateway
- JSON extraction from the free-text reply
- Schema normalization into immutable canonical results

Provider and parsing failures propagate to the caller untouched; a request
either yields a fully normalized result or fails with a typed error.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests
from django.conf import settings

from . import normalizers
from .exceptions import InvalidRequest, ProviderError
from .extraction import extract_json
from .gateway import CompletionConfig, CompletionGateway, get_gateway
from .normalizers import CanonicalResult, Schema
from .prompts import PromptKind, build_prompt

logger = logging.getLogger(__name__)


MIN_JOB_DESCRIPTION_CHARS = 50
MIN_COMPANY_NAME_CHARS = 2

NO_COMPANY_INFO = "No company information available."
LIMITED_COMPANY_INFO = "Limited company information found."
COMPANY_INFO_UNAVAILABLE = "Unable to retrieve company information."

TAVILY_SEARCH_URL = "https://api.tavily.com/search"


class CareerAnalysisService:
    """
    Service for resume analysis and generation features.
    """

    # temperature, max output tokens, timeout (seconds) per prompt kind
    COMPLETION_DEFAULTS = {
        PromptKind.MATCH_ANALYSIS: (0.3, 3000, 120),
        PromptKind.PROFILE_EXTRACTION: (0.2, 1500, 30),
        PromptKind.COVER_LETTER: (0.7, 800, 60),
        PromptKind.SPECIFIC_COVER_LETTER: (0.7, 1500, 60),
        PromptKind.INTERVIEW_PREP: (0.5, 4000, 120),
        PromptKind.RESUME_OPTIMIZATION: (0.3, 4000, 120),
        PromptKind.COMPANY_FIT: (0.1, 500, 30),
        PromptKind.COMPANY_RESEARCH: (0.1, 300, 30),
        PromptKind.JOB_SEARCH: (0.7, 3000, 120),
        PromptKind.JOB_SCORE: (0.2, 500, 30),
    }

    def __init__(self, gateway: Optional[CompletionGateway] = None):
        """
        Use ``gateway`` when given, otherwise the configured provider.
        """
        self.gateway = gateway or get_gateway()

    @classmethod
    def completion_config(cls, kind: PromptKind) -> CompletionConfig:
        temperature, max_output_tokens, timeout = cls.COMPLETION_DEFAULTS[kind]
        return CompletionConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            timeout=timeout,
        )

    # --------------------------------------------------------------------- #
    # Public helpers                                                        #
    # --------------------------------------------------------------------- #

    def analyze_match(self, resume_text: str, job_description: str) -> CanonicalResult:
        """
        Score a resume against a job description.

        Raises:
            InvalidRequest: job description shorter than 50 characters.
        """
        self.validate_job_description(job_description)
        return self._run(
            PromptKind.MATCH_ANALYSIS,
            {"resume_text": resume_text, "job_description": job_description},
            normalizers.MATCH_ANALYSIS,
        )

    def extract_profile(self, resume_text: str) -> CanonicalResult:
        return self._run(
            PromptKind.PROFILE_EXTRACTION,
            {"resume_text": resume_text},
            normalizers.PROFILE,
        )

    def optimize_resume(self, resume_text: str, job_description: str) -> CanonicalResult:
        self._require_text(job_description, "Job description is required.")
        return self._run(
            PromptKind.RESUME_OPTIMIZATION,
            {"resume_text": resume_text, "job_description": job_description},
            normalizers.RESUME_OPTIMIZATION,
        )

    def generate_interview_prep(
        self,
        profile: Optional[Mapping[str, Any]],
        job_description: str,
        company_name: Optional[str] = None,
        company_research: str = "",
        achievements: Sequence[str] = (),
        analysis: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalResult:
        self._require_text(job_description, "Job description is required.")
        return self._run(
            PromptKind.INTERVIEW_PREP,
            {
                "profile": profile,
                "job_description": job_description,
                "company_name": company_name,
                "company_research": company_research,
                "achievements": list(achievements or []),
                "analysis": analysis,
            },
            normalizers.INTERVIEW_PREP,
        )

    def analyze_company_fit(
        self,
        profile: Optional[Mapping[str, Any]],
        company_name: str,
        industry: Optional[str] = None,
        role_keywords: Sequence[str] = (),
    ) -> CanonicalResult:
        self._require_text(company_name, "Company name is required.")
        return self._run(
            PromptKind.COMPANY_FIT,
            {
                "profile": profile,
                "company_name": company_name,
                "industry": industry,
                "role_keywords": list(role_keywords or []),
            },
            normalizers.COMPANY_FIT,
        )

    def generate_cover_letter(
        self,
        resume_text: str,
        job_description: str,
        job_title: Optional[str] = None,
        company_name: Optional[str] = None,
        tone: Optional[str] = None,
    ) -> str:
        self._require_text(job_description, "Job description is required.")
        return self._run_text(
            PromptKind.COVER_LETTER,
            {
                "resume_text": resume_text,
                "job_description": job_description,
                "job_title": job_title,
                "company_name": company_name,
                "tone": tone,
            },
        )

    def generate_specific_cover_letter(
        self,
        profile: Optional[Mapping[str, Any]],
        job_description: str,
        company_name: Optional[str] = None,
        company_research: str = "",
        achievements: Sequence[str] = (),
        analysis: Optional[Mapping[str, Any]] = None,
    ) -> str:
        self._require_text(job_description, "Job description is required.")
        return self._run_text(
            PromptKind.SPECIFIC_COVER_LETTER,
            {
                "profile": profile,
                "job_description": job_description,
                "company_name": company_name,
                "company_research": company_research,
                "achievements": list(achievements or []),
                "analysis": analysis,
            },
        )

    def research_company(self, company_name: Optional[str]) -> str:
        """
        Gather a short factual blurb about a company for prompt context.

        Uses Tavily search when TAVILY_API_KEY is configured and the provider
        otherwise. Research only feeds other prompts, so failures degrade to a
        placeholder sentence instead of failing the request.
        """
        name = (company_name or "").strip()
        if len(name) < MIN_COMPANY_NAME_CHARS:
            return NO_COMPANY_INFO

        tavily_key = os.environ.get("TAVILY_API_KEY") or getattr(settings, "TAVILY_API_KEY", "")
        if tavily_key:
            try:
                return self._search_company(name, tavily_key)
            except (requests.RequestException, ValueError) as exc:
                logger.warning("Tavily research for '%s' failed: %s", name, exc)

        try:
            research = self._run_text(PromptKind.COMPANY_RESEARCH, {"company_name": name})
        except ProviderError as exc:
            logger.warning("Company research for '%s' failed: %s", name, exc)
            return COMPANY_INFO_UNAVAILABLE
        return research

    def search_jobs(
        self,
        profile: Optional[Mapping[str, Any]],
        search_query: Optional[str] = None,
        location: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Generate job listings for a profile and score each one.

        Returns plain dicts sorted by match score, best first.
        """
        listings = self._run(
            PromptKind.JOB_SEARCH,
            {"profile": profile, "search_query": search_query, "location": location},
            normalizers.JOB_LISTINGS,
        )

        scored_jobs = []
        for index, job in enumerate(listings.to_dict()["jobs"], 1):
            if not job["id"]:
                job["id"] = f"job-{index}"
            score = self.score_job(profile, job)
            scored_jobs.append({**job, **score.to_dict()})

        scored_jobs.sort(key=lambda job: job["matchScore"], reverse=True)
        logger.info("Generated %d scored job listings", len(scored_jobs))
        return scored_jobs

    def score_job(self, profile: Optional[Mapping[str, Any]], job: Mapping[str, Any]) -> CanonicalResult:
        return self._run(
            PromptKind.JOB_SCORE,
            {"profile": profile, "job": job},
            normalizers.JOB_SCORE,
        )

    @staticmethod
    def validate_job_description(job_description: Optional[str]) -> str:
        text = (job_description or "").strip()
        if len(text) < MIN_JOB_DESCRIPTION_CHARS:
            raise InvalidRequest(
                f"Job description must be at least {MIN_JOB_DESCRIPTION_CHARS} characters."
            )
        return text

    # --------------------------------------------------------------------- #
    # Internal helpers                                                      #
    # --------------------------------------------------------------------- #

    def _require_text(self, value: Optional[str], message: str) -> None:
        if not (value or "").strip():
            raise InvalidRequest(message)

    def _complete(self, kind: PromptKind, fields: Mapping[str, Any]) -> str:
        prompt = build_prompt(kind, fields)
        return self.gateway.complete(prompt, self.completion_config(kind))

    def _run(self, kind: PromptKind, fields: Mapping[str, Any], schema: Schema) -> CanonicalResult:
        raw_text = self._complete(kind, fields)
        parsed = extract_json(raw_text, schema.shape)
        result = schema.normalize(parsed)
        logger.info("%s completed (%d required fields defaulted)", kind.value, len(result.missing_required))
        return result

    def _run_text(self, kind: PromptKind, fields: Mapping[str, Any]) -> str:
        text = self._complete(kind, fields).strip()
        if not text:
            raise ProviderError("The AI provider returned an empty response. Please try again.")
        return text

    def _search_company(self, company_name: str, api_key: str) -> str:
        response = requests.post(
            TAVILY_SEARCH_URL,
            json={
                "api_key": api_key,
                "query": f"{company_name} company products services recent news",
                "search_depth": "basic",
                "max_results": 5,
                "include_answer": True,
            },
            timeout=15,
        )
        response.raise_for_status()
        payload = response.json()

        parts = []
        if payload.get("answer"):
            parts.append(f"Overview: {payload['answer']}")
        results = payload.get("results") or []
        if results:
            lines = ["Key Information:"]
            for index, result in enumerate(results[:3], 1):
                lines.append(f"{index}. {result.get('title', '')}\n{result.get('content', '')}")
            parts.append("\n".join(lines))
        return "\n\n".join(parts) or LIMITED_COMPANY_INFO
