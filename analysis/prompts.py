"""
Prompt templates for every generation kind.

Each builder is a pure function of its inputs: long free text is cut to a
fixed prefix, missing optional values render as placeholder phrases, and
nothing reads the clock or a random source. Identical inputs always produce
byte-identical prompts.
"""
from enum import Enum
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence


class PromptKind(str, Enum):
    MATCH_ANALYSIS = "match_analysis"
    PROFILE_EXTRACTION = "profile_extraction"
    COVER_LETTER = "cover_letter"
    SPECIFIC_COVER_LETTER = "specific_cover_letter"
    INTERVIEW_PREP = "interview_prep"
    RESUME_OPTIMIZATION = "resume_optimization"
    COMPANY_FIT = "company_fit"
    COMPANY_RESEARCH = "company_research"
    JOB_SEARCH = "job_search"
    JOB_SCORE = "job_score"


# Character budgets, kept well below the provider's input ceiling.
RESUME_MATCH_CHARS = 5000
JOB_MATCH_CHARS = 4000
RESUME_PROFILE_CHARS = 6000
RESUME_COVER_CHARS = 3000
JOB_COVER_CHARS = 2000
JOB_CONTEXT_CHARS = 3000
RESEARCH_CHARS = 2000
RESUME_OPTIMIZE_CHARS = 6000
JOB_OPTIMIZE_CHARS = 4000
JOB_LISTING_CHARS = 2000
COMPANY_FIT_SKILLS = 15

COMPANY_PLACEHOLDER = "the company"
POSITION_PLACEHOLDER = "the position"
DEFAULT_TONE = "professional but personable"

STANDARD_INTERVIEW_QUESTIONS = (
    "Tell me about yourself",
    "What are your strengths / weaknesses?",
    "What do you like to do outside of work?",
    "How do you handle difficult situations?",
    "Do you like working alone or in a team?",
    "Why did you leave your previous job?",
    "Why should we hire you?",
    "What do you know about this company?",
    "Have you applied anywhere else?",
    "Where do you see yourself in 5 years?",
    "What are your salary expectations?",
    "Describe your ability to work under pressure",
    "What is the most challenging thing about working with you?",
    "Talk about your achievements",
    "How do you handle conflict?",
    "What was your biggest challenge with your previous boss?",
    "Why do you want to work with us?",
    "Why do you think you deserve this job?",
    "What motivates you?",
    "Do you have any questions for us?",
)


def truncate(text: Optional[str], limit: int) -> str:
    return (text or "")[:limit]


def _or(value, placeholder: str) -> str:
    text = str(value).strip() if value is not None else ""
    return text or placeholder


def _join(items: Optional[Iterable], placeholder: str, limit: Optional[int] = None) -> str:
    values = [str(item).strip() for item in (items or []) if str(item).strip()]
    if limit is not None:
        values = values[:limit]
    return ", ".join(values) or placeholder


def _numbered(items: Sequence[str]) -> str:
    return "\n".join(f"{index}. {item}" for index, item in enumerate(items, 1))


def _candidate_block(profile: Optional[Mapping], achievements: Sequence[str]) -> str:
    profile = profile or {}
    if achievements:
        achievement_lines = _numbered([str(a) for a in achievements])
    else:
        achievement_lines = "Professional experience as detailed in resume"
    return (
        f"Name: {_or(profile.get('name'), 'Candidate')}\n"
        f"Current Role: {_or(profile.get('currentTitle'), 'Professional')}\n"
        f"Experience: {_or(profile.get('yearsExperience'), 'Several')}+ years\n"
        f"Key Skills: {_join(profile.get('hardSkills'), 'various technical skills')}\n"
        f"Key Achievements:\n{achievement_lines}"
    )


def _analysis_block(analysis: Optional[Mapping], gaps_label: str) -> str:
    analysis = analysis or {}
    score = analysis.get("overallScore")
    strengths = [s.get("skill") for s in analysis.get("strengths") or [] if isinstance(s, Mapping)]
    dealbreakers = [d.get("requirement") for d in analysis.get("dealbreakers") or [] if isinstance(d, Mapping)]
    return (
        f"- Match Score: {_or(score, 'N/A')}%\n"
        f"- Strengths: {_join(strengths, 'Multiple relevant skills')}\n"
        f"- {gaps_label}: {_join(dealbreakers, 'None identified')}"
    )


def build_match_analysis_prompt(resume_text: str = "", job_description: str = "") -> str:
    return f"""You are a brutally honest career coach who has reviewed 10,000+ resumes and knows exactly why people don't get interviews.

RESUME:
{truncate(resume_text, RESUME_MATCH_CHARS)}

JOB DESCRIPTION:
{truncate(job_description, JOB_MATCH_CHARS)}

Analyze like the hiring manager with 200 applications to review. Be specific, honest and helpful.

Return ONLY this JSON:
{{
  "overallScore": <0-100>,
  "verdict": "STRONG MATCH|MODERATE MATCH|WEAK MATCH|LONG SHOT|NOT A FIT",
  "summary": "<2-3 sentences, the honest truth about their chances>",
  "sixSecondScan": {{
    "firstImpression": "<what a recruiter notices in the first 6 seconds>",
    "standoutElements": ["<what is good>"],
    "immediateRedFlags": ["<what makes them move to the next resume>"],
    "wouldReadMore": true/false,
    "whyOrWhyNot": "<explanation>"
  }},
  "atsAnalysis": {{
    "score": <0-100>,
    "likelyToPass": true/false,
    "keywordsFound": ["<matches from the job description>"],
    "criticalKeywordsMissing": ["<missing keywords that cause auto-rejection>"],
    "suggestionToPassATS": "<specific fix>"
  }},
  "qualificationGap": {{
    "experienceRequired": "<what the job asks for>",
    "experienceYouHave": "<what the resume shows>",
    "gapAssessment": "OVER_QUALIFIED|GOOD_MATCH|SLIGHTLY_UNDER|SIGNIFICANTLY_UNDER",
    "yearsGap": "<e.g. 'JD wants 5+, you show ~3'>",
    "howToCloseGap": "<if possible>"
  }},
  "dealbreakers": [
    {{"requirement": "<from the job description>", "status": "MISSING|WEAK", "urgentFix": "<what to do>"}}
  ],
  "strengths": [
    {{"skill": "<what you have>", "howItHelps": "<why it matters>", "howToHighlight": "<how to make it visible>"}}
  ],
  "hiddenRedFlags": [
    {{"issue": "<concern>", "whatRecruiterThinks": "<assumption>", "howToAddress": "<fix>"}}
  ],
  "competitorAnalysis": {{
    "typicalWinningCandidate": "<who gets this job>",
    "howYouCompare": "<honest comparison>",
    "yourCompetitiveAdvantage": "<what you have>",
    "yourBiggestDisadvantage": "<where you fall short>"
  }},
  "applicationStrategy": {{
    "shouldYouApply": true/false,
    "confidenceLevel": "HIGH|MEDIUM|LOW",
    "bestApproach": "APPLY_NOW|CUSTOMIZE_HEAVILY|GET_REFERRAL|SKIP",
    "timeWorthInvesting": "<how much time>"
  }},
  "resumeRewrites": [
    {{"section": "<part>", "currentText": "<weak text>", "rewrittenText": "<better text>", "whyBetter": "<reason>"}}
  ],
  "prioritizedActionPlan": {{
    "before_applying": ["<must do>"],
    "quick_wins": ["<easy fixes>"],
    "worth_the_effort": ["<harder but valuable>"],
    "long_term": ["<for the future>"]
  }},
  "interviewProbability": {{
    "percentage": <0-100>,
    "reasoning": "<why>",
    "whatWouldIncreaseOdds": "<specific change>"
  }},
  "bottomLine": {{
    "honestAssessment": "<real talk>",
    "oneThingToFix": "<most important fix>",
    "encouragement": "<something positive>"
  }}
}}

List at most 3 resumeRewrites, most impactful first."""


def build_profile_extraction_prompt(resume_text: str = "") -> str:
    return f"""Extract a structured profile from this resume. Return ONLY JSON.

RESUME:
{truncate(resume_text, RESUME_PROFILE_CHARS)}

Return this exact JSON structure:
{{
  "name": "<full name>",
  "email": "<email if found>",
  "phone": "<phone if found>",
  "location": "<city, state/country>",
  "currentTitle": "<most recent job title>",
  "yearsExperience": <number>,
  "experienceLevel": "ENTRY|MID|SENIOR|LEAD|EXECUTIVE",
  "targetTitles": ["<job titles they could apply for>"],
  "targetIndustries": ["<industries they fit>"],
  "hardSkills": ["<technical skills, tools, languages>"],
  "softSkills": ["<communication, leadership, etc>"],
  "certifications": ["<any certifications>"],
  "education": {{
    "degree": "<highest degree>",
    "field": "<field of study>",
    "school": "<school name>"
  }},
  "summary": "<2-3 sentence professional summary>",
  "strengths": ["<top 3 strengths>"],
  "achievements": ["<quantified achievements copied from the resume>"],
  "searchKeywords": ["<keywords to use when searching for jobs>"]
}}"""


def build_cover_letter_prompt(
    resume_text: str = "",
    job_description: str = "",
    job_title: Optional[str] = None,
    company_name: Optional[str] = None,
    tone: Optional[str] = None,
) -> str:
    return f"""Write a compelling cover letter.

CANDIDATE:
{truncate(resume_text, RESUME_COVER_CHARS)}

JOB: {_or(job_title, POSITION_PLACEHOLDER)} at {_or(company_name, COMPANY_PLACEHOLDER)}
{truncate(job_description, JOB_COVER_CHARS)}

TONE: {_or(tone, DEFAULT_TONE)}

Write a cover letter that:
1. Opens with a hook (NOT "I am writing to apply...")
2. Connects specific experience to the job requirements
3. Includes 2-3 achievements with numbers
4. Shows genuine interest in the company
5. Ends with a confident call to action
6. Is 250-350 words

Return ONLY the cover letter text, no JSON or labels."""


def build_specific_cover_letter_prompt(
    profile: Optional[Mapping] = None,
    job_description: str = "",
    company_name: Optional[str] = None,
    company_research: str = "",
    achievements: Sequence[str] = (),
    analysis: Optional[Mapping] = None,
) -> str:
    company = _or(company_name, COMPANY_PLACEHOLDER)
    return f"""You are a cover letter expert. Write a professional, factual cover letter using ONLY the information provided below.

CANDIDATE PROFILE:
{_candidate_block(profile, achievements)}

COMPANY INFORMATION ({company}):
{truncate(company_research, RESEARCH_CHARS) or 'Limited public information available about this company.'}

JOB DESCRIPTION:
{truncate(job_description, JOB_CONTEXT_CHARS)}

ANALYSIS INSIGHTS:
{_analysis_block(analysis, 'Areas to Address')}

Write the letter as flowing paragraphs without headers:
1. OPENING: interest in the specific role at {company}, connected to your background.
2. WHY THIS COMPANY: reference only facts from the COMPANY INFORMATION section.
3. RELEVANT EXPERIENCE: connect your skills to requirements named in the job description.
4. ACHIEVEMENTS: use ONLY the achievements listed above; do not embellish or add metrics.
5. VALUE PROPOSITION: tie your background to needs stated in the job description or research.
6. CLOSING: enthusiasm and a professional call to action.

RULES:
- Do not invent company facts, achievements or metrics.
- If the company information is limited, focus on the role instead of the company.
- Keep it under 400 words, first person, professional tone.

Return ONLY the cover letter text, no additional commentary."""


def build_interview_prep_prompt(
    profile: Optional[Mapping] = None,
    job_description: str = "",
    company_name: Optional[str] = None,
    company_research: str = "",
    achievements: Sequence[str] = (),
    analysis: Optional[Mapping] = None,
) -> str:
    company = _or(company_name, COMPANY_PLACEHOLDER)
    return f"""You are an interview preparation coach. Generate personalized answers for interview questions using ONLY the information provided below.

CANDIDATE PROFILE:
{_candidate_block(profile, achievements)}

COMPANY INFORMATION ({company}):
{truncate(company_research, RESEARCH_CHARS) or 'Limited public information available about this company.'}

JOB DESCRIPTION:
{truncate(job_description, JOB_CONTEXT_CHARS)}

ANALYSIS INSIGHTS:
{_analysis_block(analysis, 'Gaps/Weaknesses')}

INTERVIEW QUESTIONS TO ANSWER:
{_numbered(STANDARD_INTERVIEW_QUESTIONS)}

For EACH question, in the order given:
1. Repeat the question text exactly
2. Give a personalized suggested answer grounded in the candidate's resume, achievements and this job
3. For weakness or gap questions, acknowledge honestly and show how it is being addressed
4. Keep each answer to 2-4 sentences

Return ONLY a JSON array with this structure:
[
  {{
    "question": "Tell me about yourself",
    "suggestedAnswer": "<answer>",
    "tips": "<brief tip on how to deliver this answer>"
  }}
]

Do not fabricate achievements, skills or experience. Return ONLY the JSON array, no additional text."""


def build_resume_optimization_prompt(resume_text: str = "", job_description: str = "") -> str:
    return f"""You are a professional resume writer and ATS optimization expert.

Read the ACTUAL resume below. Base every finding and rewrite on its real content; never use example data or invent experience.

RESUME:
{truncate(resume_text, RESUME_OPTIMIZE_CHARS)}

JOB DESCRIPTION:
{truncate(job_description, JOB_OPTIMIZE_CHARS)}

Audit the resume with this 10-point checklist, then provide optimized sections:
1. Target Role Alignment (3 checks)
2. Summary Section (4 checks)
3. Experience Section (4 checks)
4. Bullet Quality (6 checks)
5. Skills Section (4 checks)
6. Formatting & Readability (4 checks)
7. ATS Optimization (4 checks)
8. Results & Impact Test (3 checks)
9. Customization Check (4 checks)
10. Final Sanity (4 checks)

Return ONLY this JSON, no markdown:
{{
  "auditScore": {{
    "total": "<passed sections>/10",
    "sections": [
      {{"name": "Target Role Alignment", "passed": <int>, "total": 3, "issues": ["<actual issue>"]}}
    ]
  }},
  "sections": [
    {{"title": "Summary", "before": "<actual summary>", "after": "<optimized summary>", "changes": ["<what changed and why>"]}},
    {{"title": "Experience - <actual job title>", "bullets": [
      {{"before": "<actual bullet>", "after": "<optimized bullet>", "changes": ["<what changed>"]}}
    ]}},
    {{"title": "Skills", "before": ["<actual skills>"], "after": ["<optimized skill list>"], "changes": ["<what changed>"]}}
  ],
  "changesSummary": "<summary of what was changed>"
}}

The auditScore.sections list must contain all 10 checklist sections in the order above."""


def build_company_fit_prompt(
    profile: Optional[Mapping] = None,
    company_name: Optional[str] = None,
    industry: Optional[str] = None,
    role_keywords: Sequence[str] = (),
) -> str:
    profile = profile or {}
    return f"""You are a career strategist. Analyze the fit between a candidate and a target company.

CANDIDATE:
Title: {_or(profile.get('currentTitle'), 'Professional')}
Skills: {_join(profile.get('hardSkills'), 'Not specified', limit=COMPANY_FIT_SKILLS)}
Target Roles: {_join(profile.get('targetTitles'), 'Not specified')}

TARGET COMPANY:
Name: {_or(company_name, COMPANY_PLACEHOLDER)}
Industry: {_or(industry, 'Unknown')}
Targeting roles containing: {_join(role_keywords, 'General Match')}

Decide whether this candidate is a realistic fit for this company based purely on high-level domain and skill alignment.

Return ONLY JSON:
{{
  "score": <0-100 realistic probability>,
  "status": "Strong Match|Potential Match|Stretch|Pivot Required",
  "analysis": "<one sentence explaining why>"
}}"""


def build_company_research_prompt(company_name: Optional[str] = None) -> str:
    return f"""Provide factual, publicly known information about {_or(company_name, COMPANY_PLACEHOLDER)}. Include:
1. What industry or sector they operate in
2. Main products or services (if well known)
3. Company size or type (startup, enterprise, etc.) if publicly known

Keep it brief (3-4 sentences). ONLY include verified, publicly known facts. If you do not have reliable information, say "Limited public information available about this company.\""""


def build_job_search_prompt(
    profile: Optional[Mapping] = None,
    search_query: Optional[str] = None,
    location: Optional[str] = None,
) -> str:
    profile = profile or {}
    target_titles = profile.get("targetTitles") or []
    query = _or(search_query or (target_titles[0] if target_titles else None) or profile.get("currentTitle"), POSITION_PLACEHOLDER)
    where = _or(location or profile.get("location"), "Remote")
    return f"""Generate 8 realistic job listings that would match someone with this profile:

CANDIDATE PROFILE:
- Current Title: {_or(profile.get('currentTitle'), 'Professional')}
- Experience: {_or(profile.get('yearsExperience'), 'Several')} years
- Skills: {_join(profile.get('hardSkills'), 'Not specified', limit=10)}
- Target Roles: {_join(target_titles, 'Not specified')}

SEARCH: "{query}" in "{where}"

Return ONLY a JSON array of jobs:
[
  {{
    "id": "<unique id>",
    "title": "<job title>",
    "company": "<realistic company name>",
    "location": "<city or Remote>",
    "salary": "<salary range if typical>",
    "jobType": "FULL_TIME|CONTRACT|PART_TIME",
    "postedDate": "<X days ago>",
    "url": "<placeholder url>",
    "description": "<3-4 sentence job description>",
    "requirements": ["<requirement>"],
    "niceToHave": ["<nice to have>"],
    "benefits": ["<benefit>"]
  }}
]

Include a mix: 2 perfect matches, 3 good matches, 2 stretch matches and 1 reach. Vary company sizes and keep requirements realistic."""


def build_job_score_prompt(profile: Optional[Mapping] = None, job: Optional[Mapping] = None) -> str:
    profile = profile or {}
    job = job or {}
    return f"""Score this job match. Return ONLY JSON.

CANDIDATE:
- Title: {_or(profile.get('currentTitle'), 'Professional')}
- Experience: {_or(profile.get('yearsExperience'), 'Several')} years ({_or(profile.get('experienceLevel'), 'Unknown level')})
- Skills: {_join(profile.get('hardSkills'), 'Not specified')}

JOB:
- Title: {_or(job.get('title'), POSITION_PLACEHOLDER)}
- Description: {truncate(job.get('description'), JOB_LISTING_CHARS) or 'Not provided'}
- Requirements: {_join(job.get('requirements'), 'Not specified')}
- Nice to have: {_join(job.get('niceToHave'), 'Not specified')}

Return:
{{
  "matchScore": <0-100>,
  "matchLevel": "EXCELLENT|GOOD|MODERATE|LOW",
  "recommendation": "APPLY_NOW|WORTH_APPLYING|CUSTOMIZE_FIRST|SKIP",
  "matchingSkills": ["<skills you have that match>"],
  "missingSkills": ["<required skills you lack>"],
  "quickTake": "<one sentence on why to apply or not>"
}}"""


PROMPT_BUILDERS: Dict[PromptKind, Callable[..., str]] = {
    PromptKind.MATCH_ANALYSIS: build_match_analysis_prompt,
    PromptKind.PROFILE_EXTRACTION: build_profile_extraction_prompt,
    PromptKind.COVER_LETTER: build_cover_letter_prompt,
    PromptKind.SPECIFIC_COVER_LETTER: build_specific_cover_letter_prompt,
    PromptKind.INTERVIEW_PREP: build_interview_prep_prompt,
    PromptKind.RESUME_OPTIMIZATION: build_resume_optimization_prompt,
    PromptKind.COMPANY_FIT: build_company_fit_prompt,
    PromptKind.COMPANY_RESEARCH: build_company_research_prompt,
    PromptKind.JOB_SEARCH: build_job_search_prompt,
    PromptKind.JOB_SCORE: build_job_score_prompt,
}


def build_prompt(kind, fields: Optional[Mapping] = None) -> str:
    """
    Build the prompt for ``kind`` from a mapping of template fields.

    Raises ValueError for an unknown kind.
    """
    builder = PROMPT_BUILDERS[PromptKind(kind)]
    return builder(**dict(fields or {}))
