"""
Schema-driven normalization of parsed model output.

A schema declares every field a result exposes, its expected shape and its
default. ``Schema.normalize`` walks the parsed value once and returns a
``CanonicalResult`` in which every declared field is present: genuine values
are kept, safely coercible values are coerced, scores are clamped to 0-100,
top-N lists are truncated in the model's order, and anything else falls back
to the documented default. Fields the schema does not declare are dropped.
"""
import copy
import logging
import math
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .prompts import STANDARD_INTERVIEW_QUESTIONS

logger = logging.getLogger(__name__)


INVALID = object()


def freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


@dataclass(frozen=True)
class CanonicalResult:
    """
    Fully populated, read-only result record.

    ``missing_required`` names required fields the model left out and that
    were filled with their defaults.
    """

    kind: str
    data: Mapping[str, Any]
    missing_required: Tuple[str, ...] = ()

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """
        Plain, JSON-serializable copy of the result.
        """
        return thaw(self.data)


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        cleaned = value.strip().rstrip("%+").strip().replace(",", "")
        try:
            number = float(cleaned)
        except ValueError:
            return None
        if number.is_integer():
            number = int(number)
    else:
        return None
    if isinstance(number, float) and math.isnan(number):
        return None
    return number


class Field:
    """
    Base field: ``clean`` returns the normalized value or ``INVALID``.
    """

    default: Any = None

    def __init__(self, default: Any = INVALID, required: bool = False):
        if default is not INVALID:
            self.default = default
        self.required = required

    def get_default(self) -> Any:
        return copy.deepcopy(self.default)

    def clean(self, value: Any, path: str, missing: List[str]) -> Any:
        raise NotImplementedError


class StringField(Field):
    default = ""

    def clean(self, value, path, missing):
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return INVALID


class TextField(Field):
    """
    Free text that the model may return either as a string or a list of strings.
    """

    default = ""

    def clean(self, value, path, missing):
        if isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            items = [item for item in value if isinstance(item, (str, int, float)) and not isinstance(item, bool)]
            return [item if isinstance(item, str) else str(item) for item in items]
        return INVALID


class NumberField(Field):
    default = 0

    def __init__(self, default: Any = INVALID, required: bool = False, minimum: float = 0, maximum: Optional[float] = None):
        super().__init__(default=default, required=required)
        self.minimum = minimum
        self.maximum = maximum

    def clean(self, value, path, missing):
        number = _to_number(value)
        if number is None:
            return INVALID
        if self.minimum is not None:
            number = max(self.minimum, number)
        if self.maximum is not None:
            number = min(self.maximum, number)
        if math.isinf(number):
            return INVALID
        return number


class ScoreField(NumberField):
    """
    0-100 score; out-of-range values are clamped silently.

    Unset scores default to the midpoint of the range.
    """

    def __init__(self, default: Any = INVALID, required: bool = False):
        super().__init__(default=50 if default is INVALID else default, required=required, minimum=0, maximum=100)


class IntegerField(NumberField):
    def clean(self, value, path, missing):
        number = super().clean(value, path, missing)
        if number is INVALID:
            return INVALID
        return int(number)


class BooleanField(Field):
    """
    Tri-state boolean; unknown is None.
    """

    TRUE_VALUES = {"true", "yes", "y"}
    FALSE_VALUES = {"false", "no", "n"}

    def clean(self, value, path, missing):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in self.TRUE_VALUES:
                return True
            if lowered in self.FALSE_VALUES:
                return False
        return INVALID


def _enum_key(value: str) -> str:
    return re.sub(r"\s+", " ", re.sub(r"[_\-]+", " ", value)).strip().upper()


class EnumField(Field):
    default = ""

    def __init__(self, choices: Sequence[str], default: Any = INVALID, required: bool = False):
        super().__init__(default=default, required=required)
        self.choices = tuple(choices)
        self._lookup = {_enum_key(choice): choice for choice in self.choices}

    def clean(self, value, path, missing):
        if not isinstance(value, str):
            return INVALID
        if value in self.choices:
            return value
        return self._lookup.get(_enum_key(value), INVALID)


class ListField(Field):
    """
    List of ``item`` values; unusable items are dropped and at most
    ``max_items`` entries are kept, in their original order.
    """

    def __init__(self, item: Field, max_items: Optional[int] = None, required: bool = False):
        super().__init__(default=[], required=required)
        self.item = item
        self.max_items = max_items

    def clean(self, value, path, missing):
        if not isinstance(value, (list, tuple)):
            return INVALID
        items = []
        for index, raw in enumerate(value):
            if raw is None:
                continue
            cleaned = self.item.clean(raw, f"{path}[{index}]", missing)
            if cleaned is INVALID:
                logger.debug("Dropping unusable item at %s[%d]", path, index)
                continue
            items.append(cleaned)
        if self.max_items is not None:
            items = items[: self.max_items]
        return items


class ObjectField(Field):
    def __init__(self, schema: "Schema", required: bool = False):
        super().__init__(required=required)
        self.schema = schema

    def get_default(self):
        return self.schema.normalize_mapping({}, "", [])

    def clean(self, value, path, missing):
        if not isinstance(value, Mapping):
            return INVALID
        return self.schema.normalize_mapping(value, f"{path}.", missing)


class AlignedListField(Field):
    """
    Fixed, ordered list of entries keyed by a label.

    Model entries are matched to labels by text (case-insensitive), falling
    back to position; labels without a usable entry get a defaulted record.
    The label field always carries the canonical label text.
    """

    def __init__(
        self,
        labels: Sequence[str],
        label_key: str,
        schema: "Schema",
        label_defaults: Optional[Mapping[str, Mapping[str, Any]]] = None,
        required: bool = False,
    ):
        super().__init__(required=required)
        self.labels = tuple(labels)
        self.label_key = label_key
        self.schema = schema
        self.label_defaults = label_defaults or {}

    def _blank(self, label: str) -> Dict[str, Any]:
        entry = self.schema.normalize_mapping({}, "", [])
        entry.update(copy.deepcopy(dict(self.label_defaults.get(label, {}))))
        entry[self.label_key] = label
        return entry

    def get_default(self):
        return [self._blank(label) for label in self.labels]

    def clean(self, value, path, missing):
        if not isinstance(value, (list, tuple)):
            return INVALID

        entries = []
        for index, raw in enumerate(value):
            if isinstance(raw, Mapping):
                entries.append(self.schema.normalize_mapping(raw, f"{path}[{index}].", []))
            else:
                entries.append(None)

        known = {label.lower() for label in self.labels}
        by_label = {}
        for index, entry in enumerate(entries):
            if entry is None:
                continue
            key = str(entry.get(self.label_key, "")).strip().lower()
            if key in known and key not in by_label:
                by_label[key] = index

        used = set()
        aligned = []
        for position, label in enumerate(self.labels):
            index = by_label.get(label.lower())
            if index is None and position < len(entries) and entries[position] is not None:
                if position not in used and position not in by_label.values():
                    index = position
            if index is None or index in used:
                aligned.append(self._blank(label))
                continue
            used.add(index)
            entry = dict(entries[index])
            entry[self.label_key] = label
            aligned.append(entry)
        return aligned


class Schema:
    """
    Ordered set of named fields.

    ``shape`` is the top-level JSON container the model is asked for; array
    schemas store the list under ``root``.
    """

    def __init__(self, name: str, fields: Mapping[str, Field], shape: str = "object", root: Optional[str] = None):
        if shape == "array" and not root:
            raise ValueError("Array schemas need a root field name.")
        self.name = name
        self.fields = dict(fields)
        self.shape = shape
        self.root = root

    def normalize_mapping(self, raw: Mapping, path: str, missing: List[str]) -> Dict[str, Any]:
        result = {}
        for name, field in self.fields.items():
            field_path = f"{path}{name}"
            value = raw.get(name) if isinstance(raw, Mapping) else None
            cleaned = INVALID if value is None else field.clean(value, field_path, missing)
            if cleaned is INVALID:
                if value is not None:
                    logger.debug("Field %s had unusable %s value; using default", field_path, type(value).__name__)
                if field.required:
                    missing.append(field_path)
                cleaned = field.get_default()
            result[name] = cleaned
        return result

    def normalize(self, parsed: Any) -> CanonicalResult:
        if self.shape == "array" and not (isinstance(parsed, Mapping) and self.root in parsed):
            parsed = {self.root: parsed}
        if not isinstance(parsed, Mapping):
            logger.warning("%s result is a %s, expected an object", self.name, type(parsed).__name__)
            parsed = {}

        missing: List[str] = []
        data = self.normalize_mapping(parsed, "", missing)
        if missing:
            logger.warning("%s result defaulted required fields: %s", self.name, ", ".join(missing))
        return CanonicalResult(kind=self.name, data=freeze(data), missing_required=tuple(missing))


def normalize(parsed: Any, schema: Schema) -> CanonicalResult:
    return schema.normalize(parsed)


def _strings(max_items: Optional[int] = None) -> ListField:
    return ListField(StringField(), max_items=max_items)


def _object(schema_name: str, **fields: Field) -> ObjectField:
    return ObjectField(Schema(schema_name, fields))


VERDICTS = ("STRONG MATCH", "MODERATE MATCH", "WEAK MATCH", "LONG SHOT", "NOT A FIT")
GAP_ASSESSMENTS = ("OVER_QUALIFIED", "GOOD_MATCH", "SLIGHTLY_UNDER", "SIGNIFICANTLY_UNDER")
CONFIDENCE_LEVELS = ("HIGH", "MEDIUM", "LOW")
APPLICATION_APPROACHES = ("APPLY_NOW", "CUSTOMIZE_HEAVILY", "GET_REFERRAL", "SKIP")
EXPERIENCE_LEVELS = ("ENTRY", "MID", "SENIOR", "LEAD", "EXECUTIVE")
COMPANY_FIT_STATUSES = ("Strong Match", "Potential Match", "Stretch", "Pivot Required")
JOB_TYPES = ("FULL_TIME", "CONTRACT", "PART_TIME")
MATCH_LEVELS = ("EXCELLENT", "GOOD", "MODERATE", "LOW")
JOB_RECOMMENDATIONS = ("APPLY_NOW", "WORTH_APPLYING", "CUSTOMIZE_FIRST", "SKIP")

MAX_RESUME_REWRITES = 3
MAX_PROFILE_STRENGTHS = 3
MAX_JOB_LISTINGS = 8

AUDIT_CHECKLIST = (
    ("Target Role Alignment", 3),
    ("Summary Section", 4),
    ("Experience Section", 4),
    ("Bullet Quality", 6),
    ("Skills Section", 4),
    ("Formatting & Readability", 4),
    ("ATS Optimization", 4),
    ("Results & Impact Test", 3),
    ("Customization Check", 4),
    ("Final Sanity", 4),
)


MATCH_ANALYSIS = Schema(
    "match_analysis",
    {
        "overallScore": ScoreField(required=True),
        "verdict": EnumField(VERDICTS, required=True),
        "summary": StringField(required=True),
        "sixSecondScan": _object(
            "six_second_scan",
            firstImpression=StringField(),
            standoutElements=_strings(),
            immediateRedFlags=_strings(),
            wouldReadMore=BooleanField(),
            whyOrWhyNot=StringField(),
        ),
        "atsAnalysis": _object(
            "ats_analysis",
            score=ScoreField(),
            likelyToPass=BooleanField(),
            keywordsFound=_strings(),
            criticalKeywordsMissing=_strings(),
            suggestionToPassATS=StringField(),
        ),
        "qualificationGap": _object(
            "qualification_gap",
            experienceRequired=StringField(),
            experienceYouHave=StringField(),
            gapAssessment=EnumField(GAP_ASSESSMENTS),
            yearsGap=StringField(),
            howToCloseGap=StringField(),
        ),
        "dealbreakers": ListField(
            _object(
                "dealbreaker",
                requirement=StringField(),
                status=EnumField(("MISSING", "WEAK")),
                urgentFix=StringField(),
            )
        ),
        "strengths": ListField(
            _object(
                "strength",
                skill=StringField(),
                howItHelps=StringField(),
                howToHighlight=StringField(),
            )
        ),
        "hiddenRedFlags": ListField(
            _object(
                "red_flag",
                issue=StringField(),
                whatRecruiterThinks=StringField(),
                howToAddress=StringField(),
            )
        ),
        "competitorAnalysis": _object(
            "competitor_analysis",
            typicalWinningCandidate=StringField(),
            howYouCompare=StringField(),
            yourCompetitiveAdvantage=StringField(),
            yourBiggestDisadvantage=StringField(),
        ),
        "applicationStrategy": _object(
            "application_strategy",
            shouldYouApply=BooleanField(),
            confidenceLevel=EnumField(CONFIDENCE_LEVELS),
            bestApproach=EnumField(APPLICATION_APPROACHES),
            timeWorthInvesting=StringField(),
        ),
        "resumeRewrites": ListField(
            _object(
                "resume_rewrite",
                section=StringField(),
                currentText=StringField(),
                rewrittenText=StringField(),
                whyBetter=StringField(),
            ),
            max_items=MAX_RESUME_REWRITES,
        ),
        "prioritizedActionPlan": _object(
            "action_plan",
            before_applying=_strings(),
            quick_wins=_strings(),
            worth_the_effort=_strings(),
            long_term=_strings(),
        ),
        "interviewProbability": _object(
            "interview_probability",
            percentage=ScoreField(),
            reasoning=StringField(),
            whatWouldIncreaseOdds=StringField(),
        ),
        "bottomLine": _object(
            "bottom_line",
            honestAssessment=StringField(),
            oneThingToFix=StringField(),
            encouragement=StringField(),
        ),
    },
)


PROFILE = Schema(
    "profile",
    {
        "name": StringField(required=True),
        "email": StringField(),
        "phone": StringField(),
        "location": StringField(),
        "currentTitle": StringField(),
        "yearsExperience": NumberField(),
        "experienceLevel": EnumField(EXPERIENCE_LEVELS),
        "targetTitles": _strings(),
        "targetIndustries": _strings(),
        "hardSkills": _strings(),
        "softSkills": _strings(),
        "certifications": _strings(),
        "education": _object(
            "education",
            degree=StringField(),
            field=StringField(),
            school=StringField(),
        ),
        "summary": StringField(),
        "strengths": _strings(max_items=MAX_PROFILE_STRENGTHS),
        "achievements": _strings(),
        "searchKeywords": _strings(),
    },
)

INTERVIEW_PREP = Schema(
    "interview_prep",
    {
        "questions": AlignedListField(
            STANDARD_INTERVIEW_QUESTIONS,
            "question",
            Schema(
                "interview_answer",
                {
                    "question": StringField(),
                    "suggestedAnswer": StringField(),
                    "tips": StringField(),
                },
            ),
            required=True,
        ),
    },
    shape="array",
    root="questions",
)

RESUME_OPTIMIZATION = Schema(
    "resume_optimization",
    {
        "auditScore": _object(
            "audit_score",
            total=StringField(),
            sections=AlignedListField(
                [name for name, _ in AUDIT_CHECKLIST],
                "name",
                Schema(
                    "audit_section",
                    {
                        "name": StringField(),
                        "passed": IntegerField(),
                        "total": IntegerField(),
                        "issues": _strings(),
                    },
                ),
                label_defaults={name: {"total": checks} for name, checks in AUDIT_CHECKLIST},
            ),
        ),
        "sections": ListField(
            _object(
                "optimized_section",
                title=StringField(),
                before=TextField(),
                after=TextField(),
                changes=_strings(),
                bullets=ListField(
                    _object(
                        "optimized_bullet",
                        before=StringField(),
                        after=StringField(),
                        changes=_strings(),
                    )
                ),
            )
        ),
        "changesSummary": StringField(),
    },
)

COMPANY_FIT = Schema(
    "company_fit",
    {
        "score": ScoreField(required=True),
        "status": EnumField(COMPANY_FIT_STATUSES, required=True),
        "analysis": StringField(required=True),
    },
)

JOB_LISTINGS = Schema(
    "job_listings",
    {
        "jobs": ListField(
            _object(
                "job_listing",
                id=StringField(),
                title=StringField(),
                company=StringField(),
                location=StringField(),
                salary=StringField(),
                jobType=EnumField(JOB_TYPES),
                postedDate=StringField(),
                url=StringField(),
                description=StringField(),
                requirements=_strings(),
                niceToHave=_strings(),
                benefits=_strings(),
            ),
            max_items=MAX_JOB_LISTINGS,
            required=True,
        ),
    },
    shape="array",
    root="jobs",
)

JOB_SCORE = Schema(
    "job_score",
    {
        "matchScore": ScoreField(required=True),
        "matchLevel": EnumField(MATCH_LEVELS),
        "recommendation": EnumField(JOB_RECOMMENDATIONS),
        "matchingSkills": _strings(),
        "missingSkills": _strings(),
        "quickTake": StringField(),
    },
)

SCHEMAS = {
    schema.name: schema
    for schema in (MATCH_ANALYSIS, PROFILE, INTERVIEW_PREP, RESUME_OPTIMIZATION, COMPANY_FIT, JOB_LISTINGS, JOB_SCORE)
}
