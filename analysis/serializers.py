"""
Analysis app serializers

Request validation for the generation endpoints. Responses are canonical
results rendered as plain dicts, so no output serializers are needed.
"""
from rest_framework import serializers

from .gateway import PROVIDERS


class ProviderChoiceSerializer(serializers.Serializer):
    provider = serializers.ChoiceField(choices=sorted(PROVIDERS), required=False)


class SessionRequestSerializer(ProviderChoiceSerializer):
    session_id = serializers.CharField()


class MatchAnalysisRequestSerializer(ProviderChoiceSerializer):
    """
    Either an uploaded ``resume`` or an existing ``session_id`` is required.
    """

    job_description = serializers.CharField()
    session_id = serializers.CharField(required=False, allow_blank=True)
    resume = serializers.FileField(required=False)

    def validate(self, attrs):
        if not attrs.get('resume') and not attrs.get('session_id'):
            raise serializers.ValidationError('Provide a resume upload or a session_id.')
        return attrs


class ResumeOptimizationRequestSerializer(SessionRequestSerializer):
    job_description = serializers.CharField()


class CoverLetterRequestSerializer(SessionRequestSerializer):
    job_description = serializers.CharField()
    job_id = serializers.CharField(required=False, allow_blank=True)
    job_title = serializers.CharField(required=False, allow_blank=True)
    company_name = serializers.CharField(required=False, allow_blank=True)
    tone = serializers.CharField(required=False, allow_blank=True)


class CompanyContextRequestSerializer(SessionRequestSerializer):
    """
    Shared by the specific cover letter and interview prep endpoints.
    """

    job_description = serializers.CharField()
    company_name = serializers.CharField(required=False, allow_blank=True)
    analysis = serializers.DictField(required=False, allow_null=True)


class CompanyFitRequestSerializer(SessionRequestSerializer):
    company_name = serializers.CharField()
    industry = serializers.CharField(required=False, allow_blank=True)
    role_keywords = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )


class JobSearchRequestSerializer(SessionRequestSerializer):
    search_query = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(required=False, allow_blank=True)
