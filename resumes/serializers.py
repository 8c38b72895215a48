"""
Resumes app serializers
"""
from rest_framework import serializers

from analysis.exceptions import InvalidRequest
from analysis.serializers import ProviderChoiceSerializer, SessionRequestSerializer

from .services import JobTracker


class ResumeUploadSerializer(ProviderChoiceSerializer):
    resume = serializers.FileField()


class SaveJobSerializer(SessionRequestSerializer):
    """
    ``job`` is a listing as returned by job search; only its tracked fields
    are kept.
    """

    job = serializers.DictField()
    status = serializers.CharField(required=False)


class UpdateJobStatusSerializer(SessionRequestSerializer):
    job_id = serializers.CharField()
    status = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_status(self, value):
        try:
            return JobTracker.normalize_status(value)
        except InvalidRequest as exc:
            raise serializers.ValidationError(exc.message)
