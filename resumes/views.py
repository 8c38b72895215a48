"""
Resumes app views

Resume upload (which starts a session) and saved-job tracking.
"""
from rest_framework import status

from analysis.views import CareerFitAPIView, success_response

from .documents import read_upload
from .serializers import ResumeUploadSerializer, SaveJobSerializer, UpdateJobStatusSerializer
from .services import JobTracker
from .sessions import get_session_store, new_session


class ExtractProfileView(CareerFitAPIView):
    """
    POST /api/extract-profile/

    Parse the uploaded ``resume``, extract the candidate profile and store
    both on a new session.
    """

    request_serializer_class = ResumeUploadSerializer

    def post(self, request):
        data = self.validated_data(request)
        uploaded = data['resume']
        resume_text = read_upload(uploaded)

        profile = self.get_service(data).extract_profile(resume_text)
        session = new_session(resume_text, profile.to_dict(), file_name=uploaded.name)
        get_session_store().set(session['id'], session)

        return success_response(
            {
                'session_id': session['id'],
                'profile': session['profile'],
                'resume_preview': resume_text[:1000],
            },
            status_code=status.HTTP_201_CREATED,
        )


class SaveJobView(CareerFitAPIView):
    """POST /api/save-job/"""

    request_serializer_class = SaveJobSerializer

    def post(self, request):
        data = self.validated_data(request)
        job = JobTracker().save_job(data['session_id'], data['job'], data.get('status'))
        return success_response({'job': job}, status_code=status.HTTP_201_CREATED)


class SavedJobsView(CareerFitAPIView):
    """
    GET /api/saved-jobs/?session_id=

    Unknown sessions simply have no saved jobs.
    """

    def get(self, request):
        jobs = JobTracker().saved_jobs(request.query_params.get('session_id'))
        return success_response({'jobs': jobs})


class UpdateJobStatusView(CareerFitAPIView):
    """POST /api/update-job-status/"""

    request_serializer_class = UpdateJobStatusSerializer

    def post(self, request):
        data = self.validated_data(request)
        job = JobTracker().update_job_status(
            data['session_id'],
            data['job_id'],
            data['status'],
            notes=data.get('notes'),
        )
        return success_response({'job': job})
