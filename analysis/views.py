"""
Analysis app views

API views for match analysis and the generation features built on a resume
session.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from resumes.documents import read_upload
from resumes.sessions import get_session_store, new_session

from .exceptions import CareerFitError, InvalidRequest
from .gateway import get_gateway
from .serializers import (
    CompanyContextRequestSerializer,
    CompanyFitRequestSerializer,
    CoverLetterRequestSerializer,
    JobSearchRequestSerializer,
    MatchAnalysisRequestSerializer,
    ResumeOptimizationRequestSerializer,
)
from .services import CareerAnalysisService

logger = logging.getLogger(__name__)


def success_response(data, status_code=status.HTTP_200_OK):
    return Response({'success': True, 'data': data}, status=status_code)


def error_response(exc: CareerFitError):
    return Response({'success': False, 'error': exc.as_dict()}, status=exc.status_code)


class CareerFitAPIView(APIView):
    """
    Base view: no authentication, typed errors rendered as error envelopes.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    request_serializer_class = None

    def handle_exception(self, exc):
        if isinstance(exc, CareerFitError):
            logger.info("%s rejected: %s", self.__class__.__name__, exc.kind)
            return error_response(exc)
        if isinstance(exc, ValidationError):
            body = InvalidRequest('Request validation failed.').as_dict()
            body['fields'] = exc.detail
            return Response({'success': False, 'error': body}, status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, APIException):
            message = exc.detail if isinstance(exc.detail, str) else exc.default_detail
            body = {'kind': exc.default_code.upper(), 'message': str(message)}
            return Response({'success': False, 'error': body}, status=exc.status_code)
        logger.exception("Unhandled error in %s", self.__class__.__name__)
        return error_response(CareerFitError())

    def validated_data(self, request):
        serializer = self.request_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def get_service(self, data) -> CareerAnalysisService:
        return CareerAnalysisService(gateway=get_gateway(data.get('provider')))

    def get_session(self, data):
        return get_session_store().require(data.get('session_id'))


class MatchAnalysisView(CareerFitAPIView):
    """
    POST /api/analyze-match/

    Accepts a fresh ``resume`` upload (which starts a new session) or an
    existing ``session_id``.
    """

    request_serializer_class = MatchAnalysisRequestSerializer

    def post(self, request):
        data = self.validated_data(request)
        job_description = data['job_description']
        # Reject short descriptions before any upload parsing or provider call
        CareerAnalysisService.validate_job_description(job_description)

        store = get_session_store()
        service = self.get_service(data)

        uploaded = data.get('resume')
        if uploaded:
            resume_text = read_upload(uploaded)
            profile = service.extract_profile(resume_text)
            session = new_session(resume_text, profile.to_dict(), file_name=uploaded.name)
            store.set(session['id'], session)
        else:
            session = self.get_session(data)

        analysis = service.analyze_match(session['resume_text'], job_description)
        store.update(session['id'], {'analysis': analysis.to_dict()})

        return success_response({
            'session_id': session['id'],
            'analysis': analysis.to_dict(),
        })


class ResumeOptimizationView(CareerFitAPIView):
    """POST /api/optimize-resume/"""

    request_serializer_class = ResumeOptimizationRequestSerializer

    def post(self, request):
        data = self.validated_data(request)
        session = self.get_session(data)
        optimization = self.get_service(data).optimize_resume(
            session['resume_text'], data['job_description']
        )
        return success_response({'optimization': optimization.to_dict()})


class CoverLetterView(CareerFitAPIView):
    """
    POST /api/generate-cover-letter/

    ``job_id`` fills in the title and company from the session's job search
    results when the request omits them.
    """

    request_serializer_class = CoverLetterRequestSerializer

    def post(self, request):
        data = self.validated_data(request)
        session = self.get_session(data)

        job = {}
        if data.get('job_id'):
            job = next(
                (item for item in session.get('jobs') or [] if item.get('id') == data['job_id']),
                {},
            )

        cover_letter = self.get_service(data).generate_cover_letter(
            resume_text=session['resume_text'],
            job_description=data['job_description'],
            job_title=data.get('job_title') or job.get('title'),
            company_name=data.get('company_name') or job.get('company'),
            tone=data.get('tone'),
        )
        return success_response({'cover_letter': cover_letter})


class CompanyContextView(CareerFitAPIView):
    """
    Shared flow for generation that needs company research and the profile.
    """

    request_serializer_class = CompanyContextRequestSerializer

    def company_context(self, service, data, session):
        profile = session.get('profile') or {}
        return {
            'profile': profile,
            'job_description': data['job_description'],
            'company_name': data.get('company_name'),
            'company_research': service.research_company(data.get('company_name')),
            'achievements': profile.get('achievements') or [],
            'analysis': data.get('analysis') or session.get('analysis'),
        }


class SpecificCoverLetterView(CompanyContextView):
    """POST /api/generate-specific-cover-letter/"""

    def post(self, request):
        data = self.validated_data(request)
        session = self.get_session(data)
        service = self.get_service(data)
        context = self.company_context(service, data, session)

        cover_letter = service.generate_specific_cover_letter(**context)
        return success_response({
            'cover_letter': cover_letter,
            'company_research': context['company_research'],
        })


class InterviewPrepView(CompanyContextView):
    """POST /api/generate-interview-prep/"""

    def post(self, request):
        data = self.validated_data(request)
        session = self.get_session(data)
        service = self.get_service(data)
        context = self.company_context(service, data, session)

        prep = service.generate_interview_prep(**context)
        return success_response({
            'questions': prep.to_dict()['questions'],
            'company_research': context['company_research'],
        })


class CompanyFitView(CareerFitAPIView):
    """POST /api/company-fit/"""

    request_serializer_class = CompanyFitRequestSerializer

    def post(self, request):
        data = self.validated_data(request)
        session = self.get_session(data)
        fit = self.get_service(data).analyze_company_fit(
            profile=session.get('profile') or {},
            company_name=data['company_name'],
            industry=data.get('industry'),
            role_keywords=data.get('role_keywords') or [],
        )
        return success_response({'company_fit': fit.to_dict()})


class JobSearchView(CareerFitAPIView):
    """
    POST /api/search-jobs/

    Extracts the profile first when the session was created without one.
    Results replace the session's ``jobs``.
    """

    request_serializer_class = JobSearchRequestSerializer

    def post(self, request):
        data = self.validated_data(request)
        store = get_session_store()
        session = self.get_session(data)
        service = self.get_service(data)

        profile = session.get('profile')
        if not profile:
            profile = service.extract_profile(session['resume_text']).to_dict()
            store.update(session['id'], {'profile': profile})

        jobs = service.search_jobs(
            profile,
            search_query=data.get('search_query'),
            location=data.get('location'),
        )
        store.update(session['id'], {'jobs': jobs})
        return success_response({'jobs': jobs})
