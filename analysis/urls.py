"""
Analysis app URLs
"""
from django.urls import path

from .views import (
    CompanyFitView,
    CoverLetterView,
    InterviewPrepView,
    JobSearchView,
    MatchAnalysisView,
    ResumeOptimizationView,
    SpecificCoverLetterView,
)

urlpatterns = [
    path('analyze-match/', MatchAnalysisView.as_view(), name='analyze-match'),
    path('optimize-resume/', ResumeOptimizationView.as_view(), name='optimize-resume'),
    path('generate-cover-letter/', CoverLetterView.as_view(), name='generate-cover-letter'),
    path(
        'generate-specific-cover-letter/',
        SpecificCoverLetterView.as_view(),
        name='generate-specific-cover-letter',
    ),
    path('generate-interview-prep/', InterviewPrepView.as_view(), name='generate-interview-prep'),
    path('company-fit/', CompanyFitView.as_view(), name='company-fit'),
    path('search-jobs/', JobSearchView.as_view(), name='search-jobs'),
]
