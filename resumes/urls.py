"""
Resumes app URLs
"""
from django.urls import path

from .views import ExtractProfileView, SavedJobsView, SaveJobView, UpdateJobStatusView

urlpatterns = [
    path('extract-profile/', ExtractProfileView.as_view(), name='extract-profile'),
    path('save-job/', SaveJobView.as_view(), name='save-job'),
    path('saved-jobs/', SavedJobsView.as_view(), name='saved-jobs'),
    path('update-job-status/', UpdateJobStatusView.as_view(), name='update-job-status'),
]
