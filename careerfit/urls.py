"""
URL configuration for careerfit project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/4.2/topics/http/urls/
"""
from django.urls import include, path

from careerfit.views import HealthView, ProviderListView

urlpatterns = [
    path('api/health/', HealthView.as_view(), name='health'),
    path('api/llm-providers/', ProviderListView.as_view(), name='llm-providers'),
    path('api/', include('resumes.urls')),
    path('api/', include('analysis.urls')),
]
