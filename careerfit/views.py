"""
Project-level API views.
"""
from django.conf import settings

from analysis.gateway import available_providers, default_provider_name
from analysis.views import CareerFitAPIView, success_response


class HealthView(CareerFitAPIView):
    """GET /api/health/"""

    def get(self, request):
        return success_response({'status': 'ok', 'version': settings.CAREERFIT_VERSION})


class ProviderListView(CareerFitAPIView):
    """GET /api/llm-providers/ - configured providers and the default"""

    def get(self, request):
        return success_response({
            'providers': available_providers(),
            'default': default_provider_name(),
        })
