"""
Django settings for careerfit project.

Values come from the environment (a local ``.env`` is loaded first).
For more information on this file, see
https://docs.djangoproject.com/en/4.2/topics/settings/
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-careerfit-development-key')

DEBUG = os.environ.get('DJANGO_DEBUG', 'False').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = [host for host in os.environ.get('DJANGO_ALLOWED_HOSTS', '*').split(',') if host]


INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'analysis',
    'resumes',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'careerfit.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'careerfit.wsgi.application'


DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'careerfit',
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Authentication is handled in front of this service
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
}


# AI providers
LLM_PROVIDER = os.environ.get('LLM_PROVIDER', 'groq')
GROQ_API_KEY = os.environ.get('GROQ_API_KEY', '')
GROQ_MODEL = os.environ.get('GROQ_MODEL', 'llama-3.1-8b-instant')
GROQ_API_URL = os.environ.get('GROQ_API_URL', 'https://api.groq.com/openai/v1/chat/completions')
OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY', '')
OPENAI_MODEL = os.environ.get('OPENAI_MODEL', 'gpt-4o-mini')
TAVILY_API_KEY = os.environ.get('TAVILY_API_KEY', '')

# Resume sessions
CAREERFIT_SESSION_STORE = os.environ.get('CAREERFIT_SESSION_STORE', 'resumes.sessions.CacheSessionStore')
CAREERFIT_SESSION_CACHE_ALIAS = os.environ.get('CAREERFIT_SESSION_CACHE_ALIAS', 'default')

# Resume uploads
RESUME_MIN_CHARS = int(os.environ.get('RESUME_MIN_CHARS', 100))
RESUME_MAX_UPLOAD_BYTES = int(os.environ.get('RESUME_MAX_UPLOAD_BYTES', 5 * 1024 * 1024))
DATA_UPLOAD_MAX_MEMORY_SIZE = RESUME_MAX_UPLOAD_BYTES + 1024 * 1024

CAREERFIT_VERSION = '1.0.0'


CAREERFIT_LOG_LEVEL = os.environ.get('CAREERFIT_LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'careerfit': {'handlers': ['console'], 'level': CAREERFIT_LOG_LEVEL, 'propagate': False},
        'analysis': {'handlers': ['console'], 'level': CAREERFIT_LOG_LEVEL, 'propagate': False},
        'resumes': {'handlers': ['console'], 'level': CAREERFIT_LOG_LEVEL, 'propagate': False},
    },
}
