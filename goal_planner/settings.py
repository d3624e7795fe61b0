# goal_planner/settings.py
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    return os.getenv(name, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.getenv('GOAL_PLANNER_SECRET_KEY', 'django-insecure-dev-only-change-me')
DEBUG = env_bool('GOAL_PLANNER_DEBUG', True)
ALLOWED_HOSTS = [h for h in os.getenv('GOAL_PLANNER_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'django_filters',
    'apps.goals',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'goal_planner.urls'
WSGI_APPLICATION = 'goal_planner.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# Krótki timeout na każde wywołanie bazy - błąd to porażka jednej definicji, nie całej partii
GOAL_DB_TIMEOUT = int(os.getenv('GOAL_DB_TIMEOUT', '5'))

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('GOAL_PLANNER_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
        'OPTIONS': {
            'timeout': GOAL_DB_TIMEOUT,
        },
    }
}

LANGUAGE_CODE = 'pl'
TIME_ZONE = os.getenv('GOAL_PLANNER_TIME_ZONE', 'Europe/Warsaw')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Scheduler okresów celów
# CRON: kiedy pętla `run_goal_scheduler --forever` odpala przebieg (domyślnie 00:01)
# CATCH_UP: True = okres powstaje przy pierwszym przebiegu po granicy, nie tylko w pasującym dniu
GOAL_SCHEDULER = {
    'CRON': os.getenv('GOAL_SCHEDULER_CRON', '1 0 * * *'),
    'CATCH_UP': env_bool('GOAL_SCHEDULER_CATCH_UP', False),
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': os.getenv('GOAL_PLANNER_LOG_LEVEL', 'INFO'),
            'propagate': True,
        },
    },
}
