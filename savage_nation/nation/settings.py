# settings.py
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

import dj_database_url


BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.getenv("SECRET_KEY", "unsafe-dev-secret")

# ---------- DATABASES ----------
# Hosted Postgres when DATABASE_URL is present; local SQLite otherwise.
DATABASES = {
    'default': dj_database_url.config(
        default=os.getenv("DATABASE_URL") or f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
    )
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Project pointers
ROOT_URLCONF = 'savage_nation.nation.urls'
WSGI_APPLICATION = 'savage_nation.nation.wsgi.application'


TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                # Project context
                'savage_nation.main.context_processors.site_navigation',
                'savage_nation.accounts.context_processors.auth_state',
            ],
        },
    },
]

# Company metadata (for templates)
COMPANY_LEGAL_NAME = os.getenv('COMPANY_LEGAL_NAME', 'Savage Nation USA')

# ---------- DEBUG / LOGGING ----------
DEBUG = os.getenv("DEBUG", "False").lower() == "true"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {"format": "[{levelname}] {asctime} {name}: {message}", "style": "{"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "verbose"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django.request": {"handlers": ["console"], "level": "ERROR", "propagate": False},
        "django": {"handlers": ["console"], "level": "INFO"},
        "savage_nation": {"handlers": ["console"], "level": os.getenv("APP_LOG_LEVEL", "INFO"), "propagate": False},
        "admin_portal": {"handlers": ["console"], "level": os.getenv("APP_LOG_LEVEL", "INFO"), "propagate": False},
    },
}


# ---------- HOSTS / CSRF ----------
# Helpers to parse comma-separated env vars safely
def _csv_env(name, default):
    raw = os.getenv(name, default)
    return [h.strip() for h in raw.split(",") if h.strip()]


def _bool_env(name, default):
    return os.getenv(name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


ALLOWED_HOSTS = _csv_env(
    "ALLOWED_HOSTS",
    "savagenationusa.com,www.savagenationusa.com,localhost,127.0.0.1,testserver",
)

CSRF_TRUSTED_ORIGINS = _csv_env(
    "CSRF_TRUSTED_ORIGINS",
    "https://savagenationusa.com,https://www.savagenationusa.com,http://localhost,http://127.0.0.1",
)

SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True


# ---------- APPS ----------
INSTALLED_APPS = [
    # local apps
    'savage_nation.core',
    'savage_nation.accounts',
    'savage_nation.main',
    'savage_nation.store',
    'savage_nation.blog',
    'savage_nation.toolshed',
    'admin_portal',

    # default Django apps
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # third-party apps
    'widget_tweaks',
    'crispy_forms',
    'crispy_bootstrap4',
]

CRISPY_ALLOWED_TEMPLATE_PACKS = "bootstrap4"
CRISPY_TEMPLATE_PACK = "bootstrap4"


# ---------- MIDDLEWARE ----------
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',   # must be right after SecurityMiddleware
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'savage_nation.accounts.middleware.AuthContextMiddleware',
    'savage_nation.nation.security_headers.SecurityHeadersMiddleware',
]


# ---------- CACHE ----------
# The query cache sits on top of the default cache alias. A shared backend
# (Redis/Memcached) is needed for cancellation to span worker processes.
CACHES = {
    "default": {
        "BACKEND": os.getenv("CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"),
        "LOCATION": os.getenv("CACHE_LOCATION", "savage-nation-query-cache"),
    }
}
QUERY_CACHE_ALIAS = "default"
QUERY_CACHE_TIMEOUT = int(os.getenv("QUERY_CACHE_TIMEOUT", "300"))


# ---------- STATIC / MEDIA ----------
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Keep original, un-hashed files in STATIC_ROOT so that
# fallback lookups won't 500 if a manifest entry is missing.
WHITENOISE_KEEP_ONLY_HASHED_FILES = False
WHITENOISE_USE_FINDERS = True

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedStaticFilesStorage"},
}


# ---------- SECURITY ----------
SESSION_COOKIE_SECURE = not DEBUG
CSRF_COOKIE_SECURE = not DEBUG
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"
# Test runs talk plain http to the test client.
TESTING = "test" in sys.argv[1:2] or "pytest" in sys.modules
SECURE_SSL_REDIRECT = _bool_env("SECURE_SSL_REDIRECT", not (DEBUG or TESTING))
SECURE_REFERRER_POLICY = os.getenv("SECURE_REFERRER_POLICY", "strict-origin-when-cross-origin")

if not DEBUG:
    SECURE_HSTS_SECONDS = int(os.getenv("SECURE_HSTS_SECONDS", "31536000"))
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_PRELOAD = True
    SECURE_CONTENT_TYPE_NOSNIFF = True


# ---------- i18n ----------
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True


# ---------- Auth ----------
LOGIN_URL = '/auth/'
LOGIN_REDIRECT_URL = '/'
LOGOUT_REDIRECT_URL = '/'

# When off, the site runs without accounts: the auth page explains how to
# enable them and every gated route redirects to it.
SITE_AUTH_ENABLED = _bool_env("SITE_AUTH_ENABLED", True)

# `?bypass_auth=true` skips every route guard. Development only.
AUTH_BYPASS_ENABLED = _bool_env("AUTH_BYPASS_ENABLED", DEBUG)

# Roles recognised on the user_roles table
ADMIN_ROLE = "admin"
# Legacy group names that also grant admin rights
LEGACY_ADMIN_GROUPS = _csv_env("LEGACY_ADMIN_GROUPS", "admin,Admins")

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator", "OPTIONS": {"min_length": 8}},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
]
