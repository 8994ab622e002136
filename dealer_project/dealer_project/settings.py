import os
from pathlib import Path

import dj_database_url
from dotenv import load_dotenv

from .logging_config import get_logging_config

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "changeme")
DEBUG = os.getenv("DJANGO_DEBUG", "True") == "True"
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "127.0.0.1,localhost,testserver").split(",")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "ledger_core.apps.LedgerCoreConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    # attaches request.branch (branch scope for every ledger query)
    "ledger_core.middleware.CurrentBranchMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "dealer_project.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

WSGI_APPLICATION = "dealer_project.wsgi.application"

# SQLite by default, durable storage is not a goal of the back office
DATABASES = {
    "default": dj_database_url.config(
        env="DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
    )
}

# Custom user carries the back-office role
AUTH_USER_MODEL = "ledger_core.User"
LOGIN_URL = "/auth/"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "America/Toronto")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------
# Ledger behaviour switches
# -----------------------------------------
LEDGER = {
    # currency stamped on new internal transfers
    "CURRENCY": os.getenv("LEDGER_CURRENCY", "CAD"),
    # branch that receives transfer legs when posting from the consolidated view
    "DEFAULT_BRANCH": os.getenv("LEDGER_DEFAULT_BRANCH", "loc1"),
    # "delete" removes a voided entry, "reverse" appends a compensating entry
    "VOID_POLICY": os.getenv("LEDGER_VOID_POLICY", "delete"),
    # when True every ledger mutation is rejected
    "LOCKED": os.getenv("LEDGER_LOCKED", "False") == "True",
    "ALLOW_SAME_ACCOUNT_TRANSFERS": os.getenv("LEDGER_ALLOW_SAME_ACCOUNT_TRANSFERS", "True") == "True",
    "EXPORT_DIR": os.getenv("LEDGER_EXPORT_DIR", str(BASE_DIR / "exports")),
}

# -----------------------------------------
# Celery (export snapshots run as tasks)
# -----------------------------------------
CELERY_BROKER_URL = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ALWAYS_EAGER = os.getenv("CELERY_TASK_ALWAYS_EAGER", "False") == "True"

LOGGING = get_logging_config(DEBUG)
