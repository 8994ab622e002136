from __future__ import annotations
import os
from celery import Celery

# ensure Django settings are set for Celery
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "dealer_project.settings")

# name should match the project package
celery_app = Celery("dealer_project")

# read config from Django settings, using CELERY_ prefix
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

# autoload tasks from installed apps (ledger_core.tasks)
celery_app.autodiscover_tasks()
