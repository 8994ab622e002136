# Celery instance is defined in dealer_project/celery.py
# It points the worker at the Django settings of this project
from .celery import celery_app

# 'from dealer_project import *' only exports celery_app
__all__ = ("celery_app",)

""" Run the export worker with:
    "celery -A dealer_project worker -l info"
    -A dealer_project imports dealer_project/__init__.py,
    which exposes celery_app. """
