"""
WSGI entrypoint for the Giller progression service.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'giller_core.settings')

application = get_wsgi_application()
