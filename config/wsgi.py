# config/wsgi.py

"""
Entrada WSGI da API (gunicorn config.wsgi:application)

Mesma aplicação HTTP do asgi.py; em produção o padrão é
config.settings.production.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

application = get_wsgi_application()
