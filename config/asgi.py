# config/asgi.py

import os
from django.core.asgi import get_asgi_application

# Configurar Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

# Só HTTP - a API não tem WebSocket
application = get_asgi_application()
