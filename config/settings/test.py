# config/settings/test.py

import tempfile

from .base import *

# === TESTES ===

DEBUG = False

SECRET_KEY = 'raia-test-secret-key'

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'raia-test-cache',
    }
}

# Anexos vão para uma pasta temporária, nunca para o UPLOAD_DIR real
MEDIA_ROOT = Path(tempfile.mkdtemp(prefix='raia-test-uploads-'))

# Hash rápido de senha nos testes
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

# Desabilitar logs em testes (sem arquivo, só erros no console)
LOGGING['handlers'].pop('file')
LOGGING['root']['handlers'] = ['console']
LOGGING['loggers']['django']['handlers'] = ['console']
LOGGING['loggers']['apps']['handlers'] = ['console']
LOGGING['loggers']['raia_client']['handlers'] = ['console']
LOGGING['handlers']['console']['level'] = 'ERROR'
