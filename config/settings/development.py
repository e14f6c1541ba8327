# config/settings/development.py

from .base import *

# === DESENVOLVIMENTO ===

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# === BANCO DE DADOS ===

# USE_SQLITE=1 dispensa o PostgreSQL local
if env.bool('USE_SQLITE', default=False):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
else:
    DATABASES['default']['CONN_MAX_AGE'] = 60

print(f"🗄️  Banco: {DATABASES['default']['ENGINE'].rsplit('.', 1)[-1]} ({DATABASES['default']['NAME']})")

# === CACHE ===

# Redis é opcional aqui: se não responder, cache em memória
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'raia-dev-cache',
    }
}

if env('REDIS_URL', default=None):
    import redis

    try:
        redis.from_url(env('REDIS_URL'), socket_connect_timeout=1).ping()
    except redis.exceptions.RedisError as e:
        print(f"⚠️  Redis indisponível ({e}), usando cache em memória")
    else:
        CACHES['default'] = {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': env('REDIS_URL'),
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
                'IGNORE_EXCEPTIONS': True,
            }
        }

# === LOGGING ===

# SQL das reordenações em lote aparece com RAIA_SQL_DEBUG=1
LOGGING['handlers']['console']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'
LOGGING['loggers']['raia_client']['level'] = 'DEBUG'
if env.bool('RAIA_SQL_DEBUG', default=False):
    LOGGING['loggers']['django.db.backends'] = {
        'handlers': ['console'],
        'level': 'DEBUG',
        'propagate': False,
    }

print(f"🚀 Raia Board (desenvolvimento) - anexos em {MEDIA_ROOT}")
