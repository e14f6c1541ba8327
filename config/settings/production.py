# config/settings/production.py

from .base import *

# === VALIDAÇÕES ===

# Sem estas variáveis a API não sobe
_obrigatorias = ['SECRET_KEY', 'REDIS_URL', 'UPLOAD_DIR']
if not env('DATABASE_URL', default=None):
    _obrigatorias += ['DB_NAME', 'DB_USER', 'DB_PASSWORD', 'DB_HOST']

_faltando = [nome for nome in _obrigatorias if not env(nome, default=None)]
if _faltando:
    raise ValueError(f"Variáveis obrigatórias em produção: {', '.join(_faltando)}")

# === PRODUÇÃO ===

DEBUG = False

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=['raia-board.com'])

# === BANCO DE DADOS ===

DATABASES['default'].update({
    'CONN_MAX_AGE': 600,
    'CONN_HEALTH_CHECKS': True,
})
DATABASES['default'].setdefault('OPTIONS', {})['sslmode'] = 'require'

# === SEGURANÇA ===

# A API usa bearer token; cookies só existem para o admin
SECURE_SSL_REDIRECT = True
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
X_FRAME_OPTIONS = 'DENY'

# === LOGGING ===

LOGGING['handlers']['file']['filename'] = env('LOG_FILE', default='/var/log/raia-board/raia.log')
LOGGING['loggers']['django.request'] = {
    'handlers': ['console', 'file'],
    'level': 'ERROR',
    'propagate': False,
}

# Compressão das respostas JSON
MIDDLEWARE = ['django.middleware.gzip.GZipMiddleware'] + MIDDLEWARE

print(f"🚀 Raia Board (produção) - hosts: {', '.join(ALLOWED_HOSTS)}")
