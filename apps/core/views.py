# apps/core/views.py

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from apps import __version__
from .api import api_view, json_error, json_success, parse_json_body, form_error_message
from .auth_service import auth_service
from .forms import CredentialsForm, RegisterForm, ChangePasswordForm
from .permissions import api_login_required

logger = logging.getLogger(__name__)


def serialize_user(usuario):
    return {'id': usuario.pk, 'username': usuario.username}


# === AUTENTICAÇÃO ===

@api_view
@require_http_methods(["POST"])
def register_view(request):
    """Cria usuário e já devolve o token"""
    form = RegisterForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    sucesso, mensagem, usuario = auth_service.register(
        form.cleaned_data['username'],
        form.cleaned_data['password']
    )
    if not sucesso:
        return json_error(mensagem, status=409)

    return json_success(
        {'user': serialize_user(usuario), 'token': auth_service.issue_token(usuario)},
        status=201
    )


@api_view
@require_http_methods(["POST"])
def login_view(request):
    form = CredentialsForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    sucesso, mensagem, usuario = auth_service.login(
        form.cleaned_data['username'],
        form.cleaned_data['password']
    )
    if not sucesso:
        return json_error(mensagem, status=401)

    return json_success({'user': serialize_user(usuario), 'token': auth_service.issue_token(usuario)})


@api_view
@require_http_methods(["GET"])
@api_login_required
def me_view(request):
    return json_success({'user': serialize_user(request.user)})


@api_view
@require_http_methods(["POST"])
@api_login_required
def change_password_view(request):
    form = ChangePasswordForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    sucesso, mensagem = auth_service.change_password(
        request.user,
        form.cleaned_data['oldPassword'],
        form.cleaned_data['newPassword']
    )
    if not sucesso:
        return json_error(mensagem)

    return json_success(message=mensagem)


# === MONITORAMENTO ===

@require_http_methods(["GET"])
def health_check(request):
    """
    Health check para monitoramento
    """
    try:
        # Verificar conexão com banco
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        # Verificar cache (Redis em produção)
        cache.set('health_check', 'ok', 60)
        cache_ok = cache.get('health_check') == 'ok'

    except DatabaseError as e:
        logger.error(f"Health check falhou no banco: {e}")
        return JsonResponse({
            'status': 'unhealthy',
            'database': 'error',
            'timestamp': timezone.now().isoformat(),
            'version': __version__
        }, status=500)

    return JsonResponse({
        'status': 'healthy' if cache_ok else 'degraded',
        'database': 'ok',
        'cache': 'ok' if cache_ok else 'error',
        'timestamp': timezone.now().isoformat(),
        'version': __version__
    })
