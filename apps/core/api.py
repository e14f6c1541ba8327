# apps/core/api.py

"""
Utilitários da API JSON

Formato de resposta (igual em todos os endpoints):
    {"success": true, "data": ...}
    {"success": false, "error": "mensagem"}
"""

import json
import logging
from functools import wraps

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)


def json_success(data=None, status=200, **extra):
    payload = {'success': True}
    if data is not None:
        payload['data'] = data
    payload.update(extra)
    return JsonResponse(payload, status=status)


def json_error(message, status=400):
    return JsonResponse({'success': False, 'error': message}, status=status)


def parse_json_body(request):
    """
    Lê o corpo JSON da requisição

    Corpo vazio vale como {}; qualquer coisa que não seja objeto é erro
    de validação.
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('JSON inválido')

    if not isinstance(data, dict):
        raise ValidationError('Corpo da requisição deve ser um objeto JSON')

    return data


def form_error_message(form):
    """Primeira mensagem de erro do formulário, no formato 'campo: erro'"""
    for field, errors in form.errors.items():
        if field == '__all__':
            return errors[0]
        return f"{field}: {errors[0]}"
    return 'Dados inválidos'


def api_view(view_func):
    """
    Decorador base dos endpoints JSON

    - Dispensa CSRF (autenticação é por token bearer)
    - ValidationError vira 400 com a mensagem
    - Erro de banco vira 500 genérico (detalhe só no log)
    """

    @csrf_exempt
    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except ValidationError as e:
            return json_error(e.messages[0] if e.messages else 'Dados inválidos', status=400)
        except DatabaseError:
            logger.exception(f"Erro de persistência em {request.method} {request.path}")
            return json_error('Erro interno do servidor', status=500)

    return wrapped_view
