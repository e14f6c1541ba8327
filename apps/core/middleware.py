# apps/core/middleware.py

import logging

from .auth_service import auth_service

logger = logging.getLogger(__name__)


class BearerTokenMiddleware:
    """
    Middleware que autentica a API por token bearer

    Lê o header `Authorization: Bearer <token>` e, se o token for válido,
    troca request.user pelo dono do token e guarda o token em
    request.auth_token. Sem header ou com token inválido, auth_token fica
    None: a sessão do admin continua valendo no /admin/, mas não na API
    (api_login_required responde 401).
    """

    keyword = 'Bearer'

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.auth_token = None
        token = self._extract_token(request)

        if token:
            usuario = auth_service.resolve_token(token)
            if usuario is not None:
                request.user = usuario
                request.auth_token = token
            else:
                logger.debug(f"Token inválido em {request.path}")

        return self.get_response(request)

    def _extract_token(self, request):
        header = request.META.get('HTTP_AUTHORIZATION', '')
        parts = header.split()

        if len(parts) != 2 or parts[0] != self.keyword:
            return None

        return parts[1]
