# apps/core/auth_service.py

"""
Serviço de Autenticação - Encapsula toda lógica de auth do sistema

A API usa token bearer assinado pelo próprio Django (TimestampSigner);
o resto do sistema só pergunta "quem é o usuário deste token".
"""

import logging
from typing import Optional, Tuple

from django.conf import settings
from django.contrib.auth import authenticate
from django.core import signing
from django.db import IntegrityError

from .models import User

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Serviço encapsulado para gerenciar autenticação

    - Registro e login por username/senha
    - Emissão e validação de token bearer
    - Troca de senha
    """

    def __init__(self):
        # Atributos privados - encapsulados
        self._token_salt = 'raia.auth.token'

    def register(self, username: str, password: str) -> Tuple[bool, str, Optional[User]]:
        """
        Cria novo usuário

        Returns:
            Tuple[sucesso, mensagem, usuario_criado]
        """
        if not self._validar_senha(password):
            return False, f"Senha deve ter pelo menos {settings.RAIA_PASSWORD_MIN_LENGTH} caracteres", None

        if User.objects.filter(username=username).exists():
            return False, "Usuário já existe", None

        try:
            usuario = User.objects.create_user(username=username, password=password)
        except IntegrityError:
            # Registro concorrente com o mesmo username
            return False, "Usuário já existe", None

        logger.info(f"Usuário registrado: {usuario.username}")
        return True, "Usuário criado com sucesso!", usuario

    def login(self, username: str, password: str) -> Tuple[bool, str, Optional[User]]:
        """
        Verifica credenciais

        Returns:
            Tuple[sucesso, mensagem, usuario]
        """
        usuario = authenticate(username=username, password=password)

        if usuario is None:
            logger.warning(f"Tentativa de login falhada para: {username}")
            return False, "Credenciais inválidas", None

        return True, f"Bem-vindo, {usuario.username}!", usuario

    def issue_token(self, usuario: User) -> str:
        """Gera token bearer assinado com validade configurável"""
        payload = {'id': usuario.pk, 'username': usuario.username}
        return signing.TimestampSigner(salt=self._token_salt).sign_object(payload)

    def resolve_token(self, token: str) -> Optional[User]:
        """
        Decodifica o token e devolve o usuário ativo correspondente

        Token inválido, expirado ou de usuário removido -> None
        """
        try:
            payload = signing.TimestampSigner(salt=self._token_salt).unsign_object(
                token, max_age=settings.RAIA_TOKEN_MAX_AGE
            )
        except signing.BadSignature:
            return None

        return User.objects.filter(pk=payload.get('id'), is_active=True).first()

    def change_password(self, usuario: User, senha_atual: str, nova_senha: str) -> Tuple[bool, str]:
        """
        Troca a senha após conferir a senha atual

        Returns:
            Tuple[sucesso, mensagem]
        """
        if not usuario.check_password(senha_atual):
            return False, "Senha atual incorreta"

        if not self._validar_senha(nova_senha):
            return False, f"Senha deve ter pelo menos {settings.RAIA_PASSWORD_MIN_LENGTH} caracteres"

        usuario.set_password(nova_senha)
        usuario.save(update_fields=['password'])
        logger.info(f"Senha alterada para: {usuario.username}")
        return True, "Senha alterada com sucesso!"

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    def _validar_senha(self, password: str) -> bool:
        """Valida tamanho mínimo da senha"""
        return len(password) >= settings.RAIA_PASSWORD_MIN_LENGTH


# Instância global do serviço (Singleton pattern)
auth_service = AuthenticationService()
