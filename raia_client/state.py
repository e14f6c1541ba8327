# raia_client/state.py

import logging
from typing import Optional

import httpx

from .api import BoardApi
from .cache import OrderingCache
from .config import ClientSettings
from .dnd import DragEngine
from .exceptions import RaiaClientError, UnauthorizedError
from .models import User

logger = logging.getLogger(__name__)


class AppState:
    """
    Estado da aplicação cliente

    Junta sessão (usuário + token), api, cache e o engine de drag num
    objeto só, passado explicitamente para quem precisar. Um 401/403 em
    qualquer chamada do cache derruba a sessão via logout().
    """

    def __init__(self, settings: Optional[ClientSettings] = None, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or ClientSettings()

        if client is None:
            self.api = BoardApi.from_settings(self.settings)
        else:
            self.api = BoardApi(client, token=self.settings.token)

        self.cache = OrderingCache(self.api, on_unauthorized=self.logout)
        self.engine = DragEngine(self.cache)
        self.user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.api.token is not None

    async def startup(self) -> bool:
        """
        Retoma a sessão de um token já configurado

        Returns:
            True se o token ainda vale e o board foi carregado
        """
        if not self.is_authenticated:
            return False

        try:
            self.user = await self.api.me()
        except UnauthorizedError:
            logger.info("Token salvo expirou ou é inválido")
            self.logout()
            return False

        await self.cache.fetch_projects()
        return True

    async def login(self, username: str, password: str) -> User:
        user, token = await self.api.login(username, password)
        self._start_session(user, token)
        await self.cache.fetch_projects()
        return user

    async def register(self, username: str, password: str) -> User:
        user, token = await self.api.register(username, password)
        self._start_session(user, token)
        await self.cache.fetch_projects()
        return user

    async def change_password(self, old_password: str, new_password: str) -> bool:
        try:
            await self.api.change_password(old_password, new_password)
        except UnauthorizedError:
            self.logout()
            return False
        except RaiaClientError as e:
            self.cache.error = e.message
            return False
        return True

    def logout(self) -> None:
        if self.user is not None:
            logger.info(f"Logout de {self.user.username}")
        self.api.token = None
        self.user = None
        self.engine.cancel()
        self.cache.reset()

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> 'AppState':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    def _start_session(self, user: User, token: str) -> None:
        self.api.token = token
        self.user = user
        self.cache.reset()
        logger.info(f"Sessão iniciada: {user.username}")
