# raia_client/__init__.py

"""
Raia Client - cliente assíncrono do Raia Board

Contém:
- api: cliente HTTP (httpx) para a API JSON
- cache: cache de ordenação com atualização otimista e reconciliação
- dnd: resolução de alvo e planejamento de drag-and-drop
- state: estado da aplicação (sessão + api + cache + drag)
"""

from .api import BoardApi
from .cache import OrderingCache
from .config import ClientSettings
from .dnd import ColumnRef, DragEngine, ProjectRef, TaskRef
from .exceptions import ApiError, RaiaClientError, TransportError, UnauthorizedError
from .state import AppState

__all__ = [
    'ApiError',
    'AppState',
    'BoardApi',
    'ClientSettings',
    'ColumnRef',
    'DragEngine',
    'OrderingCache',
    'ProjectRef',
    'RaiaClientError',
    'TaskRef',
    'TransportError',
    'UnauthorizedError',
]
