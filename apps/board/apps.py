# apps/board/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Configuração da app Board"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - API Kanban'

    def ready(self):
        """Inicialização da app - não tem models próprios, só API e serviço"""
        logger.debug("Board App inicializada - API de reordenação disponível")
