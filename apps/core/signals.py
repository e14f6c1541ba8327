# apps/core/signals.py

import logging

from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import Project, Attachment

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Project)
def criar_colunas_padrao(sender, instance, created, **kwargs):
    """
    Cria colunas padrão quando um novo projeto é criado
    APENAS se o projeto ainda não tem colunas
    """
    if created and not instance.columns.exists():
        instance.create_default_columns()


@receiver(post_delete, sender=Attachment)
def remover_arquivo_anexo(sender, instance, **kwargs):
    """
    Remove os bytes do anexo quando a linha é apagada

    Vale também para cascade (tarefa, coluna ou projeto apagados).
    """
    if instance.file:
        nome = instance.file.name
        instance.file.delete(save=False)
        logger.info(f"Arquivo removido: {nome}")
