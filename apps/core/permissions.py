# apps/core/permissions.py

from functools import wraps

from .api import json_error
from .models import Project, Column, Task, Attachment


class BoardPermissions:
    """
    Sistema de permissões do Raia Board

    Regra única: o usuário só enxerga e altera o que pertence aos seus
    próprios projetos. Vale para colunas, tarefas e anexos também, não
    só para o projeto.
    """

    @staticmethod
    def owned_projects(user):
        """Projetos do usuário"""
        return Project.objects.filter(owner=user)

    @staticmethod
    def owned_columns(user):
        """Colunas dos projetos do usuário"""
        return Column.objects.filter(project__owner=user)

    @staticmethod
    def owned_tasks(user):
        """Tarefas das colunas dos projetos do usuário"""
        return Task.objects.filter(column__project__owner=user)

    @staticmethod
    def owned_attachments(user):
        """Anexos das tarefas do usuário"""
        return Attachment.objects.filter(task__column__project__owner=user)

    @staticmethod
    def can_use_column(user, column_id):
        """Verifica se a coluna existe e pertence ao usuário"""
        if not user.is_authenticated:
            return False
        return BoardPermissions.owned_columns(user).filter(pk=column_id).exists()


# Decoradores para views da API

def api_login_required(view_func):
    """
    Decorador que exige token bearer válido - retorna 401 em JSON

    Cookie de sessão (login do admin) não conta: só o token resolvido
    pelo BearerTokenMiddleware.
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        if getattr(request, 'auth_token', None) is None or not request.user.is_authenticated:
            return json_error('Não autenticado', status=401)
        return view_func(request, *args, **kwargs)

    return wrapped_view


def requires_owned(queryset_getter, url_kwarg, request_attr, label):
    """
    Decorador que carrega a entidade do usuário ou responde 404

    Não distingue "não existe" de "não é seu", para não revelar ids
    de outros usuários. A entidade fica em request.<request_attr>.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapped_view(request, *args, **kwargs):
            entity = queryset_getter(request.user).filter(pk=kwargs[url_kwarg]).first()
            if entity is None:
                return json_error(f'{label} não encontrado(a) ou sem permissão', status=404)

            setattr(request, request_attr, entity)
            return view_func(request, *args, **kwargs)

        return wrapped_view

    return decorator


requires_owned_project = requires_owned(BoardPermissions.owned_projects, 'project_id', 'project', 'Projeto')
requires_owned_column = requires_owned(BoardPermissions.owned_columns, 'column_id', 'column', 'Coluna')
requires_owned_task = requires_owned(BoardPermissions.owned_tasks, 'task_id', 'task', 'Tarefa')
requires_owned_attachment = requires_owned(BoardPermissions.owned_attachments, 'attachment_id', 'attachment', 'Anexo')
