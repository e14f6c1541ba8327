# apps/board/views.py

"""
API JSON do board: projetos, colunas, tarefas e anexos

Toda rota passa por api_view (CSRF dispensado, erros viram JSON) e por
api_login_required. Entidades de outro usuário respondem 404.
"""

import logging

from django.views.decorators.http import require_http_methods

from apps.core.api import api_view, json_error, json_success, parse_json_body, form_error_message
from apps.core.forms import (
    ProjectForm, ProjectUpdateForm,
    ColumnCreateForm, ColumnUpdateForm,
    TaskCreateForm, TaskUpdateForm,
    AttachmentUploadForm,
)
from apps.core.models import Project, Column, Task, Attachment
from apps.core.permissions import (
    BoardPermissions,
    api_login_required,
    requires_owned_project,
    requires_owned_column,
    requires_owned_task,
    requires_owned_attachment,
)
from .services import reordering_service

logger = logging.getLogger(__name__)


# === SERIALIZAÇÃO ===

def serialize_project(project):
    return {
        'id': project.pk,
        'name': project.name,
        'description': project.description,
        'order_index': project.order_index,
        'created_at': project.created_at.isoformat(),
    }


def serialize_column(column):
    return {
        'id': column.pk,
        'title': column.title,
        'color': column.color,
        'project_id': column.project_id,
        'order_index': column.order_index,
    }


def serialize_task(task):
    return {
        'id': task.pk,
        'title': task.title,
        'description': task.description,
        'priority': task.priority,
        'column_id': task.column_id,
        'order_index': task.order_index,
        'created_at': task.created_at.isoformat(),
        'attachment_count': getattr(task, 'attachment_count', 0),
    }


def serialize_attachment(attachment):
    return {
        'id': attachment.pk,
        'task_id': attachment.task_id,
        'file_name': attachment.file_name,
        'file_path': attachment.file.name,
        'url': attachment.file.url,
        'file_type': attachment.file_type,
        'file_size': attachment.file_size,
        'created_at': attachment.created_at.isoformat(),
    }


def _owned_project_from_query(request):
    """
    Projeto do parâmetro ?project_id=

    Returns:
        Tuple[projeto, resposta_de_erro]
    """
    raw = request.GET.get('project_id')
    if not raw:
        return None, json_error('project_id é obrigatório')

    try:
        project_id = int(raw)
    except ValueError:
        return None, json_error('project_id deve ser um número inteiro')

    project = BoardPermissions.owned_projects(request.user).filter(pk=project_id).first()
    if project is None:
        return None, json_error('Projeto não encontrado(a) ou sem permissão', status=404)

    return project, None


# === PROJETOS ===

@api_view
@require_http_methods(["GET", "POST"])
@api_login_required
def projects_collection(request):
    if request.method == 'GET':
        projects = Project.objects.list_children(request.user)
        return json_success([serialize_project(p) for p in projects])

    form = ProjectForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    # Colunas padrão são criadas pelo signal de post_save
    project = Project.objects.create_child(request.user, **form.cleaned_data)
    logger.info(f"Projeto criado: {project.name} (id={project.pk}) por {request.user.username}")
    return json_success(serialize_project(project), status=201)


@api_view
@require_http_methods(["PUT"])
@api_login_required
def projects_reorder(request):
    data = parse_json_body(request)
    changes = reordering_service.reorder_projects(request.user, data.get('projectIds'))
    return json_success(changes=changes)


@api_view
@require_http_methods(["PUT", "DELETE"])
@api_login_required
@requires_owned_project
def project_detail(request, project_id):
    if request.method == 'DELETE':
        changes = Project.objects.delete_entity(project_id)
        logger.info(f"Projeto {project_id} removido por {request.user.username} ({changes} registros)")
        return json_success(changes=changes)

    form = ProjectUpdateForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    changes = Project.objects.update_fields(project_id, **form.cleaned_data)
    return json_success(changes=changes)


# === COLUNAS ===

@api_view
@require_http_methods(["GET", "POST"])
@api_login_required
def columns_collection(request):
    if request.method == 'GET':
        project, erro = _owned_project_from_query(request)
        if erro:
            return erro

        columns = Column.objects.list_children(project)
        return json_success([serialize_column(c) for c in columns])

    form = ColumnCreateForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    dados = form.cleaned_data
    project = BoardPermissions.owned_projects(request.user).filter(pk=dados['project_id']).first()
    if project is None:
        return json_error('Projeto não encontrado(a) ou sem permissão', status=404)

    column = Column.objects.create_child(project, title=dados['title'], color=dados['color'])
    return json_success(serialize_column(column), status=201)


@api_view
@require_http_methods(["POST"])
@api_login_required
def columns_reorder(request):
    data = parse_json_body(request)
    changes = reordering_service.reorder_columns(request.user, data.get('items'))
    return json_success(changes=changes)


@api_view
@require_http_methods(["PUT", "DELETE"])
@api_login_required
@requires_owned_column
def column_detail(request, column_id):
    if request.method == 'DELETE':
        changes = Column.objects.delete_entity(column_id)
        logger.info(f"Coluna {column_id} removida por {request.user.username} ({changes} registros)")
        return json_success(changes=changes)

    form = ColumnUpdateForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    changes = Column.objects.update_fields(column_id, **form.cleaned_data)
    return json_success(changes=changes)


# === TAREFAS ===

@api_view
@require_http_methods(["GET", "POST"])
@api_login_required
def tasks_collection(request):
    if request.method == 'GET':
        project, erro = _owned_project_from_query(request)
        if erro:
            return erro

        tasks = (
            Task.objects.filter(column__project=project)
            .with_attachment_count()
            .order_by('order_index', 'created_at', 'id')
        )
        return json_success([serialize_task(t) for t in tasks])

    form = TaskCreateForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    dados = form.cleaned_data
    column = BoardPermissions.owned_columns(request.user).filter(pk=dados.pop('column_id')).first()
    if column is None:
        return json_error('Coluna não encontrado(a) ou sem permissão', status=404)

    task = Task.objects.create_child(column, **dados)
    return json_success(serialize_task(task), status=201)


@api_view
@require_http_methods(["POST"])
@api_login_required
def tasks_reorder(request):
    data = parse_json_body(request)
    changes = reordering_service.reorder_tasks(request.user, data.get('items'))
    return json_success(changes=changes)


@api_view
@require_http_methods(["PUT", "DELETE"])
@api_login_required
@requires_owned_task
def task_detail(request, task_id):
    if request.method == 'DELETE':
        changes = Task.objects.delete_entity(task_id)
        return json_success(changes=changes)

    form = TaskUpdateForm(parse_json_body(request))
    if not form.is_valid():
        return json_error(form_error_message(form))

    dados = form.cleaned_data
    if 'column_id' in dados and not BoardPermissions.can_use_column(request.user, dados['column_id']):
        return json_error('Coluna não encontrado(a) ou sem permissão', status=404)

    changes = Task.objects.update_fields(task_id, **dados)
    return json_success(changes=changes)


# === ANEXOS ===

@api_view
@require_http_methods(["GET", "POST"])
@api_login_required
@requires_owned_task
def task_attachments(request, task_id):
    task = request.task

    if request.method == 'GET':
        return json_success([serialize_attachment(a) for a in task.attachments.all()])

    form = AttachmentUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        return json_error(form_error_message(form))

    upload = form.cleaned_data['file']
    try:
        attachment = Attachment.objects.create(
            task=task,
            file=upload,
            file_name=upload.name,
            file_type=upload.content_type or '',
            file_size=upload.size,
        )
    except OSError:
        logger.exception(f"Falha ao gravar anexo '{upload.name}' da tarefa {task_id}")
        return json_error('Falha ao armazenar o arquivo', status=500)

    logger.info(f"Anexo {attachment.file.name} adicionado à tarefa {task_id}")
    return json_success(serialize_attachment(attachment), status=201)


@api_view
@require_http_methods(["DELETE"])
@api_login_required
@requires_owned_attachment
def attachment_detail(request, attachment_id):
    # Os bytes saem junto com a linha (signal post_delete)
    request.attachment.delete()
    return json_success()
