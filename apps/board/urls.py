# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # === PROJETOS ===
    path('projects', views.projects_collection, name='projects'),
    path('projects/reorder', views.projects_reorder, name='projects_reorder'),
    path('projects/<int:project_id>', views.project_detail, name='project_detail'),

    # === COLUNAS ===
    path('columns', views.columns_collection, name='columns'),
    path('columns/reorder', views.columns_reorder, name='columns_reorder'),
    path('columns/<int:column_id>', views.column_detail, name='column_detail'),

    # === TAREFAS ===
    path('tasks', views.tasks_collection, name='tasks'),
    path('tasks/reorder', views.tasks_reorder, name='tasks_reorder'),
    path('tasks/<int:task_id>', views.task_detail, name='task_detail'),

    # === ANEXOS ===
    path('tasks/<int:task_id>/attachments', views.task_attachments, name='task_attachments'),
    path('attachments/<int:attachment_id>', views.attachment_detail, name='attachment_detail'),
]
