# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import User, Project, Column, Task, Attachment
from .utils import formatar_tamanho


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin do usuário - só o básico, o sistema usa apenas username/senha"""

    list_display = ['username', 'projects_count', 'is_staff', 'is_active', 'date_joined']
    list_filter = ['is_staff', 'is_active', 'date_joined']
    search_fields = ['username']
    ordering = ['-date_joined']

    def projects_count(self, obj):
        return obj.projects.count()

    projects_count.short_description = 'Projetos'


class ColumnInline(admin.TabularInline):
    model = Column
    extra = 0
    fields = ['title', 'color', 'order_index']
    ordering = ['order_index', 'id']


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Admin para gerenciamento de projetos"""

    list_display = ['name', 'owner', 'order_index', 'columns_count', 'created_at']
    list_filter = ['created_at', 'owner']
    search_fields = ['name', 'description', 'owner__username']
    readonly_fields = ['created_at']
    ordering = ['owner', 'order_index', 'created_at', 'id']

    inlines = [ColumnInline]

    def columns_count(self, obj):
        """Conta colunas do projeto"""
        return obj.columns.count()

    columns_count.short_description = 'Colunas'


class TaskInline(admin.TabularInline):
    model = Task
    extra = 0
    fields = ['title', 'priority', 'order_index']
    ordering = ['order_index', 'created_at', 'id']


@admin.register(Column)
class ColumnAdmin(admin.ModelAdmin):
    """Admin para colunas do Kanban"""

    list_display = ['title', 'project', 'order_index', 'tasks_count', 'cor_preview']
    list_filter = ['project__owner', 'project']
    search_fields = ['title', 'project__name']
    ordering = ['project', 'order_index', 'id']

    inlines = [TaskInline]

    def tasks_count(self, obj):
        return obj.tasks.count()

    tasks_count.short_description = 'Tarefas'

    def cor_preview(self, obj):
        """Preview da cor da coluna"""
        return format_html(
            '<div style="width: 20px; height: 20px; background-color: {}; '
            'border: 1px solid #ccc; border-radius: 3px;"></div>',
            obj.color
        )

    cor_preview.short_description = 'Cor'


class AttachmentInline(admin.TabularInline):
    model = Attachment
    extra = 0
    fields = ['file_name', 'file_type', 'file_size', 'created_at']
    readonly_fields = ['file_name', 'file_type', 'file_size', 'created_at']

    def has_add_permission(self, request, obj=None):
        """Upload só pela API"""
        return False


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """Admin para tarefas"""

    list_display = ['id', 'title', 'prioridade_badge', 'column', 'order_index', 'created_at']
    list_filter = ['priority', 'column__project', 'created_at']
    search_fields = ['title', 'description']
    date_hierarchy = 'created_at'
    readonly_fields = ['created_at']

    inlines = [AttachmentInline]

    def prioridade_badge(self, obj):
        """Badge colorido para prioridade (1 = baixa, 5 = crítica)"""
        cores = {
            1: '#10B981',  # verde
            2: '#3B82F6',  # azul
            3: '#F59E0B',  # amarelo
            4: '#F97316',  # laranja
            5: '#EF4444',  # vermelho
        }
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 3px 8px; border-radius: 4px; font-size: 11px;">P{}</span>',
            cores.get(obj.priority, '#6B7280'), obj.priority
        )

    prioridade_badge.short_description = 'Prioridade'


@admin.register(Attachment)
class AttachmentAdmin(admin.ModelAdmin):
    """Admin para anexos"""

    list_display = ['file_name', 'task', 'file_type', 'tamanho', 'created_at']
    list_filter = ['file_type', 'created_at']
    search_fields = ['file_name', 'task__title']
    readonly_fields = ['file', 'file_size', 'created_at']

    def tamanho(self, obj):
        return formatar_tamanho(obj.file_size)

    tamanho.short_description = 'Tamanho'


# Configuração do site admin
admin.site.site_header = "Raia Board - Administração"
admin.site.site_title = "Raia Admin"
admin.site.index_title = "Painel Administrativo"
