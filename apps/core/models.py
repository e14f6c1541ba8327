# apps/core/models.py

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models, transaction
from django.db.models import Count

from .utils import attachment_upload_to


class User(AbstractUser):
    """
    Usuário do Raia Board

    Dono dos projetos. Apenas username e senha importam para o sistema;
    emissão de token fica no auth_service.
    """

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.username


class OrderedQuerySet(models.QuerySet):
    """
    Operações de ordenação persistida

    Cada modelo ordenado declara em qual campo está o seu container
    (usuário, projeto ou coluna) e os campos de desempate.
    """

    def list_children(self, parent):
        """Filhos do container, por order_index e desempate estável"""
        model = self.model
        return self.filter(**{model.container_field: parent}).order_by(
            'order_index', *model.tiebreak_fields
        )

    def create_child(self, parent, **fields):
        """
        Cria no fim do container: order_index = quantidade de irmãos
        """
        model = self.model
        with transaction.atomic():
            count = model.objects.filter(**{model.container_field: parent}).count()
            return self.create(**{model.container_field: parent}, order_index=count, **fields)

    def update_fields(self, pk, **fields):
        """Atualiza campos parciais, retorna quantas linhas mudaram"""
        return self.filter(pk=pk).update(**fields)

    def delete_entity(self, pk):
        """Remove a entidade e tudo que depende dela (cascade)"""
        deleted, _ = self.filter(pk=pk).delete()
        return deleted

    def batch_set_order(self, entries):
        """
        Aplica o lote de ordenação em uma única transação

        Cada entrada é um update independente; id inexistente (ou fora do
        escopo deste queryset) simplesmente não altera nenhuma linha.
        Apenas tarefas aceitam troca de coluna.
        """
        changes = 0
        model = self.model

        with transaction.atomic():
            for entry in entries:
                values = {'order_index': entry.order_index}
                if model.container_reassignable and entry.column_id is not None:
                    values[f'{model.container_field}_id'] = entry.column_id
                changes += self.filter(pk=entry.id).update(**values)

        return changes


class OrderedModel(models.Model):
    """
    Base abstrata para entidades com posição dentro de um container
    """

    container_field = None
    container_reassignable = False
    tiebreak_fields = ('id',)

    order_index = models.IntegerField(default=0)

    objects = OrderedQuerySet.as_manager()

    class Meta:
        abstract = True


class Project(OrderedModel):
    """Projeto - container das colunas, ordenado entre os projetos do dono"""

    container_field = 'owner'
    tiebreak_fields = ('created_at', 'id')

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='projects'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'projects'
        ordering = ['order_index', 'created_at', 'id']

    def __str__(self):
        return self.name

    def create_default_columns(self):
        """Cria as colunas padrão de um projeto novo"""
        for idx, title in enumerate(settings.RAIA_DEFAULT_COLUMNS):
            Column.objects.create(
                title=title,
                project=self,
                order_index=idx
            )


class Column(OrderedModel):
    """Coluna do board, ordenada dentro do projeto"""

    container_field = 'project'

    title = models.CharField(max_length=100)
    color = models.CharField(max_length=7, default=settings.RAIA_DEFAULT_COLUMN_COLOR)
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='columns'
    )

    class Meta:
        db_table = 'columns'
        ordering = ['order_index', 'id']

    def __str__(self):
        return f"{self.title} ({self.project.name})"


class TaskQuerySet(OrderedQuerySet):

    def with_attachment_count(self):
        return self.annotate(attachment_count=Count('attachments'))


class Task(OrderedModel):
    """
    Tarefa do board

    A coluna é também a localização atual da tarefa; mover entre colunas
    é trocar `column` e `order_index` juntos.
    """

    container_field = 'column'
    container_reassignable = True
    tiebreak_fields = ('created_at', 'id')

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    priority = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    column = models.ForeignKey(
        Column,
        on_delete=models.CASCADE,
        related_name='tasks'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TaskQuerySet.as_manager()

    class Meta:
        db_table = 'tasks'
        ordering = ['order_index', 'created_at', 'id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(priority__gte=1, priority__lte=5),
                name='task_priority_between_1_and_5'
            ),
        ]

    def __str__(self):
        return self.title


class Attachment(models.Model):
    """Arquivo anexado a uma tarefa"""

    task = models.ForeignKey(
        Task,
        on_delete=models.CASCADE,
        related_name='attachments'
    )
    file_name = models.CharField(max_length=255)
    file = models.FileField(upload_to=attachment_upload_to, max_length=255)
    file_type = models.CharField(max_length=100, blank=True, default='')
    file_size = models.PositiveBigIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'attachments'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.file_name} ({self.task.title})"
