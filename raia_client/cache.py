# raia_client/cache.py

"""
Cache de ordenação do cliente

Guarda projetos, colunas e tarefas do projeto atual já na ordem de
exibição. Mutações são otimistas: a mudança aparece antes da resposta da
API. Em caso de falha:
- atualizações/remoções simples voltam ao estado anterior, se o board
  ainda for o mesmo
- reordenações de colunas e tarefas não voltam; sempre recarregam o
  projeto do servidor (reconcile_after_reorder)
"""

import asyncio
import logging
from dataclasses import replace
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from .api import BoardApi
from .exceptions import RaiaClientError, UnauthorizedError
from .models import Attachment, Column, OrderEntry, Project, Task

logger = logging.getLogger(__name__)


class OrderingCache:

    def __init__(self, api: BoardApi, on_unauthorized: Optional[Callable[[], None]] = None):
        self.api = api
        self.on_unauthorized = on_unauthorized

        self.projects: List[Project] = []
        self.current_project_id: Optional[int] = None
        self.columns: List[Column] = []
        self.tasks: List[Task] = []
        self.attachments: Dict[int, List[Attachment]] = {}
        self.is_loading = False
        self.error: Optional[str] = None

        # Cada carga de board leva a geração vigente; resposta de geração
        # antiga é descartada
        self._generation = 0

    def reset(self) -> None:
        """Esvazia tudo (logout)"""
        self._generation += 1
        self.projects = []
        self.current_project_id = None
        self.columns = []
        self.tasks = []
        self.attachments = {}
        self.is_loading = False
        self.error = None

    # === CARGA ===

    async def fetch_projects(self) -> None:
        """Carrega os projetos; seleciona o primeiro se nenhum estiver selecionado"""
        self.is_loading = True
        self.error = None
        try:
            self.projects = await self.api.list_projects()
        except RaiaClientError as e:
            self._fail(e)
            return
        finally:
            self.is_loading = False

        if self.current_project_id is None and self.projects:
            await self.select(self.projects[0].id)

    async def select(self, project_id: int) -> bool:
        """
        Troca o projeto atual e carrega colunas e tarefas dele

        Returns:
            True se esta carga foi a que ficou no cache
        """
        self._generation += 1
        self.current_project_id = project_id
        self.columns = []
        self.tasks = []
        return await self._load_board(self._generation)

    async def reconcile_after_reorder(self) -> bool:
        """Recarrega colunas e tarefas do projeto atual, descartando o palpite otimista"""
        if self.current_project_id is None:
            return False
        self._generation += 1
        return await self._load_board(self._generation)

    # === APLICAÇÃO OTIMISTA ===

    def apply_optimistic_projects(self, projects: Iterable[Project]) -> None:
        self.projects = list(projects)

    def apply_optimistic_columns(self, columns: Iterable[Column]) -> None:
        self.columns = list(columns)

    def apply_optimistic_tasks(self, tasks: Iterable[Task]) -> None:
        self.tasks = list(tasks)

    async def mutate(
        self,
        collection: str,
        entity_id: int,
        changes: dict,
        persist: Callable[[], Awaitable],
    ) -> bool:
        """
        Atualização parcial otimista com rollback

        collection é 'projects', 'columns' ou 'tasks'. Aplica `changes` na
        hora, espera `persist()` e, se falhar, devolve só aquela entidade ao
        estado anterior. A lista pode ter sido trocada no meio (outro projeto
        selecionado); nesse caso a entidade não está mais nela e nada volta.
        """
        previous = next((item for item in getattr(self, collection) if item.id == entity_id), None)
        setattr(self, collection, [
            replace(item, **changes) if item.id == entity_id else item
            for item in getattr(self, collection)
        ])

        try:
            await persist()
        except RaiaClientError as e:
            if previous is not None:
                setattr(self, collection, [
                    previous if item.id == entity_id else item
                    for item in getattr(self, collection)
                ])
            self._fail(e)
            return False

        return True

    # === PROJETOS ===

    async def add_project(self, name: str, description: str = '') -> Optional[Project]:
        """Cria o projeto e já o seleciona"""
        self.error = None
        try:
            project = await self.api.create_project(name, description)
        except RaiaClientError as e:
            self._fail(e)
            return None

        self.projects = self.projects + [project]
        await self.select(project.id)
        return project

    async def update_project(self, project_id: int, **changes) -> bool:
        return await self.mutate(
            'projects', project_id, changes,
            lambda: self.api.update_project(project_id, **changes),
        )

    async def delete_project(self, project_id: int) -> bool:
        """Remove após confirmação do servidor e passa para o primeiro projeto restante"""
        self.error = None
        try:
            await self.api.delete_project(project_id)
        except RaiaClientError as e:
            self._fail(e)
            return False

        self.projects = [p for p in self.projects if p.id != project_id]
        if self.current_project_id == project_id:
            if self.projects:
                await self.select(self.projects[0].id)
            else:
                self._generation += 1
                self.current_project_id = None
                self.columns = []
                self.tasks = []
        return True

    async def reorder_projects(self, project_ids: List[int]) -> bool:
        """Reordenação otimista de projetos; em falha volta à ordem anterior"""
        snapshot = self.projects
        by_id = {p.id: p for p in snapshot}
        ordered = [by_id[pid] for pid in project_ids if pid in by_id]
        self.apply_optimistic_projects(
            replace(project, order_index=idx) for idx, project in enumerate(ordered)
        )

        try:
            await self.api.reorder_projects(project_ids)
        except RaiaClientError as e:
            self.projects = snapshot
            self._fail(e)
            return False

        return True

    # === COLUNAS ===

    async def add_column(self, title: str, color: Optional[str] = None) -> Optional[Column]:
        if self.current_project_id is None:
            return None

        self.error = None
        try:
            column = await self.api.create_column(self.current_project_id, title, color)
        except RaiaClientError as e:
            self._fail(e)
            return None

        if column.project_id == self.current_project_id:
            self.columns = self.columns + [column]
        return column

    async def update_column(self, column_id: int, **changes) -> bool:
        return await self.mutate(
            'columns', column_id, changes,
            lambda: self.api.update_column(column_id, **changes),
        )

    async def delete_column(self, column_id: int) -> bool:
        """
        Remove a coluna e, otimisticamente, as tarefas dela

        Em falha restaura e recarrega do servidor, desde que o board ainda
        seja o mesmo da remoção.
        """
        generation = self._generation
        snapshot_columns, snapshot_tasks = self.columns, self.tasks
        self.columns = [c for c in self.columns if c.id != column_id]
        self.tasks = [t for t in self.tasks if t.column_id != column_id]

        try:
            await self.api.delete_column(column_id)
        except RaiaClientError as e:
            self._fail(e)
            if generation == self._generation:
                self.columns, self.tasks = snapshot_columns, snapshot_tasks
                await self.reconcile_after_reorder()
            return False

        return True

    async def reorder_columns(self, entries: List[OrderEntry], optimistic: Optional[List[Column]] = None) -> bool:
        if optimistic is not None:
            self.apply_optimistic_columns(optimistic)
        return await self._persist_reorder(self.api.reorder_columns, entries)

    # === TAREFAS ===

    async def add_task(self, column_id: int, title: str, description: str = '', priority: int = 3) -> Optional[Task]:
        self.error = None
        try:
            task = await self.api.create_task(column_id, title, description, priority)
        except RaiaClientError as e:
            self._fail(e)
            return None

        self.tasks = self.tasks + [task]
        return task

    async def update_task(self, task_id: int, **changes) -> bool:
        return await self.mutate(
            'tasks', task_id, changes,
            lambda: self.api.update_task(task_id, **changes),
        )

    async def delete_task(self, task_id: int) -> bool:
        generation = self._generation
        snapshot = self.tasks
        self.tasks = [t for t in self.tasks if t.id != task_id]

        try:
            await self.api.delete_task(task_id)
        except RaiaClientError as e:
            if generation == self._generation:
                self.tasks = snapshot
            self._fail(e)
            return False

        self.attachments.pop(task_id, None)
        return True

    async def reorder_tasks(self, entries: List[OrderEntry], optimistic: Optional[List[Task]] = None) -> bool:
        """
        Sem lista otimista pronta, aplica as entradas sobre as tarefas
        atuais (índice e coluna)
        """
        if optimistic is not None:
            self.apply_optimistic_tasks(optimistic)
        else:
            updates = {e.id: e for e in entries}
            self.apply_optimistic_tasks(
                replace(
                    t,
                    order_index=updates[t.id].order_index,
                    column_id=updates[t.id].column_id if updates[t.id].column_id is not None else t.column_id,
                ) if t.id in updates else t
                for t in self.tasks
            )
        return await self._persist_reorder(self.api.reorder_tasks, entries)

    # === ANEXOS ===

    async def fetch_attachments(self, task_id: int) -> List[Attachment]:
        try:
            attachments = await self.api.list_attachments(task_id)
        except RaiaClientError as e:
            self._fail(e)
            return self.attachments.get(task_id, [])

        self.attachments[task_id] = attachments
        return attachments

    async def upload_attachment(
        self, task_id: int, file_name: str, content: bytes, content_type: str = 'application/octet-stream'
    ) -> bool:
        """Contador de anexos da tarefa só sobe depois do upload confirmado"""
        try:
            attachment = await self.api.upload_attachment(task_id, file_name, content, content_type)
        except RaiaClientError as e:
            self._fail(e)
            return False

        self.attachments[task_id] = [attachment] + self.attachments.get(task_id, [])
        self._bump_attachment_count(task_id, +1)
        return True

    async def delete_attachment(self, attachment_id: int, task_id: int) -> bool:
        try:
            await self.api.delete_attachment(attachment_id)
        except RaiaClientError as e:
            self._fail(e)
            return False

        self.attachments[task_id] = [a for a in self.attachments.get(task_id, []) if a.id != attachment_id]
        self._bump_attachment_count(task_id, -1)
        return True

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    async def _load_board(self, generation: int) -> bool:
        project_id = self.current_project_id
        self.is_loading = True
        try:
            columns, tasks = await asyncio.gather(
                self.api.list_columns(project_id),
                self.api.list_tasks(project_id),
            )
        except RaiaClientError as e:
            if generation == self._generation:
                self.is_loading = False
                self._fail(e)
            return False

        if generation != self._generation:
            logger.debug(f"Carga do projeto {project_id} descartada (geração {generation} < {self._generation})")
            return False

        self.columns = columns
        self.tasks = tasks
        self.is_loading = False
        return True

    async def _persist_reorder(self, send, entries: List[OrderEntry]) -> bool:
        """
        Envia o lote e recarrega o projeto, com sucesso ou não

        Falha de reordenação não vira mensagem de erro: a recarga já
        desfaz o palpite.
        """
        ok = True
        try:
            await send(entries)
        except RaiaClientError as e:
            ok = False
            logger.warning(f"Reordenação falhou, recarregando do servidor: {e}")
            if isinstance(e, UnauthorizedError):
                self._fail(e)
                return False

        await self.reconcile_after_reorder()
        return ok

    def _bump_attachment_count(self, task_id: int, delta: int) -> None:
        self.tasks = [
            replace(t, attachment_count=max(t.attachment_count + delta, 0)) if t.id == task_id else t
            for t in self.tasks
        ]

    def _fail(self, error: RaiaClientError) -> None:
        logger.warning(f"Operação falhou: {error}")

        # O logout limpa o cache; o erro é gravado depois para sobreviver
        if isinstance(error, UnauthorizedError) and self.on_unauthorized is not None:
            self.on_unauthorized()

        self.error = error.message
