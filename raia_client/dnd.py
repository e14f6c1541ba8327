# raia_client/dnd.py

"""
Drag-and-drop do board

Três partes, todas sem I/O exceto o DragEngine:
- geometria e detecção de colisão (closest_corners, pointer_within,
  rect_intersection) e a política de alvo resolve_target
- planejamento: dado o cache e o alvo, qual a nova ordem e qual lote
  enviar (plan_project_reorder, plan_column_reorder, plan_task_move)
- DragEngine: máquina de estados Idle -> Dragging -> Idle que aplica o
  plano no cache
"""

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Collection, List, Optional, Sequence, Tuple

from .models import Column, OrderEntry, Project, Task

logger = logging.getLogger(__name__)


# === GEOMETRIA ===

@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        return (
            Point(self.left, self.top),
            Point(self.right, self.top),
            Point(self.left, self.bottom),
            Point(self.right, self.bottom),
        )

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def intersection_area(self, other: 'Rect') -> float:
        width = min(self.right, other.right) - max(self.left, other.left)
        height = min(self.bottom, other.bottom) - max(self.top, other.top)
        if width <= 0 or height <= 0:
            return 0.0
        return width * height


def _distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


# === REFERÊNCIAS ARRASTÁVEIS ===

class DragKind(Enum):
    PROJECT = 'project'
    COLUMN = 'column'
    TASK = 'task'


@dataclass(frozen=True)
class DraggableRef:
    """Referência tipada a algo arrastável ou soltável"""

    id: int

    kind = None


@dataclass(frozen=True)
class ProjectRef(DraggableRef):
    kind = DragKind.PROJECT


@dataclass(frozen=True)
class ColumnRef(DraggableRef):
    kind = DragKind.COLUMN


@dataclass(frozen=True)
class TaskRef(DraggableRef):
    kind = DragKind.TASK


@dataclass(frozen=True)
class Droppable:
    ref: DraggableRef
    rect: Rect


@dataclass(frozen=True)
class DragFrame:
    """Um quadro de movimento: onde está o item arrastado e o ponteiro"""

    active_rect: Rect
    pointer: Optional[Point]
    droppables: Sequence[Droppable]


# === DETECÇÃO DE COLISÃO ===

def closest_corners(active_rect: Rect, droppables: Sequence[Droppable]) -> List[Droppable]:
    """
    Ordena pela distância média entre cantos correspondentes
    (superior esquerdo com superior esquerdo, etc.), menor primeiro
    """
    active_corners = active_rect.corners()

    def score(droppable: Droppable) -> float:
        pares = zip(active_corners, droppable.rect.corners())
        return sum(_distance(a, b) for a, b in pares) / 4

    return sorted(droppables, key=score)


def pointer_within(pointer: Optional[Point], droppables: Sequence[Droppable]) -> List[Droppable]:
    """Droppables que contêm o ponteiro, o mais próximo (cantos) primeiro"""
    if pointer is None:
        return []

    hits = [d for d in droppables if d.rect.contains(pointer)]

    def score(droppable: Droppable) -> float:
        return sum(_distance(pointer, corner) for corner in droppable.rect.corners()) / 4

    return sorted(hits, key=score)


def rect_intersection(active_rect: Rect, droppables: Sequence[Droppable]) -> List[Droppable]:
    """
    Droppables que se sobrepõem ao item arrastado, maior razão
    interseção / união primeiro
    """
    scored = []
    for droppable in droppables:
        intersection = active_rect.intersection_area(droppable.rect)
        if intersection <= 0:
            continue
        union = droppable.rect.area + active_rect.area - intersection
        scored.append((intersection / union, droppable))

    scored.sort(key=lambda item: item[0], reverse=True)
    return [droppable for _, droppable in scored]


def _first_of_kind(hits: Sequence[Droppable], kind: DragKind) -> Optional[Droppable]:
    return next((d for d in hits if d.ref.kind is kind), None)


def resolve_target(active: DraggableRef, frame: DragFrame) -> Optional[DraggableRef]:
    """
    Política de alvo do drag

    Projeto ou coluna: canto mais próximo entre os do mesmo tipo.
    Tarefa: primeiro o que está sob o ponteiro (tarefa > coluna), depois
    interseção de retângulos com coluna, por fim canto mais próximo.
    """
    droppables = list(frame.droppables)

    if active.kind is not DragKind.TASK:
        same_kind = [d for d in droppables if d.ref.kind is active.kind]
        hits = closest_corners(frame.active_rect, same_kind)
        return hits[0].ref if hits else None

    pointer_hits = pointer_within(frame.pointer, droppables)
    if pointer_hits:
        task_hits = [d for d in pointer_hits if d.ref.kind is DragKind.TASK]
        if task_hits:
            return closest_corners(frame.active_rect, task_hits)[0].ref

        column_hit = _first_of_kind(pointer_hits, DragKind.COLUMN)
        if column_hit is not None:
            return column_hit.ref

    column_hit = _first_of_kind(rect_intersection(frame.active_rect, droppables), DragKind.COLUMN)
    if column_hit is not None:
        return column_hit.ref

    hits = closest_corners(frame.active_rect, droppables)
    return hits[0].ref if hits else None


# === PLANEJAMENTO ===

def array_move(items: Sequence, old_index: int, new_index: int) -> list:
    """Remove da posição antiga e insere na nova (não é troca)"""
    result = list(items)
    result.insert(new_index, result.pop(old_index))
    return result


def _index_of(items: Sequence, entity_id: int) -> Optional[int]:
    return next((idx for idx, item in enumerate(items) if item.id == entity_id), None)


@dataclass(frozen=True)
class ReorderPlan:
    """
    Resultado de um drop válido

    optimistic: a lista completa a aplicar no cache (projetos, colunas
    ou tarefas); entries: o lote a persistir.
    """

    kind: DragKind
    optimistic: list
    entries: List[OrderEntry]


def _plan_same_kind(kind: DragKind, items: Sequence, active_id: int, over_id: int) -> Optional[ReorderPlan]:
    if active_id == over_id:
        return None

    old_index = _index_of(items, active_id)
    new_index = _index_of(items, over_id)
    if old_index is None or new_index is None:
        return None

    moved = array_move(items, old_index, new_index)
    reindexed = [replace(item, order_index=idx) for idx, item in enumerate(moved)]
    entries = [OrderEntry(item.id, item.order_index) for item in reindexed]
    return ReorderPlan(kind, reindexed, entries)


def plan_project_reorder(projects: Sequence[Project], active_id: int, over_id: int) -> Optional[ReorderPlan]:
    return _plan_same_kind(DragKind.PROJECT, projects, active_id, over_id)


def plan_column_reorder(columns: Sequence[Column], active_id: int, over_id: int) -> Optional[ReorderPlan]:
    return _plan_same_kind(DragKind.COLUMN, columns, active_id, over_id)


def plan_task_move(
    tasks: Sequence[Task],
    active_id: int,
    target: DraggableRef,
    column_ids: Optional[Collection[int]] = None,
) -> Optional[ReorderPlan]:
    """
    Move uma tarefa para antes da tarefa alvo ou para o fim da coluna alvo

    Só a coluna de destino é reindexada; a de origem fica como está.
    """
    if target == TaskRef(active_id):
        return None

    active = next((t for t in tasks if t.id == active_id), None)
    if active is None:
        return None

    if target.kind is DragKind.COLUMN:
        destino = target.id
        if column_ids is not None and destino not in column_ids:
            return None
        # Índice além do fim = anexar
        insert_at = sum(1 for t in tasks if t.column_id == destino)
    elif target.kind is DragKind.TASK:
        over = next((t for t in tasks if t.id == target.id), None)
        if over is None:
            return None
        destino = over.column_id
        coluna = sorted((t for t in tasks if t.column_id == destino), key=lambda t: t.order_index)
        insert_at = _index_of(coluna, over.id)
    else:
        return None

    destination = sorted(
        (t for t in tasks if t.column_id == destino and t.id != active_id),
        key=lambda t: t.order_index,
    )
    destination.insert(insert_at, replace(active, column_id=destino))
    destination = [replace(t, order_index=idx) for idx, t in enumerate(destination)]

    others = [t for t in tasks if t.column_id != destino and t.id != active_id]
    entries = [OrderEntry(t.id, t.order_index, t.column_id) for t in destination]
    return ReorderPlan(DragKind.TASK, others + destination, entries)


# === MÁQUINA DE ESTADOS ===

class DragEngine:
    """
    Liga os eventos de drag ao cache

    Idle -> Dragging(ref) em drag_start; volta a Idle em drag_end/drop/
    cancel, com ou sem alvo. O plano é aplicado no cache antes de
    qualquer await de rede.
    """

    def __init__(self, cache):
        self.cache = cache
        self.active: Optional[DraggableRef] = None
        self.over: Optional[DraggableRef] = None

    @property
    def is_dragging(self) -> bool:
        return self.active is not None

    def drag_start(self, ref: DraggableRef) -> None:
        if self.active is not None:
            logger.warning(f"drag_start com drag em andamento ({self.active}); substituindo")
        self.active = ref
        self.over = None

    def drag_move(self, frame: DragFrame) -> Optional[DraggableRef]:
        """Atualiza o alvo destacado para o quadro atual"""
        if self.active is None:
            return None
        self.over = resolve_target(self.active, frame)
        return self.over

    def cancel(self) -> None:
        self.active = None
        self.over = None

    async def drop(self, frame: DragFrame) -> Optional[ReorderPlan]:
        """Resolve o alvo do quadro final e encerra o drag"""
        over = resolve_target(self.active, frame) if self.active is not None else None
        return await self.drag_end(over)

    async def drag_end(self, over: Optional[DraggableRef]) -> Optional[ReorderPlan]:
        """
        Encerra o drag e persiste a nova ordem

        Sem alvo, tipo incompatível ou alvo == origem: nada muda e nada
        é enviado.
        """
        active = self.active
        self.cancel()

        if active is None or over is None:
            return None

        plan = self.plan(active, over)
        if plan is None:
            logger.debug(f"Drop sem efeito: {active} sobre {over}")
            return None

        if plan.kind is DragKind.PROJECT:
            await self.cache.reorder_projects([p.id for p in plan.optimistic])
        elif plan.kind is DragKind.COLUMN:
            await self.cache.reorder_columns(plan.entries, plan.optimistic)
        else:
            await self.cache.reorder_tasks(plan.entries, plan.optimistic)

        return plan

    def plan(self, active: DraggableRef, over: DraggableRef) -> Optional[ReorderPlan]:
        if active.kind is DragKind.TASK:
            column_ids = {c.id for c in self.cache.columns}
            return plan_task_move(self.cache.tasks, active.id, over, column_ids)

        if over.kind is not active.kind:
            return None

        if active.kind is DragKind.PROJECT:
            return plan_project_reorder(self.cache.projects, active.id, over.id)
        return plan_column_reorder(self.cache.columns, active.id, over.id)
