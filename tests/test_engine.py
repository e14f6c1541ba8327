# pylint: disable=redefined-outer-name

import json

import httpx
import pytest
import respx

from raia_client.cache import OrderingCache
from raia_client.dnd import ColumnRef, DragEngine, DragFrame, Droppable, Point, ProjectRef, Rect, TaskRef

from .factories import column_json, envelope, task_json


def find(items, entity_id):
    return next(item for item in items if item.id == entity_id)


def sent_json(route: respx.Route) -> dict:
    return json.loads(route.calls.last.request.content)


@pytest.fixture
def engine(cache: OrderingCache) -> DragEngine:
    return DragEngine(cache)


@pytest.fixture
def reload_routes(mock_api: respx.MockRouter) -> dict:
    """Estado do projeto 1 depois de A ir para o topo de Doing e Done para o início"""
    columns = mock_api.get('/columns', params={'project_id': '1'}).respond(json=envelope([
        column_json(30, 'Done', order_index=0),
        column_json(10, 'Todo', order_index=1),
        column_json(20, 'Doing', order_index=2),
    ]))
    tasks = mock_api.get('/tasks', params={'project_id': '1'}).respond(json=envelope([
        task_json(2, 'B', 10, 1),
        task_json(3, 'C', 10, 2),
        task_json(1, 'A', 20, 0),
        task_json(4, 'D', 20, 1),
    ]))
    return {'columns': columns, 'tasks': tasks}


async def test_task_drop_is_optimistic_then_persisted(engine, cache, mock_api, reload_routes):
    seen = {}

    def responder(request):
        a = find(cache.tasks, 1)
        seen['a'] = (a.column_id, a.order_index)
        seen['dragging'] = engine.is_dragging
        return httpx.Response(200, json=envelope(changes=2))

    route = mock_api.post('/tasks/reorder').mock(side_effect=responder)

    engine.drag_start(TaskRef(1))
    plan = await engine.drag_end(TaskRef(4))

    assert plan is not None
    assert seen == {'a': (20, 0), 'dragging': False}
    assert sent_json(route) == {'items': [
        {'id': 1, 'order_index': 0, 'column_id': 20},
        {'id': 4, 'order_index': 1, 'column_id': 20},
    ]}
    assert reload_routes['tasks'].called
    assert (find(cache.tasks, 4).column_id, find(cache.tasks, 4).order_index) == (20, 1)


async def test_column_drop_resolved_from_frame(engine, cache, mock_api, reload_routes):
    seen = {}

    def responder(request):
        seen['columns'] = [c.id for c in cache.columns]
        return httpx.Response(200, json=envelope(changes=3))

    route = mock_api.post('/columns/reorder').mock(side_effect=responder)
    droppables = [
        Droppable(ColumnRef(10), Rect(0, 0, 200, 600)),
        Droppable(ColumnRef(20), Rect(220, 0, 200, 600)),
        Droppable(ColumnRef(30), Rect(440, 0, 200, 600)),
        Droppable(TaskRef(1), Rect(10, 10, 180, 60)),
    ]
    # Done arrastada até quase cobrir Todo
    frame = DragFrame(Rect(15, 0, 200, 600), Point(60, 40), droppables)

    engine.drag_start(ColumnRef(30))
    assert engine.drag_move(frame) == ColumnRef(10)
    await engine.drop(frame)

    assert seen['columns'] == [30, 10, 20]
    assert sent_json(route) == {'items': [
        {'id': 30, 'order_index': 0},
        {'id': 10, 'order_index': 1},
        {'id': 20, 'order_index': 2},
    ]}
    assert [c.id for c in cache.columns] == [30, 10, 20]
    assert not engine.is_dragging


async def test_project_drop_sends_ordered_ids(engine, cache, mock_api):
    route = mock_api.put('/projects/reorder').respond(json=envelope(changes=3))

    engine.drag_start(ProjectRef(3))
    await engine.drag_end(ProjectRef(1))

    assert sent_json(route) == {'projectIds': [3, 1, 2]}
    assert [(p.id, p.order_index) for p in cache.projects] == [(3, 0), (1, 1), (2, 2)]


@pytest.mark.parametrize('active, over', [
    (TaskRef(1), None),
    (TaskRef(2), TaskRef(2)),
    (TaskRef(1), ColumnRef(99)),
    (TaskRef(1), ProjectRef(2)),
    (ColumnRef(10), ColumnRef(10)),
    (ColumnRef(10), TaskRef(1)),
    (ProjectRef(1), ColumnRef(10)),
])
async def test_noop_drops_send_nothing(engine, cache, mock_api, active, over):
    before = (list(cache.projects), list(cache.columns), list(cache.tasks))

    engine.drag_start(active)
    plan = await engine.drag_end(over)

    assert plan is None
    assert not engine.is_dragging
    assert mock_api.calls.call_count == 0
    assert (cache.projects, cache.columns, cache.tasks) == before


async def test_drop_without_drag_in_progress(engine, mock_api):
    frame = DragFrame(Rect(0, 0, 10, 10), Point(5, 5), [Droppable(ColumnRef(10), Rect(0, 0, 10, 10))])

    assert engine.drag_move(frame) is None
    assert await engine.drop(frame) is None
    assert mock_api.calls.call_count == 0


async def test_cancel_returns_to_idle(engine):
    engine.drag_start(TaskRef(1))
    engine.drag_move(DragFrame(Rect(0, 0, 10, 10), Point(5, 5), [Droppable(ColumnRef(10), Rect(0, 0, 50, 50))]))

    assert engine.is_dragging
    assert engine.over == ColumnRef(10)

    engine.cancel()

    assert (engine.active, engine.over) == (None, None)
