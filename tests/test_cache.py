# pylint: disable=redefined-outer-name

import asyncio
import json
from dataclasses import replace

import httpx
import pytest
import respx

from raia_client.api import BoardApi
from raia_client.cache import OrderingCache
from raia_client.models import OrderEntry

from .factories import column_json, envelope, failure, project_json, task_json


def find(items, entity_id):
    return next(item for item in items if item.id == entity_id)


@pytest.fixture
def server_board(mock_api: respx.MockRouter) -> dict:
    """Verdade do servidor para o projeto 1"""
    columns = mock_api.get('/columns', params={'project_id': '1'}).respond(json=envelope([
        column_json(10, 'Todo', order_index=0),
        column_json(20, 'Doing', order_index=1),
        column_json(30, 'Done', order_index=2),
    ]))
    tasks = mock_api.get('/tasks', params={'project_id': '1'}).respond(json=envelope([
        task_json(1, 'A', 10, 0),
        task_json(2, 'B', 10, 1),
        task_json(3, 'C', 10, 2),
        task_json(4, 'D', 20, 0),
    ]))
    return {'columns': columns, 'tasks': tasks}


# === CARGA ===

async def test_fetch_projects_selects_first(api: BoardApi, mock_api, server_board):
    mock_api.get('/projects').respond(json=envelope([project_json(1, 'Site'), project_json(2, 'App', 1)]))
    cache = OrderingCache(api)

    await cache.fetch_projects()

    assert [p.id for p in cache.projects] == [1, 2]
    assert cache.current_project_id == 1
    assert [c.title for c in cache.columns] == ['Todo', 'Doing', 'Done']
    assert len(cache.tasks) == 4
    assert cache.is_loading is False


async def test_stale_board_load_is_discarded(cache: OrderingCache, mock_api):
    gate = asyncio.Event()

    async def slow_columns(request):
        await gate.wait()
        return httpx.Response(200, json=envelope([column_json(10, 'Velha')]))

    mock_api.get('/columns', params={'project_id': '1'}).mock(side_effect=slow_columns)
    mock_api.get('/tasks', params={'project_id': '1'}).respond(json=envelope([]))
    mock_api.get('/columns', params={'project_id': '2'}).respond(
        json=envelope([column_json(50, 'Nova', project_id=2)])
    )
    mock_api.get('/tasks', params={'project_id': '2'}).respond(json=envelope([task_json(7, 'T', 50, 0)]))

    first = asyncio.create_task(cache.select(1))
    await asyncio.sleep(0)

    assert await cache.select(2) is True
    gate.set()
    assert await first is False

    assert cache.current_project_id == 2
    assert [c.id for c in cache.columns] == [50]
    assert [t.id for t in cache.tasks] == [7]


# === ATUALIZAÇÃO OTIMISTA ===

async def test_update_task_rolls_back_on_failure(cache: OrderingCache, mock_api):
    seen = {}

    def responder(request):
        seen['priority'] = find(cache.tasks, 1).priority
        return httpx.Response(500, json=failure('Erro ao atualizar tarefa'))

    mock_api.put('/tasks/1').mock(side_effect=responder)

    assert await cache.update_task(1, priority=5) is False

    assert seen['priority'] == 5
    assert find(cache.tasks, 1).priority == 3
    assert cache.error == 'Erro ao atualizar tarefa'


@pytest.fixture
def second_board(mock_api: respx.MockRouter) -> None:
    mock_api.get('/columns', params={'project_id': '2'}).respond(
        json=envelope([column_json(50, 'Nova', project_id=2)])
    )
    mock_api.get('/tasks', params={'project_id': '2'}).respond(json=envelope([task_json(7, 'T', 50, 0)]))


async def test_failed_update_after_switching_project_keeps_new_board(cache: OrderingCache, mock_api, second_board):
    gate = asyncio.Event()

    async def slow_failure(request):
        await gate.wait()
        return httpx.Response(500, json=failure('Erro ao atualizar tarefa'))

    mock_api.put('/tasks/1').mock(side_effect=slow_failure)

    update = asyncio.create_task(cache.update_task(1, priority=5))
    await asyncio.sleep(0)

    assert await cache.select(2) is True
    gate.set()
    assert await update is False

    assert cache.current_project_id == 2
    assert [c.id for c in cache.columns] == [50]
    assert [t.id for t in cache.tasks] == [7]
    assert cache.error == 'Erro ao atualizar tarefa'


async def test_failed_task_delete_after_switching_project_keeps_new_board(cache: OrderingCache, mock_api, second_board):
    gate = asyncio.Event()

    async def slow_failure(request):
        await gate.wait()
        return httpx.Response(500, json=failure('Erro ao excluir tarefa'))

    mock_api.delete('/tasks/2').mock(side_effect=slow_failure)

    delete = asyncio.create_task(cache.delete_task(2))
    await asyncio.sleep(0)

    assert await cache.select(2) is True
    gate.set()
    assert await delete is False

    assert [t.id for t in cache.tasks] == [7]
    assert cache.error == 'Erro ao excluir tarefa'


async def test_update_column_keeps_change_on_success(cache: OrderingCache, mock_api):
    route = mock_api.put('/columns/20').respond(json=envelope(changes=1))

    assert await cache.update_column(20, title='Fazendo') is True

    assert find(cache.columns, 20).title == 'Fazendo'
    assert json.loads(route.calls.last.request.content) == {'title': 'Fazendo'}
    assert cache.error is None


async def test_project_reorder_rolls_back_on_failure(cache: OrderingCache, mock_api):
    mock_api.put('/projects/reorder').respond(500, json=failure('Erro ao reordenar projetos'))

    assert await cache.reorder_projects([3, 1, 2]) is False

    assert [p.id for p in cache.projects] == [1, 2, 3]
    assert cache.error == 'Erro ao reordenar projetos'


async def test_delete_column_restores_and_reconciles(cache: OrderingCache, mock_api, server_board):
    seen = {}

    def responder(request):
        seen['columns'] = [c.id for c in cache.columns]
        seen['tasks'] = [t.id for t in cache.tasks]
        return httpx.Response(500, json=failure('Erro ao excluir coluna'))

    mock_api.delete('/columns/10').mock(side_effect=responder)

    assert await cache.delete_column(10) is False

    assert seen == {'columns': [20, 30], 'tasks': [4]}
    assert [c.id for c in cache.columns] == [10, 20, 30]
    assert sorted(t.id for t in cache.tasks) == [1, 2, 3, 4]
    assert server_board['columns'].called


# === REORDENAÇÃO ===

async def test_failed_task_reorder_reconciles_with_server(cache: OrderingCache, mock_api, server_board):
    mock_api.post('/tasks/reorder').respond(500, json=failure('Erro ao reordenar tarefas'))

    ok = await cache.reorder_tasks([OrderEntry(4, 0, 10), OrderEntry(1, 1, 10)])

    assert ok is False
    assert server_board['tasks'].called
    assert (find(cache.tasks, 4).column_id, find(cache.tasks, 4).order_index) == (20, 0)
    assert find(cache.tasks, 1).order_index == 0
    # Falha de reordenação não vira mensagem de erro
    assert cache.error is None


async def test_successful_column_reorder_also_reconciles(cache: OrderingCache, mock_api, server_board):
    route = mock_api.post('/columns/reorder').respond(json=envelope(changes=3))

    ok = await cache.reorder_columns([OrderEntry(30, 0), OrderEntry(10, 1), OrderEntry(20, 2)])

    assert ok is True
    assert route.called
    assert server_board['columns'].call_count == 1


async def test_reorder_tasks_without_plan_applies_entries(cache: OrderingCache, mock_api):
    seen = {}

    def responder(request):
        seen['b'] = find(cache.tasks, 2)
        return httpx.Response(401, json=failure('Não autenticado'))

    mock_api.post('/tasks/reorder').mock(side_effect=responder)

    await cache.reorder_tasks([OrderEntry(2, 0, 30)])

    assert (seen['b'].column_id, seen['b'].order_index) == (30, 0)


async def test_unauthorized_reorder_skips_reconcile(api: BoardApi, mock_api, server_board):
    calls = []
    cache = OrderingCache(api, on_unauthorized=lambda: calls.append('logout'))
    cache.current_project_id = 1
    mock_api.post('/tasks/reorder').respond(401, json=failure('Não autenticado'))

    assert await cache.reorder_tasks([OrderEntry(1, 0, 10)]) is False

    assert calls == ['logout']
    assert not server_board['tasks'].called
    assert cache.error == 'Não autenticado'


# === PROJETOS ===

async def test_add_project_selects_it(cache: OrderingCache, mock_api):
    mock_api.post('/projects').respond(201, json=envelope(project_json(4, 'Novo', 3)))
    mock_api.get('/columns', params={'project_id': '4'}).respond(json=envelope([
        column_json(40, 'To Do', project_id=4),
    ]))
    mock_api.get('/tasks', params={'project_id': '4'}).respond(json=envelope([]))

    project = await cache.add_project('Novo')

    assert project.id == 4
    assert [p.id for p in cache.projects] == [1, 2, 3, 4]
    assert cache.current_project_id == 4
    assert [c.id for c in cache.columns] == [40]


async def test_delete_current_project_selects_first_remaining(cache: OrderingCache, mock_api):
    mock_api.delete('/projects/1').respond(json=envelope(changes=1))
    mock_api.get('/columns', params={'project_id': '2'}).respond(json=envelope([]))
    mock_api.get('/tasks', params={'project_id': '2'}).respond(json=envelope([]))

    assert await cache.delete_project(1) is True

    assert [p.id for p in cache.projects] == [2, 3]
    assert cache.current_project_id == 2
    assert cache.columns == []


async def test_failed_project_delete_keeps_list(cache: OrderingCache, mock_api):
    mock_api.delete('/projects/2').respond(404, json=failure('Projeto não encontrado(a) ou sem permissão'))

    assert await cache.delete_project(2) is False

    assert [p.id for p in cache.projects] == [1, 2, 3]
    assert cache.error == 'Projeto não encontrado(a) ou sem permissão'


# === ANEXOS ===

async def test_attachment_count_follows_upload_and_delete(cache: OrderingCache, mock_api):
    mock_api.post('/tasks/1/attachments').respond(201, json=envelope({
        'id': 99, 'task_id': 1, 'file_name': 'nota.txt', 'file_size': 4, 'extra': 'ignorado',
    }))
    mock_api.delete('/attachments/99').respond(json=envelope())

    assert await cache.upload_attachment(1, 'nota.txt', b'oi!\n', 'text/plain') is True
    assert find(cache.tasks, 1).attachment_count == 1
    assert [a.id for a in cache.attachments[1]] == [99]

    assert await cache.delete_attachment(99, task_id=1) is True
    assert find(cache.tasks, 1).attachment_count == 0
    assert cache.attachments[1] == []

    # Nunca fica negativo
    assert await cache.delete_attachment(99, task_id=1) is True
    assert find(cache.tasks, 1).attachment_count == 0


async def test_failed_attachment_delete_keeps_count(cache: OrderingCache, mock_api):
    cache.tasks = [replace(t, attachment_count=2) if t.id == 2 else t for t in cache.tasks]
    mock_api.delete('/attachments/5').respond(500, json=failure('Erro ao excluir anexo'))

    assert await cache.delete_attachment(5, task_id=2) is False

    assert find(cache.tasks, 2).attachment_count == 2
    assert cache.error == 'Erro ao excluir anexo'


# === SESSÃO ===

async def test_unauthorized_calls_hook_before_recording_error(api: BoardApi, mock_api):
    calls = []
    cache = OrderingCache(api)
    cache.on_unauthorized = lambda: calls.append(cache.error)
    mock_api.get('/projects').respond(401, json=failure('Não autenticado'))

    await cache.fetch_projects()

    assert calls == [None]
    assert cache.error == 'Não autenticado'
    assert cache.is_loading is False


async def test_reset_drops_everything(cache: OrderingCache):
    cache.reset()

    assert (cache.projects, cache.columns, cache.tasks) == ([], [], [])
    assert cache.current_project_id is None
