# pylint: disable=redefined-outer-name

import json
from collections.abc import AsyncIterator

import httpx
import pytest

from raia_client import AppState, ClientSettings
from raia_client.api import BoardApi
from raia_client.exceptions import ApiError, TransportError, UnauthorizedError
from raia_client.models import OrderEntry, Task, User

from .factories import column_json, envelope, failure, project_json

ALICE = {'id': 1, 'username': 'alice'}


# === BoardApi ===

async def test_bearer_token_is_sent(api: BoardApi, mock_api):
    route = mock_api.get('/auth/me').respond(json=envelope({'user': ALICE}))

    user = await api.me()

    assert user == User(id=1, username='alice')
    assert route.calls.last.request.headers['Authorization'] == 'Bearer test-token'


async def test_clearing_token_drops_header(api: BoardApi, mock_api):
    route = mock_api.get('/projects').respond(json=envelope([]))

    api.token = None
    await api.list_projects()

    assert 'Authorization' not in route.calls.last.request.headers


@pytest.mark.parametrize('status, error_class', [
    (400, ApiError),
    (401, UnauthorizedError),
    (403, UnauthorizedError),
    (404, ApiError),
    (500, ApiError),
])
async def test_error_envelope_becomes_exception(api: BoardApi, mock_api, status, error_class):
    mock_api.get('/projects').respond(status, json=failure('Falhou'))

    with pytest.raises(error_class) as info:
        await api.list_projects()

    assert info.value.status == status
    assert info.value.message == 'Falhou'


async def test_success_false_is_an_error_even_with_200(api: BoardApi, mock_api):
    mock_api.delete('/tasks/1').respond(200, json=failure('Erro ao excluir tarefa'))

    with pytest.raises(ApiError, match='Erro ao excluir tarefa'):
        await api.delete_task(1)


async def test_error_without_json_body_uses_reason_phrase(api: BoardApi, mock_api):
    mock_api.get('/projects').respond(502, text='upstream down')

    with pytest.raises(ApiError) as info:
        await api.list_projects()

    assert str(info.value) == '[502] Bad Gateway'


async def test_network_failure_is_transport_error(api: BoardApi, mock_api):
    mock_api.get('/projects').mock(side_effect=httpx.ConnectError('conexão recusada'))

    with pytest.raises(TransportError) as info:
        await api.list_projects()

    assert isinstance(info.value.__cause__, httpx.ConnectError)


async def test_reorder_payloads(api: BoardApi, mock_api):
    columns = mock_api.post('/columns/reorder').respond(json=envelope(changes=2))
    tasks = mock_api.post('/tasks/reorder').respond(json=envelope(changes=2))
    projects = mock_api.put('/projects/reorder').respond(json=envelope(changes=2))

    assert await api.reorder_columns([OrderEntry(20, 0, 99), OrderEntry(10, 1)]) == 2
    assert await api.reorder_tasks([OrderEntry(4, 0, 10), OrderEntry(1, 1)]) == 2
    assert await api.reorder_projects(iter([2, 1])) == 2

    assert json.loads(columns.calls.last.request.content) == {'items': [
        {'id': 20, 'order_index': 0},
        {'id': 10, 'order_index': 1},
    ]}
    assert json.loads(tasks.calls.last.request.content) == {'items': [
        {'id': 4, 'order_index': 0, 'column_id': 10},
        {'id': 1, 'order_index': 1},
    ]}
    assert json.loads(projects.calls.last.request.content) == {'projectIds': [2, 1]}


async def test_list_columns_passes_project_and_ignores_unknown_fields(api: BoardApi, mock_api):
    mock_api.get('/columns', params={'project_id': '7'}).respond(json=envelope([
        {**column_json(70, 'Todo', project_id=7), 'created_at': '2024-01-01T00:00:00Z'},
    ]))

    columns = await api.list_columns(7)

    assert [(c.id, c.project_id) for c in columns] == [(70, 7)]


async def test_upload_is_multipart(api: BoardApi, mock_api):
    route = mock_api.post('/tasks/3/attachments').respond(201, json=envelope({
        'id': 1, 'task_id': 3, 'file_name': 'nota.txt', 'file_type': 'text/plain', 'file_size': 3,
    }))

    attachment = await api.upload_attachment(3, 'nota.txt', b'abc', 'text/plain')

    request = route.calls.last.request
    assert request.headers['Content-Type'].startswith('multipart/form-data')
    assert b'filename="nota.txt"' in request.content
    assert (attachment.file_name, attachment.file_size) == ('nota.txt', 3)


async def test_health_returns_body_without_envelope(api: BoardApi, mock_api):
    route = mock_api.get('/health').respond(
        json={'status': 'healthy', 'database': 'ok', 'cache': 'ok', 'version': '1.0.0'}
    )

    health = await api.health()

    assert health == {'status': 'healthy', 'database': 'ok', 'cache': 'ok', 'version': '1.0.0'}
    assert route.called


async def test_unhealthy_server_is_reported_not_raised(api: BoardApi, mock_api):
    mock_api.get('/health').respond(500, json={'status': 'unhealthy', 'database': 'error'})

    health = await api.health()

    assert health['status'] == 'unhealthy'


async def test_health_without_json_body_is_empty(api: BoardApi, mock_api):
    mock_api.get('/health').respond(502, text='Bad Gateway')

    assert await api.health() == {}


# === ClientSettings ===

def test_settings_from_env(monkeypatch):
    monkeypatch.setenv('RAIA_API_URL', 'https://raia.example.com/api')
    monkeypatch.setenv('RAIA_API_TOKEN', 'abc')
    monkeypatch.setenv('RAIA_API_TIMEOUT', '2.5')

    settings = ClientSettings.from_env()

    assert settings == ClientSettings('https://raia.example.com/api', 'abc', 2.5)


def test_settings_defaults(monkeypatch):
    for name in ('RAIA_API_URL', 'RAIA_API_TOKEN', 'RAIA_API_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)

    settings = ClientSettings.from_env()

    assert settings == ClientSettings()
    assert settings.api_url == 'http://localhost:8000/api'
    assert settings.token is None


# === AppState ===

@pytest.fixture
async def state(base_url: str) -> AsyncIterator[AppState]:
    async with httpx.AsyncClient(base_url=base_url) as client:
        yield AppState(ClientSettings(api_url=base_url), client=client)


async def test_login_starts_session_and_loads_projects(state: AppState, mock_api):
    mock_api.post('/auth/login').respond(json=envelope({'user': ALICE, 'token': 'novo-token'}))
    projects = mock_api.get('/projects').respond(json=envelope([]))

    user = await state.login('alice', 'secret123')

    assert user.username == 'alice'
    assert state.is_authenticated
    assert projects.calls.last.request.headers['Authorization'] == 'Bearer novo-token'


async def test_failed_login_keeps_anonymous(state: AppState, mock_api):
    mock_api.post('/auth/login').respond(401, json=failure('Credenciais inválidas'))

    with pytest.raises(UnauthorizedError):
        await state.login('alice', 'errada')

    assert not state.is_authenticated
    assert state.user is None


async def test_startup_with_valid_token(base_url: str, mock_api):
    mock_api.get('/auth/me').respond(json=envelope({'user': ALICE}))
    mock_api.get('/projects').respond(json=envelope([project_json(1, 'Site')]))
    mock_api.get('/columns').respond(json=envelope([column_json(10, 'Todo')]))
    mock_api.get('/tasks').respond(json=envelope([]))

    async with httpx.AsyncClient(base_url=base_url) as client:
        state = AppState(ClientSettings(api_url=base_url, token='salvo'), client=client)

        assert await state.startup() is True

    assert state.user == User(1, 'alice')
    assert state.cache.current_project_id == 1
    assert [c.id for c in state.cache.columns] == [10]


async def test_startup_with_expired_token_logs_out(base_url: str, mock_api):
    mock_api.get('/auth/me').respond(401, json=failure('Não autenticado'))

    async with httpx.AsyncClient(base_url=base_url) as client:
        state = AppState(ClientSettings(api_url=base_url, token='vencido'), client=client)

        assert await state.startup() is False

    assert not state.is_authenticated


async def test_startup_without_token_does_nothing(state: AppState, mock_api):
    assert await state.startup() is False
    assert mock_api.calls.call_count == 0


async def test_unauthorized_cache_call_logs_out(state: AppState, mock_api):
    mock_api.post('/auth/login').respond(json=envelope({'user': ALICE, 'token': 'novo-token'}))
    mock_api.get('/projects').respond(json=envelope([]))
    mock_api.put('/tasks/1').respond(401, json=failure('Não autenticado'))
    await state.login('alice', 'secret123')
    state.cache.tasks = [Task(id=1, title='A', column_id=10)]

    assert await state.cache.update_task(1, title='B') is False

    assert not state.is_authenticated
    assert state.user is None
    assert state.cache.tasks == []
    assert state.cache.error == 'Não autenticado'


async def test_change_password_failure_is_reported(state: AppState, mock_api):
    state.api.token = 'token'
    mock_api.post('/auth/change-password').respond(400, json=failure('Senha atual incorreta'))

    assert await state.change_password('errada', 'novasenha') is False

    assert state.cache.error == 'Senha atual incorreta'
    assert state.is_authenticated


async def test_logout_clears_everything(state: AppState):
    state.api.token = 'token'
    state.user = User(1, 'alice')
    state.cache.current_project_id = 1

    state.logout()

    assert (state.user, state.api.token, state.cache.current_project_id) == (None, None, None)
