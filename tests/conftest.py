# pylint: disable=redefined-outer-name

from collections.abc import AsyncIterator, Iterator

import httpx
import pytest
import respx

from raia_client.api import BoardApi
from raia_client.cache import OrderingCache
from raia_client.models import Column, Project, Task


@pytest.fixture
def base_url() -> str:
    return 'http://raia.test/api'


@pytest.fixture
def mock_api(base_url: str) -> Iterator[respx.MockRouter]:
    with respx.mock(
        base_url=base_url,
        assert_all_called=False,
        assert_all_mocked=True,
    ) as mock:
        yield mock


@pytest.fixture
async def api(base_url: str) -> AsyncIterator[BoardApi]:
    async with httpx.AsyncClient(base_url=base_url) as client:
        yield BoardApi(client, token='test-token')


@pytest.fixture
def board_columns() -> list:
    return [
        Column(id=10, title='Todo', project_id=1, order_index=0),
        Column(id=20, title='Doing', project_id=1, order_index=1),
        Column(id=30, title='Done', project_id=1, order_index=2),
    ]


@pytest.fixture
def board_tasks() -> list:
    return [
        Task(id=1, title='A', column_id=10, order_index=0),
        Task(id=2, title='B', column_id=10, order_index=1),
        Task(id=3, title='C', column_id=10, order_index=2),
        Task(id=4, title='D', column_id=20, order_index=0),
    ]


@pytest.fixture
def cache(api: BoardApi, board_columns: list, board_tasks: list) -> OrderingCache:
    """Cache já com o projeto 1 carregado"""
    cache = OrderingCache(api)
    cache.projects = [
        Project(id=1, name='Site', order_index=0),
        Project(id=2, name='App', order_index=1),
        Project(id=3, name='Infra', order_index=2),
    ]
    cache.current_project_id = 1
    cache.columns = list(board_columns)
    cache.tasks = list(board_tasks)
    return cache
