# raia_client/api.py

"""
Cliente HTTP da API JSON do Raia Board

Um método por endpoint. Respostas de erro viram exceções
(raia_client.exceptions); o envelope {"success", "data"} é desfeito aqui.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from .config import ClientSettings
from .exceptions import ApiError, TransportError, UnauthorizedError
from .models import Attachment, Column, OrderEntry, Project, Task, User

logger = logging.getLogger(__name__)


class BoardApi:
    """
    Wrapper fino sobre httpx.AsyncClient

    O token bearer fica no header padrão do client; trocar `token`
    vale para as próximas requisições.
    """

    def __init__(self, client: httpx.AsyncClient, token: Optional[str] = None):
        self._client = client
        self.token = token

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> 'BoardApi':
        client = httpx.AsyncClient(
            base_url=settings.api_url,
            timeout=httpx.Timeout(settings.timeout),
        )
        return cls(client, token=settings.token)

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value
        if value:
            self._client.headers['Authorization'] = f'Bearer {value}'
        else:
            self._client.headers.pop('Authorization', None)

    async def aclose(self) -> None:
        await self._client.aclose()

    # === AUTENTICAÇÃO ===

    async def register(self, username: str, password: str) -> Tuple[User, str]:
        data = await self._request('POST', '/auth/register', json={'username': username, 'password': password})
        return User.from_dict(data['user']), data['token']

    async def login(self, username: str, password: str) -> Tuple[User, str]:
        data = await self._request('POST', '/auth/login', json={'username': username, 'password': password})
        return User.from_dict(data['user']), data['token']

    async def me(self) -> User:
        data = await self._request('GET', '/auth/me')
        return User.from_dict(data['user'])

    async def change_password(self, old_password: str, new_password: str) -> None:
        await self._request(
            'POST', '/auth/change-password',
            json={'oldPassword': old_password, 'newPassword': new_password},
        )

    # === PROJETOS ===

    async def list_projects(self) -> List[Project]:
        data = await self._request('GET', '/projects')
        return [Project.from_dict(item) for item in data]

    async def create_project(self, name: str, description: str = '') -> Project:
        data = await self._request('POST', '/projects', json={'name': name, 'description': description})
        return Project.from_dict(data)

    async def update_project(self, project_id: int, **changes) -> int:
        payload = await self._request('PUT', f'/projects/{project_id}', json=changes, unwrap=False)
        return payload.get('changes', 0)

    async def delete_project(self, project_id: int) -> int:
        payload = await self._request('DELETE', f'/projects/{project_id}', unwrap=False)
        return payload.get('changes', 0)

    async def reorder_projects(self, project_ids: Iterable[int]) -> int:
        payload = await self._request(
            'PUT', '/projects/reorder', json={'projectIds': list(project_ids)}, unwrap=False
        )
        return payload.get('changes', 0)

    # === COLUNAS ===

    async def list_columns(self, project_id: int) -> List[Column]:
        data = await self._request('GET', '/columns', params={'project_id': project_id})
        return [Column.from_dict(item) for item in data]

    async def create_column(self, project_id: int, title: str, color: Optional[str] = None) -> Column:
        body = {'title': title, 'project_id': project_id}
        if color:
            body['color'] = color
        data = await self._request('POST', '/columns', json=body)
        return Column.from_dict(data)

    async def update_column(self, column_id: int, **changes) -> int:
        payload = await self._request('PUT', f'/columns/{column_id}', json=changes, unwrap=False)
        return payload.get('changes', 0)

    async def delete_column(self, column_id: int) -> int:
        payload = await self._request('DELETE', f'/columns/{column_id}', unwrap=False)
        return payload.get('changes', 0)

    async def reorder_columns(self, entries: Iterable[OrderEntry]) -> int:
        items = [{'id': e.id, 'order_index': e.order_index} for e in entries]
        payload = await self._request('POST', '/columns/reorder', json={'items': items}, unwrap=False)
        return payload.get('changes', 0)

    # === TAREFAS ===

    async def list_tasks(self, project_id: int) -> List[Task]:
        data = await self._request('GET', '/tasks', params={'project_id': project_id})
        return [Task.from_dict(item) for item in data]

    async def create_task(self, column_id: int, title: str, description: str = '', priority: int = 3) -> Task:
        data = await self._request('POST', '/tasks', json={
            'title': title,
            'column_id': column_id,
            'description': description,
            'priority': priority,
        })
        return Task.from_dict(data)

    async def update_task(self, task_id: int, **changes) -> int:
        payload = await self._request('PUT', f'/tasks/{task_id}', json=changes, unwrap=False)
        return payload.get('changes', 0)

    async def delete_task(self, task_id: int) -> int:
        payload = await self._request('DELETE', f'/tasks/{task_id}', unwrap=False)
        return payload.get('changes', 0)

    async def reorder_tasks(self, entries: Iterable[OrderEntry]) -> int:
        items = [e.as_payload() for e in entries]
        payload = await self._request('POST', '/tasks/reorder', json={'items': items}, unwrap=False)
        return payload.get('changes', 0)

    # === ANEXOS ===

    async def list_attachments(self, task_id: int) -> List[Attachment]:
        data = await self._request('GET', f'/tasks/{task_id}/attachments')
        return [Attachment.from_dict(item) for item in data]

    async def upload_attachment(
        self, task_id: int, file_name: str, content: bytes, content_type: str = 'application/octet-stream'
    ) -> Attachment:
        data = await self._request(
            'POST', f'/tasks/{task_id}/attachments',
            files={'file': (file_name, content, content_type)},
        )
        return Attachment.from_dict(data)

    async def delete_attachment(self, attachment_id: int) -> None:
        await self._request('DELETE', f'/attachments/{attachment_id}')

    # === MONITORAMENTO ===

    async def health(self) -> Dict[str, Any]:
        response = await self._send('GET', '/health')
        return self._decode(response)

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    async def _request(self, method: str, path: str, unwrap: bool = True, **kwargs) -> Any:
        """
        Envia a requisição e desfaz o envelope

        unwrap=True devolve só `data`; False devolve o envelope inteiro
        (endpoints que respondem com `changes`).
        """
        response = await self._send(method, path, **kwargs)
        payload = self._decode(response)

        if response.status_code in (401, 403):
            raise UnauthorizedError(response.status_code, payload.get('error') or 'Não autenticado')

        if response.is_error or not payload.get('success', False):
            message = payload.get('error') or response.reason_phrase or 'Erro desconhecido'
            logger.warning(f"{method} {path} falhou: [{response.status_code}] {message}")
            raise ApiError(response.status_code, message)

        return payload.get('data') if unwrap else payload

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} sem resposta: {e}")
            raise TransportError(str(e) or e.__class__.__name__) from e

    def _decode(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}
