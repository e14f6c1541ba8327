# raia_client/models.py

"""
Entidades do board do lado do cliente

Imutáveis: o cache troca listas inteiras e usa dataclasses.replace
para atualizações parciais.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, NamedTuple, Optional


def _from_dict(cls, data: Dict[str, Any]):
    # Campos desconhecidos vindos da API são ignorados
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class User:
    id: int
    username: str

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)


@dataclass(frozen=True)
class Project:
    id: int
    name: str
    description: str = ''
    order_index: int = 0
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)


@dataclass(frozen=True)
class Column:
    id: int
    title: str
    project_id: int
    color: str = '#f59e0b'
    order_index: int = 0

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)


@dataclass(frozen=True)
class Task:
    id: int
    title: str
    column_id: int
    description: str = ''
    priority: int = 3
    order_index: int = 0
    created_at: Optional[str] = None
    attachment_count: int = 0

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)


@dataclass(frozen=True)
class Attachment:
    id: int
    task_id: int
    file_name: str
    file_path: str = ''
    url: str = ''
    file_type: str = ''
    file_size: int = 0
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return _from_dict(cls, data)


class OrderEntry(NamedTuple):
    """Uma linha do lote de reordenação enviado à API"""

    id: int
    order_index: int
    column_id: Optional[int] = None

    def as_payload(self) -> Dict[str, int]:
        payload = {'id': self.id, 'order_index': self.order_index}
        if self.column_id is not None:
            payload['column_id'] = self.column_id
        return payload
