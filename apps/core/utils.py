# apps/core/utils.py

import os
import secrets
from typing import Iterable, List, NamedTuple, Optional

from django.conf import settings
from django.utils import timezone


class OrderEntry(NamedTuple):
    """Uma linha do lote de reordenação"""

    id: int
    order_index: int
    column_id: Optional[int] = None


def densify(entries: Iterable[OrderEntry]) -> List[OrderEntry]:
    """
    Reatribui order_index 0..N-1 seguindo a ordem pedida

    Empates no índice enviado mantêm a ordem de envio.
    """
    ordered = sorted(entries, key=lambda entry: entry.order_index)
    return [entry._replace(order_index=idx) for idx, entry in enumerate(ordered)]


def attachment_upload_to(instance, filename: str) -> str:
    """
    Caminho do arquivo anexado: <subdir>/<projeto>/<timestamp>-<aleatório><ext>

    O nome original fica só no banco (file_name).
    """
    project_id = instance.task.column.project_id if instance.task_id else 'misc'
    _, ext = os.path.splitext(filename)
    stamp = int(timezone.now().timestamp() * 1000)
    unique_name = f"{stamp}-{secrets.randbelow(10 ** 9)}{ext.lower()}"
    return f"{settings.RAIA_UPLOAD_SUBDIR}/{project_id}/{unique_name}"


def formatar_tamanho(num_bytes: int) -> str:
    """
    Formata tamanho em bytes para exibição
    Ex: 1536 -> "1.5 KB"
    """
    if not num_bytes:
        return "0 B"

    tamanho = float(num_bytes)
    for unidade in ('B', 'KB', 'MB', 'GB'):
        if tamanho < 1024 or unidade == 'GB':
            break
        tamanho /= 1024

    if unidade == 'B':
        return f"{int(tamanho)} B"
    return f"{tamanho:.1f} {unidade}"
