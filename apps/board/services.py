# apps/board/services.py

"""
Serviço de Reordenação - lotes de order_index vindos do drag-and-drop

Recebe a ordem escolhida pelo cliente, reatribui índices densos 0..N-1
e grava tudo numa única transação. Ids inexistentes ou de outro usuário
não alteram nada (falha suave por entrada); o lote como um todo segue.
"""

import logging
from collections import OrderedDict
from typing import Iterable, List, Optional

from django.core.exceptions import ValidationError

from apps.core.permissions import BoardPermissions
from apps.core.utils import OrderEntry, densify

logger = logging.getLogger(__name__)


class ReorderingService:
    """
    Serviço encapsulado de reordenação

    - Projetos: a posição na lista é o novo índice
    - Colunas: índice denso sobre o lote enviado
    - Tarefas: índice denso por coluna de destino
    """

    def reorder_projects(self, owner, ordered_ids) -> int:
        """
        Reordena os projetos do usuário

        Returns:
            quantidade de linhas alteradas
        """
        if not isinstance(ordered_ids, list):
            raise ValidationError('projectIds deve ser uma lista')

        entries = [
            OrderEntry(self._parse_int(project_id, 'projectIds'), idx)
            for idx, project_id in enumerate(ordered_ids)
        ]

        changes = BoardPermissions.owned_projects(owner).batch_set_order(entries)
        logger.info(f"Projetos reordenados para {owner.username}: {changes}/{len(entries)} alterados")
        return changes

    def reorder_columns(self, user, items) -> int:
        """
        Reordena colunas - ordem pelo order_index enviado, empate pela
        ordem de envio
        """
        entries = densify(self._parse_entries(items, allow_column=False))

        changes = BoardPermissions.owned_columns(user).batch_set_order(entries)
        logger.info(f"Colunas reordenadas por {user.username}: {changes}/{len(entries)} alteradas")
        return changes

    def reorder_tasks(self, user, items) -> int:
        """
        Reordena tarefas, inclusive entre colunas

        Cada coluna de destino recebe índices densos próprios. A coluna de
        origem de uma tarefa que saiu não é recompactada aqui; os buracos
        somem no próximo lote que tocar nela.
        """
        entries = self._resolve_destinations(user, self._parse_entries(items, allow_column=True))

        grupos = OrderedDict()
        for entry in entries:
            grupos.setdefault(entry.column_id, []).append(entry)

        batch = []
        for grupo in grupos.values():
            batch.extend(densify(grupo))

        changes = BoardPermissions.owned_tasks(user).batch_set_order(batch)
        logger.info(
            f"Tarefas reordenadas por {user.username}: {changes}/{len(batch)} alteradas "
            f"em {len(grupos)} coluna(s)"
        )
        return changes

    # =================== MÉTODOS PRIVADOS (ENCAPSULADOS) ===================

    def _parse_entries(self, items, allow_column: bool) -> List[OrderEntry]:
        """Valida o lote no formato [{id, order_index, column_id?}]"""
        if not isinstance(items, list):
            raise ValidationError('items deve ser uma lista')

        entries = []
        for item in items:
            if not isinstance(item, dict):
                raise ValidationError('Cada item deve ser um objeto')

            column_id = None
            if allow_column and item.get('column_id') is not None:
                column_id = self._parse_int(item['column_id'], 'column_id')

            entries.append(OrderEntry(
                id=self._parse_int(item.get('id'), 'id'),
                order_index=self._parse_int(item.get('order_index'), 'order_index'),
                column_id=column_id,
            ))

        return entries

    def _parse_int(self, value, field: str) -> int:
        # bool é subclasse de int, mas não é um id válido
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f'{field} deve ser um número inteiro')
        return value

    def _resolve_destinations(self, user, entries: Iterable[OrderEntry]) -> List[OrderEntry]:
        """
        Fixa a coluna de destino de cada entrada

        Sem column_id, a tarefa fica na coluna atual. Destino que não é do
        usuário (ou não existe) descarta a entrada, como um id inexistente.
        """
        entries = list(entries)
        owned_columns = set(
            BoardPermissions.owned_columns(user)
            .filter(pk__in={e.column_id for e in entries if e.column_id is not None})
            .values_list('pk', flat=True)
        )
        current_columns = dict(
            BoardPermissions.owned_tasks(user)
            .filter(pk__in=[e.id for e in entries if e.column_id is None])
            .values_list('pk', 'column_id')
        )

        resolved = []
        for entry in entries:
            destino: Optional[int] = entry.column_id
            if destino is None:
                destino = current_columns.get(entry.id)
                if destino is None:
                    continue
                entry = entry._replace(column_id=destino)
            elif destino not in owned_columns:
                logger.warning(f"Coluna {destino} fora do escopo de {user.username}; tarefa {entry.id} ignorada")
                continue
            resolved.append(entry)

        return resolved


# Instância global do serviço (Singleton pattern)
reordering_service = ReorderingService()
