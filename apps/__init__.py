# apps/__init__.py

"""
Raia Board - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models, autenticação, permissões e ordenação persistida
- board: API JSON do Kanban e serviço de reordenação
"""

__version__ = '0.1.0'
__author__ = 'Equipe Raia'
