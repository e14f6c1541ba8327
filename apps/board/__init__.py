# apps/board/__init__.py

"""
Board - API JSON do Raia Board

Funcionalidades:
- CRUD de projetos, colunas, tarefas e anexos
- Lotes de reordenação vindos do drag-and-drop
"""
