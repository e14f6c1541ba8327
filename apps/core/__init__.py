# apps/core/__init__.py

"""
Core - Aplicação base do Raia Board

Contém:
- Models com ordenação persistida (Project, Column, Task, Attachment)
- Serviço de autenticação por token
- Sistema de permissões por dono do projeto
- Comando de seed para desenvolvimento
"""
