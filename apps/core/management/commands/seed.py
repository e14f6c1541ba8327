# apps/core/management/commands/seed.py

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import User, Project


class Command(BaseCommand):
    help = 'Cria superusuário admin e projeto padrão quando o banco está vazio'

    def add_arguments(self, parser):
        parser.add_argument('--username', default='admin', help='Usuário inicial')
        parser.add_argument('--password', default='admin123', help='Senha do usuário inicial')

    def handle(self, *args, **options):
        """
        Popula o banco apenas na primeira execução

        Se já existe qualquer usuário, não faz nada.
        """
        self.stdout.write('🔍 Verificando se o banco está vazio...')

        if User.objects.exists():
            self.stdout.write(self.style.WARNING('⚠️  Banco já possui usuários - seed ignorado'))
            return

        with transaction.atomic():
            usuario = self._criar_usuario(options['username'], options['password'])
            projeto = self._criar_projeto_padrao(usuario)

        self.stdout.write(
            self.style.SUCCESS(
                '\n✅ SEED CONCLUÍDO!\n'
                f'  👤 Usuário: {usuario.username} / {options["password"]}\n'
                f'  📁 Projeto: {projeto.name} ({projeto.columns.count()} colunas)\n'
            )
        )

    def _criar_usuario(self, username, password):
        self.stdout.write(f'  👤 Criando administrador {username}...')
        # Superusuário: entra na API e também no /admin/
        return User.objects.create_superuser(username=username, password=password)

    def _criar_projeto_padrao(self, usuario):
        """Projeto padrão - as colunas vêm do signal de criação"""
        self.stdout.write('  📁 Criando projeto padrão...')
        return Project.objects.create_child(
            usuario,
            name='Meu Primeiro Projeto',
            description='Projeto criado automaticamente',
        )
