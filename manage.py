#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Raia Board - Kanban com ordenação persistida
"""

import os
import sys


def main():
    """Run administrative tasks."""

    # Configuração padrão para desenvolvimento
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import call_command, execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Comando de setup inicial: migrações + seed
    if len(sys.argv) > 1 and sys.argv[1] == 'setup':
        import django

        django.setup()

        print("🚀 Configurando Raia Board...")

        print("📊 Aplicando migrações...")
        call_command('migrate', interactive=False)

        print("🌱 Populando banco (só se estiver vazio)...")
        call_command('seed')

        print("✅ Setup concluído!")
        return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
