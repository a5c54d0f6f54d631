#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cadastra veículos de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse
from decimal import Decimal

# Adicionar raiz do projeto ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # Forçar SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data():
    """Cadastra veículos de exemplo pelo use case (eventos incluídos)."""
    from src.config.container import get_container
    from src.core.veiculos.dtos import CadastrarVeiculoInputDTO

    service = get_container().cadastrar_veiculo_service()

    sample_veiculos = [
        ('Toyota', 'Corolla', 2023, 'Prata', Decimal('85000.00')),
        ('Honda', 'Civic', 2022, 'Preto', Decimal('92000.00')),
        ('Volkswagen', 'Gol', 2019, 'Branco', Decimal('38500.00')),
        ('Fiat', 'Toro', 2024, 'Vermelho', Decimal('129900.00')),
        ('Chevrolet', 'Onix', 2021, 'Azul', Decimal('61000.00')),
    ]

    print("\n🚗 Cadastrando veículos de exemplo...")

    for marca, modelo, ano, cor, preco in sample_veiculos:
        output = service.execute(CadastrarVeiculoInputDTO(
            marca=marca, modelo=modelo, ano=ano, cor=cor, preco=preco,
        ))
        print(f"   ✅ {output.marca} {output.modelo} {output.ano} - R$ {output.preco} ({output.id})")

    print(f"\n✅ {len(sample_veiculos)} veículos cadastrados!")


def check_connection():
    """Verifica conexão com o banco."""
    from src.adapters.django_app.shared.database import check_database_connection

    print("🔍 Verificando conexão com o banco...")

    info = check_database_connection()
    if info['healthy']:
        print(f"✅ Conexão OK! ({info['engine']})")
    else:
        print("❌ Banco de dados não responde")
    return info['healthy']


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. django-admin runserver --settings=src.config.settings")
    print("   2. Acesse: http://localhost:8000/admin/")
    print("   3. Acesse: http://localhost:8000/veiculos/api/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Cadastrar veículos de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Concessionária - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()
