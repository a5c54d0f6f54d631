"""
Migration inicial para o domínio de Veículos.

Cria a tabela veiculos.
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='VeiculoModel',
            fields=[
                ('id', models.CharField(editable=False, help_text='UUID único do veículo', max_length=36, primary_key=True, serialize=False)),
                ('marca', models.CharField(db_index=True, max_length=100)),
                ('modelo', models.CharField(db_index=True, max_length=100)),
                ('ano', models.PositiveSmallIntegerField()),
                ('cor', models.CharField(max_length=50)),
                ('preco', models.DecimalField(db_index=True, decimal_places=2, help_text='Preço de venda', max_digits=12)),
                ('status', models.CharField(choices=[('A_VENDA', 'À venda'), ('RESERVADO', 'Reservado'), ('VENDIDO', 'Vendido')], db_index=True, default='A_VENDA', max_length=20)),
                ('cpf_comprador', models.CharField(blank=True, max_length=14, null=True)),
                ('data_venda', models.DateTimeField(blank=True, null=True)),
                ('codigo_pagamento', models.CharField(blank=True, db_index=True, help_text='Identificador do pagamento no provedor', max_length=100, null=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Veículo',
                'verbose_name_plural': 'Veículos',
                'db_table': 'veiculos',
                'ordering': ['preco'],
                'indexes': [models.Index(fields=['status', 'preco'], name='veiculos_status_preco_idx')],
            },
        ),
    ]
