"""
Django Models para o domínio de Veículos.

Estes models são ADAPTERS - implementam a persistência para a
entidade de domínio definida em src/core/veiculos/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica na Entity do Core
- Models são mapeados para/de Entities via Mappers
"""

from django.db import models
from django.utils import timezone


class VeiculoStatusChoices(models.TextChoices):
    """Choices para status de veículo (espelha VeiculoStatus do Core)."""
    A_VENDA = 'A_VENDA', 'À venda'
    RESERVADO = 'RESERVADO', 'Reservado'
    VENDIDO = 'VENDIDO', 'Vendido'


class VeiculoModel(models.Model):
    """
    Model Django para persistência de Veículos.

    Fields:
        id: UUID como primary key (gerado pela Entity)
        marca, modelo, ano, cor: Dados descritivos
        preco: Preço de venda (DecimalField, sem ponto flutuante)
        status: Estado no ciclo de venda
        cpf_comprador, data_venda, codigo_pagamento: Metadados de venda
        criado_em: Timestamp de criação
        atualizado_em: Timestamp da última mutação (controlado pela Entity,
            usado no compare-and-swap das escritas)
    """

    # Primary Key - UUID gerado pela Entity
    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do veículo"
    )

    # Dados descritivos
    marca = models.CharField(max_length=100, db_index=True)
    modelo = models.CharField(max_length=100, db_index=True)
    ano = models.PositiveSmallIntegerField()
    cor = models.CharField(max_length=50)
    preco = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        db_index=True,
        help_text="Preço de venda"
    )

    # Estado
    status = models.CharField(
        max_length=20,
        choices=VeiculoStatusChoices.choices,
        default=VeiculoStatusChoices.A_VENDA,
        db_index=True,
    )

    # Metadados de venda
    cpf_comprador = models.CharField(max_length=14, null=True, blank=True)
    data_venda = models.DateTimeField(null=True, blank=True)
    codigo_pagamento = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="Identificador do pagamento no provedor"
    )

    # Timestamps (sem auto_now: a Entity controla atualizado_em)
    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'veiculos'
        verbose_name = 'Veículo'
        verbose_name_plural = 'Veículos'
        ordering = ['preco']
        indexes = [
            models.Index(fields=['status', 'preco'], name='veiculos_status_preco_idx'),
        ]

    def __str__(self):
        return f"[{self.id[:8]}] {self.marca} {self.modelo} {self.ano}"

    def __repr__(self):
        return f"<VeiculoModel id={self.id[:8]} status={self.status}>"
