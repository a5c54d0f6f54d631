"""
Django Admin para o domínio de Veículos.

Somente leitura para metadados de venda: status, comprador e pagamento
mudam apenas pelo webhook, nunca pela interface administrativa.
"""

from django.contrib import admin
from django.utils.html import format_html

from src.core.veiculos.cpf import mascarar_cpf

from .models import VeiculoModel


@admin.register(VeiculoModel)
class VeiculoAdmin(admin.ModelAdmin):
    """Admin para VeiculoModel."""

    list_display = [
        'id_curto',
        'marca',
        'modelo',
        'ano',
        'cor',
        'preco',
        'status_badge',
        'data_venda',
    ]

    list_filter = [
        'status',
        'marca',
        'ano',
    ]

    search_fields = [
        'id',
        'marca',
        'modelo',
        'codigo_pagamento',
    ]

    readonly_fields = [
        'id',
        'status',
        'cpf_mascarado',
        'data_venda',
        'codigo_pagamento',
        'criado_em',
        'atualizado_em',
    ]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'marca', 'modelo', 'ano', 'cor', 'preco'],
        }),
        ('Venda', {
            'fields': ['status', 'cpf_mascarado', 'data_venda', 'codigo_pagamento'],
        }),
        ('Timestamps', {
            'fields': ['criado_em', 'atualizado_em'],
            'classes': ['collapse'],
        }),
    ]

    ordering = ['preco']

    def id_curto(self, obj):
        """Exibe ID curto (primeiros 8 caracteres)."""
        return obj.id[:8] + '...'
    id_curto.short_description = 'ID'

    def cpf_mascarado(self, obj):
        return mascarar_cpf(obj.cpf_comprador) if obj.cpf_comprador else '-'
    cpf_mascarado.short_description = 'CPF do comprador'

    def status_badge(self, obj):
        """Exibe status com badge colorido."""
        colors = {
            'A_VENDA': '#28a745',
            'RESERVADO': '#ffc107',
            'VENDIDO': '#343a40',
        }
        color = colors.get(obj.status, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'
