"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter VeiculoEntity → VeiculoModel (para persistência)
- Converter VeiculoModel → VeiculoEntity (via reconstituir, sem validação)
- Converter campos de escrita parcial para valores de coluna

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from django.utils import timezone

from src.core.veiculos.entities import VeiculoEntity, VeiculoStatus

from .models import VeiculoModel


def _para_banco(valor: Optional[datetime]) -> Optional[datetime]:
    """Entidades usam datetime.now() (naive); o banco guarda aware."""
    if valor is not None and timezone.is_naive(valor):
        return timezone.make_aware(valor)
    return valor


class VeiculoMapper:
    """
    Mapper para conversão entre VeiculoEntity e VeiculoModel.

    Responsável por:
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - to_columns(): campos parciais → colunas
    """

    @staticmethod
    def to_model(entity: VeiculoEntity) -> VeiculoModel:
        """
        Converte VeiculoEntity para VeiculoModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return VeiculoModel(
            id=entity.id,
            marca=entity.marca,
            modelo=entity.modelo,
            ano=entity.ano,
            cor=entity.cor,
            preco=entity.preco,
            status=entity.status.value,
            cpf_comprador=entity.cpf_comprador,
            data_venda=_para_banco(entity.data_venda),
            codigo_pagamento=entity.codigo_pagamento,
            criado_em=_para_banco(entity.criado_em),
            atualizado_em=_para_banco(entity.atualizado_em),
        )

    @staticmethod
    def to_entity(model: VeiculoModel) -> VeiculoEntity:
        """
        Converte VeiculoModel para VeiculoEntity.

        Note:
            Usa VeiculoEntity.reconstituir: dados já persistidos
            são confiáveis e não passam por validação.
        """
        return VeiculoEntity.reconstituir(
            id=model.id,
            marca=model.marca,
            modelo=model.modelo,
            ano=model.ano,
            cor=model.cor,
            preco=model.preco,
            status=VeiculoStatus(model.status),
            cpf_comprador=model.cpf_comprador,
            data_venda=model.data_venda,
            codigo_pagamento=model.codigo_pagamento,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )

    @staticmethod
    def to_entity_list(models: List[VeiculoModel]) -> List[VeiculoEntity]:
        return [VeiculoMapper.to_entity(model) for model in models]

    @staticmethod
    def to_columns(campos: Dict[str, Any]) -> Dict[str, Any]:
        """
        Converte campos da entidade em valores de coluna.

        Enums viram seus valores; datetimes ganham timezone.
        """
        colunas = {}
        for nome, valor in campos.items():
            if isinstance(valor, VeiculoStatus):
                valor = valor.value
            elif isinstance(valor, datetime):
                valor = _para_banco(valor)
            colunas[nome] = valor
        return colunas
