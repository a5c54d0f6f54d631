"""
Repositório Django para persistência de Veículos.

Implementa a interface (Port) definida no Core.
É um DRIVEN ADAPTER - acionado pelo Core em resposta a operações.

Responsabilidades:
- Implementar VeiculoRepository protocol
- Mapear entities para models e vice-versa
- Escrita parcial condicional (compare-and-swap em atualizado_em)

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from django.db.models import QuerySet

from src.core.shared.exceptions import ConcurrencyError
from src.core.veiculos.dtos import ORDEM_DESC, ListarVeiculosQueryDTO
from src.core.veiculos.entities import VeiculoEntity, VeiculoStatus
from src.core.veiculos.exceptions import VeiculoNaoEncontradoError
from src.core.veiculos.ports import VeiculoRepository as VeiculoRepositoryPort

from .mappers import VeiculoMapper
from .models import VeiculoModel

logger = logging.getLogger(__name__)


class DjangoVeiculoRepository(VeiculoRepositoryPort):
    """
    Implementação Django do VeiculoRepository.

    Example:
        repo = DjangoVeiculoRepository()

        repo.save(veiculo)
        veiculo = repo.get_by_id("uuid-here")

        veiculo.voltar_para_venda()
        repo.atualizar(veiculo.id, veiculo.dados_de_venda(), atualizado_em_observado)
    """

    def __init__(self):
        self._mapper = VeiculoMapper()

    def save(self, veiculo: VeiculoEntity) -> None:
        """
        Persiste veículo (create ou update completo).

        Note:
            Usa update_or_create para atomicidade
        """
        model = self._mapper.to_model(veiculo)
        defaults = {
            campo.attname: getattr(model, campo.attname)
            for campo in VeiculoModel._meta.concrete_fields
            if not campo.primary_key
        }

        VeiculoModel.objects.update_or_create(id=veiculo.id, defaults=defaults)
        logger.info(f"Veículo salvo: {veiculo.id}")

    def get_by_id(self, veiculo_id: str) -> Optional[VeiculoEntity]:
        try:
            model = VeiculoModel.objects.get(id=veiculo_id)
        except VeiculoModel.DoesNotExist:
            logger.debug(f"Veículo não encontrado: {veiculo_id}")
            return None
        return self._mapper.to_entity(model)

    def atualizar(
        self,
        veiculo_id: str,
        campos: Dict[str, Any],
        atualizado_em_esperado: Optional[datetime] = None,
    ) -> VeiculoEntity:
        """
        Escrita parcial com compare-and-swap opcional.

        O UPDATE filtra pelo `atualizado_em` observado; zero linhas
        afetadas significa que o veículo sumiu ou foi alterado.

        Raises:
            VeiculoNaoEncontradoError: Se o veículo não existe mais
            ConcurrencyError: Se o veículo mudou desde a leitura
        """
        filtro = VeiculoModel.objects.filter(id=veiculo_id)
        if atualizado_em_esperado is not None:
            filtro = filtro.filter(atualizado_em=atualizado_em_esperado)

        linhas = filtro.update(**self._mapper.to_columns(campos))

        if linhas == 0:
            if not VeiculoModel.objects.filter(id=veiculo_id).exists():
                raise VeiculoNaoEncontradoError(veiculo_id)
            logger.warning(f"Conflito de escrita no veículo {veiculo_id}")
            raise ConcurrencyError(
                "Veículo foi alterado por outro processo",
                entity_id=veiculo_id,
            )

        return self._mapper.to_entity(VeiculoModel.objects.get(id=veiculo_id))

    def delete(self, veiculo_id: str) -> None:
        deleted_count, _ = VeiculoModel.objects.filter(id=veiculo_id).delete()
        if deleted_count == 0:
            raise VeiculoNaoEncontradoError(veiculo_id)
        logger.info(f"Veículo removido: {veiculo_id}")

    def exists(self, veiculo_id: str) -> bool:
        return VeiculoModel.objects.filter(id=veiculo_id).exists()

    def list_all(self) -> List[VeiculoEntity]:
        return self._mapper.to_entity_list(VeiculoModel.objects.order_by("preco"))

    def list_by_status(self, status: VeiculoStatus) -> List[VeiculoEntity]:
        queryset = VeiculoModel.objects.filter(status=status.value).order_by("preco")
        return self._mapper.to_entity_list(queryset)

    def list_with_filters(self, filtros: ListarVeiculosQueryDTO) -> List[VeiculoEntity]:
        queryset = self._aplicar_filtros(VeiculoModel.objects.all(), filtros)
        ordem = "-preco" if filtros.ordem == ORDEM_DESC else "preco"
        return self._mapper.to_entity_list(queryset.order_by(ordem))

    @staticmethod
    def _aplicar_filtros(queryset: QuerySet, filtros: ListarVeiculosQueryDTO) -> QuerySet:
        if filtros.status:
            queryset = queryset.filter(status=VeiculoStatus.from_string(filtros.status).value)
        if filtros.marca:
            queryset = queryset.filter(marca__icontains=filtros.marca)
        if filtros.modelo:
            queryset = queryset.filter(modelo__icontains=filtros.modelo)
        if filtros.ano_min is not None:
            queryset = queryset.filter(ano__gte=filtros.ano_min)
        if filtros.ano_max is not None:
            queryset = queryset.filter(ano__lte=filtros.ano_max)
        if filtros.preco_min is not None:
            queryset = queryset.filter(preco__gte=filtros.preco_min)
        if filtros.preco_max is not None:
            queryset = queryset.filter(preco__lte=filtros.preco_max)
        return queryset
