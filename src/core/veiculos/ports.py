"""
Ports (Interfaces) do Domínio de Veículos.

Define o contrato de persistência consumido pelos use cases.

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Example:
    # No Adapter (Django)
    class DjangoVeiculoRepository:
        def get_by_id(self, veiculo_id: str) -> Optional[VeiculoEntity]:
            model = VeiculoModel.objects.filter(id=veiculo_id).first()
            return VeiculoMapper.to_entity(model) if model else None
"""

import copy
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from src.core.shared.exceptions import ConcurrencyError

from .dtos import ORDEM_DESC, ListarVeiculosQueryDTO
from .entities import VeiculoEntity, VeiculoStatus
from .exceptions import VeiculoNaoEncontradoError


@runtime_checkable
class VeiculoRepository(Protocol):
    """
    Interface para persistência de Veículos.

    Implementações:
    - DjangoVeiculoRepository (PostgreSQL/SQLite via ORM)
    - InMemoryVeiculoRepository (para testes)

    A reconciliação de pagamentos usa apenas get_by_id e atualizar
    (leitura-modificação-escrita sobre um único agregado).
    """

    def save(self, veiculo: VeiculoEntity) -> None:
        """
        Persiste veículo (create ou update completo).

        Args:
            veiculo: Entidade a ser persistida
        """
        ...

    def get_by_id(self, veiculo_id: str) -> Optional[VeiculoEntity]:
        """
        Busca veículo por ID.

        Returns:
            Entidade reidratada (sem validação) ou None se não existir
        """
        ...

    def atualizar(
        self,
        veiculo_id: str,
        campos: Dict[str, Any],
        atualizado_em_esperado: Optional[datetime] = None,
    ) -> VeiculoEntity:
        """
        Aplica escrita parcial e retorna o agregado atualizado.

        Quando `atualizado_em_esperado` é informado, a escrita só ocorre
        se o registro ainda tiver esse `atualizado_em` (compare-and-swap).

        Args:
            veiculo_id: ID do veículo
            campos: Campos a gravar (nomes da entidade)
            atualizado_em_esperado: Valor observado na leitura

        Returns:
            Entidade recarregada após a escrita

        Raises:
            VeiculoNaoEncontradoError: Se o ID não existe no momento da escrita
            ConcurrencyError: Se o registro mudou desde a leitura
        """
        ...

    def delete(self, veiculo_id: str) -> None:
        """
        Remove veículo.

        Raises:
            VeiculoNaoEncontradoError: Se veículo não existe
        """
        ...

    def exists(self, veiculo_id: str) -> bool:
        ...

    def list_all(self) -> List[VeiculoEntity]:
        """Todos os veículos, ordenados por preço crescente."""
        ...

    def list_by_status(self, status: VeiculoStatus) -> List[VeiculoEntity]:
        """Veículos com o status informado, por preço crescente."""
        ...

    def list_with_filters(self, filtros: ListarVeiculosQueryDTO) -> List[VeiculoEntity]:
        """
        Lista com filtros de marca/modelo (substring), faixas de ano e
        preço (inclusivas), status e ordenação por preço.
        """
        ...


class InMemoryVeiculoRepository:
    """
    Implementação em memória do VeiculoRepository.

    Guarda e devolve cópias das entidades, como um banco faria: alterar
    uma entidade lida não altera o registro até `atualizar`/`save`.

    Não usar em produção!

    Example:
        repo = InMemoryVeiculoRepository()
        repo.save(veiculo)
        found = repo.get_by_id(veiculo.id)
    """

    def __init__(self):
        self._veiculos: Dict[str, VeiculoEntity] = {}
        self.escritas = 0

    def save(self, veiculo: VeiculoEntity) -> None:
        self._veiculos[veiculo.id] = copy.deepcopy(veiculo)
        self.escritas += 1

    def get_by_id(self, veiculo_id: str) -> Optional[VeiculoEntity]:
        veiculo = self._veiculos.get(veiculo_id)
        return copy.deepcopy(veiculo) if veiculo else None

    def atualizar(
        self,
        veiculo_id: str,
        campos: Dict[str, Any],
        atualizado_em_esperado: Optional[datetime] = None,
    ) -> VeiculoEntity:
        atual = self._veiculos.get(veiculo_id)
        if atual is None:
            raise VeiculoNaoEncontradoError(veiculo_id)

        if (
            atualizado_em_esperado is not None
            and atual.atualizado_em != atualizado_em_esperado
        ):
            raise ConcurrencyError(
                "Veículo foi alterado por outro processo",
                entity_id=veiculo_id,
            )

        for nome, valor in campos.items():
            setattr(atual, nome, valor)
        self.escritas += 1
        return copy.deepcopy(atual)

    def delete(self, veiculo_id: str) -> None:
        if veiculo_id not in self._veiculos:
            raise VeiculoNaoEncontradoError(veiculo_id)
        del self._veiculos[veiculo_id]

    def exists(self, veiculo_id: str) -> bool:
        return veiculo_id in self._veiculos

    def list_all(self) -> List[VeiculoEntity]:
        return self._ordenar(self._veiculos.values())

    def list_by_status(self, status: VeiculoStatus) -> List[VeiculoEntity]:
        return self._ordenar(v for v in self._veiculos.values() if v.status == status)

    def list_with_filters(self, filtros: ListarVeiculosQueryDTO) -> List[VeiculoEntity]:
        veiculos = list(self._veiculos.values())

        if filtros.status:
            status = VeiculoStatus.from_string(filtros.status)
            veiculos = [v for v in veiculos if v.status == status]
        if filtros.marca:
            veiculos = [v for v in veiculos if filtros.marca.lower() in v.marca.lower()]
        if filtros.modelo:
            veiculos = [v for v in veiculos if filtros.modelo.lower() in v.modelo.lower()]
        if filtros.ano_min is not None:
            veiculos = [v for v in veiculos if v.ano >= filtros.ano_min]
        if filtros.ano_max is not None:
            veiculos = [v for v in veiculos if v.ano <= filtros.ano_max]
        if filtros.preco_min is not None:
            veiculos = [v for v in veiculos if v.preco >= filtros.preco_min]
        if filtros.preco_max is not None:
            veiculos = [v for v in veiculos if v.preco <= filtros.preco_max]

        return self._ordenar(veiculos, decrescente=filtros.ordem == ORDEM_DESC)

    def _ordenar(self, veiculos, decrescente: bool = False) -> List[VeiculoEntity]:
        ordenados = sorted(veiculos, key=lambda v: v.preco, reverse=decrescente)
        return [copy.deepcopy(v) for v in ordenados]

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._veiculos.clear()
