"""
Entidades do Domínio de Veículos.

Entidades:
- VeiculoEntity: Agregado principal (um registro por veículo)
- VeiculoStatus: Estados do ciclo de venda

Regras de Negócio Encapsuladas:
- Validação de dados descritivos na criação e em toda mutação
- Máquina de estados A_VENDA / RESERVADO / VENDIDO com transições guardadas
- CPF do comprador validado sempre que é definido
- Metadados de venda coerentes com o status
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional
import uuid

from src.core.shared.exceptions import ValidationError

from .cpf import validar_cpf
from .exceptions import VeiculoIndisponivelParaReservaError, VeiculoJaVendidoError


class VeiculoStatus(Enum):
    """
    Estados do ciclo de venda de um veículo.

    Fluxo de Estados:
        A_VENDA ──→ RESERVADO ──→ VENDIDO
           │  ↑         │            │
           │  └─────────┴────────────┘  (voltar_para_venda)
           └──────────────────→ VENDIDO

    VENDIDO encerra um ciclo de venda, não o agregado: um estorno
    devolve o veículo ao estoque.
    """

    A_VENDA = "A_VENDA"
    RESERVADO = "RESERVADO"
    VENDIDO = "VENDIDO"

    @classmethod
    def from_string(cls, value: str) -> "VeiculoStatus":
        """
        Converte string para enum ("a_venda", "A_VENDA", "a venda").

        Raises:
            ValueError: Se valor inválido
        """
        try:
            return cls[value.strip().upper().replace(" ", "_")]
        except (KeyError, AttributeError):
            raise ValueError(f"Status de veículo inválido: {value}")


ANO_MINIMO = 1900

CAMPOS_DESCRITIVOS = ("marca", "modelo", "ano", "cor", "preco")

# Mesma precisão da coluna de preço (12 dígitos, 2 decimais)
CASAS_DECIMAIS_PRECO = 2
DIGITOS_INTEIROS_PRECO = 10


def preco_com_precisao_valida(valor: Decimal) -> bool:
    """True se o valor cabe em no máximo 10 dígitos inteiros e 2 casas decimais."""
    if not valor.is_finite():
        return False
    # Magnitude antes do quantize, que estoura a precisão do contexto
    if abs(valor) >= Decimal(10) ** DIGITOS_INTEIROS_PRECO:
        return False
    centavos = Decimal(1).scaleb(-CASAS_DECIMAIS_PRECO)
    return valor == valor.quantize(centavos)


def _normalizar_preco(preco: Any) -> Decimal:
    if isinstance(preco, Decimal):
        return preco
    if isinstance(preco, bool):
        raise ValidationError("Preço deve ser maior que zero", field="preco")
    try:
        return Decimal(str(preco))
    except (InvalidOperation, ValueError):
        raise ValidationError("Preço deve ser maior que zero", field="preco")


@dataclass
class VeiculoEntity:
    """
    Entidade de Domínio: Veículo.

    Invariantes (verificadas na criação e em toda mutação):
    - Marca, modelo e cor não vazios (após strip)
    - 1900 <= ano <= ano corrente + 1
    - Preço > 0, com no máximo 2 casas decimais e 10 dígitos inteiros
    - CPF do comprador, se presente, passa na validação
    - VENDIDO exige CPF e data de venda; A_VENDA não tem metadados de venda

    Attributes:
        id: Identificador único (UUID), imutável
        marca, modelo, ano, cor, preco: Dados descritivos
        status: Estado no ciclo de venda
        cpf_comprador: CPF do comprador (RESERVADO / VENDIDO)
        data_venda: Momento da venda (apenas VENDIDO)
        codigo_pagamento: Identificador do pagamento no provedor
        criado_em: Data/hora de criação
        atualizado_em: Data/hora da última mutação

    Example:
        veiculo = VeiculoEntity.criar(
            marca="Toyota",
            modelo="Corolla",
            ano=2023,
            cor="Prata",
            preco=Decimal("85000.00"),
        )

        veiculo.marcar_como_reservado("111.444.777-35", "PAY_1")
        veiculo.marcar_como_vendido("111.444.777-35", "PAY_1")
    """

    # Identificação
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Dados descritivos
    marca: str = ""
    modelo: str = ""
    ano: int = 0
    cor: str = ""
    preco: Decimal = Decimal("0")

    # Estado
    status: VeiculoStatus = field(default=VeiculoStatus.A_VENDA)

    # Metadados de venda
    cpf_comprador: Optional[str] = None
    data_venda: Optional[datetime] = None
    codigo_pagamento: Optional[str] = None

    # Timestamps
    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def criar(
        cls,
        marca: str,
        modelo: str,
        ano: int,
        cor: str,
        preco: Any,
    ) -> "VeiculoEntity":
        """
        Factory method para cadastrar veículo novo com validações.

        Todo veículo novo nasce A_VENDA, sem metadados de venda.

        Args:
            marca: Fabricante (ex: "Toyota")
            modelo: Modelo (ex: "Corolla")
            ano: Ano de fabricação
            cor: Cor predominante
            preco: Preço de venda (Decimal, int ou string numérica)

        Returns:
            Nova instância de VeiculoEntity

        Raises:
            ValidationError: Se algum invariante for violado
        """
        veiculo = cls(
            marca=(marca or "").strip(),
            modelo=(modelo or "").strip(),
            ano=ano,
            cor=(cor or "").strip(),
            preco=_normalizar_preco(preco),
            status=VeiculoStatus.A_VENDA,
        )
        veiculo._validar()
        return veiculo

    @classmethod
    def reconstituir(cls, **dados: Any) -> "VeiculoEntity":
        """
        Reconstrói a entidade a partir de dados confiáveis do armazenamento.

        Não executa validações: usado apenas pelos repositórios ao
        reidratar registros já persistidos.
        """
        return cls(**dados)

    # =========================================================================
    # Validações
    # =========================================================================

    @classmethod
    def _validar_descritivos(
        cls, marca: str, modelo: str, ano: int, cor: str, preco: Decimal
    ) -> None:
        if not marca or not marca.strip():
            raise ValidationError("Marca é obrigatória", field="marca")

        if not modelo or not modelo.strip():
            raise ValidationError("Modelo é obrigatório", field="modelo")

        ano_maximo = datetime.now().year + 1
        if (
            not isinstance(ano, int)
            or isinstance(ano, bool)
            or not ANO_MINIMO <= ano <= ano_maximo
        ):
            raise ValidationError(
                f"Ano deve estar entre {ANO_MINIMO} e {ano_maximo}",
                field="ano",
            )

        if not cor or not cor.strip():
            raise ValidationError("Cor é obrigatória", field="cor")

        if not preco.is_finite() or preco <= 0:
            raise ValidationError("Preço deve ser maior que zero", field="preco")

        if not preco_com_precisao_valida(preco):
            raise ValidationError(
                "Preço deve ter no máximo 2 casas decimais e 10 dígitos inteiros",
                field="preco",
            )

    @classmethod
    def _validar_cpf(cls, cpf_comprador: Optional[str]) -> None:
        if cpf_comprador is not None and not validar_cpf(cpf_comprador):
            raise ValidationError("CPF inválido", field="cpf_comprador")

    def _validar_metadados_de_venda(self) -> None:
        if self.status == VeiculoStatus.VENDIDO:
            if not self.cpf_comprador:
                raise ValidationError(
                    "CPF do comprador é obrigatório para venda",
                    field="cpf_comprador",
                )
            if self.data_venda is None:
                raise ValidationError(
                    "Data da venda é obrigatória para veículo vendido",
                    field="data_venda",
                )

        if self.status == VeiculoStatus.A_VENDA and (
            self.cpf_comprador or self.data_venda or self.codigo_pagamento
        ):
            raise ValidationError(
                "Veículo à venda não pode ter dados de venda",
                field="status",
            )

    def _validar(self) -> None:
        """Executa todos os invariantes sobre o estado atual."""
        self._validar_descritivos(
            self.marca, self.modelo, self.ano, self.cor, self.preco
        )
        self._validar_cpf(self.cpf_comprador)
        self._validar_metadados_de_venda()

    # =========================================================================
    # Transições de estado
    # =========================================================================

    def marcar_como_vendido(self, cpf_comprador: str, codigo_pagamento: str) -> None:
        """
        Conclui a venda.

        Regras:
        - Permitido a partir de A_VENDA ou RESERVADO
        - CPF obrigatório e válido
        - Define data_venda = agora

        Raises:
            VeiculoJaVendidoError: Se já está VENDIDO
            ValidationError: Se CPF ausente ou inválido, ou se algum
                invariante falhar (a entidade não é modificada)
        """
        if self.status == VeiculoStatus.VENDIDO:
            raise VeiculoJaVendidoError()

        if not cpf_comprador:
            raise ValidationError(
                "CPF do comprador é obrigatório para venda",
                field="cpf_comprador",
            )

        candidato = replace(
            self,
            status=VeiculoStatus.VENDIDO,
            cpf_comprador=cpf_comprador,
            data_venda=datetime.now(),
            codigo_pagamento=codigo_pagamento,
        )
        candidato._validar()

        self.status = candidato.status
        self.cpf_comprador = candidato.cpf_comprador
        self.data_venda = candidato.data_venda
        self.codigo_pagamento = candidato.codigo_pagamento
        self._atualizar_timestamp()

    def marcar_como_reservado(
        self, cpf_comprador: Optional[str], codigo_pagamento: str
    ) -> None:
        """
        Reserva o veículo enquanto o pagamento está pendente.

        Não define data_venda.

        Raises:
            VeiculoIndisponivelParaReservaError: Se não está A_VENDA
            ValidationError: Se CPF informado é inválido
        """
        if self.status != VeiculoStatus.A_VENDA:
            raise VeiculoIndisponivelParaReservaError()

        self._validar_cpf(cpf_comprador)

        self.status = VeiculoStatus.RESERVADO
        self.cpf_comprador = cpf_comprador
        self.codigo_pagamento = codigo_pagamento
        self._atualizar_timestamp()

    def atualizar_reserva(
        self, codigo_pagamento: str, cpf_comprador: Optional[str] = None
    ) -> None:
        """
        Renova uma reserva existente (nova notificação de pendência).

        Atualiza o código de pagamento e, se informado, o CPF.

        Raises:
            VeiculoIndisponivelParaReservaError: Se não está RESERVADO
        """
        if self.status != VeiculoStatus.RESERVADO:
            raise VeiculoIndisponivelParaReservaError()

        if cpf_comprador is not None:
            self._validar_cpf(cpf_comprador)
            self.cpf_comprador = cpf_comprador

        self.codigo_pagamento = codigo_pagamento
        self._atualizar_timestamp()

    def voltar_para_venda(self) -> None:
        """
        Devolve o veículo ao estoque, a partir de qualquer estado.

        Sempre bem-sucedido e idempotente: um cancelamento nunca é
        recusado pelo estado atual do agregado.
        """
        self.status = VeiculoStatus.A_VENDA
        self.cpf_comprador = None
        self.data_venda = None
        self.codigo_pagamento = None
        self._atualizar_timestamp()

    def atualizar_dados(self, **campos: Any) -> None:
        """
        Atualiza qualquer subconjunto de marca, modelo, ano, cor, preco.

        Campos não informados (ou None) permanecem como estão. Nunca
        altera status ou metadados de venda. Se algum invariante falhar,
        a entidade não é modificada.

        Raises:
            ValidationError: Campo desconhecido ou invariante violado
        """
        desconhecidos = set(campos) - set(CAMPOS_DESCRITIVOS)
        if desconhecidos:
            campo = sorted(desconhecidos)[0]
            raise ValidationError(f"Campo não editável: {campo}", field=campo)

        alteracoes: Dict[str, Any] = {}
        for nome, valor in campos.items():
            if valor is None:
                continue
            if isinstance(valor, str) and nome != "preco":
                valor = valor.strip()
            if nome == "preco":
                valor = _normalizar_preco(valor)
            alteracoes[nome] = valor

        candidato = replace(self, **alteracoes)
        self._validar_descritivos(
            candidato.marca,
            candidato.modelo,
            candidato.ano,
            candidato.cor,
            candidato.preco,
        )

        for nome, valor in alteracoes.items():
            setattr(self, nome, valor)
        self._atualizar_timestamp()

    def _atualizar_timestamp(self) -> None:
        """Atualiza timestamp de modificação."""
        self.atualizado_em = datetime.now()

    # =========================================================================
    # Consultas
    # =========================================================================

    @property
    def esta_disponivel(self) -> bool:
        """Disponível para venda (A_VENDA)."""
        return self.status == VeiculoStatus.A_VENDA

    def dados_de_venda(self) -> Dict[str, Any]:
        """Campos alterados pelas transições de estado (escrita parcial)."""
        return {
            "status": self.status,
            "cpf_comprador": self.cpf_comprador,
            "data_venda": self.data_venda,
            "codigo_pagamento": self.codigo_pagamento,
            "atualizado_em": self.atualizado_em,
        }

    def dados_descritivos(self) -> Dict[str, Any]:
        """Campos alterados por atualizar_dados (escrita parcial)."""
        dados = {nome: getattr(self, nome) for nome in CAMPOS_DESCRITIVOS}
        dados["atualizado_em"] = self.atualizado_em
        return dados

    def __repr__(self) -> str:
        """Representação string para debugging."""
        return (
            f"VeiculoEntity("
            f"id={self.id[:8]}..., "
            f"{self.marca} {self.modelo} {self.ano}, "
            f"preco={self.preco}, "
            f"status={self.status.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, VeiculoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
