"""
API Views JSON para o domínio de Veículos.

Endpoints:
- POST /veiculos/webhook/pagamento/ - Notificação do provedor de pagamento
- GET /veiculos/webhook/pagamento/<veiculo_id>/ - Situação de venda do veículo
- GET /veiculos/api/ - Listar veículos (filtros)
- POST /veiculos/api/ - Cadastrar veículo
- GET /veiculos/api/<id>/ - Obter veículo
- PATCH /veiculos/api/<id>/ - Editar dados descritivos
- DELETE /veiculos/api/<id>/ - Excluir veículo

Formato:
- Entrada: JSON (números decimais preservados como Decimal)
- Saída CRUD: {success, data/error, meta}
- Saída do webhook: o resultado da reconciliação, sem envelope
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from django.views import View
from django.http import JsonResponse, HttpRequest
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    ConcurrencyError,
    DomainException,
)
from src.core.veiculos.dtos import (
    CadastrarVeiculoInputDTO,
    EditarVeiculoInputDTO,
    ListarVeiculosQueryDTO,
    ProcessarWebhookPagamentoInputDTO,
    StatusPagamento,
    ORDEM_ASC,
)
from src.core.veiculos.cpf import mascarar_cpf
from src.core.veiculos.entities import preco_com_precisao_valida
from src.config.container import get_container

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Números com casas decimais viram Decimal (valores monetários).

    Raises:
        ValidationError: Se JSON inválido
    """
    if not request.body:
        return {}

    try:
        body = json.loads(request.body, parse_float=Decimal)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"JSON inválido: {e}")

    if not isinstance(body, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")
    return body


def to_decimal(valor: Any, campo: str) -> Optional[Decimal]:
    """Converte número/string para Decimal; None passa direto."""
    if valor is None or valor == '':
        return None
    if isinstance(valor, bool):
        raise ValidationError(f"{campo} deve ser numérico", field=campo)
    try:
        return Decimal(str(valor))
    except InvalidOperation:
        raise ValidationError(f"{campo} deve ser numérico", field=campo)


def to_int(valor: Any, campo: str) -> Optional[int]:
    if valor is None or valor == '':
        return None
    if isinstance(valor, bool):
        raise ValidationError(f"{campo} deve ser inteiro", field=campo)
    try:
        return int(valor)
    except (TypeError, ValueError):
        raise ValidationError(f"{campo} deve ser inteiro", field=campo)


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except Exception as e:
            return self.handle_exception(e)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        Mapeamento:
        - ValidationError → 400
        - EntityNotFoundError → 404
        - BusinessRuleViolationError → 400
        - ConcurrencyError → 409
        - outras DomainException → 400
        - qualquer outra → 500
        """
        if isinstance(e, ValidationError):
            status = 400
            meta = {'field': e.field} if e.field else None
        elif isinstance(e, EntityNotFoundError):
            status = 404
            meta = None
        elif isinstance(e, BusinessRuleViolationError):
            status = 400
            meta = {'rule': e.rule} if e.rule else None
        elif isinstance(e, ConcurrencyError):
            status = 409
            meta = None
        elif isinstance(e, DomainException):
            status = 400
            meta = None
        else:
            logger.exception(f"Erro inesperado na API: {e}")
            return json_response(
                success=False,
                error="Erro interno do servidor",
                status=500
            )

        logger.warning(f"Requisição recusada ({status}): {e}")
        meta = {**(meta or {}), 'code': e.code}
        return json_response(success=False, error=e.message, status=status, meta=meta)


# =============================================================================
# Webhook de Pagamento
# =============================================================================

class WebhookPagamentoView(BaseAPIView):
    """
    Recebe notificações do provedor de pagamento.

    POST /veiculos/webhook/pagamento/

    Body:
        codigoPagamento, status, veiculoId (obrigatórios)
        cpfComprador, valorPago (obrigatórios se status = "aprovado")
        metodoPagamento, dataTransacao (informativos)
    """

    CAMPOS_OBRIGATORIOS = ('codigoPagamento', 'status', 'veiculoId')

    def post(self, request: HttpRequest) -> JsonResponse:
        data = self.parse_body(request)

        erro = self._validar_payload(data)
        if erro:
            logger.warning(f"Webhook recusado: {erro['error']}")
            return JsonResponse({'success': False, **erro}, status=400)

        input_dto = ProcessarWebhookPagamentoInputDTO(
            codigo_pagamento=str(data['codigoPagamento']),
            status=data['status'],
            veiculo_id=str(data['veiculoId']),
            cpf_comprador=data.get('cpfComprador') or None,
            valor_pago=to_decimal(data.get('valorPago'), 'valorPago'),
            metodo_pagamento=data.get('metodoPagamento'),
            data_transacao=data.get('dataTransacao'),
        )

        service = self.get_service('processar_webhook_pagamento_service')
        resultado = service.execute(input_dto)

        logger.info(
            f"Webhook processado: {input_dto.status} para veículo {input_dto.veiculo_id} "
            f"(pagamento={input_dto.codigo_pagamento}, "
            f"cpf={mascarar_cpf(input_dto.cpf_comprador or '')}, "
            f"novoStatus={resultado.novo_status})"
        )

        return JsonResponse(resultado.to_dict(), status=200)

    def _validar_payload(self, data: Dict) -> Optional[Dict[str, str]]:
        """Validações de transporte, antes de chamar o use case."""
        if any(not data.get(campo) for campo in self.CAMPOS_OBRIGATORIOS):
            return {
                'error': 'Dados obrigatórios faltando',
                'details': 'codigoPagamento, status e veiculoId são obrigatórios',
            }

        validos = [s.value for s in StatusPagamento]
        if data['status'] not in validos:
            return {
                'error': 'Status inválido',
                'details': f"Status deve ser um dos seguintes: {', '.join(validos)}",
            }

        cpf = data.get('cpfComprador')
        if cpf is not None and not isinstance(cpf, str):
            return {
                'error': 'CPF do comprador deve ser texto',
                'details': 'Envie cpfComprador como string (ex: "111.444.777-35")',
            }

        if data['status'] == StatusPagamento.APROVADO.value:
            if not cpf:
                return {
                    'error': 'CPF do comprador é obrigatório para pagamentos aprovados',
                }

            valor = data.get('valorPago')
            if (
                valor is None
                or isinstance(valor, bool)
                or not isinstance(valor, (int, Decimal))
                or valor <= 0
            ):
                return {
                    'error': 'Valor pago é obrigatório e deve ser maior que zero '
                             'para pagamentos aprovados',
                }

            if not preco_com_precisao_valida(Decimal(valor)):
                return {
                    'error': 'Valor pago deve ter no máximo 2 casas decimais '
                             'e 10 dígitos inteiros',
                }

        return None


class StatusPagamentoView(BaseAPIView):
    """
    GET /veiculos/webhook/pagamento/<veiculo_id>/

    Situação de venda atual do veículo.
    """

    def get(self, request: HttpRequest, veiculo_id: str) -> JsonResponse:
        service = self.get_service('consultar_status_pagamento_service')
        resultado = service.execute(veiculo_id)
        return json_response(success=True, data=resultado.to_dict())


# =============================================================================
# Veículo API Views
# =============================================================================

class VeiculoAPIListView(BaseAPIView):
    """
    API para listar e cadastrar veículos.

    GET /veiculos/api/ - Lista veículos
    POST /veiculos/api/ - Cadastra veículo
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Lista veículos com filtros opcionais.

        Query params:
        - marca, modelo: substring
        - anoMin, anoMax, precoMin, precoMax: faixas inclusivas
        - status: A_VENDA, RESERVADO, VENDIDO
        - ordem: ASC (default) ou DESC, por preço
        """
        params = request.GET
        query = ListarVeiculosQueryDTO(
            marca=params.get('marca') or None,
            modelo=params.get('modelo') or None,
            ano_min=to_int(params.get('anoMin'), 'anoMin'),
            ano_max=to_int(params.get('anoMax'), 'anoMax'),
            preco_min=to_decimal(params.get('precoMin'), 'precoMin'),
            preco_max=to_decimal(params.get('precoMax'), 'precoMax'),
            status=params.get('status') or None,
            ordem=(params.get('ordem') or ORDEM_ASC).upper(),
        )

        resultado = self.get_service('listar_veiculos_service').execute(query)
        dados = resultado.to_dict()

        return json_response(
            success=True,
            data=dados['veiculos'],
            meta={'total': dados['total'], 'filtros': dados['filtros']},
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        data = self.parse_body(request)

        faltando = [c for c in ('marca', 'modelo', 'ano', 'cor', 'preco') if data.get(c) is None]
        if faltando:
            raise ValidationError(
                f"Campos obrigatórios: {', '.join(faltando)}",
                field=faltando[0],
            )

        input_dto = CadastrarVeiculoInputDTO(
            marca=str(data['marca']),
            modelo=str(data['modelo']),
            ano=to_int(data['ano'], 'ano'),
            cor=str(data['cor']),
            preco=to_decimal(data['preco'], 'preco'),
        )

        output = self.get_service('cadastrar_veiculo_service').execute(input_dto)
        return json_response(success=True, data=output.to_dict(), status=201)


class VeiculoAPIDetailView(BaseAPIView):
    """
    API para operações em veículo específico.

    GET /veiculos/api/<id>/ - Obtém veículo
    PATCH /veiculos/api/<id>/ - Edita dados descritivos
    DELETE /veiculos/api/<id>/ - Exclui veículo
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        output = self.get_service('obter_veiculo_service').execute(pk)
        return json_response(success=True, data=output.to_dict())

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        data = self.parse_body(request)

        input_dto = EditarVeiculoInputDTO(
            veiculo_id=pk,
            marca=data.get('marca'),
            modelo=data.get('modelo'),
            ano=to_int(data.get('ano'), 'ano'),
            cor=data.get('cor'),
            preco=to_decimal(data.get('preco'), 'preco'),
        )

        output = self.get_service('editar_veiculo_service').execute(input_dto)
        return json_response(success=True, data=output.to_dict())

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        self.get_service('excluir_veiculo_service').execute(pk)
        return json_response(success=True, data={'id': pk})
