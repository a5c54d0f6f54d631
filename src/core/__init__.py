"""
Core Domain Layer - regras de negócio da concessionária.

Este pacote contém a lógica de negócio pura, sem dependências de frameworks:
- Entidade Veiculo e sua máquina de estados de venda
- Validação estrutural de CPF
- Reconciliação de webhooks do provedor de pagamento
- Ports (contratos) implementados pelos adapters
"""
