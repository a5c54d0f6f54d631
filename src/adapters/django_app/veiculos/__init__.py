"""Adapter Django do domínio de Veículos (ORM, repositório, API)."""
