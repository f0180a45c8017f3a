"""Validação dos dados antes das mutações

Cada função levanta ValidationError com a mensagem exibida ao usuário.
"""

from __future__ import annotations

import re

from biggestor.domain.errors import ValidationError
from biggestor.domain.models import Client, Contract, Job, ServiceType
from biggestor.services.dates import parse_iso

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def validate_job(job: Job) -> None:
    if not job.name.strip() or not job.client_id or not job.deadline:
        raise ValidationError("Preencha Nome, Cliente e Prazo de Entrega.")
    try:
        parse_iso(job.deadline)
    except ValueError:
        raise ValidationError("Data de prazo inválida.")
    if job.recording_date:
        try:
            parse_iso(job.recording_date)
        except ValueError:
            raise ValidationError("Data de gravação inválida.")
    if job.service_type == ServiceType.OTHER.value and not (
        job.custom_service_type or ""
    ).strip():
        raise ValidationError("Por favor, especifique o tipo do serviço.")
    if job.value < 0:
        raise ValidationError("O valor do job não pode ser negativo.")


def validate_client(client: Client) -> None:
    if not client.name.strip() or not client.email.strip():
        raise ValidationError("Nome e Email são obrigatórios.")
    if client.cpf:
        digits = re.sub(r"\D", "", client.cpf)
        if len(digits) != 11:
            raise ValidationError("CPF inválido. Deve conter 11 dígitos.")


def validate_contract(contract: Contract) -> None:
    if not contract.title.strip() or not contract.client_id:
        raise ValidationError("Título e Cliente são obrigatórios.")


def validate_registration(username: str, email: str, password: str, license_key: str) -> None:
    """Regras do formulário de cadastro, na mesma ordem de verificação"""
    if len(password) < 6:
        raise ValidationError("A senha deve ter pelo menos 6 caracteres.")
    if len(username) < 3:
        raise ValidationError("O nome de usuário deve ter pelo menos 3 caracteres.")
    if not USERNAME_PATTERN.match(username):
        raise ValidationError(
            "O nome de usuário deve conter apenas letras, números e underscore (_)."
        )
    if not EMAIL_PATTERN.search(email):
        raise ValidationError("Formato de email inválido.")
    if not license_key.strip():
        raise ValidationError("A Chave de Licença é obrigatória.")


def validate_new_password(password: str) -> None:
    if len(password) < 6:
        raise ValidationError("A senha deve ter pelo menos 6 caracteres.")
