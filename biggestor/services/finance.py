"""Cálculos financeiros dos jobs (resumo de pagamentos, status, moeda)"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from biggestor.domain.models import Job, JobStatus
from biggestor.services.dates import local_date

logger = logging.getLogger(__name__)

# Sinal mínimo esperado durante o briefing
DEPOSIT_RATIO = 0.4


class FinancialStatus(Enum):
    PENDING_DEPOSIT = "PENDING_DEPOSIT"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PENDING_FULL_PAYMENT = "PENDING_FULL_PAYMENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


@dataclass(frozen=True)
class PaymentSummary:
    total_paid: float
    remaining: float
    is_fully_paid: bool


def payment_summary(job: Job) -> PaymentSummary:
    total_paid = sum(p.amount for p in job.payments)
    remaining = max(job.value - total_paid, 0)
    return PaymentSummary(
        total_paid=total_paid,
        remaining=remaining,
        is_fully_paid=job.value > 0 and remaining <= 0,
    )


def financial_status(job: Job, today: date) -> FinancialStatus:
    """
    Classifica a situação financeira de um job.

    Ordem: pago, atrasado (saldo e prazo vencido), sinal pendente no briefing
    (< 40% pago), parcialmente pago / sinal pendente, pagamento integral pendente.
    """
    summary = payment_summary(job)
    if job.status == JobStatus.PAID or summary.is_fully_paid:
        return FinancialStatus.PAID

    try:
        deadline = local_date(job.deadline)
    except ValueError:
        logger.warning("Invalid deadline: job_id=%s, deadline=%s", job.id, job.deadline)
        deadline = None

    if summary.remaining > 0 and deadline is not None and deadline < today:
        return FinancialStatus.OVERDUE

    if (
        job.status == JobStatus.BRIEFING
        and job.value > 0
        and summary.total_paid < job.value * DEPOSIT_RATIO
    ):
        return FinancialStatus.PENDING_DEPOSIT

    if summary.remaining > 0:
        if summary.total_paid > 0:
            return FinancialStatus.PARTIALLY_PAID
        return FinancialStatus.PENDING_DEPOSIT

    return FinancialStatus.PENDING_FULL_PAYMENT


def format_currency(value: float | None, privacy: bool = False, symbol: str = "R$") -> str:
    """
    Formata no padrão brasileiro: "R$ 1.234,56".

    Com o modo privacidade o valor é mascarado ("R$ ••••••").
    """
    if privacy:
        return f"{symbol} ••••••"
    if value is None:
        return f"{symbol} 0,00"
    formatted = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{symbol} {formatted}"
