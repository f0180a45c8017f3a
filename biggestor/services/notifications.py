"""Notificações derivadas de jobs e clientes

derive_notifications é uma função pura de (jobs, clientes, hoje, lidas).
O conjunto de ids lidas fica no armazenamento local do dispositivo.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import date, timedelta

from biggestor.domain.models import Client, Job, JobStatus, Notification
from biggestor.domain.ports import KeyValueStorage
from biggestor.services.dates import local_date

logger = logging.getLogger(__name__)

READ_NOTIFICATIONS_KEY = "big_read_notifications"

DEADLINE_WINDOW_DAYS = 2
INACTIVE_DAYS = 60
INACTIVE_YEAR_DAYS = 365


def _day_label(days: int) -> str:
    if days == 0:
        return "hoje"
    if days == 1:
        return "amanhã"
    return f"em {days} dias"


def _deadline_notifications(jobs: list[Job], today: date) -> list[Notification]:
    notifications = []
    for job in jobs:
        if job.is_deleted or job.status == JobStatus.PAID:
            continue
        try:
            days = (local_date(job.deadline) - today).days
        except ValueError:
            logger.warning("Could not process deadline for job: %s (%r)", job.id, job.deadline)
            continue

        if days < 0:
            notifications.append(
                Notification(
                    id=f"overdue-{job.id}",
                    type="overdue",
                    message=f'O job "{job.name}" está atrasado há {abs(days)} dia(s).',
                    link_to="/jobs",
                    entity_id=job.id,
                )
            )
        elif days <= DEADLINE_WINDOW_DAYS:
            notifications.append(
                Notification(
                    id=f"deadline-{job.id}",
                    type="deadline",
                    message=f'O prazo do job "{job.name}" é {_day_label(days)}.',
                    link_to="/jobs",
                    entity_id=job.id,
                )
            )
    return notifications


def _is_birthday(client: Client, today: date) -> bool:
    if not client.birthday:
        return False
    try:
        _, month, day = (int(part) for part in client.birthday.split("-"))
    except ValueError:
        logger.warning("Invalid birthday for client: %s (%r)", client.id, client.birthday)
        return False
    return (month, day) == (today.month, today.day)


def _last_job_date(client: Client, jobs: list[Job]) -> date | None:
    dates = []
    for job in jobs:
        if job.client_id != client.id or job.is_deleted:
            continue
        try:
            dates.append(local_date(job.created_at))
        except ValueError:
            continue
    return max(dates, default=None)


def _client_notifications(clients: list[Client], jobs: list[Job], today: date) -> list[Notification]:
    notifications = []
    one_year_ago = today - timedelta(days=INACTIVE_YEAR_DAYS)
    sixty_days_ago = today - timedelta(days=INACTIVE_DAYS)

    for client in clients:
        if _is_birthday(client, today):
            notifications.append(
                Notification(
                    id=f"bday-{client.id}-{today.year}",
                    type="birthday",
                    message=f"Hoje é o aniversário de {client.name}! 🎉",
                    link_to=f"/clients/{client.id}",
                    entity_id=client.id,
                )
            )

        last_job = _last_job_date(client, jobs)
        if last_job is None:
            continue
        # inatividade de 1 ano tem prioridade sobre a de 60 dias
        if last_job < one_year_ago:
            notifications.append(
                Notification(
                    id=f"client-1yr-{client.id}",
                    type="client",
                    message=(
                        f'O cliente "{client.name}" não contrata nada há 1 ANO. '
                        "Hora de reativar contato?"
                    ),
                    link_to=f"/clients/{client.id}",
                    entity_id=client.id,
                )
            )
        elif last_job < sixty_days_ago:
            notifications.append(
                Notification(
                    id=f"client-60d-{client.id}",
                    type="client",
                    message=f'O cliente "{client.name}" não tem novos jobs há mais de 60 dias.',
                    link_to=f"/clients/{client.id}",
                    entity_id=client.id,
                )
            )
    return notifications


def derive_notifications(
    jobs: list[Job],
    clients: list[Client],
    today: date,
    read_ids: Iterable[str] = (),
) -> list[Notification]:
    """
    Gera as notificações do dia.

    - jobs ativos (não excluídos, não pagos): atrasados e prazos em até 2 dias
    - aniversário de clientes (id com o ano, uma por ano)
    - clientes sem jobs novos há mais de 365 ou 60 dias
    """
    read = set(read_ids)
    generated = _deadline_notifications(jobs, today) + _client_notifications(clients, jobs, today)
    return [
        Notification(
            id=n.id,
            type=n.type,
            message=n.message,
            link_to=n.link_to,
            entity_id=n.entity_id,
            is_read=n.id in read,
        )
        for n in generated
    ]


class NotificationCenter:
    """Notificações de uma sessão com o estado de leitura persistido no dispositivo"""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._read_ids = self._load_read_ids()

    def _load_read_ids(self) -> set[str]:
        try:
            raw = self._storage.get_item(READ_NOTIFICATIONS_KEY)
            return set(json.loads(raw)) if raw else set()
        except (ValueError, TypeError) as e:
            logger.warning("Discarding corrupt read-notification set: %s", e)
            return set()

    @property
    def read_ids(self) -> set[str]:
        return set(self._read_ids)

    def notifications(self, jobs: list[Job], clients: list[Client], today: date | None = None) -> list[Notification]:
        return derive_notifications(jobs, clients, today or date.today(), self._read_ids)

    def mark_as_read(self, notification_id: str) -> None:
        self._read_ids.add(notification_id)
        try:
            self._storage.set_item(READ_NOTIFICATIONS_KEY, json.dumps(sorted(self._read_ids)))
        except OSError as e:
            logger.error("Failed to save read notifications: %s", e)
