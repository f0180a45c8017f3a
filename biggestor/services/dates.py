"""Datas - conversões ISO8601 usadas pelos serviços"""

from __future__ import annotations

import calendar
import re
from datetime import UTC, date, datetime

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now_iso() -> str:
    """Timestamp atual em UTC no formato gravado (milissegundos e sufixo Z)"""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """
    Converte uma string ISO8601 em datetime.

    Aceita datas puras (YYYY-MM-DD) e o sufixo "Z".

    Raises:
        ValueError: string vazia ou fora do formato ISO8601
    """
    if not value:
        raise ValueError("empty date")
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def local_date(value: str) -> date:
    """
    Dia do calendário local correspondente a um prazo.

    Datas puras são usadas como estão; datetimes com fuso são convertidos
    para o fuso local antes de descartar o horário.

    Raises:
        ValueError: valor não é uma data ISO8601
    """
    if _DATE_ONLY.match(value.strip()):
        return date.fromisoformat(value.strip())
    parsed = parse_iso(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


def add_one_month(value: str) -> str:
    """
    Avança um mês de calendário, limitado ao último dia do mês de destino.

    Mantém o formato de entrada: data pura continua data pura; datetimes em
    UTC são gravados com milissegundos e sufixo Z.
    """
    parsed = parse_iso(value)
    year = parsed.year + (parsed.month // 12)
    month = parsed.month % 12 + 1
    day = min(parsed.day, calendar.monthrange(year, month)[1])
    shifted = parsed.replace(year=year, month=month, day=day)

    if _DATE_ONLY.match(value.strip()):
        return shifted.date().isoformat()
    if shifted.tzinfo is not None and shifted.utcoffset().total_seconds() == 0:
        return shifted.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return shifted.isoformat()
