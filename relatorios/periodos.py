# relatorios/periodos.py
from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time, timedelta

from django.utils import timezone

PERIODOS = ("day", "week", "month", "all", "custom")


def _tz():
    return timezone.get_current_timezone()


def _aware(dt: datetime) -> datetime:
    tz = _tz()
    return timezone.make_aware(dt, tz) if timezone.is_naive(dt) else dt.astimezone(tz)


def inicio_do_dia(d: date) -> datetime:
    return _aware(datetime.combine(d, time.min))


def fim_do_dia(d: date) -> datetime:
    return _aware(datetime.combine(d, time.max))


def _mes_anterior(d: date) -> date:
    ano, mes = (d.year - 1, 12) if d.month == 1 else (d.year, d.month - 1)
    return date(ano, mes, min(d.day, monthrange(ano, mes)[1]))


def janela(
    period: str,
    start_date: date | None = None,
    end_date: date | None = None,
    agora: datetime | None = None,
) -> tuple[datetime | None, datetime]:
    """
    Converte o período do relatório em [inicio, fim] na timezone local.
    - day:   hoje 00:00 → agora
    - week:  hoje 00:00 − 7 dias → agora
    - month: hoje 00:00 − 1 mês → agora
    - all:   sem início → agora
    - custom: start_date 00:00 → end_date 23:59:59.999999
    """
    agora = timezone.localtime(agora or timezone.now(), _tz())
    hoje = agora.date()

    if period == "custom":
        inicio = inicio_do_dia(start_date) if start_date else None
        fim = fim_do_dia(end_date) if end_date else agora
        return inicio, fim
    if period == "all":
        return None, agora
    if period == "week":
        return inicio_do_dia(hoje - timedelta(days=7)), agora
    if period == "month":
        return inicio_do_dia(_mes_anterior(hoje)), agora
    return inicio_do_dia(hoje), agora
