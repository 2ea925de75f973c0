"""
===============================================================================
TARJETA CRC — domain/recurrence.py
===============================================================================

Módulo:
    Reglas de Recurrencia (¿corresponde resetear esta tarea hoy?)

Responsabilidades:
    - Decidir, de forma pura, si una tarea recurrente vuelve a "pending"
      según su kind y su última completación.
    - Hacer toda la aritmética de calendario en la zona horaria de la app.
    - Devolver un motivo legible (útil para logs del scheduler).

Colaboradores:
    - domain.entities: TaskKind, RecurringPattern, CustomRecurrence.
    - application/usecases/tasks/reset_recurring_tasks.py: consumidor.

Reglas:
    - one-time: nunca resetea.
    - daily / weekly / monthly: nuevo día / semana (inicio domingo) / mes.
    - recurring: cada `interval` días, semanas o meses transcurridos.
    - custom: días puntuales de la semana o del mes (nunca el mismo día
      de la última completación).
    - rollover por deadline (daily/weekly/monthly pendientes): el deadline
      "HH:MM" pasó y, contado desde él, empezó un nuevo período.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional

from .entities import (
    DEADLINE_ROLLOVER_KINDS,
    CustomRecurrence,
    CustomRecurrenceType,
    RecurrenceFrequency,
    RecurringPattern,
    TaskKind,
)

_EPOCH = date(1970, 1, 1)


@dataclass(frozen=True)
class RecurrenceCheck:
    should_reset: bool
    message: str = ""


_NO = RecurrenceCheck(False)


def day_of_week(d: date) -> int:
    """Día de la semana con 0=domingo .. 6=sábado."""
    return (d.weekday() + 1) % 7


def week_start(d: date) -> date:
    """Domingo de la semana de `d`."""
    return d - timedelta(days=day_of_week(d))


def epoch_week(d: date) -> int:
    return (d - _EPOCH).days // 7


def local_date(moment: datetime, tz: tzinfo) -> date:
    """Fecha calendario de `moment` en `tz` (naive se asume UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def check_recurrence(
    kind: TaskKind,
    last_completed_at: Optional[datetime],
    *,
    now: datetime,
    tz: tzinfo,
    pattern: Optional[RecurringPattern] = None,
    custom: Optional[CustomRecurrence] = None,
) -> RecurrenceCheck:
    """
    Evalúa si una tarea completada en `last_completed_at` debe resetearse en `now`.

    Sin completación previa nunca hay reset.
    """
    if last_completed_at is None:
        return RecurrenceCheck(False, "Task has never been completed")

    today = local_date(now, tz)
    last_day = local_date(last_completed_at, tz)

    if kind == TaskKind.ONE_TIME:
        return RecurrenceCheck(False, "One-time tasks do not reset")

    if kind == TaskKind.DAILY:
        if today > last_day:
            return RecurrenceCheck(True, "Daily task reset - new day")
        return _NO

    if kind == TaskKind.WEEKLY:
        if week_start(today) > week_start(last_day):
            return RecurrenceCheck(True, "Weekly task reset - new week")
        return _NO

    if kind == TaskKind.MONTHLY:
        if (today.year, today.month) > (last_day.year, last_day.month):
            return RecurrenceCheck(True, "Monthly task reset - new month")
        return _NO

    if kind == TaskKind.RECURRING:
        return _check_pattern(pattern, now, last_completed_at, today, last_day)

    if kind == TaskKind.CUSTOM:
        return _check_custom(custom, today, last_day)

    return RecurrenceCheck(False, "Unknown task kind")


def _check_pattern(
    pattern: Optional[RecurringPattern],
    now: datetime,
    last_completed_at: datetime,
    today: date,
    last_day: date,
) -> RecurrenceCheck:
    if pattern is None or pattern.interval <= 0:
        return RecurrenceCheck(False, "Invalid recurring pattern")

    # Días transcurridos reales (no de calendario).
    elapsed_days = (now - last_completed_at).days

    if pattern.frequency == RecurrenceFrequency.DAILY:
        if elapsed_days >= pattern.interval:
            return RecurrenceCheck(
                True,
                f"Recurring daily task reset - {pattern.interval} day(s) passed",
            )
        return _NO

    if pattern.frequency == RecurrenceFrequency.WEEKLY:
        if elapsed_days // 7 < pattern.interval:
            return _NO
        if pattern.days_of_week and day_of_week(today) not in pattern.days_of_week:
            return _NO
        return RecurrenceCheck(
            True, f"Recurring weekly task reset - {pattern.interval} week(s) passed"
        )

    if pattern.frequency == RecurrenceFrequency.MONTHLY:
        months = (today.year - last_day.year) * 12 + (today.month - last_day.month)
        if months < pattern.interval:
            return _NO
        if pattern.day_of_month and today.day < pattern.day_of_month:
            return _NO
        return RecurrenceCheck(
            True, f"Recurring monthly task reset - {pattern.interval} month(s) passed"
        )

    return _NO


def _check_custom(
    custom: Optional[CustomRecurrence], today: date, last_day: date
) -> RecurrenceCheck:
    if custom is None:
        return RecurrenceCheck(
            False, "Custom tasks require custom recurrence configuration"
        )
    if today == last_day:
        return RecurrenceCheck(False, "Already completed today")
    if not custom.days:
        return RecurrenceCheck(False, "No days configured")

    if custom.type == CustomRecurrenceType.DAYS_OF_WEEK:
        current = day_of_week(today)
        if current not in custom.days:
            return RecurrenceCheck(False, "Custom recurrence date/day not matched")
        if custom.recurring:
            if today > last_day:
                return RecurrenceCheck(
                    True, f"Custom recurring weekday matched (day {current})"
                )
        elif epoch_week(today) > epoch_week(last_day):
            return RecurrenceCheck(True, f"Custom weekday matched (day {current})")
        return RecurrenceCheck(False, "Custom recurrence date/day not matched")

    if custom.type == CustomRecurrenceType.DAYS_OF_MONTH:
        if today.day in custom.days and today > last_day:
            prefix = "Custom recurring day" if custom.recurring else "Custom day"
            return RecurrenceCheck(True, f"{prefix} {today.day} of month matched")
        return RecurrenceCheck(False, "Custom recurrence date/day not matched")

    return _NO


def should_reset(
    kind: TaskKind,
    last_completed_at: Optional[datetime],
    *,
    now: datetime,
    tz: tzinfo,
    pattern: Optional[RecurringPattern] = None,
    custom: Optional[CustomRecurrence] = None,
) -> bool:
    return check_recurrence(
        kind, last_completed_at, now=now, tz=tz, pattern=pattern, custom=custom
    ).should_reset


def deadline_passed(
    deadline_date: Optional[date], *, now: datetime, tz: tzinfo
) -> bool:
    """True si la fecha de deadline es anterior a hoy (en la zona de la app)."""
    if deadline_date is None:
        return False
    return deadline_date < local_date(now, tz)


def deadline_moment(
    deadline_date: Optional[date], deadline_time: Optional[str], tz: tzinfo
) -> Optional[datetime]:
    """Instante del deadline ("HH:MM" en `tz`); None si falta o está mal formado."""
    if deadline_date is None or not deadline_time:
        return None
    try:
        hours, minutes = (int(part) for part in deadline_time.split(":", 1))
        return datetime(
            deadline_date.year,
            deadline_date.month,
            deadline_date.day,
            hours,
            minutes,
            tzinfo=tz,
        )
    except ValueError:
        return None


def deadline_rollover_due(
    kind: TaskKind,
    deadline_date: Optional[date],
    deadline_time: Optional[str],
    *,
    now: datetime,
    tz: tzinfo,
) -> bool:
    """
    Una tarea pendiente vence por deadline cuando su instante ya pasó y, tomando
    el deadline como referencia, empezó un nuevo día / semana / mes.

    Tras el rollover el deadline pasa a hoy, así que dentro del mismo período
    no vuelve a vencer.
    """
    if kind not in DEADLINE_ROLLOVER_KINDS:
        return False
    moment = deadline_moment(deadline_date, deadline_time, tz)
    if moment is None or moment >= now:
        return False
    return check_recurrence(kind, moment, now=now, tz=tz).should_reset
