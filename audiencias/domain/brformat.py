"""Brazilian wire formats for dates (``dd/MM/yyyy``) and times (``HH:mm[:ss]``).

The engine works with ``datetime.date`` / ``datetime.time`` only; text is
converted here, at the API boundary.
"""

from __future__ import annotations

from datetime import date, datetime, time

from audiencias.domain.errors import ValidationError

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M:%S"
_TIME_INPUT_FORMATS = ("%H:%M:%S", "%H:%M")


def parse_date(text: str | None) -> date:
    """Parse ``dd/MM/yyyy`` into a date. Raises ``ValidationError``."""
    if text is None or not text.strip():
        raise ValidationError("Data é obrigatória. Use o formato dd/MM/yyyy")
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError as exc:
        raise ValidationError(
            f"Data inválida: '{text}'. Use o formato dd/MM/yyyy (ex: 25/01/2025)"
        ) from exc


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_time(text: str | None) -> time:
    """Parse ``HH:mm`` or ``HH:mm:ss`` into a minute-resolution time.

    Seconds other than ``00`` are rejected rather than truncated.
    """
    if text is None or not text.strip():
        raise ValidationError("Horário é obrigatório. Use o formato HH:mm")
    raw = text.strip()
    for fmt in _TIME_INPUT_FORMATS:
        try:
            parsed = datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
        if parsed.second:
            raise ValidationError(
                f"Horário inválido: '{text}'. Resolução máxima é de minutos"
            )
        return parsed
    raise ValidationError(f"Horário inválido: '{text}'. Use o formato HH:mm")


def format_time(value: time) -> str:
    return value.strftime(TIME_FORMAT)
