"""
Utilidades centralizadas para manejo de fechas y timestamps.

Todas las operaciones usan la zona horaria configurada en settings.APP_TIMEZONE
(UTC por defecto) como referencia para "hoy" y para los cortes de mes/semana.

Convención del sistema:
- Los timestamps de auditoría (created_at / updated_at) se persisten naive,
  expresados en la zona de referencia.
- Las fechas de negocio (inicio/vencimiento de tareas, fecha de movimiento,
  fecha de compra de activos) son `date` puras, sin hora.
"""
import re
from datetime import datetime, date, timedelta
from zoneinfo import ZoneInfo

from config.settings import settings

APP_TZ = ZoneInfo(settings.APP_TIMEZONE)

_DATE_ONLY_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def now_local() -> datetime:
    """Datetime actual en la zona de referencia (naive, sin microsegundos)."""
    return datetime.now(APP_TZ).replace(tzinfo=None, microsecond=0)


def today_local() -> date:
    """Fecha actual (date) en la zona de referencia."""
    return datetime.now(APP_TZ).date()


def parse_date_only(value) -> date | None:
    """
    Parsea un string estricto YYYY-MM-DD.

    Retorna None si el valor no es un string con ese formato o si la fecha
    no existe (ej. 2024-02-30).
    """
    if not isinstance(value, str):
        return None
    m = _DATE_ONLY_RE.match(value.strip())
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def parse_date_any(value) -> date | None:
    """
    Parsea una fecha flexible: YYYY-MM-DD, datetime ISO 8601 o date/datetime.

    Los datetimes con zona se convierten a la zona de referencia antes de
    tomar la fecha.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _to_local_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        only = parse_date_only(s)
        if only:
            return only
        try:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            return None
        return _to_local_date(dt)
    return None


def _to_local_date(dt: datetime) -> date:
    if dt.tzinfo is None:
        return dt.date()
    return dt.astimezone(APP_TZ).date()


def month_key(d: date) -> str:
    """Clave de mes YYYY-MM."""
    return f"{d.year:04d}-{d.month:02d}"


def prev_month_key(key: str) -> str:
    """Clave del mes anterior a una clave YYYY-MM ('' si el formato es inválido)."""
    if not re.match(r"^\d{4}-\d{2}$", key or ""):
        return ""
    year, month = (int(x) for x in key.split("-"))
    if month == 1:
        return f"{year - 1:04d}-12"
    return f"{year:04d}-{month - 1:02d}"


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def start_of_next_month(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def get_week_start(d: date) -> date:
    """Inicio de la semana (lunes) de una fecha."""
    return d - timedelta(days=d.weekday())


def to_yyyymmdd(d: date | datetime | None) -> str:
    if d is None:
        return ""
    if isinstance(d, datetime):
        d = d.date()
    return d.isoformat()
