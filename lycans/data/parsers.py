"""Fonctions de parsing et utilitaires pour les données du journal de parties."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from typing import Any, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lycans.config import DISPLAY_TIMEZONE

logger = logging.getLogger(__name__)

# "N2", "j3", "M1", "U4", et l'ancien format "Nuit 2 --> N2".
_TIMING_CODE_RE = re.compile(r"([JNMU])\s*(\d+)\s*$", re.IGNORECASE)
_TIMING_WORDS_RE = re.compile(r"(Nuit|Jour)\s+(\d+)", re.IGNORECASE)
_ANY_TIMING_RE = re.compile(r"[UNJMC](\d+)", re.IGNORECASE)


def parse_iso_utc(s: str) -> datetime:
    """Parse une date ISO 8601 en datetime UTC.

    Gère le format de l'export: 2024-10-05T20:18:01.293Z

    Args:
        s: Chaîne de date au format ISO 8601.

    Returns:
        datetime en timezone UTC.

    Raises:
        ValueError: Si la chaîne n'est pas une date ISO valide.
    """
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def try_parse_iso_utc(s: Any) -> Optional[datetime]:
    """Variante tolérante de `parse_iso_utc` : None si la date est illisible."""
    if not isinstance(s, str) or not s.strip():
        return None
    try:
        return parse_iso_utc(s)
    except ValueError:
        return None


def coerce_int(v: Any) -> Optional[int]:
    try:
        if v is None or isinstance(v, bool):
            return None
        return int(v)
    except (TypeError, ValueError):
        return None


def coerce_float(v: Any) -> Optional[float]:
    """Convertit une valeur en float, None si impossible."""
    try:
        if v is None or isinstance(v, bool):
            return None
        return float(v)
    except (TypeError, ValueError):
        return None


def coerce_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


# =============================================================================
# Codes de timing
# =============================================================================

def parse_timing_code(code: Any) -> Optional[Tuple[str, int]]:
    """Décode un code de timing de mort.

    Args:
        code: Code du type "N2", "M1", "j3" ou "Nuit 2 --> N2".

    Returns:
        Tuple (phase en majuscule, numéro), ou None si illisible.
    """
    s = coerce_str(code)
    if s is None:
        return None
    m = _TIMING_CODE_RE.search(s)
    if m:
        return m.group(1).upper(), int(m.group(2))
    m = _TIMING_WORDS_RE.search(s)
    if m:
        phase = "N" if m.group(1).lower() == "nuit" else "J"
        return phase, int(m.group(2))
    return None


def parse_end_timing_day(end_timing: Any) -> Optional[int]:
    """Extrait le nombre de jours/nuits d'un timing de fin de partie.

    Accepte "Nuit 5", "Jour 6" et les codes compacts ("N5", "J6", "M3").
    """
    s = coerce_str(end_timing)
    if s is None:
        return None
    m = _TIMING_WORDS_RE.search(s)
    if m:
        return int(m.group(2))
    m = _ANY_TIMING_RE.search(s)
    if m:
        return int(m.group(1))
    return None


# =============================================================================
# Dates d'affichage
# =============================================================================

@lru_cache(maxsize=8)
def get_display_tz(name: str = DISPLAY_TIMEZONE) -> tzinfo:
    """Retourne la timezone d'affichage (UTC si la base tz est indisponible)."""
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning("Timezone inconnue %r, utilisation de UTC", name)
        return timezone.utc


def format_display_date(iso: Any, tz_name: str = DISPLAY_TIMEZONE) -> Optional[str]:
    """Formate une date ISO en "JJ/MM/AAAA" dans la timezone d'affichage.

    Returns:
        La date formatée, ou None si la date est illisible.
    """
    dt = try_parse_iso_utc(iso)
    if dt is None:
        return None
    return dt.astimezone(get_display_tz(tz_name)).strftime("%d/%m/%Y")


def duration_seconds(start_iso: Any, end_iso: Any) -> Optional[int]:
    """Durée en secondes entre deux dates ISO, None si l'une est illisible."""
    start = try_parse_iso_utc(start_iso)
    end = try_parse_iso_utc(end_iso)
    if start is None or end is None:
        return None
    return int((end - start).total_seconds())
