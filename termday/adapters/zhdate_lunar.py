"""Chinese lunar calendar adapter — implements LunarConverter via zhdate."""

from __future__ import annotations

import logging
from datetime import date

from zhdate import ZhDate

from termday.ports.lunar_port import LunarConversionError

logger = logging.getLogger(__name__)


class ZhDateLunarConverter:
    """zhdate implementation of LunarConverter (Chinese calendar, 1900–2100)."""

    def to_solar(self, lunar_year: int, lunar_month: int, lunar_day: int) -> date:
        try:
            solar = ZhDate(lunar_year, lunar_month, lunar_day).to_datetime()
        except (TypeError, ValueError, IndexError) as exc:
            logger.debug(
                "zhdate rejected lunar %d-%02d-%02d: %s",
                lunar_year, lunar_month, lunar_day, exc,
            )
            raise LunarConversionError(
                f"Invalid lunar date {lunar_year}-{lunar_month:02d}-{lunar_day:02d}"
            ) from exc
        return solar.date()
