import logging
import time
from typing import Dict, Any

from django.db import DatabaseError
from django.utils import timezone

from inventory.models import Receipt, Delivery, Transfer, Adjustment
from inventory.services.base_service import ValidationError, success_response

logger = logging.getLogger(__name__)


class NumberingService:
    """
    Human readable reference numbers: ``{PREFIX}-{YYYY}-{NNN}``.

    The sequence restarts every year and is zero padded to three digits;
    it simply grows wider once it passes 999.
    """

    PREFIXES = {
        "REC": Receipt,
        "DEL": Delivery,
        "TRF": Transfer,
        "ADJ": Adjustment,
    }

    @classmethod
    def model_for(cls, prefix: str):
        try:
            return cls.PREFIXES[prefix.upper()]
        except (KeyError, AttributeError):
            raise ValidationError(
                f"Unknown prefix. Valid: {list(cls.PREFIXES)}", "prefix"
            )

    @staticmethod
    def parse_sequence(reference_number: str):
        parts = reference_number.split("-")
        if len(parts) < 3:
            return None
        try:
            return int(parts[2])
        except ValueError:
            return None

    @classmethod
    def next_number(cls, prefix: str, year: int = None) -> str:
        model = cls.model_for(prefix)
        prefix = prefix.upper()
        year = year or timezone.now().year
        start = f"{prefix}-{year}-"

        try:
            numbers = model.objects.filter(
                reference_number__startswith=start
            ).values_list("reference_number", flat=True)
            sequences = [s for s in (cls.parse_sequence(n) for n in numbers) if s is not None]
        except DatabaseError:
            fallback = cls.fallback_number(prefix, year)
            logger.warning(f"Could not read {prefix} numbers, using fallback {fallback}")
            return fallback

        seq = max(sequences, default=0) + 1
        return f"{start}{seq:03d}"

    @staticmethod
    def fallback_number(prefix: str, year: int) -> str:
        stamp = str(int(time.time() * 1000))[-6:]
        return f"{prefix}-{year}-{stamp}"

    @classmethod
    def get_next(cls, prefix: str, year: int = None) -> Dict[str, Any]:
        return success_response({
            "reference_number": cls.next_number(prefix, year),
        })
