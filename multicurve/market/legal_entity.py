"""
Bond issuers and the filters used to map them onto issuer curves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class LegalEntity:
    """Minimal description of a bond issuer."""

    short_name: str
    ticker: Optional[str] = None
    region: Optional[str] = None
    sector: Optional[str] = None


class LegalEntityFilter(Enum):
    """Selects the attribute of a legal entity used as an issuer curve key."""

    SHORT_NAME = "short_name"
    TICKER = "ticker"
    REGION = "region"
    SECTOR = "sector"

    def key_for(self, entity: LegalEntity):
        return getattr(entity, self.value)


# (key, filter): the curve applies to every entity whose filtered attribute equals key
IssuerFilterPair = Tuple[object, LegalEntityFilter]


def matches(pair: IssuerFilterPair, entity: LegalEntity) -> bool:
    key, entity_filter = pair
    return entity_filter.key_for(entity) == key
