from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Fields are snake_case in Python and camelCase in the emitted table."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Relay(_CamelModel):
    addr: Optional[str] = None
    port: Optional[int] = None
    data: Optional[dict] = None
    """Geolocation payload attached by the location enricher."""


class PoolLink(_CamelModel):
    name: Optional[str] = None
    href: str


class PoolRecord(_CamelModel):
    """One row of the pools table."""

    id: str
    name: Optional[str] = None
    link: PoolLink
    description: Optional[str] = None
    image: str
    has_image: bool
    ticker: Optional[str] = None
    addr: Optional[str] = None
    website: Optional[str] = None

    # Stake / performance figures are passed through as the stats service reports them
    total_stake: Any = None
    blocks_lifetime: Any = None
    delegators: Any = None
    pledge: Any = None
    pledged: Any = None
    tax_ratio: Any = None
    roa: Any = None

    member_since: Any = None
    registered_at: Optional[str] = None
    identities: Any = None

    relays: List[Relay]
    metadata: Optional[dict] = None
    extended: Optional[dict] = None
