from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .cache import TTLCache
from .client import ServerApiClient

import logging
import structlog

_logger = logging.getLogger(__name__)
log = structlog.wrap_logger(_logger)


class CountryInfo(BaseModel):
    code: str
    name: str
    flag: str = ""
    value: str


class UserTypeInfo(BaseModel):
    value: str
    label: str


class EnumData(BaseModel):
    """Lookup values served by the backend"""
    model_config = ConfigDict(populate_by_name=True)

    countries: List[CountryInfo] = Field(default_factory=list)
    user_types: List[UserTypeInfo] = Field(default_factory=list, alias="userTypes")
    service_types: List[str] = Field(default_factory=list, alias="serviceTypes")
    property_statuses: List[str] = Field(default_factory=list, alias="propertyStatuses")
    advertiser_plans: List[str] = Field(default_factory=list, alias="advertiserPlans")
    advertiser_statuses: List[str] = Field(default_factory=list, alias="advertiserStatuses")


# Built-in values for when the backend cannot be reached
DEFAULT_ENUM_DATA = EnumData(
    countries=[
        CountryInfo(code="CA", name="Canada", flag="🇨🇦", value="ca"),
        CountryInfo(code="US", name="United States", flag="🇺🇸", value="us"),
        CountryInfo(code="AE", name="United Arab Emirates", flag="🇦🇪", value="uae"),
    ],
    user_types=[
        UserTypeInfo(value="Buyer", label="Buyer"),
        UserTypeInfo(value="Seller", label="Seller"),
    ],
    service_types=["photographer", "lawyer", "inspector", "stager", "cleaner", "contractor"],
    property_statuses=["pending", "active", "sold", "expired"],
    advertiser_plans=["basic", "premium"],
    advertiser_statuses=["pending", "active", "suspended", "cancelled"],
)


class EnumService:
    """
    Fetches enum lookups through the API client, memoized in an injected TTLCache.

    The backend wraps the lists in an "enums" object. When a fallback is given,
    a failed load returns it instead of raising; the fallback is never cached.
    """

    def __init__(self, client: ServerApiClient, cache: Optional[TTLCache] = None,
                 path: str = "/api/sonobrokers/enums", fallback: Optional[EnumData] = None):
        self.client = client
        self.cache = cache or TTLCache()
        self.path = path
        self.fallback = fallback

    async def _load(self) -> EnumData:
        data = await self.client.get(self.path) or {}
        return EnumData.model_validate(data.get("enums") or {})

    async def get_enum_values(self) -> EnumData:
        try:
            return await self.cache.get_or_load(self._load)
        except Exception as e:
            if self.fallback is None:
                raise
            log.error("Failed to fetch enum values; using fallback", path=self.path, error=str(e))
            return self.fallback

    async def get_countries(self) -> List[CountryInfo]:
        return (await self.get_enum_values()).countries

    async def get_user_types(self) -> List[UserTypeInfo]:
        return (await self.get_enum_values()).user_types

    def invalidate(self) -> None:
        self.cache.invalidate()
