import asyncio
from BrokerIntegrator import DEFAULT_ENUM_DATA, EnumService, ServerApiClient, TTLCache


async def list_countries():
    """Print the countries the backend knows about"""
    async with ServerApiClient.from_env() as api_client:
        enums = EnumService(api_client, cache=TTLCache(ttl_seconds=300), fallback=DEFAULT_ENUM_DATA)
        for country in await enums.get_countries():
            print(f"{country.flag} {country.name} ({country.code})")

if __name__ == "__main__":
    asyncio.run(list_countries())
