import os
import asyncio
from BrokerIntegrator import ApiError, ContextTokenAuth, NetworkError, ServerApiClient, request_token

# Token of the user whose request is being served
USER_TOKEN = os.getenv('USER_TOKEN')

api_client = ServerApiClient.from_env(auth_strategy=ContextTokenAuth())


async def get_my_profile():
    async with api_client:
        with request_token(USER_TOKEN):
            try:
                return await api_client.get("/api/sonobrokers/users/me")
            except ApiError as e:
                print(f"Backend refused: {e.status_code} {e.message}")
            except NetworkError as e:
                print(f"Backend unreachable: {e}")

if __name__ == "__main__":
    print(asyncio.run(get_my_profile()))
