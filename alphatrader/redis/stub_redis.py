class StubRedis:
    async def get(self, key: str):
        return None

    async def set(self, key: str, value: str, ex=None):
        pass

    async def delete(self, *keys: str):
        pass

    async def aclose(self):
        pass
