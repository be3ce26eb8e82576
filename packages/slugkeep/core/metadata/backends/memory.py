"""In-memory metadata store for tests and dry runs."""


class InMemoryMetadataStore:
    """Dict-backed metadata store. Nothing is persisted."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    async def exists(self, key: str) -> bool:
        return key in self.values

    async def read(self, key: str) -> str | None:
        value = self.values.get(key)
        if value is None:
            return None
        return value.removesuffix("\n").removesuffix("\r")

    async def write(self, key: str, value: str | int) -> None:
        self.values[key] = str(value)
