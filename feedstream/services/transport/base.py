from abc import ABC, abstractmethod

QueryParams = dict[str, str | int | float | bool]


class Transport(ABC):
    """Executes feed API requests.

    ``url`` is relative to the API root, slash separated, with a trailing
    slash. ``signature`` goes in the Authorization header as-is.
    """

    @abstractmethod
    async def post(self, url: str, signature: str, body: dict | list | None = None, qs: QueryParams | None = None) -> dict:
        ...

    @abstractmethod
    async def get(self, url: str, signature: str, qs: QueryParams | None = None) -> dict:
        ...

    @abstractmethod
    async def delete(self, url: str, signature: str, qs: QueryParams | None = None) -> dict:
        ...

    async def close(self) -> None:
        """Release network resources. No-op by default."""
