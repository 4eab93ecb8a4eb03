"""Application context holding the wired-up services."""

from typing import Any, TypeVar

T = TypeVar("T")


class AppContext:
    """Name → resource map filled by :func:`roocode_generator.core.bootstrap`.

    Standard keys are ``"config"`` (the config source), ``"llm"`` (the
    ProviderRegistry) and ``"models"`` (the ModelListerService).
    """

    def __init__(self) -> None:
        self._resources: dict[str, Any] = {}

    def register(self, name: str, resource: Any) -> None:
        self._resources[name] = resource

    def get(self, name: str, default: Any = None) -> Any | None:
        return self._resources.get(name, default)

    def get_typed(self, name: str, expected_type: type[T], default: T | None = None) -> T | None:
        """Retrieve a resource, or ``default`` when missing or of the wrong type."""
        resource = self._resources.get(name)
        if not isinstance(resource, expected_type):
            return default
        return resource

    def __getitem__(self, name: str) -> Any:
        """Dictionary-style access.

        Raises:
            KeyError: If the resource is not registered
        """
        return self._resources[name]

    def __contains__(self, name: str) -> bool:
        return name in self._resources

    async def aclose(self) -> None:
        """Release transports held by registered resources."""
        for resource in self._resources.values():
            close = getattr(resource, "aclose", None)
            if callable(close):
                await close()
