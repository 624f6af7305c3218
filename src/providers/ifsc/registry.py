"""Fixed provider table for IFSC registries.

The table is built once at startup from configuration and is read-only
afterwards; there is no runtime registration.  The resolution engine asks
for the default provider on every lookup, so an unknown default name is
rejected at construction time rather than on the first request.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

from src.interfaces.ifsc_provider import IIFSCProvider
from src.utils.errors import ConfigurationError
from src.utils.logging import get_logger

_logger = get_logger(__name__)


class IFSCProviderRegistry:
    """Read-only ``name -> provider`` table with a default entry.

    Parameters
    ----------
    providers:
        Providers to register, keyed by their ``get_provider_name()``.
    default:
        Name returned by :meth:`get` when no name is given.
    """

    def __init__(self, providers: Iterable[IIFSCProvider], default: str) -> None:
        table: dict[str, IIFSCProvider] = {}
        for provider in providers:
            name = provider.get_provider_name()
            if name in table:
                raise ConfigurationError(f"Duplicate IFSC provider name '{name}'")
            table[name] = provider

        if default not in table:
            raise ConfigurationError(
                f"Default IFSC provider '{default}' is not registered "
                f"(available: {', '.join(sorted(table)) or 'none'})"
            )

        self._providers = MappingProxyType(table)
        self._default = default

    @property
    def default_name(self) -> str:
        return self._default

    def get(self, name: str | None = None) -> IIFSCProvider:
        """Return the provider registered as *name* (default if omitted).

        Raises
        ------
        ConfigurationError
            If *name* is not in the table.
        """
        key = name or self._default
        try:
            return self._providers[key]
        except KeyError:
            _logger.error("ifsc_provider_not_registered", provider=key)
            raise ConfigurationError(f"Provider '{key}' not found") from None

    def provider_names(self) -> list[str]:
        return list(self._providers)

    def providers(self) -> list[IIFSCProvider]:
        return list(self._providers.values())

    async def aclose(self) -> None:
        """Close every registered provider."""
        for provider in self._providers.values():
            await provider.aclose()
