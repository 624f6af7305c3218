"""Abstract base class for remote IFSC data providers.

Defines the contract for fetching branch metadata from an external IFSC
registry (e.g. the Razorpay IFSC API).  Each provider normalizes its own
payload into :class:`~src.models.ifsc.IFSCDetails`, so the resolution
engine never sees provider-specific shapes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.ifsc import IFSCDetails


class IIFSCProvider(ABC):
    """Contract for remote IFSC registries.

    Implementations must enforce a hard timeout on every fetch so a stuck
    remote call cannot stall the resolution engine.
    """

    @abstractmethod
    async def fetch_ifsc_details(self, ifsc_code: str) -> IFSCDetails:
        """Fetch and normalize the branch record for *ifsc_code*.

        Parameters
        ----------
        ifsc_code:
            An uppercase, format-validated IFSC code.

        Returns
        -------
        IFSCDetails
            The normalized record.  Missing string fields are ``""`` and
            missing flags are ``False``.

        Raises
        ------
        src.utils.errors.IFSCNotFoundError
            If the registry reports the code does not exist.
        src.utils.errors.ProviderUnavailableError
            On any transport, timeout, or protocol failure.  The message
            carries the original failure text.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the registry name this provider is registered under.

        Example return values: ``"razorpay"``.
        """

    async def aclose(self) -> None:
        """Release any HTTP client owned by the provider."""
