"""Remote IFSC registry providers.

Each provider fetches branch metadata from one external registry and
normalizes it with :func:`normalize_payload`.  Providers are looked up by
name through :class:`IFSCProviderRegistry`, a fixed table built in
``src/main.py``.
"""

from src.providers.ifsc.normalization import normalize_payload
from src.providers.ifsc.razorpay_provider import RazorpayIFSCProvider
from src.providers.ifsc.registry import IFSCProviderRegistry

__all__ = ["IFSCProviderRegistry", "RazorpayIFSCProvider", "normalize_payload"]
