"""SMS backends and the registry that selects them."""

from .dry_run import DryRunClient
from .goyya import GoyyaClient, parse_gateway_response
from .registry import AdapterRegistry

__all__ = [
    "AdapterRegistry",
    "DryRunClient",
    "GoyyaClient",
    "parse_gateway_response",
]
