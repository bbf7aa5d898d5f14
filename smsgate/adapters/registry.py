from __future__ import annotations

from typing import Dict, Optional

from smsgate.adapters.dry_run import DryRunClient
from smsgate.adapters.goyya import GoyyaClient
from smsgate.config import SmsSettings, get_settings
from smsgate.errors import SmsConfigurationError
from smsgate.types import SmsAdapter


class AdapterRegistry:
    """Registry for SMS adapters by name.

    Adapters are constructed with the settings they should use, so one process
    can hold differently configured services side by side.
    """

    _registry: Dict[str, type[SmsAdapter]] = {
        "goyya": GoyyaClient,
        "dry_run": DryRunClient,
    }

    @classmethod
    def get(cls, name: str, settings: Optional[SmsSettings] = None) -> SmsAdapter:
        provider_cls = cls._registry.get(name)
        if provider_cls is None:
            raise SmsConfigurationError(f"Unknown SMS adapter: {name}")
        return provider_cls(settings or get_settings())  # type: ignore[call-arg]

    @classmethod
    def register(cls, name: str, adapter_cls: type[SmsAdapter]) -> None:
        cls._registry[name] = adapter_cls

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._registry)
