from __future__ import annotations
from enum import Enum

# Default exchange for catalog events
EXCHANGE = "catalog.events"

class Service(str, Enum):
    CATEGORY = "category"
    ARTIFACT = "artifact"

class Version(str, Enum):
    V1 = "v1"

def rk(org: str, service: Service | str, event: str, version: str = Version.V1.value) -> str:
    """
    Build the canonical versioned routing key:
        <org>.<service>.<event>.<version>

    Examples:
        rk("catalog", Service.CATEGORY, "rearranged") -> "catalog.category.rearranged.v1"
    """
    svc = service.value if isinstance(service, Service) else str(service)
    return f"{org}.{svc}.{event}.{version}"
