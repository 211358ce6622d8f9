from .keys import EXCHANGE, Service, Version, rk
from .rabbit import RabbitBus, get_bus, emit

__all__ = ["EXCHANGE", "Service", "Version", "rk", "RabbitBus", "get_bus", "emit"]
