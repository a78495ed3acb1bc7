from abc import ABC, abstractmethod

from flight_booking.service.inventory.domain.flight_entity import RouteKey
from flight_booking.service.pricing.domain.route_pricing import RoutePricing


class IRoutePricingRepo(ABC):
    @abstractmethod
    async def get_route_pricing(self, *, route: RouteKey) -> RoutePricing | None:
        """None when the route has no pricing configuration."""
        pass

    @abstractmethod
    async def save_route_pricing(self, *, route_pricing: RoutePricing) -> None:
        pass
