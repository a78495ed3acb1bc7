from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.platform.state.kvrocks_client import kvrocks_client, translate_store_errors
from flight_booking.service.inventory.domain.flight_entity import RouteKey
from flight_booking.service.pricing.app.interface import IRoutePricingRepo
from flight_booking.service.pricing.domain.route_pricing import RoutePricing
from flight_booking.service.pricing.driven_adapter.state.pricing_codec import (
    route_pricing_from_dict,
)
from flight_booking.service.shared_kernel.driven_adapter.json_codec import dumps, loads
from flight_booking.service.shared_kernel.driven_adapter.key_str_generator import (
    make_route_pricing_key,
)


class RoutePricingRepoImpl(IRoutePricingRepo):
    @Logger.io
    @translate_store_errors
    async def get_route_pricing(self, *, route: RouteKey) -> RoutePricing | None:
        raw = await kvrocks_client.get_client().get(
            make_route_pricing_key(source=route.source, destination=route.destination)
        )
        return route_pricing_from_dict(loads(raw)) if raw else None

    @Logger.io
    @translate_store_errors
    async def save_route_pricing(self, *, route_pricing: RoutePricing) -> None:
        route = route_pricing.route
        await kvrocks_client.get_client().set(
            make_route_pricing_key(source=route.source, destination=route.destination),
            dumps(route_pricing),
        )
