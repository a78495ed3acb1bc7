from opentelemetry import trace

from flight_booking.platform.logging.loguru_io import Logger
from flight_booking.service.pricing.app.command.invalidate_price_cache_use_case import (
    InvalidatePriceCacheUseCase,
)
from flight_booking.service.pricing.app.interface import IRoutePricingRepo
from flight_booking.service.pricing.domain.route_pricing import RoutePricing


class UpdateRoutePricingUseCase:
    def __init__(
        self,
        *,
        route_pricing_repo: IRoutePricingRepo,
        price_cache_invalidator: InvalidatePriceCacheUseCase,
    ) -> None:
        self.route_pricing_repo = route_pricing_repo
        self.price_cache_invalidator = price_cache_invalidator
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(self, *, route_pricing: RoutePricing) -> RoutePricing:
        with self.tracer.start_as_current_span(
            'pricing.update_route_pricing', attributes={'route': str(route_pricing.route)}
        ):
            await self.route_pricing_repo.save_route_pricing(route_pricing=route_pricing)
            # Any flight on this route may carry a stale quote
            await self.price_cache_invalidator.clear()
            Logger.base.info(
                f'📈 [ROUTE-PRICING] {route_pricing.route} popularity={route_pricing.popularity} '
                f'seasonal_ranges={len(route_pricing.seasonal_ranges)}'
            )
            return route_pricing
