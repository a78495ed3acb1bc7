"""Pricing Service Interfaces"""

from flight_booking.service.pricing.app.interface.i_price_cache import IPriceCache
from flight_booking.service.pricing.app.interface.i_route_pricing_repo import IRoutePricingRepo

__all__ = ['IPriceCache', 'IRoutePricingRepo']
