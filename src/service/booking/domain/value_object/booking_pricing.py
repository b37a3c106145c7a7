from decimal import Decimal

import attrs


@attrs.define(frozen=True)
class BookingPricing:
    base_price: Decimal
    taxes: Decimal
    fees: Decimal
    total_amount: Decimal
    currency: str = 'USD'
