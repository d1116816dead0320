"""Shared test doubles and fixtures data"""

from datetime import datetime, timedelta
from factoring_gateway.domain.exceptions import PaymentError

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
LENDER_POOL = "0x8626f6940E2eb28930eFb4CeF49B2d1F2C9C1199"
TREASURY = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"

ONE_DAY = timedelta(days=1)


class FakePayments:
    """Records payout instructions instead of calling the payments service"""

    def __init__(self):
        self.payouts = []
        self.fail = False

    def pay_out(self, asset_id, source, destination, amount, fee=0, reference=None):
        if self.fail:
            raise PaymentError("Payments API error: 503")
        payout = {
            "asset_id": asset_id,
            "source": source,
            "destination": destination,
            "amount": amount,
            "fee": fee,
            "reference": reference,
        }
        self.payouts.append(payout)
        return payout

    def balance_of(self, destination: str) -> int:
        return sum(p["amount"] for p in self.payouts if p["destination"] == destination)


class FakeClock:
    """Controllable clock, advanced explicitly by tests"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)
