"""
E2E settlement scenarios across grade A/B/C tiers.

Each scenario creates an offer, checks the upfront split and the advance
paid to the treasury, then settles it and checks the exact fee/net split:

- Grade A, invoice == available, settled at the due date
- Grade B/C, invoice != available, settled late or ahead of the due date
- Rejections naming the violated tier bound
"""

import pytest
from datetime import timedelta
from factoring_gateway.domain.models import OfferParams
from factoring_gateway.domain.exceptions import (
    InvalidAdvanceFee,
    InvalidAvailableAmount,
    InvalidDiscountFee,
    InvalidFactoringFee,
    InvalidInvoiceAmount,
    InvalidOfferError,
    InvalidTenure,
)
from factoring_gateway.services.offers import OfferEngine
from helpers import ONE_DAY, TREASURY, USDC, FakeClock, FakePayments


def _params(**values) -> OfferParams:
    return OfferParams(asset_id=USDC, **values)


@pytest.fixture
def engine(offer_engine: OfferEngine, graded_tiers) -> OfferEngine:
    return offer_engine


@pytest.mark.parametrize(
    "tier_id, params, advanced, reserve, due_offset, late_fee, late_days, fees, net",
    [
        pytest.param(
            "0x57A2",
            dict(advance_fee=8800, discount_fee=390, factoring_fee=135, grace_period=1,
                 tenure=79, invoice_amount=8934578, available_amount=8934578),
            7862428, 1072150, timedelta(0), 0, 0, 186983, 885167,
            id="grade-A-57A2-at-due-date",
        ),
        pytest.param(
            "0x643A",
            dict(advance_fee=8500, discount_fee=375, factoring_fee=80, grace_period=1,
                 tenure=45, invoice_amount=8934578, available_amount=8934578),
            7594391, 1340187, timedelta(0), 0, 0, 106587, 1233600,
            id="grade-A-643A-at-due-date",
        ),
        pytest.param(
            "0x684B",
            dict(advance_fee=7000, discount_fee=445, factoring_fee=256, grace_period=1,
                 tenure=100, invoice_amount=8934578, available_amount=8934578),
            6254204, 2680374, timedelta(0), 0, 0, 304974, 2375400,
            id="grade-B-684B-at-due-date",
        ),
        pytest.param(
            "0x647A",
            dict(advance_fee=8000, discount_fee=750, factoring_fee=180, grace_period=2,
                 tenure=60, invoice_amount=1000000, available_amount=900000),
            720000, 280000, -8 * ONE_DAY, 2750, 8, 31215, 248785,
            id="grade-B-647A-eight-days-late",
        ),
        pytest.param(
            "0x668B",
            dict(advance_fee=8900, discount_fee=800, factoring_fee=253, grace_period=6,
                 tenure=95, invoice_amount=1000000, available_amount=900000),
            801000, 199000, 10 * ONE_DAY, 2750, 0, 41978, 157022,
            id="grade-B-668B-ten-days-early",
        ),
        pytest.param(
            "0x629C",
            dict(advance_fee=9000, discount_fee=820, factoring_fee=195, grace_period=9,
                 tenure=30, invoice_amount=1000000, available_amount=900000),
            810000, 190000, 9 * ONE_DAY, 2750, 0, 24959, 165041,
            id="grade-C-629C-nine-days-early",
        ),
    ],
)
def test_settlement_scenario(
    engine: OfferEngine,
    payments: FakePayments,
    clock: FakeClock,
    tier_id, params, advanced, reserve, due_offset, late_fee, late_days, fees, net,
):
    observed = clock()
    clock.advance(seconds=15)

    offer = engine.create_offer(tier_id, _params(**params))

    assert offer.advanced_amount == advanced
    assert offer.reserve == reserve
    assert offer.advanced_amount + offer.reserve == params["invoice_amount"]
    assert offer.disbursing_advance_date > observed
    assert offer.params.grace_period == params["grace_period"]
    assert offer.params.tenure == params["tenure"]
    assert offer.params.invoice_amount == params["invoice_amount"]
    assert offer.params.available_amount == params["available_amount"]
    assert payments.balance_of(TREASURY) == advanced

    # A negative offset means the due date has already passed by that much
    if due_offset < timedelta(0):
        clock.advance(seconds=-due_offset.total_seconds())
    due_date = observed + max(due_offset, timedelta(0))

    settled = engine.reserve_refund(offer.offer_id, due_date, late_fee)

    refunded = settled.refunded
    assert refunded.due_date == due_date
    assert refunded.late_fee == late_fee
    assert refunded.number_of_late_days == late_days
    assert refunded.total_calculated_fees == fees
    assert refunded.net_amount == net
    assert refunded.rewards == 0
    assert refunded.net_amount + refunded.total_calculated_fees == offer.reserve
    assert payments.balance_of(TREASURY) == advanced + net


def test_offers_are_numbered_in_creation_order(engine: OfferEngine, clock: FakeClock):
    ids = []
    for tier_id, advance_fee in (("0x606a", 90), ("0x606A", 80), ("0x606a", 70)):
        offer = engine.create_offer(
            tier_id,
            _params(advance_fee=advance_fee, discount_fee=75, factoring_fee=20, grace_period=1,
                    tenure=60, invoice_amount=9000, available_amount=9000),
        )
        ids.append(offer.offer_id)

    assert ids == [1, 2, 3]

    engine.reserve_refund(2, clock(), 0)
    with pytest.raises(InvalidOfferError):
        engine.reserve_refund(2, clock(), 0)
    with pytest.raises(InvalidOfferError):
        engine.reserve_refund(4, clock(), 0)

    assert engine.get_offer(1).refunded is None
    assert engine.get_offer(3).refunded is None


@pytest.mark.parametrize(
    "tier_id, params, error, message",
    [
        (
            "0x624B",
            dict(advance_fee=7200, discount_fee=430, factoring_fee=40, tenure=22,
                 invoice_amount=8934578, available_amount=8934578),
            InvalidFactoringFee, "InvalidFactoringFee(40, 50)",
        ),
        (
            "0x689C",
            dict(advance_fee=7200, discount_fee=730, factoring_fee=227, tenure=120,
                 invoice_amount=1000000, available_amount=900000),
            InvalidDiscountFee, "InvalidDiscountFee(730, 800)",
        ),
        (
            "0x689C",
            dict(advance_fee=9200, discount_fee=800, factoring_fee=227, tenure=120,
                 invoice_amount=1000000, available_amount=900000),
            InvalidAdvanceFee, "InvalidAdvanceFee(9200, 9000)",
        ),
        (
            "0x689C",
            dict(advance_fee=9000, discount_fee=800, factoring_fee=127, tenure=120,
                 invoice_amount=1000000, available_amount=900000),
            InvalidFactoringFee, "InvalidFactoringFee(127, 227)",
        ),
        (
            "0x689C",
            dict(advance_fee=9000, discount_fee=800, factoring_fee=227, tenure=120,
                 invoice_amount=10000000, available_amount=9000000),
            InvalidInvoiceAmount, "InvalidInvoiceAmount(10000000, 500000, 1000000)",
        ),
        (
            "0x689C",
            dict(advance_fee=9000, discount_fee=800, factoring_fee=227, tenure=20,
                 invoice_amount=10000000, available_amount=9000000),
            InvalidTenure, "InvalidTenure(20, 120, 180)",
        ),
        (
            "0x689C",
            dict(advance_fee=9000, discount_fee=800, factoring_fee=227, tenure=120,
                 invoice_amount=900000, available_amount=1000000),
            InvalidAvailableAmount, "InvalidAvailableAmount(1000000, 900000)",
        ),
    ],
)
def test_rejected_scenario(engine: OfferEngine, payments: FakePayments, tier_id, params, error, message):
    with pytest.raises(error) as excinfo:
        engine.create_offer(tier_id, _params(grace_period=5, **params))

    assert str(excinfo.value) == message
    assert engine.get_offer(1) is None
    assert payments.payouts == []
