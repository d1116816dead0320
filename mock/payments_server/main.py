from collections import defaultdict
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

app = FastAPI(title="Mock Payments Server", version="1.0.0")

# destination -> asset -> balance
balances = defaultdict(lambda: defaultdict(int))
fees = defaultdict(int)
payouts = []


class Payout(BaseModel):
    asset_id: str
    source: str
    destination: str
    amount: int = Field(..., ge=0)
    fee: int = Field(0, ge=0)
    reference: Optional[str] = None


@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/payments/payouts", status_code=201)
def pay_out(payout: Payout):
    if payout.source == payout.destination:
        raise HTTPException(status_code=400, detail="source and destination must differ")
    balances[payout.destination][payout.asset_id] += payout.amount
    fees[payout.asset_id] += payout.fee
    payouts.append(payout)
    return {"payout_id": len(payouts), "reference": payout.reference}

@app.get("/payments/balances/{destination}")
def get_balances(destination: str):
    return {"destination": destination, "balances": dict(balances[destination])}
