"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results without
touching stored records.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date

from fintrack.calculations import xirr, deposits, loans, prepayment, planning

router = APIRouter()


class XIRRInput(BaseModel):
    """Input for XIRR calculation."""

    cash_flows: List[float]
    dates: List[date]
    guess: float = xirr.DEFAULT_GUESS


class XIRRResponse(BaseModel):
    """Response with XIRR calculation."""

    xirr: float
    xirr_percent: float
    total_invested: float
    total_returned: float


@router.post("/xirr", response_model=XIRRResponse)
async def calculate_xirr_endpoint(inputs: XIRRInput):
    """Calculate the annualized money-weighted return of dated cash flows."""
    try:
        rate = xirr.calculate_xirr(inputs.cash_flows, inputs.dates, inputs.guess)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return XIRRResponse(
        xirr=rate,
        xirr_percent=rate * 100,
        total_invested=-sum(cf for cf in inputs.cash_flows if cf < 0),
        total_returned=sum(cf for cf in inputs.cash_flows if cf > 0),
    )


class FixedDepositInput(BaseModel):
    """Input for fixed deposit valuation."""

    principal: float
    annual_rate: float = Field(ge=0)
    start_date: date
    as_of: Optional[date] = None
    compounding_per_year: int = Field(default=deposits.QUARTERLY, gt=0)


class RecurringDepositInput(BaseModel):
    """Input for recurring deposit valuation."""

    monthly_investment: float
    annual_rate: float = Field(ge=0)
    start_date: date
    as_of: Optional[date] = None


class DepositResponse(BaseModel):
    """Deposit value and the interest it has earned."""

    invested: float
    current_value: float
    interest_earned: float


@router.post("/fd", response_model=DepositResponse)
async def calculate_fd(inputs: FixedDepositInput):
    """Value a fixed deposit."""
    try:
        value = deposits.calculate_fd_value(
            inputs.principal,
            inputs.annual_rate,
            inputs.start_date,
            as_of=inputs.as_of,
            compounding_per_year=inputs.compounding_per_year,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return DepositResponse(
        invested=inputs.principal,
        current_value=value,
        interest_earned=value - inputs.principal,
    )


@router.post("/rd", response_model=DepositResponse)
async def calculate_rd(inputs: RecurringDepositInput):
    """Value a recurring deposit."""
    as_of = inputs.as_of or date.today()
    try:
        value = deposits.calculate_rd_value(
            inputs.monthly_investment,
            inputs.annual_rate,
            inputs.start_date,
            as_of=as_of,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    invested = inputs.monthly_investment * deposits.months_elapsed(
        inputs.start_date, as_of
    )
    return DepositResponse(
        invested=invested,
        current_value=value,
        interest_earned=value - invested,
    )


class LoanInput(BaseModel):
    """Input for EMI and amortization calculation."""

    principal: float = Field(gt=0)
    annual_rate: float = Field(ge=0)
    tenure_years: float = Field(gt=0)
    start_date: Optional[date] = None


class EMIResponse(BaseModel):
    """EMI with the totals it implies."""

    emi: float
    total_interest: float
    total_payment: float


@router.post("/emi", response_model=EMIResponse)
async def calculate_emi(inputs: LoanInput):
    """Calculate the monthly instalment of a loan."""
    try:
        emi = loans.calculate_emi(
            inputs.principal, inputs.annual_rate, inputs.tenure_years
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    total_interest = loans.calculate_total_interest_payable(
        inputs.principal, emi, inputs.tenure_years
    )
    return EMIResponse(
        emi=emi,
        total_interest=total_interest,
        total_payment=inputs.principal + total_interest,
    )


@router.post("/amortization")
async def calculate_amortization(inputs: LoanInput):
    """Generate loan amortization schedule."""
    try:
        emi = loans.calculate_emi(
            inputs.principal, inputs.annual_rate, inputs.tenure_years
        )
        schedule = loans.generate_amortization_schedule(
            principal=inputs.principal,
            annual_rate=inputs.annual_rate,
            tenure_years=inputs.tenure_years,
            start_date=inputs.start_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "emi": emi,
        "schedule": schedule,
        **loans.summarize_schedule(schedule),
    }


class PrepaymentInput(BaseModel):
    """Input for the prepayment simulator."""

    outstanding_principal: float
    annual_rate: float
    remaining_tenure_years: float
    prepayment_amount: float


class PrepaymentResponse(BaseModel):
    """Result of a simulated prepayment."""

    old_emi: float
    new_emi: float
    interest_saved: float
    tenure_reduction_months: int
    tenure_reduced_label: str
    loan_closed: bool


@router.post("/prepayment", response_model=PrepaymentResponse)
async def calculate_prepayment(inputs: PrepaymentInput):
    """Simulate a part-prepayment of an outstanding loan."""
    try:
        result = prepayment.simulate_prepayment(
            inputs.outstanding_principal,
            inputs.annual_rate,
            inputs.remaining_tenure_years,
            inputs.prepayment_amount,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PrepaymentResponse(**result.to_dict())


class SIPInput(BaseModel):
    monthly_investment: float = Field(ge=0)
    annual_return: float = Field(ge=-100)
    years: float = Field(gt=0)


class LumpSumInput(BaseModel):
    amount: float = Field(ge=0)
    annual_return: float = Field(ge=-100)
    years: float = Field(gt=0)


class GrowthResponse(BaseModel):
    total_value: float
    invested_amount: float
    estimated_gains: float


@router.post("/sip", response_model=GrowthResponse)
async def calculate_sip(inputs: SIPInput):
    """Project a monthly SIP."""
    try:
        projection = planning.sip_future_value(
            inputs.monthly_investment, inputs.annual_return, inputs.years
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return GrowthResponse(**projection)


@router.post("/lumpsum", response_model=GrowthResponse)
async def calculate_lumpsum(inputs: LumpSumInput):
    """Project a one-time investment."""
    try:
        projection = planning.lumpsum_future_value(
            inputs.amount, inputs.annual_return, inputs.years
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return GrowthResponse(**projection)


class SWPInput(BaseModel):
    corpus: float
    monthly_withdrawal: float
    annual_return: float


@router.post("/swp")
async def calculate_swp(inputs: SWPInput):
    """How long a corpus lasts under monthly withdrawals."""
    try:
        return planning.swp_duration(
            inputs.corpus, inputs.monthly_withdrawal, inputs.annual_return
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


class FireInput(BaseModel):
    monthly_expenses: float
    current_savings: float = 0.0
    withdrawal_rate: float = 4.0


@router.post("/fire")
async def calculate_fire(inputs: FireInput):
    """Corpus needed for financial independence."""
    try:
        return planning.fire_corpus(
            inputs.monthly_expenses, inputs.current_savings, inputs.withdrawal_rate
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


class InflationInput(BaseModel):
    today_cost: float
    inflation_rate: float = Field(ge=-100)
    years: float = Field(ge=0)


@router.post("/inflation")
async def calculate_inflation(inputs: InflationInput):
    """Future cost of something priced today."""
    try:
        future_cost = planning.inflation_adjusted_cost(
            inputs.today_cost, inputs.inflation_rate, inputs.years
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"today_cost": inputs.today_cost, "future_cost": future_cost}


class HumanLifeValueInput(BaseModel):
    current_age: int
    retirement_age: int
    annual_income: float
    outstanding_loans: float = 0.0
    existing_savings: float = 0.0
    existing_cover: float = 0.0


@router.post("/human-life-value")
async def calculate_human_life_value(inputs: HumanLifeValueInput):
    """Life insurance cover gap."""
    return planning.human_life_value(**inputs.model_dump())
