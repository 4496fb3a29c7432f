from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DcfAssumptionsModel(BaseModel):
    """Optional DCF assumptions; anything omitted takes the engine default."""

    years: Optional[float] = Field(None, description="Forecast horizon in years (1-15)")
    revenue0: Optional[float] = Field(None, description="Base-year revenue (> 0)")
    ebitda_margin0: Optional[float] = Field(None, description="EBITDA margin in the base year")
    ebitda_margin_terminal: Optional[float] = Field(None, description="EBITDA margin in the final forecast year")
    revenue_growth: Optional[float] = Field(None, description="Constant annual revenue growth")

    da_pct_revenue: Optional[float] = Field(None, description="D&A as a fraction of revenue")
    capex_pct_revenue: Optional[float] = Field(None, description="Capex as a fraction of revenue")
    nwc_pct_revenue: Optional[float] = Field(None, description="Net working capital level as a fraction of revenue")
    tax_rate: Optional[float] = Field(None, description="Tax rate (0-0.6), applied to positive EBIT only")

    risk_free_rate: Optional[float] = Field(None, description="Risk-free rate for CAPM")
    beta: Optional[float] = Field(None, description="Equity beta")
    market_risk_premium: Optional[float] = Field(None, description="Market risk premium")
    pre_tax_cost_of_debt: Optional[float] = Field(None, description="Pre-tax cost of debt")
    target_debt_weight: Optional[float] = Field(None, description="Target debt weight in WACC (0-0.95)")

    terminal_method: Optional[str] = Field(None, description="'gordon' or 'exitMultiple'")
    terminal_growth: Optional[float] = Field(None, description="Perpetual growth rate (Gordon method)")
    exit_multiple: Optional[float] = Field(None, description="Terminal EV/EBITDA multiple (exit multiple method)")

    net_debt: Optional[float] = Field(None, description="Net debt deducted from enterprise value")
    shares: Optional[float] = Field(None, description="Diluted share count (> 0)")
    mid_year: Optional[bool] = Field(None, description="Use mid-year discounting")

    model_config = ConfigDict(extra="allow")


class DcfRequest(BaseModel):
    assumptions: Optional[DcfAssumptionsModel] = Field(None, description="DCF assumption overrides")
    forecast_mode: Literal["trend", "smoothing"] = Field("trend", description="Revenue forecast assistant mode")
    smoothing_alpha: float = Field(0.35, description="Smoothing factor, clamped to [0.05, 0.95]")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "assumptions": {
                    "years": 5,
                    "revenue0": 1000,
                    "ebitda_margin0": 0.22,
                    "ebitda_margin_terminal": 0.24,
                    "revenue_growth": 0.10,
                    "terminal_method": "gordon",
                    "terminal_growth": 0.03,
                    "net_debt": 300,
                    "shares": 100,
                    "mid_year": True,
                },
                "forecast_mode": "smoothing",
            }
        }
    )


class LboAssumptionsModel(BaseModel):
    """Optional LBO assumptions; anything omitted takes the engine default."""

    hold_years: Optional[float] = Field(None, description="Hold period in years (clamped to 1-10)")
    revenue0: Optional[float] = Field(None, description="Entry (LTM) revenue")
    ebitda_margin0: Optional[float] = Field(None, description="Entry EBITDA margin")
    entry_multiple: Optional[float] = Field(None, description="Entry EV/EBITDA multiple")
    revenue_cagr: Optional[float] = Field(None, description="Revenue CAGR over the hold period")
    exit_margin: Optional[float] = Field(None, description="EBITDA margin at exit")
    da_pct_revenue: Optional[float] = Field(None, description="D&A as a fraction of revenue")
    capex_pct_revenue: Optional[float] = Field(None, description="Capex as a fraction of revenue")
    nwc_pct_revenue: Optional[float] = Field(None, description="Net working capital level as a fraction of revenue")
    tax_rate: Optional[float] = Field(None, description="Tax rate, applied to positive EBIT only")
    debt_pct_ev: Optional[float] = Field(None, description="Entry debt as a fraction of EV (clamped to 0-0.95)")
    debt_rate: Optional[float] = Field(None, description="Interest rate on beginning debt")
    mandatory_amort_pct: Optional[float] = Field(None, description="Mandatory amortization of beginning debt (clamped to 0-0.5)")
    exit_multiple: Optional[float] = Field(None, description="Exit EV/EBITDA multiple")
    fee_pct_ev: Optional[float] = Field(None, description="Transaction fees as a fraction of EV")

    model_config = ConfigDict(extra="allow")


class LboRequest(BaseModel):
    assumptions: Optional[LboAssumptionsModel] = Field(None, description="LBO assumption overrides")


class RiskAssumptionsModel(BaseModel):
    """Optional risk assumptions; anything omitted takes the engine default."""

    capital: Optional[float] = Field(None, description="Capital at risk")
    price: Optional[float] = Field(None, description="Reference price per share")
    volatility: Optional[float] = Field(None, ge=0, description="Annualized volatility")
    expected_return: Optional[float] = Field(None, description="Annualized expected return")
    horizon_years: Optional[float] = Field(None, gt=0, description="Horizon in years")
    confidence: Optional[float] = Field(None, ge=0.5, le=0.999, description="VaR confidence level")
    kelly_scale: Optional[float] = Field(None, ge=0, le=1, description="Fraction of full Kelly to apply")

    model_config = ConfigDict(extra="allow")


class RiskRequest(BaseModel):
    assumptions: Optional[RiskAssumptionsModel] = Field(None, description="Risk assumption overrides")
    seed: Optional[int] = Field(None, description="Seed for a reproducible Monte Carlo run")


class CashflowItem(BaseModel):
    t: float = Field(..., description="Time offset in periods")
    cf: float = Field(..., description="Cash flow amount (negative = outflow)")


class IrrRequest(BaseModel):
    cashflows: List[CashflowItem] = Field(..., description="Schedule ordered by non-decreasing time")
    guess: float = Field(0.20, description="Initial rate guess")

    model_config = ConfigDict(
        json_schema_extra={"example": {"cashflows": [{"t": 0, "cf": -100}, {"t": 1, "cf": 110}], "guess": 0.2}}
    )


class ScenarioCreate(BaseModel):
    name: Optional[str] = Field(None, description="Display name")
    kind: Optional[str] = Field(None, description="DCF, LBO or RISK")
    currency: Optional[str] = Field(None, description="Currency code (default USD)")
    inputs: Optional[Dict[str, Any]] = Field(None, description="Assumption set, stored as-is")


class ScenarioUpdate(BaseModel):
    name: Optional[str] = None
    kind: Optional[str] = None
    currency: Optional[str] = None
    inputs: Optional[Dict[str, Any]] = None
