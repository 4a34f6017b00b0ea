"""Notional account ledger and dividend depletion policy.

The ledger holds the four notional balances (CDA, eRDTOH, nRDTOH, GRIP) and
the corporate investment (cash) balance for one projection run. It is mutated
only by the orchestrator, one year at a time, and records every addition and
usage so that ``balance_end == balance_start + added - used`` per account.

Dividends are funded in a fixed order:
  1. CDA               -> capital dividends (tax-free)
  2. eRDTOH            -> eligible dividends, refund at the dividend refund rate
  3. nRDTOH            -> non-eligible dividends, refund at the dividend refund rate
  4. GRIP              -> eligible dividends, no refund
  5. retained earnings -> non-eligible dividends, no refund (only when enabled)

Every tier is capped by the remaining need, its funding account and the
corporate cash available to pay it, so no balance can go negative.
"""

from decimal import Decimal

from ccpc.models.enums import NotionalAccount
from ccpc.models.results import (
    AccountMovement,
    DividendFunding,
    InvestmentReturns,
    NotionalAccountSnapshot,
)

ZERO = Decimal("0")
ONE = Decimal("1")
# Remaining need below this is treated as met.
NEED_TOLERANCE = Decimal("0.01")
MIN_RETENTION = Decimal("0.0001")


class NotionalLedger:
    """Rolling notional and cash balances for one projection run."""

    def __init__(
        self,
        cda: Decimal = ZERO,
        erdtoh: Decimal = ZERO,
        nrdtoh: Decimal = ZERO,
        grip: Decimal = ZERO,
        corporate_investments: Decimal = ZERO,
    ) -> None:
        self._balances: dict[NotionalAccount, Decimal] = {
            NotionalAccount.CDA: max(cda, ZERO),
            NotionalAccount.ERDTOH: max(erdtoh, ZERO),
            NotionalAccount.NRDTOH: max(nrdtoh, ZERO),
            NotionalAccount.GRIP: max(grip, ZERO),
            NotionalAccount.CORPORATE_INVESTMENTS: max(corporate_investments, ZERO),
        }
        self._start: dict[NotionalAccount, Decimal] = dict(self._balances)
        self._added: dict[NotionalAccount, Decimal] = {a: ZERO for a in NotionalAccount}
        self._used: dict[NotionalAccount, Decimal] = {a: ZERO for a in NotionalAccount}

    # --- Balances ---

    def balance(self, account: NotionalAccount) -> Decimal:
        return self._balances[account]

    @property
    def cash(self) -> Decimal:
        return self._balances[NotionalAccount.CORPORATE_INVESTMENTS]

    def begin_year(self) -> None:
        """Start a new movement record from the current balances."""
        self._start = dict(self._balances)
        self._added = {a: ZERO for a in NotionalAccount}
        self._used = {a: ZERO for a in NotionalAccount}

    def add(self, account: NotionalAccount, amount: Decimal) -> Decimal:
        if amount <= ZERO:
            return ZERO
        self._balances[account] += amount
        self._added[account] += amount
        return amount

    def use(self, account: NotionalAccount, amount: Decimal) -> Decimal:
        """Draw up to ``amount``; returns what was actually drawn."""
        drawn = min(max(amount, ZERO), self._balances[account])
        if drawn <= ZERO:
            return ZERO
        self._balances[account] -= drawn
        self._used[account] += drawn
        return drawn

    def snapshot(self) -> NotionalAccountSnapshot:
        def movement(account: NotionalAccount) -> AccountMovement:
            return AccountMovement(
                balance_start=self._start[account],
                added=self._added[account],
                used=self._used[account],
                balance_end=self._balances[account],
            )

        return NotionalAccountSnapshot(
            cda=movement(NotionalAccount.CDA),
            erdtoh=movement(NotionalAccount.ERDTOH),
            nrdtoh=movement(NotionalAccount.NRDTOH),
            grip=movement(NotionalAccount.GRIP),
            corporate_investments=movement(NotionalAccount.CORPORATE_INVESTMENTS),
        )

    # --- Investment activity ---

    def apply_investment_returns(
        self, returns: InvestmentReturns, investment_tax: Decimal
    ) -> Decimal:
        """Credit the year's return and notional additions, then pay investment tax.

        Returns the tax actually paid (capped by available cash).
        """
        if returns.total_return >= ZERO:
            self.add(NotionalAccount.CORPORATE_INVESTMENTS, returns.total_return)
        else:
            self.use(NotionalAccount.CORPORATE_INVESTMENTS, -returns.total_return)
        self.add(NotionalAccount.CDA, returns.cda_increase)
        self.add(NotionalAccount.ERDTOH, returns.erdtoh_increase)
        self.add(NotionalAccount.NRDTOH, returns.nrdtoh_increase)
        self.add(NotionalAccount.GRIP, returns.grip_increase)
        return self.use(NotionalAccount.CORPORATE_INVESTMENTS, investment_tax)

    # --- Dividend depletion ---

    def pay_dividends(
        self,
        required_after_tax: Decimal,
        eligible_rate: Decimal,
        non_eligible_rate: Decimal,
        refund_rate: Decimal,
        use_retained_earnings: bool = False,
    ) -> DividendFunding:
        """Fund ``required_after_tax`` with dividends in depletion order.

        ``eligible_rate`` and ``non_eligible_rate`` are the shareholder's
        effective personal tax rates on cash dividends, used to size the gross
        dividend that nets the remaining need.
        """
        funding = DividendFunding()
        remaining = max(required_after_tax, ZERO)
        eligible_keep = max(ONE - eligible_rate, MIN_RETENTION)
        non_eligible_keep = max(ONE - non_eligible_rate, MIN_RETENTION)
        cash_per_refunded_dollar = max(ONE - refund_rate, MIN_RETENTION)

        # --- 1. CDA: tax-free capital dividends ---
        if remaining > NEED_TOLERANCE:
            amount = min(remaining, self.balance(NotionalAccount.CDA), self.cash)
            if amount > ZERO:
                self.use(NotionalAccount.CDA, amount)
                self.use(NotionalAccount.CORPORATE_INVESTMENTS, amount)
                funding.capital_dividends += amount
                funding.after_tax_income += amount
                remaining -= amount

        # --- 2. eRDTOH: eligible dividends with refund ---
        if remaining > NEED_TOLERANCE and refund_rate > ZERO:
            dividend = min(
                remaining / eligible_keep,
                self.balance(NotionalAccount.ERDTOH) / refund_rate,
                self.cash / cash_per_refunded_dollar,
            )
            if dividend > ZERO:
                refund = self.use(NotionalAccount.ERDTOH, dividend * refund_rate)
                self.use(NotionalAccount.CORPORATE_INVESTMENTS, dividend - refund)
                funding.eligible_dividends += dividend
                funding.rdtoh_refund += refund
                funding.after_tax_income += dividend * eligible_keep
                remaining -= dividend * eligible_keep

        # --- 3. nRDTOH: non-eligible dividends with refund ---
        if remaining > NEED_TOLERANCE and refund_rate > ZERO:
            dividend = min(
                remaining / non_eligible_keep,
                self.balance(NotionalAccount.NRDTOH) / refund_rate,
                self.cash / cash_per_refunded_dollar,
            )
            if dividend > ZERO:
                refund = self.use(NotionalAccount.NRDTOH, dividend * refund_rate)
                self.use(NotionalAccount.CORPORATE_INVESTMENTS, dividend - refund)
                funding.non_eligible_dividends += dividend
                funding.rdtoh_refund += refund
                funding.after_tax_income += dividend * non_eligible_keep
                remaining -= dividend * non_eligible_keep

        # --- 4. GRIP: eligible dividends without refund ---
        if remaining > NEED_TOLERANCE:
            dividend = min(
                remaining / eligible_keep,
                self.balance(NotionalAccount.GRIP),
                self.cash,
            )
            if dividend > ZERO:
                self.use(NotionalAccount.GRIP, dividend)
                self.use(NotionalAccount.CORPORATE_INVESTMENTS, dividend)
                funding.eligible_dividends += dividend
                funding.regular_dividends += dividend
                funding.after_tax_income += dividend * eligible_keep
                remaining -= dividend * eligible_keep

        # --- 5. Retained earnings: non-eligible dividends from cash ---
        if use_retained_earnings and remaining > NEED_TOLERANCE:
            dividend = min(remaining / non_eligible_keep, self.cash)
            if dividend > ZERO:
                self.use(NotionalAccount.CORPORATE_INVESTMENTS, dividend)
                funding.non_eligible_dividends += dividend
                funding.regular_dividends += dividend
                funding.after_tax_income += dividend * non_eligible_keep

        return funding
