"""Typer CLI interface for the CCPC compensation planner."""

import json
import logging
from decimal import Decimal
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ccpc.exceptions import ProjectionError
from ccpc.models.enums import SalaryStrategy
from ccpc.models.inputs import UserInputs, make_strategy
from ccpc.models.results import ProjectionSummary

app = typer.Typer(
    name="ccpc",
    help="CCPC compensation planner: salary vs. dividend projections for incorporated owners.",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """CCPC compensation planner: salary vs. dividend projections for incorporated owners."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _money(value: Decimal | float) -> str:
    return f"${value:,.2f}"


def _percent(value: Decimal | float) -> str:
    return f"{value * 100:.2f}%"


def _load_inputs(
    inputs_file: Path | None,
    province: str | None = None,
    required_income: float | None = None,
    horizon: int | None = None,
    starting_year: int | None = None,
    strategy: SalaryStrategy | None = None,
    fixed_salary: float | None = None,
    corporate_balance: float | None = None,
    return_rate: float | None = None,
) -> UserInputs:
    """Build UserInputs from an optional JSON file plus command-line overrides."""
    data: dict = {}
    if inputs_file is not None:
        if not inputs_file.exists():
            typer.echo(f"Error: Inputs file not found: {inputs_file}", err=True)
            raise typer.Exit(1)
        try:
            data = json.loads(inputs_file.read_text())
        except json.JSONDecodeError as e:
            typer.echo(f"Error: Invalid JSON in {inputs_file}: {e}", err=True)
            raise typer.Exit(1)

    overrides = {
        "province": province,
        "required_income": required_income,
        "planning_horizon": horizon,
        "starting_year": starting_year,
        "corporate_investment_balance": corporate_balance,
        "investment_return_rate": return_rate,
    }
    for key, value in overrides.items():
        if value is not None:
            data[key] = str(value) if isinstance(value, float) else value

    if strategy is not None or fixed_salary is not None:
        current = data.get("strategy", {}).get("kind", SalaryStrategy.DYNAMIC)
        if strategy is None and fixed_salary is not None:
            current = SalaryStrategy.FIXED
        kind = strategy or current
        amount = Decimal(str(fixed_salary)) if fixed_salary is not None else None
        if amount is None and isinstance(data.get("strategy"), dict):
            amount = data["strategy"].get("amount")
        data["strategy"] = make_strategy(kind, amount).model_dump()

    try:
        return UserInputs.model_validate(data)
    except ValidationError as e:
        typer.echo(f"Error: Invalid inputs: {e}", err=True)
        raise typer.Exit(1)


def _display_projection(summary: ProjectionSummary, console: Console) -> None:
    """Pretty-print a ProjectionSummary using Rich."""
    years = Table(title="Yearly Projection", show_header=True)
    for column in (
        "Year",
        "Salary",
        "Dividends",
        "Personal Tax",
        "Corp Tax",
        "CPP/EI",
        "After-Tax",
        "Corp Balance",
        "Eff. Rate",
    ):
        years.add_column(column, justify="right", style="cyan" if column == "Year" else "green")
    for r in summary.yearly_results:
        years.add_row(
            str(r.year),
            _money(r.salary),
            _money(r.dividends.gross_dividends),
            _money(r.personal_tax),
            _money(r.corporate_tax),
            _money(r.cpp + r.cpp2 + r.ei + r.qpip),
            _money(r.after_tax_income),
            _money(r.notional_accounts.corporate_investments.balance_end),
            _percent(r.effective_integrated_rate),
        )
    console.print(years)

    accounts = Table(title="Notional Accounts (year end)", show_header=True)
    for column in ("Year", "CDA", "eRDTOH", "nRDTOH", "GRIP", "RDTOH Refund"):
        accounts.add_column(column, justify="right")
    for r in summary.yearly_results:
        na = r.notional_accounts
        accounts.add_row(
            str(r.year),
            _money(na.cda.balance_end),
            _money(na.erdtoh.balance_end),
            _money(na.nrdtoh.balance_end),
            _money(na.grip.balance_end),
            _money(r.rdtoh_refund_received),
        )
    console.print(accounts)

    text = (
        f"[bold]Total Compensation:[/bold] {_money(summary.total_compensation)}\n"
        f"[bold]Total Tax:[/bold] {_money(summary.total_tax)} "
        f"(personal {_money(summary.total_personal_tax)}, "
        f"corporate {_money(summary.total_corporate_tax)})\n"
        f"[bold]Effective Tax Rate:[/bold] {_percent(summary.effective_tax_rate)}\n"
        f"[bold]Final Corporate Balance:[/bold] {_money(summary.final_corporate_balance)}\n"
        f"[bold]RRSP Room Generated:[/bold] {_money(summary.total_rrsp_room_generated)}"
    )
    if summary.ipp is not None:
        text += (
            f"\n[bold]IPP Contributions:[/bold] {_money(summary.ipp.total_contributions)} "
            f"(admin {_money(summary.ipp.total_admin_costs)}, "
            f"pension adjustments {_money(summary.ipp.total_pension_adjustments)})\n"
            f"[bold]Projected IPP Pension:[/bold] "
            f"{_money(summary.ipp.projected_annual_pension_at_end)}/yr"
        )
    console.print(Panel(text, title="[bold]Summary[/bold]", border_style="cyan"))
    for warning in summary.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


# Shared option definitions
_INPUTS_OPTION = typer.Option(None, "--inputs", "-i", help="JSON file with scenario inputs")
_PROVINCE_OPTION = typer.Option(None, "--province", "-p", help="Province code (ON, BC, QC, ...)")
_INCOME_OPTION = typer.Option(None, "--income", help="Required after-tax income in year 1")
_HORIZON_OPTION = typer.Option(None, "--years", "-n", help="Planning horizon in years")
_START_OPTION = typer.Option(None, "--start-year", help="First projected calendar year")
_STRATEGY_OPTION = typer.Option(None, "--strategy", "-s", help="dynamic, fixed or dividends-only")
_SALARY_OPTION = typer.Option(None, "--salary", help="Fixed salary amount (fixed strategy)")
_BALANCE_OPTION = typer.Option(None, "--balance", help="Starting corporate investment balance")
_RETURN_OPTION = typer.Option(None, "--return-rate", help="Annual investment return (0.05 = 5%)")


@app.command()
def project(
    inputs_file: Path | None = _INPUTS_OPTION,
    province: str | None = _PROVINCE_OPTION,
    required_income: float | None = _INCOME_OPTION,
    horizon: int | None = _HORIZON_OPTION,
    starting_year: int | None = _START_OPTION,
    strategy: SalaryStrategy | None = _STRATEGY_OPTION,
    fixed_salary: float | None = _SALARY_OPTION,
    corporate_balance: float | None = _BALANCE_OPTION,
    return_rate: float | None = _RETURN_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the full projection as JSON"),
) -> None:
    """Project salary, dividends, taxes and notional accounts year by year."""
    from ccpc.engines.projection import calculate_projection

    inputs = _load_inputs(
        inputs_file, province, required_income, horizon, starting_year,
        strategy, fixed_salary, corporate_balance, return_rate,
    )
    try:
        summary = calculate_projection(inputs)
    except ProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(summary.model_dump_json(indent=2))
        return
    _display_projection(summary, Console())


@app.command()
def compare(
    inputs_file: Path | None = _INPUTS_OPTION,
    province: str | None = _PROVINCE_OPTION,
    required_income: float | None = _INCOME_OPTION,
    horizon: int | None = _HORIZON_OPTION,
    starting_year: int | None = _START_OPTION,
    corporate_balance: float | None = _BALANCE_OPTION,
) -> None:
    """Compare salary-at-YMPE, dividends-only and dynamic strategies."""
    from ccpc.engines.comparison import compare_preset_strategies

    inputs = _load_inputs(
        inputs_file, province, required_income, horizon, starting_year,
        corporate_balance=corporate_balance,
    )
    try:
        comparison = compare_preset_strategies(inputs)
    except ProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    tbl = Table(title="Strategy Comparison", show_header=True)
    tbl.add_column("Strategy", style="cyan")
    for column in ("Total Tax", "Final Balance", "Eff. Rate", "After-Tax Wealth", "vs Best"):
        tbl.add_column(column, justify="right", style="green")
    for outcome in comparison.outcomes:
        marker = " *" if outcome.id == comparison.best_overall_id else ""
        tbl.add_row(
            outcome.name + marker,
            _money(outcome.summary.total_tax),
            _money(outcome.summary.final_corporate_balance),
            _percent(outcome.summary.effective_tax_rate),
            _money(outcome.after_tax_wealth.at_current_rate),
            _money(outcome.tax_difference_vs_best),
        )
    console = Console()
    console.print(tbl)
    console.print(
        f"Lowest tax: [bold]{comparison.lowest_tax_id}[/bold]  "
        f"Highest balance: [bold]{comparison.highest_balance_id}[/bold]  "
        f"Best overall: [bold]{comparison.best_overall_id}[/bold]"
    )


@app.command(name="monte-carlo")
def monte_carlo(
    inputs_file: Path | None = _INPUTS_OPTION,
    province: str | None = _PROVINCE_OPTION,
    required_income: float | None = _INCOME_OPTION,
    horizon: int | None = _HORIZON_OPTION,
    starting_year: int | None = _START_OPTION,
    strategy: SalaryStrategy | None = _STRATEGY_OPTION,
    fixed_salary: float | None = _SALARY_OPTION,
    simulations: int = typer.Option(1000, "--simulations", min=1, help="Number of trials"),
    volatility: float = typer.Option(0.12, "--volatility", help="Annual return volatility"),
    seed: int | None = typer.Option(None, "--seed", help="Random seed for reproducible runs"),
    versus: SalaryStrategy | None = typer.Option(
        None, "--versus", help="Compare trial by trial against another strategy"
    ),
) -> None:
    """Run the projection under randomized investment returns."""
    from ccpc.engines.monte_carlo import MonteCarloConfig, compare_monte_carlo, run_monte_carlo

    inputs = _load_inputs(
        inputs_file, province, required_income, horizon, starting_year, strategy, fixed_salary
    )
    config = MonteCarloConfig(num_simulations=simulations, volatility=volatility, seed=seed)
    comparison = None
    try:
        if versus is None:
            result = run_monte_carlo(inputs, config)
        else:
            amount = getattr(inputs.strategy, "amount", None)
            other = inputs.model_copy(update={"strategy": make_strategy(versus, amount)})
            comparison = compare_monte_carlo(inputs, other, config)
            result = comparison.first
    except ProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    tbl = Table(title=f"Monte-Carlo ({result.num_simulations} trials)", show_header=True)
    tbl.add_column("Metric", style="cyan")
    for column in ("P10", "P25", "Median", "P75", "P90", "Mean"):
        tbl.add_column(column, justify="right", style="green")
    for label, stats, fmt in (
        ("Total Tax", result.total_tax, _money),
        ("Final Corp Balance", result.final_corporate_balance, _money),
        ("After-Tax Income", result.total_after_tax_income, _money),
        ("Effective Tax Rate", result.effective_integrated_rate, _percent),
    ):
        tbl.add_row(
            label,
            fmt(stats.p10), fmt(stats.p25), fmt(stats.p50),
            fmt(stats.p75), fmt(stats.p90), fmt(stats.mean),
        )
    console = Console()
    console.print(tbl)
    console.print(
        f"Probability balance is preserved: {_percent(result.probability_of_meeting_goal)}"
    )
    if comparison is not None:
        console.print(
            f"Against {versus}: lower tax in {_percent(comparison.first_wins_on_tax)} of trials, "
            f"higher balance in {_percent(comparison.first_wins_on_balance)}, "
            f"both in {_percent(comparison.first_wins_overall)}"
        )


@app.command(name="tax-year")
def tax_year(
    year: int = typer.Argument(..., help="Calendar year"),
    province: str = typer.Option("ON", "--province", "-p", help="Province code"),
    inflation: float = typer.Option(0.02, "--inflation", help="Indexation rate for future years"),
) -> None:
    """Print the resolved statutory constants for a year as JSON."""
    from ccpc.engines.tax_years import get_tax_year_data

    try:
        data = get_tax_year_data(year, province, Decimal(str(inflation)))
    except ProjectionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(data.model_dump_json(indent=2))


@app.command()
def validate(
    inputs_file: Path = typer.Argument(..., help="JSON file with scenario inputs"),
) -> None:
    """Check a scenario file against the planner's accepted ranges."""
    from ccpc.validation import Severity, validate_inputs

    inputs = _load_inputs(inputs_file)
    issues = validate_inputs(inputs)
    if not issues:
        typer.echo("Inputs are valid.")
        return
    for issue in issues:
        typer.echo(f"{issue.severity}: {issue.field}: {issue.message}")
    if any(issue.severity == Severity.ERROR for issue in issues):
        raise typer.Exit(1)
