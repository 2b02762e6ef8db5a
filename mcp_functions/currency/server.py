"""
Currency converter MCP server factory.

Every call builds a new MCPServer with the two conversion tools registered;
servers are never shared between requests.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext

from pydantic import BaseModel, Field

from ..config import ExchangeRates
from ..mcp.server import MCPServer

SERVER_NAME = "currency-converter-mcp"
SERVER_VERSION = "1.0.0"

_CENTS = Decimal("0.01")
# floats at or above this magnitude keep their exponent form
_PLAIN_INTEGER_LIMIT = 1e16


class PlnAmount(BaseModel):
    amount: float = Field(description="The amount in PLN to convert", allow_inf_nan=False)


class EurAmount(BaseModel):
    amount: float = Field(description="The amount in EUR to convert", allow_inf_nan=False)


def format_number(value: float) -> str:
    """Render a number the way it was sent: whole numbers without a fraction."""
    if float(value).is_integer() and abs(value) < _PLAIN_INTEGER_LIMIT:
        return str(int(value))
    return repr(float(value))


def convert(amount: float, rate: float) -> str:
    """Multiply and round half-up to two decimal places."""
    with localcontext() as ctx:
        # two 17-digit float reprs multiply exactly
        ctx.prec = 40
        product = Decimal(repr(float(amount))) * Decimal(repr(float(rate)))
        # integer digits plus cents must fit the context precision
        ctx.prec = max(ctx.prec, product.adjusted() + 3)
        return str(product.quantize(_CENTS, rounding=ROUND_HALF_UP))


def conversion_text(amount: float, rate: float, source: str, target: str) -> str:
    return (
        f"{format_number(amount)} {source} = {convert(amount, rate)} {target} "
        f"(rate: 1 {source} = {format_number(rate)} {target})"
    )


def create_currency_server(
    rates: ExchangeRates, name: str = SERVER_NAME, version: str = SERVER_VERSION
) -> MCPServer:
    """
    Build a currency converter server.

    Args:
        rates: Conversion rates used by both tools
        name: Server name reported in serverInfo
        version: Server version reported in serverInfo

    Returns:
        A new server with convert_pln_to_eur and convert_eur_to_pln registered
    """
    server = MCPServer(name=name, version=version)

    async def convert_pln_to_eur(ctx, amount: float) -> str:
        return conversion_text(amount, rates.pln_to_eur, "PLN", "EUR")

    async def convert_eur_to_pln(ctx, amount: float) -> str:
        return conversion_text(amount, rates.eur_to_pln, "EUR", "PLN")

    server.register_tool(
        "convert_pln_to_eur",
        "Converts an amount from Polish Zloty (PLN) to Euros (EUR) using a fixed exchange rate.",
        convert_pln_to_eur,
        arguments_model=PlnAmount,
    )
    server.register_tool(
        "convert_eur_to_pln",
        "Converts an amount from Euros (EUR) to Polish Zloty (PLN) using a fixed exchange rate.",
        convert_eur_to_pln,
        arguments_model=EurAmount,
    )

    return server
