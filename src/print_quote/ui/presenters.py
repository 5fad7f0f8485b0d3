"""
Table builders for the Streamlit quote page.
"""
import pandas as pd

from ..engine import PriceBreakdown, PricingTable, format_currency


def breakdown_table(breakdown: PriceBreakdown) -> pd.DataFrame:
    """Cost breakdown rows as displayed under the quote total."""
    currency = breakdown.currency
    parts = "part" if breakdown.quantity == 1 else "parts"
    rows = [
        ("Material Cost", format_currency(breakdown.material_cost, currency)),
        (f"Machine Time ({breakdown.print_time})",
         format_currency(breakdown.machine_cost, currency)),
        ("Setup Fee", format_currency(breakdown.setup_fee, currency)),
        ("Per Part", format_currency(breakdown.per_part_subtotal, currency)),
        (f"Subtotal ({breakdown.quantity} {parts})",
         format_currency(breakdown.total_before_discount, currency)),
    ]
    if breakdown.discount_percent > 0:
        rows.append((f"Discount ({breakdown.discount_percent:g}%)",
                     f"-{format_currency(breakdown.discount_amount, currency)}"))
    rows.append(("Total", format_currency(breakdown.total, currency)))
    return pd.DataFrame(rows, columns=["Item", "Amount"])


def discount_tier_table(table: PricingTable) -> pd.DataFrame:
    """Quantity discount tiers with a readable range column."""
    df = pd.DataFrame(
        [(t.min_qty, t.max_qty, t.discount) for t in table.quantity_discounts],
        columns=["Min Qty", "Max Qty", "Discount"],
    )
    df["Quantity"] = df["Min Qty"].astype(str) + "–" + df["Max Qty"].astype(str)
    df["Discount"] = (df["Discount"] * 100).round(2).map(lambda v: f"{v:g}%")
    return df[["Quantity", "Discount"]]


def material_table(table: PricingTable) -> pd.DataFrame:
    """Materials with density and price per kg after multiplier."""
    df = pd.DataFrame(
        [
            (m.value, table.material_densities[m], table.material_multipliers[m])
            for m in table.materials
        ],
        columns=["Material", "Density (g/cm³)", "Multiplier"],
    )
    df["Price per kg"] = (df["Multiplier"] * table.material_cost_per_kg).map(
        lambda v: format_currency(v, table.currency)
    )
    return df
