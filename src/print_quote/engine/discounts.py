"""
Discount Matcher - Selects the quantity discount tier for an order.

Used by the pricing engine to apply volume discounts on top of the
per-part subtotal.
"""
from dataclasses import dataclass
from typing import Optional, Sequence

from .models import DiscountTier


@dataclass(frozen=True)
class MatchedTier:
    """A tier that matched with context."""
    tier: DiscountTier
    match_reason: str


class DiscountMatcher:
    """
    Matches an order quantity against ordered discount tiers.

    The first tier whose inclusive range contains the quantity wins.
    Quantities above every tier fall into the tier with the highest
    upper bound; quantities below every tier get no discount.
    """

    def __init__(self, tiers: Sequence[DiscountTier]):
        self.tiers = tuple(tiers)

    def find_tier(self, quantity: int) -> Optional[MatchedTier]:
        """Return the matching tier, or None if no discount applies."""
        for tier in self.tiers:
            if tier.contains(quantity):
                return MatchedTier(
                    tier=tier,
                    match_reason=f"qty {quantity} in [{tier.min_qty}, {tier.max_qty}]",
                )

        if not self.tiers:
            return None

        top = max(self.tiers, key=lambda t: t.max_qty)
        if quantity > top.max_qty:
            return MatchedTier(
                tier=top,
                match_reason=f"qty {quantity} above highest tier bound {top.max_qty}",
            )
        return None


def check_tiers(tiers: Sequence[DiscountTier]) -> list[str]:
    """
    Check the shape of a tier list.

    Returns a list of problems (empty when tiers are well-formed):
    inverted ranges, discounts outside [0, 1), overlaps, gaps, and
    discounts that drop as quantity rises.
    """
    problems = []

    for i, tier in enumerate(tiers, start=1):
        if tier.min_qty < 1:
            problems.append(f"Tier {i}: min must be at least 1, got {tier.min_qty}")
        if tier.max_qty < tier.min_qty:
            problems.append(f"Tier {i}: max {tier.max_qty} is below min {tier.min_qty}")
        if not 0 <= tier.discount < 1:
            problems.append(f"Tier {i}: discount must be in [0, 1), got {tier.discount}")

    ordered = sorted(tiers, key=lambda t: t.min_qty)
    for prev, curr in zip(ordered, ordered[1:]):
        if curr.min_qty <= prev.max_qty:
            problems.append(
                f"Tiers [{prev.min_qty}, {prev.max_qty}] and [{curr.min_qty}, {curr.max_qty}] overlap"
            )
        elif curr.min_qty > prev.max_qty + 1:
            problems.append(
                f"Gap between tiers: quantities {prev.max_qty + 1}-{curr.min_qty - 1} have no tier"
            )
        if curr.discount < prev.discount:
            problems.append(
                f"Discount decreases from {prev.discount} to {curr.discount} at quantity {curr.min_qty}"
            )

    return problems
