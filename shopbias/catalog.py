"""
Bias Catalog — Frozen Rule Set

The catalog defines:
  1. The shopping-context options a shopper can tick (16 signal flags)
  2. The cognitive biases those signals can point to (10 rules)
  3. The predicate that decides when each bias applies

This module is FROZEN. Rules are module-level tuples of frozen
dataclasses. They cannot be modified at runtime, and their order
is the order results are displayed in.

Several rules deliberately share a signal. A crossed-out original
price is evidence of both anchoring and framing; a countdown timer
feeds both scarcity and loss aversion. One signal can corroborate
several biases at once.

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from shopbias.signals import SIGNAL_FLAGS, SignalRecord

# --- Catalog Version (stamped on every analysis result) ---
CATALOG_VERSION = "1.0.0"


# ============================================================
# PREDICATES
# ============================================================

@dataclass(frozen=True)
class AnyFlag:
    """
    Predicate that holds when at least one of the named flags is set.

    Pure and total: it reads flags through SignalRecord.flag, so a flag
    missing from the record counts as False.
    """
    flags: tuple[str, ...]

    def __call__(self, record: SignalRecord) -> bool:
        return any(record.flag(name) for name in self.flags)


def any_flag(*names: str) -> AnyFlag:
    unknown = [n for n in names if n not in SIGNAL_FLAGS]
    if unknown:
        raise ValueError(f"Unknown signal flag(s): {', '.join(unknown)}")
    return AnyFlag(flags=tuple(names))


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class ShoppingOption:
    """A checkbox on the analysis form."""
    id: str        # Signal flag name, e.g. "limitedTime"
    label: str     # Checkbox text
    icon: str      # Emoji shown next to the label


@dataclass(frozen=True)
class BiasRule:
    """
    A named cognitive bias and the condition under which it applies.

    The display strings are opaque to the matcher; only `predicate`
    is evaluated.
    """
    id: str
    name: str
    description: str
    explanation: str
    advice: str
    predicate: Callable[[SignalRecord], bool]

    @property
    def signals(self) -> tuple[str, ...]:
        """Flag names the predicate reads, when it exposes them."""
        return tuple(getattr(self.predicate, "flags", ()))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "explanation": self.explanation,
            "advice": self.advice,
        }


# ============================================================
# SHOPPING CONTEXT OPTIONS
# ============================================================

SHOPPING_OPTIONS: tuple[ShoppingOption, ...] = (
    ShoppingOption("hasOriginalPrice", "Shows original/higher price (crossed out)", "💰"),
    ShoppingOption("showsComparePrice", "Compares to competitor prices", "📊"),
    ShoppingOption("limitedTime", 'Says "Limited Time" or "Ends Soon"', "⏰"),
    ShoppingOption("lowStock", 'Shows low stock ("Only X left")', "📦"),
    ShoppingOption("bestseller", 'Marked as "Bestseller" or "Popular"', "⭐"),
    ShoppingOption("hasReviews", "Highlights customer reviews/ratings", "⭐"),
    ShoppingOption("trending", 'Says "Trending" or "Most bought"', "📈"),
    ShoppingOption("bundleDeal", "Bundle, combo, or set deal", "📦"),
    ShoppingOption("multipleTiers", "Multiple options (Basic/Pro/Premium)", "🎯"),
    ShoppingOption("partOfCollection", "Part of a collection you're building", "🧩"),
    ShoppingOption("upgradeExisting", "Upgrade to something you already own", "⬆️"),
    ShoppingOption("emphasizesSavings", 'Emphasizes how much you "save"', "💵"),
    ShoppingOption("freeTrial", "Offers free trial period", "🆓"),
    ShoppingOption("tryBefore", "Try before you buy / demo available", "🔍"),
    ShoppingOption("exclusiveOffer", 'Says "Exclusive" or "Members only"', "🎫"),
    ShoppingOption("freeGift", "Includes free gift or bonus item", "🎁"),
)


# ============================================================
# BIAS RULES (display order)
# ============================================================

BIAS_CATALOG: tuple[BiasRule, ...] = (
    BiasRule(
        id="anchoring",
        name="Anchoring Bias",
        description="You're being influenced by the first price you saw",
        explanation=(
            "The original higher price is serving as an anchor, making the "
            "current price seem like a better deal than it actually is."
        ),
        advice=(
            "Ask yourself: Would I buy this at the current price if I had "
            "never seen the original price?"
        ),
        predicate=any_flag("hasOriginalPrice", "showsComparePrice"),
    ),
    BiasRule(
        id="scarcity",
        name="Scarcity Heuristic",
        description="Limited availability is creating urgency",
        explanation=(
            "The perception of scarcity is triggering fear of missing out "
            "(FOMO), potentially rushing your decision."
        ),
        advice=(
            "Consider: Will this product truly be unavailable later, or is "
            "this a marketing tactic? Do you really need it now?"
        ),
        predicate=any_flag("limitedTime", "lowStock"),
    ),
    BiasRule(
        id="social_proof",
        name="Social Proof Bias",
        description="Others' choices are influencing your decision",
        explanation=(
            "You're being influenced by what others have chosen rather than "
            "evaluating if it meets your specific needs."
        ),
        advice="Ask: Does this product actually solve MY problem, regardless of its popularity?",
        predicate=any_flag("bestseller", "hasReviews", "trending"),
    ),
    BiasRule(
        id="bundle",
        name="Bundling Effect",
        description="A bundle deal is making you buy more than needed",
        explanation=(
            "Bundled items make you feel you're getting more value, but you "
            "may not need all the items included."
        ),
        advice=(
            "Calculate: What's the individual cost of items you actually need? "
            "Are you paying for things you won't use?"
        ),
        predicate=any_flag("bundleDeal"),
    ),
    BiasRule(
        id="decoy",
        name="Decoy Effect",
        description="A third option is making another seem more attractive",
        explanation=(
            "A less attractive option (decoy) has been added to make another "
            "option seem more reasonable or valuable."
        ),
        advice="Focus on the option that best meets your needs, ignoring the comparison products entirely.",
        predicate=any_flag("multipleTiers"),
    ),
    BiasRule(
        id="sunk_cost",
        name="Sunk Cost Fallacy",
        description="Past spending is influencing future decisions",
        explanation=(
            "You're considering this purchase because of money already spent, "
            "rather than evaluating it independently."
        ),
        advice="Past spending is gone. Decide based only on whether this purchase provides value going forward.",
        predicate=any_flag("partOfCollection", "upgradeExisting"),
    ),
    BiasRule(
        id="framing",
        name="Framing Effect",
        description="How the offer is presented is affecting your perception",
        explanation=(
            "The presentation emphasizes savings rather than actual cost, "
            "making it seem more attractive."
        ),
        advice=(
            'Reframe: Would you buy this at the "discounted" price if it was '
            "the regular price? Is it actually cheap?"
        ),
        predicate=any_flag("emphasizesSavings", "hasOriginalPrice"),
    ),
    BiasRule(
        id="endowment",
        name="Endowment Effect",
        description="You value it more because you're imagining owning it",
        explanation=(
            "Once you've tried or imagined owning something, you tend to "
            "overvalue it and find it harder to give up."
        ),
        advice="Remember: You don't own it yet. Evaluate objectively whether it's worth the price.",
        predicate=any_flag("freeTrial", "tryBefore"),
    ),
    BiasRule(
        id="loss_aversion",
        name="Loss Aversion",
        description="Fear of missing out is driving your decision",
        explanation=(
            "You're more motivated by avoiding loss (missing the deal) than "
            "by the actual gain."
        ),
        advice=(
            "Think: What am I actually losing if I don't buy this? Usually, "
            "it's just a marketing deadline."
        ),
        predicate=any_flag("limitedTime", "exclusiveOffer"),
    ),
    BiasRule(
        id="reciprocity",
        name="Reciprocity Bias",
        description="Free gifts or samples make you feel obligated",
        explanation=(
            'Receiving something "free" creates a psychological obligation '
            "to reciprocate by purchasing."
        ),
        advice='Remember: The "free" item is a marketing cost, not a gift. You don\'t owe them anything.',
        predicate=any_flag("freeGift", "freeTrial"),
    ),
)


def get_rule(rule_id: str) -> Optional[BiasRule]:
    """Look up a rule by id."""
    for rule in BIAS_CATALOG:
        if rule.id == rule_id:
            return rule
    return None


def get_rules() -> list[dict]:
    """
    Return every rule with the signals it reads.

    Used by the GET /biases endpoint to expose the detection surface.
    """
    return [{**rule.to_dict(), "signals": list(rule.signals)} for rule in BIAS_CATALOG]
