"""Per-model prices and output ceilings, plus the two cost formulas.

Prices are dollars per million tokens. ref: https://docs.claude.com/en/docs/about-claude/models/all-models
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .errors import UnknownModelIdentifier
from .types import Model

# Rough tokens-per-word ratio used when the provider reports no usage
TOKENS_PER_WORD = 0.7


@dataclass(frozen=True)
class CostTableEntry:
    million_input_tokens: float
    million_output_tokens: float


class ClaudeModel(Enum):
    """
    Concrete Claude model behind each tier. The value is the wire id.
    """
    HAIKU_4_5 = "claude-haiku-4-5"
    SONNET_4_5 = "claude-sonnet-4-5"
    OPUS_4_1 = "claude-opus-4-1"

    @property
    def wire_id(self) -> str:
        return self.value

    @property
    def cost(self) -> CostTableEntry:
        return _PRICES[self][0]

    @property
    def max_tokens(self) -> int:
        return _PRICES[self][1]

    @classmethod
    def from_tier(cls, model: Model) -> "ClaudeModel":
        return _TIERS[model]

    @classmethod
    def from_wire_id(cls, model_id: str) -> "ClaudeModel":
        """
        Classify a provider model id (e.g. "claude-haiku-4-5-20251001") by family.

        Matching is a case-insensitive substring search over the family
        keywords, first match wins.

        Raises:
            UnknownModelIdentifier: If no family keyword occurs in the id.
        """
        lowered = model_id.lower()
        for keyword, claude_model in _FAMILIES:
            if keyword in lowered:
                return claude_model
        raise UnknownModelIdentifier(model_id)


# NB: could end up outdated, models are requested by their undated alias
_PRICES = {
    ClaudeModel.HAIKU_4_5: (CostTableEntry(1.0, 5.0), 64_000),
    ClaudeModel.SONNET_4_5: (CostTableEntry(3.0, 15.0), 64_000),
    ClaudeModel.OPUS_4_1: (CostTableEntry(15.0, 75.0), 32_000),
}

_TIERS = {
    Model.FAST: ClaudeModel.HAIKU_4_5,
    Model.MEDIUM: ClaudeModel.SONNET_4_5,
    Model.SLOW: ClaudeModel.OPUS_4_1,
}

_FAMILIES: Tuple[Tuple[str, ClaudeModel], ...] = (
    ("haiku", ClaudeModel.HAIKU_4_5),
    ("sonnet", ClaudeModel.SONNET_4_5),
    ("opus", ClaudeModel.OPUS_4_1),
)


def exact_cost_cents(model: ClaudeModel, input_tokens: int, output_tokens: int) -> float:
    """
    Cost in cents from provider-reported usage.

    Price is per million tokens and the result is in cents, hence the 10_000 divisor.
    """
    cost = model.cost
    return (input_tokens * cost.million_input_tokens + output_tokens * cost.million_output_tokens) / 10_000


def estimate_tokens(text: str) -> float:
    return len(text.split()) * TOKENS_PER_WORD


def estimated_cost_cents(model: ClaudeModel, text: str) -> float:
    """
    Estimated cost of a streamed response.

    Only output tokens are counted, and they are estimated from the word count.
    The divisor is 1_000_000 where exact_cost_cents uses 10_000, so
    the value comes out in dollars, one hundredth of the matching cents figure.
    """
    return model.cost.million_output_tokens * estimate_tokens(text) / 1_000_000
