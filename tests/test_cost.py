import pytest

from ask_llm.cost import (
    ClaudeModel, CostTableEntry, estimate_tokens, estimated_cost_cents, exact_cost_cents,
)
from ask_llm.errors import UnknownModelIdentifier
from ask_llm.types import Model


class TestClaudeModel:

    def test_deser_model(self):
        assert ClaudeModel.from_wire_id("claude-haiku-4-5-20251001") is ClaudeModel.HAIKU_4_5

    @pytest.mark.parametrize("model_id, expected", [
        ("claude-sonnet-4-5-20250929", ClaudeModel.SONNET_4_5),
        ("CLAUDE-OPUS-4-1", ClaudeModel.OPUS_4_1),
        ("Haiku", ClaudeModel.HAIKU_4_5),
        # first family keyword in table order wins
        ("haiku-sonnet-opus", ClaudeModel.HAIKU_4_5),
        ("sonnet-opus", ClaudeModel.SONNET_4_5),
    ])
    def test_from_wire_id(self, model_id, expected):
        assert ClaudeModel.from_wire_id(model_id) is expected

    def test_from_wire_id_unknown(self):
        with pytest.raises(UnknownModelIdentifier, match="gpt-4o") as exc_info:
            ClaudeModel.from_wire_id("gpt-4o")
        assert exc_info.value.model_id == "gpt-4o"
        assert isinstance(exc_info.value, ValueError)

    @pytest.mark.parametrize("tier, expected", [
        (Model.FAST, ClaudeModel.HAIKU_4_5),
        (Model.MEDIUM, ClaudeModel.SONNET_4_5),
        (Model.SLOW, ClaudeModel.OPUS_4_1),
    ])
    def test_from_tier(self, tier, expected):
        assert ClaudeModel.from_tier(tier) is expected

    def test_table(self):
        assert ClaudeModel.HAIKU_4_5.wire_id == "claude-haiku-4-5"
        assert ClaudeModel.HAIKU_4_5.cost == CostTableEntry(1.0, 5.0)
        assert ClaudeModel.SONNET_4_5.cost == CostTableEntry(3.0, 15.0)
        assert ClaudeModel.OPUS_4_1.cost == CostTableEntry(15.0, 75.0)
        assert ClaudeModel.HAIKU_4_5.max_tokens == 64_000
        assert ClaudeModel.SONNET_4_5.max_tokens == 64_000
        assert ClaudeModel.OPUS_4_1.max_tokens == 32_000


class TestCost:

    def test_exact_cost(self):
        # (1000 * 3.0 + 2000 * 15.0) / 10_000
        assert exact_cost_cents(ClaudeModel.SONNET_4_5, 1000, 2000) == pytest.approx(3.3)

    def test_exact_cost_zero_usage(self):
        assert exact_cost_cents(ClaudeModel.OPUS_4_1, 0, 0) == 0

    def test_estimate_tokens(self):
        assert estimate_tokens(" ".join(["word"] * 100)) == pytest.approx(70)
        assert estimate_tokens("  spaced\n\tout  words ") == pytest.approx(2.1)
        assert estimate_tokens("") == 0

    def test_estimated_cost_counts_output_only(self):
        text = " ".join(["word"] * 100)
        assert estimated_cost_cents(ClaudeModel.HAIKU_4_5, text) == pytest.approx(5.0 * 70 / 1_000_000)
