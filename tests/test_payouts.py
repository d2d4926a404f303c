"""Tests for payout calculation."""
import pytest
from dataclasses import replace

from tourney_bank.bank.models import Player, TournamentConfig
from tourney_bank.bank.payouts import (
    PayoutResolution,
    buy_in_cost,
    calculate_payout_positions,
    count_knockouts,
    payout_breakdown,
    resolve_payouts,
)


class TestCalculatePayoutPositions:
    """Test splitting the prize pool by weight."""

    def test_weighted_split(self):
        positions = calculate_payout_positions([3, 2, 1], 600.0)

        assert [p.position for p in positions] == [1, 2, 3]
        assert [p.payout for p in positions] == pytest.approx([300.0, 200.0, 100.0])

    def test_formatting_fields(self):
        positions = calculate_payout_positions([3, 2, 1], 600.0)

        assert positions[0].formatted_payout == "$300.00"
        assert positions[0].formatted_percentage == "50%"
        assert [p.position_suffix for p in positions] == ["st", "nd", "rd"]

    def test_uneven_percentages(self):
        positions = calculate_payout_positions([1, 1, 1], 100.0)
        assert positions[0].formatted_percentage == "33.33%"

    def test_equal_weights_split_evenly(self):
        positions = calculate_payout_positions([50, 50], 400.0)
        assert [p.payout for p in positions] == pytest.approx([200.0, 200.0])

    def test_zero_total_weight_pays_nothing(self):
        assert calculate_payout_positions([], 500.0) == []
        assert calculate_payout_positions([0, 0], 500.0) == []

    def test_empty_pool(self):
        positions = calculate_payout_positions([2, 1], 0.0)

        assert [p.payout for p in positions] == [0.0, 0.0]
        assert positions[0].formatted_percentage == "0%"

    @pytest.mark.parametrize("weights,pool", [
        ([35, 20, 15, 10, 8, 6, 3, 2, 1], 1234.56),
        ([7], 99.99),
        ([5, 5, 3], 0.03),
        ([1, 2, 3, 4], 1e6),
    ])
    def test_payouts_sum_to_prize_pool(self, weights, pool):
        positions = calculate_payout_positions(weights, pool)
        assert sum(p.payout for p in positions) == pytest.approx(pool, rel=1e-6)


class TestCountKnockouts:
    """Test knockout credit counting."""

    def test_counts_per_eliminator(self):
        players = [
            Player.default(1),
            Player.default(2).with_eliminated(True, 1),
            Player.default(3).with_eliminated(True, 1),
            Player.default(4).with_eliminated(True, 2),
            Player.default(5).with_eliminated(True),
        ]
        assert count_knockouts(players) == {1: 2, 2: 1}

    def test_no_knockouts(self):
        assert count_knockouts([Player.default(1)]) == {}


class TestResolvePayouts:
    """Test mapping positions to players."""

    def test_fully_resolved(self):
        positions = calculate_payout_positions([3, 2, 1], 600.0)

        resolution = resolve_payouts(positions, (4, 3, 2), 4)

        assert resolution.leaderboard_payouts == pytest.approx({1: 300.0, 2: 200.0, 3: 100.0})
        assert resolution.eligible_ids == frozenset({1, 2, 3})
        assert resolution.winner_id == 1

    def test_unresolved_positions(self):
        positions = calculate_payout_positions([3, 2, 1], 600.0)

        resolution = resolve_payouts(positions, (4,), 4)

        assert resolution.leaderboard_payouts == {}
        assert resolution.eligible_ids == frozenset()
        assert resolution.winner_id is None

    def test_more_positions_than_players(self):
        """Test positions beyond the field size are never assigned."""
        positions = calculate_payout_positions([3, 2, 1], 300.0)

        resolution = resolve_payouts(positions, (2,), 2)

        assert set(resolution.leaderboard_payouts) == {1, 2}

    def test_no_positions(self):
        resolution = resolve_payouts([], (3, 2), 3)
        assert resolution.winner_id is None


class TestBreakdown:
    """Test per-player costs and payouts."""

    @pytest.fixture
    def config(self):
        return TournamentConfig(
            buy_in=100.0,
            food_per_player=20.0,
            bounty_per_player=10.0,
            rebuy_per_player=50.0,
            addon_per_player=25.0,
            payout_weights=(3, 2, 1),
        )

    def test_buy_in_cost_includes_purchases(self, config):
        p1 = replace(Player.default(1), rebuy_count=2, addon_count=1)
        p2 = replace(Player.default(2), rebuy_count=1)
        p3 = replace(Player.default(3), addon_count=2)

        assert buy_in_cost(p1, config) == pytest.approx(255.0)
        assert buy_in_cost(p2, config) == pytest.approx(180.0)
        assert buy_in_cost(p3, config) == pytest.approx(180.0)

    def test_buy_in_cost_ignores_bought_in_flag(self, config):
        player = replace(Player.default(1), rebuy_count=1)
        assert buy_in_cost(player, config) == buy_in_cost(replace(player, bought_in=True), config)

    def test_winner_breakdown(self, config):
        resolution = PayoutResolution(leaderboard_payouts={1: 300.0}, eligible_ids=frozenset({1}), winner_id=1)

        breakdown = payout_breakdown(Player.default(1), config, resolution, {1: 2})

        assert breakdown.leaderboard_payout == pytest.approx(300.0)
        assert breakdown.knockout_bonus == pytest.approx(20.0)
        assert breakdown.kings_bounty == pytest.approx(10.0)
        assert breakdown.knockout_count == 2
        assert breakdown.gross_payout == pytest.approx(330.0)
        assert breakdown.buy_in_cost == pytest.approx(130.0)
        assert breakdown.net_pay == pytest.approx(200.0)

    def test_non_placing_player(self, config):
        breakdown = payout_breakdown(Player.default(4), config, PayoutResolution(), {})

        assert breakdown.gross_payout == 0.0
        assert breakdown.net_pay == pytest.approx(-130.0)
