"""Tests for swap execution and swap quotes."""

import pytest

from dex.errors import (
    EmptyPool,
    InsufficientOutput,
    InsufficientReserve,
    InvalidAmount,
    TransferFailed,
    UnknownAsset,
)
from dex.events import EventLog, Swap
from tests.helpers import ALICE, BOB, DAI, FUNDING, USDC, WETH, custody_of, make_pool


class TestSwap:
    """Tests for Pool.swap and its directional helpers."""

    def test_swap_a_for_b(self, seeded_pool, bank, events):
        """10 WETH into (100, 200) pays 18 USDC and moves reserves to (110, 182)."""
        amount_out = seeded_pool.swap(10, WETH, BOB)

        assert amount_out == 18
        assert seeded_pool.get_reserves() == (110, 182)
        assert bank.balance_of(BOB, WETH) == FUNDING - 10
        assert bank.balance_of(BOB, USDC) == FUNDING + 18
        assert bank.balance_of(custody_of(seeded_pool), USDC) == 182
        assert events.events == [
            Swap(
                pool_id=seeded_pool.pool_id,
                trader=BOB,
                asset_in=WETH,
                asset_out=USDC,
                amount_in=10,
                amount_out=18,
            )
        ]

    def test_swap_b_for_a(self, seeded_pool):
        """Swaps are symmetric in direction."""
        amount_out = seeded_pool.swap_b_for_a(20, BOB)

        assert amount_out == 9
        assert seeded_pool.get_reserves() == (91, 220)

    def test_swap_a_for_b_helper(self, seeded_pool):
        """swap_a_for_b sells asset A."""
        assert seeded_pool.swap_a_for_b(10, BOB) == 18

    def test_swap_does_not_touch_shares(self, seeded_pool):
        """Trading leaves the share ledger alone."""
        seeded_pool.swap(10, WETH, BOB)
        assert seeded_pool.total_shares == 141
        assert seeded_pool.balance_of(BOB) == 0

    def test_product_grows_over_many_swaps(self, seeded_pool):
        """Every swap keeps reserve_a * reserve_b at least as large."""
        reserve_a, reserve_b = seeded_pool.get_reserves()
        k = reserve_a * reserve_b
        for amount_in, asset_in in [(10, WETH), (25, USDC), (3, WETH), (40, USDC), (7, WETH)]:
            seeded_pool.swap(amount_in, asset_in, BOB)
            reserve_a, reserve_b = seeded_pool.get_reserves()
            assert reserve_a * reserve_b >= k
            k = reserve_a * reserve_b

    def test_price_moves_against_the_buyer(self, seeded_pool):
        """Selling A makes A cheaper in terms of B."""
        price_before = seeded_pool.get_price()
        seeded_pool.swap(10, WETH, BOB)
        assert seeded_pool.get_price() < price_before

    def test_identity_spelling_is_normalized(self, seeded_pool):
        """Checksummed and lowercase spellings name the same asset."""
        assert seeded_pool.swap(10, WETH.upper(), BOB) == 18

    def test_unknown_asset(self, seeded_pool):
        """Only the pool's assets can be sold."""
        with pytest.raises(UnknownAsset):
            seeded_pool.swap(10, DAI, BOB)

    @pytest.mark.parametrize("amount_in", [0, -10])
    def test_non_positive_amount(self, seeded_pool, amount_in):
        """Swap input must be positive."""
        with pytest.raises(InvalidAmount):
            seeded_pool.swap(amount_in, WETH, BOB)

    def test_empty_pool(self, pool):
        """Nothing can be bought from an empty pool."""
        with pytest.raises(EmptyPool):
            pool.swap(10, WETH, BOB)

    def test_dust_input_fails(self, seeded_pool, bank, events):
        """An input that buys nothing is rejected before any transfer."""
        with pytest.raises(InsufficientOutput):
            seeded_pool.swap(1, USDC, BOB)

        assert seeded_pool.get_reserves() == (100, 200)
        assert bank.balance_of(BOB, USDC) == FUNDING
        assert len(events) == 0

    def test_failed_payout_refunds_input(self, seeded_pool, bank, events):
        """If the output cannot be paid, the input is returned."""
        bank.freeze(BOB, USDC)

        with pytest.raises(TransferFailed):
            seeded_pool.swap(10, WETH, BOB)

        assert seeded_pool.get_reserves() == (100, 200)
        assert bank.balance_of(BOB, WETH) == FUNDING
        assert bank.balance_of(custody_of(seeded_pool), WETH) == 100
        assert len(events) == 0

    def test_trader_without_funds(self, seeded_pool):
        """A trader who cannot pay gets a transfer failure."""
        with pytest.raises(TransferFailed):
            seeded_pool.swap(10, WETH, "0x000000000000000000000000000000000000dead")
        assert seeded_pool.get_reserves() == (100, 200)

    def test_custody_account_cannot_trade(self, seeded_pool, bank):
        """Naming the pool's own custody as trader fails and leaves custody matching reserves."""
        custody = custody_of(seeded_pool)

        with pytest.raises(TransferFailed):
            seeded_pool.swap(10, WETH, custody)

        assert seeded_pool.get_reserves() == (100, 200)
        assert bank.balance_of(custody, WETH) == 100
        assert bank.balance_of(custody, USDC) == 200

    def test_notifier_failure_rolls_back(self, bank):
        """An operation whose event cannot be delivered does not commit."""

        class FlakyNotifier(EventLog):
            fail = False

            def notify(self, event):
                if self.fail:
                    raise RuntimeError("event sink unavailable")
                super().notify(event)

        notifier = FlakyNotifier()
        pool = make_pool(bank, notifier=notifier)
        pool.add_liquidity(100, 200, ALICE)
        notifier.fail = True

        with pytest.raises(RuntimeError):
            pool.swap(10, WETH, BOB)

        assert pool.get_reserves() == (100, 200)
        assert bank.balance_of(BOB, WETH) == FUNDING
        assert bank.balance_of(BOB, USDC) == FUNDING


class TestQuoteSwap:
    """Tests for read-only swap quotes."""

    def test_quote_matches_execution(self, seeded_pool):
        """A quote prices exactly what the swap would pay."""
        quote = seeded_pool.quote_swap(WETH, 10)

        assert quote.amount_out == 18
        assert quote.asset_out == USDC
        assert quote.reserves_after == (110, 182)
        assert seeded_pool.swap(10, WETH, BOB) == quote.amount_out

    def test_quote_has_no_effect(self, seeded_pool, events):
        """Quoting never changes reserves or emits events."""
        for _ in range(3):
            seeded_pool.quote_swap(USDC, 50)
        assert seeded_pool.get_reserves() == (100, 200)
        assert len(events) == 0

    def test_hypothetical_reserves(self, pool):
        """get_amount_out prices against caller-supplied reserves."""
        assert pool.get_amount_out(10, 100, 200) == 18
        assert pool.get_reserves() == (0, 0)


class TestQuoteExactOut:
    """Tests for Pool.quote_swap_exact_out."""

    def test_input_buys_requested_output(self, seeded_pool):
        """Selling the quoted input pays at least the requested output."""
        quote = seeded_pool.quote_swap_exact_out(USDC, 18)

        assert quote.asset_in == WETH
        assert quote.amount_in == 10
        assert seeded_pool.swap(quote.amount_in, WETH, BOB) >= 18

    def test_quoted_input_is_minimal(self, seeded_pool):
        """One unit less than the quote no longer buys the requested output."""
        quote = seeded_pool.quote_swap_exact_out(WETH, 40)

        assert quote.asset_in == USDC
        assert seeded_pool.get_amount_out(quote.amount_in, 200, 100) >= 40
        assert seeded_pool.get_amount_out(quote.amount_in - 1, 200, 100) < 40

    def test_whole_reserve_cannot_be_bought(self, seeded_pool):
        with pytest.raises(InsufficientReserve):
            seeded_pool.quote_swap_exact_out(USDC, 200)

    def test_empty_pool(self, pool):
        with pytest.raises(EmptyPool):
            pool.quote_swap_exact_out(USDC, 1)

    @pytest.mark.parametrize("amount_out", [0, -1])
    def test_non_positive_amount(self, seeded_pool, amount_out):
        with pytest.raises(InvalidAmount):
            seeded_pool.quote_swap_exact_out(USDC, amount_out)

    def test_unknown_asset(self, seeded_pool):
        with pytest.raises(UnknownAsset):
            seeded_pool.quote_swap_exact_out(DAI, 1)
