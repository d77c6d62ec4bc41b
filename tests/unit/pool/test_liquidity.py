"""Tests for adding and removing liquidity."""

import pytest

from dex.errors import (
    ArithmeticOverflow,
    EmptyPool,
    InsufficientShares,
    InvalidAmount,
    InvalidAmounts,
    TransferFailed,
    Unauthorized,
    ZeroLiquidityMinted,
    ZeroWithdrawal,
)
from dex.events import LiquidityAdded, LiquidityRemoved
from dex.pool import compute_shares_to_mint, compute_withdrawal
from tests.helpers import ALICE, BOB, CAROL, FUNDING, USDC, WETH, custody_of


class TestShareMath:
    """Tests for the share mint and withdrawal formulas."""

    def test_first_deposit_is_geometric_mean(self):
        """First deposit mints floor(sqrt(a * b))."""
        assert compute_shares_to_mint(100, 200, 0, 0, 0) == 141
        assert compute_shares_to_mint(1, 1, 0, 0, 0) == 1
        assert compute_shares_to_mint(4, 9, 0, 0, 0) == 6

    def test_later_deposit_takes_the_smaller_side(self):
        """Off-ratio deposits are credited for the lesser side."""
        assert compute_shares_to_mint(10, 20, 100, 200, 141) == 14
        assert compute_shares_to_mint(10, 1000, 100, 200, 141) == 14
        assert compute_shares_to_mint(1000, 20, 100, 200, 141) == 14

    def test_dust_deposit_mints_zero(self):
        """A deposit below one share's worth mints nothing."""
        assert compute_shares_to_mint(1, 1, 10**6, 10**6, 10) == 0

    def test_non_positive_amounts_raise(self):
        """Both deposit amounts must be positive."""
        with pytest.raises(InvalidAmounts):
            compute_shares_to_mint(0, 100, 0, 0, 0)
        with pytest.raises(InvalidAmounts):
            compute_shares_to_mint(100, -1, 100, 200, 141)

    def test_withdrawal_is_proportional(self):
        """Withdrawals pay floor(shares * reserve / total) of each asset."""
        assert compute_withdrawal(141, 100, 200, 141) == (100, 200)
        assert compute_withdrawal(70, 110, 182, 141) == (54, 90)


class TestAddLiquidity:
    """Tests for Pool.add_liquidity."""

    def test_first_deposit(self, pool, bank, events):
        """First provider mints sqrt(a * b) and sets the price."""
        shares = pool.add_liquidity(100, 200, ALICE)

        assert shares == 141
        assert pool.get_reserves() == (100, 200)
        assert pool.total_shares == 141
        assert pool.balance_of(ALICE) == 141
        assert pool.get_price() == 2 * 10**18
        assert bank.balance_of(custody_of(pool), WETH) == 100
        assert bank.balance_of(custody_of(pool), USDC) == 200
        assert bank.balance_of(ALICE, WETH) == FUNDING - 100

        assert events.events == [
            LiquidityAdded(
                pool_id=pool.pool_id,
                provider=ALICE,
                amount_a=100,
                amount_b=200,
                shares_minted=141,
            )
        ]

    def test_proportional_deposit(self, seeded_pool, events):
        """A second provider at the pool ratio gets proportional shares."""
        shares = seeded_pool.add_liquidity(50, 100, BOB)

        assert shares == 70
        assert seeded_pool.total_shares == 211
        assert seeded_pool.get_reserves() == (150, 300)
        assert events.of_type(LiquidityAdded)[0].provider == BOB

    def test_off_ratio_surplus_stays_in_pool(self, seeded_pool):
        """Excess of one asset is kept by the pool without extra shares."""
        shares = seeded_pool.add_liquidity(10, 1000, BOB)

        assert shares == 14
        assert seeded_pool.get_reserves() == (110, 1200)

    def test_zero_amount_rejected_without_effect(self, pool, bank, events):
        """A zero amount fails before anything moves."""
        with pytest.raises(InvalidAmounts):
            pool.add_liquidity(0, 100, ALICE)

        assert pool.get_reserves() == (0, 0)
        assert bank.balance_of(ALICE, USDC) == FUNDING
        assert len(events) == 0

    def test_dust_deposit_raises_zero_liquidity(self, pool, bank):
        """A deposit worth less than one share fails with no transfer."""
        pool.add_liquidity(1, 10**6, ALICE)  # 1000 shares against 1 unit of WETH

        with pytest.raises(ZeroLiquidityMinted):
            pool.add_liquidity(1, 1, BOB)

        assert pool.get_reserves() == (1, 10**6)
        assert bank.balance_of(BOB, WETH) == FUNDING

    def test_failed_second_pull_refunds_first(self, pool, bank, events):
        """If asset B cannot be pulled, asset A is returned."""
        bank.freeze(ALICE, USDC)

        with pytest.raises(TransferFailed):
            pool.add_liquidity(100, 200, ALICE)

        assert bank.balance_of(ALICE, WETH) == FUNDING
        assert bank.balance_of(custody_of(pool), WETH) == 0
        assert pool.get_reserves() == (0, 0)
        assert pool.total_shares == 0
        assert len(events) == 0

    def test_provider_without_funds(self, seeded_pool, bank):
        """An unfunded provider's deposit fails as a transfer failure."""
        with pytest.raises(TransferFailed):
            seeded_pool.add_liquidity(10, 20, "0x000000000000000000000000000000000000dead")

        assert seeded_pool.get_reserves() == (100, 200)

    def test_share_supply_overflow_rolls_back(self, pool, bank):
        """Overflowing intermediates fail the deposit atomically."""
        huge = 2**200
        bank.mint(CAROL, WETH, huge)
        bank.mint(CAROL, USDC, huge)

        with pytest.raises(ArithmeticOverflow):
            pool.add_liquidity(huge, huge, CAROL)

        assert pool.get_reserves() == (0, 0)
        assert bank.balance_of(CAROL, WETH) == FUNDING + huge


class TestRemoveLiquidity:
    """Tests for Pool.remove_liquidity."""

    def test_full_withdrawal(self, seeded_pool, bank, events):
        """Burning all shares returns the whole pool and empties it."""
        amount_a, amount_b = seeded_pool.remove_liquidity(141, ALICE)

        assert (amount_a, amount_b) == (100, 200)
        assert seeded_pool.get_reserves() == (0, 0)
        assert seeded_pool.total_shares == 0
        assert seeded_pool.snapshot().is_empty
        assert bank.balance_of(ALICE, WETH) == FUNDING
        assert bank.balance_of(ALICE, USDC) == FUNDING
        assert events.events == [
            LiquidityRemoved(
                pool_id=seeded_pool.pool_id,
                provider=ALICE,
                amount_a=100,
                amount_b=200,
                shares_burned=141,
            )
        ]

    def test_partial_withdrawal_rounds_down(self, seeded_pool):
        """Payouts round down in the pool's favor."""
        amount_a, amount_b = seeded_pool.remove_liquidity(70, ALICE)

        # 70 * 100 / 141 = 49.6, 70 * 200 / 141 = 99.2
        assert (amount_a, amount_b) == (49, 99)
        assert seeded_pool.get_reserves() == (51, 101)
        assert seeded_pool.balance_of(ALICE) == 71

    def test_deposit_then_withdraw_never_profits(self, seeded_pool, bank):
        """A provider cannot withdraw more than they deposited, and the supply returns."""
        shares = seeded_pool.add_liquidity(33, 67, BOB)
        amount_a, amount_b = seeded_pool.remove_liquidity(shares, BOB)

        assert seeded_pool.total_shares == 141
        assert seeded_pool.balance_of(BOB) == 0
        assert amount_a <= 33
        assert amount_b <= 67
        assert bank.balance_of(BOB, WETH) <= FUNDING
        assert bank.balance_of(BOB, USDC) <= FUNDING

    def test_holder_without_shares_is_unauthorized(self, seeded_pool):
        """Only share holders can withdraw."""
        with pytest.raises(Unauthorized):
            seeded_pool.remove_liquidity(1, BOB)

    def test_burning_more_than_balance(self, seeded_pool):
        """A holder cannot burn more than they own."""
        with pytest.raises(InsufficientShares):
            seeded_pool.remove_liquidity(142, ALICE)
        assert seeded_pool.balance_of(ALICE) == 141

    @pytest.mark.parametrize("share_amount", [0, -1])
    def test_non_positive_share_amount(self, seeded_pool, share_amount):
        """Share amount must be positive."""
        with pytest.raises(InvalidAmount):
            seeded_pool.remove_liquidity(share_amount, ALICE)

    def test_dust_withdrawal_rejected(self, pool):
        """Burning shares that pay zero of one asset fails."""
        pool.add_liquidity(1, 10**6, ALICE)  # 1000 shares, 1 unit of WETH

        with pytest.raises(ZeroWithdrawal):
            pool.remove_liquidity(1, ALICE)
        assert pool.balance_of(ALICE) == 1000

    def test_failed_payout_reverses_everything(self, seeded_pool, bank, events):
        """If asset B cannot be paid, the asset A payout is reclaimed."""
        bank.freeze(ALICE, USDC)
        weth_before = bank.balance_of(ALICE, WETH)

        with pytest.raises(TransferFailed):
            seeded_pool.remove_liquidity(141, ALICE)

        assert seeded_pool.get_reserves() == (100, 200)
        assert seeded_pool.balance_of(ALICE) == 141
        assert seeded_pool.total_shares == 141
        assert bank.balance_of(ALICE, WETH) == weth_before
        assert bank.balance_of(custody_of(seeded_pool), WETH) == 100
        assert len(events) == 0


class TestQuoteDeposit:
    """Tests for Pool.quote_deposit."""

    def test_matches_pool_ratio(self, seeded_pool):
        """The quote is the other side of an on-ratio deposit, in either direction."""
        assert seeded_pool.quote_deposit(WETH, 10) == 20
        assert seeded_pool.quote_deposit(USDC, 30) == 15

    def test_on_ratio_deposit_mints_from_both_sides(self, seeded_pool):
        """Depositing the quoted pair mints the full pro-rata share."""
        amount_b = seeded_pool.quote_deposit(WETH, 50)
        shares = seeded_pool.add_liquidity(50, amount_b, BOB)

        assert shares == compute_shares_to_mint(50, amount_b, 100, 200, 141)
        assert shares == 70

    def test_empty_pool(self, pool):
        """An empty pool has no ratio to quote against."""
        with pytest.raises(EmptyPool):
            pool.quote_deposit(WETH, 10)

    def test_non_positive_amount(self, seeded_pool):
        with pytest.raises(InvalidAmounts):
            seeded_pool.quote_deposit(WETH, 0)
