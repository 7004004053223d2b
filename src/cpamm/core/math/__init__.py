"""
Core math modules для cpamm

Целочисленные примитивы и формулы пула с гарантией отсутствия переполнения.
"""

# Uint256
from cpamm.core.math.uint256 import (
    MAX_UINT256,
    MAX_UINT512,
    UINT256_BITS,
    checked_add,
    checked_mul,
    checked_sub,
    is_uint256,
    mul_div,
    require_positive,
    require_uint256,
)

# Constant Product
from cpamm.core.math.constant_product import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    check_swap_invariant,
    execution_price,
    get_amount_out,
    quote,
    quote_no_fee,
    slippage,
    spot_price,
    validate_fee,
)

# Liquidity
from cpamm.core.math.liquidity import (
    first_deposit_shares,
    proportional_shares,
    redemption_amounts,
    share_fraction,
    shares_to_mint,
)

__all__ = [
    # Uint256: Constants
    "MAX_UINT256",
    "MAX_UINT512",
    "UINT256_BITS",
    # Uint256: Checked arithmetic
    "checked_add",
    "checked_mul",
    "checked_sub",
    "mul_div",
    # Uint256: Validation
    "is_uint256",
    "require_positive",
    "require_uint256",
    # Constant Product: Constants
    "FEE_DENOMINATOR",
    "FEE_NUMERATOR",
    # Constant Product: Functions
    "check_swap_invariant",
    "execution_price",
    "get_amount_out",
    "quote",
    "quote_no_fee",
    "slippage",
    "spot_price",
    "validate_fee",
    # Liquidity
    "first_deposit_shares",
    "proportional_shares",
    "redemption_amounts",
    "share_fraction",
    "shares_to_mint",
]
