"""
Ekubo Contract Addresses and Constants

Contract addresses per Starknet network and the protocol's fixed-point limits.
"""

from decimal import Decimal

from ...errors import ConfigurationError

# =========================================================================
# Contracts
# =========================================================================

EKUBO_ADDRESSES = {
    "core": {
        "mainnet": "0x00000005dd3D2F4429AF886cD1a3b08289DBcEa99A294197E9eB43b0e0325b4b",
        "sepolia": "0x0444a09d96389aa7148f1aada508e30b71299ffe650d9c97fdaae38cb9a23384",
    },
    "positions": {
        "mainnet": "0x02e0af29598b407c8716b17f6d2795eca1b471413fa03fb145a5e33722184067",
        "sepolia": "0x06a2aee84bb0ed5dded4384ddd0e40e9c1372b818668375ab8e3ec08807417e5",
    },
    "router": {
        "mainnet": "0x0199741822c2dc722f6f605204f35e56dbc23bceed54818168c4c49e4fb8737e",
        "sepolia": "0x0045f933adf0607292468ad1c1dedaa74d5ad166392590e72676a34d01d7b763",
    },
    "positions_nft": {
        "mainnet": "0x07b696af58c967c1b14c9dde0ace001720635a660a8e90c565ea459345318b30",
        "sepolia": "0x04afc78d6fec3b122fc1f60276f074e557749df1a77a93416451be72c435120f",
    },
}

SUPPORTED_NETWORKS = ("mainnet", "sepolia")


def get_ekubo_address(contract: str, network: str) -> str:
    """
    Look up an Ekubo contract address

    Args:
        contract: One of core, positions, router, positions_nft
        network: mainnet or sepolia

    Returns:
        Contract address
    """
    if contract not in EKUBO_ADDRESSES:
        raise ConfigurationError.invalid("contract", f"unknown Ekubo contract '{contract}'")
    by_network = EKUBO_ADDRESSES[contract]
    if network not in by_network:
        raise ConfigurationError.invalid(
            "network", f"'{network}' not in {', '.join(SUPPORTED_NETWORKS)}"
        )
    return by_network[network]


# =========================================================================
# Fixed-point and tick limits
# =========================================================================

# Sqrt prices are Q128.128
Q128 = 1 << 128

# price(tick) = TICK_BASE ** tick
TICK_BASE = Decimal("1.000001")

MIN_TICK = -88722883
MAX_TICK = 88722883

MIN_SQRT_RATIO = 18447090763469684737
MAX_SQRT_RATIO = 6277100250585753475930931601400621808602321654880405518632

# Fee fractions are 0.128 fixed point
MAX_FEE = (1 << 128) - 1

# starknet_keccak("Transfer")
TRANSFER_EVENT_SELECTOR = 0x99cd8bde557814842a3121e8ddfd433a539b8c9f14bf31ebf108d12e6196e9
