"""
Contract call definitions
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Call:
    """
    One entry of an ordered multicall

    Attributes:
        contract_address: Target contract
        entrypoint: Function name on the target
        calldata: Named arguments, in declaration order
    """
    contract_address: str
    entrypoint: str
    calldata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "contract_address": self.contract_address,
            "entrypoint": self.entrypoint,
            "calldata": self.calldata,
        }

    def __repr__(self) -> str:
        return f"Call({self.entrypoint} @ {self.contract_address[:10]}...)"
