"""ERC-20 call encoding and token metadata reads."""

from dataclasses import dataclass
from typing import Any, Dict, List

from eth_abi import encode as abi_encode
from eth_utils import from_wei_decimals, function_signature_to_4byte_selector, to_checksum_address

from fee_engine.units import format_decimal, require_amount

ERC20_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [{"name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
]

_TRANSFER_SELECTOR = function_signature_to_4byte_selector("transfer(address,uint256)")


@dataclass(frozen=True)
class TokenInfo:
    address: str
    symbol: str
    decimals: int
    balance: int

    @property
    def formatted_balance(self) -> str:
        return format_decimal(from_wei_decimals(self.balance, self.decimals))


def encode_transfer(recipient: str, amount: int) -> bytes:
    require_amount("amount", amount)
    return _TRANSFER_SELECTOR + abi_encode(
        ["address", "uint256"], [to_checksum_address(recipient), amount]
    )


def read_token_info(w3: Any, token: str, owner: str) -> TokenInfo:
    address = to_checksum_address(token)
    contract = w3.eth.contract(address=address, abi=ERC20_ABI)
    return TokenInfo(
        address=address,
        symbol=str(contract.functions.symbol().call()),
        decimals=int(contract.functions.decimals().call()),
        balance=int(contract.functions.balanceOf(to_checksum_address(owner)).call()),
    )
