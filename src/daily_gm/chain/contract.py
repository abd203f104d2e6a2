"""DailyGM contract ABI, event topic and custom-error selectors.

Only the members the client touches are embedded:

- ``streak(address) -> uint256`` / ``lastGM(address) -> uint256``
- ``gm()`` / ``gmTo(address)``
- ``event GMSent(address indexed sender, address indexed recipient, uint256 timestamp)``
- ``error AlreadyGMToday()`` / ``error InvalidRecipient()``
"""

from __future__ import annotations

from web3 import Web3

GM_SENT_SIGNATURE = "GMSent(address,address,uint256)"
GM_SENT_TOPIC = Web3.to_hex(Web3.keccak(text=GM_SENT_SIGNATURE))

# Revert names the submitter classifies on.
ALREADY_GM_TODAY = "AlreadyGMToday"
INVALID_RECIPIENT = "InvalidRecipient"


def _selector(signature: str) -> str:
    return Web3.to_hex(Web3.keccak(text=signature))[:10]


ERROR_SELECTORS: dict[str, str] = {
    _selector(f"{ALREADY_GM_TODAY}()"): ALREADY_GM_TODAY,
    _selector(f"{INVALID_RECIPIENT}()"): INVALID_RECIPIENT,
}

DAILY_GM_ABI: list[dict] = [
    {
        "inputs": [{"name": "user", "type": "address"}],
        "name": "streak",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "user", "type": "address"}],
        "name": "lastGM",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "gm",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [{"name": "recipient", "type": "address"}],
        "name": "gmTo",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "sender", "type": "address"},
            {"indexed": True, "name": "recipient", "type": "address"},
            {"indexed": False, "name": "timestamp", "type": "uint256"},
        ],
        "name": "GMSent",
        "type": "event",
    },
    {"inputs": [], "name": ALREADY_GM_TODAY, "type": "error"},
    {"inputs": [], "name": INVALID_RECIPIENT, "type": "error"},
]


def address_topic(address: str) -> str:
    """Left-pad a 20-byte address into a 32-byte indexed topic."""
    return "0x" + address.lower().removeprefix("0x").rjust(64, "0")


def revert_name(data: str | None) -> str | None:
    """Map revert data (``0x`` + selector + args) to a known custom error name."""
    if not data or not isinstance(data, str):
        return None
    return ERROR_SELECTORS.get(data[:10].lower())
