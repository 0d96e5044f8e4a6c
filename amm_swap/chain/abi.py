"""Minimal ABIs for the Uniswap V2 pair, router and ERC-20 calls we make."""

MAX_UINT256 = 2**256 - 1


def _fn(name, inputs, outputs, mutability="nonpayable"):
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": mutability,
    }


PAIR_ABI = [
    _fn(
        "getReserves",
        [],
        [("reserve0", "uint112"), ("reserve1", "uint112"), ("blockTimestampLast", "uint32")],
        "view",
    ),
]

ERC20_ABI = [
    _fn("balanceOf", [("owner", "address")], [("", "uint256")], "view"),
    _fn("allowance", [("owner", "address"), ("spender", "address")], [("", "uint256")], "view"),
    _fn("approve", [("spender", "address"), ("value", "uint256")], [("", "bool")]),
]

_SWAP_OUTPUTS = [("amounts", "uint256[]")]

ROUTER_ABI = [
    _fn(
        "swapExactETHForTokens",
        [("amountOutMin", "uint256"), ("path", "address[]"), ("to", "address"), ("deadline", "uint256")],
        _SWAP_OUTPUTS,
        "payable",
    ),
    _fn(
        "swapExactTokensForETH",
        [
            ("amountIn", "uint256"),
            ("amountOutMin", "uint256"),
            ("path", "address[]"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        _SWAP_OUTPUTS,
    ),
    _fn(
        "swapExactTokensForTokens",
        [
            ("amountIn", "uint256"),
            ("amountOutMin", "uint256"),
            ("path", "address[]"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        _SWAP_OUTPUTS,
    ),
]
