# examples/run_balance_checks.py
import asyncio, random, argparse

from infra import BalanceClient, BalanceClientError
from utils import logger


async def run_checks(host: str, port: int, n: int):
    client = BalanceClient(host, port)

    start = await client.get_balance()
    print(f"start balance: {start}")

    deltas = [round(random.uniform(-100, 100), 2) for _ in range(n)]
    results = await asyncio.gather(*(client.post_delta(d) for d in deltas), return_exceptions=True)
    failures = [r for r in results if isinstance(r, Exception)]
    for f in failures:
        print(f"❌ update failed: {f}")

    applied = sum(d for d, r in zip(deltas, results) if not isinstance(r, Exception))
    end = await client.get_balance()
    drift = abs(end - (start + applied))
    print(f"end balance: {end}  expected: {start + applied:.6f}  drift: {drift:.3e}")

    # a malformed update must be dropped without touching the balance
    try:
        await client.send_raw(b"POST /abc HTTP/1.1\r\n\r\n")
        print("❌ malformed update was answered")
    except BalanceClientError as e:
        print(f"✅ malformed update dropped: {e}")

    if drift < 1e-6 and not failures and await client.get_balance() == end:
        print(f"✅ {n} concurrent updates serialized")
    else:
        logger.warning("balance checks failed")


if __name__ == "__main__":
    p = argparse.ArgumentParser("balance-checks")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8181)
    p.add_argument("-n", type=int, default=200)
    args = p.parse_args()
    asyncio.run(run_checks(args.host, args.port, args.n))
