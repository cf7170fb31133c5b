"""
Calls the Arith service started by ``python -m httprpc.main``.
"""
import asyncio

from httprpc.client.client import HTTPRPCClient
from httprpc.errors import RemoteError
from httprpc.main import Args, Product, Quotient


async def main() -> None:
    async with HTTPRPCClient("http://127.0.0.1:8000/rpc") as client:
        product = await client.call("Arith.Multiply", Args(A=7, B=8), reply_type=Product)
        print(f"7 * 8 = {product.C}")

        quotient = await client.call("Arith.Divide", Args(A=17, B=5), reply_type=Quotient)
        print(f"17 / 5 = {quotient.Quo} rem {quotient.Rem}")

        try:
            await client.call("Arith.Divide", {"A": 1, "B": 0})
        except RemoteError as e:
            print(f"Error: {e}")


if __name__ == "__main__":
    asyncio.run(main())
