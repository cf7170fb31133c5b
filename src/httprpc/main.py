from pydantic import BaseModel

from httprpc.config import ServerSettings
from httprpc.server.server import RPCServer


class Args(BaseModel):
    A: int = 0
    B: int = 0


class Product(BaseModel):
    C: int = 0


class Quotient(BaseModel):
    Quo: int = 0
    Rem: int = 0


class Arith:
    def Multiply(self, args: Args, reply: Product) -> Exception | None:
        reply.C = args.A * args.B
        return None

    def Divide(self, args: Args, reply: Quotient) -> Exception | None:
        if args.B == 0:
            return ZeroDivisionError("divide by zero")
        reply.Quo = args.A // args.B
        reply.Rem = args.A % args.B
        return None


def main() -> None:
    server = RPCServer(name="arith", settings=ServerSettings.from_env())
    server.register(Arith())
    server.run()


if __name__ == "__main__":
    main()
