from app.tools.market_data import MARKET_TOOLS
from app.tools.registry import ToolRegistry
from coingecko_client import CoinGeckoClient


class Container:
    def __init__(self):
        # Upstream (stateless, shared by all sessions)
        self.coingecko = CoinGeckoClient.from_settings()

        # Tool table (immutable, registered into every session)
        self.registry = ToolRegistry(MARKET_TOOLS)


global_container = Container()
