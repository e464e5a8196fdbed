import threading
from collections.abc import Iterable

from inav_arbitrage.infrastructure.observability import get_ingestion_logger
from inav_arbitrage.shared.models.enums import AssetClass, Upstream
from inav_arbitrage.shared.models.quotes import IndexConfig, InstrumentConfig

log = get_ingestion_logger("symbol-registry", upstream="nse")

# Default ETF universe tracked against iNAV.
DEFAULT_INSTRUMENTS: tuple[tuple[str, str, AssetClass], ...] = (
    ("GOLDBEES", "Nippon India ETF Gold Bees", AssetClass.GOLD),
    ("SILVERBEES", "Nippon India Silver ETF", AssetClass.SILVER),
    ("NIFTYBEES", "Nippon India ETF Nifty BeES", AssetClass.INDEX),
    ("JUNIORBEES", "Nippon India ETF Junior BeES", AssetClass.INDEX),
    ("CONSUMBEES", "Nippon India ETF Consumption BeES", AssetClass.EQUITY),
    ("AUTOBEES", "Nippon India ETF Auto BeES", AssetClass.EQUITY),
    ("ITBEES", "Nippon India ETF IT BeES", AssetClass.EQUITY),
    ("MON100", "Motilal Oswal Nasdaq 100 ETF", AssetClass.INTERNATIONAL),
    ("HNGSNGBEES", "Nippon India ETF Hang Seng BeES", AssetClass.INTERNATIONAL),
    ("PSUBNKBEES", "Nippon India ETF PSU Bank BeES", AssetClass.EQUITY),
    ("FMCGIETF", "Nippon India ETF FMCG BeES", AssetClass.EQUITY),
    ("INFRABEES", "Nippon India ETF Infra BeES", AssetClass.EQUITY),
    ("SILVERIETF", "ICICI Pru Silver ETF", AssetClass.SILVER),
    ("TATSILV", "Tata Silver ETF", AssetClass.SILVER),
    ("TATAGOLD", "Tata Gold ETF", AssetClass.GOLD),
    ("MAHKTECH", "Mahindra Manulife Tech ETF", AssetClass.EQUITY),
    ("SILVERADD", "Aditya Birla Silver ETF", AssetClass.SILVER),
    ("GROWWSLVR", "Groww Silver ETF", AssetClass.SILVER),
    ("SBISILVER", "SBI Silver ETF", AssetClass.SILVER),
    ("SILVERCASE", "SBI Silver ETF", AssetClass.SILVER),
    ("GROWWGOLD", "Groww Gold ETF", AssetClass.GOLD),
    ("ESILVER", "Edelweiss Silver ETF", AssetClass.SILVER),
)

# SENSEX is published by BSE, whose API is not implemented here.
DEFAULT_INDICES: tuple[IndexConfig, ...] = (
    IndexConfig(key="NIFTY 50", name="Nifty 50", upstream_code="NIFTY 50"),
    IndexConfig(key="BANKNIFTY", name="Bank Nifty", upstream_code="NIFTY BANK"),
    IndexConfig(key="SENSEX", name="Sensex", upstream_code="SENSEX", upstream=Upstream.BSE),
)


class InstrumentRegistry:
    """
    Ordered symbol → InstrumentConfig map.

    Insert-only with overwrite-by-symbol; registration order is the default
    batch order. Safe to read while another task registers.
    """

    def __init__(self, instruments: Iterable[InstrumentConfig] | None = None):
        self._lock = threading.Lock()
        self._instruments: dict[str, InstrumentConfig] = {}
        for instrument in instruments or ():
            self._instruments[instrument.symbol] = instrument

    @classmethod
    def with_defaults(cls) -> "InstrumentRegistry":
        return cls(
            InstrumentConfig(symbol=symbol, name=name, asset_class=asset_class)
            for symbol, name, asset_class in DEFAULT_INSTRUMENTS
        )

    def register(
        self, symbol: str, name: str, asset_class: AssetClass | str = AssetClass.OTHER
    ) -> InstrumentConfig:
        """Insert or overwrite an instrument. Returns the stored config."""
        instrument = InstrumentConfig(symbol=symbol, name=name, asset_class=asset_class)
        with self._lock:
            replaced = instrument.symbol in self._instruments
            self._instruments[instrument.symbol] = instrument
        log.info(
            "instrument_registered",
            symbol=instrument.symbol,
            asset_class=instrument.asset_class.value,
            replaced=replaced,
        )
        return instrument

    def get(self, symbol: str) -> InstrumentConfig | None:
        with self._lock:
            return self._instruments.get(symbol.upper())

    def symbols(self) -> list[str]:
        with self._lock:
            return list(self._instruments)

    def all(self) -> list[InstrumentConfig]:
        with self._lock:
            return list(self._instruments.values())

    def __contains__(self, symbol: str) -> bool:
        with self._lock:
            return symbol.upper() in self._instruments

    def __len__(self) -> int:
        with self._lock:
            return len(self._instruments)


class IndexRegistry:
    """Fixed set of market indices shown next to the ETF universe."""

    def __init__(self, indices: Iterable[IndexConfig] = DEFAULT_INDICES):
        self._indices = {index.key: index for index in indices}

    def get(self, key: str) -> IndexConfig | None:
        return self._indices.get(key)

    def keys(self) -> list[str]:
        return list(self._indices)
