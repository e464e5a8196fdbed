"""
inav-arbitrage: near-real-time ETF quotes from the NSE portal, a short-lived
quote cache in front of it, and premium/discount signals against iNAV.
"""

__version__ = "0.1.0"
