"""
Cycle Arbitrage Detector.

Builds an exchange-rate graph from quoted trading pairs and searches it
for bounded-length cycles through a base asset whose rate product
exceeds 1.
"""

__version__ = "1.0.0"
