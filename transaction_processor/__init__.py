"""
Transaction Processor

Applies deposits, withdrawals, disputes, resolutions and chargebacks to
per-client accounts using exact decimal arithmetic, and reports the final
balance of every client.
"""

__version__ = "1.0.0"
