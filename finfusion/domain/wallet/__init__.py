"""
Wallet bounded context: domain layer.

This module contains all domain logic for the wallet context:
- Session snapshot and balances
- Peer-to-peer transfers
- Portfolio holdings and trades
- Assistant transcript
"""
