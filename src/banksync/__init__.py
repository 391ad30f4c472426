"""BankSync: concurrent bank transaction synchronization.

Logs into a set of independent bank accounts with a nonce/hash handshake,
pulls each account's most recent transactions and appends them to a local
DuckDB database. Accounts are processed concurrently and a failure in one
account never stops the others.
"""

__version__ = "0.1.0"
