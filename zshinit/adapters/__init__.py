"""
Adapters — wrappers around external tools that return receipts.
"""
