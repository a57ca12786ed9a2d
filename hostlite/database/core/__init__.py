"""
Core data-access object: `DatabaseContext`, which owns one connection and optionally one transaction.
"""
