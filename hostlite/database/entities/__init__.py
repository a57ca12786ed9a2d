"""
Result entities returned by queries.

Contents:
    - DataSet / DataTable: fully materialized result sets, usable after the connection is closed
"""
