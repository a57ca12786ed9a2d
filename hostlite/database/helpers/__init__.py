"""
The `helpers` package provides single-call wrappers around `DatabaseContext`.

Contents
--------
- transactionManagement
    - `non_query`: atomic execute + commit, rolls back and re-raises on error
    - `query`: atomic query, returns an empty `DataSet` on error (never raises)
    - `command`: builds a provider command for reuse
    - Context variable (`db_context_var`) for propagating the active context across function calls
    - `@transactional` decorator for wrapping functions in a managed transactional context
"""
