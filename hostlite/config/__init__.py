"""
The `config` package resolves configuration for the deployment tier the process runs in.

Contents:
    - config: host settings (`SERVER_ROLE`, default connection name, log level) loaded from environment variables with .env support
    - environment: deployment tiers, their synonymous (fallback) tiers, key localization and server-role detection
    - connection_descriptor: the named connection metadata model
    - configuration_manager: the write-once merge of tier-prefixed settings and connection descriptors
"""
