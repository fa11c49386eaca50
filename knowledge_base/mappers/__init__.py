"""Pure payload mappers for upstream sources."""
