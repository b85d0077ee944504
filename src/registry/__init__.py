"""Registry datasources."""
