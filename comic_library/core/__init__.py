"""Configuration, logging, database lifecycle and unit of work."""
