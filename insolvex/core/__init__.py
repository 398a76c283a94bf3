"""Pure normalization, matching and aggregation logic plus shared utilities."""
