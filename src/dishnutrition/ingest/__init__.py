"""Reference data ingestion from tabular sources."""
