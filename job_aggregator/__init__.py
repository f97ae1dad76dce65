"""Multi-source job aggregation: adapters, filtering, classification, dedup."""
