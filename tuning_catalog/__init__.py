"""Vehicle tuning catalog API with reseller overrides."""
