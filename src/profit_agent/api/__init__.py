"""HTTP API for Pro Fit Agent."""
