"""HTTP API for the renewal reminder engine."""
