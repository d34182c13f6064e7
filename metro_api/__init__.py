"""HTTP API over the metro dashboard core."""
