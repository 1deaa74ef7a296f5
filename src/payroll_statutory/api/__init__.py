"""HTTP API for statutory exports and annual aggregation."""
