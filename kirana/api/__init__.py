"""HTTP API layer: dependencies, error conversion and versioned routers."""
