"""Infrastructure: record stores (SQL, Redis) and security adapters."""
