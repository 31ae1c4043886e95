"""Game-side managers and encounter configuration built on the core engine."""
