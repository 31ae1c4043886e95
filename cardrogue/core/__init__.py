"""Core timeline engine: data, entities, events and the simulation itself."""
