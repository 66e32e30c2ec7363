"""Business logic services used by handlers.

Services are imported lazily by handlers so HTTP clients are only built when a
ticket actually needs them.
"""

# Do NOT import services here - use lazy loading in handlers instead
