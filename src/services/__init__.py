"""Business logic services used by handlers.

Services are imported lazily by handlers so a cold start does not pay for
boto3, requests and SQLAlchemy setup before the first route is known.
"""

# Do NOT import services here - use lazy loading in handlers instead
