"""
Domain layer containing core business logic and domain services.

Submodules:
- companion: Users, session credentials and listening parties.
- utils: Domain-specific utilities (e.g., party code and secret generation).
"""
