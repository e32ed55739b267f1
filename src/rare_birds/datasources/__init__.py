"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # Endpoint URLs, constants, errors
    └── {feature}.py      # Fetch functions (one per endpoint/concept)

- ebird/        Recent and rare sightings around a point (via the app's proxy)
- birdweather/  Species photo lookup, batched per fetch cycle

All requests go through ``rare_birds.services.http.session``.
"""
