"""Server side of the resume builder application.

Notes:
    1. `main.create_app` assembles the FastAPI application.
    2. `core` holds configuration, authentication and error types.
    3. `database` manages the SQLAlchemy engine and per-request sessions.
    4. `models` defines the ORM tables; `schemas` the pydantic payload models.
    5. `api` holds the routers and the route logic they call.
    6. No disk, network, or database access occurs in this module directly.

"""
