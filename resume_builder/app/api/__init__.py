"""
HTTP API of the resume builder application.

Routers live in `api.routes`; the business logic they call lives in
`api.routes.route_logic`. Shared FastAPI dependencies are in
`api.dependencies`.

Notes:
    1. Every resume endpoint requires the session cookie issued at login.
    2. Database sessions are provided per request by `database.get_db`.
    3. Error responses use the body shape `{"message": str, "field"?: str}`.

"""
