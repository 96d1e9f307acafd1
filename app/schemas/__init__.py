"""
Schemas module - Request/Response schemas for API endpoints.

Everything lives in app.schemas.schemas; the Role enum defined there is
also what the auth layer dispatches on.
"""
