"""Service layer — business logic between the HTTP routes and storage."""
