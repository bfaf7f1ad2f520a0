"""Generic CRUD service layer with a user account specialization."""

__version__ = "1.0.0"
