"""NovaFolio API: case and document management with per-page full-text search."""

__version__ = "1.0.0"
