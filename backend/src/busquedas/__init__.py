"""Dashboard de búsquedas: API de agregados y pipeline de cross-filtering."""

__version__ = "0.1.0"
