# backend/src/busquedas/app/jobs/__init__.py
"""Jobs de consola del dashboard de búsquedas."""
