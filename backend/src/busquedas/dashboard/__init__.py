"""busquedas.dashboard

Lectura y agregación del log de búsquedas para los endpoints ``/api/*``.

El objetivo es que los routers permanezcan delgados (HTTP/serialización) y la
lógica de datos viva aquí:

- :mod:`busquedas.dashboard.queries`: conexión, filtros y filas crudas.
- :mod:`busquedas.dashboard.aggregations`: series mensual/horaria/semanal,
  tipos y muestra.
"""
