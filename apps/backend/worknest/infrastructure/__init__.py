"""
============================================================
TARJETA CRC — infrastructure/__init__.py
============================================================
Package: worknest.infrastructure

Responsibilities:
  - Adaptadores concretos: pool de Postgres (db), repositorios
    (postgres / in_memory) y cola RQ de mantenimiento (queue).

Policy:
  - Sin re-exports acá: cada subpaquete tiene su propia superficie pública
    y se importa explícitamente (evita cargar rq/psycopg sin necesidad).
============================================================
"""
