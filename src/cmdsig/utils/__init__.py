"""Shared utilities: naming helpers and cross-cutting concerns.

Rules
-----
* No business logic.
* No I/O.
* Importable by any layer.
"""

from cmdsig.utils.casing import camel_key

__all__: list[str] = ["camel_key"]
