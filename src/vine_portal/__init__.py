"""Vine Portal package.

JSON API behind the church website and member portal. Organized by feature
modules (check-ins, children, profiles, sermons, ...) with a thin Flask
controller layer over service/repository layers. All persistence, auth and
storage go through the hosted backend (Supabase).
"""

__version__ = "0.3.0"
