"""BoothCode - seller booth codes for marketplace collections.

Issues a short, unique code per seller collection and keeps it as a
prefix on the collection title across renames.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
