# This file makes the database directory a Python package
from .config import Base, SessionLocal, engine

__all__ = ['Base', 'SessionLocal', 'engine']
