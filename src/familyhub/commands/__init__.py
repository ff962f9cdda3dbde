"""CLI commands for familyhub."""

from .admin import admin
from .auth import auth
from .experiences import experiences
from .forum import forum
from .init import init
from .serve import serve
from .wallet import wallet

__all__ = [
    "admin",
    "auth",
    "experiences",
    "forum",
    "init",
    "serve",
    "wallet",
]
