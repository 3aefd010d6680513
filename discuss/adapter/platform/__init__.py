"""Adapters for the platform services that own users, ideas and domains."""

from .content import (
    HttpParentContentGateway,
    InMemoryParentContentGateway,
)
from .identity import HttpIdentityDirectory, InMemoryIdentityDirectory

__all__ = [
    "HttpIdentityDirectory",
    "HttpParentContentGateway",
    "InMemoryIdentityDirectory",
    "InMemoryParentContentGateway",
]
