"""Repositories mapping two public user APIs onto one domain model.

* :class:`JsonPlaceholderUserRepository` -- jsonplaceholder.typicode.com
* :class:`RandomUserRepository` -- randomuser.me (read-only)

Both return :class:`DomainUser` and satisfy the :class:`Repository` protocol.
"""

from fetchkit.repository.base import DomainUser, Repository
from fetchkit.repository.jsonplaceholder import JsonPlaceholderUserRepository
from fetchkit.repository.randomuser import RandomUserRepository

__all__ = [
    "DomainUser",
    "JsonPlaceholderUserRepository",
    "RandomUserRepository",
    "Repository",
]
