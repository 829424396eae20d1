from ghpulls.services.github.connection import Connection
from ghpulls.services.github.observable import Observable, Subscription
from ghpulls.services.github.repository import ById, ByName, RepositoryRef

__all__ = ["ById", "ByName", "Connection", "Observable", "RepositoryRef", "Subscription"]
