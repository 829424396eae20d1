"""Repository addressing: by owner/name or by numeric id."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ByName:
    """A repository addressed as ``owner/name``."""

    owner: str
    name: str

    def __post_init__(self) -> None:
        if not self.owner:
            raise ValueError("owner must be a non-empty string")
        if not self.name:
            raise ValueError("name must be a non-empty string")

    @property
    def path(self) -> str:
        return f"/repos/{self.owner}/{self.name}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class ById:
    """A repository addressed by its stable numeric id."""

    repository_id: int

    def __post_init__(self) -> None:
        if isinstance(self.repository_id, bool) or not isinstance(self.repository_id, int):
            raise ValueError("repository_id must be an integer")
        if self.repository_id <= 0:
            raise ValueError("repository_id must be positive")

    @property
    def path(self) -> str:
        return f"/repositories/{self.repository_id}"

    def __str__(self) -> str:
        return str(self.repository_id)


RepositoryRef = ByName | ById
