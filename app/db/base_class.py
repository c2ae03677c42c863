from typing import Any

from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore
        return cls.__name__.lower()

    def dict(self) -> dict[str, Any]:
        """Column values keyed by attribute name."""
        return {c.key: getattr(self, c.key) for c in self.__table__.columns}
