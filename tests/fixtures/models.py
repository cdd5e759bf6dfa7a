"""Users and their stories."""

from dataclasses import dataclass
from typing import Optional

from modelddl import belongs_to, column, has_many


@dataclass
class User:
    id: int = column(pk=True, autoincrement=True)
    name: str = column()
    stories: list["Story"] = has_many("Story")


@dataclass
class Story:
    id: int = column(pk=True, autoincrement=True)
    user_id: int = column()
    title: Optional[str] = column()
    author: Optional[User] = belongs_to(User)
