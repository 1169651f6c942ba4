"""Test utilities for short links tests."""

import random
import string
from datetime import datetime
from typing import Any, Dict, Optional

from shortlinks.models.link import Link, utcnow
from shortlinks.repositories.base import DuplicateEntityError, RepositoryError


def random_code(length: int = 6) -> str:
    """Generate a random valid code."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_code(8).lower()}.com"
    path = random_code(12)
    return f"https://{domain}/{path}"


def create_test_link_data(
    target_url: Optional[str] = None,
    code: Optional[str] = None,
    clicks: int = 0,
    last_clicked: Optional[datetime] = None,
    created_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """Create test data dict for a Link."""
    data = {
        "target_url": target_url or random_url(),
        "code": code or random_code(),
        "clicks": clicks,
        "last_clicked": last_clicked,
    }
    if created_at is not None:
        data["created_at"] = created_at
    return data


async def create_test_link(db, **kwargs) -> Link:
    """Create, commit and return a test Link."""
    link = Link(**create_test_link_data(**kwargs))
    db.add(link)
    await db.commit()
    await db.refresh(link)
    return link


class InMemoryLinkStore:
    """Dict-backed stand-in for LinkRepository.

    Only the methods the services call are provided; ``fail_on`` names
    methods that should raise RepositoryError instead.
    """

    def __init__(self, taken=(), fail_on=()):
        self.links: Dict[str, Link] = {}
        self.taken = set(taken)
        self.fail_on = set(fail_on)
        self.checked = []

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail_on:
            raise RepositoryError(f"{name} failed")

    async def check_code_exists(self, db, code: str) -> bool:
        self._maybe_fail("check_code_exists")
        self.checked.append(code)
        return code in self.taken or code in self.links

    async def create_link(self, db, data) -> Link:
        self._maybe_fail("create_link")
        if data.code in self.links or data.code in self.taken:
            raise DuplicateEntityError(Link, "code", data.code)
        link = Link(code=data.code, target_url=data.target_url, clicks=0, last_clicked=None)
        self.links[link.code] = link
        return link

    async def get_by_code(self, db, code: str) -> Optional[Link]:
        self._maybe_fail("get_by_code")
        return self.links.get(code)

    async def increment_visit(self, db, code: str):
        self._maybe_fail("increment_visit")
        link = self.links.get(code)
        if link is None:
            return None
        link.clicks += 1
        link.last_clicked = utcnow()
        return link.clicks, link.last_clicked

    async def delete_by_code(self, db, code: str) -> bool:
        self._maybe_fail("delete_by_code")
        return self.links.pop(code, None) is not None


class FakeSession:
    """Minimal AsyncSession stand-in recording commits and rollbacks."""

    def __init__(self, fail_commit: bool = False):
        self.fail_commit = fail_commit
        self.commits = 0
        self.rollbacks = 0

    async def commit(self):
        if self.fail_commit:
            raise RuntimeError("commit failed")
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1
