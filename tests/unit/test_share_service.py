"""Unit tests for share-link toggling and resolution."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from syncbrain.interfaces.share_link_provider import IShareLinkProvider
from syncbrain.models.share import ShareLink
from syncbrain.services.share_service import ShareService, new_share_hash
from syncbrain.utils.errors import NotFoundError, ValidationError


class InMemoryShareLinks(IShareLinkProvider):
    def __init__(self) -> None:
        self.links: dict[str, ShareLink] = {}

    async def initialize(self) -> None:
        return None

    async def find_by_owner(self, owner: str) -> ShareLink | None:
        return self.links.get(owner)

    async def find_by_hash(self, link_hash: str) -> ShareLink | None:
        return next((link for link in self.links.values() if link.hash == link_hash), None)

    async def create(self, owner: str, link_hash: str) -> ShareLink:
        return self.links.setdefault(
            owner, ShareLink(hash=link_hash, owner=owner, created_at=datetime.now(timezone.utc))
        )

    async def delete_by_owner(self, owner: str) -> bool:
        return self.links.pop(owner, None) is not None


@pytest.fixture
def links() -> InMemoryShareLinks:
    return InMemoryShareLinks()


@pytest.fixture
def service(links, mock_record_store) -> ShareService:
    return ShareService(links, mock_record_store)


def test_new_share_hash_shape() -> None:
    value = new_share_hash()
    assert len(value) == 15
    assert value.isalnum()
    assert value != new_share_hash()


class TestToggleShare:
    @pytest.mark.asyncio
    async def test_enable_is_idempotent(self, service) -> None:
        first = await service.toggle_share("alice", True)
        second = await service.toggle_share("alice", True)
        assert first is not None
        assert first == second

    @pytest.mark.asyncio
    async def test_disable_returns_none_and_invalidates(self, service) -> None:
        link_hash = await service.toggle_share("alice", True)

        assert await service.toggle_share("alice", False) is None
        with pytest.raises(NotFoundError):
            await service.resolve_share(link_hash)

    @pytest.mark.asyncio
    async def test_disable_without_link_is_noop(self, service, links) -> None:
        assert await service.toggle_share("alice", False) is None
        assert links.links == {}

    @pytest.mark.asyncio
    async def test_reenable_issues_fresh_hash(self, service) -> None:
        old = await service.toggle_share("alice", True)
        await service.toggle_share("alice", False)
        new = await service.toggle_share("alice", True)
        assert new != old

    @pytest.mark.asyncio
    async def test_owner_required(self, service) -> None:
        with pytest.raises(ValidationError):
            await service.toggle_share("  ", True)

    @pytest.mark.asyncio
    async def test_concurrent_create_returns_winner(self, mock_record_store) -> None:
        winner = ShareLink(hash="winnerhash12345", owner="alice", created_at=datetime.now(timezone.utc))
        provider = MagicMock(spec=IShareLinkProvider)
        provider.find_by_owner = AsyncMock(return_value=None)
        provider.create = AsyncMock(return_value=winner)

        result = await ShareService(provider, mock_record_store).toggle_share("alice", True)

        assert result == "winnerhash12345"


class TestResolveShare:
    @pytest.mark.asyncio
    async def test_returns_owner_and_records(self, service, mock_record_store, make_record) -> None:
        mock_record_store.find_by_owner.return_value = [make_record("a"), make_record("b")]
        link_hash = await service.toggle_share("alice", True)

        shared = await service.resolve_share(link_hash)

        assert shared.owner == "alice"
        assert [r.id for r in shared.records] == ["a", "b"]
        mock_record_store.find_by_owner.assert_awaited_once_with("alice")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("link_hash", ["", "doesnotexist123"])
    async def test_unknown_hash_not_found(self, service, link_hash) -> None:
        with pytest.raises(NotFoundError):
            await service.resolve_share(link_hash)
