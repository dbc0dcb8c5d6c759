"""Unit tests for CollectionService: vector bookkeeping and atomic delete."""

import pytest

from tgvault.repositories.collection_repository import CollectionRepository
from tgvault.services.collection_service import CollectionService
from tgvault.services.folder_service import FolderService
from tgvault.exceptions import CollectionItemNotFoundError, FolderNotFoundError


class TestAppendVectors:

    def test_chunk_indexes_continue_across_calls(self, db):
        svc = CollectionService(db)
        item = svc.register_item("alice", "a.txt")
        svc.append_vectors("alice", "a.txt", [{"content": "one"}, {"content": "two"}])
        appended, total = svc.append_vectors("alice", "a.txt", [{"content": "three"}])
        assert (appended, total) == (1, 3)
        assert svc.repo.count_vectors(item.uuid) == 3


class TestDeleteItem:

    def test_delete_removes_vectors(self, db):
        svc = CollectionService(db)
        item = svc.register_item("alice", "a.txt")
        svc.append_vectors("alice", "a.txt", [{"content": "x"}, {"content": "y"}])

        assert svc.delete_item("alice", "a.txt") == 2
        assert svc.repo.count_vectors(item.uuid) == 0
        with pytest.raises(CollectionItemNotFoundError):
            svc.delete_item("alice", "a.txt")

    def test_failed_item_delete_keeps_item_and_vectors(self, db, monkeypatch):
        svc = CollectionService(db)
        folder = FolderService(db).create_folder("alice", "Work")
        item = svc.register_item("alice", "a.txt", folder_id=folder.id)
        svc.append_vectors("alice", "a.txt", [{"content": "x"}, {"content": "y"}])

        def fail(self, item):
            raise RuntimeError("lost connection")

        monkeypatch.setattr(CollectionRepository, "delete", fail)

        with pytest.raises(RuntimeError):
            svc.delete_item("alice", "a.txt")

        assert svc.repo.count_vectors(item.uuid) == 2
        kept = svc.repo.get_by_name("alice", "a.txt")
        assert kept is not None
        assert kept.folder_id == folder.id


class TestMoveItem:

    def test_foreign_folder_is_not_found(self, db):
        svc = CollectionService(db)
        svc.register_item("alice", "a.txt")
        theirs = FolderService(db).create_folder("bob", "Private")
        with pytest.raises(FolderNotFoundError):
            svc.move_item("alice", "a.txt", theirs.id)
        assert svc.repo.get_by_name("alice", "a.txt").folder_id is None
