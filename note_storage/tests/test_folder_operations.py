"""
Unit tests for folder mutations.

Tests cover create, rename, move and delete (with cascade) at the service
level, plus the storage-level sibling name index.
"""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from note_storage.database import Base
from note_storage.exceptions import (
    CycleDetectedError,
    DepthExceededError,
    DuplicateNameError,
    FolderNotFoundError,
    InvalidNameError,
    ParentNotFoundError,
    SelfParentError,
)
from note_storage.models.folder import Folder
from note_storage.models.note import Note
from note_storage.services import folder_operations
from note_storage.services.folder_operations import (
    create_folder,
    delete_folder,
    move_folder,
    rename_folder,
    update_folder,
)
from note_storage.services.folder_repository import FolderRepository


# Test database setup
TEST_DATABASE_URL = "sqlite:///./test_folder_operations.db"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)


@event.listens_for(test_engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def repo(db):
    return FolderRepository(db, "u1")


def _create_note(db, title="Lecture 1", folder_id=None, owner_id="u1") -> Note:
    note = Note(owner_id=owner_id, title=title, file_name=f"{title}.pdf", folder_id=folder_id)
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


# ============== create ==============


class TestCreateFolder:
    def test_create_root_folder(self, repo):
        folder = create_folder(repo, "CS101")
        assert folder.id
        assert folder.name == "CS101"
        assert folder.parent_id is None
        assert folder.owner_id == "u1"
        assert folder.created_at is not None

    def test_name_is_trimmed(self, repo):
        assert create_folder(repo, "  CS101  ").name == "CS101"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, repo, name):
        with pytest.raises(InvalidNameError):
            create_folder(repo, name)

    def test_create_subfolder(self, repo):
        parent = create_folder(repo, "CS101")
        child = create_folder(repo, "Midterm", parent.id)
        assert child.parent_id == parent.id

    def test_unknown_parent_rejected(self, repo):
        with pytest.raises(ParentNotFoundError):
            create_folder(repo, "Midterm", "does-not-exist")

    def test_other_owners_parent_rejected(self, db, repo):
        theirs = create_folder(FolderRepository(db, "u2"), "Theirs")
        with pytest.raises(ParentNotFoundError):
            create_folder(repo, "Midterm", theirs.id)

    def test_empty_parent_means_root(self, repo):
        assert create_folder(repo, "CS101", "").parent_id is None

    def test_third_level_rejected(self, repo):
        root = create_folder(repo, "CS101")
        child = create_folder(repo, "Midterm", root.id)
        with pytest.raises(DepthExceededError):
            create_folder(repo, "Week 1", child.id)

    def test_deeper_limit_allows_third_level(self, repo):
        root = create_folder(repo, "CS101")
        child = create_folder(repo, "Midterm", root.id)
        grandchild = create_folder(repo, "Week 1", child.id, max_depth=3)
        assert grandchild.parent_id == child.id

    def test_duplicate_name_rejected_ignoring_case(self, repo):
        create_folder(repo, "CS101")
        with pytest.raises(DuplicateNameError):
            create_folder(repo, "cs101")

    def test_same_name_allowed_for_other_owner(self, db, repo):
        create_folder(repo, "CS101")
        other = create_folder(FolderRepository(db, "u2"), "CS101")
        assert other.owner_id == "u2"

    def test_order_increments_among_siblings(self, repo):
        first = create_folder(repo, "A")
        second = create_folder(repo, "B")
        child = create_folder(repo, "C", first.id)
        assert (first.order, second.order, child.order) == (0, 1, 0)

    def test_rejected_create_writes_nothing(self, repo):
        create_folder(repo, "CS101")
        with pytest.raises(DuplicateNameError):
            create_folder(repo, "CS101")
        assert repo.count() == 1


# ============== rename ==============


class TestRenameFolder:
    def test_rename(self, repo):
        folder = create_folder(repo, "CS101")
        assert rename_folder(repo, folder.id, " CS102 ").name == "CS102"

    def test_change_case_of_own_name(self, repo):
        folder = create_folder(repo, "cs101")
        assert rename_folder(repo, folder.id, "CS101").name == "CS101"

    def test_empty_name_keeps_current_name(self, repo):
        folder = create_folder(repo, "CS101")
        assert rename_folder(repo, folder.id, "   ").name == "CS101"

    def test_rename_into_sibling_name_rejected(self, repo):
        create_folder(repo, "CS101")
        folder = create_folder(repo, "CS102")
        with pytest.raises(DuplicateNameError):
            rename_folder(repo, folder.id, "cs101")

    def test_rename_to_name_used_elsewhere_allowed(self, repo):
        a = create_folder(repo, "A")
        create_folder(repo, "Notes", a.id)
        folder = create_folder(repo, "B")
        assert rename_folder(repo, folder.id, "Notes").name == "Notes"

    def test_rename_missing_folder(self, repo):
        with pytest.raises(FolderNotFoundError):
            rename_folder(repo, "missing", "Name")


# ============== move ==============


class TestMoveFolder:
    def test_move_under_root_folder(self, repo):
        target = create_folder(repo, "Target")
        folder = create_folder(repo, "Folder")
        moved = move_folder(repo, folder.id, target.id)
        assert moved.parent_id == target.id

    def test_move_to_root(self, repo):
        parent = create_folder(repo, "Parent")
        child = create_folder(repo, "Child", parent.id)
        assert move_folder(repo, child.id, None).parent_id is None

    def test_move_to_root_with_empty_string(self, repo):
        parent = create_folder(repo, "Parent")
        child = create_folder(repo, "Child", parent.id)
        assert move_folder(repo, child.id, "").parent_id is None

    def test_self_parent_rejected(self, repo):
        folder = create_folder(repo, "Folder")
        with pytest.raises(SelfParentError):
            move_folder(repo, folder.id, folder.id)

    def test_missing_parent_rejected(self, repo):
        folder = create_folder(repo, "Folder")
        with pytest.raises(ParentNotFoundError):
            move_folder(repo, folder.id, "missing")

    def test_missing_folder_rejected(self, repo):
        with pytest.raises(FolderNotFoundError):
            move_folder(repo, "missing", None)

    def test_move_under_own_child_is_a_cycle(self, repo):
        parent = create_folder(repo, "Parent")
        child = create_folder(repo, "Child", parent.id)
        with pytest.raises(CycleDetectedError):
            move_folder(repo, parent.id, child.id)

    def test_move_under_subfolder_exceeds_depth(self, repo):
        root = create_folder(repo, "Root")
        child = create_folder(repo, "Child", root.id)
        leaf = create_folder(repo, "Leaf")
        with pytest.raises(DepthExceededError):
            move_folder(repo, leaf.id, child.id)

    def test_move_folder_with_children_under_root_folder_exceeds_depth(self, repo):
        target = create_folder(repo, "Target")
        moved = create_folder(repo, "Moved")
        create_folder(repo, "Inner", moved.id)
        with pytest.raises(DepthExceededError):
            move_folder(repo, moved.id, target.id)

    def test_move_into_name_collision_rejected(self, repo):
        target = create_folder(repo, "Target")
        create_folder(repo, "Notes", target.id)
        folder = create_folder(repo, "NOTES")
        with pytest.raises(DuplicateNameError):
            move_folder(repo, folder.id, target.id)
        assert repo.get(folder.id).parent_id is None

    def test_combined_rename_and_move_checks_final_position(self, repo):
        target = create_folder(repo, "Target")
        create_folder(repo, "Notes", target.id)
        folder = create_folder(repo, "Notes")
        updated = update_folder(repo, folder.id, name="Notes 2", parent_id=target.id)
        assert (updated.name, updated.parent_id) == ("Notes 2", target.id)


# ============== delete ==============


class TestDeleteFolder:
    def test_delete_leaf(self, repo):
        folder = create_folder(repo, "Folder")
        delete_folder(repo, folder.id)
        assert repo.get(folder.id) is None

    def test_delete_missing_folder(self, repo):
        with pytest.raises(FolderNotFoundError):
            delete_folder(repo, "missing")

    def test_delete_twice_reports_not_found(self, repo):
        folder = create_folder(repo, "Folder")
        delete_folder(repo, folder.id)
        with pytest.raises(FolderNotFoundError):
            delete_folder(repo, folder.id)

    def test_children_move_up_and_notes_become_uncategorized(self, db, repo):
        parent = create_folder(repo, "Parent")
        child = create_folder(repo, "Child", parent.id)
        note = _create_note(db, folder_id=parent.id)
        other_note = _create_note(db, title="Elsewhere", folder_id=child.id)

        delete_folder(repo, parent.id)
        db.expire_all()

        assert repo.get(parent.id) is None
        assert repo.get(child.id).parent_id is None
        assert db.get(Note, note.id).folder_id is None
        assert db.get(Note, other_note.id).folder_id == child.id

    def test_cascade_keeps_grandchildren_attached(self, db, repo):
        a = create_folder(repo, "A")
        b = create_folder(repo, "B", a.id, max_depth=3)
        c = create_folder(repo, "C", b.id, max_depth=3)
        note = _create_note(db, folder_id=a.id)

        delete_folder(repo, a.id)
        db.expire_all()

        assert repo.get(a.id) is None
        assert repo.get(b.id).parent_id is None
        assert repo.get(c.id).parent_id == b.id
        assert db.get(Note, note.id).folder_id is None

    def test_delete_middle_folder_promotes_to_grandparent(self, db, repo):
        a = create_folder(repo, "A")
        b = create_folder(repo, "B", a.id, max_depth=3)
        c = create_folder(repo, "C", b.id, max_depth=3)
        delete_folder(repo, b.id)
        db.expire_all()
        assert repo.get(c.id).parent_id == a.id

    def test_promotion_name_clash_rejects_delete(self, db, repo):
        parent = create_folder(repo, "Parent")
        create_folder(repo, "Shared", parent.id)
        create_folder(repo, "shared")
        with pytest.raises(DuplicateNameError):
            delete_folder(repo, parent.id)
        assert repo.get(parent.id) is not None

    def test_child_may_take_deleted_folders_name(self, db, repo):
        parent = create_folder(repo, "Docs")
        child = create_folder(repo, "docs", parent.id)
        delete_folder(repo, parent.id)
        db.expire_all()
        assert repo.get(child.id).parent_id is None

    def test_other_owner_cannot_delete(self, db, repo):
        folder = create_folder(repo, "Folder")
        with pytest.raises(FolderNotFoundError):
            delete_folder(FolderRepository(db, "u2"), folder.id)


# ============== end-to-end scenario ==============


class TestCourseFolderScenario:
    def test_course_scenario(self, db, repo):
        f1 = create_folder(repo, "CS101")
        f2 = create_folder(repo, "Midterm", f1.id)
        note = _create_note(db, folder_id=f1.id)

        with pytest.raises(DuplicateNameError):
            create_folder(repo, "cs101")

        other_root = create_folder(repo, "CS102")
        assert create_folder(repo, "Midterm", other_root.id).parent_id == other_root.id

        with pytest.raises(CycleDetectedError):
            move_folder(repo, f1.id, f2.id)

        delete_folder(repo, f1.id)
        db.expire_all()
        assert repo.get(f2.id).parent_id is None
        assert db.get(Note, note.id).folder_id is None


# ============== storage-level guard ==============


class TestSiblingNameIndex:
    def test_index_rejects_duplicate_root_names(self, db):
        db.add(Folder(owner_id="u1", name="CS101"))
        db.commit()
        db.add(Folder(owner_id="u1", name="cs101"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_index_allows_same_name_under_different_parents(self, db):
        a = Folder(owner_id="u1", name="A")
        b = Folder(owner_id="u1", name="B")
        db.add_all([a, b])
        db.commit()
        db.add_all([
            Folder(owner_id="u1", name="Notes", parent_id=a.id),
            Folder(owner_id="u1", name="Notes", parent_id=b.id),
        ])
        db.commit()


class TestCommitErrorMapping:
    """Constraint violations at commit are reported as the matching folder error."""

    def test_index_violation_is_duplicate_name(self, repo, monkeypatch):
        create_folder(repo, "CS101")
        # Simulate a concurrent writer that passed the sibling check first
        monkeypatch.setattr(folder_operations, "validate_sibling_name_unique", lambda *args, **kwargs: True)
        with pytest.raises(DuplicateNameError):
            create_folder(repo, "cs101")
        assert [f.name for f in repo.list_all()] == ["CS101"]

    def test_missing_parent_at_commit_is_parent_not_found(self, db, repo):
        db.add(Folder(owner_id="u1", name="Orphan", parent_id="gone"))
        with pytest.raises(ParentNotFoundError):
            folder_operations._commit(repo)
        assert repo.list_all() == []

    def test_other_violations_propagate(self, db, repo):
        folder = create_folder(repo, "CS101")
        folder_id = folder.id
        db.expunge_all()
        db.add(Folder(id=folder_id, owner_id="u1", name="Other"))
        with pytest.raises(IntegrityError):
            folder_operations._commit(repo)
