"""Service for the notes wiki: note CRUD, soft delete, tree and search."""

import logging
from typing import Dict, List, Optional, Set

from sqlalchemy.orm import Session

from ..models.note import Note, NoteAttribute
from ..repositories.attachment_repository import AttachmentRepository
from ..repositories.note_repository import AttributeRepository, NoteRepository
from ..schemas.note import NoteSearchResult, NoteTreeNode
from ..exceptions import ConsistencyError, NoFieldsSuppliedError, ValidationError
from . import tree_presenter
from .content_utils import html_to_text
from .tree_presenter import name_key

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content", "parent_id", "type")


def _note_key(note: Note) -> str:
    return note.note_id


def _note_parent(note: Note) -> Optional[str]:
    return note.parent_note_id


class NoteService:
    """Business logic for notes.

    Public methods:
        list_notes   -- visible notes of an owner, oldest first
        get_note     -- one visible note with its attributes
        create_note  -- new note at the root or under a visible parent
        update_note  -- partial update of title/content/type/parent
        delete_note  -- soft delete; children are not touched
        get_tree     -- nested notes rebuilt from parent pointers
        search       -- substring search over titles, content, labels, filenames
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = NoteRepository(db)
        self.attribute_repo = AttributeRepository(db)
        self.attachment_repo = AttachmentRepository(db)

    def list_notes(self, owner: str) -> List[Note]:
        return self.repo.get_all(owner)

    def get_note(self, owner: str, note_id: str) -> tuple[Note, List[NoteAttribute]]:
        note = self.repo.get_by_id(owner, note_id)
        return note, self.attribute_repo.get_by_note(note.note_id)

    def create_note(
        self,
        owner: str,
        title: str,
        content: str = "",
        parent_id: Optional[str] = None,
        note_type: str = "note",
    ) -> Note:
        if parent_id is not None:
            self._require_parent(owner, parent_id)
        note = self.repo.create(owner, title, content, parent_id, note_type)
        self.db.commit()
        logger.info(
            "Note created",
            extra={"owner": owner, "note_id": note.note_id, "parent_note_id": parent_id},
        )
        return note

    def update_note(self, owner: str, note_id: str, changes: dict) -> Note:
        """Apply the supplied subset of title/content/type/parent_id.

        ``parent_id`` present with None moves the note to the root; absent
        leaves the parent as it is.
        """
        changes = {
            k: v for k, v in changes.items()
            if k in UPDATABLE_FIELDS and (k == "parent_id" or v is not None)
        }
        if not changes:
            raise NoFieldsSuppliedError(UPDATABLE_FIELDS)

        note = self.repo.get_by_id(owner, note_id)

        if "parent_id" in changes:
            new_parent = changes.pop("parent_id")
            if new_parent is not None:
                if new_parent == note.note_id:
                    raise ValidationError("A note cannot be its own parent", field="parent_id")
                self._require_parent(owner, new_parent)
                if new_parent in self._descendant_ids(owner, note.note_id):
                    raise ValidationError("Cannot move note into its own descendant", field="parent_id")
            changes["parent_note_id"] = new_parent

        if "type" in changes:
            changes["type"] = changes["type"] or "note"

        updated = self.repo.update(note, **changes)
        self.db.commit()
        return updated

    def delete_note(self, owner: str, note_id: str) -> None:
        """Soft delete. Child notes keep their parent pointer and stay visible."""
        note = self.repo.get_by_id(owner, note_id)
        self.repo.soft_delete(note)
        self.db.commit()
        logger.info("Note soft-deleted", extra={"owner": owner, "note_id": note_id})

    def get_tree(self, owner: str) -> List[NoteTreeNode]:
        """Visible notes nested by parent, in creation order.

        A note whose parent is soft-deleted (or otherwise invisible)
        surfaces at the root level.
        """
        forest = self._forest(owner)

        def to_node(note: Note, children: List[NoteTreeNode]) -> NoteTreeNode:
            return NoteTreeNode(
                note_id=note.note_id,
                title=note.title,
                type=note.type,
                parent_note_id=note.parent_note_id,
                children=children,
            )

        return tree_presenter.render(forest, to_node)

    def search(self, owner: str, term: str) -> List[NoteSearchResult]:
        """Notes in tree pre-order whose title, content, attribute values or
        attachment filenames contain *term* (case-insensitive). Content is
        matched on its visible text, never on HTML markup.

        Raises ValidationError for a blank term.
        """
        if not term.strip():
            raise ValidationError("Search term cannot be blank", field="q")
        forest = self._forest(owner)
        note_ids = list(forest.nodes)

        labels: Dict[str, List[str]] = {}
        for attr in self.attribute_repo.get_by_notes(note_ids):
            labels.setdefault(attr.note_id, []).extend([attr.name, attr.value])
        files: Dict[str, List[str]] = {}
        for note_id, filename in self.attachment_repo.get_filenames_by_notes(note_ids):
            files.setdefault(note_id, []).append(filename)

        needle = name_key(term.strip())

        def fields(note: Note) -> Dict[str, List[str]]:
            return {
                "title": [note.title],
                "content": [html_to_text(note.content)],
                "attributes": labels.get(note.note_id, []),
                "attachments": files.get(note.note_id, []),
            }

        def texts(note: Note) -> List[str]:
            return [t for values in fields(note).values() for t in values]

        results = []
        for note in tree_presenter.search(forest, term, texts):
            matched = [
                field for field, values in fields(note).items()
                if any(t and needle in name_key(t) for t in values)
            ]
            results.append(NoteSearchResult(
                note_id=note.note_id,
                title=note.title,
                parent_note_id=note.parent_note_id,
                matched_in=matched,
            ))
        return results

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _forest(self, owner: str) -> tree_presenter.Forest:
        return tree_presenter.build_tree(
            self.repo.get_all(owner), key=_note_key, parent_key=_note_parent
        )

    def _require_parent(self, owner: str, parent_id: str) -> Note:
        parent = self.repo.get_by_id_optional(owner, parent_id)
        if parent is None:
            raise ValidationError(f"Parent note not found: {parent_id}", field="parent_id")
        return parent

    def _descendant_ids(self, owner: str, note_id: str) -> Set[str]:
        """Descendants of *note_id*, soft-deleted ones included, one query per level.

        Hidden notes still carry parent pointers, so a move that would close
        a loop through one of them is refused as well.
        """
        visited: Set[str] = set()
        level = [note_id]
        while level:
            next_level = []
            for child_id in self.repo.get_child_ids(owner, level, include_deleted=True):
                if child_id in visited or child_id == note_id:
                    raise ConsistencyError(
                        "Note hierarchy contains a cycle",
                        details={"note_id": note_id, "revisited": child_id},
                    )
                visited.add(child_id)
                next_level.append(child_id)
            level = next_level
        return visited
