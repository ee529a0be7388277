"""
Tests for the materials table repository.
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.material import Material
from services.exceptions import NotFoundError, RepositoryError
from services.material_repository import MaterialRepository


@pytest.fixture
def repo(app):
    """Repository comparing attachments by path only."""
    return MaterialRepository()


def _insert(repo, **kwargs):
    fields = {
        "name": "Algebra Notes",
        "description": "Ch1-3",
        "category": "Math",
        "pdf_path": "/uploads/pdfs/1-notes.pdf",
        "image_path": None,
    }
    fields.update(kwargs)
    return repo.insert(**fields)


class TestInsertAndLookup:
    def test_insert_assigns_unique_ids(self, repo):
        first = _insert(repo)
        second = _insert(repo, name="Geometry Notes")

        assert first.id is not None
        assert second.id is not None
        assert first.id != second.id

    def test_find_by_id(self, repo):
        material = _insert(repo)
        found = repo.find_by_id(material.id)
        assert found.name == "Algebra Notes"
        assert found.description == "Ch1-3"

    def test_find_by_id_missing(self, repo):
        assert repo.find_by_id(999) is None

    def test_list_all_in_id_order(self, repo):
        ids = [_insert(repo, name=f"Material {i}").id for i in range(3)]
        assert [m.id for m in repo.list_all()] == ids

    def test_referenced_paths(self, repo):
        _insert(repo, pdf_path="/u/pdfs/a.pdf", image_path="/u/images/a.png")
        _insert(repo, name="Other", pdf_path="/u/pdfs/b.pdf")
        assert repo.referenced_paths() == {
            "/u/pdfs/a.pdf",
            "/u/images/a.png",
            "/u/pdfs/b.pdf",
        }

    def test_missing_required_column_raises_repository_error(self, repo):
        with pytest.raises(RepositoryError):
            _insert(repo, pdf_path=None)
        assert db.session.query(Material).count() == 0


class TestUpdateAndDelete:
    def test_update_changes_fields(self, repo):
        material = _insert(repo)
        repo.update(
            material.id, "New Name", "New desc", "Physics", "/u/pdfs/new.pdf", None
        )

        db.session.expire_all()
        updated = repo.find_by_id(material.id)
        assert updated.name == "New Name"
        assert updated.category == "Physics"
        assert updated.pdf_path == "/u/pdfs/new.pdf"

    def test_update_unknown_id(self, repo):
        with pytest.raises(NotFoundError):
            repo.update(42, "a", "b", "c", "/p.pdf", None)

    def test_delete(self, repo):
        material = _insert(repo)
        repo.delete(material.id)
        assert repo.find_by_id(material.id) is None

    def test_delete_unknown_id(self, repo):
        _insert(repo)
        with pytest.raises(NotFoundError):
            repo.delete(42)
        assert len(repo.list_all()) == 1

    def test_commit_failure_rolls_back(self, app, mocker):
        session = mocker.Mock()
        session.commit.side_effect = SQLAlchemyError("disk I/O error")
        repo = MaterialRepository(session=session)

        with pytest.raises(RepositoryError) as exc:
            _insert(repo)

        assert "Database Error" in exc.value.message
        assert session.add.called
        assert session.rollback.called

    def test_query_failure_raises_repository_error(self, app, mocker):
        session = mocker.Mock()
        session.query.side_effect = SQLAlchemyError("no such table: materials")
        repo = MaterialRepository(session=session)

        with pytest.raises(RepositoryError):
            repo.list_all()
        assert session.rollback.called


class TestFindExactMatch:
    def test_exact_match_without_image(self, repo):
        _insert(repo)
        assert repo.find_exact_match(
            "Algebra Notes", "Ch1-3", "Math", "/uploads/pdfs/1-notes.pdf", None
        )

    def test_different_metadata_does_not_match(self, repo):
        _insert(repo)
        assert not repo.find_exact_match(
            "Algebra Notes", "Ch4", "Math", "/uploads/pdfs/1-notes.pdf", None
        )

    def test_different_document_does_not_match(self, repo):
        _insert(repo)
        assert not repo.find_exact_match(
            "Algebra Notes", "Ch1-3", "Math", "/uploads/pdfs/2-notes.pdf", None
        )

    def test_stored_without_image_matches_any_supplied_image(self, repo):
        _insert(repo)
        assert repo.find_exact_match(
            "Algebra Notes", "Ch1-3", "Math", "/uploads/pdfs/1-notes.pdf", "/u/images/x.png"
        )

    def test_stored_with_image_needs_same_image(self, repo):
        _insert(repo, image_path="/u/images/x.png")
        assert repo.find_exact_match(
            "Algebra Notes", "Ch1-3", "Math", "/uploads/pdfs/1-notes.pdf", "/u/images/x.png"
        )
        assert not repo.find_exact_match(
            "Algebra Notes", "Ch1-3", "Math", "/uploads/pdfs/1-notes.pdf", "/u/images/y.png"
        )

    def test_stored_with_image_does_not_match_missing_image(self, repo):
        _insert(repo, image_path="/u/images/x.png")
        assert not repo.find_exact_match(
            "Algebra Notes", "Ch1-3", "Math", "/uploads/pdfs/1-notes.pdf", None
        )

    def test_custom_attachment_comparison(self, app):
        repo = MaterialRepository(same_attachment=lambda stored, new: True)
        _insert(repo)
        assert repo.find_exact_match(
            "Algebra Notes", "Ch1-3", "Math", "/anything.pdf", None
        )
