"""
Material orchestration: keeps attachment files and material rows in step.

Every operation is a short linear pipeline without a shared transaction:

- create: validate -> store document -> store image -> duplicate check -> insert
- update: validate -> lookup -> replace document -> replace image -> update row
- delete: lookup -> remove files -> delete row

A failure aborts the remaining steps and leaves earlier side effects in
place (files written before a conflict stay on disk, files removed before a
failed row delete stay removed). With ``compensate=True`` the files written by
a failed create/update are removed again; files already deleted cannot be
restored.
"""

import logging

from extensions import cache
from services.attachment_store import AttachmentKind
from services.exceptions import (
    ConflictError,
    MaterialError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

LIST_CACHE_KEY = "material_rows"


def _clean_field(value):
    return value.strip() if isinstance(value, str) else ""


class MaterialService:
    def __init__(self, store, repository, compensate=False, cache_list=False):
        self.store = store
        self.repository = repository
        self.compensate = compensate
        self.cache_list = cache_list

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, material_id):
        material = self.repository.find_by_id(material_id)
        if material is None:
            raise NotFoundError("Material not found.")
        return material

    def list_materials(self):
        """Return every material as a row dictionary.

        Rows come from the cache when ``cache_list`` is set and the cache is warm.
        """
        if self.cache_list:
            rows = cache.get(LIST_CACHE_KEY)
            if rows is not None:
                return rows

        rows = [material.to_dict() for material in self.repository.list_all()]
        if self.cache_list:
            cache.set(LIST_CACHE_KEY, rows)
        return rows

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, name, description, category, document, image=None):
        name, description, category = self._require_fields(name, description, category)
        if not document:
            raise ValidationError("PDF file is required.")

        self.store.validate(AttachmentKind.DOCUMENT, document)
        if image:
            self.store.validate(AttachmentKind.IMAGE, image)

        written = []
        try:
            pdf_path = self.store.store(AttachmentKind.DOCUMENT, document)
            written.append(pdf_path)

            image_path = None
            if image:
                image_path = self.store.store(AttachmentKind.IMAGE, image)
                written.append(image_path)

            if self.repository.find_exact_match(
                name, description, category, pdf_path, image_path
            ):
                raise ConflictError("Material already exists!")

            material = self.repository.insert(
                name, description, category, pdf_path, image_path
            )
        except MaterialError:
            self._discard(written)
            raise

        self._invalidate_list()
        return material

    def update(
        self, material_id, name, description, category, document=None, image=None
    ):
        name, description, category = self._require_fields(name, description, category)
        material = self.get(material_id)

        if document:
            self.store.validate(AttachmentKind.DOCUMENT, document)
        if image:
            self.store.validate(AttachmentKind.IMAGE, image)

        pdf_path = material.pdf_path
        image_path = material.image_path
        written = []
        try:
            if document:
                self.store.remove(material.pdf_path)
                pdf_path = self.store.store(AttachmentKind.DOCUMENT, document)
                written.append(pdf_path)

            # No new image keeps the current one
            if image:
                if material.image_path:
                    self.store.remove(material.image_path)
                image_path = self.store.store(AttachmentKind.IMAGE, image)
                written.append(image_path)

            material = self.repository.update(
                material_id, name, description, category, pdf_path, image_path
            )
        except MaterialError:
            self._discard(written)
            raise

        self._invalidate_list()
        return material

    def delete(self, material_id):
        material = self.get(material_id)

        self.store.remove(material.pdf_path)
        if material.image_path:
            self.store.remove(material.image_path)

        self.repository.delete(material_id)
        self._invalidate_list()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def prune_orphans(self, dry_run=False):
        """Remove stored files that no material refers to. Returns their paths."""
        orphans = self.store.orphaned_files(self.repository.referenced_paths())
        if not dry_run:
            for file_path in orphans:
                self.store.remove(file_path)
        return orphans

    @staticmethod
    def _require_fields(name, description, category):
        values = tuple(_clean_field(v) for v in (name, description, category))
        if not all(values):
            raise ValidationError("Name, description, and category are required.")
        return values

    def _discard(self, paths):
        if not paths:
            return
        if not self.compensate:
            logger.warning(f"Leaving {len(paths)} uploaded file(s) after failed request")
            return

        for file_path in paths:
            try:
                self.store.remove(file_path)
            except StorageError as e:
                logger.error(f"Could not discard {file_path}: {e.message}")

    def _invalidate_list(self):
        cache.delete(LIST_CACHE_KEY)
