import logging
import os

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models.material import Material
from services.exceptions import NotFoundError, RepositoryError

logger = logging.getLogger(__name__)


def _same_path(path_a, path_b):
    return os.path.abspath(path_a) == os.path.abspath(path_b)


class MaterialRepository:
    """
    Data access for the materials table.

    ``same_attachment`` decides whether a stored attachment path and a newly
    stored one refer to the same file; it defaults to path equality.
    """

    def __init__(self, session=None, same_attachment=None):
        self._session = session
        self.same_attachment = same_attachment or _same_path

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def find_exact_match(self, name, description, category, pdf_path, image_path=None):
        """
        Return True when a material with the same fields and attachments exists.

        A stored material without an image matches regardless of the supplied
        image. A material stored with an image never matches a submission
        without one.
        """
        try:
            candidates = (
                self.session.query(Material)
                .filter_by(name=name, description=description, category=category)
                .all()
            )
        except SQLAlchemyError as e:
            self._fail("duplicate check", e)

        for material in candidates:
            if not self.same_attachment(material.pdf_path, pdf_path):
                continue
            if material.image_path is None:
                return True
            if image_path is not None and self.same_attachment(
                material.image_path, image_path
            ):
                return True
        return False

    def find_by_id(self, material_id):
        try:
            return self.session.get(Material, material_id)
        except SQLAlchemyError as e:
            self._fail("lookup", e)

    def list_all(self):
        try:
            return self.session.query(Material).order_by(Material.id.asc()).all()
        except SQLAlchemyError as e:
            self._fail("fetch", e)

    def referenced_paths(self):
        """All attachment paths recorded in the table."""
        try:
            rows = self.session.query(Material.pdf_path, Material.image_path).all()
        except SQLAlchemyError as e:
            self._fail("fetch", e)

        paths = set()
        for pdf_path, image_path in rows:
            paths.add(pdf_path)
            if image_path:
                paths.add(image_path)
        return paths

    def insert(self, name, description, category, pdf_path, image_path=None):
        material = Material(
            name=name,
            description=description,
            category=category,
            pdf_path=pdf_path,
            image_path=image_path,
        )
        self.session.add(material)
        self._commit("insert")
        logger.info(f"Inserted material {material.id} ({name})")
        return material

    def update(self, material_id, name, description, category, pdf_path, image_path):
        material = self.find_by_id(material_id)
        if material is None:
            raise NotFoundError("Material not found.")

        material.name = name
        material.description = description
        material.category = category
        material.pdf_path = pdf_path
        material.image_path = image_path
        self._commit("update")
        logger.info(f"Updated material {material_id}")
        return material

    def delete(self, material_id):
        material = self.find_by_id(material_id)
        if material is None:
            raise NotFoundError("Material not found.")

        self.session.delete(material)
        self._commit("delete")
        logger.info(f"Deleted material {material_id}")

    def _commit(self, action):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self._fail(action, e)

    def _fail(self, action, error):
        self.session.rollback()
        logger.error(f"Database {action} error: {error}")
        raise RepositoryError(f"Database Error: {error}")
