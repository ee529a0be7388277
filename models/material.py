import os

from extensions import db


class Material(db.Model):
    __tablename__ = "materials"
    __table_args__ = (db.Index("idx_materials_name_category", "name", "category"),)

    id = db.Column("id", db.Integer, primary_key=True, autoincrement=True)
    name = db.Column("name", db.Text, nullable=False)
    # "desc" is the column name; the Python attribute avoids the SQL keyword
    description = db.Column("desc", db.Text, nullable=False)
    category = db.Column("category", db.Text, nullable=False)

    # Attachment locations on disk
    pdf_path = db.Column("pdf_path", db.Text, nullable=False)
    image_path = db.Column("image_path", db.Text, nullable=True)

    @property
    def pdf_filename(self):
        return os.path.basename(self.pdf_path) if self.pdf_path else None

    @property
    def image_filename(self):
        return os.path.basename(self.image_path) if self.image_path else None

    def to_dict(self):
        """Convert model instance to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "desc": self.description,
            "category": self.category,
            "pdf_path": self.pdf_path,
            "image_path": self.image_path,
        }

    def __repr__(self):
        return f"<Material {self.id}: {self.name}>"

    def __str__(self):
        return f"{self.name} ({self.category})"
