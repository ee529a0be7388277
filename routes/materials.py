import os

from flask import Blueprint, current_app, jsonify, request, url_for
from werkzeug.exceptions import RequestEntityTooLarge

from extensions import limiter
from services.attachment_store import AttachmentKind
from services.exceptions import MaterialError, ValidationError

materials_bp = Blueprint("materials", __name__)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================


def _upload_limit():
    return current_app.config.get("UPLOAD_RATE_LIMIT", "30 per minute")


def _service():
    return current_app.extensions["materials"]


def _single_upload(field):
    """Return the one file posted under ``field``, or None if absent."""
    files = [f for f in request.files.getlist(field) if f and f.filename]
    if len(files) > 1:
        raise ValidationError("Upload Error: Unexpected field")
    return files[0] if files else None


def attachment_link(kind, file_path):
    """Absolute URL for a stored attachment, built from the request host."""
    if not file_path:
        return None
    return url_for(
        "uploads.serve_upload",
        partition=kind.partition,
        filename=os.path.basename(file_path),
        _external=True,
    )


def with_links(row):
    """Add pdf_link / image_link to a material row dictionary."""
    return {
        **row,
        "pdf_link": attachment_link(AttachmentKind.DOCUMENT, row["pdf_path"]),
        "image_link": attachment_link(AttachmentKind.IMAGE, row["image_path"]),
    }


def material_payload(material):
    return {
        "id": material.id,
        "name": material.name,
        "desc": material.description,
        "category": material.category,
        "pdf_link": attachment_link(AttachmentKind.DOCUMENT, material.pdf_path),
        "image_link": attachment_link(AttachmentKind.IMAGE, material.image_path),
    }


# ============================================================================
# ERROR HANDLERS
# ============================================================================


@materials_bp.errorhandler(MaterialError)
def handle_material_error(error):
    if error.status_code >= 500:
        current_app.logger.error(f"{request.method} {request.path}: {error.message}")
    else:
        current_app.logger.warning(
            f"{request.method} {request.path} rejected ({error.status_code}): {error.message}"
        )
    return jsonify(error.to_dict()), error.status_code


@materials_bp.errorhandler(RequestEntityTooLarge)
def handle_too_large(error):
    limit_mb = current_app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
    return jsonify({"error": f"Upload Error: File too large (limit {limit_mb}MB)"}), 413


# ============================================================================
# MATERIAL ROUTES
# ============================================================================


@materials_bp.route("", methods=["POST"])
@limiter.limit(_upload_limit)
def create_material():
    """Create a material from a multipart form with a PDF and optional image"""
    material = _service().create(
        name=request.form.get("name"),
        description=request.form.get("desc"),
        category=request.form.get("category"),
        document=_single_upload("pdf"),
        image=_single_upload("image"),
    )
    return (
        jsonify(
            {
                "message": "Material added successfully!",
                "material": material_payload(material),
            }
        ),
        201,
    )


@materials_bp.route("", methods=["GET"])
def list_materials():
    rows = _service().list_materials()
    return jsonify([with_links(row) for row in rows])


@materials_bp.route("/<int:material_id>", methods=["GET"])
def get_material(material_id):
    material = _service().get(material_id)
    return jsonify(with_links(material.to_dict()))


@materials_bp.route("/<int:material_id>", methods=["PUT"])
@limiter.limit(_upload_limit)
def update_material(material_id):
    """Update metadata and optionally replace the PDF and/or image"""
    material = _service().update(
        material_id,
        name=request.form.get("name"),
        description=request.form.get("desc"),
        category=request.form.get("category"),
        document=_single_upload("pdf"),
        image=_single_upload("image"),
    )
    return jsonify(
        {
            "message": "Material updated successfully!",
            "material": material_payload(material),
        }
    )


@materials_bp.route("/<int:material_id>", methods=["DELETE"])
@limiter.limit(_upload_limit)
def delete_material(material_id):
    _service().delete(material_id)
    return jsonify({"message": "Material deleted successfully."})
