from flask import Blueprint, abort, current_app, send_from_directory

from services.attachment_store import AttachmentKind

uploads_bp = Blueprint("uploads", __name__)


@uploads_bp.route("/<partition>/<path:filename>")
def serve_upload(partition, filename):
    """Serve a stored attachment read-only"""
    kind = AttachmentKind.from_partition(partition)
    if kind is None:
        abort(404)

    store = current_app.extensions["materials"].store
    return send_from_directory(store.partition_dir(kind), filename)
