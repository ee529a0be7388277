import enum
import filecmp
import logging
import os
import re
import time

from werkzeug.utils import secure_filename

from services.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)


class AttachmentKind(enum.Enum):
    DOCUMENT = "pdfs"
    IMAGE = "images"

    @property
    def partition(self):
        return self.value

    @classmethod
    def from_partition(cls, partition):
        for kind in cls:
            if kind.partition == partition:
                return kind
        return None


ALLOWED_MIMETYPES = {
    AttachmentKind.DOCUMENT: {"application/pdf"},
    AttachmentKind.IMAGE: {"image/jpeg", "image/png", "image/jpg"},
}

REJECTION_MESSAGES = {
    AttachmentKind.DOCUMENT: "Only PDF files are allowed",
    AttachmentKind.IMAGE: "Only JPG, JPEG, and PNG images are allowed",
}


def sanitize_filename(filename):
    """Replace whitespace with underscores and strip unsafe path characters."""
    name = re.sub(r"\s", "_", filename or "")
    return secure_filename(name) or "upload"


class AttachmentStore:
    """
    Stores uploaded files on local disk, one partition directory per kind.

    Files are named ``<millis>-<sanitized original name>``. Partition
    directories are created on first use.
    """

    def __init__(self, root):
        self.root = os.path.abspath(root)

    def partition_dir(self, kind: AttachmentKind) -> str:
        return os.path.join(self.root, kind.partition)

    def validate(self, kind: AttachmentKind, upload):
        """Reject an upload whose declared media type does not fit ``kind``."""
        mimetype = (getattr(upload, "mimetype", None) or "").lower()
        if mimetype not in ALLOWED_MIMETYPES[kind]:
            raise ValidationError(f"Upload Error: {REJECTION_MESSAGES[kind]}")

    def store(self, kind: AttachmentKind, upload) -> str:
        """
        Validate and write ``upload`` into the partition for ``kind``.

        Args:
            kind: AttachmentKind of the upload
            upload: werkzeug FileStorage (or anything with filename,
                mimetype and save())

        Returns:
            Absolute path of the stored file
        """
        self.validate(kind, upload)

        folder = self.partition_dir(kind)
        safe_name = sanitize_filename(upload.filename)
        prefix = int(time.time() * 1000)
        created = None

        try:
            os.makedirs(folder, exist_ok=True)
            while True:
                file_path = os.path.join(folder, f"{prefix}-{safe_name}")
                try:
                    # "x" refuses to overwrite a file stored in the same millisecond
                    destination = open(file_path, "xb")
                except FileExistsError:
                    prefix += 1
                    continue
                created = file_path
                with destination:
                    upload.save(destination)
                break
        except OSError as e:
            logger.error(f"Failed to store {kind.partition} upload {safe_name}: {e}")
            if created:
                self._discard_partial(created)
            raise StorageError(f"Storage Error: {e}")

        logger.info(f"Stored {kind.partition} upload at {file_path}")
        return file_path

    def _discard_partial(self, file_path):
        try:
            os.remove(file_path)
        except OSError as e:
            logger.warning(f"Could not remove partial upload {file_path}: {e}")

    def remove(self, file_path):
        """Delete ``file_path``. A missing file is not an error."""
        if not file_path:
            return False

        try:
            os.remove(file_path)
        except FileNotFoundError:
            logger.debug(f"File already removed: {file_path}")
            return False
        except OSError as e:
            logger.error(f"Failed to remove {file_path}: {e}")
            raise StorageError(f"Storage Error: {e}")

        logger.info(f"Removed {file_path}")
        return True

    def same_content(self, path_a, path_b) -> bool:
        """True when both paths name the same file or files with identical bytes."""
        if not path_a or not path_b:
            return False
        if os.path.abspath(path_a) == os.path.abspath(path_b):
            return True
        if not (os.path.isfile(path_a) and os.path.isfile(path_b)):
            return False
        try:
            return filecmp.cmp(path_a, path_b, shallow=False)
        except OSError as e:
            logger.warning(f"Could not compare {path_a} and {path_b}: {e}")
            return False

    def orphaned_files(self, referenced_paths):
        """List stored files that no material refers to."""
        referenced = {os.path.abspath(p) for p in referenced_paths if p}
        orphans = []
        for kind in AttachmentKind:
            folder = self.partition_dir(kind)
            if not os.path.isdir(folder):
                continue
            for entry in sorted(os.listdir(folder)):
                file_path = os.path.join(folder, entry)
                if os.path.isfile(file_path) and file_path not in referenced:
                    orphans.append(file_path)
        return orphans
