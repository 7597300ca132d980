"""
User-facing notices, keyed by message id and locale.
"""

from typing import Optional

from teacher_admin.core.config import get_config

DEFAULT_LOCALE = "en"

MESSAGES = {
    "en": {
        "teacher_created": "Teacher created successfully!",
        "teacher_updated": "Teacher updated successfully!",
        "teacher_deleted": "Teacher deleted successfully!",
        "teacher_not_found": "Teacher not found",
        "teacher_conflict": "A teacher with the same unique data already exists.",
        "photo_no_temp_path": (
            "Failed to upload photo: the upload has no usable temporary location on the server. "
            "Try again or use another file."
        ),
        "photo_save_error": "An error occurred while saving the photo. Check the log.",
        "photo_too_large": "The photo may not be larger than {max_kb} kilobytes.",
        "photo_bad_extension": "The photo must be a file of type: {extensions}.",
    },
    "id": {
        "teacher_created": "Guru berhasil ditambahkan!",
        "teacher_updated": "Guru berhasil diperbarui!",
        "teacher_deleted": "Guru berhasil dihapus!",
        "teacher_not_found": "Guru tidak ditemukan",
        "teacher_conflict": "Guru dengan data unik yang sama sudah ada.",
        "photo_no_temp_path": (
            "Gagal mengunggah foto: file upload tidak memiliki path sementara pada server. "
            "Coba lagi atau gunakan file lain."
        ),
        "photo_save_error": "Terjadi kesalahan saat menyimpan foto. Periksa log.",
        "photo_too_large": "Foto tidak boleh lebih besar dari {max_kb} kilobita.",
        "photo_bad_extension": "Foto harus berupa file bertipe: {extensions}.",
    },
}


def translate(key: str, locale: Optional[str] = None, **params) -> str:
    """
    Look up a notice for the configured locale, falling back to English.

    Unknown keys are returned unchanged.
    """
    locale = locale or get_config().app.locale
    catalog = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    template = catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
    return template.format(**params) if params else template
