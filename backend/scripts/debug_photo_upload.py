"""
Print the photo upload configuration and check the storage directories.

Usage (from backend directory):
  python -m scripts.debug_photo_upload

Creates the photo directory if it is missing and performs a write test in it.
"""

import sys

from teacher_admin.core.config import get_config, get_public_root
from teacher_admin.services.diagnostics import (
    ensure_photo_dir,
    storage_paths,
    upload_environment,
    write_test,
)
from teacher_admin.services.stores import PUBLIC_NAMESPACE, get_blob_store


def main(out=None) -> int:
    out = out or sys.stdout
    config = get_config()

    def line(text: str = "") -> None:
        print(text, file=out)

    line("=== Photo Upload Debug Info ===")
    line()

    line("1. Storage Configuration:")
    line(f"   Public dir: {config.storage.public_dir}")
    line(f"   Photo namespace: {config.storage.photo_namespace}")
    line(f"   Public URL prefix: {config.storage.public_url_prefix}")
    line()

    line("2. Storage Paths:")
    for entry in storage_paths(config):
        status = "EXISTS" if entry["exists"] else "NOT FOUND"
        permission = ""
        if entry["exists"]:
            permission = "(writable)" if entry["writable"] else "(NOT writable)"
        line(f"   {entry['label']}: {status} {permission}".rstrip())
        if entry["exists"]:
            line(f"      {entry['path']}")
    line()

    line("3. Permission Test:")
    photo_dir = get_public_root() / config.storage.photo_namespace
    if ensure_photo_dir(config):
        line(f"   Created {config.storage.photo_namespace} folder")
    else:
        line(f"   {config.storage.photo_namespace} folder exists")
    if write_test(photo_dir):
        line("   Write test successful")
    else:
        line("   Cannot write to folder")
    line()

    line("4. Upload Configuration:")
    env = upload_environment(config)
    line(f"   upload_max_size: {env['upload_max_size_mb']} MB")
    line(f"   allowed_extensions: {', '.join(env['allowed_extensions'])}")
    line(f"   upload_tmp_dir: {env['upload_tmp_dir']}")
    line(f"   system_tmp_dir: {env['system_tmp_dir']}")
    line(f"   python: {env['python']} ({env['platform']})")
    line()

    line("5. Public URL:")
    sample = f"{config.storage.photo_namespace}/test.jpg"
    line(f"   Photo URL test: {get_blob_store().url(PUBLIC_NAMESPACE, sample)}")
    line()

    line("=== End of Debug Info ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
