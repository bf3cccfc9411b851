# FILE: backend/apps/service_catalog/utils/md5_hash.py
"""
Content hashes for extracted service catalog bundles.

An extracted bundle is a directory holding one subdirectory per service. Each
service directory carries a ``metadata.(yaml|yml|json)`` file and its
definition file. The hash of a service is the MD5 of the first two entries of
its directory (by name) concatenated, keyed by the service key, so an import
can skip services whose content has not changed.
"""
import hashlib
import json
import logging
import os

import yaml

from backend.core.exceptions import APIManagementError, ErrorKind

logger = logging.getLogger(__name__)

METADATA_FILE_NAME = 'metadata'
CHUNK_SIZE = 1024


class ServiceHashCache:
    """
    Service key -> content hash store.
    Callers decide its lifetime; pass the same instance to several
    ``generate_hash`` calls to accumulate into one map.
    """

    def __init__(self):
        self._hashes = {}

    def __len__(self):
        return len(self._hashes)

    def __contains__(self, key):
        return key in self._hashes

    def set_hash(self, key, digest):
        self._hashes[key] = digest

    def get_hash_for_endpoint(self, key):
        return self._hashes.get(key)

    def clear(self):
        self._hashes.clear()

    def as_dict(self):
        return dict(self._hashes)


def generate_service_key(service_entry):
    """Key used when the metadata does not declare one."""
    name = str(service_entry.get('name') or '').strip()
    version = str(service_entry.get('version') or '').strip()
    return f"{name}-{version}"


def load_service_metadata(metadata_path):
    """Parse a metadata file into a dict; YAML for .yaml/.yml, JSON otherwise."""
    with open(metadata_path, encoding='utf-8') as f:
        if metadata_path.lower().endswith(('.yaml', '.yml')):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Service metadata in {metadata_path} is not a mapping")
    return data


def get_service_key(metadata_path):
    service_entry = load_service_metadata(metadata_path)
    key = service_entry.get('key') or service_entry.get('serviceKey')
    if key is None or not str(key).strip():
        return generate_service_key(service_entry)
    return str(key)


def get_file_checksum(file_path):
    """Lowercase hex MD5 of a file, read in 1 KiB chunks."""
    digest = hashlib.md5()
    with open(file_path, 'rb') as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
            digest.update(chunk)
    return digest.hexdigest()


def calculate_hash(file_paths):
    """Concatenated digests of the first two files. Fewer than two files raises IndexError."""
    return get_file_checksum(file_paths[0]) + get_file_checksum(file_paths[1])


def generate_hash(path, cache=None):
    """
    Hash every service directory directly under ``path``.

    Returns the ``{service_key: hash}`` map held by ``cache`` (a fresh
    ``ServiceHashCache`` when none is given). A service directory whose
    metadata cannot be read is skipped; one whose files cannot be read raises
    ``APIManagementError``.
    """
    if cache is None:
        cache = ServiceHashCache()

    with os.scandir(path) as entries:
        service_dirs = sorted(entry.path for entry in entries if entry.is_dir())

    for service_dir in service_dirs:
        file_paths = [os.path.join(service_dir, name) for name in sorted(os.listdir(service_dir))]

        key = None
        try:
            for file_path in file_paths:
                if os.path.basename(file_path).startswith(METADATA_FILE_NAME):
                    key = get_service_key(file_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Failed to fetch metadata information from {service_dir}: {e}")
            continue

        try:
            digest = calculate_hash(file_paths)
        except OSError as e:
            logger.error(f"Failed to generate MD5 Hash for {service_dir}", exc_info=e)
            raise APIManagementError(
                f"Failed to generate MD5 Hash due to {e}", ErrorKind.INTERNAL
            ) from e

        if key is None:
            logger.warning(f"No metadata file found in {service_dir}; service skipped")
            continue
        cache.set_hash(key, digest)

    return cache.as_dict()
