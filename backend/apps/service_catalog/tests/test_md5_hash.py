# FILE: backend/apps/service_catalog/tests/test_md5_hash.py
import hashlib
import json
import os
import shutil
import tempfile
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase

from backend.apps.service_catalog.utils.md5_hash import (
    ServiceHashCache,
    generate_hash,
    generate_service_key,
    get_file_checksum,
)
from backend.core.exceptions import APIManagementError, ErrorKind


def md5_hex(data):
    return hashlib.md5(data).hexdigest()


class GenerateHashTests(SimpleTestCase):

    def setUp(self):
        self.root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.root)

    def make_service(self, dir_name, files):
        service_dir = os.path.join(self.root, dir_name)
        os.makedirs(service_dir)
        for name, content in files.items():
            with open(os.path.join(service_dir, name), 'wb') as f:
                f.write(content)
        return service_dir

    def test_hash_is_concatenation_of_first_two_files(self):
        self.make_service('petstore', {
            'a': b'alpha',
            'b': b'bravo',
            'metadata.json': json.dumps({'key': 'petstore-key'}).encode(),
        })

        hashes = generate_hash(self.root)

        self.assertEqual(hashes, {'petstore-key': md5_hex(b'alpha') + md5_hex(b'bravo')})

    def test_files_are_ordered_by_name(self):
        self.make_service('svc', {
            'metadata.yaml': b'key: svc\n',
            'definition.yaml': b'openapi: 3.0.0\n',
        })

        hashes = generate_hash(self.root)

        self.assertEqual(
            hashes['svc'],
            md5_hex(b'openapi: 3.0.0\n') + md5_hex(b'key: svc\n')
        )

    def test_yaml_metadata_with_service_key(self):
        self.make_service('svc', {
            'definition.json': b'{}',
            'metadata.yml': b'serviceKey: yaml-key\nname: svc\n',
        })

        self.assertIn('yaml-key', generate_hash(self.root))

    def test_blank_key_falls_back_to_name_and_version(self):
        self.make_service('svc', {
            'definition.json': b'{}',
            'metadata.json': json.dumps({'key': ' ', 'name': 'Pizza', 'version': 'v1'}).encode(),
        })

        self.assertEqual(list(generate_hash(self.root)), ['Pizza-v1'])

    def test_empty_directory_gives_empty_map(self):
        self.assertEqual(generate_hash(self.root), {})

    def test_plain_files_at_top_level_are_ignored(self):
        with open(os.path.join(self.root, 'README'), 'w') as f:
            f.write('bundle')

        self.assertEqual(generate_hash(self.root), {})

    def test_fewer_than_two_files_raises_index_error(self):
        self.make_service('svc', {'metadata.json': b'{"key": "svc"}'})

        with self.assertRaises(IndexError):
            generate_hash(self.root)

    def test_empty_service_directory_raises_index_error(self):
        os.makedirs(os.path.join(self.root, 'svc'))

        with self.assertRaises(IndexError):
            generate_hash(self.root)

    def test_same_key_later_directory_overwrites(self):
        self.make_service('first', {'a': b'one', 'metadata.json': b'{"key": "dup"}'})
        self.make_service('second', {'a': b'two', 'metadata.json': b'{"key": "dup"}'})

        hashes = generate_hash(self.root)

        self.assertEqual(hashes, {'dup': md5_hex(b'two') + md5_hex(b'{"key": "dup"}')})

    def test_unreadable_metadata_skips_directory(self):
        self.make_service('broken', {'a': b'x', 'metadata.json': b'{not json'})
        self.make_service('good', {'a': b'y', 'metadata.json': b'{"key": "good"}'})

        with self.assertLogs('backend.apps.service_catalog.utils.md5_hash', level='WARNING'):
            hashes = generate_hash(self.root)

        self.assertEqual(list(hashes), ['good'])

    def test_digest_failure_is_internal_error(self):
        service_dir = self.make_service('svc', {'metadata.json': b'{"key": "svc"}'})
        # A directory sorts first and cannot be read as a file
        os.makedirs(os.path.join(service_dir, 'a_nested'))

        with self.assertRaises(APIManagementError) as ctx:
            generate_hash(self.root)

        self.assertIs(ctx.exception.kind, ErrorKind.INTERNAL)
        self.assertTrue(ctx.exception.message.startswith("Failed to generate MD5 Hash due to"))

    def test_missing_path_raises(self):
        with self.assertRaises(FileNotFoundError):
            generate_hash(os.path.join(self.root, 'missing'))

    def test_shared_cache_accumulates(self):
        cache = ServiceHashCache()
        self.make_service('one', {'a': b'1', 'metadata.json': b'{"key": "one"}'})
        generate_hash(self.root, cache)

        other_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, other_root)
        os.makedirs(os.path.join(other_root, 'two'))
        for name, content in (('a', b'2'), ('metadata.json', b'{"key": "two"}')):
            with open(os.path.join(other_root, 'two', name), 'wb') as f:
                f.write(content)
        hashes = generate_hash(other_root, cache)

        self.assertEqual(set(hashes), {'one', 'two'})
        self.assertEqual(cache.get_hash_for_endpoint('two'), hashes['two'])
        cache.clear()
        self.assertIsNone(cache.get_hash_for_endpoint('one'))
        self.assertEqual(len(cache), 0)

    def test_separate_calls_do_not_share_state(self):
        self.make_service('one', {'a': b'1', 'metadata.json': b'{"key": "one"}'})
        generate_hash(self.root)

        other_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, other_root)

        self.assertEqual(generate_hash(other_root), {})


class ChecksumTests(SimpleTestCase):

    def test_checksum_of_large_file_matches_single_pass(self):
        data = os.urandom(5000)
        with tempfile.NamedTemporaryFile(delete=False) as f:
            f.write(data)
        self.addCleanup(os.remove, f.name)

        self.assertEqual(get_file_checksum(f.name), md5_hex(data))

    def test_checksum_of_empty_file(self):
        with tempfile.NamedTemporaryFile(delete=False) as f:
            pass
        self.addCleanup(os.remove, f.name)

        self.assertEqual(get_file_checksum(f.name), 'd41d8cd98f00b204e9800998ecf8427e')

    def test_generate_service_key(self):
        self.assertEqual(generate_service_key({'name': 'Pizza', 'version': '1.0.0'}), 'Pizza-1.0.0')


class HashServicesCommandTests(SimpleTestCase):

    def test_prints_hash_map(self):
        root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, root)
        os.makedirs(os.path.join(root, 'svc'))
        for name, content in (('a', b'alpha'), ('metadata.json', b'{"key": "svc"}')):
            with open(os.path.join(root, 'svc', name), 'wb') as f:
                f.write(content)

        out = StringIO()
        call_command('hash_services', root, stdout=out)

        self.assertIn(md5_hex(b'alpha'), out.getvalue())
        self.assertIn('Hashed 1 service(s)', out.getvalue())

    def test_missing_directory(self):
        with self.assertRaises(CommandError):
            call_command('hash_services', '/nonexistent/catalog', stdout=StringIO())
