# FILE: backend/apps/service_catalog/management/commands/hash_services.py
import json

from django.core.management.base import BaseCommand, CommandError

from backend.apps.service_catalog.utils.md5_hash import generate_hash
from backend.core.exceptions import APIManagementError


class Command(BaseCommand):
    help = 'Print the content hash of every service directory in an extracted catalog bundle'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Directory holding one subdirectory per service')
        parser.add_argument(
            '--indent',
            type=int,
            default=2,
            help='JSON indentation of the printed map'
        )

    def handle(self, *args, **options):
        path = options['path']
        try:
            hashes = generate_hash(path)
        except FileNotFoundError as e:
            raise CommandError(f"Directory not found: {path}") from e
        except IndexError as e:
            raise CommandError("Every service directory must hold at least two files") from e
        except APIManagementError as e:
            raise CommandError(e.message) from e

        self.stdout.write(json.dumps(hashes, indent=options['indent'], sort_keys=True))
        self.stdout.write(self.style.SUCCESS(f"Hashed {len(hashes)} service(s)"))
