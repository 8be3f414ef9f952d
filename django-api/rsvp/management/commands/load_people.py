"""Import the employee roster from a CSV file.

The file needs a header row with ``name`` and ``department`` columns and may
carry a ``role`` column. People whose name is already on the roster are
skipped.
"""

import csv
import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from rsvp.models import Person

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"name", "department"}


class Command(BaseCommand):
    help = "Load people into the roster from a CSV file, skipping known names."

    def add_arguments(self, parser):
        parser.add_argument("path", type=Path)
        parser.add_argument("--delimiter", default=",")

    def handle(self, *args, path: Path, delimiter: str, **options):
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        with path.open(newline="", encoding="utf-8-sig") as handle:
            reader = csv.DictReader(handle, delimiter=delimiter)
            missing = REQUIRED_COLUMNS - set(reader.fieldnames or ())
            if missing:
                raise CommandError(f"Missing columns: {', '.join(sorted(missing))}")
            rows = [row for row in reader if (row.get("name") or "").strip()]

        known = set(Person.objects.values_list("name", flat=True))
        people = []
        for row in rows:
            name = row["name"].strip()
            if name in known:
                continue
            known.add(name)
            people.append(
                Person(
                    name=name,
                    department=(row.get("department") or "").strip(),
                    role=(row.get("role") or "").strip(),
                )
            )

        with transaction.atomic():
            Person.objects.bulk_create(people)

        logger.info("Loaded %d people from %s", len(people), path)
        self.stdout.write(
            self.style.SUCCESS(
                f"Loaded {len(people)} people, skipped {len(rows) - len(people)}"
            )
        )
