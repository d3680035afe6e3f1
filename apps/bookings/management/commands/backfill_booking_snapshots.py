"""Fill snapshot fields and reference numbers on bookings created without them."""

from django.core.management.base import BaseCommand  # type: ignore
from django.db import transaction  # type: ignore

from apps.bookings.lookup import lookup_entity_info
from apps.bookings.repositories import booking_repo

SNAPSHOT_FIELDS = ("entity_name", "entity_image", "provider_user_id", "provider_name")


class Command(BaseCommand):
    help = "Backfill entity name, image, provider and reference number on legacy bookings"

    def add_arguments(self, parser):  # type: ignore
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would change without saving",
        )

    def handle(self, *args, **options):  # type: ignore
        dry_run = options["dry_run"]
        bookings = booking_repo.find_missing_snapshot()
        self.stdout.write(f"Found {bookings.count()} bookings to backfill")

        updated = 0
        for booking in bookings.iterator():
            snapshot = lookup_entity_info(booking.entity_type, booking.entity_id)
            changed = []
            for field in SNAPSHOT_FIELDS:
                value = getattr(snapshot, field)
                if getattr(booking, field) is None and value is not None:
                    setattr(booking, field, value)
                    changed.append(field)
            if not booking.reference_number:
                booking.reference_number = booking_repo.generate_unique_reference()
                changed.append("reference_number")

            if not changed:
                continue
            updated += 1
            if dry_run:
                self.stdout.write(f"Would update booking {booking.id}: {', '.join(changed)}")
                continue
            with transaction.atomic():
                booking.save(update_fields=changed)
            self.stdout.write(f"Updated booking {booking.id}: {', '.join(changed)}")

        label = "would be updated" if dry_run else "updated"
        self.stdout.write(self.style.SUCCESS(f"{updated} bookings {label}"))
