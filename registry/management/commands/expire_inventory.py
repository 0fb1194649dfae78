from django.core.management.base import BaseCommand

from registry.services.inventory import expire_past_batches


class Command(BaseCommand):
    help = "Mark inventory batches whose expiration date has passed as EXPIRED."

    def handle(self, *args, **options):
        count = expire_past_batches()
        self.stdout.write(self.style.SUCCESS(f"{count} batch(es) marked expired."))
