from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from registry.models import User

TEST_SET = [
    ("doctor1", User.ROLE_DOCTOR),
    ("nurse1", User.ROLE_NURSE),
    ("parent1", User.ROLE_PARENT),
]


class Command(BaseCommand):
    help = "Ensure test users exist and password=123456 (idempotent)."

    def handle(self, *args, **opts):
        for username, role in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={
                    "role": role,
                    "email": f"{username}@example.com",
                    "password": make_password("123456"),
                    "is_active": True,
                },
            )
            if not created:
                # Reset password, role and active flag on existing rows
                u.password = make_password("123456")
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
