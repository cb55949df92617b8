from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from savage_nation.accounts.models import UserRole


class Command(BaseCommand):
    help = 'Gives a user the admin role on the user_roles table (or takes it away with --revoke)'

    def add_arguments(self, parser):
        parser.add_argument("identifier", help="Username or email address")
        parser.add_argument("--revoke", action="store_true", help="Remove the admin role instead")

    def handle(self, *args, **options):
        User = get_user_model()
        identifier = options["identifier"].strip()
        user = (
            User.objects.filter(username__iexact=identifier).first()
            or User.objects.filter(email__iexact=identifier).first()
        )
        if user is None:
            raise CommandError(f"No user matches {identifier!r}")

        if options["revoke"]:
            deleted, _ = UserRole.objects.filter(user=user, role=UserRole.ROLE_ADMIN).delete()
            message = "Admin role removed." if deleted else "User was not an admin."
        else:
            _, created = UserRole.objects.get_or_create(user=user, role=UserRole.ROLE_ADMIN)
            message = "Admin role granted." if created else "User is already an admin."

        self.stdout.write(self.style.SUCCESS(f"{user.get_username()}: {message}"))
