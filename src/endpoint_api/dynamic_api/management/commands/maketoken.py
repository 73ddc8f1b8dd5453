import time
from argparse import ArgumentParser
from typing import Any

from django.conf import settings
from django.core.management import BaseCommand, CommandError
from jwcrypto.jwt import JWT

from endpoint_api.authentication import get_keyset


class Command(BaseCommand):
    """maketoken command: generates a JWT test token."""

    help = """Generate a JWT test token for an owner, signed with a private key from AUTH_JWKS.
        Pass it as "Authorization: Bearer <token>" to call the dynamic endpoints.
    """

    requires_system_checks = []

    def add_arguments(self, parser: ArgumentParser) -> None:
        """Hook to add arguments."""
        parser.add_argument("owner", help="The owner that the token authenticates")
        parser.add_argument(
            "--valid",
            default=settings.AUTH_TOKEN_VALIDITY,
            type=int,
            help="Validity period, in seconds",
        )

    def handle(self, *args: str, **options: Any) -> None:
        """Main function of this command.

        It creates a JWT test token for the owner with the provided validity.
        """
        signing_keys = sorted(
            (key for key in get_keyset()["keys"] if key.has_private),
            key=lambda key: key.get("kid", ""),
        )
        if not signing_keys:
            raise CommandError("AUTH_JWKS has no private key to sign tokens with.")

        key = signing_keys[0]
        now = int(time.time())
        claims = {
            "iat": now,
            "exp": now + options["valid"],
            settings.AUTH_OWNER_CLAIM: options["owner"],
        }
        alg = "ES256" if key["kty"] == "EC" else "RS256"
        token = JWT(header={"alg": alg, "kid": key.get("kid")}, claims=claims)
        token.make_signed_token(key)
        self.stdout.write(token.serialize())
