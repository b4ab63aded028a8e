"""
Accounts app models.

Defines the fixed role enumeration of the complaint-review hierarchy and
a custom User model that extends Django's ``AbstractUser``.  Every user
holds exactly one role; the role decides which complaint statuses the
user may act on and which notice-approval stage they own.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    """
    Authority tiers, lowest to highest review tier first.

    ``SUPER_ADMIN`` overrides every workflow restriction.
    ``COMPLAINANT`` is the default for newly created accounts and has no
    review authority.
    """

    FIELD_OFFICER = "FIELD_OFFICER", "Field Officer"
    DCP = "DCP", "Deputy Commissioner of Police"
    ACP = "ACP", "Assistant Commissioner of Police"
    COMMISSIONER = "COMMISSIONER", "Commissioner"
    SUPER_ADMIN = "SUPER_ADMIN", "Super Admin"
    COMPLAINANT = "COMPLAINANT", "Complainant"


class User(AbstractUser):
    """
    Custom user model for the complaint-tracking system.

    Login is supported via *any one* of username / national_id /
    phone_number / email together with the password.
    """

    national_id = models.CharField(
        max_length=20,
        unique=True,
        verbose_name="National ID",
        db_index=True,
    )
    phone_number = models.CharField(
        max_length=15,
        unique=True,
        verbose_name="Phone Number",
        db_index=True,
    )
    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.COMPLAINANT,
        verbose_name="Role",
        db_index=True,
    )

    # Fields required when creating a superuser via CLI
    REQUIRED_FIELDS = ["email", "national_id", "phone_number",
                       "first_name", "last_name"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["username"]

    def __str__(self):
        return f"{self.username} ({self.get_full_name()}) - {self.get_role_display()}"

    def has_role(self, *roles: str) -> bool:
        """Check if the user's current role is one of ``roles``."""
        return self.role in roles

    @property
    def is_super_admin(self) -> bool:
        return self.is_superuser or self.role == Role.SUPER_ADMIN
