"""
Core models - users and shared model bases.

Admin access is decided by User.role, not by Django's is_staff flag.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model with an application role.

    Only users with role=admin may sign in to the admin API.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        STAFF = "staff", "Staff"

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.STAFF,
    )

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"

    @property
    def is_admin(self) -> bool:
        """Check if the user may use the admin API."""
        return self.role == self.Role.ADMIN


class TimestampedModel(models.Model):
    """
    Abstract base for application records.

    Provides created/updated timestamps. updated_at changes on every save
    and is used as the record version by realtime consumers.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
