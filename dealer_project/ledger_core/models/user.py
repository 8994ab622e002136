from django.contrib.auth.models import AbstractUser
from django.db import models

from ..managers import BackOfficeUserManager


class User(AbstractUser):
    """
    Keeps every AbstractUser field and adds the dealership role.
    Only ADMIN users may enter the back office (see permissions.py).
    """

    class Role(models.TextChoices):
        CUSTOMER = "CUSTOMER", "Customer"
        SALES = "SALES", "Sales"
        ADMIN = "ADMIN", "Admin"

    role = models.CharField(max_length=10, choices=Role.choices, default=Role.CUSTOMER)

    # Home branch, the initial scope until another branch is picked
    location = models.ForeignKey(
        "Location",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,  # keep the user if the site closes
        related_name="staff",
    )

    objects = BackOfficeUserManager()

    def __str__(self):
        return self.get_full_name() or self.username

    @property
    def is_back_office(self):
        return self.role == self.Role.ADMIN
