from django.contrib.auth.base_user import BaseUserManager
from django.db import models
from django.db.models import Q

# Sentinel branch scope: no branch filtering
ALL_BRANCHES = "all"


# -----------------------------------------
# Enforce branch scoping across every model
# attributed to a location
# -----------------------------------------
class BranchQuerySet(models.QuerySet):
    def for_branch(self, branch):  # queryset helper
        # "all" (or nothing selected) means the consolidated view
        if branch in (None, "", ALL_BRANCHES):
            return self.all()
        return self.filter(location_id=branch)  # Apply filter


class BranchManager(models.Manager):
    def get_queryset(self):  # every model gets BranchQuerySet
        return BranchQuerySet(self.model, using=self._db)

    def for_branch(self, branch):  # can call for_branch() directly on objects
        return self.get_queryset().for_branch(branch)

    # Enables query:
    # Invoice.objects.for_branch(request.branch)


class LedgerEntryQuerySet(BranchQuerySet):
    def search(self, text):
        """Free-text match used by the audit trail search box."""
        if not text:
            return self
        return self.filter(
            Q(description__icontains=text)
            | Q(account__code__contains=text)
            | Q(entry_id__icontains=text)
        )

    def excluding_transfers(self):
        # Transfer legs cancel out and never count as revenue or cost
        from .models.ledger import TransactionCategory

        return self.exclude(category=TransactionCategory.TRANSFER)


class LedgerEntryManager(BranchManager):
    def get_queryset(self):
        return LedgerEntryQuerySet(self.model, using=self._db)

    def search(self, text):
        return self.get_queryset().search(text)


""" Enforce rules around how back-office users are created """


class BackOfficeUserManager(BaseUserManager):
    use_in_migrations = True  # Allow Django to serialize this manager in migrations

    # Shared logic for both create_user() & create_superuser()
    def _create_user(self, username, email, password, **extra_fields):
        if not username:  # Username is required
            raise ValueError("The given username must be set")
        email = self.normalize_email(email)
        user = self.model(username=username, email=email, **extra_fields)
        user.set_password(password)  # Password is hashed
        user.save(using=self._db)
        return user

    def create_user(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(username, email, password, **extra_fields)

    # Used by Django when running `createsuperuser`
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        # superusers can always reach the back office
        extra_fields.setdefault("role", "ADMIN")
        if extra_fields.get("is_staff") is not True or extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_staff=True and is_superuser=True")
        return self._create_user(username, email, password, **extra_fields)
