# events/models.py

"""
EVENT (fair, market, pop-up)

- status is DERIVED from the clock, never stored:
  PLANNED before starts_at, ACTIVE until ends_at, COMPLETED afterwards.
- fixed_cost = booth/entry fee known up front.
- Extra expenses are EXPENSE transactions with reference EVENT/<event id>.
- Sales attached to the event post their INCOME with reference EVENT/<event id>.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from tenants.models import TenantOwnedModel


class Event(TenantOwnedModel):
    class Status(models.TextChoices):
        PLANNED = "PLANNED", "Planned"
        ACTIVE = "ACTIVE", "Active"
        COMPLETED = "COMPLETED", "Completed"

    name = models.CharField(max_length=255)
    location = models.CharField(max_length=255, blank=True, default="")
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    fixed_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "events"
        ordering = ["-starts_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(ends_at__gte=models.F("starts_at")),
                name="chk_event_ends_after_start",
            ),
            models.CheckConstraint(
                condition=Q(fixed_cost__gte=0),
                name="chk_event_fixed_cost_gte_zero",
            ),
        ]

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Name is required"})
        if self.starts_at and self.ends_at and self.starts_at > self.ends_at:
            raise ValidationError({"ends_at": "ends_at must be after starts_at"})

    def status_at(self, moment) -> str:
        if moment < self.starts_at:
            return self.Status.PLANNED
        if moment <= self.ends_at:
            return self.Status.ACTIVE
        return self.Status.COMPLETED

    @property
    def status(self) -> str:
        return self.status_at(timezone.now())

    def __str__(self):
        return self.name
