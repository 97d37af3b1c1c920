# tenants/models/base.py

"""
TENANT-SCOPED BASE MODEL

HARD RULE:
- Services never look rows up by id alone. Every read goes through
  for_tenant(ctx) or get_owned(ctx, pk), so a row owned by another
  organization is indistinguishable from a missing one (NotFoundError).
"""

from __future__ import annotations

from django.db import models

from core.errors import NotFoundError


class TenantQuerySet(models.QuerySet):
    def for_tenant(self, ctx):
        return self.filter(organization_id=ctx.organization_id)

    def get_owned(self, ctx, pk, *, for_update: bool = False, label: str | None = None):
        qs = self.for_tenant(ctx)
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError):
            name = label or self.model._meta.verbose_name.title()
            raise NotFoundError(f"{name} not found: {pk}")


TenantManager = models.Manager.from_queryset(TenantQuerySet)


class TenantOwnedModel(models.Model):
    organization = models.ForeignKey(
        "tenants.Organization",
        on_delete=models.CASCADE,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        abstract = True
