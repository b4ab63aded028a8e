"""
Jurisdiction app models.

The fixed four-level geographic hierarchy used to route complaints:

    Commissionerate → DCP Zone → Municipal Zone → ACP Division

Every level below the Commissionerate belongs to exactly one parent.
"""

from django.db import models

from core.models import TimeStampedModel


class Commissionerate(TimeStampedModel):
    """Top-level police commissionerate."""

    name = models.CharField(max_length=255, verbose_name="Name")
    code = models.CharField(max_length=50, blank=True, default="", verbose_name="Code")

    class Meta:
        verbose_name = "Commissionerate"
        verbose_name_plural = "Commissionerates"
        ordering = ["id"]

    def __str__(self):
        return self.name


class DCPZone(TimeStampedModel):
    """Zone supervised by a Deputy Commissioner of Police."""

    name = models.CharField(max_length=255, verbose_name="Name")
    code = models.CharField(max_length=50, blank=True, default="", verbose_name="Code")
    commissionerate = models.ForeignKey(
        Commissionerate,
        on_delete=models.CASCADE,
        related_name="dcp_zones",
        verbose_name="Commissionerate",
    )

    class Meta:
        verbose_name = "DCP Zone"
        verbose_name_plural = "DCP Zones"
        ordering = ["id"]

    def __str__(self):
        return self.name


class MunicipalZone(TimeStampedModel):
    """Municipal zone inside a DCP zone."""

    name = models.CharField(max_length=255, verbose_name="Name")
    code = models.CharField(max_length=50, blank=True, default="", verbose_name="Code")
    dcp_zone = models.ForeignKey(
        DCPZone,
        on_delete=models.CASCADE,
        related_name="municipal_zones",
        verbose_name="DCP Zone",
    )

    class Meta:
        verbose_name = "Municipal Zone"
        verbose_name_plural = "Municipal Zones"
        ordering = ["id"]

    def __str__(self):
        return self.name


class ACPDivision(TimeStampedModel):
    """Division supervised by an Assistant Commissioner of Police."""

    name = models.CharField(max_length=255, verbose_name="Name")
    code = models.CharField(max_length=50, blank=True, default="", verbose_name="Code")
    municipal_zone = models.ForeignKey(
        MunicipalZone,
        on_delete=models.CASCADE,
        related_name="acp_divisions",
        verbose_name="Municipal Zone",
    )

    class Meta:
        verbose_name = "ACP Division"
        verbose_name_plural = "ACP Divisions"
        ordering = ["id"]

    def __str__(self):
        return self.name
