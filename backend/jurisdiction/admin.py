from django.contrib import admin

from .models import ACPDivision, Commissionerate, DCPZone, MunicipalZone


@admin.register(Commissionerate)
class CommissionerateAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "code")
    search_fields = ("name", "code")


@admin.register(DCPZone)
class DCPZoneAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "code", "commissionerate")
    list_filter = ("commissionerate",)
    search_fields = ("name", "code")


@admin.register(MunicipalZone)
class MunicipalZoneAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "code", "dcp_zone")
    list_filter = ("dcp_zone",)
    search_fields = ("name", "code")


@admin.register(ACPDivision)
class ACPDivisionAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "code", "municipal_zone")
    list_filter = ("municipal_zone",)
    search_fields = ("name", "code")
