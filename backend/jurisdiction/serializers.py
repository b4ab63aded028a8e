"""
Jurisdiction app serializers.

Response serializers nest the parent's id and name; request serializers
take the parent as a plain ``*_id`` integer and leave the existence check
to ``JurisdictionService``.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import ACPDivision, Commissionerate, DCPZone, MunicipalZone


class CommissionerateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Commissionerate
        fields = ["id", "name", "code", "created_at"]
        read_only_fields = ["id", "created_at"]


class DCPZoneSerializer(serializers.ModelSerializer):
    commissionerate_name = serializers.CharField(source="commissionerate.name", read_only=True)

    class Meta:
        model = DCPZone
        fields = ["id", "name", "code", "commissionerate", "commissionerate_name", "created_at"]
        read_only_fields = fields


class MunicipalZoneSerializer(serializers.ModelSerializer):
    dcp_zone_name = serializers.CharField(source="dcp_zone.name", read_only=True)

    class Meta:
        model = MunicipalZone
        fields = ["id", "name", "code", "dcp_zone", "dcp_zone_name", "created_at"]
        read_only_fields = fields


class ACPDivisionSerializer(serializers.ModelSerializer):
    municipal_zone_name = serializers.CharField(source="municipal_zone.name", read_only=True)

    class Meta:
        model = ACPDivision
        fields = ["id", "name", "code", "municipal_zone", "municipal_zone_name", "created_at"]
        read_only_fields = fields


# ── Request serializers ─────────────────────────────────────────────


class _MasterDataCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    code = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value


class CommissionerateCreateSerializer(_MasterDataCreateSerializer):
    pass


class DCPZoneCreateSerializer(_MasterDataCreateSerializer):
    commissionerate_id = serializers.IntegerField(min_value=1)


class MunicipalZoneCreateSerializer(_MasterDataCreateSerializer):
    dcp_zone_id = serializers.IntegerField(min_value=1)


class ACPDivisionCreateSerializer(_MasterDataCreateSerializer):
    municipal_zone_id = serializers.IntegerField(min_value=1)
