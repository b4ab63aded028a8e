"""
Jurisdiction app views.

Each master-data level gets a ``list`` / ``create`` ViewSet.  Reads are
open to every authenticated user; creation is Super Admin only (enforced
in the service layer).
"""

from __future__ import annotations

from rest_framework import serializers, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema

from .serializers import (
    ACPDivisionCreateSerializer,
    ACPDivisionSerializer,
    CommissionerateCreateSerializer,
    CommissionerateSerializer,
    DCPZoneCreateSerializer,
    DCPZoneSerializer,
    MunicipalZoneCreateSerializer,
    MunicipalZoneSerializer,
)
from .services import JurisdictionService


def _int_param(request: Request, name: str) -> int | None:
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise serializers.ValidationError({name: "Must be an integer."})


class CommissionerateViewSet(viewsets.ViewSet):
    """/api/jurisdiction/commissionerates/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List commissionerates",
        responses={200: CommissionerateSerializer(many=True)},
        tags=["Jurisdiction"],
    )
    def list(self, request: Request) -> Response:
        qs = JurisdictionService.list_commissionerates()
        return Response(CommissionerateSerializer(qs, many=True).data)

    @extend_schema(
        summary="Create commissionerate",
        request=CommissionerateCreateSerializer,
        responses={
            201: CommissionerateSerializer,
            403: OpenApiResponse(description="Super Admin only."),
        },
        tags=["Jurisdiction"],
    )
    def create(self, request: Request) -> Response:
        serializer = CommissionerateCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        obj = JurisdictionService.create_commissionerate(request.user, serializer.validated_data)
        return Response(CommissionerateSerializer(obj).data, status=status.HTTP_201_CREATED)


class DCPZoneViewSet(viewsets.ViewSet):
    """/api/jurisdiction/dcp-zones/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List DCP zones",
        parameters=[OpenApiParameter(name="commissionerate", type=int, required=False)],
        responses={200: DCPZoneSerializer(many=True)},
        tags=["Jurisdiction"],
    )
    def list(self, request: Request) -> Response:
        qs = JurisdictionService.list_dcp_zones(_int_param(request, "commissionerate"))
        return Response(DCPZoneSerializer(qs, many=True).data)

    @extend_schema(
        summary="Create DCP zone",
        request=DCPZoneCreateSerializer,
        responses={
            201: DCPZoneSerializer,
            403: OpenApiResponse(description="Super Admin only."),
            404: OpenApiResponse(description="Commissionerate not found."),
        },
        tags=["Jurisdiction"],
    )
    def create(self, request: Request) -> Response:
        serializer = DCPZoneCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        obj = JurisdictionService.create_dcp_zone(request.user, serializer.validated_data)
        return Response(DCPZoneSerializer(obj).data, status=status.HTTP_201_CREATED)


class MunicipalZoneViewSet(viewsets.ViewSet):
    """/api/jurisdiction/municipal-zones/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List municipal zones",
        parameters=[OpenApiParameter(name="dcp_zone", type=int, required=False)],
        responses={200: MunicipalZoneSerializer(many=True)},
        tags=["Jurisdiction"],
    )
    def list(self, request: Request) -> Response:
        qs = JurisdictionService.list_municipal_zones(_int_param(request, "dcp_zone"))
        return Response(MunicipalZoneSerializer(qs, many=True).data)

    @extend_schema(
        summary="Create municipal zone",
        request=MunicipalZoneCreateSerializer,
        responses={
            201: MunicipalZoneSerializer,
            403: OpenApiResponse(description="Super Admin only."),
            404: OpenApiResponse(description="DCP zone not found."),
        },
        tags=["Jurisdiction"],
    )
    def create(self, request: Request) -> Response:
        serializer = MunicipalZoneCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        obj = JurisdictionService.create_municipal_zone(request.user, serializer.validated_data)
        return Response(MunicipalZoneSerializer(obj).data, status=status.HTTP_201_CREATED)


class ACPDivisionViewSet(viewsets.ViewSet):
    """/api/jurisdiction/acp-divisions/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List ACP divisions",
        parameters=[OpenApiParameter(name="municipal_zone", type=int, required=False)],
        responses={200: ACPDivisionSerializer(many=True)},
        tags=["Jurisdiction"],
    )
    def list(self, request: Request) -> Response:
        qs = JurisdictionService.list_acp_divisions(_int_param(request, "municipal_zone"))
        return Response(ACPDivisionSerializer(qs, many=True).data)

    @extend_schema(
        summary="Create ACP division",
        request=ACPDivisionCreateSerializer,
        responses={
            201: ACPDivisionSerializer,
            403: OpenApiResponse(description="Super Admin only."),
            404: OpenApiResponse(description="Municipal zone not found."),
        },
        tags=["Jurisdiction"],
    )
    def create(self, request: Request) -> Response:
        serializer = ACPDivisionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        obj = JurisdictionService.create_acp_division(request.user, serializer.validated_data)
        return Response(ACPDivisionSerializer(obj).data, status=status.HTTP_201_CREATED)
