"""
Complaints app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

Role checks, scoping, state transitions and locking all live in the
service layer.

ViewSets
--------
- ``ComplaintViewSet``  — CRUD + forward + notice workflow actions.
- ``FIRViewSet``        — Nested under complaints for FIR CRUD.
- ``CommentViewSet``    — Nested under complaints for the comment thread.
- ``AttachmentViewSet`` — Nested under complaints for file uploads.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)

from .serializers import (
    CommentCreateSerializer,
    CommentNodeSerializer,
    CommentSerializer,
    CommentUpdateSerializer,
    ComplaintAttachmentSerializer,
    ComplaintCreateSerializer,
    ComplaintDetailSerializer,
    ComplaintFilterSerializer,
    ComplaintListSerializer,
    ComplaintUpdateSerializer,
    FIRCreateSerializer,
    FIRSerializer,
    FIRUpdateSerializer,
    NoticeApproveSerializer,
    NoticeIssueSerializer,
    NoticeRejectSerializer,
    VersionedActionSerializer,
)
from .services import (
    AttachmentService,
    CommentService,
    ComplaintCreationService,
    ComplaintQueryService,
    ComplaintWorkflowService,
    FIRService,
    NoticeWorkflowService,
)

_NOTICE_SLOT = r"(?P<slot>first|second)"


# ═══════════════════════════════════════════════════════════════════
#  Complaint ViewSet
# ═══════════════════════════════════════════════════════════════════


class ComplaintViewSet(viewsets.ViewSet):
    """
    Central ViewSet for complaint management.

    Endpoints
    ---------
    Standard CRUD:
        GET    /api/complaints/                 → list (role-scoped)
        POST   /api/complaints/                 → create (JSON or multipart)
        GET    /api/complaints/{id}/            → retrieve
        PATCH  /api/complaints/{id}/            → partial_update
        DELETE /api/complaints/{id}/            → destroy (Super Admin)

    Workflow Actions:
        POST   /api/complaints/{id}/forward/
        POST   /api/complaints/{id}/notices/{slot}/issue/
        POST   /api/complaints/{id}/notices/{slot}/approve/
        POST   /api/complaints/{id}/notices/{slot}/reject/
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def _detail_response(self, request: Request, complaint_id: int, code: int) -> Response:
        complaint = ComplaintQueryService.get_complaint_detail(request.user, complaint_id)
        serializer = ComplaintDetailSerializer(complaint, context={"request": request})
        return Response(serializer.data, status=code)

    # ── Standard CRUD ────────────────────────────────────────────────

    @extend_schema(
        summary="List complaints",
        parameters=[
            OpenApiParameter(name="status", type=str, location=OpenApiParameter.QUERY, description="Filter by complaint status."),
            OpenApiParameter(name="priority", type=str, location=OpenApiParameter.QUERY, description="Filter by priority."),
            OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY, description="Search code, complainant, nature and place."),
        ],
        responses={
            200: OpenApiResponse(response=ComplaintListSerializer(many=True), description="Complaints visible to the caller."),
        },
        tags=["Complaints"],
    )
    def list(self, request: Request) -> Response:
        filter_serializer = ComplaintFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)

        qs = ComplaintQueryService.get_filtered_queryset(
            request.user, filter_serializer.validated_data,
        )
        return Response(ComplaintListSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create a complaint",
        description=(
            "Create a complaint in PENDING status. Send multipart/form-data "
            "with one or more ``attachments`` files to upload them atomically."
        ),
        request=ComplaintCreateSerializer,
        responses={
            201: OpenApiResponse(response=ComplaintDetailSerializer, description="Complaint created."),
            400: OpenApiResponse(description="Validation error or inconsistent jurisdiction."),
            404: OpenApiResponse(description="Referenced jurisdiction record not found."),
        },
        tags=["Complaints"],
    )
    def create(self, request: Request) -> Response:
        serializer = ComplaintCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintCreationService.create_complaint(
            serializer.validated_data,
            request.user,
            files=request.FILES.getlist("attachments"),
        )
        return self._detail_response(request, complaint.pk, status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve complaint",
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Complaint detail."),
            404: OpenApiResponse(description="Not found or outside the caller's scope."),
        },
        tags=["Complaints"],
    )
    def retrieve(self, request: Request, pk: str = None) -> Response:
        return self._detail_response(request, int(pk), status.HTTP_200_OK)

    @extend_schema(
        summary="Update complaint",
        request=ComplaintUpdateSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Complaint updated."),
            403: OpenApiResponse(description="Role may not act on the current status."),
            409: OpenApiResponse(description="Stale version or status not allowed for the role."),
        },
        tags=["Complaints"],
    )
    def partial_update(self, request: Request, pk: str = None) -> Response:
        serializer = ComplaintUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintWorkflowService.update_complaint(
            request.user, int(pk), serializer.validated_data,
        )
        return self._detail_response(request, complaint.pk, status.HTTP_200_OK)

    @extend_schema(
        summary="Delete complaint",
        responses={
            204: OpenApiResponse(description="Complaint and all dependants deleted."),
            403: OpenApiResponse(description="Super Admin only."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Complaints"],
    )
    def destroy(self, request: Request, pk: str = None) -> Response:
        ComplaintWorkflowService.delete_complaint(request.user, int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ── Workflow @actions ─────────────────────────────────────────────

    @action(detail=True, methods=["post"], url_path="forward")
    @extend_schema(
        summary="Forward to the next review tier",
        request=VersionedActionSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Complaint forwarded."),
            403: OpenApiResponse(description="Role may not act on the current status."),
            409: OpenApiResponse(description="Stale version or no next tier."),
        },
        tags=["Complaints – Workflow"],
    )
    def forward(self, request: Request, pk: str = None) -> Response:
        serializer = VersionedActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintWorkflowService.forward_complaint(
            request.user,
            int(pk),
            expected_version=serializer.validated_data.get("version"),
        )
        return self._detail_response(request, complaint.pk, status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path=rf"notices/{_NOTICE_SLOT}/issue")
    @extend_schema(
        summary="Issue or reissue a notice",
        request=NoticeIssueSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Notice issued; approvals reset."),
            403: OpenApiResponse(description="Role may not issue notices."),
        },
        tags=["Complaints – Notices"],
    )
    def issue_notice(self, request: Request, pk: str = None, slot: str = None) -> Response:
        serializer = NoticeIssueSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = NoticeWorkflowService.issue_notice(
            request.user, int(pk), slot=slot, **serializer.validated_data,
        )
        return self._detail_response(request, complaint.pk, status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path=rf"notices/{_NOTICE_SLOT}/approve")
    @extend_schema(
        summary="Approve a notice stage",
        request=NoticeApproveSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Stage approved."),
            403: OpenApiResponse(description="Role does not own the stage."),
            404: OpenApiResponse(description="Notice not issued."),
            409: OpenApiResponse(description="Out of order, already approved, or terminal notice."),
        },
        tags=["Complaints – Notices"],
    )
    def approve_notice(self, request: Request, pk: str = None, slot: str = None) -> Response:
        serializer = NoticeApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = NoticeWorkflowService.approve_stage(
            request.user,
            int(pk),
            slot=slot,
            stage=serializer.validated_data["stage"],
            expected_version=serializer.validated_data.get("version"),
        )
        return self._detail_response(request, complaint.pk, status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path=rf"notices/{_NOTICE_SLOT}/reject")
    @extend_schema(
        summary="Reject a notice at a stage",
        request=NoticeRejectSerializer,
        responses={
            200: OpenApiResponse(response=ComplaintDetailSerializer, description="Notice rejected."),
            400: OpenApiResponse(description="Empty rejection reason."),
            403: OpenApiResponse(description="Role is below the stage's tier."),
            404: OpenApiResponse(description="Notice not issued."),
            409: OpenApiResponse(description="Stage already approved or terminal notice."),
        },
        tags=["Complaints – Notices"],
    )
    def reject_notice(self, request: Request, pk: str = None, slot: str = None) -> Response:
        serializer = NoticeRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = NoticeWorkflowService.reject_stage(
            request.user,
            int(pk),
            slot=slot,
            stage=serializer.validated_data["stage"],
            reason=serializer.validated_data["reason"],
            expected_version=serializer.validated_data.get("version"),
        )
        return self._detail_response(request, complaint.pk, status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  FIR ViewSet (Nested under Complaints)
# ═══════════════════════════════════════════════════════════════════


class FIRViewSet(viewsets.ViewSet):
    """
    FIRs of one complaint.

    Nested under ``/api/complaints/{complaint_pk}/firs/``.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List FIRs",
        responses={200: OpenApiResponse(response=FIRSerializer(many=True), description="FIRs of the complaint.")},
        tags=["Complaints – FIRs"],
    )
    def list(self, request: Request, complaint_pk: str = None) -> Response:
        qs = FIRService.list_firs(request.user, int(complaint_pk))
        return Response(FIRSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Register FIR",
        request=FIRCreateSerializer,
        responses={
            201: OpenApiResponse(response=FIRSerializer, description="FIR created."),
            409: OpenApiResponse(description="FIR number already exists."),
        },
        tags=["Complaints – FIRs"],
    )
    def create(self, request: Request, complaint_pk: str = None) -> Response:
        serializer = FIRCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fir = FIRService.create_fir(request.user, int(complaint_pk), serializer.validated_data)
        return Response(FIRSerializer(fir).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve FIR",
        responses={200: OpenApiResponse(response=FIRSerializer, description="FIR.")},
        tags=["Complaints – FIRs"],
    )
    def retrieve(self, request: Request, complaint_pk: str = None, pk: str = None) -> Response:
        fir = FIRService.get_fir(request.user, int(complaint_pk), int(pk))
        return Response(FIRSerializer(fir).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update FIR",
        request=FIRUpdateSerializer,
        responses={
            200: OpenApiResponse(response=FIRSerializer, description="FIR updated."),
            409: OpenApiResponse(description="FIR number already exists."),
        },
        tags=["Complaints – FIRs"],
    )
    def partial_update(self, request: Request, complaint_pk: str = None, pk: str = None) -> Response:
        serializer = FIRUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        fir = FIRService.update_fir(
            request.user, int(complaint_pk), int(pk), serializer.validated_data,
        )
        return Response(FIRSerializer(fir).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete FIR",
        responses={204: OpenApiResponse(description="FIR deleted.")},
        tags=["Complaints – FIRs"],
    )
    def destroy(self, request: Request, complaint_pk: str = None, pk: str = None) -> Response:
        FIRService.delete_fir(request.user, int(complaint_pk), int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ═══════════════════════════════════════════════════════════════════
#  Comment ViewSet (Nested under Complaints)
# ═══════════════════════════════════════════════════════════════════


class CommentViewSet(viewsets.ViewSet):
    """
    Threaded discussion of one complaint.

    Nested under ``/api/complaints/{complaint_pk}/comments/``.  The list
    endpoint returns the visible tree, not a flat list.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Comment tree",
        responses={200: OpenApiResponse(description="Root comments newest first, each with nested replies.")},
        tags=["Complaints – Comments"],
    )
    def list(self, request: Request, complaint_pk: str = None) -> Response:
        roots = CommentService.get_comment_tree(request.user, int(complaint_pk))
        return Response(CommentNodeSerializer(roots, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Post a comment or reply",
        request=CommentCreateSerializer,
        responses={
            201: OpenApiResponse(response=CommentSerializer, description="Comment created."),
            403: OpenApiResponse(description="Role may not comment, or may not post internal comments."),
            404: OpenApiResponse(description="Parent comment not visible."),
        },
        tags=["Complaints – Comments"],
    )
    def create(self, request: Request, complaint_pk: str = None) -> Response:
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = CommentService.create_comment(
            request.user, int(complaint_pk), **serializer.validated_data,
        )
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Edit a comment",
        request=CommentUpdateSerializer,
        responses={200: OpenApiResponse(response=CommentSerializer, description="Comment updated.")},
        tags=["Complaints – Comments"],
    )
    def partial_update(self, request: Request, complaint_pk: str = None, pk: str = None) -> Response:
        serializer = CommentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = CommentService.edit_comment(
            request.user, int(complaint_pk), int(pk), serializer.validated_data,
        )
        return Response(CommentSerializer(comment).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete a comment and its replies",
        responses={204: OpenApiResponse(description="Comment subtree deleted.")},
        tags=["Complaints – Comments"],
    )
    def destroy(self, request: Request, complaint_pk: str = None, pk: str = None) -> Response:
        CommentService.delete_comment(request.user, int(complaint_pk), int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ═══════════════════════════════════════════════════════════════════
#  Attachment ViewSet (Nested under Complaints)
# ═══════════════════════════════════════════════════════════════════


class AttachmentViewSet(viewsets.ViewSet):
    """
    Files of one complaint.  Attachments are never edited.

    Nested under ``/api/complaints/{complaint_pk}/attachments/``.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        summary="List attachments",
        responses={200: OpenApiResponse(response=ComplaintAttachmentSerializer(many=True), description="Attachments.")},
        tags=["Complaints – Attachments"],
    )
    def list(self, request: Request, complaint_pk: str = None) -> Response:
        qs = AttachmentService.list_attachments(request.user, int(complaint_pk))
        serializer = ComplaintAttachmentSerializer(qs, many=True, context={"request": request})
        return Response(serializer.data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Upload attachments",
        description="multipart/form-data with one or more ``attachments`` files.",
        responses={
            201: OpenApiResponse(response=ComplaintAttachmentSerializer(many=True), description="Stored attachments."),
            400: OpenApiResponse(description="Missing, oversized or unsupported file."),
        },
        tags=["Complaints – Attachments"],
    )
    def create(self, request: Request, complaint_pk: str = None) -> Response:
        attachments = AttachmentService.upload(
            request.user,
            int(complaint_pk),
            request.FILES.getlist("attachments"),
        )
        serializer = ComplaintAttachmentSerializer(attachments, many=True, context={"request": request})
        return Response(serializer.data, status=status.HTTP_201_CREATED)
