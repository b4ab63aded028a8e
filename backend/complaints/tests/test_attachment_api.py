"""
Integration tests — complaint attachments.

Endpoints under test:
    GET/POST /api/complaints/{complaint_pk}/attachments/   (complaint-attachment-list)

Uploads are ``multipart/form-data`` with one or more ``attachments`` parts.
"""

from __future__ import annotations

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse

from complaints.models import ComplaintAttachment

pytestmark = pytest.mark.django_db


def _url(complaint) -> str:
    return reverse("complaint-attachment-list", kwargs={"complaint_pk": complaint.pk})


def _pdf(name="report.pdf", body=b"%PDF-1.4 body"):
    return SimpleUploadedFile(name, body, content_type="application/pdf")


class TestAttachments:

    def test_creator_uploads_several_files(self, client_for, officer, make_complaint, media_root):
        complaint = make_complaint()
        photo = SimpleUploadedFile("site.jpg", b"\xff\xd8 jpeg", content_type="image/jpeg")
        resp = client_for(officer).post(
            _url(complaint), {"attachments": [_pdf(), photo]}, format="multipart",
        )
        assert resp.status_code == 201, resp.data
        assert sorted(a["filename"] for a in resp.data) == ["report.pdf", "site.jpg"]
        assert ComplaintAttachment.objects.filter(complaint=complaint).count() == 2

        listed = client_for(officer).get(_url(complaint)).data
        assert {a["mime_type"] for a in listed} == {"application/pdf", "image/jpeg"}

    def test_reviewer_may_upload(self, client_for, dcp, make_complaint, media_root):
        complaint = make_complaint()
        resp = client_for(dcp).post(_url(complaint), {"attachments": [_pdf()]}, format="multipart")
        assert resp.status_code == 201
        assert resp.data[0]["uploaded_by"]["id"] == dcp.pk

    def test_missing_files_is_400(self, client_for, officer, make_complaint):
        complaint = make_complaint()
        resp = client_for(officer).post(_url(complaint), {}, format="multipart")
        assert resp.status_code == 400
        assert resp.data["field"] == "attachments"

    def test_unsupported_type_is_400(self, client_for, officer, make_complaint, media_root):
        complaint = make_complaint()
        script = SimpleUploadedFile("x.sh", b"#!/bin/sh", content_type="application/x-sh")
        resp = client_for(officer).post(
            _url(complaint), {"attachments": [_pdf(), script]}, format="multipart",
        )
        assert resp.status_code == 400
        assert not ComplaintAttachment.objects.exists()

    def test_oversized_file_is_400(self, client_for, officer, make_complaint, media_root, monkeypatch):
        monkeypatch.setattr("complaints.services.MAX_ATTACHMENT_SIZE", 8)
        complaint = make_complaint()
        resp = client_for(officer).post(
            _url(complaint), {"attachments": [_pdf(body=b"0123456789")]}, format="multipart",
        )
        assert resp.status_code == 400
        assert not ComplaintAttachment.objects.exists()

    def test_out_of_scope_upload_is_404(self, client_for, other_officer, make_complaint, media_root):
        complaint = make_complaint()
        resp = client_for(other_officer).post(
            _url(complaint), {"attachments": [_pdf()]}, format="multipart",
        )
        assert resp.status_code == 404
