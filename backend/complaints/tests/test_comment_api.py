"""
Integration tests — threaded complaint comments.

Endpoints under test:
    GET/POST      /api/complaints/{complaint_pk}/comments/        (complaint-comment-list)
    PATCH/DELETE  /api/complaints/{complaint_pk}/comments/{id}/   (complaint-comment-detail)
"""

from __future__ import annotations

import pytest
from django.urls import reverse

from complaints.models import Comment

pytestmark = pytest.mark.django_db


def _list_url(complaint) -> str:
    return reverse("complaint-comment-list", kwargs={"complaint_pk": complaint.pk})


def _detail_url(complaint, comment_id) -> str:
    return reverse(
        "complaint-comment-detail", kwargs={"complaint_pk": complaint.pk, "pk": comment_id},
    )


def _post(client, complaint, content, **extra):
    resp = client.post(_list_url(complaint), {"content": content, **extra}, format="json")
    assert resp.status_code == 201, resp.data
    return resp.data["id"]


def _flatten(nodes):
    for node in nodes:
        yield node
        yield from _flatten(node["replies"])


class TestCommentTree:

    def test_tree_order(self, client_for, dcp, make_complaint):
        complaint = make_complaint()
        client = client_for(dcp)
        older = _post(client, complaint, "First root")
        newer = _post(client, complaint, "Second root")
        reply_a = _post(client, complaint, "Reply A", parent_id=older)
        reply_b = _post(client, complaint, "Reply B", parent_id=older)

        tree = client.get(_list_url(complaint)).data
        assert [node["id"] for node in tree] == [newer, older]
        assert [r["id"] for r in tree[1]["replies"]] == [reply_a, reply_b]

    def test_content_is_trimmed_and_required(self, client_for, dcp, make_complaint):
        complaint = make_complaint()
        client = client_for(dcp)
        resp = client.post(_list_url(complaint), {"content": "   "}, format="json")
        assert resp.status_code == 400
        assert resp.data["field"] == "content"

        comment_id = _post(client, complaint, "  Spoke to the respondent.  ")
        assert Comment.objects.get(pk=comment_id).content == "Spoke to the respondent."

    def test_parent_from_other_complaint_is_404(self, client_for, dcp, make_complaint):
        first, second = make_complaint(), make_complaint()
        client = client_for(dcp)
        parent = _post(client, first, "On the first complaint")
        resp = client.post(
            _list_url(second), {"content": "Stray reply", "parent_id": parent}, format="json",
        )
        assert resp.status_code == 404


class TestInternalComments:

    def test_field_officer_never_sees_internal_subtree(self, client_for, officer, dcp, make_complaint):
        complaint = make_complaint()
        dcp_client = client_for(dcp)
        public = _post(dcp_client, complaint, "Visit scheduled")
        internal = _post(dcp_client, complaint, "Respondent is a relative", is_internal=True)
        _post(dcp_client, complaint, "Public follow-up under internal", parent_id=internal)
        _post(dcp_client, complaint, "Internal reply on public", parent_id=public, is_internal=True)

        officer_tree = client_for(officer).get(_list_url(complaint)).data
        visible = list(_flatten(officer_tree))
        assert [node["id"] for node in visible] == [public]
        assert all(not node["is_internal"] for node in visible)

        dcp_tree = dcp_client.get(_list_url(complaint)).data
        assert len(list(_flatten(dcp_tree))) == 4

    def test_field_officer_cannot_post_internal(self, client_for, officer, make_complaint):
        complaint = make_complaint()
        resp = client_for(officer).post(
            _list_url(complaint), {"content": "secret", "is_internal": True}, format="json",
        )
        assert resp.status_code == 403
        assert not Comment.objects.exists()

    def test_field_officer_cannot_reply_to_internal(self, client_for, officer, dcp, make_complaint):
        complaint = make_complaint()
        internal = _post(client_for(dcp), complaint, "Internal note", is_internal=True)
        resp = client_for(officer).post(
            _list_url(complaint), {"content": "reply", "parent_id": internal}, format="json",
        )
        assert resp.status_code == 404

    def test_public_reply_under_internal_is_hidden(self, client_for, officer, dcp, make_complaint):
        complaint = make_complaint()
        internal = _post(client_for(dcp), complaint, "Internal note", is_internal=True)
        public_child = _post(client_for(dcp), complaint, "Public follow-up", parent_id=internal)
        officer_client = client_for(officer)

        resp = officer_client.post(
            _list_url(complaint), {"content": "reply", "parent_id": public_child}, format="json",
        )
        assert resp.status_code == 404
        resp = officer_client.patch(
            _detail_url(complaint, public_child), {"content": "Edited"}, format="json",
        )
        assert resp.status_code == 404
        assert Comment.objects.filter(complaint=complaint).count() == 2

        # Internal readers still reach it.
        resp = client_for(dcp).post(
            _list_url(complaint), {"content": "reply", "parent_id": public_child}, format="json",
        )
        assert resp.status_code == 201


class TestEditAndDelete:

    def test_only_author_or_super_admin_edits(self, client_for, dcp, acp, admin, make_complaint):
        complaint = make_complaint()
        comment_id = _post(client_for(dcp), complaint, "Original")

        resp = client_for(acp).patch(
            _detail_url(complaint, comment_id), {"content": "Hijacked"}, format="json",
        )
        assert resp.status_code == 403

        resp = client_for(dcp).patch(
            _detail_url(complaint, comment_id), {"content": "Edited"}, format="json",
        )
        assert resp.status_code == 200
        assert resp.data["content"] == "Edited"

        resp = client_for(admin).patch(
            _detail_url(complaint, comment_id), {"is_internal": True}, format="json",
        )
        assert resp.status_code == 200
        assert resp.data["is_internal"] is True

    def test_delete_removes_whole_subtree(self, client_for, dcp, make_complaint):
        complaint = make_complaint()
        client = client_for(dcp)
        root = _post(client, complaint, "Root")
        level1 = _post(client, complaint, "Level 1", parent_id=root)
        level2 = _post(client, complaint, "Level 2", parent_id=level1)
        level3 = _post(client, complaint, "Level 3", parent_id=level2)
        sibling = _post(client, complaint, "Sibling", parent_id=root)

        resp = client.delete(_detail_url(complaint, level1))
        assert resp.status_code == 204

        remaining = set(Comment.objects.filter(complaint=complaint).values_list("pk", flat=True))
        assert remaining == {root, sibling}
        assert not Comment.objects.filter(pk__in=[level1, level2, level3]).exists()

    def test_delete_root_removes_deep_thread(self, client_for, dcp, make_complaint):
        complaint = make_complaint()
        client = client_for(dcp)
        root = _post(client, complaint, "Root")
        parent = root
        for depth in range(1, 5):
            parent = _post(client, complaint, f"Depth {depth}", parent_id=parent)
        other_root = _post(client, complaint, "Unrelated")

        assert client.delete(_detail_url(complaint, root)).status_code == 204
        remaining = list(Comment.objects.filter(complaint=complaint).values_list("pk", flat=True))
        assert remaining == [other_root]

    def test_delete_by_non_author_is_403(self, client_for, dcp, commissioner, make_complaint):
        complaint = make_complaint()
        comment_id = _post(client_for(dcp), complaint, "Mine")
        resp = client_for(commissioner).delete(_detail_url(complaint, comment_id))
        assert resp.status_code == 403
        assert Comment.objects.filter(pk=comment_id).exists()
