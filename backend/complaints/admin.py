from django.contrib import admin

from .models import FIR, Comment, Complaint, ComplaintAttachment, Notice


class NoticeInline(admin.StackedInline):
    model = Notice
    extra = 0
    readonly_fields = ("issued_by", "issued_at",
                       "dcp_approved_by", "dcp_approved_at",
                       "acp_approved_by", "acp_approved_at",
                       "commissioner_approved_by", "commissioner_approved_at",
                       "rejected_by", "rejected_at", "rejected_stage")


class FIRInline(admin.TabularInline):
    model = FIR
    extra = 0
    fields = ("fir_number", "registration_date", "police_station", "status")


class ComplaintAttachmentInline(admin.TabularInline):
    model = ComplaintAttachment
    extra = 0
    readonly_fields = ("filename", "mime_type", "size", "uploaded_by", "created_at")


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ("id", "complaint_code", "complainant_name", "status",
                    "priority", "assigned_to", "created_at")
    list_filter = ("status", "priority", "commissionerate")
    search_fields = ("complaint_code", "unique_code", "complainant_name",
                     "nature_of_complaint")
    readonly_fields = ("complaint_code", "unique_code", "version")
    inlines = [NoticeInline, FIRInline, ComplaintAttachmentInline]


@admin.register(Notice)
class NoticeAdmin(admin.ModelAdmin):
    list_display = ("complaint", "slot", "number", "status",
                    "awaiting_higher_authority", "issued_at")
    list_filter = ("slot", "status")


@admin.register(FIR)
class FIRAdmin(admin.ModelAdmin):
    list_display = ("fir_number", "complaint", "police_station",
                    "status", "registration_date")
    list_filter = ("status",)
    search_fields = ("fir_number", "police_station")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "complaint", "parent", "created_by",
                    "is_internal", "created_at")
    list_filter = ("is_internal",)


@admin.register(ComplaintAttachment)
class ComplaintAttachmentAdmin(admin.ModelAdmin):
    list_display = ("filename", "complaint", "mime_type", "size", "created_at")
