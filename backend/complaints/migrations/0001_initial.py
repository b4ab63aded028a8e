# Generated manually: complaint aggregate (complaint, notices, FIRs, comments, attachments)

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion

USER = settings.AUTH_USER_MODEL

STATUS_CHOICES = [
    ('PENDING', 'Pending'),
    ('UNDER_REVIEW_DCP', 'Under Review (DCP)'),
    ('UNDER_REVIEW_ACP', 'Under Review (ACP)'),
    ('UNDER_REVIEW_COMMISSIONER', 'Under Review (Commissioner)'),
    ('INVESTIGATION_IN_PROGRESS', 'Investigation In Progress'),
    ('LEGAL_REVIEW', 'Legal Review'),
    ('RESOLVED', 'Resolved'),
    ('REJECTED', 'Rejected'),
    ('CLOSED', 'Closed'),
]
PRIORITY_CHOICES = [
    ('LOW', 'Low'),
    ('NORMAL', 'Normal'),
    ('HIGH', 'High'),
    ('URGENT', 'Urgent'),
]
STAGE_CHOICES = [('dcp', 'DCP'), ('acp', 'ACP'), ('commissioner', 'Commissioner')]
FIR_STATUS_CHOICES = [
    ('REGISTERED', 'Registered'),
    ('UNDER_INVESTIGATION', 'Under Investigation'),
    ('CHARGESHEET_FILED', 'Chargesheet Filed'),
    ('COURT_PROCEEDINGS', 'Court Proceedings'),
    ('CLOSED', 'Closed'),
    ('WITHDRAWN', 'Withdrawn'),
]


def _id():
    return ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID'))


def _timestamps():
    return [
        ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
        ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
    ]


def _optional_user(related_name, verbose_name):
    return models.ForeignKey(
        blank=True,
        null=True,
        on_delete=django.db.models.deletion.SET_NULL,
        related_name=related_name,
        to=USER,
        verbose_name=verbose_name,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('jurisdiction', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Complaint',
            fields=[
                _id(),
                *_timestamps(),
                ('complaint_code', models.CharField(max_length=40, unique=True, verbose_name='Complaint Code')),
                ('unique_code', models.CharField(max_length=50, unique=True, verbose_name='Unique Reference Code')),
                ('nature_of_complaint', models.CharField(max_length=255, verbose_name='Nature of Complaint')),
                ('place_of_complaint', models.CharField(max_length=255, verbose_name='Place of Complaint')),
                ('complainant_name', models.CharField(max_length=255, verbose_name='Name of the Complainant')),
                ('complainant_phone', models.CharField(blank=True, default='', max_length=16, verbose_name='Complainant Phone')),
                ('complainant_address', models.TextField(blank=True, default='', verbose_name='Complainant Address')),
                ('respondent_details', models.TextField(blank=True, default='', verbose_name='Details of Respondent')),
                ('brief_details', models.TextField(verbose_name='Brief Details of the Complaint')),
                ('source', models.CharField(blank=True, default='', max_length=100, verbose_name='Source')),
                ('mode', models.CharField(blank=True, default='', max_length=100, verbose_name='Mode')),
                ('priority', models.CharField(choices=PRIORITY_CHOICES, db_index=True, default='NORMAL', max_length=10, verbose_name='Priority')),
                ('status', models.CharField(choices=STATUS_CHOICES, db_index=True, default='PENDING', max_length=30, verbose_name='Status')),
                ('version', models.PositiveIntegerField(default=1, verbose_name='Version')),
                ('action_taken_details', models.TextField(blank=True, default='', verbose_name='Action Taken (Brief Details)')),
                ('legal_issues', models.TextField(blank=True, default='', verbose_name='Legal Issues')),
                ('investigation_officer_remarks', models.TextField(blank=True, default='', verbose_name='Investigation Officer Review Comments')),
                ('field_visit_date', models.DateField(blank=True, null=True, verbose_name='Field Visit Date')),
                ('pe_report', models.TextField(blank=True, default='', verbose_name='Preliminary Enquiry Report')),
                ('pe_status', models.CharField(blank=True, default='', max_length=50, verbose_name='Preliminary Enquiry Status')),
                ('created_by', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='created_complaints',
                    to=USER,
                    verbose_name='Created By',
                )),
                ('assigned_to', _optional_user('assigned_complaints', 'Assigned To')),
                ('updated_by', _optional_user('updated_complaints', 'Last Updated By')),
                ('commissionerate', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='complaints',
                    to='jurisdiction.commissionerate',
                    verbose_name='Commissionerate',
                )),
                ('dcp_zone', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='complaints',
                    to='jurisdiction.dcpzone',
                    verbose_name='DCP Zone',
                )),
                ('municipal_zone', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='complaints',
                    to='jurisdiction.municipalzone',
                    verbose_name='Municipal Zone',
                )),
                ('acp_division', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='complaints',
                    to='jurisdiction.acpdivision',
                    verbose_name='ACP Division',
                )),
            ],
            options={
                'verbose_name': 'Complaint',
                'verbose_name_plural': 'Complaints',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Notice',
            fields=[
                _id(),
                *_timestamps(),
                ('slot', models.CharField(choices=[('first', 'Notice 1'), ('second', 'Notice 2')], max_length=10, verbose_name='Notice Slot')),
                ('number', models.CharField(max_length=100, verbose_name='Notice Number')),
                ('issue_date', models.DateField(verbose_name='Issue Date')),
                ('status', models.CharField(
                    choices=[('PENDING', 'Pending'), ('APPROVED', 'Approved'), ('REJECTED', 'Rejected')],
                    default='PENDING',
                    max_length=10,
                    verbose_name='Approval Status',
                )),
                ('issued_at', models.DateTimeField(blank=True, null=True, verbose_name='Issued At')),
                ('awaiting_higher_authority', models.BooleanField(
                    default=False,
                    help_text='Set when a Field Officer issues the notice; cleared by the first approval.',
                    verbose_name='Awaiting Higher Authority',
                )),
                ('dcp_approved_at', models.DateTimeField(blank=True, null=True, verbose_name='DCP Approved At')),
                ('acp_approved_at', models.DateTimeField(blank=True, null=True, verbose_name='ACP Approved At')),
                ('commissioner_approved_at', models.DateTimeField(blank=True, null=True, verbose_name='Commissioner Approved At')),
                ('rejected_at', models.DateTimeField(blank=True, null=True, verbose_name='Rejected At')),
                ('rejected_stage', models.CharField(blank=True, choices=STAGE_CHOICES, default='', max_length=15, verbose_name='Rejected At Stage')),
                ('rejection_reason', models.TextField(blank=True, default='', verbose_name='Rejection Reason')),
                ('complaint', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='notices',
                    to='complaints.complaint',
                    verbose_name='Complaint',
                )),
                ('issued_by', _optional_user('issued_notices', 'Issued By')),
                ('dcp_approved_by', _optional_user('+', 'DCP Approved By')),
                ('acp_approved_by', _optional_user('+', 'ACP Approved By')),
                ('commissioner_approved_by', _optional_user('+', 'Commissioner Approved By')),
                ('rejected_by', _optional_user('+', 'Rejected By')),
            ],
            options={
                'verbose_name': 'Notice',
                'verbose_name_plural': 'Notices',
                'ordering': ['complaint', 'slot'],
                'constraints': [
                    models.UniqueConstraint(fields=('complaint', 'slot'), name='unique_notice_slot_per_complaint'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FIR',
            fields=[
                _id(),
                *_timestamps(),
                ('fir_number', models.CharField(max_length=100, unique=True, verbose_name='FIR Number')),
                ('registration_date', models.DateField(verbose_name='Date of Registration')),
                ('police_station', models.CharField(max_length=255, verbose_name='Police Station')),
                ('investigating_officer', models.CharField(blank=True, default='', max_length=255, verbose_name='Investigating Officer')),
                ('investigating_officer_contact', models.CharField(blank=True, default='', max_length=50, verbose_name='Investigating Officer Contact')),
                ('sections_applied', models.TextField(blank=True, default='', verbose_name='Sections Applied')),
                ('status', models.CharField(choices=FIR_STATUS_CHOICES, default='REGISTERED', max_length=30, verbose_name='FIR Status')),
                ('details', models.TextField(blank=True, default='', verbose_name='FIR Details')),
                ('remarks', models.TextField(blank=True, default='', verbose_name='Remarks')),
                ('complaint', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='firs',
                    to='complaints.complaint',
                    verbose_name='Complaint',
                )),
                ('created_by', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='created_firs',
                    to=USER,
                    verbose_name='Created By',
                )),
                ('updated_by', _optional_user('updated_firs', 'Last Updated By')),
            ],
            options={
                'verbose_name': 'FIR',
                'verbose_name_plural': 'FIRs',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Comment',
            fields=[
                _id(),
                *_timestamps(),
                ('content', models.TextField(verbose_name='Content')),
                ('is_internal', models.BooleanField(
                    default=False,
                    help_text='Internal comments are visible to DCP and above only.',
                    verbose_name='Internal',
                )),
                ('complaint', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='comments',
                    to='complaints.complaint',
                    verbose_name='Complaint',
                )),
                ('parent', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='replies',
                    to='complaints.comment',
                    verbose_name='Parent Comment',
                )),
                ('created_by', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='complaint_comments',
                    to=USER,
                    verbose_name='Created By',
                )),
                ('updated_by', _optional_user('+', 'Last Updated By')),
            ],
            options={
                'verbose_name': 'Comment',
                'verbose_name_plural': 'Comments',
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='ComplaintAttachment',
            fields=[
                _id(),
                *_timestamps(),
                ('file', models.FileField(upload_to='uploads/complaints', verbose_name='File')),
                ('filename', models.CharField(max_length=255, verbose_name='Original Filename')),
                ('mime_type', models.CharField(blank=True, default='', max_length=100, verbose_name='MIME Type')),
                ('size', models.PositiveIntegerField(default=0, verbose_name='Size (bytes)')),
                ('complaint', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='attachments',
                    to='complaints.complaint',
                    verbose_name='Complaint',
                )),
                ('uploaded_by', _optional_user('complaint_attachments', 'Uploaded By')),
            ],
            options={
                'verbose_name': 'Complaint Attachment',
                'verbose_name_plural': 'Complaint Attachments',
                'ordering': ['created_at'],
            },
        ),
    ]
