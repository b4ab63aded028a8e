"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a literal prefix, size, or limit
should import it from here instead of hardcoding.  This avoids drift
between apps that use the same value.
"""

# ── Complaint identifiers ───────────────────────────────────────────
# complaint_code = "CMP-<unix millis>-<random suffix>"
# unique_code    = "UNIQUE-<complaint_code>"
COMPLAINT_CODE_PREFIX: str = "CMP"
UNIQUE_CODE_PREFIX: str = "UNIQUE"
COMPLAINT_CODE_SUFFIX_LENGTH: int = 9

# ── Attachments ─────────────────────────────────────────────────────
ATTACHMENT_UPLOAD_DIR: str = "uploads/complaints"
MAX_ATTACHMENT_SIZE: int = 10 * 1024 * 1024  # bytes
ALLOWED_ATTACHMENT_MIME_PREFIXES: tuple[str, ...] = (
    "image/",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument",
    "text/plain",
)

# ── Dashboard ───────────────────────────────────────────────────────
RECENT_COMPLAINTS_LIMIT: int = 5
