"""
Initial migration - CaseDesk

Revision ID: 001
Create Date: 2026-01-05 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _enum(*values: str, name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*values, name=name, create_type=False)


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    # ========================
    # ENUMS (stored by member value)
    # ========================
    op.execute("CREATE TYPE userrole AS ENUM ('admin', 'associate', 'client')")
    op.execute("CREATE TYPE userpermission AS ENUM ('full access', 'limited access', 'no access')")
    op.execute("CREATE TYPE clienttype AS ENUM ('individual', 'business')")
    op.execute("CREATE TYPE clientstatus AS ENUM ('active', 'inactive')")
    op.execute("CREATE TYPE casestatus AS ENUM ('Active', 'On Hold', 'Closed', 'Archived')")
    op.execute("CREATE TYPE casepriority AS ENUM ('low', 'medium', 'high')")
    op.execute("CREATE TYPE documentstatus AS ENUM ('Draft', 'Under Review', 'Approved', 'Rejected', 'Reference')")
    op.execute("CREATE TYPE invoicestatus AS ENUM ('draft', 'pending', 'paid', 'overdue')")
    op.execute("""CREATE TYPE eventtype AS ENUM (
        'meeting', 'deadline', 'hearing', 'court_date', 'filing', 'consultation', 'other'
    )""")
    op.execute("CREATE TYPE eventstatus AS ENUM ('scheduled', 'confirmed', 'completed', 'cancelled', 'postponed')")
    op.execute("CREATE TYPE eventpriority AS ENUM ('low', 'medium', 'high')")

    # ========================
    # TABLE: law_firms (tenant)
    # ========================
    op.create_table(
        "law_firms",
        *_audit_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        # Contact
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("website", sa.String(255), nullable=True),
        # Address
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("logo_url", sa.String(500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("joined_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    # ========================
    # TABLE: users
    # ========================
    op.create_table(
        "users",
        *_audit_columns(),
        sa.Column("law_firm_id", sa.Uuid(), nullable=True, comment="NULL for platform administrators"),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=True, unique=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("role", _enum("admin", "associate", "client", name="userrole"), nullable=False, server_default="associate"),
        sa.Column(
            "permissions",
            _enum("full access", "limited access", "no access", name="userpermission"),
            nullable=False,
            server_default="limited access",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["law_firm_id"], ["law_firms.id"]),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_law_firm_id", "users", ["law_firm_id"])

    # ========================
    # TABLE: clients
    # ========================
    op.create_table(
        "clients",
        *_audit_columns(),
        sa.Column("law_firm_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("client_type", _enum("individual", "business", name="clienttype"), nullable=False, server_default="individual"),
        sa.Column("status", _enum("active", "inactive", name="clientstatus"), nullable=False, server_default="active"),
        # Portal login and responsible associate
        sa.Column("user_account_id", sa.Uuid(), nullable=True, unique=True),
        sa.Column("assigned_associate_id", sa.Uuid(), nullable=True),
        sa.Column("joined_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["law_firm_id"], ["law_firms.id"]),
        sa.ForeignKeyConstraint(["user_account_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["assigned_associate_id"], ["users.id"]),
        sa.UniqueConstraint("law_firm_id", "email", name="uq_clients_firm_email"),
    )
    op.create_index("ix_clients_law_firm_id", "clients", ["law_firm_id"])

    # ========================
    # TABLE: cases
    # ========================
    op.create_table(
        "cases",
        *_audit_columns(),
        sa.Column("law_firm_id", sa.Uuid(), nullable=False),
        sa.Column("case_number", sa.String(100), nullable=False, comment="Public reference"),
        sa.Column("file_number", sa.String(100), nullable=False, comment="Internal reference"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("case_type", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            _enum("Active", "On Hold", "Closed", "Archived", name="casestatus"),
            nullable=False,
            server_default="Active",
        ),
        sa.Column("priority", _enum("low", "medium", "high", name="casepriority"), nullable=False, server_default="medium"),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("assigned_to_user_id", sa.Uuid(), nullable=True),
        sa.Column("added_by_user_id", sa.Uuid(), nullable=True),
        sa.Column("date_opened", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["law_firm_id"], ["law_firms.id"]),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["assigned_to_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["added_by_user_id"], ["users.id"]),
        sa.UniqueConstraint("law_firm_id", "case_number", name="uq_cases_firm_case_number"),
        sa.UniqueConstraint("law_firm_id", "file_number", name="uq_cases_firm_file_number"),
    )
    op.create_index("ix_cases_law_firm_id", "cases", ["law_firm_id"])
    op.create_index("ix_cases_case_number", "cases", ["case_number"])
    op.create_index("ix_cases_status", "cases", ["status"])
    op.create_index("ix_cases_client_id", "cases", ["client_id"])
    op.create_index("ix_cases_assigned_to_user_id", "cases", ["assigned_to_user_id"])
    op.create_index("ix_cases_deadline", "cases", ["deadline"])

    # ========================
    # TABLE: case_activities
    # ========================
    op.create_table(
        "case_activities",
        *_audit_columns(),
        sa.Column("law_firm_id", sa.Uuid(), nullable=False),
        sa.Column("case_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["law_firm_id"], ["law_firms.id"]),
        sa.ForeignKeyConstraint(["case_id"], ["cases.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index("ix_case_activities_law_firm_id", "case_activities", ["law_firm_id"])
    op.create_index("ix_case_activities_case_id", "case_activities", ["case_id"])

    # ========================
    # TABLE: documents
    # ========================
    op.create_table(
        "documents",
        *_audit_columns(),
        sa.Column("law_firm_id", sa.Uuid(), nullable=False),
        sa.Column("case_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("document_type", sa.String(100), nullable=False, server_default="General"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            _enum("Draft", "Under Review", "Approved", "Rejected", "Reference", name="documentstatus"),
            nullable=False,
            server_default="Draft",
        ),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        # File
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False, comment="Stored byte length"),
        sa.Column("mime_type", sa.String(150), nullable=False),
        sa.Column("storage_path", sa.String(500), nullable=False, unique=True),
        sa.Column("sha256", sa.String(64), nullable=False),
        sa.Column("uploaded_by_user_id", sa.Uuid(), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        # Review
        sa.Column("reviewer_user_id", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["law_firm_id"], ["law_firms.id"]),
        sa.ForeignKeyConstraint(["case_id"], ["cases.id"]),
        sa.ForeignKeyConstraint(["uploaded_by_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["reviewer_user_id"], ["users.id"]),
    )
    op.create_index("ix_documents_law_firm_id", "documents", ["law_firm_id"])
    op.create_index("ix_documents_case_id", "documents", ["case_id"])
    op.create_index("ix_documents_status", "documents", ["status"])
    op.create_index("ix_documents_uploaded_by_user_id", "documents", ["uploaded_by_user_id"])

    # ========================
    # TABLE: notes
    # ========================
    op.create_table(
        "notes",
        *_audit_columns(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("law_firm_id", sa.Uuid(), nullable=True),
        sa.Column("case_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("category", sa.String(100), nullable=False, server_default="Uncategorized"),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default="true"),
        # Derived from content
        sa.Column("word_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("character_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_accessed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["law_firm_id"], ["law_firms.id"]),
        sa.ForeignKeyConstraint(["case_id"], ["cases.id"]),
    )
    op.create_index("ix_notes_user_id", "notes", ["user_id"])
    op.create_index("ix_notes_law_firm_id", "notes", ["law_firm_id"])
    op.create_index("ix_notes_case_id", "notes", ["case_id"])

    # ========================
    # TABLE: invoices
    # ========================
    op.create_table(
        "invoices",
        *_audit_columns(),
        sa.Column("law_firm_id", sa.Uuid(), nullable=False),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("case_id", sa.Uuid(), nullable=True),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=True),
        sa.Column("assigned_to_user_id", sa.Uuid(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("issue_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            _enum("draft", "pending", "paid", "overdue", name="invoicestatus"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("payment_proof_document_id", sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["law_firm_id"], ["law_firms.id"]),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["case_id"], ["cases.id"]),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["assigned_to_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["payment_proof_document_id"], ["documents.id"]),
        sa.UniqueConstraint("law_firm_id", "invoice_number", name="uq_invoices_firm_number"),
    )
    op.create_index("ix_invoices_law_firm_id", "invoices", ["law_firm_id"])
    op.create_index("ix_invoices_client_id", "invoices", ["client_id"])
    op.create_index("ix_invoices_case_id", "invoices", ["case_id"])
    op.create_index("ix_invoices_due_date", "invoices", ["due_date"])
    op.create_index("ix_invoices_status", "invoices", ["status"])

    # ========================
    # TABLE: invoice_line_items
    # ========================
    op.create_table(
        "invoice_line_items",
        *_audit_columns(),
        sa.Column("invoice_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("hours", sa.Numeric(8, 2), nullable=False),
        sa.Column("rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, comment="hours x rate"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_invoice_line_items_invoice_id", "invoice_line_items", ["invoice_id"])

    # ========================
    # TABLE: events
    # ========================
    op.create_table(
        "events",
        *_audit_columns(),
        sa.Column("law_firm_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "event_type",
            _enum("meeting", "deadline", "hearing", "court_date", "filing", "consultation", "other", name="eventtype"),
            nullable=False,
            server_default="meeting",
        ),
        sa.Column(
            "status",
            _enum("scheduled", "confirmed", "completed", "cancelled", "postponed", name="eventstatus"),
            nullable=False,
            server_default="scheduled",
        ),
        sa.Column("priority", _enum("low", "medium", "high", name="eventpriority"), nullable=False, server_default="medium"),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("all_day", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("meeting_link", sa.String(500), nullable=True),
        sa.Column("case_id", sa.Uuid(), nullable=True),
        sa.Column("assigned_to_user_id", sa.Uuid(), nullable=True),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=True),
        # Client invitation
        sa.Column("client_invited", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("client_confirmed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("reminder_minutes_before", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["law_firm_id"], ["law_firms.id"]),
        sa.ForeignKeyConstraint(["case_id"], ["cases.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["assigned_to_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"]),
        sa.CheckConstraint("end_time >= start_time", name="ck_events_end_after_start"),
    )
    op.create_index("ix_events_law_firm_id", "events", ["law_firm_id"])
    op.create_index("ix_events_status", "events", ["status"])
    op.create_index("ix_events_start_time", "events", ["start_time"])
    op.create_index("ix_events_case_id", "events", ["case_id"])
    op.create_index("ix_events_assigned_to_user_id", "events", ["assigned_to_user_id"])


def downgrade() -> None:
    # Reverse order (foreign keys)
    op.drop_table("events")
    op.drop_table("invoice_line_items")
    op.drop_table("invoices")
    op.drop_table("notes")
    op.drop_table("documents")
    op.drop_table("case_activities")
    op.drop_table("cases")
    op.drop_table("clients")
    op.drop_table("users")
    op.drop_table("law_firms")

    op.execute("DROP TYPE IF EXISTS eventpriority")
    op.execute("DROP TYPE IF EXISTS eventstatus")
    op.execute("DROP TYPE IF EXISTS eventtype")
    op.execute("DROP TYPE IF EXISTS invoicestatus")
    op.execute("DROP TYPE IF EXISTS documentstatus")
    op.execute("DROP TYPE IF EXISTS casepriority")
    op.execute("DROP TYPE IF EXISTS casestatus")
    op.execute("DROP TYPE IF EXISTS clientstatus")
    op.execute("DROP TYPE IF EXISTS clienttype")
    op.execute("DROP TYPE IF EXISTS userpermission")
    op.execute("DROP TYPE IF EXISTS userrole")
