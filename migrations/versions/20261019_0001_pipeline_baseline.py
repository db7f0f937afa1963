"""pipeline baseline: tenants, clients, returns, products, stages and transitions

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

RETURN_PREP_STATUSES = (
    "not_started",
    "documents_gathering",
    "information_review",
    "return_preparation",
    "quality_review",
    "client_review",
    "signature_required",
    "filing",
    "filed",
)


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _tenant_column() -> sa.Column:
    return sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("tenants.id", ondelete="RESTRICT"), nullable=False)


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns(),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("first_name", sa.String(120), nullable=True),
        sa.Column("last_name", sa.String(120), nullable=True),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
        sa.UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
    )
    op.create_index("ix_users_tenant_id", "users", ["tenant_id"])
    op.create_index("idx_users_tenant_archived", "users", ["tenant_id", "is_archived"])

    op.create_table(
        "tax_returns",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column(
            "return_type",
            sa.Enum("personal", "business", name="return_type"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("tax_year", sa.Integer(), nullable=False),
        sa.Column("status", sa.Enum(*RETURN_PREP_STATUSES, name="return_prep_status"), nullable=True),
        *_audit_columns(),
    )
    op.create_index("ix_tax_returns_tenant_id", "tax_returns", ["tenant_id"])
    op.create_index("ix_tax_returns_user_id", "tax_returns", ["user_id"])
    op.create_index("idx_tax_returns_tenant_status", "tax_returns", ["tenant_id", "status"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(60), nullable=False, server_default="Package"),
        sa.Column("display_location", sa.String(40), nullable=False, server_default="sidebar"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_audit_columns(),
    )
    op.create_index("ix_products_tenant_id", "products", ["tenant_id"])
    op.create_index("idx_products_tenant_active", "products", ["tenant_id", "is_active"])

    op.create_table(
        "product_stages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False),
        sa.Column("color", sa.String(7), nullable=False, server_default="#6b7280"),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("show_upload_button", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
        sa.UniqueConstraint("product_id", "slug", name="uq_product_stages_slug"),
        sa.UniqueConstraint("product_id", "sort_order", name="uq_product_stages_sort_order"),
    )
    op.create_index("ix_product_stages_product_id", "product_stages", ["product_id"])

    op.create_table(
        "client_products",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="RESTRICT"), nullable=False),
        sa.Column(
            "current_stage_id",
            sa.Integer(),
            sa.ForeignKey("product_stages.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_client_products_tenant_id", "client_products", ["tenant_id"])
    op.create_index("ix_client_products_user_id", "client_products", ["user_id"])
    op.create_index("idx_client_products_tenant_product", "client_products", ["tenant_id", "product_id"])

    op.create_table(
        "stage_transitions",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("entity_type", sa.String(40), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("from_stage", sa.String(120), nullable=True),
        sa.Column("to_stage", sa.String(120), nullable=False),
        sa.Column("actor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_audit_columns(),
    )
    op.create_index("ix_stage_transitions_tenant_id", "stage_transitions", ["tenant_id"])
    op.create_index(
        "idx_stage_transitions_entity",
        "stage_transitions",
        ["tenant_id", "entity_type", "entity_id"],
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_from_client", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_audit_columns(),
    )
    op.create_index("ix_messages_tenant_id", "messages", ["tenant_id"])
    op.create_index("idx_messages_tenant_user_read", "messages", ["tenant_id", "user_id", "is_read"])

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "processing", "verified", "rejected", name="document_status"),
            nullable=False,
        ),
        *_audit_columns(),
    )
    op.create_index("ix_documents_tenant_id", "documents", ["tenant_id"])
    op.create_index("idx_documents_tenant_user_status", "documents", ["tenant_id", "user_id", "status"])

    op.create_table(
        "signature_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        _tenant_column(),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("document_type", sa.String(60), nullable=False),
        sa.Column("status", sa.Enum("pending", "signed", name="signature_status"), nullable=False),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
    )
    op.create_index("ix_signature_requests_tenant_id", "signature_requests", ["tenant_id"])
    op.create_index(
        "idx_signature_requests_tenant_user_status",
        "signature_requests",
        ["tenant_id", "user_id", "status"],
    )


def downgrade() -> None:
    for table in (
        "signature_requests",
        "documents",
        "messages",
        "stage_transitions",
        "client_products",
        "product_stages",
        "products",
        "tax_returns",
        "users",
        "tenants",
    ):
        op.drop_table(table)
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for enum_name in ("signature_status", "document_status", "return_prep_status", "return_type"):
            sa.Enum(name=enum_name).drop(bind, checkfirst=True)
