"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        )
    ]
    if with_updated:
        columns.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("now()"),
                nullable=False,
            )
        )
    return columns


def _identity_pk() -> sa.Column:
    return sa.Column("id", sa.BigInteger(), sa.Identity(always=False), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column(
            "payout_lock_version",
            sa.Integer(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        *_timestamps(),
        sa.CheckConstraint("id LIKE 'usr_%'", name="user_id_format"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "artists",
        _identity_pk(),
        sa.Column("user_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_artists_user_id", "artists", ["user_id"], unique=False)

    op.create_table(
        "releases",
        _identity_pk(),
        sa.Column("artist_id", sa.BigInteger(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("upc", sa.String(length=12), nullable=True),
        sa.Column("genre", sa.String(length=50), nullable=True),
        sa.Column("language", sa.String(length=2), nullable=True),
        sa.Column("release_date", sa.Date(), nullable=True),
        sa.Column("label", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("copyright_info", sa.String(length=500), nullable=True),
        sa.Column("cover_art", sa.String(length=500), nullable=True),
        sa.Column("cover_art_width", sa.Integer(), nullable=True),
        sa.Column(
            "split_lock_version",
            sa.Integer(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        *_timestamps(with_updated=False),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("upc"),
    )
    op.create_index("idx_releases_artist_id", "releases", ["artist_id"], unique=False)

    op.create_table(
        "tracks",
        _identity_pk(),
        sa.Column("release_id", sa.BigInteger(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("isrc", sa.String(length=12), nullable=True),
        sa.Column("duration_ms", sa.Integer(), nullable=False),
        sa.Column("track_number", sa.Integer(), nullable=False),
        sa.Column(
            "split_lock_version",
            sa.Integer(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        *_timestamps(with_updated=False),
        sa.CheckConstraint("duration_ms > 0", name="positive_track_duration"),
        sa.ForeignKeyConstraint(["release_id"], ["releases.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("isrc"),
    )
    op.create_index("idx_tracks_release_id", "tracks", ["release_id"], unique=False)

    op.create_table(
        "royalty_splits",
        _identity_pk(),
        sa.Column("release_id", sa.BigInteger(), nullable=True),
        sa.Column("track_id", sa.BigInteger(), nullable=True),
        sa.Column("artist_id", sa.BigInteger(), nullable=False),
        sa.Column("split_type", sa.String(length=30), nullable=False),
        sa.Column("basis_points", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=100), nullable=True),
        sa.Column("created_by", sa.String(length=50), nullable=True),
        *_timestamps(with_updated=False),
        sa.CheckConstraint(
            "(release_id IS NULL) <> (track_id IS NULL)", name="split_single_scope"
        ),
        sa.CheckConstraint(
            "basis_points >= 0 AND basis_points <= 10000",
            name="split_basis_points_range",
        ),
        sa.ForeignKeyConstraint(["release_id"], ["releases.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["track_id"], ["tracks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_splits_release_type",
        "royalty_splits",
        ["release_id", "split_type"],
        unique=False,
        postgresql_where=sa.text("release_id IS NOT NULL"),
    )
    op.create_index(
        "idx_splits_track_type",
        "royalty_splits",
        ["track_id", "split_type"],
        unique=False,
        postgresql_where=sa.text("track_id IS NOT NULL"),
    )

    op.create_table(
        "royalty_statements",
        _identity_pk(),
        sa.Column("artist_id", sa.BigInteger(), nullable=False),
        sa.Column("platform", sa.String(length=50), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column("total_streams", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        sa.Column("total_sales", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "gross_revenue_cents", sa.BigInteger(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column(
            "platform_commission_cents",
            sa.BigInteger(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column(
            "net_revenue_cents", sa.BigInteger(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column(
            "currency",
            sa.String(length=3),
            server_default=sa.text("'USD'"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.String(length=20),
            server_default=sa.text("'draft'"),
            nullable=False,
        ),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("payment_method", sa.String(length=50), nullable=True),
        sa.Column("payment_reference", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('draft', 'generated', 'finalized', 'paid')",
            name="valid_statement_status",
        ),
        sa.CheckConstraint("period_end >= period_start", name="statement_period_order"),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "artist_id",
            "platform",
            "period_start",
            "period_end",
            name="uq_statement_artist_platform_period",
        ),
    )
    op.create_index(
        "idx_statements_artist_currency_status",
        "royalty_statements",
        ["artist_id", "currency", "status"],
        unique=False,
    )

    op.create_table(
        "payouts",
        _identity_pk(),
        sa.Column("user_id", sa.String(length=50), nullable=False),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("payment_method", sa.String(length=50), nullable=False),
        sa.Column(
            "payment_details", postgresql.JSONB(astext_type=sa.Text()), nullable=True
        ),
        sa.Column(
            "status",
            sa.String(length=20),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        sa.Column("requested_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processed_by", sa.String(length=50), nullable=True),
        sa.Column("payment_reference", sa.String(length=255), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("transaction_id", sa.String(length=255), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        sa.CheckConstraint("amount_cents > 0", name="positive_payout_amount"),
        sa.CheckConstraint(
            "status IN ('pending', 'processing', 'completed', 'cancelled', 'failed')",
            name="valid_payout_status",
        ),
        sa.CheckConstraint(
            "(status = 'completed' AND completed_at IS NOT NULL) OR (status != 'completed')",
            name="completed_at_consistency",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_payouts_user_currency_status",
        "payouts",
        ["user_id", "currency", "status"],
        unique=False,
    )
    op.create_index(
        "idx_payouts_requested",
        "payouts",
        ["user_id", "requested_at"],
        unique=False,
    )

    op.create_table(
        "payout_statements",
        sa.Column("payout_id", sa.BigInteger(), nullable=False),
        sa.Column("statement_id", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["payout_id"], ["payouts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["statement_id"], ["royalty_statements.id"], ondelete="RESTRICT"
        ),
        sa.PrimaryKeyConstraint("payout_id", "statement_id"),
    )


def downgrade() -> None:
    op.drop_table("payout_statements")

    op.drop_index("idx_payouts_requested", table_name="payouts")
    op.drop_index("idx_payouts_user_currency_status", table_name="payouts")
    op.drop_table("payouts")

    op.drop_index("idx_statements_artist_currency_status", table_name="royalty_statements")
    op.drop_table("royalty_statements")

    op.drop_index(
        "idx_splits_track_type",
        table_name="royalty_splits",
        postgresql_where=sa.text("track_id IS NOT NULL"),
    )
    op.drop_index(
        "idx_splits_release_type",
        table_name="royalty_splits",
        postgresql_where=sa.text("release_id IS NOT NULL"),
    )
    op.drop_table("royalty_splits")

    op.drop_index("idx_tracks_release_id", table_name="tracks")
    op.drop_table("tracks")

    op.drop_index("idx_releases_artist_id", table_name="releases")
    op.drop_table("releases")

    op.drop_index("idx_artists_user_id", table_name="artists")
    op.drop_table("artists")

    op.drop_table("users")
