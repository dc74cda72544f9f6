"""Create admin, school, donor and governing body tables."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1e7a2b9d40"
down_revision = None
branch_labels = None
depends_on = None


DONOR_TYPE_ENUM = "donor_type"


def _credential_columns(verified_default=sa.false()):
    return [
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "verified",
            sa.Boolean(),
            nullable=False,
            server_default=verified_default,
        ),
        sa.Column("verification_code", sa.String(length=16), nullable=True),
        sa.Column("verification_code_expiry", sa.DateTime(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    """Create the principal tables."""

    op.create_table(
        "site_admins",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        *_credential_columns(verified_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "schools",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("school_id", sa.String(length=16), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("district", sa.String(length=64), nullable=False),
        sa.Column("province", sa.String(length=64), nullable=False),
        sa.Column("zonal", sa.String(length=120), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=False),
        sa.Column("contact_phone", sa.String(length=32), nullable=True),
        sa.Column("principal_name", sa.String(length=255), nullable=True),
        sa.Column(
            "admin_verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        *_credential_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("contact_email"),
    )
    op.create_index(op.f("ix_schools_school_id"), "schools", ["school_id"], unique=True)
    op.create_index(op.f("ix_schools_name"), "schools", ["name"], unique=False)
    op.create_index(
        op.f("ix_schools_admin_verified"), "schools", ["admin_verified"], unique=False
    )

    donor_type = sa.Enum("INDIVIDUAL", "COMPANY", name=DONOR_TYPE_ENUM)
    donor_type.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "donors",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("donor_id", sa.String(length=16), nullable=True),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("donor_type", donor_type, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("profile_pic_url", sa.String(length=512), nullable=True),
        *_credential_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(op.f("ix_donors_donor_id"), "donors", ["donor_id"], unique=True)
    op.create_index(op.f("ix_donors_display_name"), "donors", ["display_name"], unique=False)
    op.create_index(op.f("ix_donors_donor_type"), "donors", ["donor_type"], unique=False)

    op.create_table(
        "governing_bodies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("govern_body_id", sa.String(length=16), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("abbreviation", sa.String(length=32), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("logo_url", sa.String(length=512), nullable=True),
        sa.Column("contact_phone", sa.String(length=32), nullable=True),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column(
            "admin_verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        *_credential_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index(
        op.f("ix_governing_bodies_govern_body_id"),
        "governing_bodies",
        ["govern_body_id"],
        unique=True,
    )
    op.create_index(
        op.f("ix_governing_bodies_name"), "governing_bodies", ["name"], unique=False
    )


def downgrade() -> None:
    """Drop the principal tables."""

    op.drop_index(op.f("ix_governing_bodies_name"), table_name="governing_bodies")
    op.drop_index(op.f("ix_governing_bodies_govern_body_id"), table_name="governing_bodies")
    op.drop_table("governing_bodies")

    op.drop_index(op.f("ix_donors_donor_type"), table_name="donors")
    op.drop_index(op.f("ix_donors_display_name"), table_name="donors")
    op.drop_index(op.f("ix_donors_donor_id"), table_name="donors")
    op.drop_table("donors")
    op.execute(f"DROP TYPE IF EXISTS {DONOR_TYPE_ENUM}")

    op.drop_index(op.f("ix_schools_admin_verified"), table_name="schools")
    op.drop_index(op.f("ix_schools_name"), table_name="schools")
    op.drop_index(op.f("ix_schools_school_id"), table_name="schools")
    op.drop_table("schools")

    op.drop_table("site_admins")
