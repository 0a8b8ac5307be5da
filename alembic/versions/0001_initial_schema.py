"""initial schema: users, trips, bookings, reviews, audit_logs

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("fullName", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum("DRIVER", "PASSENGER", name="rolename"), nullable=False),
        sa.Column("carBrand", sa.String(100), nullable=True),
        sa.Column("carModel", sa.String(100), nullable=True),
        sa.Column("carYear", sa.Integer(), nullable=True),
        sa.Column("carColor", sa.String(50), nullable=True),
        sa.Column("carNumber", sa.String(50), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("reviewsCount", sa.Integer(), nullable=False),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updatedAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "trips",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("driverId", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("fromCity", sa.String(150), nullable=False),
        sa.Column("toCity", sa.String(150), nullable=False),
        sa.Column("tripDate", sa.Date(), nullable=False),
        sa.Column("tripTime", sa.Time(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("seats", sa.Integer(), nullable=False),
        sa.Column("availableSeats", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.String(50), nullable=True),
        sa.Column("noSmoking", sa.Boolean(), nullable=False),
        sa.Column("animalsAllowed", sa.Boolean(), nullable=False),
        sa.Column("musicAllowed", sa.Boolean(), nullable=False),
        sa.Column("status", sa.Enum("ACTIVE", "COMPLETED", "CANCELLED", name="tripstatus"), nullable=False),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updatedAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("seats >= 1 AND seats <= 8", name="chk_trip_seats_range"),
        sa.CheckConstraint('"availableSeats" >= 0 AND "availableSeats" <= seats', name="chk_trip_available_seats"),
        sa.CheckConstraint("price >= 0", name="chk_trip_price"),
    )
    op.create_index("ix_trips_id", "trips", ["id"])
    op.create_index("ix_trips_driverId", "trips", ["driverId"])
    op.create_index("ix_trips_fromCity", "trips", ["fromCity"])
    op.create_index("ix_trips_toCity", "trips", ["toCity"])
    op.create_index("ix_trips_tripDate", "trips", ["tripDate"])
    op.create_index("ix_trips_status", "trips", ["status"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("tripId", sa.Integer(), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("passengerId", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("seatsBooked", sa.Integer(), nullable=False),
        sa.Column("totalPrice", sa.Integer(), nullable=False),
        sa.Column("status", sa.Enum("PENDING", "CONFIRMED", "CANCELLED", name="bookingstatus"), nullable=False),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updatedAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('"seatsBooked" >= 1 AND "seatsBooked" <= 8', name="chk_booking_seats_range"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_tripId", "bookings", ["tripId"])
    op.create_index("ix_bookings_passengerId", "bookings", ["passengerId"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("tripId", sa.Integer(), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("authorId", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("targetId", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updatedAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="chk_rating_range"),
        sa.UniqueConstraint("tripId", "authorId", "targetId", name="uq_review_trip_author_target"),
    )
    op.create_index("ix_reviews_id", "reviews", ["id"])
    op.create_index("ix_reviews_tripId", "reviews", ["tripId"])
    op.create_index("ix_reviews_authorId", "reviews", ["authorId"])
    op.create_index("ix_reviews_targetId", "reviews", ["targetId"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("userId", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("entityType", sa.String(100), nullable=False),
        sa.Column("entityId", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_audit_logs_id", "audit_logs", ["id"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("reviews")
    op.drop_table("bookings")
    op.drop_table("trips")
    op.drop_table("users")
    sa.Enum(name="bookingstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="tripstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="rolename").drop(op.get_bind(), checkfirst=True)
