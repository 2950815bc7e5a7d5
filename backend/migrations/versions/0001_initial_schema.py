"""Initial schema: operators, staff, members, seats, sessions, reservations, ledger

Revision ID: 0001_initial
Revises:
Create Date: 2026-03-02

This migration adds:
1. users, session_tokens (operator login)
2. staff, members (stamp card)
3. seats, service_sessions (one active session per seat)
4. reservations
5. ledger_entries (append-only revenue history)
6. selected_services (priced service lines, exactly one owner each)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ==========================================================================
    # 1. AUTH
    # ==========================================================================
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_username'), ['username'], unique=True)

    op.create_table('session_tokens',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_revoked', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_reason', sa.String(length=255), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('session_tokens', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_session_tokens_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_session_tokens_token_hash'), ['token_hash'], unique=True)
        batch_op.create_index(batch_op.f('ix_session_tokens_expires_at'), ['expires_at'], unique=False)
        batch_op.create_index(batch_op.f('ix_session_tokens_is_revoked'), ['is_revoked'], unique=False)
        batch_op.create_index('ix_session_tokens_user_active', ['user_id', 'is_revoked'], unique=False)

    # ==========================================================================
    # 2. STAFF / MEMBERS
    # ==========================================================================
    op.create_table('staff',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('staff', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_staff_position'), ['position'], unique=False)

    op.create_table('members',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('stamps', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.CheckConstraint('stamps >= 0', name='ck_members_stamps_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('members', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_members_name'), ['name'], unique=False)
        batch_op.create_index(batch_op.f('ix_members_phone'), ['phone'], unique=True)
        batch_op.create_index(batch_op.f('ix_members_position'), ['position'], unique=False)

    # ==========================================================================
    # 3. SEATS
    # ==========================================================================
    op.create_table('seats',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='available'),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('seats', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_seats_status'), ['status'], unique=False)

    # ==========================================================================
    # 4. RESERVATIONS
    # ==========================================================================
    op.create_table('reservations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('member_id', sa.String(length=36), nullable=True),
        sa.Column('member_name', sa.String(length=64), nullable=False),
        sa.Column('member_phone', sa.String(length=32), nullable=True),
        sa.Column('seat_id', sa.Integer(), nullable=True),
        sa.Column('staff_id', sa.String(length=36), nullable=False),
        sa.Column('staff_name', sa.String(length=64), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reserved_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('estimated_duration', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='scheduled'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['seat_id'], ['seats.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('reservations', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_reservations_member_id'), ['member_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_reservations_seat_id'), ['seat_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_reservations_staff_id'), ['staff_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_reservations_reserved_at'), ['reserved_at'], unique=False)
        batch_op.create_index(batch_op.f('ix_reservations_status'), ['status'], unique=False)
        batch_op.create_index('ix_reservations_status_reserved_at', ['status', 'reserved_at'], unique=False)

    # ==========================================================================
    # 5. ACTIVE SESSIONS
    # ==========================================================================
    op.create_table('service_sessions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=False),
        sa.Column('member_id', sa.String(length=36), nullable=True),
        sa.Column('member_name', sa.String(length=64), nullable=False),
        sa.Column('staff_id', sa.String(length=36), nullable=False),
        sa.Column('staff_name', sa.String(length=64), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reservation_id', sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(['seat_id'], ['seats.id'], ),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservations.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('service_sessions', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_service_sessions_seat_id'), ['seat_id'], unique=True)
        batch_op.create_index(batch_op.f('ix_service_sessions_member_id'), ['member_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_service_sessions_staff_id'), ['staff_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_service_sessions_reservation_id'), ['reservation_id'], unique=False)

    # ==========================================================================
    # 6. LEDGER (append-only)
    # ==========================================================================
    op.create_table('ledger_entries',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('reservation_id', sa.String(length=36), nullable=True),
        sa.Column('member_id', sa.String(length=36), nullable=True),
        sa.Column('member_name', sa.String(length=64), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=False),
        sa.Column('staff_id', sa.String(length=36), nullable=False),
        sa.Column('staff_name', sa.String(length=64), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['seat_id'], ['seats.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('ledger_entries', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_ledger_entries_reservation_id'), ['reservation_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_ledger_entries_member_id'), ['member_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_ledger_entries_completed_at'), ['completed_at'], unique=False)
        batch_op.create_index('ix_ledger_entries_staff_completed', ['staff_id', 'completed_at'], unique=False)
        batch_op.create_index('ix_ledger_entries_seat_completed', ['seat_id', 'completed_at'], unique=False)

    # ==========================================================================
    # 7. SERVICE LINES
    # ==========================================================================
    op.create_table('selected_services',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=True),
        sa.Column('reservation_id', sa.String(length=36), nullable=True),
        sa.Column('ledger_entry_id', sa.String(length=36), nullable=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('length', sa.String(length=16), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False, server_default='0'),
        sa.CheckConstraint(
            "(CASE WHEN session_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN reservation_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN ledger_entry_id IS NULL THEN 0 ELSE 1 END) = 1",
            name='ck_selected_services_single_owner'
        ),
        sa.CheckConstraint('price >= 0', name='ck_selected_services_price_non_negative'),
        sa.ForeignKeyConstraint(['session_id'], ['service_sessions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['ledger_entry_id'], ['ledger_entries.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('selected_services', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_selected_services_session_id'), ['session_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_selected_services_reservation_id'), ['reservation_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_selected_services_ledger_entry_id'), ['ledger_entry_id'], unique=False)


def downgrade():
    op.drop_table('selected_services')
    op.drop_table('ledger_entries')
    op.drop_table('service_sessions')
    op.drop_table('reservations')
    op.drop_table('seats')
    op.drop_table('members')
    op.drop_table('staff')
    op.drop_table('session_tokens')
    op.drop_table('users')
