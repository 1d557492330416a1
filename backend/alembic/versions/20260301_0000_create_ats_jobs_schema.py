"""create_ats_jobs_schema

Revision ID: 20260301_0000
Revises:
Create Date: 2026-03-01 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


revision = '20260301_0000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Identity tables (read by the access resolver)
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('clerk_user_id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_clerk_user_id'), 'users', ['clerk_user_id'], unique=True)

    op.create_table(
        'memberships',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('organization_id', sa.String(36), nullable=False),
        sa.Column('role_name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'organization_id', 'role_name', name='uq_membership_role'),
    )
    op.create_index(op.f('ix_memberships_user_id'), 'memberships', ['user_id'])
    op.create_index(op.f('ix_memberships_organization_id'), 'memberships', ['organization_id'])

    op.create_table(
        'recruiters',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'candidates',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=True),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    # ATS tables
    op.create_table(
        'companies',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('identity_organization_id', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_companies_name'), 'companies', ['name'])
    op.create_index(op.f('ix_companies_identity_organization_id'), 'companies', ['identity_organization_id'])

    op.create_table(
        'jobs',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('company_id', sa.String(36), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('employment_type', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('recruiter_description', sa.Text(), nullable=True),
        sa.Column('candidate_description', sa.Text(), nullable=True),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('show_salary_range', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('open_to_relocation', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('fee_percentage', sa.Float(), nullable=False, server_default='20'),
        sa.Column('splits_fee_percentage', sa.Float(), nullable=True),
        sa.Column('guarantee_days', sa.Integer(), nullable=False, server_default='90'),
        sa.Column('status', sa.String(), nullable=False, server_default='active'),
        sa.Column('job_owner_id', sa.String(36), nullable=True),
        sa.Column('job_owner_recruiter_id', sa.String(36), nullable=True),
        sa.Column('company_recruiter_id', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_jobs_company_id'), 'jobs', ['company_id'])
    op.create_index(op.f('ix_jobs_status'), 'jobs', ['status'])
    op.create_index(op.f('ix_jobs_job_owner_id'), 'jobs', ['job_owner_id'])
    op.create_index(op.f('ix_jobs_job_owner_recruiter_id'), 'jobs', ['job_owner_recruiter_id'])
    op.create_index(op.f('ix_jobs_company_recruiter_id'), 'jobs', ['company_recruiter_id'])
    op.create_index('idx_jobs_visible', 'jobs', ['status', 'deleted_at', 'created_at'])

    op.create_table(
        'job_requirements',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('job_id', sa.String(36), sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('requirement_type', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_job_requirements_job_id'), 'job_requirements', ['job_id'])

    op.create_table(
        'job_pre_screen_questions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('job_id', sa.String(36), sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('question_type', sa.String(), nullable=False),
        sa.Column('options', sa.Text(), nullable=True),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_job_pre_screen_questions_job_id'), 'job_pre_screen_questions', ['job_id'])

    op.create_table(
        'applications',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('job_id', sa.String(36), sa.ForeignKey('jobs.id'), nullable=False),
        sa.Column('candidate_id', sa.String(36), nullable=False),
        sa.Column('candidate_recruiter_id', sa.String(36), nullable=True),
        sa.Column('stage', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_applications_job_id'), 'applications', ['job_id'])
    op.create_index(op.f('ix_applications_candidate_id'), 'applications', ['candidate_id'])
    op.create_index('idx_applications_recruiter_stage', 'applications', ['candidate_recruiter_id', 'stage'])

    op.create_table(
        'placements',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('job_id', sa.String(36), sa.ForeignKey('jobs.id'), nullable=False),
        sa.Column('candidate_id', sa.String(36), nullable=False),
        sa.Column('company_id', sa.String(36), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('candidate_recruiter_id', sa.String(36), nullable=True),
        sa.Column('company_recruiter_id', sa.String(36), nullable=True),
        sa.Column('job_owner_recruiter_id', sa.String(36), nullable=True),
        sa.Column('state', sa.String(), nullable=False, server_default='hired'),
        sa.Column('hired_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_placements_job_id'), 'placements', ['job_id'])
    op.create_index(op.f('ix_placements_candidate_recruiter_id'), 'placements', ['candidate_recruiter_id'])
    op.create_index(op.f('ix_placements_company_recruiter_id'), 'placements', ['company_recruiter_id'])
    op.create_index(op.f('ix_placements_job_owner_recruiter_id'), 'placements', ['job_owner_recruiter_id'])

    op.create_table(
        'recruiter_companies',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('recruiter_id', sa.String(36), sa.ForeignKey('recruiters.id'), nullable=False),
        sa.Column('company_id', sa.String(36), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('can_manage_company_jobs', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('recruiter_id', 'company_id', name='uq_recruiter_company'),
    )
    op.create_index(op.f('ix_recruiter_companies_recruiter_id'), 'recruiter_companies', ['recruiter_id'])
    op.create_index(op.f('ix_recruiter_companies_company_id'), 'recruiter_companies', ['company_id'])


def downgrade() -> None:
    op.drop_table('recruiter_companies')
    op.drop_table('placements')
    op.drop_table('applications')
    op.drop_table('job_pre_screen_questions')
    op.drop_table('job_requirements')
    op.drop_table('jobs')
    op.drop_table('companies')
    op.drop_table('candidates')
    op.drop_table('recruiters')
    op.drop_table('memberships')
    op.drop_table('users')
