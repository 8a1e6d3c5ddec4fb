"""create_job_board_schema

Revision ID: create_job_board_schema
Revises:
Create Date: 2025-03-01 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from jobboard.database_types import GUID, JSONList


revision = 'create_job_board_schema'
down_revision = None
branch_labels = None
depends_on = None


# Enum types are created once up front; work_mode is shared by two tables
user_role = postgresql.ENUM('JOB_SEEKER', 'JOB_POSTER', name='user_role', create_type=False)
company_size = postgresql.ENUM(
    'STARTUP', 'SMALL', 'MEDIUM', 'LARGE', 'ENTERPRISE', name='company_size', create_type=False
)
job_type = postgresql.ENUM(
    'FULL_TIME', 'PART_TIME', 'CONTRACT', 'FREELANCE', 'INTERNSHIP', 'TEMPORARY',
    name='job_type', create_type=False
)
work_mode = postgresql.ENUM('REMOTE', 'ON_SITE', 'HYBRID', name='work_mode', create_type=False)
experience_level = postgresql.ENUM(
    'ENTRY_LEVEL', 'MID_LEVEL', 'SENIOR_LEVEL', 'EXECUTIVE', name='experience_level', create_type=False
)
application_status = postgresql.ENUM(
    'PENDING', 'REVIEWED', 'SHORTLISTED', 'INTERVIEW', 'OFFERED', 'REJECTED', 'WITHDRAWN',
    name='application_status', create_type=False
)
education_level = postgresql.ENUM(
    'HIGH_SCHOOL', 'ASSOCIATE', 'BACHELOR', 'MASTER', 'DOCTORATE', 'CERTIFICATE',
    name='education_level', create_type=False
)

ENUM_TYPES = (
    user_role, company_size, job_type, work_mode, experience_level,
    application_status, education_level,
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUM_TYPES:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('profile_picture', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    op.create_table(
        'companies',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('industry', sa.String(255), nullable=True),
        sa.Column('size', company_size, nullable=True),
        sa.Column('founded_year', sa.Integer(), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('headquarters', sa.String(255), nullable=True),
        sa.Column('locations', JSONList(), nullable=False),
        sa.Column('benefits', JSONList(), nullable=False),
        sa.Column('logo', sa.String(500), nullable=True),
        sa.Column('linkedin_url', sa.String(500), nullable=True),
        sa.Column('twitter_url', sa.String(500), nullable=True),
        sa.Column('facebook_url', sa.String(500), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('owner_id', GUID(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.UniqueConstraint('owner_id'),
    )
    op.create_index(op.f('ix_companies_name'), 'companies', ['name'], unique=False)
    op.create_index(op.f('ix_companies_slug'), 'companies', ['slug'], unique=True)

    op.create_table(
        'skills',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('category', sa.String(100), nullable=False, server_default='General'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_skills_name'), 'skills', ['name'], unique=False)
    op.create_index(op.f('ix_skills_slug'), 'skills', ['slug'], unique=True)

    op.create_table(
        'categories',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_categories_slug'), 'categories', ['slug'], unique=True)

    op.create_table(
        'job_posts',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(320), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('responsibilities', sa.Text(), nullable=True),
        sa.Column('benefits', sa.Text(), nullable=True),
        sa.Column('job_type', job_type, nullable=False),
        sa.Column('work_mode', work_mode, nullable=False),
        sa.Column('experience_level', experience_level, nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('currency', sa.String(10), nullable=False, server_default='USD'),
        sa.Column('salary_period', sa.String(20), nullable=False, server_default='YEARLY'),
        sa.Column('show_salary', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('application_deadline', sa.DateTime(), nullable=True),
        sa.Column('application_email', sa.String(255), nullable=True),
        sa.Column('application_url', sa.String(500), nullable=True),
        sa.Column('application_instructions', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('poster_id', GUID(), nullable=False),
        sa.Column('company_id', GUID(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['poster_id'], ['users.id']),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
    )
    op.create_index(op.f('ix_job_posts_slug'), 'job_posts', ['slug'], unique=True)
    op.create_index(op.f('ix_job_posts_is_active'), 'job_posts', ['is_active'], unique=False)
    op.create_index(op.f('ix_job_posts_poster_id'), 'job_posts', ['poster_id'], unique=False)
    op.create_index(op.f('ix_job_posts_company_id'), 'job_posts', ['company_id'], unique=False)
    op.create_index(op.f('ix_job_posts_created_at'), 'job_posts', ['created_at'], unique=False)

    op.create_table(
        'job_skills',
        sa.Column('job_post_id', GUID(), nullable=False),
        sa.Column('skill_id', GUID(), nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint('job_post_id', 'skill_id'),
        sa.ForeignKeyConstraint(['job_post_id'], ['job_posts.id']),
        sa.ForeignKeyConstraint(['skill_id'], ['skills.id']),
    )
    op.create_index('idx_job_skills_skill', 'job_skills', ['skill_id'], unique=False)

    op.create_table(
        'job_categories',
        sa.Column('job_post_id', GUID(), nullable=False),
        sa.Column('category_id', GUID(), nullable=False),
        sa.PrimaryKeyConstraint('job_post_id', 'category_id'),
        sa.ForeignKeyConstraint(['job_post_id'], ['job_posts.id']),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
    )

    op.create_table(
        'applications',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('job_post_id', GUID(), nullable=False),
        sa.Column('applicant_id', GUID(), nullable=False),
        sa.Column('status', application_status, nullable=False, server_default='PENDING'),
        sa.Column('recruiter_notes', sa.Text(), nullable=True),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('resume_url', sa.String(500), nullable=True),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['job_post_id'], ['job_posts.id']),
        sa.ForeignKeyConstraint(['applicant_id'], ['users.id']),
        sa.UniqueConstraint('job_post_id', 'applicant_id', name='uq_application_job_applicant'),
    )
    op.create_index('idx_applications_applicant', 'applications', ['applicant_id', 'applied_at'], unique=False)

    op.create_table(
        'saved_jobs',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('job_post_id', GUID(), nullable=False),
        sa.Column('saved_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['job_post_id'], ['job_posts.id']),
        sa.UniqueConstraint('user_id', 'job_post_id', name='uq_saved_job_user_job'),
    )
    op.create_index(op.f('ix_saved_jobs_user_id'), 'saved_jobs', ['user_id'], unique=False)

    op.create_table(
        'job_seeker_profiles',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('current_job_title', sa.String(255), nullable=True),
        sa.Column('is_open_to_work', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('years_of_experience', sa.Integer(), nullable=True),
        sa.Column('expected_salary_min', sa.Integer(), nullable=True),
        sa.Column('expected_salary_max', sa.Integer(), nullable=True),
        sa.Column('currency', sa.String(10), nullable=False, server_default='INR'),
        sa.Column('preferred_work_mode', work_mode, nullable=True),
        sa.Column('preferred_job_types', JSONList(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(50), nullable=True),
        sa.Column('languages_spoken', JSONList(), nullable=False),
        sa.Column('resume_url', sa.String(500), nullable=True),
        sa.Column('linkedin_url', sa.String(500), nullable=True),
        sa.Column('portfolio_url', sa.String(500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'job_seeker_skills',
        sa.Column('profile_id', GUID(), nullable=False),
        sa.Column('skill_id', GUID(), nullable=False),
        sa.Column('proficiency_level', sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint('profile_id', 'skill_id'),
        sa.ForeignKeyConstraint(['profile_id'], ['job_seeker_profiles.id']),
        sa.ForeignKeyConstraint(['skill_id'], ['skills.id']),
    )

    op.create_table(
        'educations',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('profile_id', GUID(), nullable=False),
        sa.Column('institution', sa.String(255), nullable=False),
        sa.Column('degree', sa.String(255), nullable=False),
        sa.Column('field_of_study', sa.String(255), nullable=True),
        sa.Column('level', education_level, nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_current', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('gpa', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['profile_id'], ['job_seeker_profiles.id']),
    )
    op.create_index(op.f('ix_educations_profile_id'), 'educations', ['profile_id'], unique=False)

    op.create_table(
        'experiences',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('profile_id', GUID(), nullable=False),
        sa.Column('job_title', sa.String(255), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_current', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['profile_id'], ['job_seeker_profiles.id']),
    )
    op.create_index(op.f('ix_experiences_profile_id'), 'experiences', ['profile_id'], unique=False)

    op.create_table(
        'job_poster_profiles',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('job_title', sa.String(255), nullable=False, server_default='Hiring Manager'),
        sa.Column('can_post_jobs', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('company_id', GUID(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
        sa.UniqueConstraint('user_id'),
    )


def downgrade() -> None:
    # Children before parents
    op.drop_table('job_poster_profiles')
    op.drop_index(op.f('ix_experiences_profile_id'), table_name='experiences')
    op.drop_table('experiences')
    op.drop_index(op.f('ix_educations_profile_id'), table_name='educations')
    op.drop_table('educations')
    op.drop_table('job_seeker_skills')
    op.drop_table('job_seeker_profiles')
    op.drop_index(op.f('ix_saved_jobs_user_id'), table_name='saved_jobs')
    op.drop_table('saved_jobs')
    op.drop_index('idx_applications_applicant', table_name='applications')
    op.drop_table('applications')
    op.drop_table('job_categories')
    op.drop_index('idx_job_skills_skill', table_name='job_skills')
    op.drop_table('job_skills')
    for index in ('created_at', 'company_id', 'poster_id', 'is_active', 'slug'):
        op.drop_index(op.f(f'ix_job_posts_{index}'), table_name='job_posts')
    op.drop_table('job_posts')
    op.drop_index(op.f('ix_categories_slug'), table_name='categories')
    op.drop_table('categories')
    op.drop_index(op.f('ix_skills_slug'), table_name='skills')
    op.drop_index(op.f('ix_skills_name'), table_name='skills')
    op.drop_table('skills')
    op.drop_index(op.f('ix_companies_slug'), table_name='companies')
    op.drop_index(op.f('ix_companies_name'), table_name='companies')
    op.drop_table('companies')
    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(bind, checkfirst=True)
