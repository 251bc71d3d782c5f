"""create_funnel_tables

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('quizzes',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column('settings_json', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quizzes_slug', 'quizzes', ['slug'], unique=True)
    op.create_index('ix_quizzes_status', 'quizzes', ['status'])

    op.create_table('quiz_slides',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quiz_id', sa.String(64), nullable=False),
        sa.Column('slide_id', sa.String(64), nullable=False),
        sa.Column('slide_order', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('content_json', sa.Text(), nullable=True),
        sa.Column('conditional_logic_json', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('quiz_id', 'slide_id', name='uq_quiz_slide')
    )
    op.create_index('ix_quiz_slides_id', 'quiz_slides', ['id'])
    op.create_index('ix_quiz_slides_quiz_id', 'quiz_slides', ['quiz_id'])

    op.create_table('quiz_responses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quiz_id', sa.String(64), nullable=False),
        sa.Column('session_id', sa.String(128), nullable=False),
        sa.Column('answers_json', sa.Text(), nullable=True),
        sa.Column('current_slide', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('user_agent', sa.String(512), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('quiz_id', 'session_id', name='uq_quiz_session')
    )
    op.create_index('ix_quiz_responses_id', 'quiz_responses', ['id'])
    op.create_index('ix_quiz_responses_quiz_id', 'quiz_responses', ['quiz_id'])
    op.create_index('ix_quiz_responses_session_id', 'quiz_responses', ['session_id'])

    op.create_table('articles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(200), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('subtitle', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('author', sa.String(200), nullable=True),
        sa.Column('reviewer', sa.String(200), nullable=True),
        sa.Column('date', sa.String(64), nullable=True),
        sa.Column('image', sa.String(1000), nullable=True),
        sa.Column('cta_text', sa.String(200), nullable=True),
        sa.Column('cta_title', sa.String(500), nullable=True),
        sa.Column('cta_description', sa.Text(), nullable=True),
        sa.Column('cta_url', sa.String(1000), nullable=True),
        sa.Column('sticky_cta_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sticky_cta_text', sa.String(200), nullable=True),
        sa.Column('sticky_cta_price', sa.String(64), nullable=True),
        sa.Column('sticky_cta_original_price', sa.String(64), nullable=True),
        sa.Column('sticky_cta_product_name', sa.String(200), nullable=True),
        sa.Column('article_theme', sa.String(64), nullable=True),
        sa.Column('pixel_id', sa.String(64), nullable=True),
        sa.Column('key_takeaways_json', sa.Text(), nullable=True),
        sa.Column('comments_json', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_articles_id', 'articles', ['id'])
    op.create_index('ix_articles_slug', 'articles', ['slug'], unique=True)

    op.create_table('global_config',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('default_pixel_id', sa.String(64), nullable=True),
        sa.Column('default_cta_url', sa.String(1000), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('global_config')
    op.drop_index('ix_articles_slug', table_name='articles')
    op.drop_index('ix_articles_id', table_name='articles')
    op.drop_table('articles')
    op.drop_index('ix_quiz_responses_session_id', table_name='quiz_responses')
    op.drop_index('ix_quiz_responses_quiz_id', table_name='quiz_responses')
    op.drop_index('ix_quiz_responses_id', table_name='quiz_responses')
    op.drop_table('quiz_responses')
    op.drop_index('ix_quiz_slides_quiz_id', table_name='quiz_slides')
    op.drop_index('ix_quiz_slides_id', table_name='quiz_slides')
    op.drop_table('quiz_slides')
    op.drop_index('ix_quizzes_status', table_name='quizzes')
    op.drop_index('ix_quizzes_slug', table_name='quizzes')
    op.drop_table('quizzes')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
