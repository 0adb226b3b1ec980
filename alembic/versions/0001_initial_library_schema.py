"""initial library schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 10:12:41.118203
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'books',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('catalog_id', sa.String(100), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('authors', sa.JSON(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('cover_image_url', sa.String(1000), nullable=True),
        sa.Column('small_thumbnail_url', sa.String(1000), nullable=True),
        sa.Column('publisher', sa.String(255), nullable=True),
        sa.Column('publication_date', sa.Date(), nullable=True),
        sa.Column('page_count', sa.Integer(), nullable=True),
        sa.Column('language', sa.String(20), nullable=True),
        sa.Column('avg_rating', sa.Float(), nullable=True),
        sa.Column('ratings_count', sa.Integer(), nullable=True),
        sa.Column('preview_link', sa.String(1000), nullable=True),
        sa.Column('info_link', sa.String(1000), nullable=True),
        sa.Column('isbn', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_books_catalog_id', 'books', ['catalog_id'], unique=True)
    op.create_index('ix_books_isbn', 'books', ['isbn'])

    op.create_table(
        'genres',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
    )

    op.create_table(
        'books_genres',
        sa.Column('book_id', sa.Uuid(), sa.ForeignKey('books.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('genre_id', sa.Uuid(), sa.ForeignKey('genres.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'reviews',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('book_id', sa.Uuid(), sa.ForeignKey('books.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('review_text', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_reviews_rating_range'),
    )
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])
    op.create_index('ix_reviews_book_id', 'reviews', ['book_id'])
    op.create_index('ix_reviews_book_created', 'reviews', ['book_id', 'created_at'])
    op.create_index('ix_reviews_user_book', 'reviews', ['user_id', 'book_id'])

    shelftype = sa.Enum('want_to_read', 'currently_reading', 'read', name='shelftype')
    op.create_table(
        'bookshelves',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('book_id', sa.Uuid(), sa.ForeignKey('books.id', ondelete='CASCADE'), nullable=False),
        sa.Column('shelf_type', shelftype, nullable=False),
        sa.Column('date_added', sa.DateTime(timezone=True), nullable=False),
        sa.Column('date_started', sa.DateTime(timezone=True), nullable=True),
        sa.Column('date_finished', sa.DateTime(timezone=True), nullable=True),
        sa.Column('review_id', sa.Uuid(), sa.ForeignKey('reviews.id', ondelete='SET NULL'), nullable=True),
        sa.UniqueConstraint('user_id', 'book_id', name='uq_bookshelves_user_book'),
    )
    op.create_index('ix_bookshelves_user_id', 'bookshelves', ['user_id'])
    op.create_index('ix_bookshelves_book_id', 'bookshelves', ['book_id'])
    op.create_index('ix_bookshelves_user_shelf', 'bookshelves', ['user_id', 'shelf_type'])

    op.create_table(
        'profiles',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('profiles')
    op.drop_index('ix_bookshelves_user_shelf', table_name='bookshelves')
    op.drop_index('ix_bookshelves_book_id', table_name='bookshelves')
    op.drop_index('ix_bookshelves_user_id', table_name='bookshelves')
    op.drop_table('bookshelves')
    sa.Enum(name='shelftype').drop(op.get_bind(), checkfirst=True)
    op.drop_index('ix_reviews_user_book', table_name='reviews')
    op.drop_index('ix_reviews_book_created', table_name='reviews')
    op.drop_index('ix_reviews_book_id', table_name='reviews')
    op.drop_index('ix_reviews_user_id', table_name='reviews')
    op.drop_table('reviews')
    op.drop_table('books_genres')
    op.drop_table('genres')
    op.drop_index('ix_books_isbn', table_name='books')
    op.drop_index('ix_books_catalog_id', table_name='books')
    op.drop_table('books')
