"""Column types shared by the document-style models."""
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.mutable import MutableList

# Embedded arrays (likes, comments, membership lists). JSONB on PostgreSQL,
# plain JSON elsewhere; in-place list mutations mark the row dirty.
JSONList = MutableList.as_mutable(JSON().with_variant(JSONB(), "postgresql"))
